"""Generic record tables router aggregation."""
from infoco.routers import records

ROUTERS = [records.router]
