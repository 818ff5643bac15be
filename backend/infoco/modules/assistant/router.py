"""AI analysis and news router aggregation."""
from infoco.routers import ai

ROUTERS = [ai.router]
