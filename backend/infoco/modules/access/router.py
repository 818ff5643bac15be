"""Identity, permission matrix and navigation router aggregation."""
from infoco.routers import auth, navigation, permissions

ROUTERS = [auth.router, permissions.router, navigation.router]
