"""Business operations outside the generic tables."""
from infoco.routers import assets, documents, hr, notifications, public, reports, settings

ROUTERS = [
    hr.router,
    assets.router,
    documents.router,
    documents.notes_router,
    notifications.router,
    settings.router,
    reports.router,
    public.router,
]
