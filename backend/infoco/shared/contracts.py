"""Backend-side API contract constants.

Keep externally visible prefixes centralized for drift control.
"""

API_PREFIXES = {
    "auth": "/api/auth",
    "permissions": "/api/permissions",
    "navigation": "/api/navigation",
    "records": "/api/records",
    "hr": "/api/hr",
    "assets": "/api/assets",
    "documents": "/api/documents",
    "payment_notes": "/api/payment-notes",
    "notifications": "/api/notifications",
    "settings": "/api/settings",
    "reports": "/api/reports",
    "ai": "/api",
    "public": "/api/public",
}
