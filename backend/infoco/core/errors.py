"""Error taxonomy shared by the core components.

Core operations raise these synchronously; routers translate them into HTTP
responses at the call site. None of them is retried automatically.
"""
from __future__ import annotations

from typing import Iterable


class InfocoError(Exception):
    """Base class for every error raised by the core."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class AuthenticationError(InfocoError):
    """Credential mismatch. Never says whether the email or the password was wrong."""

    DEFAULT_MESSAGE = "Login falhou. Verifique se o e-mail e a senha estão corretos."

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.DEFAULT_MESSAGE)


class ValidationError(InfocoError):
    """Required fields missing or invalid on submit. Nothing was persisted."""

    def __init__(self, fields: Iterable[str], message: str | None = None) -> None:
        self.fields = sorted(set(fields))
        super().__init__(message or f"Campos obrigatórios inválidos: {', '.join(self.fields)}")


class NotFoundError(InfocoError):
    def __init__(self, collection: str, record_id: object) -> None:
        self.collection = collection
        self.record_id = record_id
        super().__init__(f"{collection} record {record_id} not found")


class CapabilityLockedError(InfocoError):
    """Attempt to edit a capability cell that is fixed for every caller."""

    def __init__(self, role: str, capability: str) -> None:
        self.role = role
        self.capability = capability
        super().__init__(f"Capability {capability} is locked for role {role}")


class ExternalServiceError(InfocoError):
    """Failure reported by the analysis or news collaborators.

    ``status_code`` carries the category: 400 bad input, 401 bad credential,
    500 generic, 504 timeout.
    """

    def __init__(self, message: str, status_code: int = 500) -> None:
        super().__init__(message)
        self.status_code = status_code
