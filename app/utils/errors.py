"""Error taxonomy shared by services and the HTTP layer.

Every error carries a stable ``code``; the API renders it as
``{"error": message, "code": code}`` plus ``field`` for input errors that
point at one parameter.
"""

from __future__ import annotations

from typing import Any


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, code: str, status_code: int = 400) -> None:
        self.message = message
        self.code = code
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.message, "code": self.code}


class NotFoundError(AppError):
    """A referenced community, event, track, user or membership is missing."""

    def __init__(self, resource: str) -> None:
        super().__init__(f"{resource} not found", "NOT_FOUND", 404)


class ForbiddenError(AppError):
    """Role, ban or guest restrictions forbid the action."""

    def __init__(self, reason: str = "You don't have permission") -> None:
        super().__init__(reason, "FORBIDDEN", 403)


class ConflictError(AppError):
    """The action is invalid for the current state, or lost a race."""

    def __init__(self, reason: str, code: str = "CONFLICT") -> None:
        super().__init__(reason, code, 409)


class UnauthorizedError(AppError):
    """Missing, invalid or expired credentials."""

    def __init__(self, reason: str = "Unauthorized") -> None:
        super().__init__(reason, "UNAUTHORIZED", 401)


class InvalidInputError(AppError):
    """Malformed identifiers, pagination or payload values."""

    def __init__(self, reason: str, field: str | None = None) -> None:
        self.field = field
        super().__init__(reason, "INVALID_INPUT", 422)

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        if self.field:
            payload["field"] = self.field
        return payload


class StorageError(AppError):
    """The record store failed for a reason the caller cannot fix."""

    def __init__(self, reason: str = "Database request failed") -> None:
        super().__init__(reason, "STORAGE_ERROR", 500)
