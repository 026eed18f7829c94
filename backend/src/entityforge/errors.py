"""Error types raised by the entity core and generated handlers.

Request-time errors carry the HTTP status and machine-readable code they
are surfaced with. Registration-time errors are plain ``ValueError``s so
misconfigured applications fail at startup.
"""

from typing import Any


class EntityForgeError(Exception):
    """Base class for errors surfaced through a handler's result."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or []

    def to_dict(self) -> dict[str, Any]:
        """Response body in the same shape as validation failures."""
        errors = [
            {"message": self.message, "code": self.code, "severity": "error"}
        ]
        errors.extend(self.details)
        return {"valid": False, "errors": errors}


class RequestExtensionError(EntityForgeError):
    """The request-scoped hook extension could not be extracted."""

    status_code = 401
    code = "REQUEST_EXTENSION_REJECTED"


class InvalidIdError(EntityForgeError):
    """The ``{id}`` path segment does not parse into the entity's id type."""

    status_code = 400
    code = "INVALID_ID"


class EntityNotFoundError(EntityForgeError):
    """A well-formed id with no matching row."""

    status_code = 404
    code = "NOT_FOUND"


class InvalidPayloadError(EntityForgeError):
    """The request body does not deserialize into the entity."""

    status_code = 422
    code = "INVALID_PAYLOAD"


class HookRejectedError(EntityForgeError):
    """A lifecycle hook refused the operation."""

    status_code = 422
    code = "HOOK_ABORT"


class StorageError(EntityForgeError):
    """The storage layer failed. Never retried by the core."""

    status_code = 500
    code = "STORAGE_ERROR"


class EntityDefinitionError(ValueError):
    """An entity class declares an unusable schema."""


class RouteCollisionError(ValueError):
    """Two entities derive the same URL slug."""
