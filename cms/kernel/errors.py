"""
Typed errors for the content lifecycle and settings core.

Every error carries:
- ``code``: stable, machine-readable identifier returned to API clients
- ``http_status``: status the transport layer answers with
- ``public_message``: text that is safe to show to untrusted callers

The constructor message is the diagnostic detail. It is logged, never
returned verbatim in API responses.

    CoreError
    +-- UnauthenticatedError   401
    +-- ForbiddenError         403
    +-- InvalidStatusError     400
    +-- IllegalTransitionError 409
    +-- NotFoundError          404
    +-- ValidationError        400
    +-- StorageError           500
"""

from typing import Any, Dict, Optional


class CoreError(Exception):
    """Base class for all errors raised by the core."""

    code: str = "core_error"
    http_status: int = 500
    public_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, **context: Any):
        self.message = message or self.public_message
        self.context: Dict[str, Any] = context
        super().__init__(self.message)

    def to_payload(self) -> Dict[str, Any]:
        """Body sent to API clients."""
        return {"error": self.public_message, "code": self.code}


class UnauthenticatedError(CoreError):
    """No resolvable actor for the request."""

    code = "unauthenticated"
    http_status = 401
    public_message = "Unauthorized"


class ForbiddenError(CoreError):
    """The actor's role lacks the capability for this action."""

    code = "forbidden"
    http_status = 403
    public_message = "You do not have permission to perform this action"


class InvalidStatusError(CoreError):
    """Requested status is not a member of the kind's status set."""

    code = "invalid_status"
    http_status = 400
    public_message = "Invalid status"


class IllegalTransitionError(CoreError):
    """No edge from the current status to the requested one."""

    code = "illegal_transition"
    http_status = 409
    public_message = "Status transition not allowed from the current status"


class NotFoundError(CoreError):
    """Entity id could not be resolved."""

    code = "not_found"
    http_status = 404
    public_message = "Not found"

    def __init__(self, resource_type: str, resource_id: Any):
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(f"{resource_type} {resource_id} not found")

    def to_payload(self) -> Dict[str, Any]:
        label = self.resource_type.replace("_", " ").capitalize()
        return {"error": f"{label} not found", "code": self.code}


class ValidationError(CoreError):
    """Malformed input."""

    code = "validation_error"
    http_status = 400
    public_message = "Validation error"

    def to_payload(self) -> Dict[str, Any]:
        # Validation details describe the caller's own input, so they are safe to return
        return {"error": self.message, "code": self.code}


class StorageError(CoreError):
    """Persistent store I/O failed. Not retried by the core."""

    code = "storage_error"
    http_status = 500
    public_message = "Internal server error"
