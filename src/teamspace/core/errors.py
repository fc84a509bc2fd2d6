"""Typed provisioning failures.

Every error carries a caller-facing message and the HTTP status the API layer
maps it to. Messages must not include internal identifiers.
"""

from fastapi import status


class ProvisioningError(Exception):
    """Base class for user-surfaceable provisioning failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    default_message: str = "Request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    @property
    def code(self) -> str:
        """Stable machine-readable error name."""
        return type(self).__name__


class ValidationError(ProvisioningError):
    status_code = 422
    default_message = "Invalid request"


class QuotaExceeded(ProvisioningError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Role quota exceeded for this business"


class InvalidInvitation(ProvisioningError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid invitation"


class InvitationExpired(ProvisioningError):
    status_code = status.HTTP_410_GONE
    default_message = "Invitation has expired"


class InvitationAlreadyConsumed(ProvisioningError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Invitation has already been accepted"


class PermissionDenied(ProvisioningError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have permission to perform this action"


class AlreadyProcessed(ProvisioningError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "This request has already been processed"


class NotFound(ProvisioningError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class InvalidCredentials(ProvisioningError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid credentials"
