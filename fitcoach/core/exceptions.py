"""Domain error taxonomy.

Every failure path in the service layer raises one of these. The HTTP layer
renders them with a single exception handler (see ``fitcoach.main``), so
routers never translate them one by one.
"""


class DomainError(Exception):
    """Base class for all domain errors."""

    status_code: int = 400
    code: str = "domain_error"
    default_message: str = "Request could not be completed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


# Not found

class NotFoundError(DomainError):
    """Entity is absent."""

    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class ClientNotFoundError(NotFoundError):
    code = "client_not_found"
    default_message = "Client user not found"


class UploadMissingError(NotFoundError):
    """No upload has been linked to the assignment yet."""

    code = "upload_missing"
    default_message = "No upload found for this assignment"


# Access control

class AccessDeniedError(DomainError):
    """Entity exists but the actor does not own it."""

    status_code = 403
    code = "access_denied"
    default_message = "Access denied"


class ClientNotManagedError(AccessDeniedError):
    code = "client_not_managed"
    default_message = "Client is not managed by this trainer"


class NotBelongToClientError(AccessDeniedError):
    code = "not_belong_to_client"
    default_message = "This resource does not belong to the client"


# Validation

class ValidationFailedError(DomainError):
    """Malformed or missing input."""

    status_code = 422
    code = "validation_failed"
    default_message = "Validation failed"


class WrongRoleError(ValidationFailedError):
    code = "wrong_role"
    default_message = "User does not have the required role"


class ParentageChangeError(ValidationFailedError):
    code = "parentage_change"
    default_message = "Parent linkage cannot be changed by an update"


# State

class AlreadyAssignedError(DomainError):
    status_code = 409
    code = "already_assigned"
    default_message = "Client is already assigned to a trainer"


class DuplicateEmailError(DomainError):
    status_code = 409
    code = "duplicate_email"
    default_message = "Email already registered"


class InvalidTransitionError(DomainError):
    """Status change not permitted for this actor/target."""

    status_code = 409
    code = "invalid_transition"
    default_message = "Invalid status transition for assignment"


class UploadNotAllowedError(DomainError):
    status_code = 409
    code = "upload_not_allowed"
    default_message = "Upload is not allowed for this assignment status"


# Failures

class ConfirmationFailedError(DomainError):
    """Upload confirmation failed, possibly after compensation."""

    status_code = 500
    code = "confirmation_failed"
    default_message = "Failed to confirm upload"


class DataConsistencyError(DomainError):
    """A child references a parent that cannot be resolved."""

    status_code = 500
    code = "data_consistency_fault"
    default_message = "Stored data is inconsistent"


class GatewayError(DomainError):
    """Entity Store or Object Storage reported an unrecoverable error."""

    status_code = 502
    code = "gateway_failure"
    default_message = "Upstream gateway failure"
