"""
Error taxonomy for the ambassador core services.

Service layer raises these; the API layer maps them to HTTP statuses.
"""


class AmbassadorServiceError(Exception):
    """Base exception for core service operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(AmbassadorServiceError):
    """Referenced user or contact id does not exist."""

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource.capitalize()} not found: {resource_id}")
        self.resource = resource
        self.resource_id = resource_id


class InvalidSubmissionError(AmbassadorServiceError):
    """Required fields missing or out of range."""


class PendingLimitExceededError(InvalidSubmissionError):
    """Submitter already holds the maximum number of pending contacts."""

    def __init__(self, user_id: str, limit: int):
        super().__init__(f"User {user_id} already has {limit} pending contacts")
        self.user_id = user_id
        self.limit = limit


class InvalidStateTransitionError(AmbassadorServiceError):
    """Contact is not in a state that allows the requested transition."""

    def __init__(self, contact_id: str, current_status: str, requested_status: str):
        super().__init__(
            f"Contact {contact_id} is already {current_status}; cannot move to {requested_status}"
        )
        self.contact_id = contact_id
        self.current_status = current_status
        self.requested_status = requested_status


class PermissionDeniedError(AmbassadorServiceError):
    """Caller lacks the role required for the operation."""
