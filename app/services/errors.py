# app/services/errors.py
"""
Error taxonomy for the exit workflow.
Every error carries a stable `code` and the HTTP status the API maps it to.
NotificationDeliveryFailure is never raised to callers; it is only logged.
"""

from typing import Optional


class WorkflowError(Exception):
    code = "WORKFLOW_ERROR"
    status_code = 400

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.code
        super().__init__(self.detail)


class NotFoundError(WorkflowError):
    code = "NOT_FOUND"
    status_code = 404


class EntryValidationError(WorkflowError):
    code = "VALIDATION_ERROR"
    status_code = 400


class DuplicateEntryError(EntryValidationError):
    code = "ALREADY_INSIDE"


class ConflictError(WorkflowError):
    code = "CONFLICT"
    status_code = 409


class UserInUseError(ConflictError):
    code = "USER_IN_USE"


class InvalidTransitionError(WorkflowError):
    code = "INVALID_TRANSITION"
    status_code = 409


class AlreadyRequestedError(InvalidTransitionError):
    code = "ALREADY_REQUESTED"


class NotRequestedError(InvalidTransitionError):
    code = "NOT_REQUESTED"


class AlreadyApprovedError(InvalidTransitionError):
    code = "ALREADY_APPROVED"


class NotApprovedError(InvalidTransitionError):
    code = "NOT_APPROVED"


class AlreadyExitedError(InvalidTransitionError):
    code = "ALREADY_EXITED"


class NotificationDeliveryFailure(Exception):
    """Wraps a dispatch error for logging. Never changes a transition's outcome."""

    def __init__(self, channel: str, cause: Exception):
        self.channel = channel
        self.cause = cause
        super().__init__(f"delivery to '{channel}' failed: {cause}")
