from src.core.utils.exceptions import AppError


class ReminderError(AppError):
    """Base exception for the reminder engine."""

    pass


class ReminderBackendError(ReminderError):
    """Raised when the reminder backend fails or times out."""

    pass


class SchedulingError(ReminderBackendError):
    """Raised when the backend rejects a trigger."""

    pass


class PermissionDeniedError(SchedulingError):
    """Raised when notifications are not permitted on this device."""

    pass


class StaleReferenceError(ReminderBackendError):
    """Raised when a backend id is no longer known. Cancelling it is a success."""

    def __init__(self, backend_id: str, message: str = "Unknown reminder id"):
        self.backend_id = backend_id
        super().__init__(f"{message}: {backend_id}")


class PersistenceError(ReminderError):
    """Raised when the reminder map cannot be read from or written to the store."""

    def __init__(self, message: str = "Reminder map persistence failed", attempts: int = 1):
        self.attempts = attempts
        super().__init__(message)
