class AppError(Exception):
    """Base exception for application errors."""

    pass


class NotFoundError(AppError):
    """Raised when a required record does not exist."""

    pass
