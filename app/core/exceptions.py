"""Custom exception hierarchy."""


class AppError(Exception):
    """Base exception for application errors."""
    status_code = 500

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class APIClientError(AppError):
    """Raised when an external API call fails."""
    pass


class APITimeoutError(APIClientError):
    """Raised when an external API call times out."""
    pass


class StorageError(AppError):
    """Raised when the object store rejects a request."""
    pass


class DatabaseError(AppError):
    """Raised when a database operation fails."""
    pass


class ConfigurationError(AppError):
    """Raised when configuration is invalid or missing."""
    pass


class ValidationError(AppError):
    """Raised when input validation fails."""
    status_code = 400


class PermissionDeniedError(AppError):
    """Raised when the caller may not act on a resource."""
    status_code = 403


class NotFoundError(AppError):
    """Raised when a requested entity does not exist."""
    status_code = 404


class DocumentNotFoundError(NotFoundError):
    """Raised when a document is not found."""
    pass


class ConflictError(AppError):
    """Raised when a create would duplicate an existing record."""
    status_code = 409
