"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Lookups of absent notes are not exceptional inside the engine; they
return None/False. NotFoundError is for callers that address a note
explicitly (the CLI).
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a note cannot be found."""

    def __init__(self, message: str = "Note not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ExternalServiceError(ApplicationError):
    """Raised when an external collaborator call fails."""

    def __init__(
        self,
        message: str = "External service error",
        code: str = "SYS_EXTERNAL_SERVICE_ERROR",
    ) -> None:
        super().__init__(message, code=code)


class RetrievalError(ExternalServiceError):
    """Raised when the text-retrieval collaborator fails or returns junk."""

    def __init__(self, message: str = "Failed to fetch quote") -> None:
        super().__init__(message, code="EXT_RETRIEVAL_FAILED")


class PersistenceError(ApplicationError):
    """Raised when the note store cannot be read or written."""

    def __init__(self, message: str = "Persistence error") -> None:
        super().__init__(message, code="SYS_PERSISTENCE_ERROR")
