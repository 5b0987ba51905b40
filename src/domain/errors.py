"""
Custom application-specific exceptions.
"""

class BaseAppException(Exception):
    """Base exception for the application."""
    pass

class QuizNotFoundError(BaseAppException):
    """Raised when no stored quiz matches the requested id."""
    pass

class InvalidQuizError(BaseAppException):
    """Raised when an uploaded document is not a valid quiz."""

    def __init__(self, message: str, details=None):
        super().__init__(message)
        self.details = details or []

class CorruptQuizError(BaseAppException):
    """Raised when a stored quiz file cannot be parsed."""
    pass

class StorageError(BaseAppException):
    """Raised when the storage root cannot be read or written."""
    pass

class QuizAlreadySubmittedError(BaseAppException):
    """Raised when an attempt is changed or submitted after submission."""
    pass

class IncompleteAttemptError(BaseAppException):
    """Raised when an attempt is submitted with unanswered questions."""
    pass
