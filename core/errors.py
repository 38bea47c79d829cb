# core/errors.py
from typing import Any, List, Optional


class LibraryError(Exception):
    """Base class for every business-rule failure raised by the services."""

    status_code = 400

    def __init__(self, message: str, details: Optional[List[Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(LibraryError):
    """Input is malformed or out of range."""


class NotFound(LibraryError):
    """Referenced book, user or loan does not exist."""

    status_code = 404


class Conflict(LibraryError):
    """Uniqueness clash, or a delete blocked by active loans."""


class InvalidState(LibraryError):
    """Entity is not in a state that allows the operation."""


class Unavailable(LibraryError):
    """No copies of the book are left to lend."""


class DuplicateLoan(LibraryError):
    """The user already has an active loan for this book."""


class RenewalLimitReached(LibraryError):
    """The loan has been renewed as many times as it allows."""
