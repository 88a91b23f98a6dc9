"""
Domain exceptions for the contact book.

Every failure carries an ErrorKind and a detail payload. The API layer maps
the kind to an HTTP status in one table (see ERROR_STATUS) instead of
switching on exception classes.
"""
from enum import Enum
from typing import Any

from fastapi import status


class ErrorKind(str, Enum):
    """Machine-readable error kinds returned to API clients."""
    EMPTY_FILE = "CSV_EMPTY"
    MISSING_HEADERS = "CSV_MISSING_HEADERS"
    CSV_VALIDATION = "CSV_VALIDATION_ERROR"
    MALFORMED_INPUT = "CSV_PARSE_ERROR"
    FILE_NOT_PROVIDED = "FILE_NOT_PROVIDED"
    INVALID_FILE_TYPE = "INVALID_FILE_TYPE"
    FILE_TOO_LARGE = "FILE_TOO_LARGE"
    NOT_FOUND = "NOT_FOUND"
    FORBIDDEN = "FORBIDDEN"


ERROR_STATUS: dict[ErrorKind, int] = {
    ErrorKind.EMPTY_FILE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MISSING_HEADERS: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CSV_VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.MALFORMED_INPUT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FILE_NOT_PROVIDED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_FILE_TYPE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.FILE_TOO_LARGE: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
}


class ContactsError(Exception):
    """Base error: a kind, a human-readable message and an optional payload."""

    def __init__(self, kind: ErrorKind, message: str, details: Any = None):
        self.kind = kind
        self.message = message
        self.details = details
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return ERROR_STATUS[self.kind]

    def to_dict(self) -> dict:
        body: dict[str, Any] = {"error": self.kind.value, "message": self.message}
        if self.details is not None:
            body["details"] = self.details
        return body


class EmptyFileError(ContactsError):
    def __init__(self, message: str = "The CSV file contains no data rows"):
        super().__init__(ErrorKind.EMPTY_FILE, message)


class MissingHeadersError(ContactsError):
    def __init__(self, missing_headers: list[str]):
        self.missing_headers = list(missing_headers)
        super().__init__(
            ErrorKind.MISSING_HEADERS,
            f"The CSV file is missing required headers: {', '.join(self.missing_headers)}",
            {"missing_headers": self.missing_headers},
        )


class CSVValidationError(ContactsError):
    """Raised with every row error when any row of the file fails validation."""

    def __init__(self, errors: list):
        self.errors = list(errors)
        super().__init__(
            ErrorKind.CSV_VALIDATION,
            "The CSV file contains validation errors",
            {"errors": [error.model_dump() for error in self.errors]},
        )


class MalformedInputError(ContactsError):
    def __init__(self, message: str = "The CSV file could not be read"):
        super().__init__(ErrorKind.MALFORMED_INPUT, message)


class FileNotProvidedError(ContactsError):
    def __init__(self, message: str = "No file was provided"):
        super().__init__(ErrorKind.FILE_NOT_PROVIDED, message)


class InvalidFileTypeError(ContactsError):
    def __init__(self, message: str = "Only CSV files are allowed"):
        super().__init__(ErrorKind.INVALID_FILE_TYPE, message)


class FileTooLargeError(ContactsError):
    def __init__(self, max_bytes: int):
        super().__init__(
            ErrorKind.FILE_TOO_LARGE,
            f"The file is too large. Maximum size: {max_bytes // (1024 * 1024)}MB",
            {"max_bytes": max_bytes},
        )


class NotFoundError(ContactsError):
    def __init__(self, resource: str, identifier: Any = None):
        message = f"{resource} not found"
        if identifier is not None:
            message = f"{resource} with id '{identifier}' not found"
        super().__init__(ErrorKind.NOT_FOUND, message)


class ForbiddenError(ContactsError):
    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(ErrorKind.FORBIDDEN, message)
