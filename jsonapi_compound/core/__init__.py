"""Core JSON:API document and error helpers."""

from .document import JSONAPIDocumentBuilder
from .errors import (
    DocumentValidationError,
    ErrorCollector,
    ErrorKind,
    InvalidArgumentError,
    JSONAPIError,
    JSONAPIErrorBuilder,
    UnknownResourceTypeError,
    ValidationError,
)

__all__ = [
    "DocumentValidationError",
    "ErrorCollector",
    "ErrorKind",
    "InvalidArgumentError",
    "JSONAPIDocumentBuilder",
    "JSONAPIError",
    "JSONAPIErrorBuilder",
    "UnknownResourceTypeError",
    "ValidationError",
]
