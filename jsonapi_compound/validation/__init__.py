"""Document validation for JSON:API create requests."""

from .create_resource import (
    CreateResourceValidator,
    ValidationResult,
    validate_create_document,
)

__all__ = ["CreateResourceValidator", "ValidationResult", "validate_create_document"]
