"""JSON:API v1.1 create-with-included support for FastAPI."""

from .core.document import JSONAPIDocumentBuilder
from .core.errors import DocumentValidationError, ErrorCollector, JSONAPIErrorBuilder, ValidationError
from .included.resolver import IncludedResourceResolver, resolve_included
from .routers.base import JSONAPIRouter
from .validation.create_resource import CreateResourceValidator, validate_create_document
from .viewsets.base import JSONAPIViewSet

__all__ = [
    "CreateResourceValidator",
    "DocumentValidationError",
    "ErrorCollector",
    "IncludedResourceResolver",
    "JSONAPIDocumentBuilder",
    "JSONAPIErrorBuilder",
    "JSONAPIRouter",
    "JSONAPIViewSet",
    "ValidationError",
    "resolve_included",
    "validate_create_document",
]
