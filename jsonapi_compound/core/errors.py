"""JSON:API validation errors, the error collector and error object rendering."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from jsonapi_compound.utils.pointer import join_path


class ErrorKind(str, enum.Enum):
    """Category of a document validation error."""

    STRUCTURAL = "structural"
    TYPE_MISMATCH = "type-mismatch"
    IDENTITY_CONFLICT = "identity-conflict"
    FIELD_CONFLICT = "field-conflict"
    COMPOUND_DOCUMENT = "compound-document"
    # Unmatched lid references; the resolver leaves them in place and never reports them.
    CORRELATION = "correlation"


MEMBER_REQUIRED = "member-required"
MEMBER_OBJECT_EXPECTED = "member-object-expected"
MEMBER_STRING_EXPECTED = "member-string-expected"
MEMBER_EMPTY = "member-empty"
MEMBER_RELATIONSHIP_EXPECTED = "member-relationship-expected"
MEMBER_IDENTIFIER_EXPECTED = "member-identifier-expected"
MEMBER_FIELD_NOT_ALLOWED = "member-field-not-allowed"
RESOURCE_TYPE_NOT_SUPPORTED = "resource-type-not-supported"
RESOURCE_CLIENT_IDS_NOT_SUPPORTED = "resource-client-ids-not-supported"
RESOURCE_EXISTS = "resource-exists"
RESOURCE_FIELD_EXISTS_IN_ATTRIBUTES_AND_RELATIONSHIPS = (
    "resource-field-exists-in-attributes-and-relationships"
)
INCLUDED_INVALID = "included-invalid"


@dataclass(frozen=True)
class ValidationError:
    """A single validation failure addressed by a JSON pointer."""

    pointer: str
    code: str
    detail: str
    kind: ErrorKind = ErrorKind.STRUCTURAL
    status: str = "400"
    title: str | None = None

    def to_error_object(self) -> dict[str, Any]:
        """Return this error as a JSON:API error object."""
        return JSONAPIErrorBuilder().error_object(
            status=self.status,
            code=self.code,
            title=self.title,
            detail=self.detail,
            source={"pointer": self.pointer},
        )


class JSONAPIError(Exception):
    """Base class for errors raised by this package."""


class InvalidArgumentError(JSONAPIError, ValueError):
    """A caller passed an argument that breaks the API contract."""


class UnknownResourceTypeError(JSONAPIError, LookupError):
    """No record adapter is registered for a resource type."""

    def __init__(self, resource_type: str) -> None:
        super().__init__(f"No adapter registered for resource type '{resource_type}'.")
        self.resource_type = resource_type


class DocumentValidationError(JSONAPIError):
    """Raised by the HTTP layer when a document fails validation."""

    def __init__(self, errors: Iterable[ValidationError]) -> None:
        self.errors = list(errors)
        super().__init__(f"Document failed validation with {len(self.errors)} error(s).")

    @property
    def status(self) -> int:
        """Shared HTTP status of the errors, or 400 when they differ."""
        statuses = {error.status for error in self.errors}
        if len(statuses) == 1:
            return int(statuses.pop())
        return 400


class ErrorCollector:
    """Accumulate validation errors for a single validation run."""

    def __init__(self) -> None:
        self._errors: list[ValidationError] = []

    def __len__(self) -> int:
        return len(self._errors)

    def __iter__(self) -> Iterator[ValidationError]:
        return iter(list(self._errors))

    def add(
        self,
        pointer: str,
        code: str,
        detail: str,
        *,
        kind: ErrorKind = ErrorKind.STRUCTURAL,
        status: str = "400",
        title: str | None = None,
    ) -> ValidationError:
        """Record an error and return it."""
        error = ValidationError(
            pointer=pointer, code=code, detail=detail, kind=kind, status=status, title=title
        )
        self._errors.append(error)
        return error

    def extend(self, errors: Iterable[ValidationError]) -> None:
        """Record errors produced elsewhere, keeping their order."""
        self._errors.extend(errors)

    def merge(self, other: "ErrorCollector") -> "ErrorCollector":
        """Append the errors of another collector to this one."""
        self.extend(other.all())
        return self

    def has_errors(self) -> bool:
        return bool(self._errors)

    def all(self) -> list[ValidationError]:
        """Return every collected error in the order it was recorded."""
        return list(self._errors)

    def member_required(self, path: str, member: str) -> ValidationError:
        return self.add(
            path,
            MEMBER_REQUIRED,
            f"The member {member} is required.",
            title="Required Member",
        )

    def member_not_object(self, path: str, member: str | int) -> ValidationError:
        return self.add(
            join_path(path, member),
            MEMBER_OBJECT_EXPECTED,
            f"The member {member} must be an object.",
            title="Object Expected",
        )

    def member_not_string(self, path: str, member: str) -> ValidationError:
        return self.add(
            join_path(path, member),
            MEMBER_STRING_EXPECTED,
            f"The member {member} must be a string.",
            title="String Expected",
        )

    def member_empty(self, path: str, member: str) -> ValidationError:
        return self.add(
            join_path(path, member),
            MEMBER_EMPTY,
            f"The member {member} cannot be empty.",
            title="Value Expected",
        )

    def member_not_relationship(self, path: str, member: str) -> ValidationError:
        return self.add(
            join_path(path, member),
            MEMBER_RELATIONSHIP_EXPECTED,
            f"The member {member} must be a resource identifier, an array of identifiers or null.",
            title="Relationship Expected",
        )

    def member_not_identifier(self, path: str, member: str | int) -> ValidationError:
        return self.add(
            join_path(path, member),
            MEMBER_IDENTIFIER_EXPECTED,
            "The member must be a resource identifier.",
            title="Identifier Expected",
        )

    def member_fields_not_allowed(
        self, path: str, member: str, fields: Iterable[str]
    ) -> list[ValidationError]:
        """Record one error per reserved field found inside ``member``."""
        return [
            self.add(
                join_path(path, member),
                MEMBER_FIELD_NOT_ALLOWED,
                f"The member {member} cannot have a {field} field.",
                kind=ErrorKind.FIELD_CONFLICT,
                title="Field Not Allowed",
            )
            for field in fields
        ]

    def resource_type_not_supported(self, path: str, resource_type: str) -> ValidationError:
        return self.add(
            join_path(path, "type"),
            RESOURCE_TYPE_NOT_SUPPORTED,
            f"Resource type {resource_type} is not supported by this endpoint.",
            kind=ErrorKind.TYPE_MISMATCH,
            status="409",
            title="Not Supported",
        )

    def resource_does_not_support_client_ids(
        self, path: str, resource_type: str
    ) -> ValidationError:
        return self.add(
            join_path(path, "id"),
            RESOURCE_CLIENT_IDS_NOT_SUPPORTED,
            f"Resource type {resource_type} does not support client-generated IDs.",
            kind=ErrorKind.IDENTITY_CONFLICT,
            status="403",
            title="Not Supported",
        )

    def resource_exists(self, path: str, resource_type: str, resource_id: str) -> ValidationError:
        return self.add(
            path,
            RESOURCE_EXISTS,
            f"Resource {resource_id} of type {resource_type} already exists.",
            kind=ErrorKind.IDENTITY_CONFLICT,
            status="409",
            title="Conflict",
        )

    def resource_fields_exist_in_attributes_and_relationships(
        self, path: str, fields: Iterable[str]
    ) -> list[ValidationError]:
        return [
            self.add(
                path,
                RESOURCE_FIELD_EXISTS_IN_ATTRIBUTES_AND_RELATIONSHIPS,
                f"The {field} field cannot exist as an attribute and a relationship.",
                kind=ErrorKind.FIELD_CONFLICT,
                title="Invalid Resource",
            )
            for field in fields
        ]

    def included_invalid(self, detail: str) -> ValidationError:
        return self.add(
            "/included",
            INCLUDED_INVALID,
            detail,
            kind=ErrorKind.COMPOUND_DOCUMENT,
            title="Invalid Included Resources",
        )


class JSONAPIErrorBuilder:
    """Build JSON:API error objects and error documents."""

    def error_object(
        self,
        *,
        status: str | None = None,
        code: str | None = None,
        title: str | None = None,
        detail: str | None = None,
        source: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API error object."""
        error: dict[str, Any] = {}
        if status is not None:
            error["status"] = status
        if code is not None:
            error["code"] = code
        if title is not None:
            error["title"] = title
        if detail is not None:
            error["detail"] = detail
        if source is not None:
            error["source"] = source
        if meta is not None:
            error["meta"] = meta
        if not error:
            raise ValueError("Error object must include at least one field.")
        return error

    def error_document(self, errors: list[dict[str, Any]]) -> dict[str, Any]:
        """Return a JSON:API document with an errors array."""
        return {"errors": errors}

    def error_document_from(self, errors: Iterable[ValidationError]) -> dict[str, Any]:
        """Return an error document for collected validation errors."""
        return self.error_document([error.to_error_object() for error in errors])
