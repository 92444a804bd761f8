"""Compliance checks for JSON:API v1.1 create-resource documents.

The validator reports every defect it can find in one pass. Only a missing
or malformed top-level ``data`` member stops validation early, because
there is no resource to check against. Documents may carry an ``included``
member with resources that the primary resource references by ``lid``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from jsonapi_compound.core.errors import ErrorCollector, InvalidArgumentError, ValidationError
from jsonapi_compound.included.adapters import Store
from jsonapi_compound.utils.pointer import MISSING, join_path, path_from_key, resolve_path

logger = logging.getLogger(__name__)

RESERVED_FIELDS = ("type", "id")

MemberCheck = Callable[[Any, str, str, ErrorCollector], bool]


@dataclass
class ValidationResult:
    """Outcome of validating one document."""

    errors: list[ValidationError] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def __bool__(self) -> bool:
        return self.valid


def check_string_member(value: Any, path: str, member: str, errors: ErrorCollector) -> bool:
    """Check a type, id or lid member is a non-empty string."""
    if not isinstance(value, str):
        errors.member_not_string(path, member)
        return False
    if not value.strip():
        errors.member_empty(path, member)
        return False
    return True


def check_object_fields(value: Any, path: str, member: str, errors: ErrorCollector) -> bool:
    """Check an attributes or relationships member is an object without reserved keys."""
    if not isinstance(value, dict):
        errors.member_not_object(path, member)
        return False
    disallowed = [name for name in RESERVED_FIELDS if name in value]
    errors.member_fields_not_allowed(path, member, disallowed)
    return not disallowed


# Members every included resource must declare, checked in this order.
INCLUDED_MEMBER_CHECKS: tuple[tuple[str, MemberCheck], ...] = (
    ("type", check_string_member),
    ("lid", check_string_member),
    ("attributes", check_object_fields),
)


class CreateResourceValidator:
    """Validate a decoded document that creates a resource of one type."""

    def __init__(
        self,
        expected_type: str,
        *,
        store: Store | None = None,
        client_ids: bool = False,
    ) -> None:
        if not isinstance(expected_type, str) or not expected_type:
            raise InvalidArgumentError("Expecting type to be a non-empty string.")
        self.expected_type = expected_type
        self.store = store
        self.client_ids = client_ids

    def supports_client_ids(self) -> bool:
        return self.client_ids

    def validate(self, document: Any) -> ValidationResult:
        """Run every check against ``document`` and return the collected errors."""
        errors = ErrorCollector()
        if self.validate_data(document, errors):
            self.validate_resource(document, errors)
        result = ValidationResult(errors.all())
        logger.debug(
            "Validated create document for '%s': %d error(s)",
            self.expected_type,
            len(result.errors),
        )
        return result

    def validate_data(self, document: Any, errors: ErrorCollector) -> bool:
        """Check the top-level ``data`` member exists and is an object."""
        data = resolve_path(document, "/data")
        if data is MISSING:
            errors.member_required("/", "data")
            return False
        if not isinstance(data, dict):
            errors.member_not_object("/", "data")
            return False
        return True

    def validate_resource(self, document: Mapping[str, Any], errors: ErrorCollector) -> bool:
        data = document["data"]
        identifier = self.validate_type_and_id(data, errors)
        attributes = self.validate_attributes(data, "/data", errors)
        relationships = self.validate_relationships(data, "/data", errors)
        included = self.validate_included(document, errors)

        if attributes and relationships:
            return self.validate_all_fields(data, errors) and identifier and included

        return identifier and attributes and relationships and included

    def validate_type_and_id(self, data: Mapping[str, Any], errors: ErrorCollector) -> bool:
        if not (self.validate_type(data, errors) and self.validate_id(data, errors)):
            return False

        resource_id = data.get("id")
        if resource_id is not None and self.store is not None:
            if self.store.exists(data["type"], resource_id):
                errors.resource_exists("/data", data["type"], resource_id)
                return False

        return True

    def validate_type(self, data: Mapping[str, Any], errors: ErrorCollector) -> bool:
        if "type" not in data:
            errors.member_required("/data", "type")
            return False

        value = data["type"]
        if not check_string_member(value, "/data", "type", errors):
            return False

        if value != self.expected_type:
            errors.resource_type_not_supported("/data", value)
            return False

        return True

    def validate_id(self, data: Mapping[str, Any], errors: ErrorCollector) -> bool:
        if "id" not in data:
            return True

        valid = check_string_member(data["id"], "/data", "id", errors)

        if not self.supports_client_ids():
            valid = False
            errors.resource_does_not_support_client_ids("/data", self.expected_type)

        return valid

    def validate_attributes(
        self, container: Mapping[str, Any], path: str, errors: ErrorCollector
    ) -> bool:
        attributes = container.get("attributes")
        if attributes is None:
            return True
        return check_object_fields(attributes, path, "attributes", errors)

    def validate_relationships(
        self, container: Mapping[str, Any], path: str, errors: ErrorCollector
    ) -> bool:
        """Validate the relationships member of the resource at ``path``."""
        relationships = container.get("relationships")
        if relationships is None:
            return True

        valid = check_object_fields(relationships, path, "relationships", errors)
        if not isinstance(relationships, dict):
            return False

        relationships_path = join_path(path, "relationships")
        for name, relation in relationships.items():
            if not self.validate_relationship(relation, name, relationships_path, errors):
                valid = False

        return valid

    def validate_relationship(
        self, relation: Any, name: str, path: str, errors: ErrorCollector
    ) -> bool:
        if not isinstance(relation, dict):
            errors.member_not_object(path, name)
            return False

        relation_path = join_path(path, name)
        if "data" not in relation:
            errors.member_required(relation_path, "data")
            return False

        linkage = relation["data"]
        data_path = join_path(relation_path, "data")
        if linkage is None:
            return True
        if isinstance(linkage, dict):
            return self.validate_identifier(linkage, data_path, errors)
        if isinstance(linkage, list):
            valid = True
            for index, identifier in enumerate(linkage):
                if not isinstance(identifier, dict):
                    errors.member_not_identifier(data_path, index)
                    valid = False
                elif not self.validate_identifier(
                    identifier, join_path(data_path, index), errors
                ):
                    valid = False
            return valid

        errors.member_not_relationship(relation_path, "data")
        return False

    def validate_identifier(
        self, identifier: Mapping[str, Any], path: str, errors: ErrorCollector
    ) -> bool:
        """Check a resource identifier carries a type and an id or lid."""
        if "type" in identifier:
            valid = check_string_member(identifier["type"], path, "type", errors)
        else:
            errors.member_required(path, "type")
            valid = False

        if "id" not in identifier and "lid" not in identifier:
            errors.member_required(path, "id")
            return False

        for member in ("id", "lid"):
            if member in identifier and not check_string_member(
                identifier[member], path, member, errors
            ):
                valid = False

        return valid

    def validate_included(self, document: Mapping[str, Any], errors: ErrorCollector) -> bool:
        if "included" not in document:
            return True

        included = document["included"]
        if not isinstance(included, list):
            errors.included_invalid("The member included must be an array.")
            return False
        if not included:
            errors.included_invalid("The member included cannot be empty.")
            return False

        valid = True
        for index, item in enumerate(included):
            path = path_from_key("included", index)
            if not isinstance(item, dict):
                errors.member_not_object("/included", index)
                valid = False
                continue
            required = self.validate_required_members(item, path, errors)
            relationships = self.validate_relationships(item, path, errors)
            if not required or not relationships:
                valid = False

        return valid

    def validate_required_members(
        self, item: Mapping[str, Any], path: str, errors: ErrorCollector
    ) -> bool:
        valid = True
        for member, check in INCLUDED_MEMBER_CHECKS:
            if member not in item:
                errors.member_required(path, member)
                valid = False
                continue
            if not check(item[member], path, member, errors):
                valid = False
        return valid

    def validate_all_fields(self, data: Mapping[str, Any], errors: ErrorCollector) -> bool:
        """Check no field name is both an attribute and a relationship."""
        attributes = data.get("attributes") or {}
        relationships = data.get("relationships") or {}
        duplicates = [name for name in attributes if name in relationships]

        errors.resource_fields_exist_in_attributes_and_relationships("/data", duplicates)

        return not duplicates


def validate_create_document(
    document: Any,
    expected_type: str,
    client_ids_supported: bool = False,
    store: Store | None = None,
) -> ValidationResult:
    """Validate ``document`` as a request to create an ``expected_type`` resource."""
    validator = CreateResourceValidator(
        expected_type, store=store, client_ids=client_ids_supported
    )
    return validator.validate(document)
