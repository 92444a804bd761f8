"""SQLAlchemy record adapters and store for JSON:API create requests."""

from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy.inspection import inspect
from sqlalchemy.orm import Session

from jsonapi_compound.included.adapters import AdapterRegistry, RecordAdapter, Store
from jsonapi_compound.schemas.resource import JSONAPIResource

logger = logging.getLogger(__name__)


class SQLAlchemyRecordAdapter(RecordAdapter):
    """Build and fill SQLAlchemy model instances from resource objects."""

    def __init__(self, *, model: Any, type_: str, fields: list[str] | None = None) -> None:
        self.model = model
        self.type_ = type_
        self.fields = fields or []

    def create_record(self, draft: JSONAPIResource) -> Any:
        return self.model()

    def fill(self, record: Any, draft: JSONAPIResource, context: Any = None) -> None:
        """Set attributes and to-one relationship ids on the record."""
        for key, value in (draft.attributes or {}).items():
            if not self._allows(key):
                logger.debug("Ignoring unknown attribute '%s' for '%s'", key, self.type_)
                continue
            setattr(record, key, value)
        for key, value in self._relationship_ids(draft).items():
            setattr(record, key, value)

    def serialize(self, record: Any) -> dict[str, Any]:
        """Return a resource object for a saved record."""
        mapper = inspect(self.model)
        foreign_keys = {f"{relationship.key}_id" for relationship in mapper.relationships}
        attributes = {
            column.key: getattr(record, column.key)
            for column in mapper.column_attrs
            if column.key != "id"
            and column.key not in foreign_keys
            and (not self.fields or column.key in self.fields)
        }
        resource: dict[str, Any] = {"type": self.type_, "id": self.get_id(record)}
        if attributes:
            resource["attributes"] = attributes

        relationships: dict[str, Any] = {}
        for relationship in mapper.relationships:
            attr_name = f"{relationship.key}_id"
            if relationship.uselist or attr_name not in mapper.column_attrs:
                continue
            value = getattr(record, attr_name)
            relationships[relationship.key] = {
                "data": None
                if value is None
                else {"type": relationship.mapper.class_.__tablename__, "id": str(value)}
            }
        if relationships:
            resource["relationships"] = relationships
        return resource

    def get_id(self, record: Any) -> str:
        value = getattr(record, "id", None)
        return "" if value is None else str(value)

    def coerce(self, attr_name: str, value: Any) -> Any:
        """Convert a string id to the Python type of the mapped column."""
        column = inspect(self.model).columns.get(attr_name)
        if column is None or value is None:
            return value
        try:
            python_type = column.type.python_type
        except NotImplementedError:
            return value
        if isinstance(value, python_type):
            return value
        try:
            return python_type(value)
        except (TypeError, ValueError):
            return value

    def _allows(self, key: str) -> bool:
        if self.fields:
            return key in self.fields
        return key != "id" and not key.startswith("_") and hasattr(self.model, key)

    def _relationship_ids(self, draft: JSONAPIResource) -> dict[str, Any]:
        relationship_ids: dict[str, Any] = {}
        for name, relationship in draft.get_relationships().items():
            if relationship.is_to_many or relationship.data is None:
                continue
            rel_id = relationship.data.id
            if rel_id is None:
                continue
            attr_name = f"{name}_id"
            if hasattr(self.model, attr_name):
                relationship_ids[attr_name] = self.coerce(attr_name, rel_id)
        return relationship_ids


class SQLAlchemyDataLayer(Store):
    """Bridge JSON:API create requests with SQLAlchemy models."""

    def __init__(
        self,
        *,
        session: Session,
        adapters: Iterable[SQLAlchemyRecordAdapter],
    ) -> None:
        """Store the SQLAlchemy session and the adapters per resource type."""
        self.session = session
        self.registry = AdapterRegistry(adapters)

    def _commit(self) -> None:
        self.session.commit()

    def _refresh(self, instance: Any) -> None:
        self.session.refresh(instance)

    def adapter_for(self, resource_type: str) -> SQLAlchemyRecordAdapter:
        return self.registry.adapter_for(resource_type)  # type: ignore[return-value]

    def supports(self, resource_type: str) -> bool:
        return resource_type in self.registry

    def exists(self, resource_type: str, resource_id: str) -> bool:
        adapter = self.adapter_for(resource_type)
        return self.session.get(adapter.model, adapter.coerce("id", resource_id)) is not None

    def save(self, record: Any) -> str | None:
        """Persist a record and return its id as a string."""
        self.session.add(record)
        self._commit()
        self._refresh(record)
        value = getattr(record, "id", None)
        return None if value is None else str(value)

    def create(self, resource: JSONAPIResource, context: Any = None) -> Any:
        """Create, persist and return the record for the primary resource."""
        adapter = self.adapter_for(resource.type)
        record = adapter.create_record(resource)
        if resource.id is not None:
            record.id = adapter.coerce("id", resource.id)
        adapter.fill(record, resource, context)
        self.save(record)
        logger.info("Created '%s' resource with id '%s'", resource.type, adapter.get_id(record))
        return record
