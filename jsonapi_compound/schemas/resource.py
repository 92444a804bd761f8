"""Pydantic schemas for JSON:API v1.1 create documents."""

from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import BaseModel


class JSONAPIResourceIdentifier(BaseModel):
    """Resource identifier object: type plus id or lid."""

    type: str
    id: Optional[str] = None
    lid: Optional[str] = None
    meta: Optional[Dict[str, Any]] = None

    @property
    def key(self) -> Tuple[str, Optional[str]]:
        """Correlation key used to match included resources."""
        return (self.type, self.lid)


class JSONAPIRelationship(BaseModel):
    """Relationship object holding to-one or to-many linkage."""

    data: Union[JSONAPIResourceIdentifier, List[JSONAPIResourceIdentifier], None] = None
    links: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None

    @property
    def is_to_many(self) -> bool:
        return isinstance(self.data, list)

    def identifiers(self) -> List[JSONAPIResourceIdentifier]:
        """Return the linkage as a list regardless of cardinality."""
        if self.data is None:
            return []
        if isinstance(self.data, list):
            return list(self.data)
        return [self.data]


class JSONAPIResource(BaseModel):
    """Resource object with attributes and relationships."""

    type: str
    id: Optional[str] = None
    lid: Optional[str] = None
    attributes: Optional[Dict[str, Any]] = None
    relationships: Optional[Dict[str, JSONAPIRelationship]] = None
    links: Optional[Dict[str, Any]] = None
    meta: Optional[Dict[str, Any]] = None

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "JSONAPIResource":
        """Build a resource object from a decoded resource member."""
        return cls.model_validate(dict(data))

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "JSONAPIResource":
        """Build a resource object from the ``data`` member of a document."""
        return cls.from_data(document["data"])

    def to_data(self) -> Dict[str, Any]:
        """Return the resource as a decoded member, keeping only set fields."""
        return self.model_dump(exclude_unset=True)

    def get_relationships(self) -> Dict[str, JSONAPIRelationship]:
        return dict(self.relationships or {})


class JSONAPIDocument(BaseModel):
    """Top-level JSON:API create document."""

    data: Optional[Any] = None
    included: Optional[List[JSONAPIResource]] = None
    meta: Optional[Dict[str, Any]] = None
    links: Optional[Dict[str, Any]] = None


class JSONAPIErrorDocument(BaseModel):
    """Top-level JSON:API error document."""

    errors: List[Dict[str, Any]]


ResourceIdentifier = JSONAPIResourceIdentifier
Relationship = JSONAPIRelationship
ResourceObject = JSONAPIResource
