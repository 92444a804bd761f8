"""Pydantic schemas for JSON:API."""

from .resource import (
    JSONAPIDocument,
    JSONAPIErrorDocument,
    JSONAPIRelationship,
    JSONAPIResource,
    JSONAPIResourceIdentifier,
    Relationship,
    ResourceIdentifier,
    ResourceObject,
)

__all__ = [
    "JSONAPIDocument",
    "JSONAPIErrorDocument",
    "JSONAPIRelationship",
    "JSONAPIResource",
    "JSONAPIResourceIdentifier",
    "Relationship",
    "ResourceIdentifier",
    "ResourceObject",
]
