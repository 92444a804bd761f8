"""JSON:API document construction for create responses."""

from typing import Any, Iterable, Mapping

from jsonapi_compound.core.errors import JSONAPIErrorBuilder, ValidationError


class JSONAPIDocumentBuilder:
    """Build JSON:API v1.1 documents from serialized data."""

    error_builder_class: type = JSONAPIErrorBuilder

    def build_single(
        self,
        resource: Mapping[str, Any],
        *,
        included: Iterable[Mapping[str, Any]] | None = None,
        links: Mapping[str, Any] | None = None,
        meta: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API document for a single resource object."""
        document: dict[str, Any] = {"data": dict(resource)}
        if included:
            document["included"] = [dict(item) for item in included]
        if links:
            document["links"] = dict(links)
        if meta:
            document["meta"] = dict(meta)
        return document

    def build_error(self, errors: Iterable[ValidationError]) -> dict[str, Any]:
        """Return a JSON:API error document for validation errors."""
        return self.error_builder_class().error_document_from(errors)
