"""Record adapter and store hooks consumed by validation and include resolution."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Mapping

from jsonapi_compound.core.errors import UnknownResourceTypeError
from jsonapi_compound.schemas.resource import JSONAPIResource


class RecordAdapter:
    """Turn a resource object into a domain record for one resource type."""

    type_: str = ""

    def deserialize(self, element: Mapping[str, Any]) -> JSONAPIResource:
        """Return the draft resource object for a decoded resource member."""
        return JSONAPIResource.from_data(element)

    def create_record(self, draft: JSONAPIResource) -> Any:
        """Return a new, unsaved record for the draft."""
        raise NotImplementedError

    def fill(self, record: Any, draft: JSONAPIResource, context: Any = None) -> None:
        """Copy attributes and relationships from the draft onto the record."""
        raise NotImplementedError


class Store:
    """Define the persistence hooks used while creating resources."""

    def exists(self, resource_type: str, resource_id: str) -> bool:
        """Return True if a record for ``(resource_type, resource_id)`` exists."""
        raise NotImplementedError

    def adapter_for(self, resource_type: str) -> RecordAdapter:
        """Return the record adapter for a resource type."""
        raise NotImplementedError

    def supports(self, resource_type: str) -> bool:
        """Return True if records of ``resource_type`` can be created."""
        try:
            self.adapter_for(resource_type)
        except UnknownResourceTypeError:
            return False
        return True

    def save(self, record: Any) -> str | None:
        """Persist a record and return its id, or None if it has none."""
        raise NotImplementedError


class AdapterRegistry:
    """Map resource type names to record adapters."""

    def __init__(self, adapters: Mapping[str, RecordAdapter] | Iterable[RecordAdapter] = ()) -> None:
        self._adapters: dict[str, RecordAdapter] = {}
        if isinstance(adapters, Mapping):
            for resource_type, adapter in adapters.items():
                self.register(adapter, resource_type=resource_type)
        else:
            for adapter in adapters:
                self.register(adapter)

    def register(self, adapter: RecordAdapter, *, resource_type: str | None = None) -> None:
        """Register an adapter under its own ``type_`` or an explicit name."""
        name = resource_type or adapter.type_
        if not name:
            raise ValueError("Adapter must declare a resource type.")
        self._adapters[name] = adapter

    def adapter_for(self, resource_type: str) -> RecordAdapter:
        try:
            return self._adapters[resource_type]
        except KeyError:
            raise UnknownResourceTypeError(resource_type) from None

    def __contains__(self, resource_type: object) -> bool:
        return resource_type in self._adapters

    def __call__(self, resource_type: str) -> RecordAdapter:
        return self.adapter_for(resource_type)


AdapterLookup = Callable[[str], RecordAdapter] | AdapterRegistry | Store
Persist = Callable[[Any], str | int | None]


def lookup_function(adapters: AdapterLookup) -> Callable[[str], RecordAdapter]:
    """Normalize an adapter lookup into a ``type -> adapter`` callable."""
    adapter_for = getattr(adapters, "adapter_for", None)
    if adapter_for is not None:
        return adapter_for
    if callable(adapters):
        return adapters
    raise TypeError("Adapter lookup must be callable or provide adapter_for().")
