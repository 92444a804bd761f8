"""Creation of included resources referenced by ``lid``."""

from .adapters import AdapterRegistry, RecordAdapter, Store
from .resolver import IncludedResourceResolver, LidBinding, resolve_included

__all__ = [
    "AdapterRegistry",
    "IncludedResourceResolver",
    "LidBinding",
    "RecordAdapter",
    "Store",
    "resolve_included",
]
