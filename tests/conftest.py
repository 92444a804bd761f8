"""Shared fixtures for jsonapi_compound tests."""

from typing import Any

import pytest

from jsonapi_compound.config import get_settings
from jsonapi_compound.included.adapters import AdapterRegistry, RecordAdapter, Store


class RecordingAdapter(RecordAdapter):
    """Adapter that builds plain dict records and remembers them."""

    def __init__(self, type_: str) -> None:
        self.type_ = type_
        self.created: list[dict[str, Any]] = []

    def create_record(self, draft):
        record = {"type": draft.type, "lid": draft.lid}
        self.created.append(record)
        return record

    def fill(self, record, draft, context=None):
        record["attributes"] = dict(draft.attributes or {})
        record["relationships"] = {
            name: relationship.model_dump(exclude_unset=True)
            for name, relationship in draft.get_relationships().items()
        }
        record["context"] = context


class Persister:
    """Persist callable returning ids in sequence, or None for listed lids."""

    def __init__(self, start: int = 1, fail_lids: tuple[str, ...] = ()) -> None:
        self.next_id = start
        self.fail_lids = set(fail_lids)
        self.saved: list[dict[str, Any]] = []

    def __call__(self, record: dict[str, Any]) -> str | None:
        self.saved.append(record)
        if record["lid"] in self.fail_lids:
            return None
        value = str(self.next_id)
        self.next_id += 1
        record["id"] = value
        return value


class MemoryStore(Store):
    def __init__(self, existing: set[tuple[str, str]] | None = None) -> None:
        self.existing = existing or set()
        self.checked: list[tuple[str, str]] = []

    def exists(self, resource_type, resource_id):
        self.checked.append((resource_type, resource_id))
        return (resource_type, resource_id) in self.existing


@pytest.fixture
def registry():
    return AdapterRegistry([RecordingAdapter("tags"), RecordingAdapter("people")])


@pytest.fixture
def persister():
    return Persister()


@pytest.fixture
def store():
    return MemoryStore({("articles", "existing-1")})


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
