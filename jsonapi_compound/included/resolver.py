"""Create included resources and rewrite ``lid`` linkage to persisted ids."""

from __future__ import annotations

import copy
import logging
from typing import Any, Iterable, Mapping

from jsonapi_compound.included.adapters import AdapterLookup, Persist, lookup_function
from jsonapi_compound.schemas.resource import JSONAPIRelationship, JSONAPIResource
from jsonapi_compound.utils.pointer import resolve_path

logger = logging.getLogger(__name__)

IncludedKey = tuple[str, str]


class LidBinding:
    """Persisted ids for included resources created during one resolve call."""

    def __init__(self) -> None:
        self._ids: dict[IncludedKey, str | None] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def bind(self, key: IncludedKey, resource_id: str | None) -> None:
        self._ids[key] = resource_id

    def get(self, key: IncludedKey) -> str | None:
        return self._ids.get(key)

    def as_dict(self) -> dict[IncludedKey, str | None]:
        return dict(self._ids)


def _linkage_items(linkage: Any) -> list[Any]:
    if linkage is None:
        return []
    if isinstance(linkage, list):
        return list(linkage)
    return [linkage]


def _raw_linkage_keys(linkage: Any) -> list[IncludedKey]:
    return [
        (item.get("type"), item["lid"])
        for item in _linkage_items(linkage)
        if isinstance(item, dict) and item.get("lid")
    ]


def _normalize_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


class IncludedResourceResolver:
    """Create the included resources a primary resource refers to by ``lid``.

    ``adapters`` maps resource types to record adapters, either through an
    ``adapter_for`` method or as a plain callable. ``persist`` saves a record
    and returns its id, or ``None`` when the record has no id afterwards.
    Documents are expected to have passed ``CreateResourceValidator`` first.
    """

    def __init__(
        self,
        adapters: AdapterLookup,
        persist: Persist,
        *,
        resolve_nested: bool = False,
    ) -> None:
        self.adapter_for = lookup_function(adapters)
        self.persist = persist
        self.resolve_nested = resolve_nested

    def resolve(
        self,
        document: Mapping[str, Any],
        resource: JSONAPIResource,
        context: Any = None,
    ) -> JSONAPIResource:
        """Return ``resource`` with relationship lids replaced by persisted ids."""
        included = resolve_path(document, "/included")
        if not included:
            return resource

        index = self.index_included(included)
        working = copy.deepcopy(dict(document["data"]))
        bindings = LidBinding()

        for name, relationship in resource.get_relationships().items():
            for key in self.find_included_keys(relationship, index):
                resource_id = self.materialize(key, index, bindings, context, frozenset())
                self.update_relationship(working, name, key, resource_id)

        logger.debug("Resolved %d included resource(s) for '%s'", len(bindings), resource.type)
        return JSONAPIResource.from_data(working)

    def index_included(self, included: Iterable[Any]) -> dict[IncludedKey, dict[str, Any]]:
        """Key included resources by ``(type, lid)``; the first one wins."""
        index: dict[IncludedKey, dict[str, Any]] = {}
        for element in included:
            if not isinstance(element, dict) or not element.get("lid"):
                continue
            index.setdefault((element.get("type"), element["lid"]), element)
        return index

    def find_included_keys(
        self,
        relationship: JSONAPIRelationship,
        index: Mapping[IncludedKey, Any],
    ) -> list[IncludedKey]:
        """Return the distinct included keys a relationship refers to."""
        keys = [
            identifier.key for identifier in relationship.identifiers() if identifier.lid
        ]
        return self._matching(keys, index)

    def _matching(
        self, keys: Iterable[IncludedKey], index: Mapping[IncludedKey, Any]
    ) -> list[IncludedKey]:
        result: list[IncludedKey] = []
        for key in keys:
            if key in index and key not in result:
                result.append(key)
        return result

    def materialize(
        self,
        key: IncludedKey,
        index: Mapping[IncludedKey, dict[str, Any]],
        bindings: LidBinding,
        context: Any,
        pending: frozenset,
    ) -> str | None:
        """Create the included resource for ``key`` once and return its id."""
        if key in bindings:
            return bindings.get(key)

        element = copy.deepcopy(index[key])
        if self.resolve_nested:
            self.resolve_element(element, index, bindings, context, pending | {key})

        adapter = self.adapter_for(key[0])
        draft = adapter.deserialize(element)
        record = adapter.create_record(draft)
        adapter.fill(record, draft, context)
        resource_id = _normalize_id(self.persist(record))
        bindings.bind(key, resource_id)

        if resource_id is None:
            logger.warning("Included '%s' resource with lid '%s' was not persisted", *key)
        else:
            logger.info(
                "Created included '%s' resource for lid '%s' with id '%s'",
                key[0],
                key[1],
                resource_id,
            )
        return resource_id

    def resolve_element(
        self,
        element: dict[str, Any],
        index: Mapping[IncludedKey, dict[str, Any]],
        bindings: LidBinding,
        context: Any,
        pending: frozenset,
    ) -> None:
        """Resolve the relationships of an included element in place."""
        relationships = element.get("relationships")
        if not isinstance(relationships, dict):
            return
        for name, relation in list(relationships.items()):
            if not isinstance(relation, dict):
                continue
            for key in self._matching(_raw_linkage_keys(relation.get("data")), index):
                if key in pending:
                    logger.debug("Skipping cyclic reference to '%s' lid '%s'", *key)
                    continue
                resource_id = self.materialize(key, index, bindings, context, pending)
                self.update_relationship(element, name, key, resource_id)

    def update_relationship(
        self,
        container: dict[str, Any],
        name: str,
        key: IncludedKey,
        resource_id: str | None,
    ) -> None:
        """Swap the lid for ``resource_id``, or drop the linkage when there is no id.

        A relationship left without linkage is removed from ``container``.
        """
        relationships = container.get("relationships")
        if not isinstance(relationships, dict) or not isinstance(relationships.get(name), dict):
            return

        relation = relationships[name]
        linkage = relation.get("data")
        to_many = isinstance(linkage, list)

        updated = []
        for item in _linkage_items(linkage):
            if isinstance(item, dict) and (item.get("type"), item.get("lid")) == key:
                if resource_id is None:
                    continue
                item = {member: value for member, value in item.items() if member != "lid"}
                item["id"] = resource_id
            updated.append(item)

        if to_many:
            new_linkage: Any = updated
        else:
            new_linkage = updated[0] if updated else None

        if not new_linkage:
            del relationships[name]
        else:
            relation["data"] = new_linkage


def resolve_included(
    document: Mapping[str, Any],
    resource: JSONAPIResource,
    adapter_lookup: AdapterLookup,
    persist: Persist,
    context: Any = None,
    *,
    resolve_nested: bool = False,
) -> JSONAPIResource:
    """Resolve ``document``'s included resources for ``resource``."""
    resolver = IncludedResourceResolver(
        adapter_lookup, persist, resolve_nested=resolve_nested
    )
    return resolver.resolve(document, resource, context)
