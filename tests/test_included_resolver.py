import copy

import pytest

from jsonapi_compound.core.errors import UnknownResourceTypeError
from jsonapi_compound.included import (
    AdapterRegistry,
    IncludedResourceResolver,
    LidBinding,
    Store,
)
from jsonapi_compound.included.resolver import resolve_included
from jsonapi_compound.schemas import ResourceObject

from .conftest import Persister, RecordingAdapter


def article(relationships, included=None):
    document = {
        "data": {
            "type": "articles",
            "attributes": {"title": "Hello"},
            "relationships": relationships,
        }
    }
    if included is not None:
        document["included"] = included
    return document


def tag(lid, name="x"):
    return {"type": "tags", "lid": lid, "attributes": {"name": name}}


def relationship_data(resource, name):
    return resource.get_relationships()[name].model_dump(exclude_unset=True)["data"]


def test_document_without_included_returns_resource_unchanged(registry, persister):
    document = article({"tag": {"data": {"type": "tags", "lid": "L1"}}})
    resource = ResourceObject.from_document(document)
    before = resource.model_copy(deep=True)

    result = resolve_included(document, resource, registry, persister)

    assert result is resource
    assert result == before
    assert persister.saved == []


def test_empty_included_is_a_no_op(registry, persister):
    document = article({"tag": {"data": {"type": "tags", "lid": "L1"}}}, included=[])
    resource = ResourceObject.from_document(document)

    assert resolve_included(document, resource, registry, persister) is resource


def test_to_one_lid_replaced_by_persisted_id(registry):
    document = article({"tag": {"data": {"type": "tags", "lid": "L1"}}}, [tag("L1")])
    resource = ResourceObject.from_document(document)

    result = resolve_included(document, resource, registry, Persister(start=42))

    assert relationship_data(result, "tag") == {"type": "tags", "id": "42"}
    assert result.get_relationships()["tag"].data.lid is None
    assert result.attributes == {"title": "Hello"}
    created = registry.adapter_for("tags").created
    assert created == [
        {
            "type": "tags",
            "lid": "L1",
            "attributes": {"name": "x"},
            "relationships": {},
            "context": None,
            "id": "42",
        }
    ]


def test_to_one_relationship_removed_when_not_persisted(registry):
    document = article(
        {
            "tag": {"data": {"type": "tags", "lid": "L1"}},
            "author": {"data": {"type": "people", "id": "7"}},
        },
        [tag("L1")],
    )
    resource = ResourceObject.from_document(document)

    result = resolve_included(document, resource, registry, Persister(fail_lids=("L1",)))

    assert "tag" not in result.get_relationships()
    assert relationship_data(result, "author") == {"type": "people", "id": "7"}


def test_to_many_keeps_only_persisted_references(registry):
    document = article(
        {
            "tags": {
                "data": [
                    {"type": "tags", "id": "3"},
                    {"type": "tags", "lid": "L1"},
                    {"type": "tags", "lid": "L2"},
                ]
            }
        },
        [tag("L1"), tag("L2")],
    )
    resource = ResourceObject.from_document(document)

    result = resolve_included(document, resource, registry, Persister(start=10, fail_lids=("L1",)))

    assert relationship_data(result, "tags") == [
        {"type": "tags", "id": "3"},
        {"type": "tags", "id": "10"},
    ]
    assert result.get_relationships()["tags"].is_to_many


def test_to_many_removed_when_nothing_persisted(registry):
    document = article({"tags": {"data": [{"type": "tags", "lid": "L1"}]}}, [tag("L1")])
    resource = ResourceObject.from_document(document)

    result = resolve_included(document, resource, registry, Persister(fail_lids=("L1",)))

    assert "tags" not in result.get_relationships()


def test_duplicate_included_keys_use_first_element(registry, persister):
    document = article(
        {"tag": {"data": {"type": "tags", "lid": "L1"}}},
        [tag("L1", name="first"), tag("L1", name="second")],
    )
    resource = ResourceObject.from_document(document)

    resolve_included(document, resource, registry, persister)

    created = registry.adapter_for("tags").created
    assert len(created) == 1
    assert created[0]["attributes"] == {"name": "first"}
    assert len(persister.saved) == 1


def test_same_lid_in_two_relationships_is_created_once(registry, persister):
    document = article(
        {
            "primary_tag": {"data": {"type": "tags", "lid": "L1"}},
            "tags": {"data": [{"type": "tags", "lid": "L1"}, {"type": "tags", "lid": "L1"}]},
        },
        [tag("L1")],
    )
    resource = ResourceObject.from_document(document)

    result = resolve_included(document, resource, registry, persister)

    assert len(persister.saved) == 1
    assert relationship_data(result, "primary_tag") == {"type": "tags", "id": "1"}
    assert relationship_data(result, "tags") == [
        {"type": "tags", "id": "1"},
        {"type": "tags", "id": "1"},
    ]


def test_lid_matching_requires_same_type(registry, persister):
    document = article(
        {"author": {"data": {"type": "people", "lid": "L1"}}},
        [tag("L1")],
    )
    resource = ResourceObject.from_document(document)

    result = resolve_included(document, resource, registry, persister)

    assert persister.saved == []
    assert relationship_data(result, "author") == {"type": "people", "lid": "L1"}


def test_unreferenced_included_resources_are_not_created(registry, persister):
    document = article({"tag": {"data": {"type": "tags", "lid": "L1"}}}, [tag("L1"), tag("L9")])
    resource = ResourceObject.from_document(document)

    resolve_included(document, resource, registry, persister)

    assert [record["lid"] for record in persister.saved] == ["L1"]


def test_inputs_are_not_mutated(registry, persister):
    document = article({"tag": {"data": {"type": "tags", "lid": "L1"}}}, [tag("L1")])
    resource = ResourceObject.from_document(document)
    document_before = copy.deepcopy(document)
    resource_before = resource.model_copy(deep=True)

    result = resolve_included(document, resource, registry, persister)

    assert document == document_before
    assert resource == resource_before
    assert result is not resource


def test_relationship_meta_is_kept(registry, persister):
    document = article(
        {"tag": {"data": {"type": "tags", "lid": "L1"}, "meta": {"primary": True}}},
        [tag("L1")],
    )
    resource = ResourceObject.from_document(document)

    result = resolve_included(document, resource, registry, persister)

    assert result.get_relationships()["tag"].meta == {"primary": True}


def test_context_and_integer_ids_are_passed_through(registry):
    document = article({"tag": {"data": {"type": "tags", "lid": "L1"}}}, [tag("L1")])
    resource = ResourceObject.from_document(document)

    result = resolve_included(document, resource, registry, lambda record: 5, context="request")

    assert relationship_data(result, "tag") == {"type": "tags", "id": "5"}
    assert registry.adapter_for("tags").created[0]["context"] == "request"


def test_plain_callable_adapter_lookup(persister):
    adapter = RecordingAdapter("tags")
    document = article({"tag": {"data": {"type": "tags", "lid": "L1"}}}, [tag("L1")])
    resource = ResourceObject.from_document(document)

    resolver = IncludedResourceResolver(lambda resource_type: adapter, persister)
    result = resolver.resolve(document, resource)

    assert relationship_data(result, "tag") == {"type": "tags", "id": "1"}
    assert len(adapter.created) == 1


def test_unknown_included_type_raises(persister):
    document = article({"tag": {"data": {"type": "tags", "lid": "L1"}}}, [tag("L1")])
    resource = ResourceObject.from_document(document)

    with pytest.raises(UnknownResourceTypeError):
        resolve_included(document, resource, AdapterRegistry(), persister)


@pytest.fixture
def nested_registry():
    return AdapterRegistry(
        [RecordingAdapter("people"), RecordingAdapter("companies")]
    )


def nested_document():
    return article(
        {"author": {"data": {"type": "people", "lid": "p1"}}},
        [
            {
                "type": "people",
                "lid": "p1",
                "attributes": {"name": "Jane"},
                "relationships": {"employer": {"data": {"type": "companies", "lid": "c1"}}},
            },
            {
                "type": "companies",
                "lid": "c1",
                "attributes": {"name": "Acme"},
                "relationships": {"ceo": {"data": {"type": "people", "lid": "p1"}}},
            },
        ],
    )


def test_nested_included_resources_resolved_when_enabled(nested_registry, persister):
    document = nested_document()
    resource = ResourceObject.from_document(document)

    result = resolve_included(
        document, resource, nested_registry, persister, resolve_nested=True
    )

    assert [record["lid"] for record in persister.saved] == ["c1", "p1"]
    person = nested_registry.adapter_for("people").created[0]
    assert person["relationships"] == {"employer": {"data": {"type": "companies", "id": "1"}}}
    company = nested_registry.adapter_for("companies").created[0]
    assert company["relationships"] == {"ceo": {"data": {"type": "people", "lid": "p1"}}}
    assert relationship_data(result, "author") == {"type": "people", "id": "2"}


def test_nested_included_resources_left_alone_by_default(nested_registry, persister):
    document = nested_document()
    resource = ResourceObject.from_document(document)

    result = resolve_included(document, resource, nested_registry, persister)

    assert [record["lid"] for record in persister.saved] == ["p1"]
    person = nested_registry.adapter_for("people").created[0]
    assert person["relationships"] == {"employer": {"data": {"type": "companies", "lid": "c1"}}}
    assert relationship_data(result, "author") == {"type": "people", "id": "1"}


def test_lid_binding():
    bindings = LidBinding()
    bindings.bind(("tags", "L1"), "1")
    bindings.bind(("tags", "L2"), None)

    assert ("tags", "L1") in bindings
    assert ("tags", "L3") not in bindings
    assert bindings.get(("tags", "L2")) is None
    assert len(bindings) == 2
    assert bindings.as_dict() == {("tags", "L1"): "1", ("tags", "L2"): None}


def test_store_supports_types_with_an_adapter(registry):
    class RegistryStore(Store):
        def adapter_for(self, resource_type):
            return registry.adapter_for(resource_type)

    store = RegistryStore()

    assert store.supports("tags")
    assert not store.supports("robots")
