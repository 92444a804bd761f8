"""Base viewset for JSON:API create endpoints with included resources."""

from typing import Any

from fastapi import Request
from starlette.concurrency import run_in_threadpool

from jsonapi_compound.config import get_settings
from jsonapi_compound.core.document import JSONAPIDocumentBuilder
from jsonapi_compound.core.errors import DocumentValidationError, ErrorCollector
from jsonapi_compound.included.resolver import IncludedResourceResolver
from jsonapi_compound.schemas.resource import JSONAPIResource
from jsonapi_compound.utils.pointer import path_from_key
from jsonapi_compound.validation.create_resource import CreateResourceValidator


class JSONAPIViewSet:
    """Base class providing the JSON:API create action and its hooks."""

    resource_type: str = ""
    data_layer: Any = None
    allow_client_ids: bool | None = None
    resolve_nested_included: bool | None = None
    document_builder_class: type = JSONAPIDocumentBuilder
    validator_class: type = CreateResourceValidator
    resolver_class: type = IncludedResourceResolver
    allowed_actions: list[str] = ["create"]

    def __init__(self, data_layer: Any = None) -> None:
        if data_layer is not None:
            self.data_layer = data_layer

    def get_document_builder(self) -> JSONAPIDocumentBuilder:
        """Instantiate the document builder."""
        return self.document_builder_class()

    def supports_client_ids(self) -> bool:
        if self.allow_client_ids is None:
            return get_settings().allow_client_ids
        return self.allow_client_ids

    def get_validator(self) -> CreateResourceValidator:
        """Instantiate the document validator for this resource type."""
        if not self.resource_type:
            raise ValueError("resource_type must be set.")
        return self.validator_class(
            self.resource_type,
            store=self.data_layer,
            client_ids=self.supports_client_ids(),
        )

    def get_resolver(self) -> IncludedResourceResolver:
        """Instantiate the included resource resolver."""
        resolve_nested = self.resolve_nested_included
        if resolve_nested is None:
            resolve_nested = get_settings().resolve_nested_included
        return self.resolver_class(
            self.data_layer, self.data_layer.save, resolve_nested=resolve_nested
        )

    async def before_create(self, request: Request, *args: Any, **kwargs: Any) -> dict[str, Any] | None:
        """Hook called before create action. Override to add pre-processing logic."""
        return None

    def check_included_types(self, payload: dict[str, Any]) -> None:
        """Reject included resources whose type the data layer cannot create."""
        errors = ErrorCollector()
        for index, element in enumerate(payload.get("included") or []):
            resource_type = element["type"]
            if not self.data_layer.supports(resource_type):
                errors.resource_type_not_supported(path_from_key("included", index), resource_type)
        if errors.has_errors():
            raise DocumentValidationError(errors.all())

    async def perform_create(
        self, request: Request, payload: dict[str, Any], *args: Any, **kwargs: Any
    ) -> dict[str, Any]:
        """Run the synchronous create pipeline in a worker thread."""
        return await run_in_threadpool(self.create_document, request, payload)

    def create_document(self, request: Request, payload: dict[str, Any]) -> dict[str, Any]:
        """Validate the document, create included resources, then the primary resource."""
        result = self.get_validator().validate(payload)
        if not result:
            raise DocumentValidationError(result.errors)
        self.check_included_types(payload)

        resource = JSONAPIResource.from_document(payload)
        resource = self.get_resolver().resolve(payload, resource, context=request)
        instance = self.data_layer.create(resource, context=request)
        adapter = self.data_layer.adapter_for(resource.type)
        return self.get_document_builder().build_single(adapter.serialize(instance))

    async def after_create(
        self, request: Request, document: dict[str, Any], *args: Any, **kwargs: Any
    ) -> dict[str, Any]:
        """Hook called after create action. Override to add post-processing logic."""
        return document

    async def create(self, request: Request, *args: Any, **kwargs: Any) -> Any:
        """Handle POST create requests."""
        # Before hook
        before_result = await self.before_create(request, *args, **kwargs)
        if before_result is not None:
            return before_result

        # Perform action
        payload = await request.json()
        document = await self.perform_create(request, payload, *args, **kwargs)

        # After hook
        document = await self.after_create(request, document, *args, **kwargs)
        return document
