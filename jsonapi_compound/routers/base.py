"""Router scaffolding for JSON:API create endpoints."""

from typing import Any, Callable

from fastapi import APIRouter, Depends
from fastapi import Request


class JSONAPIRouter(APIRouter):
    """APIRouter wrapper for JSON:API viewsets."""

    def register_viewset(
        self,
        prefix: str,
        viewset: Any | Callable[..., Any],
        *,
        dependencies: list[Any] | None = None,
    ) -> None:
        """Register the JSON:API create route for a viewset instance or factory function.

        Args:
            prefix: URL prefix for the collection (e.g., "/articles")
            viewset: Viewset instance or factory function that returns a viewset instance.
                    A factory function is called per request with dependency injection.
            dependencies: Additional FastAPI dependencies to inject for the route.

        Examples:
            # Register with a viewset instance
            router.register_viewset("/articles", ArticleViewSet(data_layer))

            # Register with a factory function
            def get_article_viewset(session: Session = Depends(get_session)) -> ArticleViewSet:
                return ArticleViewSet(build_data_layer(session))

            router.register_viewset("/articles", get_article_viewset)
        """
        is_factory = (
            callable(viewset)
            and not isinstance(viewset, type)
            and not hasattr(viewset, "create")
        )

        if is_factory:
            async def create_wrapper(request: Request, viewset_instance: Any = Depends(viewset)) -> Any:
                return await viewset_instance.create(request)

            endpoint: Callable[..., Any] = create_wrapper
        else:
            if "create" not in getattr(viewset, "allowed_actions", ["create"]):
                return

            async def create_endpoint(request: Request) -> Any:
                return await viewset.create(request)

            endpoint = create_endpoint

        self.add_jsonapi_route(
            prefix,
            endpoint,
            methods=["POST"],
            name=f"{prefix}_create",
            dependencies=dependencies,
        )

    def add_jsonapi_route(
        self,
        path: str,
        endpoint: Callable[..., Any],
        *,
        methods: list[str],
        name: str | None = None,
        dependencies: list[Any] | None = None,
    ) -> None:
        """Add a route with JSON:API defaults (201 Created for POST)."""
        status_code = 201 if "POST" in methods else None
        self.add_api_route(
            path,
            endpoint,
            methods=methods,
            name=name,
            status_code=status_code,
            dependencies=dependencies if dependencies else None,
        )
