"""JSON:API error handling middleware."""

import logging
from typing import Any

from starlette.responses import JSONResponse

from jsonapi_compound.core.errors import DocumentValidationError, JSONAPIErrorBuilder

logger = logging.getLogger(__name__)

JSONAPI_MEDIA_TYPE = "application/vnd.api+json"


class ErrorHandlerMiddleware:
    """Convert exceptions into JSON:API error documents."""

    def __init__(self, app: Any) -> None:
        """Store the ASGI app for middleware chaining."""
        self.app = app

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> None:
        """Handle exceptions and serialize JSON:API error documents."""
        try:
            await self.app(scope, receive, send)
        except DocumentValidationError as exc:
            response = JSONResponse(
                JSONAPIErrorBuilder().error_document_from(exc.errors),
                status_code=exc.status,
                media_type=JSONAPI_MEDIA_TYPE,
            )
            await response(scope, receive, send)
        except Exception as exc:  # noqa: BLE001 - last-resort handler
            logger.exception("Unhandled error while processing JSON:API request")
            response = JSONResponse(
                {
                    "errors": [
                        {
                            "status": "500",
                            "title": "Internal Server Error",
                            "detail": str(exc),
                        }
                    ]
                },
                status_code=500,
                media_type=JSONAPI_MEDIA_TYPE,
            )
            await response(scope, receive, send)
