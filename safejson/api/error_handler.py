"""Exception handlers translating plugin errors into responses.

``EncodingError`` propagates out of ``JSONRenderer.render`` untouched; the
handlers registered here turn it (and any other ``SafeJSONError``) into a
500 JSON body. The body is rendered by the application's installed renderer
when there is one, so it carries the same security headers as every other
JSON response.
"""

from collections.abc import Awaitable, Callable
from functools import lru_cache

from fastapi import FastAPI, Request
from fastapi.responses import Response
from loguru import logger

from safejson.api.constants import HTTP_500_INTERNAL_SERVER_ERROR
from safejson.api.renderer import JSONRenderer
from safejson.core.config import get_settings
from safejson.core.constants import DEFAULT_METHOD_NAME
from safejson.core.exceptions import SafeJSONError
from safejson.encoding.types import (
    JSON_TYPE_STRING,
    AnyOf,
    ArrayOf,
    HashOf,
    NullOr,
)

ERROR_RESPONSE_DESCRIPTOR = {
    "error_code": JSON_TYPE_STRING,
    "message": JSON_TYPE_STRING,
    "severity": JSON_TYPE_STRING,
    "details": NullOr(HashOf(AnyOf(JSON_TYPE_STRING, ArrayOf(JSON_TYPE_STRING)))),
}


@lru_cache
def _default_renderer() -> JSONRenderer:
    """Renderer used when the application has none installed."""
    return JSONRenderer()


def _error_renderer(request: Request, name: str) -> JSONRenderer:
    renderer = getattr(request.app.state, name, None)
    if isinstance(renderer, JSONRenderer):
        return renderer
    return _default_renderer()


def _stringify_details(context: dict[str, object]) -> dict[str, object]:
    details: dict[str, object] = {}
    for key, value in context.items():
        if isinstance(value, (list, tuple)):
            details[key] = [str(item) for item in value]
        else:
            details[key] = str(value)
    return details


def make_error_handler(
    name: str = DEFAULT_METHOD_NAME,
) -> Callable[[Request, Exception], Awaitable[Response]]:
    """Create a SafeJSONError handler rendering through the named renderer.

    Args:
        name: Name the renderer was installed under.

    Returns:
        Callable[[Request, Exception], Awaitable[Response]]: The handler.
    """

    async def safejson_error_handler(request: Request, exc: Exception) -> Response:
        """Handle SafeJSONError exceptions.

        Args:
            request: The request whose handler raised the exception
            exc: The SafeJSONError exception to handle

        Returns:
            Response: 500 JSON response describing the error

        Raises:
            TypeError: If exc is not a SafeJSONError instance
        """
        if not isinstance(exc, SafeJSONError):
            raise TypeError(f"Expected SafeJSONError, got {type(exc).__name__}")

        settings = get_settings()

        logger.error(
            "Handling {exception_type}: {message}",
            exception_type=type(exc).__name__,
            message=exc.message,
            error_code=exc.error_code,
            request_method=request.method,
            request_path=str(request.url.path),
        )

        details = None
        if settings.environment != "production" and exc.context:
            details = _stringify_details(exc.context)

        body = {
            "error_code": exc.error_code,
            "message": exc.message,
            "severity": exc.severity.value,
            "details": details,
        }
        return _error_renderer(request, name).render(
            request, body, ERROR_RESPONSE_DESCRIPTOR, HTTP_500_INTERNAL_SERVER_ERROR
        )

    return safejson_error_handler


def register_exception_handlers(
    app: FastAPI, name: str = DEFAULT_METHOD_NAME
) -> None:
    """Register the plugin's exception handlers with the application.

    Args:
        app: The FastAPI application instance
        name: Name the renderer was installed under
    """
    app.add_exception_handler(SafeJSONError, make_error_handler(name))
