"""safejson - typed, security-hardened JSON responses for FastAPI and Starlette.

The plugin adds one capability to an application: rendering a value and its
type descriptor into a JSON response that is

- **Typed**: encoded against a declarative descriptor, optionally strict
- **Escaped**: ``+``, ``<`` and ``>`` rewritten after encoding
- **Hardened**: a fixed set of security headers on every response
- **Annotated**: an optional ``X-API-Status`` header mirroring a body field

Configuration is resolved once at install time and shared read-only by all
requests.
"""

from safejson.api.error_handler import register_exception_handlers
from safejson.api.plugin import (
    RenderJSON,
    get_renderer,
    install,
    render_json_dependency,
)
from safejson.api.renderer import BoundRenderer, JSONRenderer
from safejson.core.config import RenderConfig, resolve_config
from safejson.core.exceptions import ConfigurationError, EncodingError, SafeJSONError
from safejson.encoding.types import (
    JSON_TYPE_BOOL,
    JSON_TYPE_BOOL_OR_NULL,
    JSON_TYPE_FLOAT,
    JSON_TYPE_FLOAT_OR_NULL,
    JSON_TYPE_INT,
    JSON_TYPE_INT_OR_NULL,
    JSON_TYPE_NULL,
    JSON_TYPE_STRING,
    JSON_TYPE_STRING_OR_NULL,
    AnyOf,
    ArrayOf,
    HashOf,
    NullOr,
)

__version__ = "0.1.0"

__all__ = [
    "JSON_TYPE_BOOL",
    "JSON_TYPE_BOOL_OR_NULL",
    "JSON_TYPE_FLOAT",
    "JSON_TYPE_FLOAT_OR_NULL",
    "JSON_TYPE_INT",
    "JSON_TYPE_INT_OR_NULL",
    "JSON_TYPE_NULL",
    "JSON_TYPE_STRING",
    "JSON_TYPE_STRING_OR_NULL",
    "AnyOf",
    "ArrayOf",
    "BoundRenderer",
    "ConfigurationError",
    "EncodingError",
    "HashOf",
    "JSONRenderer",
    "NullOr",
    "RenderConfig",
    "RenderJSON",
    "SafeJSONError",
    "get_renderer",
    "install",
    "register_exception_handlers",
    "render_json_dependency",
    "resolve_config",
]
