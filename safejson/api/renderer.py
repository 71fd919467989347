"""Typed JSON response construction.

``JSONRenderer`` closes over one resolved ``RenderConfig`` and turns a value
plus its type descriptor into a finished Starlette response:

1. Run the request validator; a rejection is returned as-is
2. Normalize non-plain objects and encode against the descriptor
3. Escape trigger characters in the encoded bytes
4. Build the response with Content-Type and Content-Length
5. Apply the security headers
6. Mirror the configured status field into ``X-API-Status``

The renderer holds no per-request state and can be shared across
concurrent requests.
"""

from collections.abc import Mapping
from dataclasses import dataclass

from loguru import logger
from starlette.requests import Request
from starlette.responses import Response

from safejson.api.constants import API_STATUS_HEADER, JSON_MEDIA_TYPE
from safejson.api.security_headers import SecurityHeaderSet
from safejson.api.validators import RequestValidator
from safejson.core.config import RenderConfig, resolve_config
from safejson.core.constants import DEFAULT_STATUS_CODE
from safejson.core.exceptions import EncodingError
from safejson.encoding.encoder import SchemaEncoder, stringify
from safejson.encoding.escape import EscapeFilter
from safejson.encoding.types import TypeDescriptor


class JSONRenderer:
    """Render values as typed, security-hardened JSON responses.

    Args:
        config: Resolved configuration. Defaults to ``resolve_config()``.
    """

    def __init__(self, config: RenderConfig | None = None) -> None:
        self.config = config or resolve_config()
        self.validator = RequestValidator(
            defence_json_hijacking_for_legacy_browser=(
                self.config.defence_json_hijacking_for_legacy_browser
            )
        )
        self.encoder = SchemaEncoder.from_config(self.config)
        self.escape_filter = (
            EscapeFilter(
                self.config.json_escape_filter,
                encoding=self.encoder.output_encoding,
            )
            if self.config.json_escape_filter is not None
            else None
        )
        self.secure_headers = (
            SecurityHeaderSet(self.config.secure_headers)
            if self.config.secure_headers is not None
            else None
        )
        self.content_type = f"{JSON_MEDIA_TYPE}; charset={self.config.charset}"

    @property
    def name(self) -> str:
        """Name the renderer is registered under."""
        return self.config.name

    def encode(self, value: object, descriptor: TypeDescriptor = None) -> bytes:
        """Encode and escape a value without building a response.

        Args:
            value: The value to encode.
            descriptor: Type descriptor mirroring the value's shape.

        Returns:
            bytes: The response body.

        Raises:
            EncodingError: If the value cannot be encoded.
        """
        output = self.encoder.encode(value, descriptor)
        if self.escape_filter is not None:
            output = self.escape_filter.escape(output)
        return output

    def render(
        self,
        request: Request,
        value: object,
        descriptor: TypeDescriptor = None,
        status_code: int = DEFAULT_STATUS_CODE,
    ) -> Response:
        """Render a value as a JSON response.

        Args:
            request: The inbound request, checked by the validator.
            value: The value to encode.
            descriptor: Type descriptor mirroring the value's shape.
            status_code: HTTP status of the response.

        Returns:
            Response: The finished JSON response, or the validator's rejection.

        Raises:
            EncodingError: If the value cannot be encoded. Nothing is sent.
        """
        if (rejection := self.validator.validate(request)) is not None:
            return rejection

        try:
            body = self.encode(value, descriptor)
        except EncodingError as e:
            logger.debug(
                "JSON encoding failed: {}",
                e.message,
                path=e.path,
                renderer=self.name,
            )
            raise

        response = Response(
            content=body,
            status_code=status_code,
            headers={
                "content-type": self.content_type,
                "content-length": str(len(body)),
            },
        )

        if self.secure_headers is not None:
            self.secure_headers.apply(response.headers)

        # X-API-Status lets access logs record the API-level status code
        if (field := self.config.status_code_field) and isinstance(value, Mapping):
            api_status = value.get(field)
            if api_status is not None:
                response.headers[API_STATUS_HEADER] = stringify(api_status)

        return response

    def bind(self, request: Request) -> "BoundRenderer":
        """Bind the renderer to a request.

        Args:
            request: The inbound request.

        Returns:
            BoundRenderer: Callable rendering responses for ``request``.
        """
        return BoundRenderer(self, request)


@dataclass(frozen=True, slots=True)
class BoundRenderer:
    """A renderer bound to the current request.

    Called from a handler as ``render(value, descriptor, status_code)``.
    """

    renderer: JSONRenderer
    request: Request

    def __call__(
        self,
        value: object,
        descriptor: TypeDescriptor = None,
        status_code: int = DEFAULT_STATUS_CODE,
    ) -> Response:
        return self.renderer.render(self.request, value, descriptor, status_code)
