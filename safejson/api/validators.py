"""Inbound request checks run before a JSON response is rendered.

The only check is a narrow mitigation for JSON hijacking on legacy Android
browsers: a cookie-bearing ``GET`` that was not issued through
``XMLHttpRequest`` is refused with a plain-text 403. It is not a general
CSRF defence.
"""

import re

from loguru import logger
from starlette.requests import Request
from starlette.responses import Response

from safejson.api.constants import (
    DEFAULT_REQUEST_METHOD,
    HTTP_403_FORBIDDEN,
    INVALID_JSON_REQUEST_BODY,
    LEGACY_BROWSER_USER_AGENT_PATTERN,
    REQUESTED_WITH_HEADER,
    TEXT_MEDIA_TYPE,
)

_LEGACY_BROWSER = re.compile(LEGACY_BROWSER_USER_AGENT_PATTERN, re.IGNORECASE)


def invalid_request_response() -> Response:
    """Build the 403 rejection response.

    Returns:
        Response: ``text/plain`` body ``invalid JSON request`` with its length.
    """
    return Response(
        content=INVALID_JSON_REQUEST_BODY,
        status_code=HTTP_403_FORBIDDEN,
        headers={
            "content-type": TEXT_MEDIA_TYPE,
            "content-length": str(len(INVALID_JSON_REQUEST_BODY)),
        },
    )


class RequestValidator:
    """Reject requests matching the legacy JSON hijacking heuristic.

    Args:
        defence_json_hijacking_for_legacy_browser: Enables the check. When
            disabled, every request passes.
    """

    def __init__(
        self, *, defence_json_hijacking_for_legacy_browser: bool = False
    ) -> None:
        self.enabled = defence_json_hijacking_for_legacy_browser

    def is_hijacking_attempt(self, request: Request) -> bool:
        """Whether the request matches every condition of the heuristic."""
        headers = request.headers
        user_agent = headers.get("user-agent") or ""
        method = request.scope.get("method") or DEFAULT_REQUEST_METHOD
        return (
            not headers.get(REQUESTED_WITH_HEADER)
            and _LEGACY_BROWSER.search(user_agent) is not None
            and "cookie" in headers
            and method.upper() == DEFAULT_REQUEST_METHOD
        )

    def validate(self, request: Request) -> Response | None:
        """Check a request before rendering.

        Args:
            request: The inbound request.

        Returns:
            Response | None: A 403 rejection, or None if the request may proceed.
        """
        if not self.enabled or not self.is_hijacking_attempt(request):
            return None

        logger.warning(
            "Rejected possible JSON hijacking request",
            path=request.scope.get("path", ""),
            user_agent=request.headers.get("user-agent", ""),
        )
        return invalid_request_response()
