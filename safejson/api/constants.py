"""API-related constants."""

# HTTP Status Codes
HTTP_403_FORBIDDEN = 403
HTTP_500_INTERNAL_SERVER_ERROR = 500

# HTTP Headers
API_STATUS_HEADER = "X-API-Status"
REQUESTED_WITH_HEADER = "X-Requested-With"

# Content types
JSON_MEDIA_TYPE = "application/json"
TEXT_MEDIA_TYPE = "text/plain"

# Legacy JSON hijacking defence
INVALID_JSON_REQUEST_BODY = b"invalid JSON request"
LEGACY_BROWSER_USER_AGENT_PATTERN = r"android"
DEFAULT_REQUEST_METHOD = "GET"
