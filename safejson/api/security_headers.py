"""Security headers applied to every rendered JSON response.

Default table:
- Content-Security-Policy: default-src 'none'
- Strict-Transport-Security: max-age=631138519
- X-Content-Type-Options: nosniff - Prevents MIME type sniffing
- X-Download-Options: disabled
- X-Frame-Options: DENY - Prevents clickjacking attacks
- X-Permitted-Cross-Domain-Policies: none
- X-XSS-Protection: 1; mode=block - Enables XSS filtering in older browsers
- Referrer-Policy: no-referrer
"""

from collections.abc import Mapping, MutableMapping

from safejson.core.config import normalize_header_name
from safejson.core.constants import DEFAULT_SECURE_HEADERS


class SecurityHeaderSet:
    """A fixed table of HTTP security headers.

    Entries whose value is ``None`` are disabled: they are never set, and a
    value already present on the response is left untouched.

    Args:
        table: Mapping of header name to value or ``None``. Names are
            matched case-insensitively; underscores count as dashes.
    """

    def __init__(
        self, table: Mapping[str, str | None] = DEFAULT_SECURE_HEADERS
    ) -> None:
        self.table: dict[str, str | None] = {
            normalize_header_name(name): value for name, value in table.items()
        }

    def enabled_headers(self) -> dict[str, str]:
        """Headers this set emits.

        Returns:
            dict[str, str]: Header name to value for every enabled entry.
        """
        return {name: value for name, value in self.table.items() if value is not None}

    def apply(self, headers: MutableMapping[str, str]) -> None:
        """Set every enabled header, overwriting existing values.

        Args:
            headers: The response header collection.
        """
        for name, value in self.enabled_headers().items():
            headers[name] = value

    def __len__(self) -> int:
        return len(self.enabled_headers())
