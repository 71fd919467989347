"""Core plugin constants."""

from typing import Final

# Plugin defaults
DEFAULT_METHOD_NAME: Final[str] = "render_json"
DEFAULT_ENCODING: Final[str] = "utf-8"
DEFAULT_STATUS_CODE: Final[int] = 200

# Security headers applied to every rendered response.
# A value of None marks the header as disabled.
DEFAULT_HSTS_MAX_AGE = 631138519  # ~20 years in seconds
DEFAULT_SECURE_HEADERS: Final[dict[str, str | None]] = {
    "content-security-policy": "default-src 'none'",
    "strict-transport-security": f"max-age={DEFAULT_HSTS_MAX_AGE}",
    "x-content-type-options": "nosniff",
    "x-download-options": None,
    "x-frame-options": "DENY",
    "x-permitted-cross-domain-policies": "none",
    "x-xss-protection": "1; mode=block",
    "referrer-policy": "no-referrer",
}

# Characters replaced after encoding.
# Ref: https://cheatsheetseries.owasp.org/cheatsheets/XSS_Filter_Evasion_Cheat_Sheet.html
DEFAULT_JSON_ESCAPE_FILTER: Final[dict[str, str | None]] = {
    "+": "\\u002b",  # do not eval as UTF-7
    "<": "\\u003c",  # do not eval as HTML
    ">": "\\u003e",  # ditto
}

# Python codec names whose registered MIME charset is spelled differently
MIME_CHARSET_ALIASES: Final[dict[str, str]] = {
    "ascii": "us-ascii",
    "cp932": "windows-31j",
    "shift_jis": "shift_jis",
    "euc_jp": "euc-jp",
    "iso2022_jp": "iso-2022-jp",
    "iso2022_kr": "iso-2022-kr",
}

# orjson rejects integers outside this range
MAX_JSON_INT: Final[int] = 2**64 - 1
MIN_JSON_INT: Final[int] = -(2**63)
