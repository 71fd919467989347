"""Configuration for the JSON rendering plugin.

Two layers live here:

- **RenderConfig**: the frozen configuration a single plugin installation
  closes over. It is produced by ``resolve_config`` which merges caller
  options over the built-in defaults.
- **Settings**: process-level settings read from the environment with
  Pydantic Settings (``SAFEJSON_`` prefix, ``__`` nested delimiter, ``.env``
  support). The demo application feeds ``settings.render_config`` into
  ``install``.

Merging rules for ``resolve_config``:
1. ``secure_headers`` and ``json_escape_filter`` are tables. An explicit
   ``None`` disables the whole section; an absent key keeps the default
   table; a mapping is overlaid onto the default table key by key. A
   ``None`` entry inside the mapping disables that single entry.
2. Every other option simply overrides the default when present.
3. Unknown options are ignored with a warning.
"""

import codecs
from collections.abc import Mapping
from functools import lru_cache
from typing import Any, Literal

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from safejson.core.constants import (
    DEFAULT_ENCODING,
    DEFAULT_JSON_ESCAPE_FILTER,
    DEFAULT_METHOD_NAME,
    DEFAULT_SECURE_HEADERS,
    MIME_CHARSET_ALIASES,
)
from safejson.core.exceptions import ConfigurationError
from safejson.core.types import EscapeTable, HeaderTable, Normalizer


class EncoderFlags(BaseModel):
    """Flags controlling the schema-directed JSON encoder."""

    ascii: bool = Field(
        default=True,
        description="Escape non-ASCII code points as \\uXXXX",
    )
    utf8: bool = Field(
        default=False,
        description="Encode output as UTF-8 instead of the configured encoding",
    )
    canonical: bool = Field(
        default=False,
        description="Sort object keys for reproducible output",
    )
    convert_blessed: bool = Field(
        default=False,
        description="Let non-plain objects supply their own JSON representation",
    )
    require_types: bool = Field(
        default=False,
        description="Fail when a value has no type descriptor",
    )
    type_all_string: bool = Field(
        default=False,
        description="Emit untyped scalars as strings and relax scalar mismatches",
    )


class RenderDefaults(EncoderFlags):
    """Render options that can be supplied through the environment."""

    name: str = Field(
        default=DEFAULT_METHOD_NAME,
        min_length=1,
        description="Name the renderer is registered under",
    )
    encoding: str = Field(
        default=DEFAULT_ENCODING,
        description="Text encoding advertised in the Content-Type charset",
    )
    status_code_field: str | None = Field(
        default=None,
        description="Field mirrored into the X-API-Status header",
    )
    defence_json_hijacking_for_legacy_browser: bool = Field(
        default=False,
        description="Reject cookie-bearing GET requests from legacy Android browsers",
    )

    @field_validator("encoding", mode="after")
    @classmethod
    def validate_encoding(cls, v: str) -> str:
        """Ensure the encoding is known to the codec registry."""
        try:
            codecs.lookup(v)
        except LookupError as e:
            msg = f"Unknown text encoding: {v}"
            raise ValueError(msg) from e
        return v

    @field_validator("status_code_field", mode="before")
    @classmethod
    def empty_str_to_none(cls, v: str | None) -> str | None:
        """Convert empty strings to None for nullable fields."""
        if v == "":
            return None
        return v


class RenderConfig(RenderDefaults):
    """Fully resolved, immutable configuration of one plugin installation."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    secure_headers: HeaderTable | None = Field(
        default_factory=lambda: dict(DEFAULT_SECURE_HEADERS),
        description="Security headers applied to every response; None disables",
    )
    json_escape_filter: EscapeTable | None = Field(
        default_factory=lambda: dict(DEFAULT_JSON_ESCAPE_FILTER),
        description="Post-encoding character substitutions; None disables",
    )
    unbless_object: Normalizer | None = Field(
        default=None,
        description="Normalizer converting non-plain objects into plain data",
    )

    @field_validator("json_escape_filter", mode="after")
    @classmethod
    def validate_escape_filter(cls, v: EscapeTable | None) -> EscapeTable | None:
        """Trigger characters must be single ASCII characters."""
        if v is None:
            return v
        for char, replacement in v.items():
            if len(char) != 1 or not char.isascii():
                msg = f"Escape trigger must be a single ASCII character: {char!r}"
                raise ValueError(msg)
            if replacement is not None and not replacement.isascii():
                msg = f"Escape replacement must be ASCII: {replacement!r}"
                raise ValueError(msg)
        return v

    @property
    def charset(self) -> str:
        """MIME charset of the rendered body, used in the Content-Type header."""
        return mime_charset(DEFAULT_ENCODING if self.utf8 else self.encoding)

    @property
    def encoder_flags(self) -> EncoderFlags:
        """Encoder flags as a standalone model."""
        return EncoderFlags(
            **{name: getattr(self, name) for name in EncoderFlags.model_fields}
        )


def mime_charset(encoding: str) -> str:
    """Lowercased MIME charset name of a Python text encoding.

    Args:
        encoding: Any name or alias known to the codec registry.

    Returns:
        str: The charset, e.g. ``utf-8`` for ``UTF8`` or ``iso-8859-1`` for
            ``latin-1``.
    """
    name = codecs.lookup(encoding).name
    if name in MIME_CHARSET_ALIASES:
        return MIME_CHARSET_ALIASES[name]
    if name.startswith("iso8859-"):
        return "iso-8859-" + name.removeprefix("iso8859-")
    if name.startswith("cp125"):
        return "windows-" + name.removeprefix("cp")
    return name.replace("_", "-")


def normalize_header_name(name: str) -> str:
    """Normalize a header name for case-insensitive table lookups.

    Args:
        name: Header name such as ``X-Frame-Options`` or ``x_frame_options``.

    Returns:
        str: Lowercased, dash-separated header name.
    """
    return name.strip().lower().replace("_", "-")


def _overlay_table(
    section: str,
    defaults: Mapping[str, str | None],
    value: object,
    normalize_key: Any = None,
) -> dict[str, str | None] | None:
    """Overlay caller entries onto a default table.

    Args:
        section: Name of the section, used for logging.
        defaults: The default table.
        value: The caller-supplied value for the section.
        normalize_key: Optional callable applied to every key.

    Returns:
        dict[str, str | None] | None: The merged table, or None if disabled.
    """
    if value is None or value is False:
        return None

    def key_of(k: str) -> str:
        return normalize_key(k) if normalize_key else k

    merged = {key_of(k): v for k, v in defaults.items()}
    if not isinstance(value, Mapping):
        logger.warning(
            "Ignoring non-mapping value for {}, keeping defaults",
            section,
            section=section,
        )
        return merged

    for key, entry in value.items():
        merged[key_of(str(key))] = entry
    return merged


_MERGEABLE_SECTIONS: tuple[tuple[str, Mapping[str, str | None], Any], ...] = (
    ("secure_headers", DEFAULT_SECURE_HEADERS, normalize_header_name),
    ("json_escape_filter", DEFAULT_JSON_ESCAPE_FILTER, None),
)


def resolve_config(
    config: Mapping[str, Any] | None = None, **overrides: Any
) -> RenderConfig:
    """Merge caller configuration over the defaults.

    Args:
        config: Partial configuration mapping. Keyword arguments take
            precedence over entries in this mapping.
        **overrides: Individual options.

    Returns:
        RenderConfig: Fully populated, frozen configuration.

    Raises:
        ConfigurationError: If an option has an invalid type or value.
    """
    merged: dict[str, Any] = {**(config or {}), **overrides}

    values: dict[str, Any] = {}
    for key, value in merged.items():
        if key not in RenderConfig.model_fields:
            logger.warning("Ignoring unknown render option {}", key, option=key)
            continue
        values[key] = value

    for section, defaults, normalize_key in _MERGEABLE_SECTIONS:
        if section in merged:
            values[section] = _overlay_table(
                section, defaults, merged[section], normalize_key
            )
        else:
            values[section] = _overlay_table(section, defaults, {}, normalize_key)

    try:
        return RenderConfig(**values)
    except ValidationError as e:
        msg = "Invalid render configuration"
        raise ConfigurationError(
            msg,
            context={"errors": e.errors(include_url=False, include_context=False)},
            cause=e,
        ) from e


class LogConfig(BaseModel):
    """Simplified logging configuration."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_formatter_type: Literal["console", "json"] | None = Field(
        default=None,
        description="Log output formatter. Auto-detected if not specified.",
    )


class Settings(BaseSettings):
    """Process settings for applications using the plugin."""

    model_config = SettingsConfigDict(
        env_prefix="SAFEJSON_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        env_nested_delimiter="__",
        extra="ignore",
    )

    # Application settings
    app_name: str = Field(default="safejson", description="Application name")
    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Environment the application is running in",
    )
    debug: bool = Field(default=False, description="Debug mode flag")

    # API settings
    api_host: str = Field(default="127.0.0.1", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging configuration
    log_config: LogConfig = Field(
        default_factory=LogConfig, description="Logging configuration"
    )

    # Renderer configuration
    render_config: RenderDefaults = Field(
        default_factory=RenderDefaults, description="JSON renderer configuration"
    )

    def model_post_init(self, __context: object) -> None:
        """Post initialization to set environment-based defaults."""
        super().model_post_init(__context)

        if self.log_config.log_formatter_type is None:
            self.log_config.log_formatter_type = (
                "json" if self.environment == "production" else "console"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
