"""Post-encoding character substitution.

Replaces characters that are harmless in JSON but dangerous when the body
is sniffed as another content type: ``+`` (UTF-7 decoding) and ``<`` / ``>``
(inline HTML). The filter runs on the final bytes so escapes introduced by
the encoder are covered as well. Bytes in encodings where an ASCII byte may
be part of a wider character (UTF-16, EBCDIC, ISO-2022) are decoded first and
rewritten as text."""

import codecs
from collections.abc import Mapping
from typing import Final

from safejson.core.constants import DEFAULT_ENCODING, DEFAULT_JSON_ESCAPE_FILTER
from safejson.core.exceptions import ConfigurationError, EncodingError

# Encodings in which an ASCII byte always stands for that ASCII character
_BYTEWISE_ENCODINGS: Final = frozenset({"ascii", "utf-8", "iso8859-1"})


class EscapeFilter:
    """Single-pass substitution of trigger characters in encoded JSON.

    Entries whose replacement is ``None`` are disabled and leave their
    character untouched.

    Args:
        table: Mapping of single ASCII character to ASCII replacement.
        encoding: Text encoding of the bytes being escaped.

    Raises:
        ConfigurationError: If a trigger or replacement is not ASCII, or a
            trigger is longer than one character.
    """

    def __init__(
        self,
        table: Mapping[str, str | None] = DEFAULT_JSON_ESCAPE_FILTER,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        enabled: dict[str, str] = {}
        for char, replacement in table.items():
            if len(char) != 1 or not char.isascii():
                msg = f"Escape trigger must be a single ASCII character: {char!r}"
                raise ConfigurationError(msg, context={"trigger": char})
            if replacement is None:
                continue
            if not replacement.isascii():
                msg = f"Escape replacement must be ASCII: {replacement!r}"
                raise ConfigurationError(msg, context={"trigger": char})
            enabled[char] = replacement

        self.table = enabled
        self.encoding = encoding
        self._translation = str.maketrans(enabled)
        self._bytewise = codecs.lookup(encoding).name in _BYTEWISE_ENCODINGS

    def escape(self, data: bytes) -> bytes:
        """Replace every enabled trigger character in ``data``.

        Args:
            data: Encoded JSON bytes in the filter's encoding.

        Returns:
            bytes: The escaped bytes, or ``data`` itself if nothing is enabled.

        Raises:
            EncodingError: If ``data`` cannot be decoded or the escaped text
                cannot be encoded in the filter's encoding.
        """
        if not self.table:
            return data
        if not self._bytewise:
            try:
                text = data.decode(self.encoding)
                return text.translate(self._translation).encode(self.encoding)
            except UnicodeError as e:
                msg = f"Cannot escape output in {self.encoding}"
                raise EncodingError(msg, cause=e) from e
        # latin-1 maps every byte to one code point, so the round trip is
        # lossless and only ASCII triggers are rewritten.
        return data.decode("latin-1").translate(self._translation).encode("latin-1")

    def __bool__(self) -> bool:
        return bool(self.table)
