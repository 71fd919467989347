"""Schema-directed JSON encoder.

The encoder walks a value alongside its type descriptor, producing a tree
of plain JSON data, and hands that tree to orjson for serialization.
Walking first lets the encoder enforce strictness (``require_types``),
coerce scalars to their declared kind, and normalize non-plain objects
before orjson ever sees them.

Flag summary:
- ``ascii``: escape every non-ASCII code point (surrogate pairs above U+FFFF)
- ``utf8``: emit UTF-8 bytes instead of the configured text encoding
- ``canonical``: sort object keys
- ``convert_blessed``: let objects supply ``to_json()`` / pydantic dumps
- ``require_types``: every value path needs a descriptor
- ``type_all_string``: untyped scalars become strings, scalar mismatches
  fall back to the string form
"""

from __future__ import annotations

import codecs
import math
import re
from collections.abc import Callable, Mapping
from typing import Any, Final

import orjson
from pydantic import BaseModel

from safejson.core.config import EncoderFlags, RenderConfig
from safejson.core.constants import DEFAULT_ENCODING, MAX_JSON_INT, MIN_JSON_INT
from safejson.core.exceptions import EncodingError
from safejson.core.types import JsonValue, Normalizer
from safejson.encoding.types import (
    AnyOf,
    ArrayOf,
    HashOf,
    JSONType,
    NullOr,
    ScalarKind,
    TypeDescriptor,
)

_NON_ASCII: Final = re.compile(r"[^\x00-\x7f]")
_PLAIN_SCALARS: Final = (str, int, float, bool)
_MISSING: Final = object()

ROOT_PATH: Final[str] = "$"


def _ascii_escape(match: re.Match[str]) -> str:
    code = ord(match.group())
    if code > 0xFFFF:
        code -= 0x10000
        high, low = 0xD800 + (code >> 10), 0xDC00 + (code & 0x3FF)
        return f"\\u{high:04x}\\u{low:04x}"
    return f"\\u{code:04x}"


def escape_non_ascii(text: str) -> str:
    """Replace every non-ASCII code point with its JSON escape.

    Only valid on serialized JSON, where non-ASCII characters can appear
    solely inside string literals.
    """
    return _NON_ASCII.sub(_ascii_escape, text)


def is_plain(value: object) -> bool:
    """Whether a value is plain data the encoder can walk directly."""
    return value is None or isinstance(value, (Mapping, list, tuple, *_PLAIN_SCALARS))


def describe(value: object) -> str:
    """Name the JSON kind of a value for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def stringify(value: str | int | float | bool) -> str:
    """String form of a scalar as used by ``type_all_string``."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _check_int(value: int) -> int:
    if not MIN_JSON_INT <= value <= MAX_JSON_INT:
        msg = f"integer {value} exceeds the 64-bit range"
        raise ValueError(msg)
    return value


def _to_int(value: str | int | float | bool) -> int:
    if isinstance(value, str):
        return _check_int(int(value.strip()))
    if isinstance(value, float) and not math.isfinite(value):
        msg = f"cannot represent {value} as an integer"
        raise ValueError(msg)
    return _check_int(int(value))


def _check_float(value: float) -> float:
    if not math.isfinite(value):
        msg = f"cannot represent {value} in JSON"
        raise ValueError(msg)
    return value


def _to_float(value: str | int | float | bool) -> float:
    if isinstance(value, str):
        return _check_float(float(value.strip()))
    return _check_float(float(value))


def _to_bool(value: str | int | float | bool) -> bool:
    if isinstance(value, str):
        msg = "strings are not coerced to booleans"
        raise TypeError(msg)
    return bool(value)


def _to_null(value: str | int | float | bool) -> None:
    msg = f"{describe(value)} is not null"
    raise TypeError(msg)


_COERCERS: Final[dict[ScalarKind, Callable[[Any], JsonValue]]] = {
    ScalarKind.STRING: stringify,
    ScalarKind.INT: _to_int,
    ScalarKind.FLOAT: _to_float,
    ScalarKind.BOOL: _to_bool,
    ScalarKind.NULL: _to_null,
}


def convert_blessed(value: object) -> object:
    """Ask an object for its own JSON representation.

    Pydantic models are dumped in JSON mode; any other object may provide a
    ``to_json()`` method.

    Returns:
        object: The converted value, or a sentinel if the object offers none.
    """
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    hook = getattr(value, "to_json", None)
    if callable(hook):
        return hook()
    return _MISSING


class SchemaEncoder:
    """Encode values against type descriptors into JSON bytes.

    Args:
        flags: Encoder flags.
        normalizer: Optional hook converting non-plain objects into plain data.
        encoding: Text encoding used when ``utf8`` is not set.
    """

    def __init__(
        self,
        flags: EncoderFlags | None = None,
        *,
        normalizer: Normalizer | None = None,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        self.flags = flags or EncoderFlags()
        self.normalizer = normalizer
        self.output_encoding = "utf-8" if self.flags.utf8 else encoding
        self._utf8_output = codecs.lookup(self.output_encoding).name == "utf-8"
        self._option = orjson.OPT_SORT_KEYS if self.flags.canonical else 0

    @classmethod
    def from_config(cls, config: RenderConfig) -> SchemaEncoder:
        """Build an encoder from a resolved render configuration."""
        return cls(
            config.encoder_flags,
            normalizer=config.unbless_object,
            encoding=config.encoding,
        )

    def encode(self, value: object, descriptor: TypeDescriptor = None) -> bytes:
        """Encode a value into JSON bytes.

        Args:
            value: The value to encode.
            descriptor: Type descriptor mirroring the value's shape.

        Returns:
            bytes: The serialized JSON.

        Raises:
            EncodingError: If the value does not fit its descriptor, cannot be
                normalized, or cannot be represented in the output encoding.
        """
        plain = self.to_plain(value, descriptor)

        try:
            raw = orjson.dumps(plain, option=self._option)
        except orjson.JSONEncodeError as e:
            msg = f"JSON serialization failed: {e}"
            raise EncodingError(msg, path=ROOT_PATH, cause=e) from e

        if not self.flags.ascii and self._utf8_output:
            return raw

        text = raw.decode("utf-8")
        if self.flags.ascii:
            text = escape_non_ascii(text)

        try:
            return text.encode(self.output_encoding)
        except UnicodeEncodeError as e:
            msg = f"Output cannot be represented in {self.output_encoding}"
            raise EncodingError(msg, path=ROOT_PATH, cause=e) from e

    def to_plain(self, value: object, descriptor: TypeDescriptor = None) -> JsonValue:
        """Walk a value against its descriptor and return plain JSON data."""
        return self._walk(value, descriptor, ROOT_PATH)

    def _walk(self, value: object, descriptor: TypeDescriptor, path: str) -> JsonValue:
        if descriptor is None:
            if self.flags.require_types:
                msg = f"No type descriptor for value at {path}"
                raise EncodingError(msg, path=path)
            return self._infer(value, path)

        if isinstance(descriptor, NullOr):
            if value is None:
                return None
            return self._walk(value, descriptor.inner, path)

        if isinstance(descriptor, AnyOf):
            return self._any_of(value, descriptor, path)

        value = self._plain(value, descriptor, path)

        if isinstance(descriptor, JSONType):
            return self._scalar(value, descriptor, path)
        if isinstance(descriptor, Mapping):
            return self._object(value, descriptor, path)
        if isinstance(descriptor, (list, tuple)):
            return self._tuple(value, descriptor, path)
        if isinstance(descriptor, ArrayOf):
            if not isinstance(value, (list, tuple)):
                raise self._mismatch("array", value, path)
            return [
                self._walk(item, descriptor.item, f"{path}[{index}]")
                for index, item in enumerate(value)
            ]
        if isinstance(descriptor, HashOf):
            if not isinstance(value, Mapping):
                raise self._mismatch("object", value, path)
            result: dict[str, JsonValue] = {}
            for key, item in value.items():
                name = self._key(key, path, result)
                result[name] = self._walk(item, descriptor.value, f"{path}.{name}")
            return result

        msg = f"Unsupported type descriptor {descriptor!r} at {path}"
        raise EncodingError(msg, path=path)

    def _infer(self, value: object, path: str) -> JsonValue:
        value = self._plain(value, None, path)

        if isinstance(value, Mapping):
            result: dict[str, JsonValue] = {}
            for key, item in value.items():
                name = self._key(key, path, result)
                result[name] = self._walk(item, None, f"{path}.{name}")
            return result
        if isinstance(value, (list, tuple)):
            return [
                self._walk(item, None, f"{path}[{index}]")
                for index, item in enumerate(value)
            ]
        if value is None:
            return None
        if self.flags.type_all_string:
            return stringify(value)
        try:
            if isinstance(value, float):
                return _check_float(value)
            if isinstance(value, int) and not isinstance(value, bool):
                return _check_int(value)
        except ValueError as e:
            raise EncodingError(str(e), path=path, cause=e) from e
        return value

    def _any_of(self, value: object, descriptor: AnyOf, path: str) -> JsonValue:
        failures: list[str] = []
        for alternative in descriptor.alternatives:
            try:
                return self._walk(value, alternative, path)
            except EncodingError as e:
                failures.append(e.message)
        msg = f"Value at {path} matches none of {len(failures)} alternatives"
        raise EncodingError(msg, path=path, context={"alternatives": failures})

    def _plain(self, value: object, descriptor: TypeDescriptor, path: str) -> Any:
        if is_plain(value):
            return value

        if self.normalizer is not None:
            value = self.normalizer(value, descriptor)
            if is_plain(value):
                return value

        if self.flags.convert_blessed:
            converted = convert_blessed(value)
            if converted is not _MISSING and is_plain(converted):
                return converted

        msg = f"Cannot encode {type(value).__name__} object at {path}"
        raise EncodingError(msg, path=path, context={"type": type(value).__name__})

    def _scalar(self, value: Any, descriptor: JSONType, path: str) -> JsonValue:
        expected = descriptor.kind.value
        if value is None:
            if descriptor.nullable:
                return None
            raise self._mismatch(expected, value, path)
        if isinstance(value, (Mapping, list, tuple)):
            raise self._mismatch(expected, value, path)

        try:
            return _COERCERS[descriptor.kind](value)
        except (TypeError, ValueError, OverflowError) as e:
            if self.flags.type_all_string:
                return stringify(value)
            raise self._mismatch(expected, value, path, cause=e) from e

    def _object(
        self, value: Any, descriptor: Mapping[str, TypeDescriptor], path: str
    ) -> JsonValue:
        if not isinstance(value, Mapping):
            raise self._mismatch("object", value, path)

        result: dict[str, JsonValue] = {}
        for key, item in value.items():
            name = self._key(key, path, result)
            child = f"{path}.{name}"
            field = descriptor.get(name)
            if field is None and self.flags.require_types:
                msg = f"No type descriptor for field '{name}' at {path}"
                raise EncodingError(msg, path=child)
            result[name] = self._walk(item, field, child)
        return result

    def _tuple(
        self, value: Any, descriptor: list[Any] | tuple[Any, ...], path: str
    ) -> JsonValue:
        if not isinstance(value, (list, tuple)):
            raise self._mismatch("array", value, path)
        if len(value) != len(descriptor):
            msg = (
                f"Expected array of length {len(descriptor)} at {path}, "
                f"got length {len(value)}"
            )
            raise EncodingError(msg, path=path)
        return [
            self._walk(item, field, f"{path}[{index}]")
            for index, (item, field) in enumerate(zip(value, descriptor, strict=True))
        ]

    def _key(self, key: object, path: str, result: Mapping[str, object]) -> str:
        if isinstance(key, str):
            name = key
        elif key is None:
            name = "null"
        elif isinstance(key, (int, float, bool)):
            name = stringify(key)
        else:
            msg = f"Object key of type {type(key).__name__} at {path} is not a string"
            raise EncodingError(msg, path=path)
        if name in result:
            msg = f"Duplicate object key '{name}' at {path}"
            raise EncodingError(msg, path=f"{path}.{name}", context={"key": name})
        return name

    @staticmethod
    def _mismatch(
        expected: str, value: object, path: str, cause: Exception | None = None
    ) -> EncodingError:
        msg = f"Expected {expected} at {path}, got {describe(value)}"
        return EncodingError(
            msg,
            path=path,
            context={"expected": expected, "actual": describe(value)},
            cause=cause,
        )
