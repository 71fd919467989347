"""Type descriptors for schema-directed JSON encoding.

A descriptor mirrors the shape of the value being encoded:

- scalar markers (``JSON_TYPE_STRING``, ``JSON_TYPE_INT`` ...) describe
  leaves; the ``*_OR_NULL`` variants also accept ``None``
- a ``dict`` describes an object field by field
- a ``list`` describes a fixed-length array position by position
- ``ArrayOf``, ``HashOf``, ``AnyOf`` and ``NullOr`` compose the above

Example:
    >>> USER = {
    ...     "id": JSON_TYPE_INT,
    ...     "name": JSON_TYPE_STRING,
    ...     "tags": ArrayOf(JSON_TYPE_STRING),
    ...     "manager": NullOr({"id": JSON_TYPE_INT}),
    ... }
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ScalarKind(Enum):
    """Kinds of JSON leaf values."""

    BOOL = "boolean"
    INT = "integer"
    FLOAT = "number"
    STRING = "string"
    NULL = "null"


@dataclass(frozen=True, slots=True)
class JSONType:
    """Scalar type marker."""

    kind: ScalarKind
    nullable: bool = False

    def __repr__(self) -> str:
        nullable = self.nullable and self.kind is not ScalarKind.NULL
        suffix = "_OR_NULL" if nullable else ""
        return f"JSON_TYPE_{self.kind.name}{suffix}"


@dataclass(frozen=True, slots=True)
class ArrayOf:
    """Array whose every element matches ``item``."""

    item: Any


@dataclass(frozen=True, slots=True)
class HashOf:
    """Object whose every value matches ``value``; keys are free-form."""

    value: Any


@dataclass(frozen=True, slots=True)
class NullOr:
    """Either ``None`` or a value matching ``inner``."""

    inner: Any


@dataclass(frozen=True, slots=True, init=False)
class AnyOf:
    """Value matching the first of several alternatives that encodes."""

    alternatives: tuple[Any, ...]

    def __init__(self, *alternatives: Any) -> None:
        if not alternatives:
            msg = "AnyOf requires at least one alternative"
            raise ValueError(msg)
        object.__setattr__(self, "alternatives", alternatives)


JSON_TYPE_BOOL = JSONType(ScalarKind.BOOL)
JSON_TYPE_INT = JSONType(ScalarKind.INT)
JSON_TYPE_FLOAT = JSONType(ScalarKind.FLOAT)
JSON_TYPE_STRING = JSONType(ScalarKind.STRING)
JSON_TYPE_NULL = JSONType(ScalarKind.NULL, nullable=True)

JSON_TYPE_BOOL_OR_NULL = JSONType(ScalarKind.BOOL, nullable=True)
JSON_TYPE_INT_OR_NULL = JSONType(ScalarKind.INT, nullable=True)
JSON_TYPE_FLOAT_OR_NULL = JSONType(ScalarKind.FLOAT, nullable=True)
JSON_TYPE_STRING_OR_NULL = JSONType(ScalarKind.STRING, nullable=True)

# A descriptor is a JSONType, a composite, a dict of field descriptors,
# a list of positional descriptors, or None when the value is untyped.
type TypeDescriptor = (
    JSONType
    | ArrayOf
    | HashOf
    | NullOr
    | AnyOf
    | dict[str, "TypeDescriptor"]
    | list["TypeDescriptor"]
    | None
)
