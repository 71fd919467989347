"""Type aliases shared across the rendering pipeline.

The aliases document intent where the data cannot be statically typed:
rendered values, configuration tables, and the normalizer hook.
"""

from collections.abc import Callable
from typing import Any

# JSON-compatible value produced by the encoder before serialization
type JsonValue = (
    dict[str, "JsonValue"] | list["JsonValue"] | str | int | float | bool | None
)

# Header name -> value; None disables the header
type HeaderTable = dict[str, str | None]

# Trigger character -> replacement; None disables the entry
type EscapeTable = dict[str, str | None]

# Converts a non-plain object into plain data before encoding.
# Called as normalizer(value, descriptor).
type Normalizer = Callable[[Any, Any], Any]
