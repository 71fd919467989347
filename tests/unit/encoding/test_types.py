"""Unit tests for type descriptors."""

import dataclasses

import pytest

from safejson.encoding.types import (
    JSON_TYPE_INT,
    JSON_TYPE_INT_OR_NULL,
    JSON_TYPE_NULL,
    JSON_TYPE_STRING,
    AnyOf,
    ArrayOf,
    ScalarKind,
)


@pytest.mark.unit
class TestDescriptors:
    """Test descriptor construction and presentation."""

    @pytest.mark.parametrize(
        ("descriptor", "expected"),
        [
            (JSON_TYPE_INT, "JSON_TYPE_INT"),
            (JSON_TYPE_INT_OR_NULL, "JSON_TYPE_INT_OR_NULL"),
            (JSON_TYPE_NULL, "JSON_TYPE_NULL"),
        ],
    )
    def test_scalar_repr(self, descriptor: object, expected: str) -> None:
        """Test scalar markers print under their exported names."""
        assert repr(descriptor) == expected

    def test_scalar_kind_names_json_types(self) -> None:
        """Test kinds carry the JSON type names used in error messages."""
        assert [kind.value for kind in ScalarKind] == [
            "boolean",
            "integer",
            "number",
            "string",
            "null",
        ]

    def test_descriptors_are_immutable_and_hashable(self) -> None:
        """Test composites cannot be mutated and compare by value."""
        descriptor = ArrayOf(JSON_TYPE_STRING)

        with pytest.raises(dataclasses.FrozenInstanceError):
            descriptor.item = JSON_TYPE_INT  # type: ignore[misc]

        assert descriptor == ArrayOf(JSON_TYPE_STRING)
        assert hash(descriptor) == hash(ArrayOf(JSON_TYPE_STRING))

    def test_any_of_keeps_order(self) -> None:
        """Test alternatives are stored in declaration order."""
        descriptor = AnyOf(JSON_TYPE_INT, JSON_TYPE_STRING)

        assert descriptor.alternatives == (JSON_TYPE_INT, JSON_TYPE_STRING)
