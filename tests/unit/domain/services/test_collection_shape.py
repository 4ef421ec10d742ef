from __future__ import annotations

import pytest

from stats_normalizer.domain.entities.dynamic_value import DynamicValue, as_int
from stats_normalizer.domain.exceptions.decoding import ScalarDecodeError, ShapeViolationError
from stats_normalizer.domain.services.collection_shape import (
    normalize_mapping,
    normalize_optional_mapping,
)


def _count(value: DynamicValue) -> int:
    count = as_int(value)
    if count is None:
        raise ScalarDecodeError("not a count")
    return count


@pytest.mark.parametrize("value", [[], {}, ()])
def test_empty_array_or_object_is_empty_mapping(value: DynamicValue) -> None:
    assert normalize_mapping(value, _count) == {}


@pytest.mark.parametrize("value", [[1, 2], "x", 3, None, True])
def test_non_empty_array_or_scalar_is_shape_violation(value: DynamicValue) -> None:
    with pytest.raises(ShapeViolationError):
        normalize_mapping(value, _count)


def test_object_entries_decoded_in_key_order() -> None:
    out = normalize_mapping({"b": 2, "a": 1}, _count)

    assert list(out.items()) == [("b", 2), ("a", 1)]


def test_element_failure_raises_by_default_and_skips_on_request() -> None:
    value = {"a": 1, "b": "oops", "c": 3}

    with pytest.raises(ScalarDecodeError):
        normalize_mapping(value, _count)
    assert normalize_mapping(value, _count, on_element_error="skip") == {"a": 1, "c": 3}


def test_optional_mapping_treats_missing_as_empty() -> None:
    assert normalize_optional_mapping(None, _count) == {}
    assert normalize_optional_mapping([], _count) == {}
    with pytest.raises(ShapeViolationError):
        normalize_optional_mapping([1], _count)
