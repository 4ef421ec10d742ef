from __future__ import annotations

import pytest

from stats_normalizer.domain.services.key_encoded_tuple import join_label, parse_composite_key


def test_encoded_single_string_key() -> None:
    dims = parse_composite_key('"google"')

    assert dims == ("google",)
    assert join_label(dims) == "google"


def test_encoded_array_key() -> None:
    dims = parse_composite_key('["spring-sale","google","cpc"]')

    assert dims == ("spring-sale", "google", "cpc")
    assert join_label(dims) == "spring-sale / google / cpc"


def test_bare_key_is_single_dimension() -> None:
    assert parse_composite_key("google") == ("google",)


@pytest.mark.parametrize(
    "raw",
    ['["a", 1]', "42", "{}", '{"a": "b"}', "[", '"unterminated', "", "   ", "null", "[]"],
)
def test_unusable_keys_yield_empty_tuple(raw: str) -> None:
    assert parse_composite_key(raw) == ()


def test_join_label_custom_separator() -> None:
    assert join_label(("a", "b"), " | ") == "a | b"
