from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from stats_normalizer.adapters.mappers.archive_mapper import ArchiveBreakdownMapper
from stats_normalizer.adapters.mappers.base import DecodeContext
from stats_normalizer.domain.entities.dynamic_value import DynamicValue
from stats_normalizer.domain.exceptions.decoding import StructuralDecodeError


def _item(value: str, views: Any) -> dict[str, Any]:
    return {"href": f"https://example.com/{value}", "value": value, "views": views}


def test_sections_sorted_by_summed_views_and_empty_dropped(
    make_context: Callable[..., DecodeContext],
    payload: Callable[[Any], DynamicValue],
) -> None:
    body = payload(
        {
            "summary": {
                "pages": [_item("about", 3), _item("contact", 2)],
                "tags": [_item("python", 10), _item("broken", "many")],
                "authors": [_item("bad", None)],
                "categories": [_item("news", 5)],
                "other": {"not": "a list"},
                "empty": [],
            }
        }
    )

    out = ArchiveBreakdownMapper().map(body, make_context())

    assert [(s.name, s.count) for s in out.sections] == [
        ("tags", 10),
        ("pages", 5),
        ("categories", 5),
    ]
    pages = out.sections[1]
    assert [(i.label, i.secondary_key) for i in pages.items] == [
        ("about", "https://example.com/about"),
        ("contact", "https://example.com/contact"),
    ]


def test_empty_summary(
    make_context: Callable[..., DecodeContext],
    payload: Callable[[Any], DynamicValue],
) -> None:
    assert ArchiveBreakdownMapper().map(payload({"summary": {}}), make_context()).sections == ()


@pytest.mark.parametrize("body", [{}, {"summary": []}, "summary"])
def test_missing_summary_is_structural(
    body: Any,
    make_context: Callable[..., DecodeContext],
    payload: Callable[[Any], DynamicValue],
) -> None:
    with pytest.raises(StructuralDecodeError):
        ArchiveBreakdownMapper().map(payload(body), make_context())
