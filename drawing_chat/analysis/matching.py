"""Ordered keyword matching shared by the extractor, fallbacks and model selection.

Every helper here is first-match-wins over the keyword order it is given, so
identical input always produces identical output.
"""

from __future__ import annotations

from typing import Callable, Iterable, List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


def first_keyword(text: str, keywords: Sequence[str]) -> Optional[str]:
    """Return the first keyword (in list order) contained in *text*."""

    lowered = (text or "").lower()
    for keyword in keywords:
        if keyword in lowered:
            return keyword
    return None


def first_rule(text: str, rules: Sequence[Tuple[Sequence[str], T]], default: T) -> T:
    """Return the value of the first rule whose keywords occur in *text*."""

    for keywords, value in rules:
        if first_keyword(text, keywords) is not None:
            return value
    return default


def first_item_by_keyword(
    items: Iterable[T],
    keywords: Sequence[str],
    key: Callable[[T], str] = str,
) -> Optional[T]:
    """Return the first item carrying the most preferred keyword.

    Keywords are tried in priority order; within one keyword the items keep
    their original order.
    """

    candidates = list(items)
    for keyword in keywords:
        for item in candidates:
            if keyword in (key(item) or "").lower():
                return item
    return None


def first_item_with_any(
    items: Iterable[T],
    keywords: Sequence[str],
    key: Callable[[T], str] = str,
) -> Optional[T]:
    """Return the first item (in item order) that contains any keyword."""

    for item in items:
        if first_keyword(key(item), keywords) is not None:
            return item
    return None


def lines_with_any(text: str, keywords: Sequence[str]) -> List[str]:
    """Return trimmed lines of *text* that contain any of *keywords*."""

    matched: List[str] = []
    for line in (text or "").split("\n"):
        stripped = line.strip()
        if stripped and first_keyword(stripped, keywords) is not None:
            matched.append(stripped)
    return matched
