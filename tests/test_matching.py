"""Tests for the ordered first-match helpers."""

from drawing_chat.analysis.matching import (
    first_item_by_keyword,
    first_item_with_any,
    first_keyword,
    first_rule,
    lines_with_any,
)


def test_first_keyword_respects_keyword_order():
    assert first_keyword("Section and elevation", ["elevation", "section"]) == "elevation"
    assert first_keyword("nothing here", ["elevation"]) is None


def test_first_keyword_is_case_insensitive():
    assert first_keyword("FLOOR PLAN", ["floor plan"]) == "floor plan"


def test_first_rule_returns_default_without_match():
    rules = ((("a",), 1), (("b",), 2))
    assert first_rule("b then a", rules, 0) == 1
    assert first_rule("zzz", rules, 0) == 0


def test_first_item_by_keyword_prefers_keyword_priority():
    items = ["llama2", "gemma3:4b", "llama3.2"]
    assert first_item_by_keyword(items, ["gemma3", "llama3.2", "llama"]) == "gemma3:4b"
    assert first_item_by_keyword(["llama2", "llama3.2"], ["llama3.2", "llama"]) == "llama3.2"


def test_first_item_with_any_prefers_item_order():
    items = ["vision-pro", "llava"]
    assert first_item_with_any(items, ["llava", "vision"]) == "vision-pro"
    assert first_item_with_any(["mistral"], ["llava"]) is None


def test_lines_with_any_trims_and_skips_blank_lines():
    text = "  Floor plan shown  \n\nnothing\n Detail A \n"
    assert lines_with_any(text, ["plan", "detail"]) == ["Floor plan shown", "Detail A"]
