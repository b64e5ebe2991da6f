from __future__ import annotations

import re


_PAREN_SPAN_RE = re.compile(r"\(([^)]+)\)")
_PLACEHOLDER_MARK = "\ue000"
_PLACEHOLDER_RE = re.compile(f"{_PLACEHOLDER_MARK}(\\d+){_PLACEHOLDER_MARK}")
_LEADING_CONNECTIVE_RE = re.compile(r"^\s*(?:plus|and|&)\s+", re.IGNORECASE)


def split_category_items(text: str) -> list[str]:
    """
    Split a category label that enumerates several items.

    "A, B (with C, D), plus E" -> ["A", "B (with C, D)", "E"]

    Commas inside parentheses never split, and a leading "plus" / "and" / "&"
    is dropped from each item. "&" in the middle of an item is kept.
    """
    spans: list[str] = []

    def _protect(m: re.Match[str]) -> str:
        spans.append(m.group(0))
        return f"{_PLACEHOLDER_MARK}{len(spans) - 1}{_PLACEHOLDER_MARK}"

    protected = _PAREN_SPAN_RE.sub(_protect, text or "")

    parts = [p.strip() for p in protected.split(",")]
    parts = [p for p in parts if p]
    parts = [_LEADING_CONNECTIVE_RE.sub("", p).strip() for p in parts]
    parts = [p for p in parts if p]
    return [_PLACEHOLDER_RE.sub(lambda m: spans[int(m.group(1))], p) for p in parts]
