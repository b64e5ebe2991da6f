"""
Product catalog text parser

Goal
----
Turn a buyer email that lists product categories and their ingredient lines
into reviewable product candidates. Typical input:

    * Serums & Body Oils (6 SKUs)
    Niacinamide, Hyaluronic Acid
    - Toners, Mists, plus Essences
    Centella Asiatica Extract

Each header line (`*` or a dash bullet) opens a category; the non-boilerplate
lines below it are its ingredients. A header that enumerates several items
("Toners, Mists, plus Essences") becomes one candidate per item.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from text_import.candidates import ParsedProductCandidate
from text_import.category_items import split_category_items


PRODUCT_FORMAT_HINT = "* Category (N SKUs)"

_STAR_HEADER_RE = re.compile(r"^\*\s*(.+?)(?:\s*\((\d+)\s*SKUs?\))?$", re.IGNORECASE)
_DASH_HEADER_RE = re.compile(r"^[-–—]\s*(.+?)(?:\s*\((\d+)\s*SKUs?\))?$", re.IGNORECASE)
_TRAILING_DASH_RE = re.compile(r"\s*[-–—]\s*$")
_LINE_EDGE_RE = re.compile(r"^[,\s]+|[,\s]+$")

# Buyer-email boilerplate that shows up between ingredient lines.
_SKIP_LINE_RE = re.compile(
    r"^(?:requirements|all cosmetic|samples|we recommend|registration|ingredient compliance"
    r"|claims|factory|individual|official)",
    re.IGNORECASE,
)


@dataclass
class CategoryBlock:
    label: str
    sku_count: Optional[int] = None
    ingredient_lines: list[str] = field(default_factory=list)


def _match_header(line: str) -> Optional[re.Match[str]]:
    return _STAR_HEADER_RE.match(line) or _DASH_HEADER_RE.match(line)


def _clean_lines(text: str) -> list[str]:
    return [ln.strip() for ln in (text or "").split("\n") if ln.strip()]


def iter_category_blocks(lines: Iterable[str]) -> Iterator[CategoryBlock]:
    current: Optional[CategoryBlock] = None
    for line in lines:
        m = _match_header(line)
        if m:
            if current is not None:
                yield current
            label = _TRAILING_DASH_RE.sub("", m.group(1)).strip()
            current = CategoryBlock(label=label, sku_count=int(m.group(2)) if m.group(2) else None)
            continue
        if current is None:
            continue
        if _SKIP_LINE_RE.match(line):
            continue
        current.ingredient_lines.append(_LINE_EDGE_RE.sub("", line))
    if current is not None:
        yield current


def block_candidates(block: CategoryBlock) -> list[ParsedProductCandidate]:
    ingredients = ", ".join(block.ingredient_lines)
    items = split_category_items(block.label)
    if len(items) > 1:
        return [ParsedProductCandidate(name=item, category=item, ingredients=ingredients) for item in items]
    description = f"{block.sku_count} SKUs" if block.sku_count else ""
    return [
        ParsedProductCandidate(
            name=block.label,
            category=block.label,
            ingredients=ingredients,
            description=description,
        )
    ]


def parse_email_text(text: str) -> list[ParsedProductCandidate]:
    out: list[ParsedProductCandidate] = []
    for block in iter_category_blocks(_clean_lines(text)):
        out.extend(block_candidates(block))
    return out
