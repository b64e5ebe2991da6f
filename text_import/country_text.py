"""
Country requirement text parser

Splits pasted export-requirement notes into per-country candidates.

Blocks are separated by a line of 3+ `-`, `–`, `—` or `=` characters. A block
with header lines such as `Egypt (EG)` or `VN - Vietnam` is read header by
header; a block without headers is attributed to the country named in it
(see `country_keywords`). Inside a country, lines are routed to
`requirements` or `documents`:

    Egypt (EG)
    - Lab Testing Report        <- bullet before any label: documents
    Requirements: EDA registration before import
    Documents: CFS, GMP

Section labels are accepted in English and Korean.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from text_import.candidates import ParsedCountryCandidate
from text_import.country_keywords import detect_country_from_text


COUNTRY_FORMAT_HINT = "Egypt (EG)\n- EDA Registration\n- Lab Testing Report"

_BLOCK_SEPARATOR_RE = re.compile(r"\n\s*[-–—=]{3,}\s*\n")

# Loose checks deciding whether a block has explicit headers at all.
_HAS_BRACKET_HEADER_RE = re.compile(r"^[*\-–—•#\d.)]*\s*.+?\s*[\(\[]\s*[A-Za-z]{2,3}\s*[\)\]]")
_HAS_CODE_FIRST_HEADER_RE = re.compile(r"^[*\-–—•]*\s*[A-Z]{2,3}\s*[-–—:]\s*.+")

_BRACKET_HEADER_RE = re.compile(
    r"^[*\-–—•#\d.)]*\s*(?P<name>.+?)\s*[\(\[]\s*(?P<code>[A-Za-z]{2,3})\s*[\)\]]?\s*:?\s*$"
)
_CODE_FIRST_HEADER_RE = re.compile(r"^[*\-–—•]*\s*(?P<code>[A-Z]{2,3})\s*[-–—:]\s*(?P<name>.+?)\s*$")

_BULLET_RE = re.compile(r"^[*\-–—•]")
_BULLET_PREFIX_RE = re.compile(r"^[*\-–—•]\s*")

_REQ_WORDS = r"requirements?|규정|요건|수출\s*요건"
_DOC_WORDS = r"documents?|서류|필요\s*서류"
_REQ_LABEL_RE = re.compile(rf"^(?:{_REQ_WORDS})\s*[:：]?\s*$", re.IGNORECASE)
_DOC_LABEL_RE = re.compile(rf"^(?:{_DOC_WORDS})\s*[:：]?\s*$", re.IGNORECASE)
_REQ_INLINE_RE = re.compile(rf"^(?:{_REQ_WORDS})\s*[:：]\s*(?P<content>.+)", re.IGNORECASE)
_DOC_INLINE_RE = re.compile(rf"^(?:{_DOC_WORDS})\s*[:：]\s*(?P<content>.+)", re.IGNORECASE)


class Section(str, Enum):
    SEEKING_HEADER = "seeking_header"
    UNLABELLED = "unlabelled"
    IN_REQUIREMENTS = "in_requirements"
    IN_DOCUMENTS = "in_documents"


@dataclass
class CountryBuffer:
    name: str
    code: str
    requirements: list[str] = field(default_factory=list)
    documents: list[str] = field(default_factory=list)

    def to_candidate(self) -> ParsedCountryCandidate:
        return ParsedCountryCandidate(
            name=self.name,
            code=self.code,
            requirements="\n".join(self.requirements),
            documents=", ".join(self.documents),
        )


def split_blocks(text: str) -> list[list[str]]:
    blocks: list[list[str]] = []
    for raw in _BLOCK_SEPARATOR_RE.split(text or ""):
        lines = [ln.strip() for ln in raw.split("\n") if ln.strip()]
        if lines:
            blocks.append(lines)
    return blocks


def has_explicit_headers(lines: list[str]) -> bool:
    return any(_HAS_BRACKET_HEADER_RE.match(ln) or _HAS_CODE_FIRST_HEADER_RE.match(ln) for ln in lines)


def match_header(line: str) -> Optional[CountryBuffer]:
    m = _BRACKET_HEADER_RE.match(line) or _CODE_FIRST_HEADER_RE.match(line)
    if not m:
        return None
    return CountryBuffer(name=m.group("name").strip(), code=m.group("code").upper())


def route_line(line: str, section: Section, buf: CountryBuffer) -> Section:
    """Store one body line into `buf` and return the section for the next line."""
    clean = _BULLET_PREFIX_RE.sub("", line, count=1).strip()
    if not clean:
        return section

    if _REQ_LABEL_RE.match(clean):
        return Section.IN_REQUIREMENTS
    if _DOC_LABEL_RE.match(clean):
        return Section.IN_DOCUMENTS

    m = _REQ_INLINE_RE.match(clean)
    if m:
        buf.requirements.append(m.group("content").strip())
        return Section.IN_REQUIREMENTS
    m = _DOC_INLINE_RE.match(clean)
    if m:
        buf.documents.extend(s.strip() for s in m.group("content").split(",") if s.strip())
        return Section.IN_DOCUMENTS

    if section == Section.IN_REQUIREMENTS:
        buf.requirements.append(clean)
    elif section == Section.IN_DOCUMENTS:
        buf.documents.append(clean)
    elif _BULLET_RE.match(line):
        buf.documents.append(clean)
    else:
        buf.requirements.append(clean)
    return section


def parse_header_block(lines: list[str]) -> list[ParsedCountryCandidate]:
    out: list[ParsedCountryCandidate] = []
    current: Optional[CountryBuffer] = None
    section = Section.SEEKING_HEADER
    for line in lines:
        header = match_header(line)
        if header is not None:
            if current is not None:
                out.append(current.to_candidate())
            current = header
            section = Section.UNLABELLED
            continue
        if current is None:
            continue
        section = route_line(line, section, current)
    if current is not None:
        out.append(current.to_candidate())
    return out


def parse_keyword_block(lines: list[str]) -> list[ParsedCountryCandidate]:
    detected = detect_country_from_text("\n".join(lines))
    if detected is None:
        return []
    buf = CountryBuffer(name=detected.name, code=detected.code)
    section = Section.UNLABELLED
    for line in lines:
        section = route_line(line, section, buf)
    return [buf.to_candidate()]


def parse_country_text(text: str) -> list[ParsedCountryCandidate]:
    out: list[ParsedCountryCandidate] = []
    for lines in split_blocks(text):
        if has_explicit_headers(lines):
            out.extend(parse_header_block(lines))
        else:
            out.extend(parse_keyword_block(lines))
    return out
