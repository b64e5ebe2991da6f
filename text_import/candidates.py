from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any


@dataclass
class ParsedProductCandidate:
    name: str
    category: str
    ingredients: str = ""
    functions: str = ""
    target_countries: str = ""
    required_documents: str = ""
    description: str = ""
    selected: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass
class ParsedCountryCandidate:
    name: str
    code: str
    requirements: str = ""
    documents: str = ""
    selected: bool = True

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def split_on_comma(value: str | None) -> list[str]:
    return [s.strip() for s in (value or "").split(",") if s.strip()]


def product_record_fields(candidate: ParsedProductCandidate) -> dict[str, Any]:
    """Fields of the persisted product record built from a reviewed candidate."""
    return {
        "name": candidate.name,
        "category": candidate.category,
        "ingredients": split_on_comma(candidate.ingredients),
        "functions": split_on_comma(candidate.functions),
        "target_countries": split_on_comma(candidate.target_countries),
        "required_documents": split_on_comma(candidate.required_documents),
        "description": candidate.description,
    }


def country_record_fields(candidate: ParsedCountryCandidate) -> dict[str, Any]:
    return {
        "name": candidate.name,
        "code": (candidate.code or "").upper(),
        "requirements": candidate.requirements,
        "documents": split_on_comma(candidate.documents),
    }
