from __future__ import annotations

from text_import.candidates import (
    ParsedCountryCandidate,
    ParsedProductCandidate,
    country_record_fields,
    product_record_fields,
    split_on_comma,
)


def test_split_on_comma_trims_and_drops_empties() -> None:
    assert split_on_comma(" Water ,Glycerin,, , Niacinamide ") == ["Water", "Glycerin", "Niacinamide"]
    assert split_on_comma("") == []
    assert split_on_comma(None) == []


def test_joined_tokens_split_back_in_order() -> None:
    tokens = ["Aqua", "Butylene Glycol", "Sodium Hyaluronate"]
    assert split_on_comma(", ".join(tokens)) == tokens


def test_tokens_with_commas_are_lossy() -> None:
    tokens = ["1,2-Hexanediol", "Glycerin"]
    assert split_on_comma(", ".join(tokens)) == ["1", "2-Hexanediol", "Glycerin"]


def test_product_record_fields() -> None:
    c = ParsedProductCandidate(
        name="Toners",
        category="Toners",
        ingredients="Centella Asiatica Extract, Panthenol",
        functions="soothing",
        target_countries="VN, TH",
        required_documents="CFS",
        description="3 SKUs",
        selected=True,
    )
    assert product_record_fields(c) == {
        "name": "Toners",
        "category": "Toners",
        "ingredients": ["Centella Asiatica Extract", "Panthenol"],
        "functions": ["soothing"],
        "target_countries": ["VN", "TH"],
        "required_documents": ["CFS"],
        "description": "3 SKUs",
    }


def test_country_record_fields_uppercase_code() -> None:
    c = ParsedCountryCandidate(name="Egypt", code="eg", requirements="line 1\nline 2", documents="EDA, Lab Report")
    assert country_record_fields(c) == {
        "name": "Egypt",
        "code": "EG",
        "requirements": "line 1\nline 2",
        "documents": ["EDA", "Lab Report"],
    }
