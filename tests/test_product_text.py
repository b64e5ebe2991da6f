from __future__ import annotations

from text_import.candidates import ParsedProductCandidate
from text_import.product_text import parse_email_text


EMAIL = """
Dear partner,
please find the categories below.

* Serums & Body Oils (6 SKUs)
Niacinamide, Hyaluronic Acid
Vitamin C,
Requirements: all products need CPNP
- Toners, Mists, plus Essences
Centella Asiatica Extract
Samples must be sent before the order
* Lip Care -
"""


def test_empty_input_returns_empty_list() -> None:
    assert parse_email_text("") == []
    assert parse_email_text("   \n\n  ") == []


def test_ampersand_label_yields_single_candidate_with_sku_description() -> None:
    out = parse_email_text("* Serums & Body Oils (6 SKUs)\nNiacinamide, Hyaluronic Acid")
    assert out == [
        ParsedProductCandidate(
            name="Serums & Body Oils",
            category="Serums & Body Oils",
            ingredients="Niacinamide, Hyaluronic Acid",
            description="6 SKUs",
        )
    ]
    assert out[0].selected is True
    assert out[0].functions == "" and out[0].target_countries == "" and out[0].required_documents == ""


def test_full_email_is_split_into_categories() -> None:
    out = parse_email_text(EMAIL)
    assert [c.name for c in out] == ["Serums & Body Oils", "Toners", "Mists", "Essences", "Lip Care"]

    serums = out[0]
    assert serums.ingredients == "Niacinamide, Hyaluronic Acid, Vitamin C"
    assert serums.description == "6 SKUs"

    # Expanded items share the ingredients and carry no description.
    for item in out[1:4]:
        assert item.category == item.name
        assert item.ingredients == "Centella Asiatica Extract"
        assert item.description == ""

    lip = out[4]
    assert lip.name == "Lip Care"
    assert lip.ingredients == ""


def test_lines_before_first_header_are_ignored() -> None:
    out = parse_email_text("Hello team\nWater, Glycerin\n* Creams\nShea Butter")
    assert len(out) == 1
    assert out[0].ingredients == "Shea Butter"


def test_dash_headers_and_sku_case() -> None:
    out = parse_email_text("— Cleansers (1 sku)\nCoco-Glucoside\n– Masks (12 SKUS)")
    assert [(c.name, c.description) for c in out] == [("Cleansers", "1 SKUs"), ("Masks", "12 SKUs")]


def test_boilerplate_lines_are_skipped() -> None:
    text = "\n".join(
        [
            "* Creams",
            "Registration in the target market is required",
            "We recommend vegan formulas",
            "Official documents attached",
            "Ceramide NP",
        ]
    )
    assert parse_email_text(text)[0].ingredients == "Ceramide NP"


def test_parsing_is_deterministic() -> None:
    assert parse_email_text(EMAIL) == parse_email_text(EMAIL)
