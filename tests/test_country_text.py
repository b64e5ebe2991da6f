from __future__ import annotations

from text_import.candidates import ParsedCountryCandidate
from text_import.country_text import CountryBuffer, Section, parse_country_text, route_line


def test_bullets_default_to_documents_under_explicit_header() -> None:
    out = parse_country_text("Egypt (EG)\n- EDA Registration\n- Lab Testing Report")
    assert out == [
        ParsedCountryCandidate(
            name="Egypt",
            code="EG",
            requirements="",
            documents="EDA Registration, Lab Testing Report",
        )
    ]
    assert out[0].selected is True


def test_blocks_split_on_separator_lines() -> None:
    text = "\n".join(
        [
            "Egypt (EG)",
            "- EDA Registration",
            "----------",
            "Our Vietnamese partner requires:",
            "- Certificate of Free Sale",
            "Product labels in Vietnamese",
        ]
    )
    out = parse_country_text(text)
    assert [(c.name, c.code) for c in out] == [("Egypt", "EG"), ("Vietnam", "VN")]
    assert out[0].documents == "EDA Registration"
    assert out[1].requirements == "Our Vietnamese partner requires:\nProduct labels in Vietnamese"
    assert out[1].documents == "Certificate of Free Sale"


def test_section_labels_switch_buffers() -> None:
    text = "\n".join(
        [
            "1. Thailand (TH):",
            "Requirements:",
            "Thai FDA notification",
            "- Thai label",
            "Documents: CFS, GMP, MSDS",
            "- Ingredient list",
        ]
    )
    (th,) = parse_country_text(text)
    assert (th.name, th.code) == ("Thailand", "TH")
    assert th.requirements == "Thai FDA notification\nThai label"
    assert th.documents == "CFS, GMP, MSDS, Ingredient list"


def test_code_first_headers_and_korean_labels() -> None:
    text = "\n".join(
        [
            "VN - Vietnam",
            "요건: 베트남어 라벨 필수",
            "서류",
            "- CFS",
            "KR: Korea",
            "- KC mark",
        ]
    )
    vn, kr = parse_country_text(text)
    assert (vn.name, vn.code, vn.requirements, vn.documents) == ("Vietnam", "VN", "베트남어 라벨 필수", "CFS")
    # A new header resets the section to unlabelled.
    assert (kr.name, kr.code, kr.requirements, kr.documents) == ("Korea", "KR", "", "KC mark")


def test_bracket_code_is_uppercased() -> None:
    (jp,) = parse_country_text("* Japan [jp]\nQuasi-drug approval for whitening claims")
    assert (jp.name, jp.code) == ("Japan", "JP")
    assert jp.requirements == "Quasi-drug approval for whitening claims"


def test_lines_before_first_header_are_ignored() -> None:
    (eg,) = parse_country_text("Intro from the buyer\nEgypt (EG)\nneeds registration")
    assert eg.requirements == "needs registration"
    assert eg.documents == ""


def test_keyword_block_without_country_is_skipped() -> None:
    assert parse_country_text("Please see attached\n- something") == []
    assert parse_country_text("") == []


def test_keyword_block_uses_section_labels() -> None:
    text = "Chinese market\nDocuments:\nNMPA filing\nRequirements: animal testing exemption"
    (cn,) = parse_country_text(text)
    assert (cn.name, cn.code) == ("China", "CN")
    assert cn.requirements == "Chinese market\nanimal testing exemption"
    assert cn.documents == "NMPA filing"


def test_duplicate_countries_are_not_merged() -> None:
    text = "Egypt (EG)\n- EDA\n=====\nEgyptian importer asks for\n- Arabic label"
    out = parse_country_text(text)
    assert [c.code for c in out] == ["EG", "EG"]
    assert out[1].documents == "Arabic label"


def test_malformed_codes_pass_through() -> None:
    (c,) = parse_country_text("Somewhere (ABC)")
    assert (c.name, c.code) == ("Somewhere", "ABC")


def test_route_line_inline_documents_are_comma_split() -> None:
    buf = CountryBuffer(name="X", code="XX")
    section = route_line("- Documents: CFS,  GMP ,", Section.UNLABELLED, buf)
    assert section == Section.IN_DOCUMENTS
    assert buf.documents == ["CFS", "GMP"]
    section = route_line("plain note", section, buf)
    assert buf.documents == ["CFS", "GMP", "plain note"]


def test_parsing_is_deterministic() -> None:
    text = "Egypt (EG)\n- EDA\n---\nThai FDA rules for Thailand"
    assert parse_country_text(text) == parse_country_text(text)


def test_bullet_before_labels_goes_to_documents() -> None:
    text = "Egypt (EG)\n- Lab Testing Report\nRequirements: EDA registration before import\nDocuments: CFS, GMP"
    (c,) = parse_country_text(text)
    assert c.requirements == "EDA registration before import"
    assert c.documents == "Lab Testing Report, CFS, GMP"
