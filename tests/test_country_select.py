from __future__ import annotations

from catalog_admin.country_select import (
    is_all_selected,
    selected_codes,
    selection_label,
    toggle_all,
    toggle_code,
)


COUNTRIES = [
    {"code": "EG", "name": "Egypt"},
    {"code": "VN", "name": "Vietnam"},
    {"code": "TH", "name": "Thailand"},
]


def test_toggle_code_adds_and_removes() -> None:
    value = toggle_code("", "EG")
    assert value == "EG"
    value = toggle_code(value, "VN")
    assert value == "EG, VN"
    assert toggle_code(value, "EG") == "VN"


def test_toggle_all() -> None:
    assert toggle_all(COUNTRIES, "EG") == "EG, VN, TH"
    assert toggle_all(COUNTRIES, "EG, VN, TH") == ""
    assert toggle_all([], "") == ""


def test_labels() -> None:
    assert selection_label(COUNTRIES, "") == "Select countries"
    assert selection_label(COUNTRIES, "EG,VN") == "2 selected (EG, VN)"
    assert selection_label(COUNTRIES, "EG, VN, TH") == "All selected (3)"


def test_selected_codes_and_all_flag() -> None:
    assert selected_codes(" EG , ,VN") == ["EG", "VN"]
    assert is_all_selected(COUNTRIES, "EG, VN, TH") is True
    assert is_all_selected([], "") is False
