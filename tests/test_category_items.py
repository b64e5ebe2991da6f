from __future__ import annotations

from text_import.category_items import split_category_items


def test_parenthetical_commas_are_not_split() -> None:
    assert split_category_items("A, B (with C, D), plus E") == ["A", "B (with C, D)", "E"]


def test_single_label_stays_whole() -> None:
    assert split_category_items("Single Category") == ["Single Category"]


def test_ampersand_inside_item_is_kept() -> None:
    assert split_category_items("Serums & Body Oils") == ["Serums & Body Oils"]


def test_leading_connectives_are_stripped_case_insensitively() -> None:
    assert split_category_items("Toners, AND Mists, & Essences, Plus Ampoules") == [
        "Toners",
        "Mists",
        "Essences",
        "Ampoules",
    ]


def test_connective_without_following_space_is_kept() -> None:
    assert split_category_items("Creams, Andes Clay Masks") == ["Creams", "Andes Clay Masks"]


def test_empty_pieces_are_dropped_and_duplicates_kept() -> None:
    assert split_category_items(" , Masks,, Masks , ") == ["Masks", "Masks"]
    assert split_category_items("") == []


def test_multiple_parentheses_are_restored_in_order() -> None:
    text = "Sun Cream (SPF50, PA++++), Lip Balm (tinted), Cleanser"
    assert split_category_items(text) == ["Sun Cream (SPF50, PA++++)", "Lip Balm (tinted)", "Cleanser"]
