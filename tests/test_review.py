from __future__ import annotations

import pytest

from text_import.candidates import ParsedProductCandidate
from text_import.review import ReviewList


def _review() -> ReviewList:
    return ReviewList(
        [
            ParsedProductCandidate(name="Toners", category="Toners"),
            ParsedProductCandidate(name="Mists", category="Mists"),
            ParsedProductCandidate(name="Essences", category="Essences"),
        ]
    )


def test_update_replaces_candidate() -> None:
    review = _review()
    before = review.items[0]
    updated = review.update(0, {"ingredients": "Panthenol", "target_countries": "VN"})
    assert updated.ingredients == "Panthenol"
    assert review.items[0] is updated
    assert before.ingredients == ""


def test_update_rejects_unknown_fields() -> None:
    with pytest.raises(KeyError):
        _review().update(0, {"code": "VN"})


def test_toggle_remove_and_selected() -> None:
    review = _review()
    review.toggle(1)
    assert [c.name for c in review.selected()] == ["Toners", "Essences"]
    removed = review.remove(0)
    assert removed.name == "Toners"
    assert [c.name for c in review.items] == ["Mists", "Essences"]
    assert len(review) == 2


def test_select_all_and_deselect_all() -> None:
    review = _review()
    review.set_all_selected(False)
    assert review.selected() == []
    review.set_all_selected(True)
    assert len(review.selected()) == 3


def test_out_of_range_rows() -> None:
    review = _review()
    with pytest.raises(IndexError):
        review.toggle(3)
    with pytest.raises(IndexError):
        review.remove(-1)
