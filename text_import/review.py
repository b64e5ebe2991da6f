from __future__ import annotations

from dataclasses import fields, replace
from typing import Any, Generic, Iterable, TypeVar

from text_import.candidates import ParsedCountryCandidate, ParsedProductCandidate


C = TypeVar("C", ParsedProductCandidate, ParsedCountryCandidate)


class ReviewList(Generic[C]):
    """
    Editable list of parsed candidates between parse and save.

    Rows are addressed by position only; removing a row shifts the ones after
    it. Mutations replace the candidate object instead of editing it in place.
    """

    def __init__(self, items: Iterable[C]) -> None:
        self._items: list[C] = list(items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> list[C]:
        return list(self._items)

    def _check_index(self, index: int) -> None:
        if index < 0 or index >= len(self._items):
            raise IndexError(f"review row {index} out of range (rows={len(self._items)})")

    def update(self, index: int, changes: dict[str, Any]) -> C:
        self._check_index(index)
        current = self._items[index]
        allowed = {f.name for f in fields(current)}
        unknown = sorted(set(changes) - allowed)
        if unknown:
            raise KeyError(f"unknown field(s): {', '.join(unknown)}")
        updated = replace(current, **changes)
        self._items[index] = updated
        return updated

    def toggle(self, index: int) -> C:
        self._check_index(index)
        return self.update(index, {"selected": not self._items[index].selected})

    def remove(self, index: int) -> C:
        self._check_index(index)
        return self._items.pop(index)

    def set_all_selected(self, selected: bool) -> None:
        self._items = [replace(c, selected=selected) for c in self._items]

    def selected(self) -> list[C]:
        return [c for c in self._items if c.selected]
