from __future__ import annotations

from typing import Iterable


def selected_codes(value: str | None) -> list[str]:
    return [s.strip() for s in (value or "").split(",") if s.strip()]


def _codes(countries: Iterable[dict]) -> list[str]:
    return [str(c.get("code") or "") for c in countries if c.get("code")]


def is_all_selected(countries: list[dict], value: str | None) -> bool:
    return len(countries) > 0 and len(selected_codes(value)) == len(countries)


def toggle_code(value: str | None, code: str) -> str:
    current = selected_codes(value)
    if code in current:
        current = [c for c in current if c != code]
    else:
        current.append(code)
    return ", ".join(current)


def toggle_all(countries: list[dict], value: str | None) -> str:
    if is_all_selected(countries, value):
        return ""
    return ", ".join(_codes(countries))


def selection_label(countries: list[dict], value: str | None) -> str:
    codes = selected_codes(value)
    if not codes:
        return "Select countries"
    if is_all_selected(countries, value):
        return f"All selected ({len(countries)})"
    return f"{len(codes)} selected ({', '.join(codes)})"
