from __future__ import annotations

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


@dataclass(frozen=True)
class CountryMatch:
    name: str
    code: str


# NOTE: keywords are lowercase country names plus demonym/adjective forms.
# Codes are ISO alpha-2 except the EU bloc.
COUNTRY_DATA: tuple[tuple[str, str, str], ...] = (
    ("egypt,egyptian", "Egypt", "EG"),
    ("vietnam,vietnamese", "Vietnam", "VN"),
    ("thailand,thai", "Thailand", "TH"),
    ("china,chinese", "China", "CN"),
    ("japan,japanese", "Japan", "JP"),
    ("indonesia,indonesian", "Indonesia", "ID"),
    ("malaysia,malaysian", "Malaysia", "MY"),
    ("philippines,philippine,filipino", "Philippines", "PH"),
    ("india,indian", "India", "IN"),
    ("saudi arabia,saudi", "Saudi Arabia", "SA"),
    ("uae,united arab emirates,emirati", "UAE", "AE"),
    ("brazil,brazilian", "Brazil", "BR"),
    ("russia,russian", "Russia", "RU"),
    ("turkey,turkish", "Turkey", "TR"),
    ("mexico,mexican", "Mexico", "MX"),
    ("singapore,singaporean", "Singapore", "SG"),
    ("taiwan,taiwanese", "Taiwan", "TW"),
    ("hong kong", "Hong Kong", "HK"),
    ("cambodia,cambodian", "Cambodia", "KH"),
    ("myanmar", "Myanmar", "MM"),
    ("nigeria,nigerian", "Nigeria", "NG"),
    ("south africa", "South Africa", "ZA"),
    ("kenya,kenyan", "Kenya", "KE"),
    ("ghana,ghanaian", "Ghana", "GH"),
    ("morocco,moroccan", "Morocco", "MA"),
    ("algeria,algerian", "Algeria", "DZ"),
    ("iraq,iraqi", "Iraq", "IQ"),
    ("iran,iranian", "Iran", "IR"),
    ("pakistan,pakistani", "Pakistan", "PK"),
    ("bangladesh,bangladeshi", "Bangladesh", "BD"),
    ("jordan,jordanian", "Jordan", "JO"),
    ("lebanon,lebanese", "Lebanon", "LB"),
    ("kuwait,kuwaiti", "Kuwait", "KW"),
    ("qatar,qatari", "Qatar", "QA"),
    ("oman,omani", "Oman", "OM"),
    ("bahrain,bahraini", "Bahrain", "BH"),
    ("australia,australian", "Australia", "AU"),
    ("canada,canadian", "Canada", "CA"),
    ("colombia,colombian", "Colombia", "CO"),
    ("chile,chilean", "Chile", "CL"),
    ("peru,peruvian", "Peru", "PE"),
    ("argentina,argentine", "Argentina", "AR"),
    ("uzbekistan", "Uzbekistan", "UZ"),
    ("kazakhstan", "Kazakhstan", "KZ"),
    ("mongolia,mongolian", "Mongolia", "MN"),
    ("new zealand", "New Zealand", "NZ"),
    ("united states,usa,american", "USA", "US"),
    ("european union,eu,european", "EU", "EU"),
)


def _build_keyword_map(rows: tuple[tuple[str, str, str], ...]) -> dict[str, CountryMatch]:
    out: dict[str, CountryMatch] = {}
    for keywords, name, code in rows:
        for kw in keywords.split(","):
            kw = kw.strip()
            if kw:
                out[kw] = CountryMatch(name=name, code=code)
    return out


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    body = r"\s+".join(re.escape(w) for w in keyword.split())
    return re.compile(rf"\b{body}\b", flags=re.IGNORECASE | re.ASCII)


COUNTRY_KEYWORDS: Mapping[str, CountryMatch] = MappingProxyType(_build_keyword_map(COUNTRY_DATA))

# Longest keyword first so "united arab emirates" beats any shorter hit.
_MATCHERS: tuple[tuple[re.Pattern[str], CountryMatch], ...] = tuple(
    (_keyword_pattern(kw), info)
    for kw, info in sorted(COUNTRY_KEYWORDS.items(), key=lambda kv: len(kv[0]), reverse=True)
)


def detect_country_from_text(text: str) -> Optional[CountryMatch]:
    lower = (text or "").lower()
    for pattern, info in _MATCHERS:
        if pattern.search(lower):
            return info
    return None
