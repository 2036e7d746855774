from __future__ import annotations

from typing import Mapping, Optional

# Common carriers; anything else falls back to the upstream dictionaries
# or the bare code.
AIRLINE_NAMES = {
    "AA": "American Airlines",
    "UA": "United Airlines",
    "DL": "Delta Air Lines",
    "BA": "British Airways",
    "LH": "Lufthansa",
    "AF": "Air France",
    "KL": "KLM",
    "EK": "Emirates",
    "QR": "Qatar Airways",
    "TK": "Turkish Airlines",
    "SQ": "Singapore Airlines",
    "CX": "Cathay Pacific",
    "JL": "Japan Airlines",
    "NH": "All Nippon Airways",
    "QF": "Qantas",
    "VS": "Virgin Atlantic",
    "EY": "Etihad Airways",
    "SU": "Aeroflot",
    "LX": "Swiss International Air Lines",
    "OS": "Austrian Airlines",
    "SK": "Scandinavian Airlines",
    "AZ": "ITA Airways",
    "TP": "TAP Air Portugal",
    "IB": "Iberia",
    "AC": "Air Canada",
    "NZ": "Air New Zealand",
    "SA": "South African Airways",
    "KE": "Korean Air",
    "OZ": "Asiana Airlines",
    "PR": "Philippine Airlines",
    "TG": "Thai Airways",
    "VN": "Vietnam Airlines",
    "CI": "China Airlines",
    "BR": "EVA Air",
}


def airline_name(code: str) -> str:
    """Return the display name for *code*, or the code itself."""
    return AIRLINE_NAMES.get(code, code)


class AirlineNameResolver:
    """Carrier code lookup that can learn names from search payloads.

    The static table wins over names learned from upstream ``dictionaries``
    so display names stay stable between searches.
    """

    def __init__(self, names: Optional[Mapping[str, str]] = None) -> None:
        self._learned: dict[str, str] = {}
        self._names = dict(AIRLINE_NAMES if names is None else names)

    def __call__(self, code: str) -> str:
        if code in self._names:
            return self._names[code]
        return self._learned.get(code, code)

    def learn(self, payload: Mapping) -> None:
        """Pick up ``dictionaries.carriers`` from a flight-offers payload."""
        carriers = (payload.get("dictionaries") or {}).get("carriers") or {}
        for code, name in carriers.items():
            if name:
                self._learned[code] = _title(name)


def _title(name: str) -> str:
    # upstream sends carrier names in upper case ("LOT POLISH AIRLINES")
    return name.title() if name.isupper() else name


__all__ = ["AIRLINE_NAMES", "airline_name", "AirlineNameResolver"]
