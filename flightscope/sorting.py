from __future__ import annotations

import re
from enum import Enum
from typing import Iterable, List, Union

from .models import FlightOffer

_DURATION_RE = re.compile(
    r"P(?:(?P<days>\d+)D)?(?:T(?:(?P<hours>\d+)H)?(?:(?P<minutes>\d+)M)?(?:\d+(?:\.\d+)?S)?)?"
)


class SortKey(str, Enum):
    PRICE = "price"
    DURATION = "duration"
    DEPARTURE = "departure"


def parse_duration_minutes(text: str) -> int:
    """Parse an ISO 8601 duration such as ``PT2H30M`` or ``P1DT4H`` to minutes.

    Unparseable text sorts last.
    """
    match = _DURATION_RE.fullmatch(text or "")
    if not match or text in ("P", "PT"):
        return 10**9
    parts = {k: int(v) if v else 0 for k, v in match.groupdict().items()}
    return parts["days"] * 1440 + parts["hours"] * 60 + parts["minutes"]


def _price_key(offer: FlightOffer):
    return offer.total


def _duration_key(offer: FlightOffer) -> int:
    outbound = offer.outbound
    return parse_duration_minutes(outbound.duration if outbound else "")


def _departure_key(offer: FlightOffer) -> str:
    outbound = offer.outbound
    if outbound is None or not outbound.segments:
        return ""
    return outbound.segments[0].departure_at


_KEYS = {
    SortKey.PRICE: _price_key,
    SortKey.DURATION: _duration_key,
    SortKey.DEPARTURE: _departure_key,
}


def sort_offers(
    offers: Iterable[FlightOffer], key: Union[SortKey, str] = SortKey.PRICE
) -> List[FlightOffer]:
    """Return a new list ordered by *key*; equal items keep their order."""
    try:
        sort_key = SortKey(key)
    except ValueError:
        raise ValueError(
            f"unknown sort key {key!r}, expected one of "
            + ", ".join(k.value for k in SortKey)
        ) from None
    return sorted(offers, key=_KEYS[sort_key])


__all__ = ["SortKey", "sort_offers", "parse_duration_minutes"]
