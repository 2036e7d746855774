"""Data models used throughout the project.

Upstream records are kept as plain dicts on the wire; these frozen
dataclasses are built from them at the boundary so the filter, sort and
histogram code can work on typed values (prices as ``Decimal``).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping, Optional, Tuple


@dataclass(frozen=True, slots=True)
class Segment:
    carrier_code: str
    number: str
    departure_iata: str
    departure_at: str
    arrival_iata: str
    arrival_at: str
    duration: str = ""

    @classmethod
    def from_payload(cls, item: Mapping[str, Any]) -> "Segment":
        dep = item.get("departure") or {}
        arr = item.get("arrival") or {}
        return cls(
            carrier_code=item.get("carrierCode", ""),
            number=str(item.get("number", "")),
            departure_iata=dep.get("iataCode", ""),
            departure_at=dep.get("at", ""),
            arrival_iata=arr.get("iataCode", ""),
            arrival_at=arr.get("at", ""),
            duration=item.get("duration", ""),
        )


@dataclass(frozen=True, slots=True)
class Itinerary:
    duration: str
    segments: Tuple[Segment, ...]

    @property
    def stops(self) -> int:
        return max(len(self.segments) - 1, 0)

    @classmethod
    def from_payload(cls, item: Mapping[str, Any]) -> "Itinerary":
        return cls(
            duration=item.get("duration", ""),
            segments=tuple(
                Segment.from_payload(seg) for seg in item.get("segments", [])
            ),
        )


@dataclass(frozen=True, slots=True)
class Price:
    currency: str
    total: Decimal

    @classmethod
    def from_payload(cls, item: Mapping[str, Any]) -> "Price":
        raw = item.get("total", "0")
        try:
            total = Decimal(str(raw))
        except InvalidOperation as exc:
            raise ValueError(f"invalid price total: {raw!r}") from exc
        if not total.is_finite():
            raise ValueError(f"invalid price total: {raw!r}")
        return cls(currency=item.get("currency", ""), total=total)


@dataclass(frozen=True, slots=True)
class FlightOffer:
    id: str
    itineraries: Tuple[Itinerary, ...]
    price: Price
    seats: Optional[int] = None
    one_way: bool = False
    instant_ticketing_required: bool = False
    last_ticketing_date: Optional[str] = None
    validating_airlines: Tuple[str, ...] = ()
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def total(self) -> Decimal:
        return self.price.total

    @property
    def outbound(self) -> Optional[Itinerary]:
        return self.itineraries[0] if self.itineraries else None

    def carrier_codes(self) -> list[str]:
        """Carrier codes of every segment of every itinerary, in order."""
        return [
            seg.carrier_code for itin in self.itineraries for seg in itin.segments
        ]

    @classmethod
    def from_payload(cls, item: Mapping[str, Any]) -> "FlightOffer":
        seats = item.get("numberOfBookableSeats")
        return cls(
            id=str(item.get("id", "")),
            itineraries=tuple(
                Itinerary.from_payload(it) for it in item.get("itineraries", [])
            ),
            price=Price.from_payload(item.get("price") or {}),
            seats=int(seats) if seats is not None else None,
            one_way=bool(item.get("oneWay", False)),
            instant_ticketing_required=bool(
                item.get("instantTicketingRequired", False)
            ),
            last_ticketing_date=item.get("lastTicketingDate"),
            validating_airlines=tuple(item.get("validatingAirlineCodes", [])),
            raw=item,
        )


@dataclass(frozen=True, slots=True)
class Location:
    iata_code: str
    name: str
    city_name: str = ""
    country_name: str = ""
    sub_type: str = ""

    @classmethod
    def from_payload(cls, item: Mapping[str, Any]) -> "Location":
        address = item.get("address") or {}
        return cls(
            iata_code=item.get("iataCode", ""),
            name=item.get("name", ""),
            city_name=address.get("cityName", ""),
            country_name=address.get("countryName", ""),
            sub_type=item.get("subType", ""),
        )


def parse_offers(items: list[Mapping[str, Any]]) -> list[FlightOffer]:
    """Map upstream offer records onto ``FlightOffer`` objects."""
    return [FlightOffer.from_payload(item) for item in items]


__all__ = [
    "Segment",
    "Itinerary",
    "Price",
    "FlightOffer",
    "Location",
    "parse_offers",
]
