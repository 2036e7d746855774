from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Callable, FrozenSet, Iterable, List, Sequence, Tuple

from .airlines import airline_name
from .models import FlightOffer

Resolver = Callable[[str], str]

DEFAULT_MAX_PRICE = 5000
STOPS_CAP = 2  # "2+" bucket
PRICE_STEP = 100


# ────────────────────────────────────────────────────────────────
# 1.  Filter state
# ────────────────────────────────────────────────────────────────


@dataclass(frozen=True, slots=True)
class FilterState:
    """Live filter criteria for one result set.

    ``price_range`` is inclusive and always satisfies
    ``0 <= low <= high <= max_price``.  Empty ``stops``/``airlines`` sets
    mean "no restriction".
    """

    price_range: Tuple[int, int] = (0, DEFAULT_MAX_PRICE)
    max_price: int = DEFAULT_MAX_PRICE
    stops: FrozenSet[int] = frozenset()
    airlines: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        low, high = self.price_range
        if not 0 <= low <= high <= self.max_price:
            raise ValueError(
                f"price range {self.price_range} must lie within 0..{self.max_price}"
            )
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "price_range", (low, high))
        object.__setattr__(
            self, "stops", frozenset(normalize_stops(s) for s in self.stops)
        )
        object.__setattr__(self, "airlines", frozenset(self.airlines))

    def update(self, **changes) -> "FilterState":
        """Return a copy with *changes* applied (validated again)."""
        return replace(self, **changes)

    def reset(self) -> "FilterState":
        """Clear every criterion, keeping the current ``max_price``."""
        return FilterState(price_range=(0, self.max_price), max_price=self.max_price)

    def rebase(self, offers: Sequence[FlightOffer]) -> "FilterState":
        """Adopt the max price of a new result set and open the price range.

        An empty result set leaves the state untouched.
        """
        if not offers:
            return self
        max_price = recompute_max_price(offers, self.max_price)
        return replace(self, price_range=(0, max_price), max_price=max_price)


# ────────────────────────────────────────────────────────────────
# 2.  Predicates
# ────────────────────────────────────────────────────────────────


def normalize_stops(count: int) -> int:
    """Collapse stop counts of two or more into the single "2+" bucket."""
    if count < 0:
        raise ValueError("stop count cannot be negative")
    return min(count, STOPS_CAP)


def outbound_stops(offer: FlightOffer) -> int:
    """Stops of the first itinerary only; return legs are not filterable."""
    outbound = offer.outbound
    return outbound.stops if outbound is not None else 0


def offer_airlines(offer: FlightOffer, resolver: Resolver = airline_name) -> set[str]:
    return {resolver(code) for code in offer.carrier_codes()}


def matches_price(offer: FlightOffer, state: FilterState) -> bool:
    low, high = state.price_range
    return low <= offer.total <= high


def matches_stops(offer: FlightOffer, state: FilterState) -> bool:
    if not state.stops:
        return True
    return normalize_stops(outbound_stops(offer)) in state.stops


def matches_airlines(
    offer: FlightOffer, state: FilterState, resolver: Resolver = airline_name
) -> bool:
    if not state.airlines:
        return True
    return not offer_airlines(offer, resolver).isdisjoint(state.airlines)


def apply_filters(
    offers: Iterable[FlightOffer],
    state: FilterState,
    resolver: Resolver = airline_name,
) -> List[FlightOffer]:
    """Offers passing the price, stops and airline predicates, order kept."""
    result = [off for off in offers if matches_price(off, state)]
    result = [off for off in result if matches_stops(off, state)]
    result = [off for off in result if matches_airlines(off, state, resolver)]
    return result


# ────────────────────────────────────────────────────────────────
# 3.  Facets
# ────────────────────────────────────────────────────────────────


def available_airlines(
    offers: Iterable[FlightOffer], resolver: Resolver = airline_name
) -> List[str]:
    """Sorted display names of every carrier flying any segment."""
    names: set[str] = set()
    for off in offers:
        names |= offer_airlines(off, resolver)
    return sorted(names)


def recompute_max_price(
    offers: Sequence[FlightOffer], current: int = DEFAULT_MAX_PRICE
) -> int:
    """Highest total rounded up to the next hundred; *current* if no offers."""
    if not offers:
        return current
    highest = max(off.total for off in offers)
    return int(math.ceil(highest / PRICE_STEP)) * PRICE_STEP


__all__ = [
    "FilterState",
    "normalize_stops",
    "outbound_stops",
    "apply_filters",
    "available_airlines",
    "recompute_max_price",
    "DEFAULT_MAX_PRICE",
]
