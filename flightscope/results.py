from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Union

from .airlines import AirlineNameResolver
from .histogram import (
    DEFAULT_BUCKET_WIDTH,
    PriceBucket,
    PriceSummary,
    build_histogram,
    price_summary,
)
from .models import FlightOffer, parse_offers
from .offer_filter import FilterState, apply_filters, available_airlines
from .sorting import SortKey, sort_offers

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ResultsView:
    offers: List[FlightOffer]
    histogram: List[PriceBucket]
    airlines: List[str]
    summary: PriceSummary
    filters: FilterState


class ResultsSession:
    """In-memory state of one user's result page.

    Holds the raw offers of the latest search together with the filter and
    sort state; every ``view()`` is derived from scratch.
    """

    def __init__(
        self,
        *,
        resolver: Optional[AirlineNameResolver] = None,
        bucket_width: int = DEFAULT_BUCKET_WIDTH,
    ) -> None:
        self.resolver = resolver or AirlineNameResolver()
        self.bucket_width = bucket_width
        self.offers: List[FlightOffer] = []
        self.filters = FilterState()
        self.sort_key = SortKey.PRICE

    def load(self, payload: Mapping[str, Any]) -> None:
        """Replace the offers with those of a flight-offers payload."""
        self.resolver.learn(payload)
        self.set_offers(parse_offers(payload.get("data") or []))

    def set_offers(self, offers: List[FlightOffer]) -> None:
        self.offers = list(offers)
        self.filters = self.filters.rebase(self.offers)
        logger.info(
            "Loaded %d offers, max price now %s", len(self.offers), self.filters.max_price
        )

    def update_filters(self, **changes: Any) -> FilterState:
        self.filters = self.filters.update(**changes)
        return self.filters

    def reset_filters(self) -> FilterState:
        self.filters = self.filters.reset()
        return self.filters

    def set_sort(self, key: Union[SortKey, str]) -> None:
        self.sort_key = SortKey(key)

    def view(self) -> ResultsView:
        filtered = apply_filters(self.offers, self.filters, self.resolver)
        return ResultsView(
            offers=sort_offers(filtered, self.sort_key),
            histogram=build_histogram(filtered, self.bucket_width),
            airlines=available_airlines(self.offers, self.resolver),
            summary=price_summary(filtered),
            filters=self.filters,
        )


__all__ = ["ResultsSession", "ResultsView"]
