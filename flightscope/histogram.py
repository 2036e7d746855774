from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import List, Sequence

import pandas as pd

from .models import FlightOffer

logger = logging.getLogger(__name__)

DEFAULT_BUCKET_WIDTH = 50


@dataclass(frozen=True, slots=True)
class PriceBucket:
    label: str
    lower_bound: int
    count: int


@dataclass(frozen=True, slots=True)
class PriceSummary:
    average: int
    minimum: Decimal
    count: int


def round_half_up(value: Decimal) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def build_histogram(
    offers: Sequence[FlightOffer], bucket_width: int = DEFAULT_BUCKET_WIDTH
) -> List[PriceBucket]:
    """Count offers per fixed-width price range.

    Parameters
    ----------
    offers:
        Offers to bucket, usually the currently filtered set.
    bucket_width:
        Width of each range in whole currency units.

    Only ranges holding at least one offer are returned, cheapest first.
    """
    if bucket_width <= 0:
        raise ValueError("bucket_width must be greater than 0")
    if not offers:
        return []

    df = pd.DataFrame({"price": [round_half_up(off.total) for off in offers]})
    df["lower"] = (df["price"] // bucket_width) * bucket_width
    counts = df.groupby("lower").size().sort_index()

    buckets = [
        PriceBucket(
            label=f"{int(lower)}-{int(lower) + bucket_width}",
            lower_bound=int(lower),
            count=int(count),
        )
        for lower, count in counts.items()
    ]
    logger.debug("Bucketed %d offers into %d ranges", len(offers), len(buckets))
    return buckets


def average_price(offers: Sequence[FlightOffer]) -> int:
    if not offers:
        return 0
    total = sum((off.total for off in offers), Decimal("0"))
    return round_half_up(total / len(offers))


def min_price(offers: Sequence[FlightOffer]) -> Decimal:
    if not offers:
        return Decimal("0")
    return min(off.total for off in offers)


def price_summary(offers: Sequence[FlightOffer]) -> PriceSummary:
    """Average, lowest price and number of options for a result set."""
    return PriceSummary(
        average=average_price(offers),
        minimum=min_price(offers),
        count=len(offers),
    )


__all__ = [
    "PriceBucket",
    "PriceSummary",
    "build_histogram",
    "average_price",
    "min_price",
    "price_summary",
    "round_half_up",
    "DEFAULT_BUCKET_WIDTH",
]
