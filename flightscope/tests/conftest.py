from typing import List, Optional, Sequence

import pytest

from flightscope.models import FlightOffer


def offer_payload(
    offer_id: str = "1",
    total: str = "100.00",
    legs: Sequence[Sequence[str]] = (("AA",),),
    durations: Optional[Sequence[str]] = None,
    departure: str = "2025-03-10T08:00:00",
    currency: str = "USD",
) -> dict:
    """Build an upstream flight-offer record; one carrier code per segment."""
    itineraries: List[dict] = []
    for i, carriers in enumerate(legs):
        segments = []
        for j, code in enumerate(carriers):
            segments.append(
                {
                    "departure": {
                        "iataCode": "WAW" if j == 0 else f"X{j}X",
                        "at": departure if (i, j) == (0, 0) else "2025-03-10T12:00:00",
                    },
                    "arrival": {"iataCode": f"Y{j}Y", "at": "2025-03-10T14:00:00"},
                    "carrierCode": code,
                    "number": str(100 + j),
                    "duration": "PT2H",
                }
            )
        duration = durations[i] if durations else "PT5H30M"
        itineraries.append({"duration": duration, "segments": segments})
    return {
        "id": offer_id,
        "oneWay": len(legs) == 1,
        "numberOfBookableSeats": 4,
        "itineraries": itineraries,
        "price": {"currency": currency, "total": total, "grandTotal": total},
        "validatingAirlineCodes": [legs[0][0]] if legs and legs[0] else [],
    }


@pytest.fixture
def make_offer():
    def _make(*args, **kwargs) -> FlightOffer:
        return FlightOffer.from_payload(offer_payload(*args, **kwargs))

    return _make


@pytest.fixture
def sample_offers(make_offer):
    return [
        make_offer("a", "120.00"),
        make_offer("b", "75.50"),
        make_offer("c", "75.50"),
        make_offer("d", "300.00"),
    ]


@pytest.fixture
def make_payload():
    return offer_payload
