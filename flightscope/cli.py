from __future__ import annotations

import logging
from typing import Optional, Tuple

import click

from .amadeus_gateway import AmadeusGateway
from .config import configure_logging, get_settings
from .errors import FlightScopeError
from .models import FlightOffer, Location
from .results import ResultsSession, ResultsView
from .search_request import SearchRequest
from .sorting import SortKey

logger = logging.getLogger(__name__)


@click.group()
@click.option("--log-level", default=None, help="Override LOG_LEVEL")
def cli(log_level: Optional[str]) -> None:
    """Search, filter and compare flight offers."""
    configure_logging(log_level or get_settings().log_level)


@cli.command()
@click.argument("origin")
@click.argument("destination")
@click.argument("departure")
@click.option("--return-date", default=None, help="Return date (YYYY-MM-DD)")
@click.option("--adults", type=int, default=1, show_default=True)
@click.option("--travel-class", default="ECONOMY", show_default=True)
@click.option("--currency", default="USD", show_default=True)
@click.option("--max", "max_results", type=int, default=50, show_default=True)
@click.option("--min-price", type=int, default=None)
@click.option("--max-price", type=int, default=None)
@click.option("--stops", type=click.IntRange(0), multiple=True, help="0, 1 or 2 (2+)")
@click.option("--airline", "airlines", multiple=True, help="Airline display name")
@click.option(
    "--sort",
    "sort_key",
    type=click.Choice([k.value for k in SortKey]),
    default=SortKey.PRICE.value,
    show_default=True,
)
@click.option("--bucket-width", type=int, default=None)
def search(
    origin: str,
    destination: str,
    departure: str,
    return_date: Optional[str],
    adults: int,
    travel_class: str,
    currency: str,
    max_results: int,
    min_price: Optional[int],
    max_price: Optional[int],
    stops: Tuple[int, ...],
    airlines: Tuple[str, ...],
    sort_key: str,
    bucket_width: Optional[int],
) -> None:
    """Search flights and print the filtered, sorted results."""
    settings = get_settings()
    gateway = AmadeusGateway.from_settings(settings)
    try:
        request = SearchRequest.build(
            origin_location_code=origin,
            destination_location_code=destination,
            departure_date=departure,
            return_date=return_date,
            adults=adults,
            travel_class=travel_class,
            currency_code=currency,
            max=max_results,
        )
        logger.info("Searching: %s ➔ %s on %s", origin, destination, departure)
        payload = gateway.search(request)
    except FlightScopeError as exc:
        raise click.ClickException(str(exc)) from exc

    session = ResultsSession(bucket_width=bucket_width or settings.histogram_bucket_width)
    session.load(payload)
    if not session.offers:
        click.echo("No flights found for your search criteria.")
        return

    low, high = session.filters.price_range
    try:
        session.update_filters(
            price_range=(
                low if min_price is None else min_price,
                high if max_price is None else min(max_price, session.filters.max_price),
            ),
            stops=frozenset(stops),
            airlines=frozenset(airlines),
        )
    except ValueError as exc:
        raise click.BadParameter(str(exc)) from exc
    session.set_sort(sort_key)

    render(session.view(), session.resolver)


@cli.command()
@click.argument("keyword")
def locations(keyword: str) -> None:
    """Look up airports and cities for KEYWORD."""
    gateway = AmadeusGateway.from_settings()
    try:
        found = gateway.search_locations(keyword)
    except FlightScopeError as exc:
        raise click.ClickException(str(exc)) from exc
    if not found:
        click.echo("No locations found")
        return
    for item in found:
        loc = Location.from_payload(item)
        click.echo(f"{loc.iata_code:4} {loc.name} ({loc.city_name}, {loc.country_name})")


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True)
@click.option("--port", type=int, default=8000, show_default=True)
def serve(host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    from .api import create_app

    uvicorn.run(create_app(), host=host, port=port)


def format_offer(offer: FlightOffer, resolver) -> str:
    legs = []
    for itin in offer.itineraries:
        if not itin.segments:
            continue
        first, last = itin.segments[0], itin.segments[-1]
        carriers = ", ".join(dict.fromkeys(resolver(s.carrier_code) for s in itin.segments))
        legs.append(
            f"{first.departure_iata} {first.departure_at} ➔ {last.arrival_iata} "
            f"{last.arrival_at} [{itin.duration}, {itin.stops} stop(s), {carriers}]"
        )
    price = f"{offer.total} {offer.price.currency}"
    return f"{price:>14}  " + " | ".join(legs)


def render(view: ResultsView, resolver=None) -> None:
    resolver = resolver or (lambda code: code)
    click.echo(f"{view.summary.count} flight(s)")
    for off in view.offers:
        click.echo(format_offer(off, resolver))

    click.echo("")
    click.echo("Airlines: " + (", ".join(view.airlines) or "-"))
    click.echo("Price distribution:")
    for bucket in view.histogram:
        click.echo(f"  {bucket.label:>11} {'#' * bucket.count} {bucket.count}")
    click.echo(
        f"Average {view.summary.average} | Lowest {view.summary.minimum} "
        f"| Options {view.summary.count}"
    )


if __name__ == "__main__":
    cli()
