from unittest.mock import Mock

import pytest
import requests

from flightscope.amadeus_gateway import AmadeusGateway
from flightscope.errors import (
    AuthenticationError,
    InvalidSearchError,
    SearchFailedError,
    ValidationError,
)
from flightscope.token_cache import TokenCache


def make_gateway(*responses):
    tokens = Mock(spec=TokenCache)
    tokens.get.return_value = "tok"
    session = Mock()
    session.get.side_effect = list(responses)
    return AmadeusGateway(tokens, session=session), tokens, session


def response(status_code=200, body=None):
    resp = Mock(status_code=status_code)
    resp.json.return_value = body if body is not None else {}
    return resp


def test_search_passes_payload_through(make_payload):
    payload = {
        "meta": {"count": 1},
        "data": [make_payload("1", "199.99")],
        "dictionaries": {"carriers": {"AA": "AMERICAN AIRLINES"}},
    }
    gw, tokens, session = make_gateway(response(200, payload))

    offers = gw.search_flights("waw", "JFK", "2025-03-10", adults=2)

    assert offers == payload["data"]
    url = session.get.call_args.args[0]
    kwargs = session.get.call_args.kwargs
    assert url == "https://test.api.amadeus.com/v2/shopping/flight-offers"
    assert kwargs["headers"] == {"Authorization": "Bearer tok"}
    assert kwargs["timeout"] == 30.0
    assert kwargs["params"] == {
        "originLocationCode": "WAW",
        "destinationLocationCode": "JFK",
        "departureDate": "2025-03-10",
        "adults": 2,
        "travelClass": "ECONOMY",
        "currencyCode": "USD",
        "max": 50,
    }


@pytest.mark.parametrize(
    "kwargs,field",
    [
        ({"origin": "US"}, "originLocationCode"),
        ({"destination": "J1K"}, "destinationLocationCode"),
        ({"departure_date": "10-03-2025"}, "departureDate"),
        ({"return_date": "2025/03/20"}, "returnDate"),
    ],
)
def test_invalid_input_rejected_before_network(kwargs, field):
    gw, tokens, session = make_gateway()
    args = {"origin": "WAW", "destination": "JFK", "departure_date": "2025-03-10"}
    args.update(kwargs)
    with pytest.raises(ValidationError) as info:
        gw.search_flights(**args)
    assert info.value.field == field
    session.get.assert_not_called()
    tokens.get.assert_not_called()


def test_401_retries_once_with_fresh_token():
    gw, tokens, session = make_gateway(response(401), response(200, {"data": []}))
    assert gw.search_flights("WAW", "JFK", "2025-03-10") == []
    tokens.invalidate.assert_called_once()
    assert session.get.call_count == 2
    assert tokens.get.call_count == 2


def test_repeated_401_raises_authentication_error():
    gw, tokens, session = make_gateway(response(401), response(401))
    with pytest.raises(AuthenticationError):
        gw.search_flights("WAW", "JFK", "2025-03-10")
    assert session.get.call_count == 2


def test_400_carries_upstream_detail():
    body = {"errors": [{"status": 400, "title": "INVALID DATE", "detail": "Date is in the past"}]}
    gw, _, _ = make_gateway(response(400, body))
    with pytest.raises(InvalidSearchError) as info:
        gw.search_flights("WAW", "JFK", "2020-01-01")
    assert info.value.detail == "Date is in the past"


def test_server_error_and_timeout_raise_search_failed():
    gw, _, _ = make_gateway(response(500, {"errors": [{"detail": "Upstream down"}]}))
    with pytest.raises(SearchFailedError, match="Upstream down"):
        gw.search_flights("WAW", "JFK", "2025-03-10")

    gw, _, _ = make_gateway(requests.Timeout("slow"))
    with pytest.raises(SearchFailedError):
        gw.search_flights("WAW", "JFK", "2025-03-10")


def test_token_failure_is_not_swallowed():
    gw, tokens, session = make_gateway()
    tokens.get.side_effect = AuthenticationError("bad credentials")
    with pytest.raises(AuthenticationError):
        gw.search_flights("WAW", "JFK", "2025-03-10")
    session.get.assert_not_called()


def test_search_locations_returns_data():
    locations = [{"iataCode": "PAR", "name": "PARIS", "subType": "CITY"}]
    gw, _, session = make_gateway(response(200, {"data": locations}))

    assert gw.search_locations("  par ") == locations
    kwargs = session.get.call_args.kwargs
    assert kwargs["params"] == {"keyword": "par", "subType": "AIRPORT,CITY", "page[limit]": 10}
    assert kwargs["timeout"] == 10.0


def test_search_locations_short_keyword():
    gw, _, session = make_gateway()
    with pytest.raises(ValidationError):
        gw.search_locations("p")
    session.get.assert_not_called()


def test_search_locations_degrades_silently():
    gw, _, _ = make_gateway(response(500))
    assert gw.search_locations("paris") == []

    gw, _, _ = make_gateway(requests.ConnectionError("down"))
    assert gw.search_locations("paris") == []


@pytest.mark.parametrize("body", [["x"], "oops", None])
def test_search_locations_non_object_body(body):
    resp = response(200)
    resp.json.return_value = body
    gw, _, _ = make_gateway(resp)
    assert gw.search_locations("paris") == []


@pytest.mark.parametrize("body", [["x"], "oops", None])
def test_search_non_object_body_raises_search_failed(body):
    resp = response(200)
    resp.json.return_value = body
    gw, _, _ = make_gateway(resp)
    with pytest.raises(SearchFailedError, match="Malformed"):
        gw.search_flights("WAW", "JFK", "2025-03-10")


def test_search_locations_auth_failure_propagates():
    gw, tokens, _ = make_gateway(response(401), response(401))
    with pytest.raises(AuthenticationError):
        gw.search_locations("paris")
