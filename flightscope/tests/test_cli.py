from unittest.mock import patch

from click.testing import CliRunner

from flightscope.cli import cli
from flightscope.errors import SearchFailedError


def make_search_payload(make_payload):
    return {
        "data": [
            make_payload("1", "120.00", legs=[("LH",)], durations=["PT9H"]),
            make_payload("2", "75.50", legs=[("BA", "BA")], durations=["PT10H"]),
            make_payload("3", "310.00", legs=[("EK",)], durations=["PT2H"]),
        ]
    }


@patch("flightscope.amadeus_gateway.AmadeusGateway.search")
def test_search_renders_filtered_view(mock_search, make_payload):
    mock_search.return_value = make_search_payload(make_payload)
    runner = CliRunner()
    result = runner.invoke(
        cli, ["search", "waw", "jfk", "2025-03-10", "--max-price", "200", "--sort", "duration"]
    )

    assert result.exit_code == 0, result.output
    request = mock_search.call_args.args[0]
    assert request.origin_location_code == "WAW"
    assert "2 flight(s)" in result.output
    assert result.output.index("120.00 USD") < result.output.index("75.50 USD")
    assert "Airlines: British Airways, Emirates, Lufthansa" in result.output
    assert "50-100 # 1" in result.output
    assert "Average 98 | Lowest 75.50 | Options 2" in result.output


@patch("flightscope.amadeus_gateway.AmadeusGateway.search")
def test_search_stop_and_airline_filters(mock_search, make_payload):
    mock_search.return_value = make_search_payload(make_payload)
    result = CliRunner().invoke(
        cli, ["search", "WAW", "JFK", "2025-03-10", "--stops", "0", "--airline", "Emirates"]
    )
    assert result.exit_code == 0, result.output
    assert "1 flight(s)" in result.output
    assert "310.00 USD" in result.output


@patch("flightscope.amadeus_gateway.AmadeusGateway.search")
def test_search_validation_error(mock_search):
    result = CliRunner().invoke(cli, ["search", "US", "JFK", "2025-03-10"])
    assert result.exit_code != 0
    assert "originLocationCode" in result.output
    mock_search.assert_not_called()


@patch("flightscope.amadeus_gateway.AmadeusGateway.search")
def test_search_upstream_failure(mock_search):
    mock_search.side_effect = SearchFailedError("Flight search timed out")
    result = CliRunner().invoke(cli, ["search", "WAW", "JFK", "2025-03-10"])
    assert result.exit_code == 1
    assert "Flight search timed out" in result.output


@patch("flightscope.amadeus_gateway.AmadeusGateway.search")
def test_search_no_results(mock_search):
    mock_search.return_value = {"data": []}
    result = CliRunner().invoke(cli, ["search", "WAW", "JFK", "2025-03-10"])
    assert result.exit_code == 0
    assert "No flights found" in result.output


@patch("flightscope.amadeus_gateway.AmadeusGateway.search_locations")
def test_locations_command(mock_locations):
    mock_locations.return_value = [
        {
            "iataCode": "CDG",
            "name": "CHARLES DE GAULLE",
            "subType": "AIRPORT",
            "address": {"cityName": "PARIS", "countryName": "FRANCE"},
        }
    ]
    result = CliRunner().invoke(cli, ["locations", "paris"])
    assert result.exit_code == 0
    assert "CDG  CHARLES DE GAULLE (PARIS, FRANCE)" in result.output
