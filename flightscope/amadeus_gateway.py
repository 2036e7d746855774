from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from .config import Settings, get_settings
from .errors import (
    AuthenticationError,
    InvalidSearchError,
    SearchFailedError,
    ValidationError,
)
from .search_request import SearchRequest
from .token_cache import TokenCache

logger = logging.getLogger(__name__)

OFFERS_PATH = "/v2/shopping/flight-offers"
LOCATIONS_PATH = "/v1/reference-data/locations"


class AmadeusGateway:
    """
    Thin client for the Amadeus flight-offers and location endpoints.

    Payloads are passed through as returned; only errors are normalised.
    """

    def __init__(
        self,
        tokens: TokenCache,
        *,
        base_url: str = "https://test.api.amadeus.com",
        session: Optional[requests.Session] = None,
        search_timeout: float = 30.0,
        location_timeout: float = 10.0,
    ) -> None:
        self.tokens = tokens
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.search_timeout = search_timeout
        self.location_timeout = location_timeout

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "AmadeusGateway":
        settings = settings or get_settings()
        session = requests.Session()
        tokens = TokenCache(
            settings.amadeus_api_key,
            settings.amadeus_api_secret,
            base_url=settings.amadeus_base_url,
            session=session,
            safety_margin_s=settings.token_safety_margin_s,
        )
        return cls(
            tokens,
            base_url=settings.amadeus_base_url,
            session=session,
            search_timeout=settings.search_timeout_s,
            location_timeout=settings.location_timeout_s,
        )

    def search_flights(
        self,
        origin: str,
        destination: str,
        departure_date: str,
        return_date: str | None = None,
        adults: int = 1,
        travel_class: str = "ECONOMY",
        currency: str = "USD",
        max_results: int = 50,
    ) -> list[dict]:
        """Return the upstream offer list for a route."""
        request = SearchRequest.build(
            origin_location_code=origin,
            destination_location_code=destination,
            departure_date=departure_date,
            return_date=return_date,
            adults=adults,
            travel_class=travel_class,
            currency_code=currency,
            max=max_results,
        )
        return self.search(request).get("data", [])

    def search(self, request: SearchRequest) -> dict:
        """Run a validated search and return the whole upstream payload."""
        params = request.to_params()
        try:
            resp = self._get(OFFERS_PATH, params, self.search_timeout)
        except requests.Timeout as exc:
            logger.error("Flight search timed out after %ss", self.search_timeout)
            raise SearchFailedError("Flight search timed out") from exc
        except requests.RequestException as exc:
            logger.error("Flight search request failed: %s", exc)
            raise SearchFailedError("Failed to search flights") from exc

        if resp.status_code == 401:
            raise AuthenticationError("Authentication expired. Please try again.")
        if resp.status_code == 400:
            detail = _error_detail(resp) or "Invalid search parameters"
            logger.warning("Flight search rejected: %s", detail)
            raise InvalidSearchError(detail)
        if resp.status_code != 200:
            detail = _error_detail(resp)
            logger.error("Flight search failed with HTTP %s", resp.status_code)
            raise SearchFailedError(detail or "Failed to search flights")

        try:
            payload = resp.json()
        except ValueError as exc:
            raise SearchFailedError("Malformed flight search response") from exc
        if not isinstance(payload, dict):
            logger.error("Flight search returned a non-object body")
            raise SearchFailedError("Malformed flight search response")

        logger.info(
            "Found %d flights %s ➔ %s on %s",
            len(payload.get("data") or []),
            request.origin_location_code,
            request.destination_location_code,
            request.departure_date,
        )
        return payload

    def search_locations(self, keyword: str) -> list[dict]:
        """Airports and cities matching *keyword*; empty on upstream trouble."""
        keyword = (keyword or "").strip()
        if len(keyword) < 2:
            raise ValidationError("keyword", "Keyword must be at least 2 characters")

        params = {"keyword": keyword, "subType": "AIRPORT,CITY", "page[limit]": 10}
        try:
            resp = self._get(LOCATIONS_PATH, params, self.location_timeout)
        except requests.RequestException as exc:
            logger.warning("Location search for %r failed: %s", keyword, exc)
            return []

        if resp.status_code == 401:
            raise AuthenticationError("Authentication expired. Please try again.")
        if resp.status_code != 200:
            logger.warning(
                "Location search for %r failed with HTTP %s", keyword, resp.status_code
            )
            return []

        try:
            body = resp.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            logger.warning("Malformed location response for %r", keyword)
            return []
        locations = body.get("data") or []
        logger.info("Found %d locations for %r", len(locations), keyword)
        return locations

    def _get(self, path: str, params: dict[str, Any], timeout: float) -> requests.Response:
        """GET with a bearer token; one retry with a fresh token on 401."""
        url = f"{self.base_url}{path}"
        resp = self._send(url, params, timeout)
        if resp.status_code == 401:
            logger.info("Upstream answered 401, refreshing token and retrying once")
            self.tokens.invalidate()
            resp = self._send(url, params, timeout)
            if resp.status_code == 401:
                self.tokens.invalidate()
        return resp

    def _send(self, url: str, params: dict[str, Any], timeout: float) -> requests.Response:
        token = self.tokens.get()
        return self.session.get(
            url,
            params=params,
            headers={"Authorization": f"Bearer {token}"},
            timeout=timeout,
        )


def _error_detail(resp: requests.Response) -> str:
    try:
        errors = resp.json().get("errors") or []
    except (ValueError, AttributeError):
        return ""
    if errors and isinstance(errors[0], dict):
        return errors[0].get("detail") or errors[0].get("title") or ""
    return ""


__all__ = ["AmadeusGateway", "OFFERS_PATH", "LOCATIONS_PATH"]
