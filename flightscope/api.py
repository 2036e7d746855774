"""HTTP API consumed by the search page.

One route, ``GET /api/flights``, serves both the location autocomplete
(``action=locations``) and the flight-offers search.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .amadeus_gateway import AmadeusGateway
from .errors import (
    FlightScopeError,
    InvalidSearchError,
    ValidationError,
)
from .search_request import PARAM_NAMES, SearchRequest

logger = logging.getLogger(__name__)

# upstream query parameter -> SearchRequest field
QUERY_FIELDS = {param: name for name, param in PARAM_NAMES.items()}


def create_app(gateway: Optional[AmadeusGateway] = None) -> FastAPI:
    app = FastAPI(title="flightscope", version="v1")
    app.state.gateway = gateway or AmadeusGateway.from_settings()

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        message = "Method not allowed" if exc.status_code == 405 else exc.detail
        return JSONResponse(status_code=exc.status_code, content={"error": message})

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return JSONResponse(
            status_code=400, content={"error": exc.message, "field": exc.field}
        )

    @app.exception_handler(Exception)
    async def unexpected_error(request: Request, exc: Exception):
        logger.error("API route error: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": "An unexpected error occurred",
            },
        )

    @app.get("/health")
    def health():
        return {"ok": True, "service": "flightscope"}

    @app.get("/api/flights")
    def flights(request: Request):
        query = request.query_params
        gw: AmadeusGateway = request.app.state.gateway

        if query.get("action") == "locations":
            return _locations(gw, query.get("keyword"))

        fields = {
            QUERY_FIELDS[param]: value
            for param, value in query.items()
            if param in QUERY_FIELDS
        }
        search = SearchRequest.build(**fields)
        try:
            return gw.search(search)
        except InvalidSearchError as exc:
            return _failure("Failed to search flights", exc.detail)
        except FlightScopeError as exc:
            return _failure("Failed to search flights", str(exc))

    return app


def _locations(gw: AmadeusGateway, keyword: Optional[str]):
    keyword = (keyword or "").strip()
    if not keyword:
        return JSONResponse(status_code=400, content={"error": "Keyword is required"})
    try:
        return {"data": gw.search_locations(keyword)}
    except ValidationError:
        raise
    except FlightScopeError as exc:
        return _failure("Failed to search locations", str(exc))


def _failure(error: str, message: str) -> JSONResponse:
    logger.error("%s: %s", error, message)
    return JSONResponse(status_code=500, content={"error": error, "message": message})


__all__ = ["create_app"]
