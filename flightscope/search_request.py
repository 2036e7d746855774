from __future__ import annotations

import re
from typing import Any, Literal, Optional

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .errors import ValidationError

IATA_RE = re.compile(r"[A-Z]{3}", re.IGNORECASE | re.ASCII)
DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)

TravelClass = Literal["ECONOMY", "PREMIUM_ECONOMY", "BUSINESS", "FIRST"]

# snake_case field -> upstream query parameter
PARAM_NAMES = {
    "origin_location_code": "originLocationCode",
    "destination_location_code": "destinationLocationCode",
    "departure_date": "departureDate",
    "return_date": "returnDate",
    "adults": "adults",
    "children": "children",
    "infants": "infants",
    "travel_class": "travelClass",
    "currency_code": "currencyCode",
    "max": "max",
}


class SearchRequest(BaseModel):
    """Every parameter a flight-offers search accepts, validated up front."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    origin_location_code: str
    destination_location_code: str
    departure_date: str
    return_date: Optional[str] = None
    adults: int = Field(1, ge=1, le=9)
    children: int = Field(0, ge=0, le=9)
    infants: int = Field(0, ge=0, le=9)
    travel_class: TravelClass = "ECONOMY"
    currency_code: str = "USD"
    max: int = Field(50, ge=1, le=250)

    @field_validator("origin_location_code", "destination_location_code")
    @classmethod
    def _iata(cls, v: str) -> str:
        if not IATA_RE.fullmatch(v):
            raise ValueError("must be a 3-letter IATA code")
        return v.upper()

    @field_validator("departure_date", "return_date")
    @classmethod
    def _date(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not DATE_RE.fullmatch(v):
            raise ValueError("must use the YYYY-MM-DD format")
        return v

    @field_validator("travel_class", mode="before")
    @classmethod
    def _upper_class(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("currency_code")
    @classmethod
    def _currency(cls, v: str) -> str:
        if len(v) != 3 or not v.isascii() or not v.isalpha():
            raise ValueError("must be a 3-letter currency code")
        return v.upper()

    @model_validator(mode="after")
    def _infants_need_adults(self) -> "SearchRequest":
        if self.infants > self.adults:
            raise ValueError("infants cannot outnumber adults")
        return self

    @classmethod
    def build(cls, **fields: Any) -> "SearchRequest":
        """Construct a request, reporting the first bad field as ``ValidationError``."""
        for name in ("origin_location_code", "destination_location_code", "departure_date"):
            if not fields.get(name):
                raise ValidationError(PARAM_NAMES[name], f"{PARAM_NAMES[name]} is required")
        if fields.get("return_date") == "":
            fields["return_date"] = None
        try:
            return cls(**fields)
        except pydantic.ValidationError as exc:
            err = exc.errors()[0]
            loc = err.get("loc") or ()
            name = str(loc[0]) if loc else "request"
            param = PARAM_NAMES.get(name, name)
            msg = err.get("msg", "invalid value")
            if msg.startswith("Value error, "):
                msg = msg[len("Value error, "):]
            raise ValidationError(param, f"Invalid {param}: {msg}") from None

    def to_params(self) -> dict[str, Any]:
        """Query parameters for the upstream flight-offers endpoint."""
        params: dict[str, Any] = {}
        for name, value in self.model_dump().items():
            if value is None:
                continue
            if name in ("children", "infants") and not value:
                continue
            params[PARAM_NAMES[name]] = value
        return params


__all__ = ["SearchRequest", "IATA_RE", "DATE_RE", "PARAM_NAMES"]
