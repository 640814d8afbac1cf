"""
Pydantic models for API request bodies.

Airport codes are not length-checked here; malformed codes reach the
service so they fail as invalid airports rather than schema errors.
"""

from typing import List, Optional

from pydantic import BaseModel, Field

from skybrief.config import DEFAULT_ENROUTE_POINTS


class DecodeRequest(BaseModel):
    """Raw report text to decode."""

    raw_text: str = Field(..., min_length=1, max_length=4000)
    kind: Optional[str] = Field(None, description="metar or taf; detected when omitted")


class RouteRequest(BaseModel):
    """Route plan for a briefing."""

    origin: str = Field(..., max_length=10)
    destination: str = Field(..., max_length=10)
    alternates: List[str] = Field(default_factory=list)
    flight_level: Optional[int] = Field(None, ge=0, le=600)
    route_string: Optional[str] = Field(None, max_length=500)


class AirportListRequest(BaseModel):
    """A list of airports, for multiple-airport weather and quick briefings."""

    airports: List[str] = Field(..., min_length=1)
    kinds: List[str] = Field(default_factory=lambda: ["metar", "taf"])


class WindsRequest(BaseModel):
    """Great-circle enroute weather request."""

    origin: str = Field(..., max_length=10)
    destination: str = Field(..., max_length=10)
    flight_level: Optional[int] = Field(None, ge=0, le=600)
    num_points: int = Field(DEFAULT_ENROUTE_POINTS, description="Interior sample points, clamped to 2-50")
