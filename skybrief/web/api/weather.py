from fastapi import APIRouter, Path
from typing import Optional, Dict, Any
import logging

from skybrief.service import BriefingService
from skybrief.web.models import DecodeRequest, AirportListRequest, WindsRequest

logger = logging.getLogger(__name__)

router = APIRouter()

# Global service reference
service: Optional[BriefingService] = None


def set_service(s: BriefingService):
    """Set the global service reference."""
    global service
    service = s


@router.post("/decode")
def decode_report(body: DecodeRequest) -> Dict[str, Any]:
    """Decode a raw METAR or TAF and classify it."""
    return service.decode(body.raw_text, body.kind)


@router.get("/metar/{icao}")
def get_metar(icao: str = Path(..., max_length=10)) -> Dict[str, Any]:
    """Latest decoded METAR for an airport."""
    return service.airport_weather(icao, "metar")


@router.get("/taf/{icao}")
def get_taf(icao: str = Path(..., max_length=10)) -> Dict[str, Any]:
    """Latest decoded TAF for an airport."""
    return service.airport_weather(icao, "taf")


@router.get("/notams/{icao}")
def get_notams(icao: str = Path(..., max_length=10)) -> Dict[str, Any]:
    """Current NOTAMs for an airport."""
    return service.notams(icao)


@router.post("/multiple")
def get_multiple(body: AirportListRequest) -> Dict[str, Any]:
    """METAR/TAF for up to 10 airports."""
    return service.multiple_weather(body.airports, body.kinds)


@router.post("/winds")
def get_enroute_weather(body: WindsRequest) -> Dict[str, Any]:
    """Nearest-station weather along the great circle between two airports."""
    return service.enroute_weather(body.origin, body.destination, body.num_points, body.flight_level)


@router.get("/cache/stats")
def get_cache_stats() -> Dict[str, Any]:
    return service.cache_stats()


@router.delete("/cache")
def clear_cache() -> Dict[str, Any]:
    removed = service.clear_cache()
    logger.info(f"Cache cleared through API ({removed} entries)")
    return {"cleared": removed}
