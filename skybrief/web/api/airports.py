from fastapi import APIRouter, Query, Path
from typing import Optional, Dict, Any
import logging

from skybrief.service import BriefingService

logger = logging.getLogger(__name__)

router = APIRouter()

# Global service reference
service: Optional[BriefingService] = None


def set_service(s: BriefingService):
    """Set the global service reference."""
    global service
    service = s


@router.get("/search")
def search_airports(
    q: str = Query(..., description="ICAO, IATA, name or city fragment", max_length=100),
    limit: int = Query(10, description="Maximum number of results", ge=1, le=50),
) -> Dict[str, Any]:
    """Unranked airport search over the built-in table (at least 2 characters)."""
    results = service.search_airports(q, limit=limit)
    return {
        "query": q,
        "count": len(results),
        "airports": [record.to_dict() for record in results],
    }


@router.get("/{icao}")
def get_airport(icao: str = Path(..., max_length=10)) -> Dict[str, Any]:
    """Airport metadata."""
    return service.airport(icao).to_dict()
