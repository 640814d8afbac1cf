from fastapi import APIRouter
from typing import Optional, Dict, Any
import logging

from skybrief.service import BriefingService
from skybrief.web.models import RouteRequest, AirportListRequest

logger = logging.getLogger(__name__)

router = APIRouter()

# Global service reference
service: Optional[BriefingService] = None


def set_service(s: BriefingService):
    """Set the global service reference."""
    global service
    service = s


@router.post("")
def create_briefing(body: RouteRequest) -> Dict[str, Any]:
    """Full route briefing: airports, enroute samples, alerts and recommendations."""
    return service.briefing(body.model_dump()).to_dict()


@router.post("/quick")
def quick_briefing(body: AirportListRequest) -> Dict[str, Any]:
    """METAR verdicts and alerts for up to 5 airports."""
    return service.quick_briefing(body.airports)


@router.get("/demo")
def demo_briefing() -> Dict[str, Any]:
    """Briefing for KJFK to KLAX with KORD as alternate."""
    return service.demo_briefing().to_dict()
