from skybrief.models.navpoint import NavPoint
from skybrief.models.airport import AirportRecord, AirportDirectory, is_valid_icao, normalize_icao
from skybrief.models.notam import Notam, NotamTextRules
from skybrief.models.route import RoutePlan, AirportRole
from skybrief.models.briefing import (
    Briefing,
    AirportBriefing,
    EnroutePoint,
    CriticalAlert,
    BriefingSummary,
)

__all__ = [
    'NavPoint',
    'AirportRecord',
    'AirportDirectory',
    'is_valid_icao',
    'normalize_icao',
    'Notam',
    'NotamTextRules',
    'RoutePlan',
    'AirportRole',
    'Briefing',
    'AirportBriefing',
    'EnroutePoint',
    'CriticalAlert',
    'BriefingSummary',
]
