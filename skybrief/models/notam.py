"""NOTAM data model and text-rule severity."""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, List, Tuple, Pattern, Dict, Any

from dateutil.parser import isoparse

from skybrief.weather.severity import Severity


class NotamTextRules:
    """
    Derive a NOTAM type and severity from its free text.

    Patterns are ordered by specificity - more specific patterns are checked
    first and the first match wins.
    """

    # Format: (pattern, type, severity)
    RULES: List[Tuple[str, str, Severity]] = [
        # Aerodrome and runway closures
        (r'\bAD\s+(CLSD|CLOSED)\b', 'aerodrome', Severity.CRITICAL),
        (r'\bAERODROME\s+(CLSD|CLOSED)\b', 'aerodrome', Severity.CRITICAL),
        (r'\bAIRPORT\s+(CLSD|CLOSED)\b', 'aerodrome', Severity.CRITICAL),
        (r'\bRWY\s*\d+[LRC]?(/\d+[LRC]?)?\s*(CLSD|CLOSED)\b', 'runway', Severity.CRITICAL),
        (r'\bRUNWAY\s*\d*\s*(CLSD|CLOSED)\b', 'runway', Severity.CRITICAL),

        # Taxiways
        (r'\bTWY\s*[A-Z]+\d*\s*(CLSD|CLOSED)\b', 'taxiway', Severity.CAUTION),

        # Navigation aids
        (r'\bILS\b.*\b(U/S|UNSERVICEABLE|OUT OF SERVICE)\b', 'navaid', Severity.CAUTION),
        (r'\b(LOC|GP|G/S|GLIDE\s*(PATH|SLOPE))\b.*\b(U/S|UNSERVICEABLE)\b', 'navaid', Severity.CAUTION),
        (r'\b(VOR|DME|NDB|TACAN)\b.*\b(U/S|UNSERVICEABLE|OUT OF SERVICE)\b', 'navaid', Severity.CAUTION),

        # Lighting
        (r'\b(ALS|PAPI|VASI)\b.*\b(U/S|UNSERVICEABLE|INOP)\b', 'lighting', Severity.CAUTION),
        (r'\bL(IGH)?T(ING|S)?\b.*\b(U/S|UNSERVICEABLE|INOP)\b', 'lighting', Severity.CAUTION),

        # Communications
        (r'\b(FREQ|ATIS|TWR|APP)\b.*\b(U/S|UNSERVICEABLE)\b', 'facility', Severity.CAUTION),

        # Obstacles
        (r'\b(OBST|CRANE)\b', 'obstacle', Severity.NORMAL),
    ]

    _compiled: Optional[List[Tuple[Pattern, str, Severity]]] = None

    @classmethod
    def _rules(cls) -> List[Tuple[Pattern, str, Severity]]:
        if cls._compiled is None:
            cls._compiled = [
                (re.compile(pattern, re.IGNORECASE), notam_type, severity)
                for pattern, notam_type, severity in cls.RULES
            ]
        return cls._compiled

    @classmethod
    def categorize(cls, text: str) -> Tuple[str, Severity]:
        """
        Returns:
            Tuple of (type, severity); ('other', NORMAL) when nothing matches
        """
        for pattern, notam_type, severity in cls._rules():
            if pattern.search(text or ""):
                return notam_type, severity
        return 'other', Severity.NORMAL


@dataclass(frozen=True)
class Notam:
    """
    Notice to Air Missions for one airport.

    Attributes:
        id: NOTAM identifier
        location: ICAO code the NOTAM applies to
        message: NOTAM text
        severity: Severity carried by the source or derived from text rules
        notam_type: runway, taxiway, navaid, lighting, facility, aerodrome, obstacle or other
        start_time: Effective from (UTC)
        end_time: Effective until (UTC), None if permanent or unknown
        source: Provider name
    """

    id: str
    location: str
    message: str
    severity: Severity = Severity.NORMAL
    notam_type: str = "other"
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    source: str = ""

    @property
    def is_critical(self) -> bool:
        return self.severity == Severity.CRITICAL

    def is_active(self, at: datetime) -> bool:
        if self.start_time is not None and at < self.start_time:
            return False
        if self.end_time is not None and at > self.end_time:
            return False
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'location': self.location,
            'type': self.notam_type,
            'severity': self.severity.value,
            'message': self.message,
            'start_time': self.start_time.isoformat() if self.start_time else None,
            'end_time': self.end_time.isoformat() if self.end_time else None,
            'source': self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any], source: str = "") -> 'Notam':
        """
        Build a Notam from a provider or sample dictionary.

        ``severity`` and ``type`` are used when present, otherwise both are
        derived from the message text.
        """
        message = data.get('message') or data.get('text') or ""
        derived_type, derived_severity = NotamTextRules.categorize(message)
        severity = data.get('severity')
        return cls(
            id=str(data.get('id') or ""),
            location=str(data.get('location') or "").upper(),
            message=message,
            severity=Severity(severity) if severity else derived_severity,
            notam_type=data.get('type') or derived_type,
            start_time=parse_time(data.get('start_time') or data.get('startTime')),
            end_time=parse_time(data.get('end_time') or data.get('endTime')),
            source=source or data.get('source', ""),
        )


def parse_time(value: Any) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; None for empty or permanent markers."""
    if value is None or isinstance(value, datetime):
        return value
    text = str(value).strip()
    if not text or text.upper() in ('PERM', 'PERMANENT'):
        return None
    return isoparse(text)
