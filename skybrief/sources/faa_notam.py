"""FAA NOTAM API provider (client id and secret required)."""

import logging
from typing import Dict, List, Optional

import requests

from skybrief.models.notam import Notam
from skybrief.sources.base import HttpProvider, NOTAMS

logger = logging.getLogger(__name__)


class FaaNotamProvider(HttpProvider):
    """
    Fetch NOTAMs for an airport from the FAA NOTAM API.

    NOTAM severity is not part of the FAA payload; it is derived from the
    NOTAM text (see NotamTextRules).
    """

    name = "faa_notam"
    BASE_URL = "https://external-api.faa.gov/notamapi/v1"
    CAPABILITIES = frozenset([NOTAMS])
    PAGE_SIZE = 50

    def __init__(self, client_id: Optional[str], client_secret: Optional[str],
                 session: Optional[requests.Session] = None,
                 timeout: int = HttpProvider.DEFAULT_TIMEOUT):
        super().__init__(session=session, timeout=timeout)
        self._client_id = client_id
        self._client_secret = client_secret

    @property
    def available(self) -> bool:
        return bool(self._client_id and self._client_secret)

    def _headers(self) -> Dict[str, str]:
        return {
            "client_id": self._client_id or "",
            "client_secret": self._client_secret or "",
        }

    def fetch_notams(self, icao: str) -> List[Notam]:
        payload = self._get_json("/notams", {
            "icaoLocation": icao,
            "responseFormat": "geoJson",
            "pageSize": self.PAGE_SIZE,
        })
        items = payload.get("items", []) if isinstance(payload, dict) else []

        notams = []
        for item in items:
            core = ((item.get("properties") or {}).get("coreNOTAMData") or {}).get("notam") or {}
            text = core.get("text")
            if not text:
                continue
            notams.append(Notam.from_dict({
                "id": core.get("number") or core.get("id"),
                "location": core.get("icaoLocation") or core.get("location") or icao,
                "message": text,
                "start_time": core.get("effectiveStart"),
                "end_time": core.get("effectiveEnd"),
            }, source=self.name))
        logger.debug(f"Fetched {len(notams)} NOTAMs for {icao}")
        return notams
