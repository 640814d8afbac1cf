"""Error taxonomy for decoding, data acquisition and briefing synthesis."""

from enum import Enum
from typing import Optional


class SkybriefError(Exception):
    """Base class for all errors raised by skybrief."""


class DecodeError(SkybriefError):
    """
    Raised when report text does not match the METAR/TAF grammar.

    Attributes:
        raw_text: The offending report text, kept for diagnostics
        reason: Short description of what failed to parse
    """

    def __init__(self, raw_text: str, reason: str):
        self.raw_text = raw_text
        self.reason = reason
        super().__init__(f"{reason}: {raw_text[:80]!r}")


class DataErrorKind(Enum):
    """Closed set of data acquisition failures."""

    NOT_FOUND = "not_found"
    PROVIDER_FAILURE = "provider_failure"


class DataError(SkybriefError):
    """
    Raised when a report, NOTAM list or airport record cannot be obtained.

    NOT_FOUND is a user input problem (the airport/report does not exist).
    PROVIDER_FAILURE is transient and absorbed by the provider chain; when
    ``trips_breaker`` is set (authentication or rate limiting) the gateway
    stops using that provider for the rest of the process lifetime.
    """

    def __init__(
        self,
        kind: DataErrorKind,
        message: str,
        provider: Optional[str] = None,
        status_code: Optional[int] = None,
        trips_breaker: bool = False,
    ):
        self.kind = kind
        self.message = message
        self.provider = provider
        self.status_code = status_code
        self.trips_breaker = trips_breaker
        prefix = f"[{provider}] " if provider else ""
        super().__init__(f"{prefix}{message}")

    @classmethod
    def not_found(cls, message: str, provider: Optional[str] = None,
                  status_code: Optional[int] = None) -> 'DataError':
        return cls(DataErrorKind.NOT_FOUND, message, provider, status_code)

    @classmethod
    def provider_failure(cls, message: str, provider: Optional[str] = None,
                         status_code: Optional[int] = None,
                         trips_breaker: bool = False) -> 'DataError':
        return cls(DataErrorKind.PROVIDER_FAILURE, message, provider, status_code, trips_breaker)

    @property
    def is_not_found(self) -> bool:
        return self.kind == DataErrorKind.NOT_FOUND


class SynthesisErrorKind(Enum):
    """Closed set of briefing synthesis failures."""

    INVALID_AIRPORT = "invalid_airport"


class SynthesisError(SkybriefError):
    """
    Raised when a briefing cannot be built at all.

    Only an invalid or unresolvable airport code aborts a briefing; data
    fetch problems degrade individual entries instead.
    """

    def __init__(self, kind: SynthesisErrorKind, icao: str, message: str):
        self.kind = kind
        self.icao = icao
        self.message = message
        super().__init__(message)

    @classmethod
    def invalid_airport(cls, icao: str, message: str) -> 'SynthesisError':
        return cls(SynthesisErrorKind.INVALID_AIRPORT, icao, message)
