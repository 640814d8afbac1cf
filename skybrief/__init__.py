"""
Aviation weather briefing library.

This package decodes METAR/TAF reports, classifies their severity and
assembles route briefings from several weather and NOTAM providers.

The main public API includes:
- ReportDecoder: Decode raw METAR/TAF text into structured reports
- SeverityClassifier: normal/caution/critical verdicts with reasons
- ProviderGateway: Ordered provider fallback with caching and breakers
- Cache: Process-wide TTL cache
- GeoSampler: Great-circle sampling between two points
- BriefingSynthesizer: Concurrent route briefing assembly
- BriefingService: Operations exposed by the CLI and the web API
"""

__version__ = '0.1.0'

from skybrief.cache import Cache
from skybrief.geo import GeoSampler
from skybrief.weather.parser import ReportDecoder
from skybrief.weather.severity import Severity, SeverityClassifier
from skybrief.sources.gateway import ProviderGateway
from skybrief.synthesis import BriefingSynthesizer
from skybrief.service import BriefingService

__all__ = [
    'Cache',
    'GeoSampler',
    'ReportDecoder',
    'Severity',
    'SeverityClassifier',
    'ProviderGateway',
    'BriefingSynthesizer',
    'BriefingService',
]
