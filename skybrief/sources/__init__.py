"""
Data providers and the gateway that chains them.

Provides:
- WeatherProvider / HttpProvider: Provider interface and HTTP base
- CheckWXProvider, AvwxRestProvider, AviationWeatherProvider: METAR/TAF/airport APIs
- FaaNotamProvider: FAA NOTAM API
- MockProvider: Built-in samples and synthetic data
- ProviderGateway: Ordered fallback with caching and breakers
"""

from skybrief.sources.base import WeatherProvider, HttpProvider, REPORT, AIRPORT, NEAREST, NOTAMS
from skybrief.sources.checkwx import CheckWXProvider
from skybrief.sources.avwx_rest import AvwxRestProvider
from skybrief.sources.aviationweather import AviationWeatherProvider
from skybrief.sources.faa_notam import FaaNotamProvider
from skybrief.sources.mock import MockProvider
from skybrief.sources.gateway import ProviderGateway, build_providers

__all__ = [
    'WeatherProvider',
    'HttpProvider',
    'REPORT',
    'AIRPORT',
    'NEAREST',
    'NOTAMS',
    'CheckWXProvider',
    'AvwxRestProvider',
    'AviationWeatherProvider',
    'FaaNotamProvider',
    'MockProvider',
    'ProviderGateway',
    'build_providers',
]
