"""Search entry point: request validation, fetch, pipeline."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Sequence

from . import config
from .errors import InvalidSearchRequest, ProviderError
from .http import HttpClient, RequestMetrics
from .models import RawRecord, SearchResult
from .overpass_client import OverpassClient
from .pipeline import run_pipeline

logger = logging.getLogger(__name__)


class RecordSource(Protocol):
    def fetch(self, lat: float, lon: float, radius: int) -> Sequence[RawRecord]:
        ...


@dataclass(frozen=True)
class SearchParams:
    lat: float
    lon: float
    radius: int


def validate_search_params(lat: Any, lon: Any, radius: Any) -> SearchParams:
    if lat is None or lon is None:
        raise InvalidSearchRequest("Latitude and longitude are required")
    try:
        lat_f = float(lat)
        lon_f = float(lon)
    except (TypeError, ValueError) as exc:
        raise InvalidSearchRequest("Latitude and longitude must be numbers") from exc
    if not (math.isfinite(lat_f) and math.isfinite(lon_f)):
        raise InvalidSearchRequest("Latitude and longitude must be finite")
    if not -90.0 <= lat_f <= 90.0:
        raise InvalidSearchRequest(f"Latitude out of range: {lat_f}")
    if not -180.0 <= lon_f <= 180.0:
        raise InvalidSearchRequest(f"Longitude out of range: {lon_f}")

    if radius is None:
        radius = config.DEFAULT_RADIUS_M
    if isinstance(radius, bool):
        raise InvalidSearchRequest("Radius must be an integer number of meters")
    try:
        radius_i = int(radius)
    except (TypeError, ValueError) as exc:
        raise InvalidSearchRequest("Radius must be an integer number of meters") from exc
    if isinstance(radius, float) and radius != radius_i:
        raise InvalidSearchRequest("Radius must be an integer number of meters")
    if radius_i <= 0:
        raise InvalidSearchRequest("Radius must be positive")
    if radius_i > config.MAX_RADIUS_M:
        raise InvalidSearchRequest(f"Radius exceeds maximum of {config.MAX_RADIUS_M} m")
    return SearchParams(lat=lat_f, lon=lon_f, radius=radius_i)


def parse_search_params(query: Mapping[str, Any]) -> SearchParams:
    """Validate query-string style parameters ({"lat": "51.5", ...})."""
    lat = query.get("lat")
    lon = query.get("lon")
    if lat in (None, "") or lon in (None, ""):
        raise InvalidSearchRequest("Latitude and longitude are required")
    radius = query.get("radius")
    if radius in (None, ""):
        radius = None
    elif isinstance(radius, str):
        radius = radius.strip()
    return validate_search_params(lat, lon, radius)


def default_client() -> OverpassClient:
    http_client = HttpClient(
        timeout=config.HTTP_TIMEOUT_SECONDS,
        retry_max=config.HTTP_RETRY_MAX,
        backoff_base=config.HTTP_BACKOFF_BASE,
        backoff_max=config.HTTP_BACKOFF_MAX,
        user_agent=config.HTTP_USER_AGENT,
        metrics=RequestMetrics(),
    )
    return OverpassClient(http_client)


def search_nearby(
    lat: Any,
    lon: Any,
    radius: Any = None,
    client: Optional[RecordSource] = None,
    pipeline_config: Optional[config.PipelineConfig] = None,
) -> SearchResult:
    params = validate_search_params(lat, lon, radius)
    source = client or default_client()
    try:
        records = source.fetch(params.lat, params.lon, params.radius)
    except ProviderError:
        logger.error("Error fetching places for %s,%s", params.lat, params.lon)
        raise
    except Exception as exc:
        logger.error("Error fetching places for %s,%s: %s", params.lat, params.lon, exc)
        raise ProviderError(f"Failed to fetch places: {exc}") from exc

    return run_pipeline(
        list(records), params.lat, params.lon, params.radius, pipeline_config=pipeline_config
    )
