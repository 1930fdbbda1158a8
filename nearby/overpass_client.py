"""Overpass API client and response parsing."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from . import config
from .categories import CATEGORY_INFO
from .errors import ProviderError
from .http import HttpClient
from .models import RawRecord

logger = logging.getLogger(__name__)

# Area (way) queries are limited to tags that describe buildings or grounds.
_WAY_QUERY_KEYS = ("amenity", "healthcare")


def _grouped_filters(queries: List[str]) -> List[str]:
    """Collapse repeated keys into one regex filter, preserving first-seen order."""
    values_by_key: Dict[str, List[str]] = {}
    wildcard_keys: List[str] = []
    for query in queries:
        key, _, value = query.partition("=")
        if value == "*" or not value:
            if key not in wildcard_keys:
                wildcard_keys.append(key)
            continue
        values_by_key.setdefault(key, [])
        if value not in values_by_key[key]:
            values_by_key[key].append(value)

    filters: List[str] = []
    for key, values in values_by_key.items():
        if len(values) == 1:
            filters.append(f'["{key}"="{values[0]}"]')
        else:
            filters.append(f'["{key}"~"^({"|".join(values)})$"]')
    for key in wildcard_keys:
        filters.append(f'["{key}"]')
    return filters


def build_overpass_query(
    lat: float,
    lon: float,
    radius: int,
    timeout: int = config.OVERPASS_QUERY_TIMEOUT_SECONDS,
) -> str:
    around = f"(around:{int(radius)},{lat},{lon})"
    node_lines: List[str] = []
    way_lines: List[str] = []
    for category in config.CATEGORIES:
        queries = list(CATEGORY_INFO[category].queries)
        for tag_filter in _grouped_filters(queries):
            node_lines.append(f"  node{tag_filter}{around};")
        way_queries = [q for q in queries if q.partition("=")[0] in _WAY_QUERY_KEYS]
        for tag_filter in _grouped_filters(way_queries):
            way_lines.append(f"  way{tag_filter}{around};")
    body = "\n".join(node_lines + way_lines)
    return f"[out:json][timeout:{int(timeout)}];\n(\n{body}\n);\nout center;"


# Adapter/mapper for Overpass response fields

def _as_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def parse_overpass_response(response: Dict[str, Any]) -> List[RawRecord]:
    elements = response.get("elements") or []
    parsed: List[RawRecord] = []
    for element in elements:
        if not isinstance(element, dict):
            continue
        kind = element.get("type")
        element_id = element.get("id")
        if not kind or element_id is None:
            continue
        center = element.get("center") or {}
        tags = element.get("tags") or {}
        parsed.append(
            RawRecord(
                id=element_id,
                kind=str(kind),
                lat=_as_float(element.get("lat")),
                lon=_as_float(element.get("lon")),
                center_lat=_as_float(center.get("lat")),
                center_lon=_as_float(center.get("lon")),
                tags={str(k): str(v) for k, v in tags.items() if v is not None},
            )
        )
    return parsed


class OverpassClient:
    def __init__(self, http_client: HttpClient, url: Optional[str] = None) -> None:
        self.http = http_client
        self.url = url or config.OVERPASS_URL

    def fetch(self, lat: float, lon: float, radius: int) -> List[RawRecord]:
        query = build_overpass_query(lat, lon, radius)
        logger.info("Fetching places from Overpass for lat=%s lon=%s radius=%sm", lat, lon, radius)
        try:
            payload = self.http.post_form(self.url, {"data": query})
        except (requests.RequestException, ValueError) as exc:
            raise ProviderError(f"Overpass request failed: {exc}") from exc
        if not isinstance(payload, dict):
            raise ProviderError("Overpass response is not a JSON object")
        records = parse_overpass_response(payload)
        logger.info("Overpass returned %s elements", len(records))
        metrics = self.http.metrics
        if metrics is not None:
            logger.info(
                "Overpass requests: network=%s retries=%s",
                metrics.network_requests,
                metrics.retries,
            )
        return records
