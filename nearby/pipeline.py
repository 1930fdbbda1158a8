"""Pipeline orchestration."""
from __future__ import annotations

import logging
from functools import reduce
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from . import config
from .categories import CATEGORY_INFO, classify
from .dedup import deduplicate
from .geo import haversine_m, resolve_coordinates, within_radius
from .models import Place, PlaceDetails, RawRecord, ScoredPlace, SearchResult
from .names import is_valid_name, resolve_display_name
from .scoring import quality_score, score_places

logger = logging.getLogger(__name__)

REJECT_UNCLASSIFIABLE = "unclassifiable"
REJECT_MISSING_LOCATION = "missing_location"
REJECT_INVALID_NAME = "invalid_name"
REJECT_TOO_FAR = "too_far"
REJECT_DUPLICATE = "duplicate"
REJECT_OVER_CAP = "over_cap"

CapState = Tuple[Tuple[ScoredPlace, ...], Mapping[str, int]]


def build_place(
    record: RawRecord,
    center_lat: float,
    center_lon: float,
    radius: float,
    radius_tolerance_m: Optional[float] = None,
) -> Tuple[Optional[Place], Optional[str]]:
    """Turn one raw record into a Place, or return the reason it was dropped."""
    if radius_tolerance_m is None:
        radius_tolerance_m = config.RADIUS_TOLERANCE_M
    tags = record.tags or {}
    category = classify(tags)
    if category is None:
        return None, REJECT_UNCLASSIFIABLE

    coords = resolve_coordinates(record)
    if coords is None:
        return None, REJECT_MISSING_LOCATION
    lat, lon = coords

    name = resolve_display_name(tags)
    if not is_valid_name(name):
        return None, REJECT_INVALID_NAME

    distance = haversine_m(center_lat, center_lon, lat, lon)
    if not within_radius(distance, radius, radius_tolerance_m):
        return None, REJECT_TOO_FAR

    place = Place(
        id=record.place_id,
        name=name,
        category=category,
        lat=lat,
        lon=lon,
        distance=int(round(distance)),
        details=PlaceDetails.from_tags(tags),
    )
    return place, None


def apply_filters(
    records: Iterable[RawRecord],
    center_lat: float,
    center_lon: float,
    radius: float,
    radius_tolerance_m: Optional[float] = None,
) -> Tuple[List[Place], Dict[str, int]]:
    filtered: List[Place] = []
    rejection_counts: Dict[str, int] = {}

    for record in records:
        place, reason = build_place(record, center_lat, center_lon, radius, radius_tolerance_m)
        if reason:
            rejection_counts[reason] = rejection_counts.get(reason, 0) + 1
        else:
            filtered.append(place)

    return filtered, rejection_counts


def rank_sort_key(scored: ScoredPlace) -> Tuple[int, int]:
    return (-scored.score, scored.place.distance)


def _take_if_under_cap(state: CapState, scored: ScoredPlace, caps: Mapping[str, int]) -> CapState:
    accepted, counts = state
    category = scored.place.category
    count = counts.get(category, 0)
    if count >= caps.get(category, 0):
        return state
    return accepted + (scored,), {**counts, category: count + 1}


def rank_and_cap(
    scored: Iterable[ScoredPlace], caps: Mapping[str, int]
) -> Tuple[List[ScoredPlace], Dict[str, int]]:
    """Order by score then distance and keep at most ``caps[category]`` per category.

    A single forward pass: once a category is full, later places of that
    category are skipped for good.
    """
    ranked = sorted(scored, key=rank_sort_key)
    initial: CapState = ((), {})
    accepted, counts = reduce(lambda state, s: _take_if_under_cap(state, s, caps), ranked, initial)
    return list(accepted), dict(counts)


def run_pipeline(
    records: Sequence[RawRecord],
    center_lat: float,
    center_lon: float,
    radius: int,
    pipeline_config: Optional[config.PipelineConfig] = None,
) -> SearchResult:
    cfg = pipeline_config or config.pipeline_config()

    logger.info("Stage 1: filters (%s raw records)", len(records))
    filtered, rejection_counts = apply_filters(
        records, center_lat, center_lon, radius, cfg.radius_tolerance_m
    )

    logger.info("Stage 2: dedup (%s candidates)", len(filtered))
    priority = quality_score if cfg.dedup_prefer_quality else None
    unique = deduplicate(filtered, cfg.dedup_threshold_m, priority=priority)
    duplicates = len(filtered) - len(unique)
    if duplicates:
        rejection_counts[REJECT_DUPLICATE] = duplicates

    logger.info("Stage 3: quality scoring (%s places)", len(unique))
    scored = score_places(unique)

    logger.info("Stage 4: rank and cap")
    ranked, category_counts = rank_and_cap(scored, cfg.category_caps)
    over_cap = len(scored) - len(ranked)
    if over_cap:
        rejection_counts[REJECT_OVER_CAP] = over_cap

    for category in config.CATEGORIES:
        category_counts.setdefault(category, 0)

    logger.info(
        "Found %s places (%s)",
        len(ranked),
        ", ".join(
            f"{CATEGORY_INFO[c].label}: {category_counts[c]}" for c in config.CATEGORIES
        ),
    )
    return SearchResult(
        places=tuple(s.place for s in ranked),
        center_lat=center_lat,
        center_lon=center_lon,
        radius=radius,
        rejection_counts=rejection_counts,
        category_counts=category_counts,
    )


def render_summary(result: SearchResult) -> List[str]:
    lines = [
        f"Search center: {result.center_lat}, {result.center_lon}",
        f"Radius: {result.radius} m",
        f"Places: {len(result.places)}",
    ]
    for category in config.CATEGORIES:
        info = CATEGORY_INFO[category]
        lines.append(
            f"- {info.icon} {info.label}: {result.category_counts.get(category, 0)}"
        )
    if result.rejection_counts:
        lines.append("Rejections:")
        for reason in sorted(result.rejection_counts):
            lines.append(f"- {reason}: {result.rejection_counts[reason]}")
    if result.places:
        lines.append("Top places:")
        for place in result.places[:10]:
            lines.append(f"- [{place.category}] {place.name} ({place.distance} m)")
    return lines
