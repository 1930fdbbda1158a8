"""Heuristic quality scoring.

Each rule adds (or subtracts) a fixed number of points when its condition
holds. Scores are unbounded and only meaningful relative to each other.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterable, List, Tuple

from . import config
from .models import Place, ScoredPlace


@dataclass(frozen=True)
class ScoringRule:
    name: str
    condition: Callable[[Place], bool]
    points: int


SCORING_RULES: Tuple[ScoringRule, ...] = (
    ScoringRule(
        "named",
        lambda p: bool(p.name) and p.name != config.UNKNOWN_NAME,
        20,
    ),
    ScoringRule("has_operator", lambda p: bool(p.details.operator), 15),
    ScoringRule("emergency", lambda p: p.details.emergency, 25),
    ScoringRule(
        "specific_amenity",
        lambda p: p.details.amenity in config.SPECIFIC_AMENITIES,
        10,
    ),
    ScoringRule("healthcare", lambda p: p.category == config.HEALTHCARE, 5),
    ScoringRule(
        "generic_label",
        lambda p: p.name.casefold() in config.GENERIC_LABEL_NAMES,
        -5,
    ),
)


def quality_score(place: Place, rules: Iterable[ScoringRule] = SCORING_RULES) -> int:
    return sum(rule.points for rule in rules if rule.condition(place))


def score_places(
    places: Iterable[Place], rules: Iterable[ScoringRule] = SCORING_RULES
) -> List[ScoredPlace]:
    rules = tuple(rules)
    return [ScoredPlace(place=p, score=quality_score(p, rules)) for p in places]
