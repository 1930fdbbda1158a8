"""Service categories and tag-based classification.

Classification walks CLASSIFICATION_RULES in order and returns the category
of the first rule whose predicate matches. A record never gets more than one
category, and records matching no rule are unclassifiable (None).
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional, Tuple

from . import config

TagPredicate = Callable[[Mapping[str, str]], bool]


@dataclass(frozen=True)
class CategoryInfo:
    key: str
    label: str
    icon: str
    color: str
    queries: Tuple[str, ...]


CATEGORY_INFO: Dict[str, CategoryInfo] = {
    config.HEALTHCARE: CategoryInfo(
        key=config.HEALTHCARE,
        label="Healthcare",
        icon="\U0001F3E5",
        color="#10b981",
        queries=(
            "amenity=hospital",
            "amenity=clinic",
            "amenity=doctors",
            "amenity=pharmacy",
            "healthcare=*",
        ),
    ),
    config.TRANSPORT: CategoryInfo(
        key=config.TRANSPORT,
        label="Transport",
        icon="\U0001F68C",
        color="#f59e0b",
        queries=(
            "amenity=bus_station",
            "highway=bus_stop",
            "public_transport=stop_position",
            "public_transport=platform",
            "railway=station",
        ),
    ),
    config.EDUCATION: CategoryInfo(
        key=config.EDUCATION,
        label="Education",
        icon="\U0001F3EB",
        color="#3b82f6",
        queries=(
            "amenity=school",
            "amenity=university",
            "amenity=college",
            "amenity=kindergarten",
        ),
    ),
}


@dataclass(frozen=True)
class ClassificationRule:
    name: str
    predicate: TagPredicate
    category: str


def _tag_in(key: str, values: Tuple[str, ...]) -> TagPredicate:
    allowed = frozenset(values)
    return lambda tags: tags.get(key) in allowed


def _tag_present(key: str) -> TagPredicate:
    return lambda tags: bool(tags.get(key))


def _bus_stop_or_public_transport(tags: Mapping[str, str]) -> bool:
    return tags.get("highway") == "bus_stop" or bool(tags.get("public_transport"))


CLASSIFICATION_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        "healthcare_amenity",
        _tag_in("amenity", ("hospital", "clinic", "doctors", "pharmacy")),
        config.HEALTHCARE,
    ),
    ClassificationRule("healthcare_tag", _tag_present("healthcare"), config.HEALTHCARE),
    ClassificationRule("bus_station", _tag_in("amenity", ("bus_station",)), config.TRANSPORT),
    ClassificationRule("bus_stop", _bus_stop_or_public_transport, config.TRANSPORT),
    ClassificationRule("railway_station", _tag_in("railway", ("station",)), config.TRANSPORT),
    ClassificationRule(
        "education_amenity",
        _tag_in("amenity", ("school", "university", "college", "kindergarten")),
        config.EDUCATION,
    ),
)


def matching_rule(
    tags: Mapping[str, str],
    rules: Tuple[ClassificationRule, ...] = CLASSIFICATION_RULES,
) -> Optional[ClassificationRule]:
    for rule in rules:
        if rule.predicate(tags):
            return rule
    return None


def classify(
    tags: Mapping[str, str],
    rules: Tuple[ClassificationRule, ...] = CLASSIFICATION_RULES,
) -> Optional[str]:
    rule = matching_rule(tags, rules)
    return rule.category if rule else None
