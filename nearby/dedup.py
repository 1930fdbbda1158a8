"""Near-duplicate elimination.

Two places are near-duplicates when they sit closer than the threshold and
their names match, either exactly (case-folded) or with one punctuation-free
name contained in the other. The first place seen survives.
"""
from __future__ import annotations

import re
from functools import reduce
from typing import Callable, Iterable, List, Optional, Tuple

from . import config
from .geo import haversine_m
from .models import Place

_PUNCTUATION_RE = re.compile(r"[^\w\s]")


def normalize_name(name: str) -> str:
    return name.casefold()


def strip_punctuation(name: str) -> str:
    return _PUNCTUATION_RE.sub("", normalize_name(name))


def names_match(name1: str, name2: str) -> bool:
    if normalize_name(name1) == normalize_name(name2):
        return True
    stripped1 = strip_punctuation(name1)
    stripped2 = strip_punctuation(name2)
    return stripped1 in stripped2 or stripped2 in stripped1


def is_near_duplicate(
    place1: Place,
    place2: Place,
    threshold_m: Optional[float] = None,
) -> bool:
    if not names_match(place1.name, place2.name):
        return False
    if threshold_m is None:
        threshold_m = config.DEDUP_THRESHOLD_M
    return haversine_m(place1.lat, place1.lon, place2.lat, place2.lon) < threshold_m


def accept_if_unique(
    accepted: Tuple[Place, ...],
    candidate: Place,
    threshold_m: Optional[float] = None,
) -> Tuple[Place, ...]:
    if any(is_near_duplicate(candidate, existing, threshold_m) for existing in accepted):
        return accepted
    return accepted + (candidate,)


def deduplicate(
    places: Iterable[Place],
    threshold_m: Optional[float] = None,
    priority: Optional[Callable[[Place], int]] = None,
) -> List[Place]:
    """Drop near-duplicates, keeping the first-seen member of each pair.

    With ``priority`` the candidates are visited highest priority first, so
    the better-scoring member wins; survivors keep their input order.
    """
    if threshold_m is None:
        threshold_m = config.DEDUP_THRESHOLD_M
    ordered = list(places)
    visit = ordered
    if priority is not None:
        visit = sorted(ordered, key=lambda p: -priority(p))

    survivors = reduce(
        lambda accepted, candidate: accept_if_unique(accepted, candidate, threshold_m),
        visit,
        (),
    )
    if priority is None:
        return list(survivors)
    kept = {id(p) for p in survivors}
    return [p for p in ordered if id(p) in kept]
