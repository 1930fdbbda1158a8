"""Display-name resolution and validation."""
from __future__ import annotations

import re
from typing import Mapping, Optional

from . import config

_NAME_TAGS = ("name", "operator", "brand", "amenity")
_NO_LETTERS_RE = re.compile(r"[\d\W]+")


def resolve_display_name(tags: Mapping[str, str]) -> str:
    for key in _NAME_TAGS:
        value = tags.get(key)
        if value:
            return value
    return config.UNKNOWN_NAME


def name_rejection_reason(name: Optional[str]) -> Optional[str]:
    """Return why a display name is unusable, or None when it is fine."""
    if not name:
        return "empty"
    if len(name) < config.NAME_MIN_LENGTH or len(name) > config.NAME_MAX_LENGTH:
        return "length"
    lowered = name.strip().casefold()
    for pattern in config.NAME_BLACKLIST:
        if pattern in lowered:
            return "blacklisted"
    if lowered in config.GENERIC_NAMES:
        return "generic"
    if _NO_LETTERS_RE.fullmatch(name):
        return "no_letters"
    return None


def is_valid_name(name: Optional[str]) -> bool:
    return name_rejection_reason(name) is None
