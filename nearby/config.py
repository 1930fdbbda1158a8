"""Project configuration.

Loads overrides from search_config.json when available, falling back to
sensible defaults. Keep provider request shapes centralized here.
"""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Tuple

_REPO_ROOT = Path(__file__).resolve().parent.parent

# --- Provider endpoint ---

_DEFAULT_OVERPASS_URL = "https://overpass-api.de/api/interpreter"
OVERPASS_URL = os.environ.get("OVERPASS_URL") or _DEFAULT_OVERPASS_URL
OVERPASS_QUERY_TIMEOUT_SECONDS = 25

# --- Categories ---

HEALTHCARE = "healthcare"
TRANSPORT = "transport"
EDUCATION = "education"
CATEGORIES: Tuple[str, ...] = (HEALTHCARE, TRANSPORT, EDUCATION)

_DEFAULT_CATEGORY_CAPS: Dict[str, int] = {HEALTHCARE: 12, TRANSPORT: 10, EDUCATION: 8}

# --- Mutable config (populated by load_search_config or directly) ---

CATEGORY_CAPS: Dict[str, int] = dict(_DEFAULT_CATEGORY_CAPS)
DEDUP_THRESHOLD_M = 50.0
RADIUS_TOLERANCE_M = 100.0
DEFAULT_RADIUS_M = 2000
MAX_RADIUS_M = 50000

# --- Name validation ---

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
UNKNOWN_NAME = "Unknown"
NAME_BLACKLIST: Tuple[str, ...] = (
    "test",
    "example",
    "xxx",
    "temp",
    "123",
    "unnamed",
    "no name",
    "construction",
    "under construction",
    "closed",
    "demolished",
)
GENERIC_NAMES: FrozenSet[str] = frozenset({"building", "structure", "facility", "site"})

# --- Scoring ---

SPECIFIC_AMENITIES: FrozenSet[str] = frozenset(
    {"hospital", "clinic", "pharmacy", "school", "university"}
)
GENERIC_LABEL_NAMES: FrozenSet[str] = frozenset({"pharmacy", "hospital", "school", "bus stop"})

# --- HTTP ---

HTTP_TIMEOUT_SECONDS = 30
HTTP_RETRY_MAX = 3
HTTP_BACKOFF_BASE = 0.5
HTTP_BACKOFF_MAX = 8.0
HTTP_USER_AGENT = "nearby-services/0.1"

# --- Outputs ---

OUTPUT_DIR = "out"


@dataclass(frozen=True)
class PipelineConfig:
    """Pipeline parameters; fields left as None take the current module settings."""

    category_caps: Optional[Mapping[str, int]] = None
    dedup_threshold_m: Optional[float] = None
    radius_tolerance_m: Optional[float] = None
    dedup_prefer_quality: bool = False

    def __post_init__(self) -> None:
        if self.category_caps is None:
            object.__setattr__(self, "category_caps", dict(CATEGORY_CAPS))
        if self.dedup_threshold_m is None:
            object.__setattr__(self, "dedup_threshold_m", DEDUP_THRESHOLD_M)
        if self.radius_tolerance_m is None:
            object.__setattr__(self, "radius_tolerance_m", RADIUS_TOLERANCE_M)


def pipeline_config(**overrides: Any) -> PipelineConfig:
    """Build a PipelineConfig from the current module-level settings."""
    return PipelineConfig(**overrides)


def load_search_config(path: Optional[str] = None) -> bool:
    """Load search configuration from a JSON file.

    Updates module-level globals with values from the config file.
    Returns True if config was loaded, False if file not found.
    """
    if path is None:
        path = str(_REPO_ROOT / "search_config.json")

    config_path = Path(path)
    if not config_path.exists():
        return False

    with open(config_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    globals_ref = globals()

    caps = data.get("category_caps") or {}
    if caps:
        unknown = sorted(set(caps) - set(CATEGORIES))
        if unknown:
            raise ValueError(f"Unknown categories in category_caps: {', '.join(unknown)}")
        merged = dict(globals_ref["CATEGORY_CAPS"])
        merged.update({k: int(v) for k, v in caps.items()})
        globals_ref["CATEGORY_CAPS"] = merged

    threshold = data.get("dedup_threshold_m")
    if threshold is not None:
        globals_ref["DEDUP_THRESHOLD_M"] = float(threshold)

    tolerance = data.get("radius_tolerance_m")
    if tolerance is not None:
        globals_ref["RADIUS_TOLERANCE_M"] = float(tolerance)

    default_radius = data.get("default_radius_m")
    if default_radius is not None:
        globals_ref["DEFAULT_RADIUS_M"] = int(default_radius)

    max_radius = data.get("max_radius_m")
    if max_radius is not None:
        globals_ref["MAX_RADIUS_M"] = int(max_radius)

    overpass_url = data.get("overpass_url")
    if overpass_url:
        globals_ref["OVERPASS_URL"] = str(overpass_url)

    return True
