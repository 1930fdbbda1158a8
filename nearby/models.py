"""Record and result types shared by the pipeline stages."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


@dataclass(frozen=True)
class RawRecord:
    """An unprocessed element as returned by the map-data provider."""

    id: int
    kind: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    center_lat: Optional[float] = None
    center_lon: Optional[float] = None
    tags: Mapping[str, str] = field(default_factory=dict)

    @property
    def place_id(self) -> str:
        return f"{self.kind}_{self.id}"


@dataclass(frozen=True)
class PlaceDetails:
    operator: Optional[str] = None
    emergency: bool = False
    amenity: Optional[str] = None
    highway: Optional[str] = None
    public_transport: Optional[str] = None
    healthcare: Optional[str] = None

    @classmethod
    def from_tags(cls, tags: Mapping[str, str]) -> "PlaceDetails":
        return cls(
            operator=tags.get("operator") or None,
            emergency=tags.get("emergency") == "yes",
            amenity=tags.get("amenity") or None,
            highway=tags.get("highway") or None,
            public_transport=tags.get("public_transport") or None,
            healthcare=tags.get("healthcare") or None,
        )

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {"emergency": self.emergency}
        for key in ("operator", "amenity", "highway", "public_transport", "healthcare"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out


@dataclass(frozen=True)
class Place:
    id: str
    name: str
    category: str
    lat: float
    lon: float
    distance: int
    details: PlaceDetails = field(default_factory=PlaceDetails)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "lat": self.lat,
            "lon": self.lon,
            "distance": self.distance,
            "details": self.details.to_dict(),
        }


@dataclass(frozen=True)
class ScoredPlace:
    place: Place
    score: int


@dataclass(frozen=True)
class SearchResult:
    places: Tuple[Place, ...]
    center_lat: float
    center_lon: float
    radius: int
    rejection_counts: Mapping[str, int] = field(default_factory=dict)
    category_counts: Mapping[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "places": [p.to_dict() for p in self.places],
            "searchCenter": {"lat": self.center_lat, "lon": self.center_lon},
            "radius": self.radius,
        }
