"""
Value objects passed between the collaborators and the estimator.

Everything here is immutable once built; a PredictionResult is created
once per simulation request and replaced wholesale, never patched.
"""
from __future__ import annotations
import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True, frozen=True)
class GeoPoint:
    """WGS‑84 position in decimal degrees."""

    latitude: float
    longitude: float

    def is_valid(self) -> bool:
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0

    def as_latlng(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)

    def as_lnglat(self) -> Tuple[float, float]:
        """GeoJSON / shapely axis order."""
        return (self.longitude, self.latitude)


@dataclass(slots=True, frozen=True)
class WindObservation:
    """Surface weather at the simulation point (meteorological convention)."""

    speed_mph: float
    direction_degrees: float        # direction the wind blows FROM, [0, 360)
    temperature_f: float
    humidity_percent: float
    observed_at: datetime = field(default_factory=utcnow)

    def __post_init__(self):
        if self.speed_mph < 0:
            raise ValueError(f"Wind speed must be >= 0, got {self.speed_mph}")
        if not 0.0 <= self.direction_degrees < 360.0:
            raise ValueError(f"Wind direction must be in [0, 360), got {self.direction_degrees}")
        if not 0.0 <= self.humidity_percent <= 100.0:
            raise ValueError(f"Humidity must be in [0, 100], got {self.humidity_percent}")


class HazardClass(enum.Enum):
    GAS = "gas"
    LIQUID = "liquid"
    OTHER = "other"

    @classmethod
    def from_hazard_type(cls, hazard_type) -> "HazardClass":
        """Map a catalog hazard_type string; unknown or non-string values are OTHER."""
        key = hazard_type.strip().lower() if isinstance(hazard_type, str) else ""
        if key == "gas":
            return cls.GAS
        if key == "liquid":
            return cls.LIQUID
        return cls.OTHER

    @property
    def multiplier(self) -> float:
        # gases disperse further than liquids / particulates
        return 2.0 if self is HazardClass.GAS else 1.0


@dataclass(slots=True, frozen=True)
class ChemicalOption:
    id: int
    name: str
    hazard_type: Optional[str] = None
    volatility_level: Optional[float] = None
    solubility_level: Optional[float] = None

    @property
    def hazard_class(self) -> HazardClass:
        return HazardClass.from_hazard_type(self.hazard_type)

    @classmethod
    def from_row(cls, row: dict) -> "ChemicalOption":
        """Build from a catalog row / the `chemical` descriptor of a model response."""
        return cls(
            id=int(row["id"]),
            name=str(row["name"]),
            hazard_type=row.get("hazard_type"),
            volatility_level=row.get("volatility_level"),
            solubility_level=row.get("solubility_level"),
        )

    def to_dict(self) -> dict:
        out = {"id": self.id, "name": self.name, "hazard_type": self.hazard_type}
        if self.volatility_level is not None:
            out["volatility_level"] = self.volatility_level
        if self.solubility_level is not None:
            out["solubility_level"] = self.solubility_level
        return out


class Source(enum.Enum):
    LIVE = "live"
    FALLBACK = "fallback"


@dataclass(slots=True, frozen=True)
class Sourced(Generic[T]):
    """A value tagged with where it came from."""

    source: Source
    data: T

    @property
    def is_fallback(self) -> bool:
        return self.source is Source.FALLBACK


DispersionPolygon = Tuple[GeoPoint, ...]


@dataclass(slots=True, frozen=True)
class PredictionProperties:
    hazard_class: HazardClass
    wind_speed_mph: float
    wind_direction_degrees: float
    generated_at: datetime
    model_type: str
    source: Source
    weather_source: Source = Source.LIVE
    source_chemical: Optional[ChemicalOption] = None


@dataclass(slots=True, frozen=True)
class PredictionResult:
    center: GeoPoint
    polygon: DispersionPolygon
    properties: PredictionProperties
