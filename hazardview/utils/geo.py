"""
Coordinate / unit helpers.

Axis order is the usual trap: the model function and GeoJSON speak
``[lng, lat]``, everything inside hazardview speaks GeoPoint(lat, lng).
"""
from __future__ import annotations
import math
from typing import Iterable, List, Sequence

from hazardview.errors import InvalidUserInput
from hazardview.models import GeoPoint


def deg2rad(deg: float) -> float:
    return deg * math.pi / 180.0


def met_to_math_heading(direction_deg: float) -> float:
    """
    Meteorological "blowing FROM" bearing → mathematical angle in radians
    (0 = East, counter‑clockwise positive).
    """
    return deg2rad(270.0 - direction_deg)


def normalize_direction(direction_deg: float) -> float:
    """Fold any bearing into [0, 360)."""
    d = math.fmod(float(direction_deg), 360.0)
    if d < 0:
        d += 360.0
    # -1e-14 % 360 rounds back up to 360.0
    return 0.0 if d >= 360.0 else d


def lng_scale(latitude_deg: float) -> float:
    """
    Degrees of longitude per degree of eastward offset at this latitude.

    Diverges at the poles; callers get whatever 1/cos gives them.
    """
    return 1.0 / math.cos(deg2rad(latitude_deg))


def ring_from_lnglat(coords: Iterable[Sequence[float]]) -> List[GeoPoint]:
    """``[[lng, lat], …]`` → [GeoPoint(lat, lng), …] (extra z ignored)."""
    return [GeoPoint(latitude=float(c[1]), longitude=float(c[0])) for c in coords]


def ring_to_lnglat(points: Iterable[GeoPoint]) -> List[List[float]]:
    return [[p.longitude, p.latitude] for p in points]


def require_valid_point(point: GeoPoint) -> GeoPoint:
    if not point.is_valid():
        raise InvalidUserInput(
            f"Location out of range: lat={point.latitude}, lng={point.longitude}"
        )
    return point
