"""
Local Plume Estimator
=====================

Client‑computable stand‑in for the remote dispersion model. Given a source
point, the wind and a hazard class it returns an ellipse:

• major axis along the downwind heading, ``speed_mph × 0.0005`` degrees
  (×2 for gases), minor axis half the unscaled major axis
• 24 perimeter samples + the first sample repeated to close the ring
• longitude offsets stretched by 1/cos(latitude)

This is an empirical footprint, not a Gaussian‑plume solution. It never
raises over valid input; latitude must be within ±90° (not checked here).
At the poles the longitude stretch blows up – left as is.
"""
from __future__ import annotations
import logging
import math
from typing import List, Optional, Tuple

from hazardview.models import (
    ChemicalOption, GeoPoint, HazardClass, PredictionProperties,
    PredictionResult, Source, WindObservation, utcnow,
)
from hazardview.utils.geo import lng_scale, met_to_math_heading

AXIS_DEG_PER_MPH = 0.0005   # roughly 50 m of plume per mph
MINOR_TO_MAJOR = 0.5        # plume twice as long as wide
NUM_SAMPLES = 24
MODEL_TYPE = "Client-side Ellipse"

_log = logging.getLogger(__name__)


class LocalPlumeEstimator:
    """Stateless; one instance can serve every thread."""

    model_type = MODEL_TYPE

    @staticmethod
    def heading_radians(direction_degrees: float) -> float:
        return met_to_math_heading(direction_degrees)

    @staticmethod
    def axes(wind: WindObservation, hazard_class: HazardClass) -> Tuple[float, float]:
        """(major, minor) semi‑axes in degrees."""
        major = wind.speed_mph * AXIS_DEG_PER_MPH
        minor = major * MINOR_TO_MAJOR
        major *= hazard_class.multiplier
        return major, minor

    def ring(self, center: GeoPoint, wind: WindObservation,
             hazard_class: HazardClass) -> List[GeoPoint]:
        """Closed ring of NUM_SAMPLES + 1 points."""
        heading = self.heading_radians(wind.direction_degrees)
        major, minor = self.axes(wind, hazard_class)
        cos_h, sin_h = math.cos(heading), math.sin(heading)
        stretch = lng_scale(center.latitude)

        points = []
        for i in range(NUM_SAMPLES):
            theta = (i / NUM_SAMPLES) * 2 * math.pi
            x = major * math.cos(theta)
            y = minor * math.sin(theta)

            # rotate into the downwind heading
            rx = x * cos_h - y * sin_h
            ry = x * sin_h + y * cos_h

            points.append(GeoPoint(center.latitude + ry,
                                   center.longitude + rx * stretch))

        points.append(points[0])
        return points

    def estimate(self, center: GeoPoint, wind: WindObservation,
                 hazard_class: HazardClass,
                 chemical: Optional[ChemicalOption] = None,
                 weather_source: Source = Source.LIVE) -> PredictionResult:
        """
        Parameters
        ----------
        center         : release point
        wind           : speed (mph) and FROM direction (deg)
        hazard_class   : GAS doubles the major axis
        chemical       : carried into properties.source_chemical
        weather_source : whether ``wind`` was live or the default

        Returns
        -------
        PredictionResult with a 25‑point closed polygon.
        """
        polygon = tuple(self.ring(center, wind, hazard_class))
        _log.debug("Local ellipse: %d points, axes=%s", len(polygon),
                   self.axes(wind, hazard_class))
        return PredictionResult(
            center=center,
            polygon=polygon,
            properties=PredictionProperties(
                hazard_class=hazard_class,
                wind_speed_mph=wind.speed_mph,
                wind_direction_degrees=wind.direction_degrees,
                generated_at=utcnow(),
                model_type=self.model_type,
                source=Source.FALLBACK,
                weather_source=weather_source,
                source_chemical=chemical,
            ),
        )


_default = LocalPlumeEstimator()


def estimate(center: GeoPoint, wind: WindObservation,
             hazard_class: HazardClass, **kwargs) -> PredictionResult:
    """Module‑level shortcut for LocalPlumeEstimator().estimate."""
    return _default.estimate(center, wind, hazard_class, **kwargs)
