"""
Remote dispersion model client
==============================

Calls the ``run-dispersion-prediction`` edge function::

    POST {"latitude": 40.0, "longitude": -90.0, "chemical_id": 3}

and expects a GeoJSON Feature back::

    {
      "type": "Feature",
      "geometry": {"type": "Polygon", "coordinates": [[[lng, lat], …]]},
      "properties": {
        "chemical":   {"id": 3, "name": "Chlorine", "hazard_type": "gas", …},
        "model_type": "Gaussian Plume"
      }
    }

The first exterior ring is pulled out with shapely (Polygon, MultiPolygon
and GeometryCollection are all accepted) and swapped into GeoPoint order.
"""
from __future__ import annotations
import logging
from typing import Optional

import shapely.geometry as SG
from shapely.errors import ShapelyError

from hazardview.errors import MalformedResponse
from hazardview.models import (
    ChemicalOption, GeoPoint, HazardClass, PredictionProperties,
    PredictionResult, Source, WindObservation, utcnow,
)
from hazardview.utils.config import conf
from hazardview.utils.geo import ring_from_lnglat
from hazardview.utils.http import EdgeFunctionClient

ENDPOINT = "run-dispersion-prediction"
DEFAULT_MODEL_TYPE = "Simplified Model"

_log = logging.getLogger(__name__)


def _extract_ring(geom):
    """Return first polygon exterior coords from any geometry type."""
    if geom.geom_type == "Polygon":
        return list(geom.exterior.coords)
    if geom.geom_type == "MultiPolygon":
        return list(geom.geoms[0].exterior.coords) if len(geom.geoms) else None
    if geom.geom_type == "GeometryCollection":
        for g in geom.geoms:
            ring = _extract_ring(g)
            if ring:
                return ring
    return None


def parse_feature(body, center: GeoPoint, wind: WindObservation,
                  chemical: ChemicalOption,
                  weather_source: Source = Source.LIVE) -> PredictionResult:
    """
    Model response → PredictionResult.

    Raises MalformedResponse when there is no usable ring (fewer than
    4 points once closed).
    """
    if not isinstance(body, dict):
        raise MalformedResponse("Prediction response is not a JSON object", endpoint=ENDPOINT)

    geometry = body.get("geometry", body if "coordinates" in body else None)
    props = body.get("properties")
    if not isinstance(props, dict):
        props = {}
    if not geometry:
        raise MalformedResponse("Prediction response has no geometry", endpoint=ENDPOINT)

    try:
        ring = _extract_ring(SG.shape(geometry))
    except (ShapelyError, KeyError, TypeError, ValueError, AttributeError, IndexError) as exc:
        raise MalformedResponse(f"Unparsable prediction geometry: {exc}",
                                endpoint=ENDPOINT) from exc
    if not ring or len(ring) < 4:
        raise MalformedResponse("Prediction polygon has fewer than 3 vertices",
                                endpoint=ENDPOINT)

    descriptor = props.get("chemical")
    try:
        returned = ChemicalOption.from_row(descriptor) if descriptor else None
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MalformedResponse(f"Bad chemical descriptor: {exc}", endpoint=ENDPOINT) from exc

    hazard_type = returned.hazard_type if returned and returned.hazard_type else chemical.hazard_type

    return PredictionResult(
        center=center,
        polygon=tuple(ring_from_lnglat(ring)),
        properties=PredictionProperties(
            hazard_class=HazardClass.from_hazard_type(hazard_type),
            wind_speed_mph=wind.speed_mph,
            wind_direction_degrees=wind.direction_degrees,
            generated_at=utcnow(),
            model_type=props.get("model_type") or DEFAULT_MODEL_TYPE,
            source=Source.LIVE,
            weather_source=weather_source,
            source_chemical=returned or chemical,
        ),
    )


class RemotePlumeModel:
    """
    Parameters
    ----------
    client : EdgeFunctionClient; defaults to one built from config.yaml
    """

    def __init__(self, client: Optional[EdgeFunctionClient] = None):
        self.client = client or EdgeFunctionClient.from_config(conf)

    @property
    def configured(self) -> bool:
        return self.client.configured

    def predict(self, center: GeoPoint, chemical: ChemicalOption,
                wind: WindObservation, weather_source: Source = Source.LIVE,
                on_retry=None) -> PredictionResult:
        """
        One retried round trip to the model.

        Raises
        ------
        EndpointAbsent     : function not deployed (not retried)
        RemoteServiceError : anything else, after retries are exhausted
        """
        payload = {
            "latitude": center.latitude,
            "longitude": center.longitude,
            "chemical_id": chemical.id,
        }
        _log.info("Calling /%s with %s", ENDPOINT, payload)
        return self.client.call(
            ENDPOINT, payload,
            parse=lambda body: parse_feature(body, center, wind, chemical, weather_source),
            on_retry=on_retry,
        )
