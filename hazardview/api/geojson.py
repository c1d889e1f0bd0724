"""
Turn a PredictionResult into something a web map can draw.

The output is a flat FeatureCollection with a `layer` attribute so the
map (Leaflet, ArcGIS) can filter / symbolise each logical layer:

Layers
------
prediction : polygon – hazard class, wind, model, tooltip, fill colour
center     : point   – release location

`to_esrijson()` converts the polygon geometry into the ESRI JSON dialect
for ArcGIS clients that cannot read GeoJSON.
"""
from __future__ import annotations
from typing import Any, Dict, Optional

from hazardview.models import HazardClass, PredictionResult, Source
from hazardview.utils.geo import ring_to_lnglat

# fill colour + tooltip title per hazard class
_STYLE = {
    HazardClass.GAS:    ("#f59e0b", "Gas Dispersion"),
    HazardClass.LIQUID: ("#6366f1", "Liquid Spill Dispersion"),
    HazardClass.OTHER:  ("#3b82f6", "Hazard Dispersion Area"),
}


def tooltip(result: PredictionResult) -> str:
    p = result.properties
    return f"Wind: {p.wind_speed_mph:g} mph at {p.wind_direction_degrees:g}°"


def advisory_for(result: PredictionResult) -> Optional[str]:
    """Non‑fatal notice when any part of the result came from fallback data."""
    p = result.properties
    notes = []
    if p.source is Source.FALLBACK:
        notes.append("the dispersion model is unavailable, so a simplified "
                     "client-side estimate is shown")
    if p.weather_source is Source.FALLBACK:
        notes.append("live weather could not be loaded, so default wind "
                     "conditions were used")
    if not notes:
        return None
    return "Using demo data: " + "; ".join(notes) + "."


def properties(result: PredictionResult) -> Dict[str, Any]:
    p = result.properties
    fill, title = _STYLE[p.hazard_class]
    return {
        "layer": "prediction",
        "hazard_class": p.hazard_class.value,
        "wind_speed_mph": p.wind_speed_mph,
        "wind_direction_deg": p.wind_direction_degrees,
        "generated_at": p.generated_at.isoformat(),
        "model_type": p.model_type,
        "source": p.source.value,
        "weather_source": p.weather_source.value,
        "chemical": p.source_chemical.to_dict() if p.source_chemical else None,
        "title": title,
        "tooltip": tooltip(result),
        "fill": fill,
    }


def to_feature(result: PredictionResult) -> Dict[str, Any]:
    """Prediction polygon as a GeoJSON Feature (ring in [lng, lat])."""
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon",
                     "coordinates": [ring_to_lnglat(result.polygon)]},
        "properties": properties(result),
    }


def to_feature_collection(result: PredictionResult) -> Dict[str, Any]:
    c = result.center
    center = {
        "type": "Feature",
        "geometry": {"type": "Point", "coordinates": [c.longitude, c.latitude]},
        "properties": {"layer": "center"},
    }
    return {
        "type": "FeatureCollection",
        "title": f"Prediction_{result.properties.generated_at:%Y-%m-%dT%H%M%S}",
        "features": [to_feature(result), center],
    }


# ── GeoJSON → ESRI JSON converter (simple, polygon‑only) ───────────────────
def to_esrijson(geo: dict, attributes: Optional[dict] = None) -> dict:
    """
    ArcGIS *EsriJSON* format uses:
      • 'rings' instead of 'coordinates'
      • x = longitude, y = latitude (same order as GeoJSON)
      • spatialReference.wkid (4326 = WGS84)

    Only Polygon & MultiPolygon are needed for plume rings.
    """
    if geo["type"] == "Polygon":
        rings = [[list(pt) for pt in ring] for ring in geo["coordinates"]]
    elif geo["type"] == "MultiPolygon":
        rings = [[list(pt) for pt in ring] for poly in geo["coordinates"] for ring in poly]
    else:
        raise ValueError("Only polygons supported")

    return {
        "geometryType": "esriGeometryPolygon",
        "spatialReference": {"wkid": 4326},
        "features": [{"geometry": {"rings": rings}, "attributes": attributes or {}}],
    }
