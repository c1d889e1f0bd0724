"""Tests for the map-facing GeoJSON / EsriJSON conversion."""

import pytest

from hazardview.api.geojson import (
    advisory_for, to_esrijson, to_feature, to_feature_collection, tooltip,
)
from hazardview.models import HazardClass, Source
from hazardview.simulators.local_plume import estimate
from hazardview.simulators.remote_plume import parse_feature


@pytest.fixture
def local_result(center, wind, chlorine):
    return estimate(center, wind, HazardClass.GAS, chemical=chlorine)


class TestFeature:
    def test_ring_is_lnglat(self, local_result):
        feat = to_feature(local_result)
        ring = feat["geometry"]["coordinates"][0]
        assert feat["geometry"]["type"] == "Polygon"
        assert len(ring) == 25
        first = local_result.polygon[0]
        assert ring[0] == [first.longitude, first.latitude]
        assert ring[0] == ring[-1]

    def test_properties(self, local_result):
        props = to_feature(local_result)["properties"]
        assert props["layer"] == "prediction"
        assert props["hazard_class"] == "gas"
        assert props["source"] == "fallback"
        assert props["weather_source"] == "live"
        assert props["chemical"]["name"] == "Chlorine"
        assert props["fill"] == "#f59e0b"
        assert props["tooltip"] == "Wind: 20 mph at 180°"

    def test_collection_has_center_point(self, local_result):
        fc = to_feature_collection(local_result)
        assert fc["type"] == "FeatureCollection"
        layers = [f["properties"]["layer"] for f in fc["features"]]
        assert layers == ["prediction", "center"]
        assert fc["features"][1]["geometry"]["coordinates"] == [-90.0, 40.0]


class TestAdvisory:
    def test_fallback_polygon(self, local_result):
        assert "client-side estimate" in advisory_for(local_result)

    def test_fallback_weather(self, center, wind, chlorine):
        res = estimate(center, wind, HazardClass.GAS, weather_source=Source.FALLBACK)
        msg = advisory_for(res)
        assert "default wind" in msg

    def test_live_result_has_no_advisory(self, plume_feature, center, wind, chlorine):
        res = parse_feature(plume_feature, center, wind, chlorine)
        assert advisory_for(res) is None


class TestEsriJson:
    def test_polygon(self, local_result):
        esri = to_esrijson(to_feature(local_result)["geometry"], {"a": 1})
        assert esri["geometryType"] == "esriGeometryPolygon"
        assert esri["spatialReference"] == {"wkid": 4326}
        rings = esri["features"][0]["geometry"]["rings"]
        assert len(rings) == 1 and len(rings[0]) == 25
        assert esri["features"][0]["attributes"] == {"a": 1}

    def test_multipolygon_flattens_rings(self):
        sq = [[0, 0], [1, 0], [1, 1], [0, 0]]
        esri = to_esrijson({"type": "MultiPolygon", "coordinates": [[sq], [sq]]})
        assert len(esri["features"][0]["geometry"]["rings"]) == 2

    def test_rejects_points(self):
        with pytest.raises(ValueError):
            to_esrijson({"type": "Point", "coordinates": [0, 0]})


def test_tooltip_formats_fractions(center, chlorine):
    from hazardview.models import WindObservation
    w = WindObservation(speed_mph=7.5, direction_degrees=22.5,
                        temperature_f=50, humidity_percent=20)
    assert tooltip(estimate(center, w, HazardClass.OTHER)) == "Wind: 7.5 mph at 22.5°"
