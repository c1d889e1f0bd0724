"""Tests for the client-side plume ellipse."""

import math

import pytest

from hazardview.models import (
    ChemicalOption, GeoPoint, HazardClass, Source, WindObservation,
)
from hazardview.simulators.local_plume import (
    LocalPlumeEstimator, MODEL_TYPE, NUM_SAMPLES, estimate,
)


def _wind(speed, direction=180.0):
    return WindObservation(speed_mph=speed, direction_degrees=direction,
                           temperature_f=70.0, humidity_percent=50.0)


def _max_extent(result):
    """Largest distance (in degrees, longitude de-stretched) from the center."""
    c = result.center
    k = math.cos(math.radians(c.latitude))
    return max(math.hypot(p.latitude - c.latitude, (p.longitude - c.longitude) * k)
               for p in result.polygon)


class TestRing:
    def test_closed_ring_of_25_points(self, center, wind):
        res = estimate(center, wind, HazardClass.OTHER)
        assert len(res.polygon) == NUM_SAMPLES + 1 == 25
        assert res.polygon[0] == res.polygon[-1]

    @pytest.mark.parametrize("hazard", list(HazardClass))
    @pytest.mark.parametrize("direction", [0.0, 45.0, 137.5, 359.9])
    def test_closed_for_any_class_and_direction(self, center, hazard, direction):
        res = estimate(center, _wind(7.5, direction), hazard)
        assert len(res.polygon) == 25
        assert res.polygon[0] == res.polygon[24]

    def test_zero_wind_collapses_to_center(self, center):
        res = estimate(center, _wind(0.0), HazardClass.GAS)
        assert len(res.polygon) == 25
        assert all(p == center for p in res.polygon)


class TestAxes:
    def test_example_scenario(self, center, wind):
        est = LocalPlumeEstimator()
        major, minor = est.axes(wind, HazardClass.GAS)
        assert major == pytest.approx(0.02)
        assert minor == pytest.approx(0.005)
        assert est.heading_radians(180.0) == pytest.approx(math.pi / 2)

        first = est.estimate(center, wind, HazardClass.GAS).polygon[0]
        assert first.latitude == pytest.approx(40.02)
        assert first.longitude == pytest.approx(-90.0, abs=1e-12)

    def test_gas_major_axis_is_double(self, center, wind):
        gas = _max_extent(estimate(center, wind, HazardClass.GAS))
        other = _max_extent(estimate(center, wind, HazardClass.OTHER))
        liquid = _max_extent(estimate(center, wind, HazardClass.LIQUID))
        assert gas == pytest.approx(2 * other)
        assert liquid == pytest.approx(other)

    def test_minor_axis_not_scaled_for_gas(self, wind):
        est = LocalPlumeEstimator()
        assert est.axes(wind, HazardClass.GAS)[1] == est.axes(wind, HazardClass.OTHER)[1]

    def test_major_axis_monotonic_in_speed(self, center):
        extents = [_max_extent(estimate(center, _wind(s), HazardClass.LIQUID))
                   for s in (1, 5, 10, 20, 40)]
        assert all(a < b for a, b in zip(extents, extents[1:]))

    def test_major_axis_formula(self):
        est = LocalPlumeEstimator()
        for speed in (0.0, 3.0, 12.0, 33.3):
            assert est.axes(_wind(speed), HazardClass.GAS)[0] == pytest.approx(speed * 0.0005 * 2)
            assert est.axes(_wind(speed), HazardClass.OTHER)[0] == pytest.approx(speed * 0.0005)


class TestRotation:
    def test_wind_from_270_points_due_east(self, center):
        est = LocalPlumeEstimator()
        assert est.heading_radians(270.0) == 0.0

        res = est.estimate(center, _wind(10.0, 270.0), HazardClass.OTHER)
        first = res.polygon[0]
        assert first.latitude == center.latitude
        assert first.longitude > center.longitude

    def test_longitude_stretched_by_latitude(self):
        est = LocalPlumeEstimator()
        w = _wind(10.0, 270.0)
        at_equator = est.estimate(GeoPoint(0.0, 0.0), w, HazardClass.OTHER).polygon[0]
        at_60 = est.estimate(GeoPoint(60.0, 0.0), w, HazardClass.OTHER).polygon[0]
        assert at_equator.longitude == pytest.approx(0.005)
        assert at_60.longitude == pytest.approx(0.01)


class TestResult:
    def test_deterministic_apart_from_timestamp(self, center, wind):
        a = estimate(center, wind, HazardClass.GAS)
        b = estimate(center, wind, HazardClass.GAS)
        assert a.polygon == b.polygon
        assert a.center == b.center

    def test_properties(self, center, wind):
        chem = ChemicalOption(id=1, name="Ammonia", hazard_type="gas")
        res = estimate(center, wind, HazardClass.GAS, chemical=chem,
                       weather_source=Source.FALLBACK)
        p = res.properties
        assert p.hazard_class is HazardClass.GAS
        assert p.wind_speed_mph == 20.0
        assert p.wind_direction_degrees == 180.0
        assert p.model_type == MODEL_TYPE
        assert p.source is Source.FALLBACK
        assert p.weather_source is Source.FALLBACK
        assert p.source_chemical == chem
        assert p.generated_at.tzinfo is not None

    def test_near_pole_does_not_raise(self):
        res = estimate(GeoPoint(90.0, 0.0), _wind(10.0, 0.0), HazardClass.OTHER)
        assert len(res.polygon) == 25
