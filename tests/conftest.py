"""Shared fixtures for the hazardview test suite."""

import json
import os
import sys

import pytest
import requests

# Ensure project root is importable
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from hazardview.models import ChemicalOption, GeoPoint, WindObservation
from hazardview.utils.http import EdgeFunctionClient


class FakeResponse:
    """Just enough of requests.Response for utils.http."""

    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else json.dumps(body)

    @property
    def ok(self):
        return 200 <= self.status_code < 300

    def json(self):
        if self._body is None:
            raise ValueError("No JSON object could be decoded")
        return self._body


class ScriptedRequests:
    """Replays a queue of responses / exceptions and records every call."""

    def __init__(self):
        self.queue = []
        self.calls = []

    def push(self, *items):
        self.queue.extend(items)
        return self

    def __call__(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        if not self.queue:
            raise requests.ConnectionError("no scripted response left")
        item = self.queue.pop(0)
        if isinstance(item, Exception):
            raise item
        return item


@pytest.fixture
def fake_http(monkeypatch):
    """Patch requests.request as seen by hazardview.utils.http."""
    scripted = ScriptedRequests()
    monkeypatch.setattr("hazardview.utils.http.requests.request", scripted)
    return scripted


@pytest.fixture
def no_sleep():
    """Collects requested delays instead of sleeping."""
    delays = []
    return delays.append, delays


@pytest.fixture
def client(no_sleep):
    sleep, _ = no_sleep
    return EdgeFunctionClient("https://functions.test/v1", "anon-key",
                              retry={"max_retries": 3, "initial_delay": 0.5,
                                     "multiplier": 2.0},
                              sleep=sleep)


@pytest.fixture
def center():
    return GeoPoint(40.0, -90.0)


@pytest.fixture
def wind():
    """20 mph from the south."""
    return WindObservation(speed_mph=20.0, direction_degrees=180.0,
                           temperature_f=70.0, humidity_percent=50.0)


@pytest.fixture
def chlorine():
    return ChemicalOption(id=3, name="Chlorine", hazard_type="gas")


@pytest.fixture
def benzene():
    return ChemicalOption(id=7, name="Benzene", hazard_type="liquid")


@pytest.fixture
def weather_body():
    return {
        "windSpeed": 8,
        "windDirection": 270,
        "temperature": 65,
        "humidity": 30,
        "timestamp": "2025-05-11T14:00:00Z",
    }


@pytest.fixture
def plume_feature():
    """A model response: small square ring in [lng, lat] order."""
    return {
        "type": "Feature",
        "geometry": {
            "type": "Polygon",
            "coordinates": [[
                [-90.0, 40.0], [-89.9, 40.0], [-89.9, 40.1],
                [-90.0, 40.1], [-90.0, 40.0],
            ]],
        },
        "properties": {
            "chemical": {"id": 3, "name": "Chlorine", "hazard_type": "gas",
                         "volatility_level": 4, "solubility_level": 2},
            "model_type": "Gaussian Plume",
        },
    }
