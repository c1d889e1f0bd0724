"""
hazardview/ingest/weather.py
============================

Weather provider backed by the ``get-weather-data`` edge function
-----------------------------------------------------------------

• POST ``{"lat": …, "lon": …}`` to the function
• Normalise the reply into a WindObservation::

      {
          "windSpeed": 12,            # mph, number or "12 mph"
          "windDirection": 225,       # degrees FROM, or compass "SW"
          "temperature": 72,          # °F
          "humidity": 45,             # %
          "timestamp": "2025-05-11T14:00:00Z"
      }

• On exhausted retries (or a 404 / missing URL) return the configured
  default observation, tagged Source.FALLBACK so callers can tell.
"""
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional

from hazardview.errors import EndpointAbsent, MalformedResponse, RemoteServiceError
from hazardview.models import Source, Sourced, WindObservation, utcnow
from hazardview.utils.config import conf
from hazardview.utils.geo import normalize_direction
from hazardview.utils.http import EdgeFunctionClient

ENDPOINT = "get-weather-data"

# 16‑point compass rose → bearing in degrees
_dirs = "N NNE NE ENE E ESE SE SSE S SSW SW WSW W WNW NW NNW".split()
_angles = [i * 22.5 for i in range(16)]

_log = logging.getLogger(__name__)


def default_observation(cfg=conf) -> WindObservation:
    """The fixed observation substituted when no live weather is available."""
    fb = cfg.weather["fallback"]
    return WindObservation(
        speed_mph=float(fb["wind_speed_mph"]),
        direction_degrees=normalize_direction(fb["wind_direction_deg"]),
        temperature_f=float(fb["temperature_f"]),
        humidity_percent=float(fb["humidity_percent"]),
        observed_at=utcnow(),
    )


# ────────────────────────────────────────────────────────────────────────────
def _speed(raw) -> float:
    if isinstance(raw, str):
        txt = raw.split()[0] if raw.split() else ""
        # "Calm", "" … → still air
        try:
            raw = float(txt)
        except ValueError:
            return 0.0
    return max(float(raw), 0.0)


def _direction(raw) -> float:
    if isinstance(raw, str):
        txt = raw.strip().upper()
        if txt in _dirs:
            return _angles[_dirs.index(txt)]
        raw = float(txt)
    return normalize_direction(float(raw))


def _timestamp(raw) -> datetime:
    if not raw:
        return utcnow()
    ts = datetime.fromisoformat(str(raw).replace("Z", "+00:00"))
    return ts if ts.tzinfo else ts.replace(tzinfo=timezone.utc)


def parse_weather(body) -> WindObservation:
    """Edge‑function JSON → WindObservation; MalformedResponse if unusable."""
    try:
        return WindObservation(
            speed_mph=_speed(body["windSpeed"]),
            direction_degrees=_direction(body["windDirection"]),
            temperature_f=float(body["temperature"]),
            humidity_percent=min(max(float(body["humidity"]), 0.0), 100.0),
            observed_at=_timestamp(body.get("timestamp")),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MalformedResponse(f"Unusable weather payload: {body!r}",
                                endpoint=ENDPOINT) from exc


# ────────────────────────────────────────────────────────────────────────────
class WeatherProvider(ABC):
    """Anything that can report the wind at a point."""

    @abstractmethod
    def get_weather(self, lat: float, lng: float) -> Sourced[WindObservation]:
        ...


class StaticWeatherProvider(WeatherProvider):
    """Always returns the same observation (offline use, tests)."""

    def __init__(self, observation: Optional[WindObservation] = None,
                 source: Source = Source.LIVE):
        self.observation = observation or default_observation()
        self.source = source

    def get_weather(self, lat: float, lng: float) -> Sourced[WindObservation]:
        return Sourced(self.source, self.observation)


class EdgeWeatherProvider(WeatherProvider):
    """
    Parameters
    ----------
    client : EdgeFunctionClient; defaults to one built from config.yaml
    cfg    : config used for the fallback observation
    """

    def __init__(self, client: Optional[EdgeFunctionClient] = None, cfg=conf):
        self.client = client or EdgeFunctionClient.from_config(cfg)
        self.cfg = cfg

    def get_weather(self, lat: float, lng: float) -> Sourced[WindObservation]:
        _log.info("Fetching weather data for %.4f,%.4f", lat, lng)
        try:
            obs = self.client.call(ENDPOINT, {"lat": lat, "lon": lng}, parse=parse_weather)
        except EndpointAbsent as exc:
            _log.warning("%s Using default weather.", exc.hint)
        except RemoteServiceError as exc:
            _log.error("Error fetching weather data (using default weather): %s", exc)
        else:
            return Sourced(Source.LIVE, obs)
        return Sourced(Source.FALLBACK, default_observation(self.cfg))


if __name__ == "__main__":           # quick CLI check
    import sys
    logging.basicConfig(level=logging.INFO)
    lat, lng = (float(x) for x in sys.argv[1:3])
    res = EdgeWeatherProvider().get_weather(lat, lng)
    print(res.source.value, res.data)
