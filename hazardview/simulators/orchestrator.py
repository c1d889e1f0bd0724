"""
Prediction orchestration
========================

One simulation request runs strictly in sequence::

    IDLE → FETCHING_WEATHER → INVOKING_REMOTE_MODEL
         → SUCCESS                                  → DONE
         → RETRYABLE_FAILURE … → EXHAUSTED_RETRIES  → FALLING_BACK_LOCAL → DONE
         → (404 / not configured)                   → FALLING_BACK_LOCAL → DONE

Weather failures fall back to the default observation, model failures of
any kind to the local ellipse, so ``run_simulation`` only raises for bad
user input. Whether the remote model is deployed is remembered per
orchestrator instance, never globally.

LatestPrediction is the visible‑state holder: each request takes a token,
and only the newest token may publish its result.
"""
from __future__ import annotations
import enum
import logging
import threading
from typing import Callable, Optional

from hazardview.errors import EndpointAbsent, InvalidUserInput, RemoteServiceError
from hazardview.ingest.weather import (
    EdgeWeatherProvider, StaticWeatherProvider, WeatherProvider, default_observation,
)
from hazardview.models import ChemicalOption, GeoPoint, PredictionResult, Source, Sourced
from hazardview.simulators.local_plume import LocalPlumeEstimator
from hazardview.simulators.remote_plume import RemotePlumeModel
from hazardview.utils.geo import require_valid_point

_log = logging.getLogger(__name__)


class SimulationState(enum.Enum):
    IDLE = "idle"
    FETCHING_WEATHER = "fetching_weather"
    INVOKING_REMOTE_MODEL = "invoking_remote_model"
    RETRYABLE_FAILURE = "retryable_failure"
    EXHAUSTED_RETRIES = "exhausted_retries"
    SUCCESS = "success"
    FALLING_BACK_LOCAL = "falling_back_local"
    DONE = "done"


class PredictionOrchestrator:
    """
    Parameters
    ----------
    remote           : RemotePlumeModel (None → always local)
    local            : LocalPlumeEstimator
    weather_provider : default provider when run_simulation gets none
    """

    def __init__(self, remote: Optional[RemotePlumeModel] = None,
                 local: Optional[LocalPlumeEstimator] = None,
                 weather_provider: Optional[WeatherProvider] = None):
        self.remote = remote
        self.local = local or LocalPlumeEstimator()
        self.weather_provider = weather_provider
        # None = not yet known, False = 404 seen / not configured
        self._remote_deployed: Optional[bool] = None
        if remote is None or not remote.configured:
            self._remote_deployed = False

    @classmethod
    def from_config(cls) -> "PredictionOrchestrator":
        return cls(remote=RemotePlumeModel(), weather_provider=EdgeWeatherProvider())

    # ── availability ────────────────────────────────────────────────────
    @property
    def remote_deployed(self) -> Optional[bool]:
        return self._remote_deployed

    def reset_remote_availability(self):
        """Forget a previous 404 so the next run tries the remote model again."""
        if self.remote is not None and self.remote.configured:
            self._remote_deployed = None

    # ── main entry ──────────────────────────────────────────────────────
    def run_simulation(self, center: GeoPoint, chemical: Optional[ChemicalOption],
                       weather_provider: Optional[WeatherProvider] = None,
                       on_state: Optional[Callable[[SimulationState], None]] = None
                       ) -> PredictionResult:
        """
        Parameters
        ----------
        center           : release point (validated here)
        chemical         : selected chemical; None is rejected
        weather_provider : overrides the instance provider for this run
        on_state         : observer for every state transition

        Raises
        ------
        InvalidUserInput before any network call; nothing else.
        """
        emit = on_state or (lambda state: None)
        emit(SimulationState.IDLE)

        if chemical is None:
            raise InvalidUserInput("Please select a chemical first.")
        require_valid_point(center)

        provider = (weather_provider or self.weather_provider
                    or StaticWeatherProvider(source=Source.FALLBACK))

        emit(SimulationState.FETCHING_WEATHER)
        try:
            weather = provider.get_weather(center.latitude, center.longitude)
        except Exception as exc:
            _log.warning("Weather provider failed (%s) – using default weather.", exc)
            weather = Sourced(Source.FALLBACK, default_observation())
        if weather.is_fallback:
            _log.warning("Using default weather for %s", center)

        hazard_class = chemical.hazard_class

        if self._remote_deployed is not False:
            emit(SimulationState.INVOKING_REMOTE_MODEL)
            try:
                result = self.remote.predict(
                    center, chemical, weather.data,
                    weather_source=weather.source,
                    on_retry=lambda *_: emit(SimulationState.RETRYABLE_FAILURE),
                )
            except EndpointAbsent as exc:
                self._remote_deployed = False
                _log.warning("Remote dispersion model not deployed (%s) – "
                             "using client-side fallback.", exc.hint)
            except RemoteServiceError as exc:
                emit(SimulationState.EXHAUSTED_RETRIES)
                _log.error("Error running prediction (using client-side fallback): %s", exc)
            except Exception:
                emit(SimulationState.EXHAUSTED_RETRIES)
                _log.exception("Unexpected error from remote model – using client-side fallback.")
            else:
                self._remote_deployed = True
                emit(SimulationState.SUCCESS)
                emit(SimulationState.DONE)
                _log.info("Remote prediction: %d points", len(result.polygon))
                return result
        else:
            _log.info("Remote model unavailable – running local estimator directly.")

        emit(SimulationState.FALLING_BACK_LOCAL)
        result = self.local.estimate(center, weather.data, hazard_class,
                                     chemical=chemical, weather_source=weather.source)
        emit(SimulationState.DONE)
        return result


class LatestPrediction:
    """
    Token guard for the one visible prediction.

    ``issue()`` before running a simulation, ``offer(token, result)`` after;
    a result whose token has been superseded (newer issue or clear) is
    dropped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._epoch = 0
        self._current: Optional[PredictionResult] = None

    def issue(self) -> int:
        with self._lock:
            self._epoch += 1
            return self._epoch

    def offer(self, token: int, result: PredictionResult) -> bool:
        with self._lock:
            if token != self._epoch:
                _log.info("Discarding stale prediction (token %d, current %d)",
                          token, self._epoch)
                return False
            self._current = result
            return True

    def clear(self):
        with self._lock:
            self._epoch += 1
            self._current = None

    @property
    def current(self) -> Optional[PredictionResult]:
        with self._lock:
            return self._current
