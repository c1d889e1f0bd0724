"""
Prediction API
==============

Serves the dispersion prediction to the map front‑end.

Endpoints
---------
GET    /health                    – liveness + remote model availability
GET    /chemicals                 – selectable chemicals (source‑tagged)
GET    /weather?lat=…&lng=…       – wind at a point (source‑tagged)
POST   /simulate                  – run one simulation, publish if still newest
GET    /prediction?fmt=geojson    – currently visible prediction (or esrijson)
DELETE /prediction                – clear it

Run with::

    uvicorn hazardview.api.prediction_api:app
"""
from __future__ import annotations
import logging
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from hazardview.api.geojson import (
    advisory_for, properties, to_esrijson, to_feature, to_feature_collection,
)
from hazardview.errors import InvalidUserInput
from hazardview.ingest.chemicals import ChemicalCatalog
from hazardview.ingest.weather import EdgeWeatherProvider
from hazardview.models import GeoPoint
from hazardview.simulators.orchestrator import LatestPrediction, PredictionOrchestrator
from hazardview.utils.config import conf

_log = logging.getLogger(__name__)

app = FastAPI(title="HazardView Prediction API")


class SimulationRequest(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    chemical_id: Optional[int] = None


# ── Shared, process‑local collaborators (overridable in tests) ────────────
_orchestrator: Optional[PredictionOrchestrator] = None
_catalog: Optional[ChemicalCatalog] = None
_board = LatestPrediction()


def get_orchestrator() -> PredictionOrchestrator:
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = PredictionOrchestrator.from_config()
    return _orchestrator


def get_catalog() -> ChemicalCatalog:
    global _catalog
    if _catalog is None:
        _catalog = ChemicalCatalog.from_config(conf)
    return _catalog


def get_board() -> LatestPrediction:
    return _board


@app.exception_handler(InvalidUserInput)
async def _invalid_input(request: Request, exc: InvalidUserInput):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


# ── Endpoints ──────────────────────────────────────────────────────────────
@app.get("/health")
def health(orch: PredictionOrchestrator = Depends(get_orchestrator)):
    return {"status": "ok", "remote_deployed": orch.remote_deployed}


@app.get("/chemicals")
def chemicals(catalog: ChemicalCatalog = Depends(get_catalog)):
    res = catalog.list_chemicals()
    return {"source": res.source.value,
            "chemicals": [c.to_dict() for c in res.data]}


@app.get("/weather")
def weather(lat: float = Query(..., ge=-90, le=90),
            lng: float = Query(..., ge=-180, le=180),
            orch: PredictionOrchestrator = Depends(get_orchestrator)):
    provider = orch.weather_provider or EdgeWeatherProvider()
    res = provider.get_weather(lat, lng)
    w = res.data
    return {
        "source": res.source.value,
        "windSpeed": w.speed_mph,
        "windDirection": w.direction_degrees,
        "temperature": w.temperature_f,
        "humidity": w.humidity_percent,
        "timestamp": w.observed_at.isoformat(),
    }


@app.post("/simulate")
def simulate(req: SimulationRequest,
             orch: PredictionOrchestrator = Depends(get_orchestrator),
             catalog: ChemicalCatalog = Depends(get_catalog),
             board: LatestPrediction = Depends(get_board)):
    if req.chemical_id is None:
        raise InvalidUserInput("Please select a chemical first.")
    chemical = catalog.find(req.chemical_id)
    if chemical is None:
        raise InvalidUserInput("Selected chemical not found or list not loaded.")

    token = board.issue()
    result = orch.run_simulation(GeoPoint(req.latitude, req.longitude), chemical)
    applied = board.offer(token, result)
    return {
        "applied": applied,
        "advisory": advisory_for(result),
        "prediction": to_feature_collection(result),
    }


@app.get("/prediction")
def prediction(fmt: str = Query("geojson"),
               board: LatestPrediction = Depends(get_board)):
    result = board.current
    if result is None:
        raise HTTPException(404, "No prediction")

    if fmt.lower() == "geojson":
        return JSONResponse(to_feature_collection(result))
    if fmt.lower() == "esrijson":
        feat = to_feature(result)
        return JSONResponse(to_esrijson(feat["geometry"], properties(result)))

    raise HTTPException(400, "fmt must be geojson or esrijson")


@app.delete("/prediction")
def clear_prediction(board: LatestPrediction = Depends(get_board)):
    board.clear()
    return {"cleared": True}


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host=conf.api["host"], port=int(conf.api["port"]))
