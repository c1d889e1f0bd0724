"""
hazardview – hazard map backend with a plume footprint predictor
----------------------------------------------------------------

Sub‑packages:
    utils       – config, retry, HTTP + coordinate helpers
    ingest      – weather and chemical catalog collaborators
    simulators  – local ellipse, remote model, orchestration
    api         – FastAPI app for the map front‑end

Public re‑exports
-----------------
>>> from hazardview import conf, estimate, PredictionOrchestrator
"""
import logging
from importlib import import_module

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Central config adapter (one object, shared everywhere)
conf = import_module("hazardview.utils.config").conf

# Convenience call‑throughs so users can write::
#     from hazardview import estimate
estimate = import_module("hazardview.simulators.local_plume").estimate
PredictionOrchestrator = import_module("hazardview.simulators.orchestrator").PredictionOrchestrator

__all__ = ["conf", "estimate", "PredictionOrchestrator"]
__version__ = "0.1.0"
