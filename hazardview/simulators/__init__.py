"""
Simulation drivers.

• local_plume.estimate(...)             – client-side ellipse (always available)
• remote_plume.RemotePlumeModel         – server-side dispersion model
• orchestrator.PredictionOrchestrator   – remote first, local fallback
"""
from .local_plume import LocalPlumeEstimator, estimate
from .remote_plume import RemotePlumeModel
from .orchestrator import LatestPrediction, PredictionOrchestrator, SimulationState

__all__ = ["LocalPlumeEstimator", "estimate", "RemotePlumeModel",
           "PredictionOrchestrator", "LatestPrediction", "SimulationState"]
