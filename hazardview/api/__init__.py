"""
Expose the FastAPI app so uvicorn can import quickly:

    uvicorn hazardview.api.prediction_api:app
"""
from .prediction_api import app

__all__ = ["app"]
