"""
Failure taxonomy shared by every collaborator.

    RemoteServiceError          – anything that went wrong talking to a remote
    ├── TransientNetworkFailure – connection error, timeout, non‑2xx (≠ 404)
    ├── EndpointAbsent          – 404 / unconfigured URL → "not deployed"
    └── MalformedResponse       – body is not the JSON shape we expect

    InvalidUserInput            – rejected before any network call
"""
from __future__ import annotations


class RemoteServiceError(RuntimeError):
    """Base class for failures of a remote collaborator."""

    def __init__(self, message: str, *, endpoint: str = "", status: int | None = None):
        super().__init__(message)
        self.endpoint = endpoint
        self.status = status


class TransientNetworkFailure(RemoteServiceError):
    pass


class EndpointAbsent(RemoteServiceError):
    """The function is not deployed (HTTP 404) or no base URL is configured."""

    @property
    def hint(self) -> str:
        name = self.endpoint or "endpoint"
        return f"/{name} is not deployed – check the function deployment."


class MalformedResponse(RemoteServiceError):
    pass


class InvalidUserInput(ValueError):
    """User-facing problem with the request itself; never retried."""
