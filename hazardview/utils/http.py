"""
hazardview/utils/http.py
========================

Thin `requests` wrapper for the serverless ("edge") functions and the
catalog REST endpoint.

• Every call is a single attempt – retrying is the caller's job
  (see utils.retry), so one failure maps to exactly one exception.
• Failures are translated into the hazardview.errors taxonomy:

      connection error / timeout   → TransientNetworkFailure
      (any requests exception)
      HTTP 404                     → EndpointAbsent   ("not deployed")
      other non‑2xx                → TransientNetworkFailure
      body is not JSON             → MalformedResponse
"""
from __future__ import annotations
import logging
from typing import Any, Callable, Optional, TypeVar

import requests

from hazardview.errors import (
    EndpointAbsent, MalformedResponse, TransientNetworkFailure,
)
from hazardview.utils.config import conf
from hazardview.utils.retry import retry_with_backoff

T = TypeVar("T")

#: Requests setup -----------------------------------------------------------
TIMEOUT = 15        # seconds, overridden by conf.functions.timeout_s
USER_AGENT = "hazardview (+https://github.com/hazardview)"

_log = logging.getLogger(__name__)
logging.getLogger("urllib3").setLevel(logging.WARNING)


# ────────────────────────────────────────────────────────────────────────────
def _ensure_ok(resp: requests.Response, endpoint: str):
    """Raise for non‑2xx with a readable message."""
    if resp.ok:
        return
    try:
        detail = resp.text
    except Exception:       # noqa: BLE001
        detail = "Unknown error"
    _log.error("%s API error (%s): %s", endpoint, resp.status_code, detail)

    if resp.status_code == 404:
        raise EndpointAbsent(
            f"Endpoint not found: /{endpoint}. Please check if the function is deployed.",
            endpoint=endpoint, status=404,
        )
    raise TransientNetworkFailure(
        f"API error: {resp.status_code} - {detail}",
        endpoint=endpoint, status=resp.status_code,
    )


def _decode(resp: requests.Response, endpoint: str) -> Any:
    try:
        return resp.json()
    except ValueError as exc:
        raise MalformedResponse(f"/{endpoint} returned non‑JSON body",
                                endpoint=endpoint, status=resp.status_code) from exc


def request_json(method: str, url: str, endpoint: str, *,
                 headers: Optional[dict] = None,
                 timeout: float = TIMEOUT, **kwargs) -> Any:
    """One HTTP attempt; returns decoded JSON or raises a RemoteServiceError."""
    try:
        resp = requests.request(method, url, headers=headers, timeout=timeout, **kwargs)
    except requests.RequestException as exc:
        raise TransientNetworkFailure(f"/{endpoint} unreachable: {exc}",
                                      endpoint=endpoint) from exc
    _ensure_ok(resp, endpoint)
    return _decode(resp, endpoint)


# ────────────────────────────────────────────────────────────────────────────
class EdgeFunctionClient:
    """
    POST JSON to ``<base_url>/<endpoint>`` with the anon‑key bearer header.

    Parameters
    ----------
    base_url   : functions root, e.g. https://<project>.supabase.co/functions/v1
    anon_key   : public API key sent as ``Authorization: Bearer …``
    timeout    : seconds per HTTP request
    retry      : kwargs for retry_with_backoff (max_retries, initial_delay, multiplier)
    sleep      : passed through to retry_with_backoff (tests inject a no‑op)
    """

    def __init__(self, base_url: str, anon_key: str = "", timeout: float = TIMEOUT,
                 retry: Optional[dict] = None,
                 sleep: Optional[Callable[[float], None]] = None):
        self.base_url = (base_url or "").rstrip("/")
        self.timeout = timeout
        self.retry = dict(retry or {})
        if sleep is not None:
            self.retry["sleep"] = sleep
        self.headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {anon_key}",
            "User-Agent": USER_AGENT,
        }

    @classmethod
    def from_config(cls, cfg=conf, **kwargs) -> "EdgeFunctionClient":
        return cls(cfg.functions["base_url"], cfg.functions["anon_key"],
                   timeout=float(cfg.functions["timeout_s"]),
                   retry=cfg.retry_policy, **kwargs)

    @property
    def configured(self) -> bool:
        return bool(self.base_url)

    def url_for(self, endpoint: str) -> str:
        if not self.configured:
            raise EndpointAbsent(f"No function URL configured for /{endpoint}",
                                 endpoint=endpoint)
        return f"{self.base_url}/{endpoint}"

    def post(self, endpoint: str, payload: dict) -> Any:
        """Single attempt."""
        _log.debug("POST /%s %s", endpoint, payload)
        return request_json("POST", self.url_for(endpoint), endpoint,
                            headers=self.headers, timeout=self.timeout, json=payload)

    def call(self, endpoint: str, payload: dict,
             parse: Callable[[Any], T] = lambda body: body,
             on_retry=None) -> T:
        """
        POST + parse under the retry policy.

        ``parse`` runs inside the retried block, so a MalformedResponse it
        raises is retried like a network failure.
        """
        return retry_with_backoff(lambda: parse(self.post(endpoint, payload)),
                                  on_retry=on_retry, **self.retry)
