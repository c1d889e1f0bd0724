"""
Chemical catalog
----------------

Reads the ``chemical_properties`` table through the Supabase REST
interface (PostgREST)::

    GET <catalog.rest_url>/chemical_properties?select=id,name,hazard_type

and turns each row into a ChemicalOption. The hazard_type string drives
the dispersion multiplier (see models.HazardClass).

Behaviour
~~~~~~~~~
• Unconfigured URL or persistent failure → empty list tagged FALLBACK
  (the selector simply has nothing to offer; no exception reaches the UI).
• ``list_chemicals`` always fetches; the last live list is kept so that
  ``find`` resolves known ids without another round trip.
"""
from __future__ import annotations
import logging
from typing import List, Optional

from hazardview.errors import EndpointAbsent, MalformedResponse, RemoteServiceError
from hazardview.models import ChemicalOption, Source, Sourced
from hazardview.utils.config import conf
from hazardview.utils.http import TIMEOUT, USER_AGENT, request_json
from hazardview.utils.retry import retry_with_backoff

COLUMNS = "id,name,hazard_type"

_log = logging.getLogger(__name__)


def parse_rows(rows) -> List[ChemicalOption]:
    if not isinstance(rows, list):
        raise MalformedResponse(f"Chemical catalog returned {type(rows).__name__}, not a list",
                                endpoint="chemical_properties")
    try:
        return [ChemicalOption.from_row(r) for r in rows]
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise MalformedResponse(f"Bad chemical row: {exc}",
                                endpoint="chemical_properties") from exc


class ChemicalCatalog:
    """
    Parameters
    ----------
    rest_url : PostgREST root, e.g. https://<project>.supabase.co/rest/v1
    anon_key : sent as both ``apikey`` and bearer token
    table    : table name (config: catalog.table)
    retry    : kwargs for retry_with_backoff
    """

    def __init__(self, rest_url: str, anon_key: str = "",
                 table: str = "chemical_properties",
                 timeout: float = TIMEOUT, retry: Optional[dict] = None):
        self.rest_url = (rest_url or "").rstrip("/")
        self.table = table
        self.timeout = timeout
        self.retry = dict(retry or {})
        self._last_live: Optional[List[ChemicalOption]] = None
        self.headers = {
            "apikey": anon_key,
            "Authorization": f"Bearer {anon_key}",
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }

    @classmethod
    def from_config(cls, cfg=conf, **kwargs) -> "ChemicalCatalog":
        opts = dict(timeout=float(cfg.functions["timeout_s"]), retry=cfg.retry_policy)
        opts.update(kwargs)
        return cls(cfg.catalog["rest_url"], cfg.functions["anon_key"],
                   table=cfg.catalog["table"], **opts)

    def _fetch_once(self) -> List[ChemicalOption]:
        if not self.rest_url:
            raise EndpointAbsent("Catalog URL missing", endpoint=self.table)
        rows = request_json("GET", f"{self.rest_url}/{self.table}", self.table,
                            headers=self.headers, timeout=self.timeout,
                            params={"select": COLUMNS})
        return parse_rows(rows)

    def list_chemicals(self) -> Sourced[List[ChemicalOption]]:
        try:
            options = retry_with_backoff(self._fetch_once, **self.retry)
        except EndpointAbsent as exc:
            _log.warning("Chemical catalog unavailable (%s) – no chemicals to offer.", exc)
        except RemoteServiceError as exc:
            _log.error("Error fetching chemical options: %s", exc)
        else:
            _log.info("Fetched %d chemicals from catalog", len(options))
            self._last_live = options
            return Sourced(Source.LIVE, options)
        return Sourced(Source.FALLBACK, [])

    def find(self, chemical_id: int,
             options: Optional[List[ChemicalOption]] = None) -> Optional[ChemicalOption]:
        """
        Resolve a selected id.

        Looks in ``options`` when given, else in the last live list; only an
        id missing from the last live list triggers a fresh fetch.
        """
        if options is None:
            hit = next((c for c in self._last_live or () if c.id == chemical_id), None)
            if hit is not None:
                return hit
            options = self.list_chemicals().data
        return next((c for c in options if c.id == chemical_id), None)
