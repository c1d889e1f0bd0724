"""
Utility that

1. Loads `config.yaml` (project root, or the file named by $HAZARDVIEW_CONFIG)
2. Expands environment variables like  ${HAZARDVIEW_FUNCTION_URL}
3. Fills any missing section from the built-in defaults
4. Exposes a frozen `HVConfig` dataclass as `conf`.

All other modules import *only* from this file, never from `yaml` directly
→ a single point of maintenance when new parameters are added.
"""
from __future__ import annotations
import copy, logging, os, re, yaml
from dataclasses import dataclass
from pathlib import Path

_log = logging.getLogger(__name__)

@dataclass(slots=True, frozen=True)
class HVConfig:
    project_root: Path
    functions:    dict
    catalog:      dict
    retry:        dict
    weather:      dict
    api:          dict

    # ── derived values ──────────────────────────────────────────────────
    @property
    def retry_policy(self) -> dict:
        """Keyword arguments for utils.retry.retry_with_backoff."""
        return {
            "max_retries":   int(self.retry["max_retries"]),
            "initial_delay": float(self.retry["initial_delay_ms"]) / 1000.0,
            "multiplier":    float(self.retry["multiplier"]),
        }


DEFAULTS: dict = {
    "functions": {"base_url": "", "anon_key": "", "timeout_s": 15},
    "catalog":   {"rest_url": "", "table": "chemical_properties"},
    "retry":     {"max_retries": 3, "initial_delay_ms": 500, "multiplier": 2},
    "weather":   {"fallback": {"wind_speed_mph": 12,
                               "wind_direction_deg": 225,
                               "temperature_f": 72,
                               "humidity_percent": 45}},
    "api":       {"host": "127.0.0.1", "port": 8000},
}

_UNSET_VAR = re.compile(r"\$\{?[A-Za-z_][A-Za-z0-9_]*\}?")

def _expand(text: str) -> str:
    "Expand ${VAR}; variables that are not set collapse to ''."
    return _UNSET_VAR.sub("", os.path.expandvars(text))


def _merge(base: dict, override: dict) -> dict:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def _default_path() -> Path:
    env = os.environ.get("HAZARDVIEW_CONFIG")
    if env:
        return Path(env)
    return Path(__file__).resolve().parents[2] / "config.yaml"


def load_config(cfg_path: str | Path | None = None) -> HVConfig:
    """
    Parse YAML (after env expansion) and overlay it on DEFAULTS.

    A missing file is not an error: the defaults describe an offline
    setup where every remote collaborator is unconfigured.
    """
    cfg_path = Path(cfg_path) if cfg_path else _default_path()

    if cfg_path.exists():
        cfg = yaml.safe_load(_expand(cfg_path.read_text())) or {}
    else:
        _log.warning("Config file %s not found – using built-in defaults.", cfg_path)
        cfg = {}

    merged = _merge(DEFAULTS, cfg)
    # yaml turns an emptied "${VAR}" into None
    for section in ("functions", "catalog"):
        for k, v in merged[section].items():
            if v is None:
                merged[section][k] = ""

    return HVConfig(project_root=cfg_path.parent, **{k: merged[k] for k in DEFAULTS})

# ── Instantiate once at import time ────────────────────────────────────────
conf = load_config()
