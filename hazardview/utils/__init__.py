"""
Expose the resolved config and shared helpers so downstream code can do:

    from hazardview.utils import conf, retry_with_backoff
"""
from .config import conf, load_config, HVConfig
from .retry import retry_with_backoff

__all__ = ["conf", "load_config", "HVConfig", "retry_with_backoff"]
