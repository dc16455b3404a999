"""
cashflow_config -- single public entrypoint for forecast configuration.

Responsibility:
    ``get_active_config()`` is the ONLY place that reads configuration files
    or environment variables.  It returns a frozen ``ForecastConfig`` that
    callers pass explicitly into the normalizer, engines and services.

Failure modes:
    - ``ConfigurationError`` -- override file missing or structurally invalid.

Audit relevance:
    Every call emits a ``CASHFLOW_CONFIG_TRACE`` log entry with the config
    checksum, reporting currency and configured currencies, so a forecast
    can be tied back to the configuration that produced it.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from cashflow_config.loader import load_config
from cashflow_config.schema import ForecastConfig, HorizonBounds
from cashflow_kernel.logging_config import get_logger

_logger = get_logger("config")

__all__ = ["ForecastConfig", "HorizonBounds", "get_active_config"]


def get_active_config(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ForecastConfig:
    """
    Resolve the active forecast configuration.

    Args:
        path: Override file; falls back to ``$CASHFLOW_CONFIG`` when unset.
        environ: Environment to read overrides from (default ``os.environ``).
    """
    env = os.environ if environ is None else environ
    if path is None and env.get("CASHFLOW_CONFIG"):
        path = env["CASHFLOW_CONFIG"]

    config = load_config(Path(path) if path is not None else None, environ=env)

    _logger.info("CASHFLOW_CONFIG_TRACE", extra={
        "trace_type": "CASHFLOW_CONFIG_TRACE",
        "checksum": config.checksum,
        "reporting_currency": config.reporting_currency,
        "currencies": sorted(config.exchange_rates),
        "timezone": config.timezone,
        "override_path": str(path) if path is not None else None,
    })
    return config
