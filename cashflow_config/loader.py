"""
Configuration Loader (``cashflow_config.loader``).

Responsibility
--------------
Reads the shipped ``defaults.yaml``, merges an optional override file and
environment overrides on top, and parses the result into a frozen
``ForecastConfig``.  The single public entry point for callers is
``cashflow_config.get_active_config()``.

Failure modes
-------------
* Override file named but missing  -> ``ConfigurationError``.
* YAML that is not a mapping, or a section of the wrong shape
  -> ``ConfigurationError``.
* Unknown reporting currency or IANA timezone -> ``ConfigurationError``.
* Exchange rates are deliberately NOT validated here: a bad rate is
  recovered by the normalizer's fallback, never rejected.
"""

from __future__ import annotations

import hashlib
import json
from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from cashflow_config.schema import ForecastConfig, HorizonBounds
from cashflow_kernel.domain.currency import CurrencyRegistry
from cashflow_kernel.exceptions import ConfigurationError

DEFAULTS_PATH = Path(__file__).parent / "defaults.yaml"

# Environment variable -> dotted config key
ENV_OVERRIDES: dict[str, str] = {
    "GBP_EUR_RATE": "exchange_rates.GBP",
    "CASHFLOW_REPORTING_CURRENCY": "reporting_currency",
    "CASHFLOW_TIMEZONE": "timezone",
}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        ConfigurationError: If the file is missing, unparsable, or not a mapping.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except FileNotFoundError as exc:
        raise ConfigurationError(str(path), "file not found") from exc
    except yaml.YAMLError as exc:
        raise ConfigurationError(str(path), f"invalid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(str(path), "top level must be a mapping")
    return data


def merge_config(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged: dict[str, Any] = dict(base)
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def apply_env_overrides(data: Mapping[str, Any], environ: Mapping[str, str]) -> dict[str, Any]:
    """Apply ``ENV_OVERRIDES`` present in ``environ``; values stay raw strings."""
    result = merge_config(data, {})
    for env_name, dotted in ENV_OVERRIDES.items():
        if env_name not in environ:
            continue
        head, _, tail = dotted.partition(".")
        if tail:
            section = dict(result.get(head) or {})
            section[tail] = environ[env_name]
            result[head] = section
        else:
            result[head] = environ[env_name]
    return result


def compute_checksum(data: Mapping[str, Any]) -> str:
    """Deterministic SHA-256 over the canonical JSON form of ``data``."""
    canonical = json.dumps(data, sort_keys=True, default=str, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def _section(data: Mapping[str, Any], key: str, source: str) -> Mapping[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, Mapping):
        raise ConfigurationError(source, f"{key!r} must be a mapping")
    return value


def _parse_threshold(value: Any, source: str) -> Decimal:
    try:
        threshold = Decimal(str(value))
    except InvalidOperation as exc:
        raise ConfigurationError(source, f"variance_threshold is not a number: {value!r}") from exc
    if not threshold.is_finite() or threshold < 0:
        raise ConfigurationError(source, f"variance_threshold must be >= 0: {value!r}")
    return threshold


def _parse_reporting_currency(value: Any, source: str) -> str:
    try:
        return CurrencyRegistry.validate(value if isinstance(value, str) else "")
    except ValueError as exc:
        raise ConfigurationError(source, f"reporting_currency: {exc}") from exc


def _parse_timezone(value: Any, source: str) -> str:
    name = str(value).strip() if value is not None else ""
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError, OSError) as exc:
        raise ConfigurationError(source, f"unknown timezone: {value!r}") from exc
    return name


def parse_config(data: Mapping[str, Any], source: str = "<merged>") -> ForecastConfig:
    """
    Build a ``ForecastConfig`` from a merged config mapping.

    Raises:
        ConfigurationError: On structurally invalid sections, an unknown
            reporting currency or timezone.
    """
    horizon = _section(data, "horizon", source)
    try:
        bounds = HorizonBounds(
            default=int(horizon.get("default", 12)),
            min=int(horizon.get("min", 1)),
            max=int(horizon.get("max", 36)),
        )
        return ForecastConfig(
            reporting_currency=_parse_reporting_currency(
                data.get("reporting_currency", "EUR"), source
            ),
            exchange_rates=dict(_section(data, "exchange_rates", source)),
            fallback_rates=dict(_section(data, "fallback_rates", source)),
            timezone=_parse_timezone(data.get("timezone", "UTC"), source),
            horizon=bounds,
            default_variance_threshold=_parse_threshold(
                data.get("variance_threshold", 500), source
            ),
            checksum=compute_checksum(data),
        )
    except (TypeError, ValueError, InvalidOperation) as exc:
        raise ConfigurationError(source, str(exc)) from exc


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> ForecastConfig:
    """
    Load defaults, merge ``path`` (if any) and environment overrides.

    Args:
        path: Optional override YAML file.
        environ: Environment mapping; ``{}`` when omitted so tests stay
            hermetic.  ``get_active_config`` passes ``os.environ``.
    """
    environ = environ or {}
    data = load_yaml_file(DEFAULTS_PATH)
    source = str(DEFAULTS_PATH)
    if path is not None:
        data = merge_config(data, load_yaml_file(Path(path)))
        source = str(path)
    data = apply_env_overrides(data, environ)
    return parse_config(data, source)
