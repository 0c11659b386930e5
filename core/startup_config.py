"""Startup configuration validation helpers.

Provides strict/non-strict parsing of the identifier audit YAML config used
by the audit entry point. In non-strict mode problems are logged and
defaults are used; in strict mode they raise ``ConfigValidationError``.

Example config::

    audit:
      fail_on: HIGH
      report_dir: output/run_reports
      write_findings: true
    graph:
      labels: [Class, Method, Field]
      batch_size: 1000
"""

from __future__ import annotations

import logging
import os
from typing import Any, Optional

import yaml

from identity.models import RiskLevel
from identity.node_types import GRAPH_LABELS

logger = logging.getLogger(__name__)

DEFAULT_REPORT_DIR = "output/run_reports"
DEFAULT_FAIL_ON = RiskLevel.HIGH
DEFAULT_GRAPH_BATCH_SIZE = 1000


class ConfigValidationError(RuntimeError):
    """Raised when strict startup validation fails."""


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def resolve_strict_config_validation(default: bool = False) -> bool:
    """Resolve strict validation mode from ``STRICT_CONFIG_VALIDATION`` env."""
    return _env_flag("STRICT_CONFIG_VALIDATION", default=default)


def _fail(msg: str, strict: bool, fallback: str) -> None:
    if strict:
        raise ConfigValidationError(msg)
    logger.warning("%s; %s", msg, fallback)


def load_audit_config(
    config_path: Optional[str],
    strict: bool = False,
) -> dict[str, Any]:
    """Load and parse the audit YAML config.

    ``None`` means no config file was given and yields an empty dict. In
    non-strict mode read/parse failures also yield an empty dict.
    """
    if config_path is None:
        return {}

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            payload = yaml.safe_load(f)
    except FileNotFoundError as exc:
        msg = f"Audit config file not found: {config_path}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}
    except yaml.YAMLError as exc:
        msg = f"Failed to parse audit config YAML at {config_path}: {exc}"
        if strict:
            raise ConfigValidationError(msg) from exc
        logger.warning("%s; continuing with defaults", msg)
        return {}

    if payload is None:
        _fail(f"Audit config file is empty: {config_path}", strict, "continuing with defaults")
        return {}

    if not isinstance(payload, dict):
        _fail(
            f"Unexpected audit config payload type: {type(payload).__name__}",
            strict,
            "continuing with defaults",
        )
        return {}

    return payload


def get_section(
    config: dict[str, Any],
    section_name: str,
    strict: bool = False,
) -> dict[str, Any]:
    """Fetch a top-level section; a missing section is not an error."""
    section = config.get(section_name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        _fail(f"Config section '{section_name}' must be a mapping", strict, "using defaults")
        return {}
    return section


def resolve_fail_on(
    config: dict[str, Any],
    default: RiskLevel = DEFAULT_FAIL_ON,
    strict: bool = False,
) -> RiskLevel:
    """Resolve ``audit.fail_on``, the lowest risk tier that fails an audit."""
    raw = get_section(config, "audit", strict=strict).get("fail_on")
    if raw is None:
        return default
    try:
        return RiskLevel(str(raw).strip().upper())
    except ValueError:
        _fail(f"audit.fail_on must be one of LOW/MEDIUM/HIGH, got {raw!r}", strict,
              f"using default {default}")
        return default


def resolve_report_dir(
    config: dict[str, Any],
    default: str = DEFAULT_REPORT_DIR,
    strict: bool = False,
) -> str:
    raw = get_section(config, "audit", strict=strict).get("report_dir")
    if raw is None or not str(raw).strip():
        return default
    return str(raw).strip()


def resolve_write_findings(
    config: dict[str, Any],
    default: bool = True,
    strict: bool = False,
) -> bool:
    raw = get_section(config, "audit", strict=strict).get("write_findings")
    if raw is None:
        return default
    if not isinstance(raw, bool):
        _fail(f"audit.write_findings must be a boolean, got {raw!r}", strict,
              f"using default {default}")
        return default
    return raw


def resolve_graph_labels(
    config: dict[str, Any],
    strict: bool = False,
) -> list[str]:
    """Resolve ``graph.labels``; unknown labels are dropped (or rejected)."""
    known = list(GRAPH_LABELS.values())
    raw = get_section(config, "graph", strict=strict).get("labels")
    if raw is None:
        return known
    if not isinstance(raw, list):
        _fail("graph.labels must be a list", strict, "auditing all labels")
        return known

    labels: list[str] = []
    for item in raw:
        label = str(item).strip()
        if label in known:
            labels.append(label)
        else:
            _fail(f"Unknown graph label in graph.labels: {label!r}", strict, "skipping it")
    if not labels:
        _fail("graph.labels names no known label", strict, "auditing all labels")
        return known
    return labels


def resolve_graph_batch_size(
    config: dict[str, Any],
    default: int = DEFAULT_GRAPH_BATCH_SIZE,
    strict: bool = False,
) -> int:
    raw = get_section(config, "graph", strict=strict).get("batch_size")
    if raw is None:
        return default
    try:
        value = int(raw)
    except (TypeError, ValueError):
        value = 0
    if value <= 0:
        _fail(f"graph.batch_size must be a positive integer, got {raw!r}", strict,
              f"using default {default}")
        return default
    return value


def validate_startup_config(
    config_path: Optional[str],
    strict: bool = False,
) -> dict[str, Any]:
    """Validate the audit configuration and return the resolved settings."""
    config = load_audit_config(config_path, strict=strict)
    return {
        "config_path": config_path,
        "strict": strict,
        "fail_on": resolve_fail_on(config, strict=strict),
        "report_dir": resolve_report_dir(config, strict=strict),
        "write_findings": resolve_write_findings(config, strict=strict),
        "graph_labels": resolve_graph_labels(config, strict=strict),
        "graph_batch_size": resolve_graph_batch_size(config, strict=strict),
    }
