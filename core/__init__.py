"""Core shared utilities: logging, config validation, run artifacts."""

from core.structured_logging import (
    configure_structured_logging,
    get_run_id,
    node_type_scope,
    phase_scope,
    resolve_log_level,
    set_run_id,
)
from core.startup_config import (
    ConfigValidationError,
    load_audit_config,
    resolve_fail_on,
    resolve_graph_batch_size,
    resolve_graph_labels,
    resolve_report_dir,
    resolve_strict_config_validation,
    resolve_write_findings,
    validate_startup_config,
)
from core.run_artifacts import write_findings_jsonl, write_run_report

__all__ = [
    "configure_structured_logging",
    "get_run_id",
    "node_type_scope",
    "phase_scope",
    "resolve_log_level",
    "set_run_id",
    "ConfigValidationError",
    "load_audit_config",
    "resolve_fail_on",
    "resolve_graph_batch_size",
    "resolve_graph_labels",
    "resolve_report_dir",
    "resolve_strict_config_validation",
    "resolve_write_findings",
    "validate_startup_config",
    "write_findings_jsonl",
    "write_run_report",
]
