"""Run artifact helpers for identifier audit reporting."""

from __future__ import annotations

import json
import os
from datetime import datetime, timezone
from typing import Any, Iterable


def _json_default(value: Any) -> Any:
    # Enums (NodeType, RiskLevel) serialize by value.
    if hasattr(value, "value"):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def write_run_report(
    report: dict[str, Any],
    run_id: str,
    output_dir: str = "output/run_reports",
) -> str:
    """Write a JSON run report and return its path."""
    os.makedirs(output_dir, exist_ok=True)
    payload = dict(report)
    payload.setdefault("run_id", run_id)
    payload.setdefault("timestamp_utc", datetime.now(timezone.utc).isoformat())
    path = os.path.join(output_dir, f"{run_id}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True, default=_json_default)
    return path


def write_findings_jsonl(
    findings: Iterable[dict[str, Any]],
    run_id: str,
    output_dir: str = "output/run_reports",
) -> tuple[str, int]:
    """Stream audit findings to ``<run_id>.findings.jsonl``.

    Returns:
        Tuple of (path, number of lines written).
    """
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, f"{run_id}.findings.jsonl")
    lines_written = 0
    with open(path, "w", encoding="utf-8") as f:
        for finding in findings:
            f.write(json.dumps(finding, ensure_ascii=False, default=_json_default) + "\n")
            lines_written += 1
    return path, lines_written
