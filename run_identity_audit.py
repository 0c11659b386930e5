#!/usr/bin/env python3
"""
Node identifier audit.

Validates, classifies and risk-scores node identifiers read from a file or
from the Neo4j graph, then writes a JSON run report (and optionally a JSONL
file of findings).

Usage:
    python run_identity_audit.py --input-file ids.txt
    python run_identity_audit.py --input-file ids.jsonl --fail-on MEDIUM
    python run_identity_audit.py --from-graph --config config/identity_audit.yml --strict-config
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Any, Iterable, Optional

from audit.identifier_audit import audit_identifiers
from audit.sources import iter_identifiers_from_file
from core.run_artifacts import write_findings_jsonl, write_run_report
from core.startup_config import (
    DEFAULT_REPORT_DIR,
    resolve_strict_config_validation,
    validate_startup_config,
)
from core.structured_logging import configure_structured_logging, phase_scope, set_run_id
from identity.models import RiskLevel

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Audit node identifiers for format validity and collision risk",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python run_identity_audit.py --input-file ids.txt\n"
            "  python run_identity_audit.py --from-graph --fail-on MEDIUM\n"
        ),
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--input-file",
        help="Identifiers to audit: one per line, or JSONL records with 'id'/'type'.",
    )
    source.add_argument(
        "--from-graph",
        action="store_true",
        default=False,
        help="Read node identifiers from Neo4j (connection from environment).",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Optional audit config YAML.",
    )
    parser.add_argument(
        "--fail-on",
        choices=[level.value for level in RiskLevel if level is not RiskLevel.UNKNOWN],
        default=None,
        help="Lowest risk tier that fails the audit. Overrides the config file.",
    )
    parser.add_argument(
        "--report-dir",
        default=None,
        help="Directory for run reports. Overrides the config file.",
    )
    parser.add_argument(
        "--strict-config",
        action="store_true",
        default=resolve_strict_config_validation(default=False),
        help="Fail fast on audit config parse/validation errors.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level name (DEBUG, INFO, ...). Default: INFO",
    )
    return parser.parse_args(argv)


def _graph_items(labels: list[str], batch_size: int) -> Iterable[Any]:
    from audit.graph_source import get_neo4j_driver, iter_graph_node_ids

    driver = get_neo4j_driver()
    try:
        yield from iter_graph_node_ids(driver, labels=labels, batch_size=batch_size)
    finally:
        driver.close()


def execute_audit(
    args: argparse.Namespace,
    run_id: str,
    settings: dict[str, Any],
) -> dict[str, Any]:
    """Run the audit described by ``args`` and resolved ``settings``."""
    fail_on = RiskLevel(args.fail_on) if args.fail_on else settings["fail_on"]
    report_dir = args.report_dir or settings["report_dir"]

    if args.from_graph:
        source = "neo4j"
        items = _graph_items(settings["graph_labels"], settings["graph_batch_size"])
    else:
        source = os.path.abspath(args.input_file)
        items = iter_identifiers_from_file(args.input_file)

    logger.info("Auditing identifiers from %s (fail_on=%s)", source, fail_on)
    with phase_scope("audit"):
        stats, findings = audit_identifiers(items, fail_on=fail_on)

    report: dict[str, Any] = {
        "pipeline": "identity_audit",
        "source": source,
        "fail_on": fail_on.value,
        "report_dir": report_dir,
        "status": "success" if stats.passed else "failed",
    }
    report.update(stats.to_report())

    if settings["write_findings"] and findings:
        path, count = write_findings_jsonl(
            (finding.to_dict() for finding in findings),
            run_id,
            output_dir=report_dir,
        )
        report["findings_path"] = path
        report["findings_written"] = count
        logger.info("Wrote %d findings to %s", count, path)

    return report


def main(argv: Optional[list[str]] = None) -> None:
    args = parse_args(argv)
    configure_structured_logging(level=args.log_level)
    run_id = set_run_id()
    os.environ["STRICT_CONFIG_VALIDATION"] = "true" if args.strict_config else "false"

    run_report: dict[str, Any] = {
        "run_id": run_id,
        "pipeline": "identity_audit",
        "status": "failed",
    }
    report_dir = args.report_dir or DEFAULT_REPORT_DIR
    try:
        with phase_scope("config"):
            settings = validate_startup_config(args.config, strict=args.strict_config)
        report_dir = args.report_dir or settings["report_dir"]

        result = execute_audit(args, run_id, settings)
        run_report.update(result)
        report_path = write_run_report(run_report, run_id, output_dir=report_dir)
        logger.info("Run report written: %s", report_path)
        if run_report["status"] == "failed":
            sys.exit(1)
    except (FileNotFoundError, ValueError, ConnectionError, RuntimeError) as exc:
        run_report["error"] = str(exc)
        report_path = write_run_report(run_report, run_id, output_dir=report_dir)
        logger.info("Run report written: %s", report_path)
        logger.error("Identifier audit failed: %s", exc, exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
