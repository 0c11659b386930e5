"""
Batch auditing of node identifiers.

Classifies, validates and risk-scores identifiers that were already minted
or that arrived from external input, and aggregates the outcome into
report-ready statistics.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Iterable, Optional, Tuple, Union

from core.structured_logging import node_type_scope
from identity.collision_risk import analyze
from identity.format_validator import classify, validate
from identity.models import RISK_ORDER, RiskLevel
from identity.node_types import NodeType

logger = logging.getLogger(__name__)

AuditItem = Union[str, Tuple[str, Optional[NodeType]]]


@dataclass
class IdentifierFinding:
    """Audit outcome for a single identifier.

    Attributes:
        identifier: The audited node ID.
        claimed_type: Node type supplied by the caller, if any.
        classified_type: Node type inferred from the ID prefix, if any.
        valid: Whether the ID matched the grammar of the effective type.
        message: Validation failure reason, if invalid.
        risk_level: Collision risk tier.
        rationale: Why that tier was chosen.
    """

    identifier: str
    claimed_type: Optional[NodeType]
    classified_type: Optional[NodeType]
    valid: bool
    message: Optional[str]
    risk_level: RiskLevel
    rationale: str

    @property
    def effective_type(self) -> Optional[NodeType]:
        return self.claimed_type or self.classified_type

    @property
    def type_mismatch(self) -> bool:
        return (
            self.claimed_type is not None
            and self.classified_type is not None
            and self.claimed_type is not self.classified_type
        )

    def to_dict(self) -> dict[str, Any]:
        payload = asdict(self)
        payload["type_mismatch"] = self.type_mismatch
        return payload


def audit_identifier(
    identifier: str,
    claimed_type: Optional[NodeType] = None,
) -> IdentifierFinding:
    """Audit one identifier.

    When ``claimed_type`` is ``None`` the type is inferred from the prefix.
    An identifier whose prefix matches no node type is reported invalid with
    ``UNKNOWN`` risk.
    """
    classified = classify(identifier)
    effective = claimed_type or classified

    if effective is None:
        message = f"Unrecognized node ID prefix: {identifier}"
        logger.debug(message)
        return IdentifierFinding(
            identifier=identifier,
            claimed_type=None,
            classified_type=None,
            valid=False,
            message=message,
            risk_level=RiskLevel.UNKNOWN,
            rationale="Node type could not be determined",
        )

    with node_type_scope(effective):
        validation = validate(identifier, effective)
        analysis = analyze(identifier, effective)

    return IdentifierFinding(
        identifier=identifier,
        claimed_type=claimed_type,
        classified_type=classified,
        valid=validation.valid,
        message=validation.message,
        risk_level=analysis.risk_level,
        rationale=analysis.rationale,
    )


def meets_threshold(risk_level: RiskLevel, fail_on: RiskLevel) -> bool:
    """True when ``risk_level`` is at or above ``fail_on``."""
    return RISK_ORDER[risk_level] >= RISK_ORDER[fail_on]


@dataclass
class AuditStats:
    """Statistics for an identifier audit run."""

    total: int = 0
    valid: int = 0
    invalid: int = 0
    type_mismatches: int = 0
    flagged: int = 0
    by_risk: dict[str, int] = field(default_factory=dict)
    by_type: dict[str, int] = field(default_factory=dict)

    def record(self, finding: IdentifierFinding, flagged: bool = False) -> None:
        self.total += 1
        if finding.valid:
            self.valid += 1
        else:
            self.invalid += 1
        if finding.type_mismatch:
            self.type_mismatches += 1
        if flagged:
            self.flagged += 1
        risk_key = finding.risk_level.value
        self.by_risk[risk_key] = self.by_risk.get(risk_key, 0) + 1
        type_key = finding.effective_type.value if finding.effective_type else "UNRECOGNIZED"
        self.by_type[type_key] = self.by_type.get(type_key, 0) + 1

    @property
    def passed(self) -> bool:
        return self.invalid == 0 and self.flagged == 0

    def __str__(self) -> str:
        return (
            f"AuditStats(total={self.total}, valid={self.valid}, "
            f"invalid={self.invalid}, flagged={self.flagged}, "
            f"mismatches={self.type_mismatches})"
        )

    def to_report(self) -> dict[str, Any]:
        """Return a JSON-serializable summary for run artifacts."""
        valid_rate = (self.valid / self.total) if self.total else 1.0
        return {
            "identifiers_total": self.total,
            "identifiers_valid": self.valid,
            "identifiers_invalid": self.invalid,
            "identifiers_flagged": self.flagged,
            "type_mismatches": self.type_mismatches,
            "valid_rate": valid_rate,
            "by_risk": dict(sorted(self.by_risk.items())),
            "by_type": dict(sorted(self.by_type.items())),
            "passed": self.passed,
        }


def _unpack(item: AuditItem) -> Tuple[str, Optional[NodeType]]:
    if isinstance(item, tuple):
        identifier, claimed_type = item
        return identifier, claimed_type
    return item, None


def audit_identifiers(
    items: Iterable[AuditItem],
    fail_on: RiskLevel = RiskLevel.HIGH,
    log_every: int = 10000,
) -> Tuple[AuditStats, list[IdentifierFinding]]:
    """Audit a stream of identifiers.

    Args:
        items: Identifiers, or ``(identifier, claimed_type)`` pairs.
        fail_on: Lowest risk tier that flags a finding.
        log_every: Emit a progress line every N identifiers.

    Returns:
        Tuple of (stats, findings). Only invalid or flagged findings are
        kept; passing identifiers are counted but not retained.
    """
    stats = AuditStats()
    findings: list[IdentifierFinding] = []

    for item in items:
        identifier, claimed_type = _unpack(item)
        finding = audit_identifier(identifier, claimed_type)
        flagged = meets_threshold(finding.risk_level, fail_on)
        stats.record(finding, flagged=flagged)
        if flagged or not finding.valid:
            findings.append(finding)
        if log_every and stats.total % log_every == 0:
            logger.info("Audited %d identifiers so far: %s", stats.total, stats)

    logger.info("Identifier audit complete: %s", stats)
    return stats, findings
