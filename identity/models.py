"""
Value types returned by identifier validation and collision analysis.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterator, Optional, Tuple

from identity.node_types import NodeType


class RiskLevel(str, Enum):
    """Collision risk tier for a node identifier."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    UNKNOWN = "UNKNOWN"

    def __str__(self) -> str:
        return self.value


# UNKNOWN sorts with HIGH when thresholding.
RISK_ORDER: Dict[RiskLevel, int] = {
    RiskLevel.LOW: 0,
    RiskLevel.MEDIUM: 1,
    RiskLevel.HIGH: 2,
    RiskLevel.UNKNOWN: 2,
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of checking a node ID against its type grammar.

    Attributes:
        valid: Whether the identifier matched the full grammar.
        message: Human-readable reason, present only when invalid.
    """

    valid: bool
    message: Optional[str] = None

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def invalid(cls, message: str) -> "ValidationResult":
        return cls(valid=False, message=message)

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True)
class CollisionAnalysis:
    """Heuristic estimate of how likely a node ID collides with another entity.

    Attributes:
        risk_level: Risk tier.
        rationale: Why the tier was chosen.
    """

    risk_level: RiskLevel
    rationale: str

    @classmethod
    def low(cls, rationale: str) -> "CollisionAnalysis":
        return cls(RiskLevel.LOW, rationale)

    @classmethod
    def medium(cls, rationale: str) -> "CollisionAnalysis":
        return cls(RiskLevel.MEDIUM, rationale)

    @classmethod
    def high(cls, rationale: str) -> "CollisionAnalysis":
        return cls(RiskLevel.HIGH, rationale)

    @classmethod
    def unknown(cls, rationale: str) -> "CollisionAnalysis":
        return cls(RiskLevel.UNKNOWN, rationale)

    def to_dict(self) -> Dict[str, Any]:
        return {"risk_level": self.risk_level.value, "rationale": self.rationale}


@dataclass(frozen=True)
class DecodedIdentifier:
    """Node type and ordered field values recovered from an identifier.

    Unpacks as ``(node_type, fields)``.
    """

    node_type: NodeType
    fields: Tuple[str, ...]

    def __iter__(self) -> Iterator[Any]:
        yield self.node_type
        yield self.fields
