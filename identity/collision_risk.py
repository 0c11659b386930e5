"""Heuristic collision-risk scoring for node identifiers.

Every rule below is a tie-break policy, not a proof: short names, default
packages and short digests make it more likely that two unrelated entities
mint the same key. False positives and negatives are expected.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from identity.config import (
    DEFAULT_PACKAGE_SHORT_CLASS_NAME,
    MIN_PACKAGE_SEGMENTS,
    SHORT_ANNOTATION_NAME,
    SHORT_CLASS_NAME,
    SHORT_FIELD_NAME,
    SHORT_HASH_LENGTH,
    SHORT_METHOD_NAME,
    SHORT_REPOSITORY_NAME,
)
from identity.format_validator import NODE_ID_PATTERNS, validate
from identity.models import CollisionAnalysis
from identity.node_types import ID_PREFIXES, ID_SEPARATOR, TYPE_TAGS, NodeType

logger = logging.getLogger(__name__)

INVALID_ID_RATIONALE = "Cannot analyze invalid ID"


def _analyze_class(node_id: str) -> CollisionAnalysis:
    parts = node_id.split(ID_SEPARATOR, 2)
    if len(parts) < 3:
        return CollisionAnalysis.high("Malformed class ID")

    package_name, class_name = parts[1], parts[2]
    if not package_name and len(class_name) < DEFAULT_PACKAGE_SHORT_CLASS_NAME:
        return CollisionAnalysis.medium("Short class name in default package")
    if len(class_name) < SHORT_CLASS_NAME:
        return CollisionAnalysis.medium("Very short class name")
    return CollisionAnalysis.low("Well-formed package and class name")


def _analyze_method(node_id: str) -> CollisionAnalysis:
    parts = node_id.split(ID_SEPARATOR, 4)
    if len(parts) < 5:
        return CollisionAnalysis.high("Malformed method ID")

    method_name, param_hash = parts[3], parts[4]
    if len(method_name) < SHORT_METHOD_NAME:
        return CollisionAnalysis.medium("Very short method name")
    if len(param_hash) < SHORT_HASH_LENGTH:
        return CollisionAnalysis.medium("Short parameter hash")
    return CollisionAnalysis.low("Well-formed method signature with hash")


def _analyze_field(node_id: str) -> CollisionAnalysis:
    parts = node_id.split(ID_SEPARATOR, 4)
    if len(parts) < 5:
        return CollisionAnalysis.high("Malformed field ID")

    if len(parts[3]) < SHORT_FIELD_NAME:
        return CollisionAnalysis.medium("Very short field name")
    return CollisionAnalysis.low("Well-formed field identifier")


def _package_segments(package_name: str) -> list[str]:
    # Trailing empty segments do not count ("com." is one segment).
    segments = package_name.split(".")
    while segments and not segments[-1]:
        segments.pop()
    return segments


def _analyze_package(node_id: str) -> CollisionAnalysis:
    package_name = node_id[len(ID_PREFIXES[NodeType.PACKAGE]):]
    if not package_name:
        return CollisionAnalysis.high("Default package has high collision risk")
    if len(_package_segments(package_name)) < MIN_PACKAGE_SEGMENTS:
        return CollisionAnalysis.medium("Single-level package name")
    return CollisionAnalysis.low("Multi-level package name")


def _analyze_repository(node_id: str) -> CollisionAnalysis:
    parts = node_id.split(ID_SEPARATOR, 2)
    if len(parts) < 3:
        return CollisionAnalysis.high("Malformed repository ID")

    repo_name, path_hash = parts[1], parts[2]
    if len(repo_name) < SHORT_REPOSITORY_NAME:
        return CollisionAnalysis.medium("Short repository name")
    if len(path_hash) < SHORT_HASH_LENGTH:
        return CollisionAnalysis.medium("Short path hash")
    return CollisionAnalysis.low("Well-formed repository identifier with path hash")


def _analyze_subproject(node_id: str) -> CollisionAnalysis:
    if not node_id.startswith(ID_PREFIXES[NodeType.SUBPROJECT]):
        return CollisionAnalysis.high("Malformed subproject ID")

    remaining = node_id[len(TYPE_TAGS[NodeType.SUBPROJECT]) + 1:]
    if len(remaining.split(ID_SEPARATOR, 3)) < 4:
        return CollisionAnalysis.medium("Short subproject path")
    return CollisionAnalysis.low("Well-formed subproject identifier")


def _analyze_annotation(node_id: str) -> CollisionAnalysis:
    annotation_name = node_id[len(ID_PREFIXES[NodeType.ANNOTATION]):]
    if "." not in annotation_name:
        return CollisionAnalysis.medium("Annotation without package qualifier")
    if len(annotation_name) < SHORT_ANNOTATION_NAME:
        return CollisionAnalysis.medium("Very short annotation name")
    return CollisionAnalysis.low("Well-formed fully qualified annotation name")


def _analyze_upsert_audit(node_id: str) -> CollisionAnalysis:
    return CollisionAnalysis.low("Audit IDs include timestamp and operation ID")


RISK_RULES: dict[NodeType, Callable[[str], CollisionAnalysis]] = {
    NodeType.CLASS: _analyze_class,
    NodeType.METHOD: _analyze_method,
    NodeType.FIELD: _analyze_field,
    NodeType.PACKAGE: _analyze_package,
    NodeType.REPOSITORY: _analyze_repository,
    NodeType.SUBPROJECT: _analyze_subproject,
    NodeType.ANNOTATION: _analyze_annotation,
    NodeType.UPSERT_AUDIT: _analyze_upsert_audit,
}

if set(RISK_RULES) != set(NodeType) or set(NODE_ID_PATTERNS) != set(NodeType):
    raise RuntimeError("Every NodeType needs exactly one grammar and one risk rule")


def analyze(node_id: str, node_type: Any) -> CollisionAnalysis:
    """Score the risk that ``node_id`` collides with an unrelated entity.

    The identifier is validated first; fields of a malformed identifier are
    never inspected.

    Args:
        node_id: Identifier to analyze.
        node_type: Node type the identifier claims to be.

    Returns:
        ``CollisionAnalysis`` with a risk tier and rationale. An identifier
        that fails validation (including one paired with an unregistered
        ``node_type``) yields ``HIGH``.
    """
    if not validate(node_id, node_type).valid:
        return CollisionAnalysis.high(INVALID_ID_RATIONALE)

    rule = RISK_RULES.get(node_type)
    if rule is None:
        return CollisionAnalysis.unknown(f"No collision rule for node type: {node_type}")

    result = rule(node_id)
    logger.debug(
        "Collision risk for %s (%s): %s - %s",
        node_id,
        node_type,
        result.risk_level,
        result.rationale,
    )
    return result
