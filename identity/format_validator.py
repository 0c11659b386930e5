"""Grammar checks and prefix classification for node identifiers."""

from __future__ import annotations

import logging
import re
from typing import Any, Optional

from identity.models import ValidationResult
from identity.node_types import ID_SEPARATOR, NodeType, node_type_for_tag

logger = logging.getLogger(__name__)

# Full-string grammars. Changing one invalidates every stored key of that type.
NODE_ID_PATTERNS: dict[NodeType, re.Pattern[str]] = {
    NodeType.CLASS: re.compile(r"class:[^:]*:[^:]+"),
    NodeType.METHOD: re.compile(r"method:[^:]*:[^:]+:[^:]+:[a-f0-9]+"),
    NodeType.FIELD: re.compile(r"field:[^:]*:[^:]+:[^:]+:[^:]*"),
    NodeType.PACKAGE: re.compile(r"package:[^:]*"),
    NodeType.REPOSITORY: re.compile(r"repo:[^:]+:[a-f0-9]+"),
    NodeType.SUBPROJECT: re.compile(r"subproject:repo:[^:]+:[a-f0-9]+:[^:]*"),
    NodeType.ANNOTATION: re.compile(r"annotation:[^:]+"),
    NodeType.UPSERT_AUDIT: re.compile(r"upsert_audit:[^:]+:[^:]+:[^:]+"),
}

EMPTY_ID_MESSAGE = "Node ID cannot be null or empty"


def _is_blank(node_id: Optional[str]) -> bool:
    return node_id is None or not node_id.strip()


def validate(node_id: Optional[str], node_type: Any) -> ValidationResult:
    """Validate a node ID against the canonical grammar of ``node_type``.

    The whole string must match; a prefix match is not enough.

    Args:
        node_id: Identifier to check.
        node_type: Expected node type. Anything that is not a registered
            ``NodeType`` is reported as an unknown type.

    Returns:
        ``ValidationResult``; ``message`` explains any failure.
    """
    if _is_blank(node_id):
        return ValidationResult.invalid(EMPTY_ID_MESSAGE)

    pattern = NODE_ID_PATTERNS.get(node_type) if isinstance(node_type, NodeType) else None
    if pattern is None:
        return ValidationResult.invalid(f"Unknown node type: {node_type}")

    if pattern.fullmatch(node_id):
        logger.debug("Valid node ID: %s for type: %s", node_id, node_type)
        return ValidationResult.ok()

    message = f"Invalid format for {node_type} node ID: {node_id}"
    logger.debug(message)
    return ValidationResult.invalid(message)


def is_valid(node_id: Optional[str], node_type: Any) -> bool:
    return validate(node_id, node_type).valid


def classify(node_id: Optional[str]) -> Optional[NodeType]:
    """Infer the node type from the tag before the first ``:``.

    This only looks at the prefix; an identifier that classifies as a type
    may still fail ``validate`` for that type.
    """
    if _is_blank(node_id):
        return None
    tag, sep, _ = node_id.partition(ID_SEPARATOR)
    if not sep:
        return None
    return node_type_for_tag(tag)
