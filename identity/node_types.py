"""Closed set of node types and their identifier tags."""

from __future__ import annotations

from enum import Enum
from typing import Optional

ID_SEPARATOR = ":"


class NodeType(str, Enum):
    """Kinds of graph nodes that carry a typed identifier."""

    CLASS = "CLASS"
    METHOD = "METHOD"
    FIELD = "FIELD"
    PACKAGE = "PACKAGE"
    REPOSITORY = "REPOSITORY"
    SUBPROJECT = "SUBPROJECT"
    ANNOTATION = "ANNOTATION"
    UPSERT_AUDIT = "UPSERT_AUDIT"

    def __str__(self) -> str:
        return self.value


# Leading text of every identifier, separator included.
# SUBPROJECT nests the repository shape, so its literal ``repo`` segment is
# part of the prefix rather than a field.
ID_PREFIXES: dict[NodeType, str] = {
    NodeType.CLASS: "class:",
    NodeType.METHOD: "method:",
    NodeType.FIELD: "field:",
    NodeType.PACKAGE: "package:",
    NodeType.REPOSITORY: "repo:",
    NodeType.SUBPROJECT: "subproject:repo:",
    NodeType.ANNOTATION: "annotation:",
    NodeType.UPSERT_AUDIT: "upsert_audit:",
}

# Token before the first separator; what ``classify`` looks at.
TYPE_TAGS: dict[NodeType, str] = {
    NodeType.CLASS: "class",
    NodeType.METHOD: "method",
    NodeType.FIELD: "field",
    NodeType.PACKAGE: "package",
    NodeType.REPOSITORY: "repo",
    NodeType.SUBPROJECT: "subproject",
    NodeType.ANNOTATION: "annotation",
    NodeType.UPSERT_AUDIT: "upsert_audit",
}

FIELD_COUNTS: dict[NodeType, int] = {
    NodeType.CLASS: 2,
    NodeType.METHOD: 4,
    NodeType.FIELD: 4,
    NodeType.PACKAGE: 1,
    NodeType.REPOSITORY: 2,
    NodeType.SUBPROJECT: 3,
    NodeType.ANNOTATION: 1,
    NodeType.UPSERT_AUDIT: 3,
}

# Graph labels used by the store for each node type.
GRAPH_LABELS: dict[NodeType, str] = {
    NodeType.CLASS: "Class",
    NodeType.METHOD: "Method",
    NodeType.FIELD: "Field",
    NodeType.PACKAGE: "Package",
    NodeType.REPOSITORY: "Repository",
    NodeType.SUBPROJECT: "SubProject",
    NodeType.ANNOTATION: "Annotation",
    NodeType.UPSERT_AUDIT: "UpsertAudit",
}

_TAG_TO_TYPE: dict[str, NodeType] = {tag: t for t, tag in TYPE_TAGS.items()}
_LABEL_TO_TYPE: dict[str, NodeType] = {label: t for t, label in GRAPH_LABELS.items()}


def node_type_for_tag(tag: str) -> Optional[NodeType]:
    """Return the node type whose identifier tag is ``tag``, if any."""
    return _TAG_TO_TYPE.get(tag)


def node_type_for_label(label: str) -> Optional[NodeType]:
    """Return the node type stored under graph label ``label``, if any."""
    return _LABEL_TO_TYPE.get(label)
