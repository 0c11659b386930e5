"""Readers that feed identifiers from files into the audit."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterator, Optional, Tuple

from identity.node_types import NodeType, node_type_for_label, node_type_for_tag

logger = logging.getLogger(__name__)


def parse_node_type(value: Any) -> Optional[NodeType]:
    """Parse a node type from an enum name, an ID tag, or a graph label.

    ``"CLASS"``, ``"class"`` and ``"Class"`` all resolve to
    ``NodeType.CLASS``; ``"repo"`` and ``"Repository"`` to
    ``NodeType.REPOSITORY``.
    """
    if value is None:
        return None
    if isinstance(value, NodeType):
        return value
    text = str(value).strip()
    if not text:
        return None
    if text.upper() in NodeType.__members__:
        return NodeType[text.upper()]
    return node_type_for_tag(text) or node_type_for_label(text)


def _iter_text_lines(path: Path) -> Iterator[Tuple[str, Optional[NodeType]]]:
    with path.open("r", encoding="utf-8") as f:
        for line in f:
            identifier = line.strip()
            if not identifier or identifier.startswith("#"):
                continue
            yield identifier, None


def _iter_jsonl_records(path: Path) -> Iterator[Tuple[str, Optional[NodeType]]]:
    with path.open("r", encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            text = line.strip()
            if not text:
                continue
            try:
                record = json.loads(text)
            except json.JSONDecodeError as exc:
                raise ValueError(f"{path}:{line_number}: invalid JSON: {exc}") from exc
            if not isinstance(record, dict) or "id" not in record:
                raise ValueError(f"{path}:{line_number}: record must be an object with 'id'")

            raw_type = record.get("type")
            claimed_type = parse_node_type(raw_type)
            if raw_type is not None and claimed_type is None:
                logger.warning(
                    "%s:%d: unknown node type %r; inferring from prefix",
                    path,
                    line_number,
                    raw_type,
                )
            yield str(record["id"]), claimed_type


def iter_identifiers_from_file(path: str) -> Iterator[Tuple[str, Optional[NodeType]]]:
    """Stream ``(identifier, claimed_type)`` pairs from a file.

    ``.jsonl`` files hold one ``{"id": ..., "type": ...}`` object per line
    (``type`` optional). Any other file holds one identifier per line;
    blank lines and ``#`` comments are skipped.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If a JSONL line is malformed.
    """
    file_path = Path(path)
    if not file_path.is_file():
        raise FileNotFoundError(f"Identifier file not found: {file_path}")

    if file_path.suffix.lower() == ".jsonl":
        yield from _iter_jsonl_records(file_path)
    else:
        yield from _iter_text_lines(file_path)
