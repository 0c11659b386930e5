"""Node identifier codec shared by ingestion, storage lookups and audits.

Identifiers have the form ``<tag>:<field-1>:...:<field-n>``. The field
count is fixed per node type and empty fields are kept as empty segments,
so ``encode`` and ``decode`` are exact inverses for every identifier the
format validator accepts.
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections.abc import Mapping
from typing import Any, Iterable, Optional, Sequence

from identity.config import (
    DEFAULT_DIGEST_LENGTH,
    MAX_DIGEST_LENGTH,
    MIN_DIGEST_LENGTH,
)
from identity.errors import IdentifierDecodeError, IdentifierEncodeError
from identity.format_validator import EMPTY_ID_MESSAGE, classify, validate
from identity.models import DecodedIdentifier
from identity.node_types import FIELD_COUNTS, ID_PREFIXES, ID_SEPARATOR, NodeType
from identity.normalization import (
    normalize_file_path,
    normalize_package_name,
    normalize_parameter_list,
    normalize_simple_name,
    normalize_type_name,
)

logger = logging.getLogger(__name__)

_ESCAPES = (("%", "%25"), (ID_SEPARATOR, "%3A"))


# ---------------------------------------------------------------------------
# Encoding / decoding
# ---------------------------------------------------------------------------


def encode(node_type: NodeType, fields: Sequence[Optional[str]]) -> str:
    """Encode ordered field values into a node identifier.

    Args:
        node_type: Type whose tag and grammar apply.
        fields: Field values in canonical order. ``None`` encodes as an
            empty segment.

    Returns:
        Identifier string that passes ``validate(id, node_type)``.

    Raises:
        IdentifierEncodeError: On unknown type, wrong field count, a field
            containing ``:``, or a result that violates the type grammar.
    """
    if not isinstance(node_type, NodeType):
        raise IdentifierEncodeError(f"Unknown node type: {node_type}")

    values = tuple("" if value is None else str(value) for value in fields)
    expected = FIELD_COUNTS[node_type]
    if len(values) != expected:
        raise IdentifierEncodeError(
            f"{node_type} node ID takes {expected} fields, got {len(values)}"
        )

    for index, value in enumerate(values):
        if ID_SEPARATOR in value:
            raise IdentifierEncodeError(
                f"Field {index} of {node_type} node ID contains "
                f"'{ID_SEPARATOR}': {value!r}"
            )

    node_id = ID_PREFIXES[node_type] + ID_SEPARATOR.join(values)
    validation = validate(node_id, node_type)
    if not validation.valid:
        raise IdentifierEncodeError(validation.message)

    logger.debug("Encoded %s node ID: %s", node_type, node_id)
    return node_id


def decode(node_id: str) -> DecodedIdentifier:
    """Decode a node identifier into its node type and field values.

    Raises:
        IdentifierDecodeError: If the tag is unknown or the number of
            segments does not match the node type.
    """
    if node_id is None or not node_id.strip():
        raise IdentifierDecodeError(EMPTY_ID_MESSAGE)

    node_type = classify(node_id)
    if node_type is None:
        raise IdentifierDecodeError(f"Unrecognized node ID prefix: {node_id}")

    prefix = ID_PREFIXES[node_type]
    if not node_id.startswith(prefix):
        raise IdentifierDecodeError(
            f"{node_type} node ID must start with '{prefix}': {node_id}"
        )

    fields = tuple(node_id[len(prefix):].split(ID_SEPARATOR))
    expected = FIELD_COUNTS[node_type]
    if len(fields) != expected:
        raise IdentifierDecodeError(
            f"Expected {expected} fields for {node_type} node ID, "
            f"got {len(fields)}: {node_id}"
        )
    return DecodedIdentifier(node_type=node_type, fields=fields)


def escape_field(value: str) -> str:
    """Percent-escape ``%`` and ``:`` so ``value`` can sit in one field."""
    for raw, escaped in _ESCAPES:
        value = value.replace(raw, escaped)
    return value


def unescape_field(value: str) -> str:
    for raw, escaped in reversed(_ESCAPES):
        value = value.replace(escaped, raw)
    return value


# ---------------------------------------------------------------------------
# Digests
# ---------------------------------------------------------------------------


def make_digest(text: str, digest_length: int = DEFAULT_DIGEST_LENGTH) -> str:
    """Create a stable lowercase-hex digest of ``text``.

    SHA-1 over UTF-8, truncated to ``digest_length`` clamped to [8, 40].
    """
    length = max(MIN_DIGEST_LENGTH, min(digest_length, MAX_DIGEST_LENGTH))
    return hashlib.sha1(text.encode("utf-8")).hexdigest()[:length]


def make_parameter_hash(
    parameter_types: Optional[Iterable[Optional[str]]],
    digest_length: int = DEFAULT_DIGEST_LENGTH,
) -> str:
    """Hash a method's parameter type list for overload disambiguation."""
    return make_digest(normalize_parameter_list(parameter_types), digest_length)


def make_path_hash(path: str, digest_length: int = DEFAULT_DIGEST_LENGTH) -> str:
    return make_digest(normalize_file_path(path), digest_length)


# ---------------------------------------------------------------------------
# Minting helpers, one per node type
# ---------------------------------------------------------------------------


def _require(value: Optional[str], param_name: str) -> str:
    if value is None or not str(value).strip():
        raise IdentifierEncodeError(f"{param_name} cannot be null or empty")
    return str(value)


def _decode_as(node_id: str, node_type: NodeType, label: str) -> tuple[str, ...]:
    try:
        decoded = decode(node_id)
    except IdentifierDecodeError as exc:
        raise IdentifierEncodeError(f"Invalid {label} ID format: {node_id}") from exc
    if decoded.node_type is not node_type:
        raise IdentifierEncodeError(f"Invalid {label} ID format: {node_id}")
    return decoded.fields


def generate_class_id(package_name: Optional[str], class_name: str) -> str:
    """Mint ``class:<package>:<className>``; the package may be empty."""
    _require(class_name, "className")
    return encode(
        NodeType.CLASS,
        (normalize_package_name(package_name), normalize_simple_name(class_name)),
    )


def generate_method_id(
    class_id: str,
    method_name: str,
    parameter_types: Optional[Iterable[Optional[str]]] = None,
    digest_length: int = DEFAULT_DIGEST_LENGTH,
) -> str:
    """Mint a method ID under ``class_id``.

    Overloads differ only in the parameter hash, which is computed from the
    normalized parameter type list.

    Args:
        class_id: Identifier of the declaring class.
        method_name: Method name.
        parameter_types: Parameter type names in declaration order.
        digest_length: Hex length of the parameter hash.

    Returns:
        ``method:<package>:<className>:<methodName>:<paramHash>``.

    Raises:
        IdentifierEncodeError: If ``class_id`` is not a class ID or
            ``method_name`` is blank.
    """
    _require(class_id, "classId")
    _require(method_name, "methodName")
    package_name, class_name = _decode_as(class_id, NodeType.CLASS, "class")
    return encode(
        NodeType.METHOD,
        (
            package_name,
            class_name,
            normalize_simple_name(method_name),
            make_parameter_hash(parameter_types, digest_length),
        ),
    )


def generate_field_id(
    class_id: str,
    field_name: str,
    field_type: Optional[str] = None,
) -> str:
    """Mint ``field:<package>:<className>:<fieldName>:<fieldType>``."""
    _require(class_id, "classId")
    _require(field_name, "fieldName")
    package_name, class_name = _decode_as(class_id, NodeType.CLASS, "class")
    return encode(
        NodeType.FIELD,
        (
            package_name,
            class_name,
            normalize_simple_name(field_name),
            normalize_type_name(field_type),
        ),
    )


def generate_package_id(package_name: Optional[str]) -> str:
    return encode(NodeType.PACKAGE, (normalize_package_name(package_name),))


def generate_repository_id(
    repository_path: str,
    repository_name: str,
    digest_length: int = DEFAULT_DIGEST_LENGTH,
) -> str:
    """Mint ``repo:<name>:<pathHash>``.

    Two checkouts with the same name at different paths get different IDs.
    """
    _require(repository_name, "repositoryName")
    _require(repository_path, "repositoryPath")
    return encode(
        NodeType.REPOSITORY,
        (
            normalize_simple_name(repository_name),
            make_path_hash(repository_path, digest_length),
        ),
    )


def generate_subproject_id(repository_id: str, subproject_path: str) -> str:
    """Mint ``subproject:<repositoryId>:<subPath>`` under a repository ID."""
    _require(repository_id, "repositoryId")
    _require(subproject_path, "subProjectPath")
    repo_name, path_hash = _decode_as(repository_id, NodeType.REPOSITORY, "repository")
    return encode(
        NodeType.SUBPROJECT,
        (repo_name, path_hash, normalize_file_path(subproject_path)),
    )


def generate_annotation_id(package_name: Optional[str], annotation_name: str) -> str:
    _require(annotation_name, "annotationName")
    normalized_package = normalize_package_name(package_name)
    normalized_name = normalize_simple_name(annotation_name)
    if normalized_package:
        fully_qualified = f"{normalized_package}.{normalized_name}"
    else:
        fully_qualified = normalized_name
    return encode(NodeType.ANNOTATION, (fully_qualified,))


def generate_upsert_audit_id(operation_id: str, node_type: Any, node_id: str) -> str:
    """Mint ``upsert_audit:<operationId>:<nodeType>:<nodeId>``.

    The audited node ID carries its own separators, so every field is
    escaped with ``escape_field``.
    """
    _require(operation_id, "operationId")
    _require(None if node_type is None else str(node_type), "nodeType")
    _require(node_id, "nodeId")
    return encode(
        NodeType.UPSERT_AUDIT,
        (escape_field(operation_id), escape_field(str(node_type)), escape_field(node_id)),
    )


def generate_operation_id() -> str:
    """Create an upsert operation ID: ``upsert_<epochMillis>_<threadId>``."""
    return f"upsert_{time.time_ns() // 1_000_000}_{threading.get_ident()}"


# ---------------------------------------------------------------------------
# Consistency
# ---------------------------------------------------------------------------


def _extract_id(node: Any) -> Optional[str]:
    if isinstance(node, str):
        return node
    if isinstance(node, Mapping):
        value = node.get("id")
        return None if value is None else str(value)
    value = getattr(node, "id", None)
    if value is None:
        logger.warning("Unknown node type for ID extraction: %s", type(node).__name__)
        return None
    return str(value)


def is_consistent_id(existing_node: Any, new_node: Any) -> bool:
    """Check that two node representations carry the same identifier.

    Nodes may be ID strings, mappings with an ``"id"`` key, or objects with
    an ``id`` attribute.
    """
    if existing_node is None or new_node is None:
        return False

    existing_id = _extract_id(existing_node)
    new_id = _extract_id(new_node)
    if existing_id is None or new_id is None:
        return False

    consistent = existing_id == new_id
    if not consistent:
        logger.debug("Inconsistent node IDs: existing=%s, new=%s", existing_id, new_id)
    return consistent
