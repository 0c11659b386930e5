"""
Node identity: typed node identifiers for the code graph.

Mints deterministic identifiers for code entities, validates them against
their per-type grammar, and scores their collision risk.
"""

from identity.node_types import NodeType, node_type_for_label, node_type_for_tag
from identity.models import (
    CollisionAnalysis,
    DecodedIdentifier,
    RiskLevel,
    ValidationResult,
)
from identity.errors import IdentifierDecodeError, IdentifierEncodeError, IdentifierError
from identity.normalization import (
    normalize_file_path,
    normalize_method_signature,
    normalize_package_name,
    normalize_simple_name,
    normalize_type_name,
)
from identity.key_codec import (
    decode,
    encode,
    escape_field,
    generate_annotation_id,
    generate_class_id,
    generate_field_id,
    generate_method_id,
    generate_operation_id,
    generate_package_id,
    generate_repository_id,
    generate_subproject_id,
    generate_upsert_audit_id,
    is_consistent_id,
    make_digest,
    make_parameter_hash,
    make_path_hash,
    unescape_field,
)
from identity.format_validator import classify, is_valid, validate
from identity.collision_risk import analyze

__all__ = [
    # Types
    "NodeType",
    "RiskLevel",
    "ValidationResult",
    "CollisionAnalysis",
    "DecodedIdentifier",
    "IdentifierError",
    "IdentifierEncodeError",
    "IdentifierDecodeError",
    "node_type_for_label",
    "node_type_for_tag",
    # Codec
    "encode",
    "decode",
    "escape_field",
    "unescape_field",
    "make_digest",
    "make_parameter_hash",
    "make_path_hash",
    # Minting
    "generate_class_id",
    "generate_method_id",
    "generate_field_id",
    "generate_package_id",
    "generate_repository_id",
    "generate_subproject_id",
    "generate_annotation_id",
    "generate_upsert_audit_id",
    "generate_operation_id",
    "is_consistent_id",
    # Normalization
    "normalize_package_name",
    "normalize_file_path",
    "normalize_simple_name",
    "normalize_type_name",
    "normalize_method_signature",
    # Validation and risk
    "validate",
    "is_valid",
    "classify",
    "analyze",
]
