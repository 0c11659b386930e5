"""
Identifier audit: checks node IDs from files or the graph store.
"""

from audit.identifier_audit import (
    AuditStats,
    IdentifierFinding,
    audit_identifier,
    audit_identifiers,
    meets_threshold,
)
from audit.sources import iter_identifiers_from_file, parse_node_type

__all__ = [
    "AuditStats",
    "IdentifierFinding",
    "audit_identifier",
    "audit_identifiers",
    "meets_threshold",
    "iter_identifiers_from_file",
    "parse_node_type",
]
