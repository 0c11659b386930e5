"""Errors raised when minting or decoding node identifiers."""


class IdentifierError(ValueError):
    """Base class for identifier encoding and decoding failures."""


class IdentifierEncodeError(IdentifierError):
    """Raised when entity attributes cannot be encoded into a node ID."""


class IdentifierDecodeError(IdentifierError):
    """Raised when a string cannot be decoded into a node type and fields."""
