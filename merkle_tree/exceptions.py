"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Exception hierarchy for merkle-tree.

All custom exceptions inherit from MerkleTreeError base class.
"""


class MerkleTreeError(Exception):
    """Base exception for all merkle-tree errors."""
    pass


# Tree Errors
class InvalidShapeError(MerkleTreeError):
    """Raised when construction input has zero leaves or an unsupported leaf count."""
    pass


class OffsetOutOfBoundsError(MerkleTreeError, IndexError):
    """Raised when a leaf offset or node address lies outside the tree."""

    def __init__(self, offset: int, leaf_count: int, message: str = ""):
        self.offset = offset
        self.leaf_count = leaf_count
        super().__init__(
            message or f"Offset {offset} out of bounds (leaf count is {leaf_count})"
        )


class LeafNotFoundError(MerkleTreeError, KeyError):
    """Raised when a proof is requested for a digest no leaf currently holds."""

    def __init__(self, digest: bytes):
        self.digest = digest
        super().__init__(digest)

    def __str__(self) -> str:
        digest = self.digest
        if isinstance(digest, (bytes, bytearray)):
            digest = bytes(digest).hex()
        return f"Cannot find leaf: {digest}"


class InvalidDigestError(MerkleTreeError, ValueError):
    """Raised when a leaf digest is not bytes of the engine's digest size."""
    pass


# Hashing Errors
class UnsupportedHashAlgorithmError(MerkleTreeError, ValueError):
    """Raised when a hash algorithm is unknown or has no fixed output size."""
    pass


# Encoding Errors
class EncodingError(MerkleTreeError, ValueError):
    """Raised when a digest, proof or commitment cannot be decoded."""
    pass


# Configuration Errors
class ConfigurationError(MerkleTreeError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when configuration is invalid or malformed."""
    pass
