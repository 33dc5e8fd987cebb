"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Hash engines for Merkle tree construction.

A hash engine turns arbitrary bytes into fixed-size digests and combines two
digests into a parent digest. Trees only ever call combine(); callers use
hash() to turn raw payloads into leaf digests before inserting them.

Implementations:
- HashlibEngine: any fixed-output algorithm provided by hashlib
  (SHA3-256 by default)
"""

import hashlib
from abc import ABC, abstractmethod

from merkle_tree.exceptions import UnsupportedHashAlgorithmError


DEFAULT_ALGORITHM = "sha3_256"

SUPPORTED_ALGORITHMS = (
    "sha3_256",
    "sha256",
    "sha3_512",
    "sha512",
    "blake2b",
    "blake2s",
)


class HashEngine(ABC):
    """
    Abstract base class for digest algorithms used by a Merkle tree.

    Subclasses provide hash(); combine() is defined here as
    hash(left + right) so that every engine binds child order into the
    parent digest the same way.
    """

    name: str = ""
    digest_size: int = 0

    @abstractmethod
    def hash(self, data: bytes) -> bytes:
        """
        Hash raw bytes into a digest.

        Args:
            data: Bytes to hash

        Returns:
            Digest of digest_size bytes
        """
        pass

    def combine(self, left: bytes, right: bytes) -> bytes:
        """
        Compute the parent digest of two child digests.

        Concatenation, not addition: combine(a, b) != combine(b, a) in general.

        Args:
            left: Left child digest
            right: Right child digest

        Returns:
            Parent digest
        """
        return self.hash(left + right)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, HashEngine):
            return NotImplemented
        return type(self) is type(other) and self.name == other.name

    def __hash__(self) -> int:
        return hash((type(self), self.name))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class HashlibEngine(HashEngine):
    """
    Hash engine backed by a hashlib algorithm.

    Example:
        >>> engine = HashlibEngine("sha256")
        >>> len(engine.hash(b"a"))
        32
    """

    def __init__(self, algorithm: str = DEFAULT_ALGORITHM):
        """
        Initialize engine for a hashlib algorithm.

        Args:
            algorithm: hashlib algorithm name (e.g. "sha3_256", "sha256")

        Raises:
            UnsupportedHashAlgorithmError: If the algorithm is unknown or
                has a variable-length output (shake_*)
        """
        algorithm = algorithm.lower().replace("-", "_")
        if algorithm.startswith("shake"):
            raise UnsupportedHashAlgorithmError(
                f"Hash algorithm '{algorithm}' has no fixed output size"
            )
        try:
            reference = hashlib.new(algorithm)
        except (ValueError, TypeError):
            raise UnsupportedHashAlgorithmError(
                f"Unsupported hash algorithm: '{algorithm}'"
            )

        self.name = algorithm
        self.digest_size = reference.digest_size

    def hash(self, data: bytes) -> bytes:
        return hashlib.new(self.name, data).digest()


def create_hash_engine(name: str = DEFAULT_ALGORITHM) -> HashEngine:
    """
    Factory function to create a hash engine by algorithm name.

    Args:
        name: One of SUPPORTED_ALGORITHMS

    Returns:
        HashEngine implementation

    Raises:
        UnsupportedHashAlgorithmError: If name is not a supported algorithm
    """
    normalized = name.lower().replace("-", "_")
    if normalized not in SUPPORTED_ALGORITHMS:
        raise UnsupportedHashAlgorithmError(
            f"Unsupported hash algorithm: '{name}'. "
            f"Supported algorithms: {', '.join(SUPPORTED_ALGORITHMS)}"
        )
    return HashlibEngine(normalized)


DEFAULT_ENGINE: HashEngine = HashlibEngine(DEFAULT_ALGORITHM)


def hash_data(data: bytes) -> bytes:
    """Hash raw bytes with the default engine."""
    return DEFAULT_ENGINE.hash(data)


def combine(left: bytes, right: bytes) -> bytes:
    """Combine two digests with the default engine."""
    return DEFAULT_ENGINE.combine(left, right)
