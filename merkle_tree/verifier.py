"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Merkle proof verification without a live tree.

Verification only needs the proof, the leaf digest and a trusted root:
- verify_proof: replay a proof against an explicit expected root
- ProofVerifier: verifier bound to one trusted root (or RootCommitment)

Verification never raises. A proof that does not verify, including a
malformed one, yields False.
"""

from typing import Any, Iterable, Optional

from merkle_tree.hashing import DEFAULT_ENGINE, HashEngine, create_hash_engine
from merkle_tree.proof import Direction, RootCommitment


def _as_bytes(value: Any) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"Expected digest bytes, got {type(value).__name__}")
    return bytes(value)


def compute_root(
    proof: Iterable[Any],
    leaf_digest: bytes,
    engine: Optional[HashEngine] = None,
) -> bytes:
    """
    Recompute the root implied by a proof and a leaf digest.

    Args:
        proof: Ordered (direction, sibling) steps, leaf level first
        leaf_digest: Digest of the leaf being proven
        engine: Hash engine (default engine if None)

    Returns:
        Root digest implied by the proof

    Raises:
        TypeError: If a step or digest is not well formed
        ValueError: If a direction is not "left" or "right"
    """
    engine = engine or DEFAULT_ENGINE
    current = _as_bytes(leaf_digest)

    for direction, sibling in proof:
        sibling = _as_bytes(sibling)
        direction = Direction(direction)
        if direction is Direction.LEFT:
            current = engine.combine(sibling, current)
        else:
            current = engine.combine(current, sibling)

    return current


def verify_proof(
    proof: Iterable[Any],
    leaf_digest: bytes,
    expected_root: bytes,
    engine: Optional[HashEngine] = None,
) -> bool:
    """
    Verify a Merkle proof against an expected root.

    Starting from the leaf digest, each step combines the running digest
    with the sibling on the recorded side. The proof is valid iff the final
    digest equals expected_root.

    Args:
        proof: Ordered (direction, sibling) steps, leaf level first
        leaf_digest: Digest of the leaf being proven
        expected_root: Trusted root digest
        engine: Hash engine (default engine if None)

    Returns:
        True if the proof is valid, False otherwise
    """
    try:
        computed = compute_root(proof, leaf_digest, engine)
        return computed == _as_bytes(expected_root)
    except (TypeError, ValueError):
        return False


class ProofVerifier:
    """
    Verify proofs against one trusted root.

    Example:
        >>> verifier = ProofVerifier(tree.root(), tree.engine)
        >>> verifier.verify(tree.proof(leaf), leaf)
        True
    """

    def __init__(self, expected_root: bytes, engine: Optional[HashEngine] = None):
        """
        Raises:
            TypeError: If expected_root is not bytes-like
        """
        self.expected_root = _as_bytes(expected_root)
        self.engine = engine or DEFAULT_ENGINE

    @classmethod
    def from_commitment(
        cls,
        commitment: RootCommitment,
        engine: Optional[HashEngine] = None,
    ) -> "ProofVerifier":
        """
        Create a verifier for a root commitment.

        Args:
            commitment: Root snapshot taken from a tree
            engine: Hash engine; built from commitment.algorithm if None

        Returns:
            ProofVerifier bound to commitment.root
        """
        if engine is None:
            engine = create_hash_engine(commitment.algorithm)
        return cls(commitment.root, engine)

    def verify(self, proof: Iterable[Any], leaf_digest: bytes) -> bool:
        return verify_proof(proof, leaf_digest, self.expected_root, self.engine)
