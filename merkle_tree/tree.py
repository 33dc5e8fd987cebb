"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Fixed-size binary Merkle tree with in-place leaf updates.

This module implements a complete binary Merkle tree over pre-hashed leaf
digests. It supports:
- Construction from an explicit list of leaf digests
- Construction from a depth and one leaf digest replicated to every leaf
- O(1) root retrieval
- O(depth) single-leaf update that re-hashes only the leaf's path
- Proof generation addressed by leaf digest
- Proof verification against the current root

Storage is a flat list in heap order: the root is at position 0 and the
children of position p are at 2p + 1 (left) and 2p + 2 (right). Node
(level, index) therefore lives at position 2 ** level - 1 + index and leaf
offset i at position leaf_count - 1 + i.
"""

from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple, Union

from merkle_tree.exceptions import (
    InvalidDigestError,
    InvalidShapeError,
    LeafNotFoundError,
    OffsetOutOfBoundsError,
)
from merkle_tree.hashing import DEFAULT_ENGINE, HashEngine
from merkle_tree.leaf_index import LeafIndex
from merkle_tree.proof import Direction, Proof, ProofStep, RootCommitment
from merkle_tree.verifier import verify_proof


class PaddingPolicy(str, Enum):
    """
    What to do with a leaf list whose length is not a power of two.

    REJECT: raise InvalidShapeError
    DUPLICATE_LAST: repeat the last leaf up to the next power of two
    ZERO: fill with a pad digest (all zero bytes unless one is given)
    """

    REJECT = "reject"
    DUPLICATE_LAST = "duplicate_last"
    ZERO = "zero"


def _coerce_digest(value: Any, engine: HashEngine, what: str = "Leaf digest") -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise InvalidDigestError(f"{what} must be bytes, got {type(value).__name__}")
    digest = bytes(value)
    if len(digest) != engine.digest_size:
        raise InvalidDigestError(
            f"{what} must be {engine.digest_size} bytes for {engine.name}, "
            f"got {len(digest)}"
        )
    return digest


class MerkleTree:
    """
    Complete binary Merkle tree over pre-hashed leaves.

    The leaf count is fixed at construction and is always a power of two.
    Every internal node holds combine(left_child, right_child) and the root
    is kept current by update().

    Example:
        >>> leaves = [MerkleTree.hash(b"a"), MerkleTree.hash(b"b")]
        >>> tree = MerkleTree(leaves)
        >>> tree.root() == MerkleTree.combine(leaves[0], leaves[1])
        True
        >>> proof = tree.proof(leaves[1])
        >>> tree.verify(proof, leaves[1])
        True
        >>> tree.update(1, MerkleTree.hash(b"c"))
        >>> tree.verify(proof, leaves[1])
        False
    """

    def __init__(
        self,
        leaves: Sequence[bytes],
        engine: Optional[HashEngine] = None,
        padding: Union[PaddingPolicy, str] = PaddingPolicy.REJECT,
        pad_digest: Optional[bytes] = None,
    ):
        """
        Build a Merkle tree from leaf digests.

        Args:
            leaves: Ordered leaf digests (already hashed, not raw data)
            engine: Hash engine used to combine nodes (default: SHA3-256)
            padding: Policy for leaf counts that are not a power of two
            pad_digest: Filler digest for PaddingPolicy.ZERO

        Raises:
            InvalidShapeError: If leaves is empty, or its length is not a
                power of two and padding is REJECT
            InvalidDigestError: If a leaf is not a digest of the engine's size
        """
        self.engine = engine or DEFAULT_ENGINE

        try:
            padding = PaddingPolicy(padding)
        except ValueError:
            raise InvalidShapeError(f"Unknown padding policy: {padding!r}")

        if pad_digest is not None and padding is not PaddingPolicy.ZERO:
            raise InvalidShapeError(
                f"pad_digest is only used with padding '{PaddingPolicy.ZERO.value}', "
                f"got '{padding.value}'"
            )

        nodes = [_coerce_digest(leaf, self.engine) for leaf in leaves]
        if not nodes:
            raise InvalidShapeError("Cannot initialize with zero leaves")

        given = len(nodes)
        leaf_count = 1 << (given - 1).bit_length()

        if leaf_count != given:
            if padding is PaddingPolicy.REJECT:
                raise InvalidShapeError(
                    f"Leaf count {given} is not a power of two "
                    f"(use a padding policy to pad to {leaf_count})"
                )
            if padding is PaddingPolicy.DUPLICATE_LAST:
                filler = nodes[-1]
            elif pad_digest is not None:
                filler = _coerce_digest(pad_digest, self.engine, "Pad digest")
            else:
                filler = bytes(self.engine.digest_size)
            nodes.extend([filler] * (leaf_count - given))

        self.padding = padding
        self.padding_count = leaf_count - given
        self.depth = leaf_count.bit_length() - 1
        self.leaf_count = leaf_count
        self.generation = 0

        self._leaf_index = LeafIndex(nodes)

        # Internal nodes occupy positions 0 .. leaf_count - 2
        self._nodes: List[bytes] = [b""] * (leaf_count - 1) + nodes
        combine = self.engine.combine
        for position in range(leaf_count - 2, -1, -1):
            self._nodes[position] = combine(
                self._nodes[2 * position + 1],
                self._nodes[2 * position + 2],
            )

    @classmethod
    def from_depth(
        cls,
        depth: int,
        initial_leaf: bytes,
        engine: Optional[HashEngine] = None,
    ) -> "MerkleTree":
        """
        Build a tree of 2 ** depth leaves that all hold initial_leaf.

        All nodes on one level share a digest, so only one combine per level
        is computed.

        Args:
            depth: Number of levels below the root
            initial_leaf: Digest stored in every leaf
            engine: Hash engine used to combine nodes (default: SHA3-256)

        Returns:
            MerkleTree with 2 ** depth identical leaves

        Raises:
            InvalidShapeError: If depth is negative or not an integer
            InvalidDigestError: If initial_leaf is not a digest of the engine's size
        """
        if isinstance(depth, bool) or not isinstance(depth, int):
            raise InvalidShapeError(f"Depth must be an integer, got {type(depth).__name__}")
        if depth < 0:
            raise InvalidShapeError(f"Depth must be non-negative, got {depth}")

        engine = engine or DEFAULT_ENGINE
        leaf = _coerce_digest(initial_leaf, engine)
        leaf_count = 1 << depth

        level_digests = [leaf]
        for _ in range(depth):
            level_digests.append(engine.combine(level_digests[-1], level_digests[-1]))
        level_digests.reverse()

        tree = cls.__new__(cls)
        tree.engine = engine
        tree.padding = PaddingPolicy.REJECT
        tree.padding_count = 0
        tree.depth = depth
        tree.leaf_count = leaf_count
        tree.generation = 0
        tree._leaf_index = LeafIndex.uniform(leaf, leaf_count)
        tree._nodes = []
        for level, digest in enumerate(level_digests):
            tree._nodes.extend([digest] * (1 << level))

        return tree

    @staticmethod
    def hash(data: bytes) -> bytes:
        """
        Hash raw data into a leaf digest with the default engine.

        Trees built with a custom engine should use tree.engine.hash instead.
        """
        return DEFAULT_ENGINE.hash(data)

    @staticmethod
    def combine(left: bytes, right: bytes) -> bytes:
        """Combine two digests with the default engine."""
        return DEFAULT_ENGINE.combine(left, right)

    def root(self) -> bytes:
        """
        Get the Merkle root hash.

        Returns:
            Root digest, always reflecting the current leaves
        """
        return self._nodes[0]

    def update(self, offset: int, new_leaf: bytes) -> None:
        """
        Overwrite one leaf and re-hash its path to the root.

        Only the depth ancestors of the leaf are recomputed; every other node
        keeps its digest.

        Args:
            offset: Leaf position (0-based)
            new_leaf: New leaf digest

        Raises:
            OffsetOutOfBoundsError: If offset is outside [0, leaf_count)
            InvalidDigestError: If new_leaf is not a digest of the engine's size
        """
        position = self._leaf_position(offset)
        digest = _coerce_digest(new_leaf, self.engine)

        nodes = self._nodes
        combine = self.engine.combine

        self._leaf_index.move(nodes[position], digest, offset)
        nodes[position] = digest

        while position > 0:
            position = (position - 1) // 2
            nodes[position] = combine(nodes[2 * position + 1], nodes[2 * position + 2])

        self.generation += 1

    set = update

    def proof(self, leaf_digest: bytes) -> Proof:
        """
        Generate a Merkle proof for the leaf holding leaf_digest.

        If several leaves hold the digest, the proof is for the one with the
        lowest offset.

        Args:
            leaf_digest: Current digest of the leaf to prove

        Returns:
            Ordered proof steps from the leaf's sibling up to the root

        Raises:
            LeafNotFoundError: If no leaf currently holds leaf_digest
        """
        offset = self.index_of(leaf_digest)
        if offset is None:
            raise LeafNotFoundError(leaf_digest)
        return self._walk(self.leaf_count - 1 + offset)

    def proof_at(self, offset: int) -> Proof:
        """
        Generate a Merkle proof for the leaf at a given offset.

        Args:
            offset: Leaf position (0-based)

        Returns:
            Ordered proof steps from the leaf's sibling up to the root

        Raises:
            OffsetOutOfBoundsError: If offset is outside [0, leaf_count)
        """
        return self._walk(self._leaf_position(offset))

    def verify(self, proof: Proof, leaf_digest: bytes) -> bool:
        """
        Verify a proof against the tree's current root.

        Args:
            proof: Proof steps, leaf level first
            leaf_digest: Digest of the leaf being proven

        Returns:
            True if the proof is valid for the current root, False otherwise
        """
        return verify_proof(proof, leaf_digest, self.root(), self.engine)

    def index_of(self, leaf_digest: bytes) -> Optional[int]:
        """
        Find the lowest offset whose leaf holds leaf_digest.

        Returns:
            Offset, or None if no leaf holds the digest
        """
        if not isinstance(leaf_digest, (bytes, bytearray, memoryview)):
            return None
        return self._leaf_index.lowest(bytes(leaf_digest))

    def leaf(self, offset: int) -> bytes:
        """Get the digest stored at a leaf offset."""
        return self._nodes[self._leaf_position(offset)]

    def leaves(self) -> Tuple[bytes, ...]:
        """Get every leaf digest in offset order."""
        return tuple(self._nodes[self.leaf_count - 1:])

    def node(self, level: int, index: int) -> bytes:
        """
        Get the digest of node (level, index).

        Level 0 is the root and level depth holds the leaves.

        Raises:
            OffsetOutOfBoundsError: If the address lies outside the tree
        """
        if isinstance(level, bool) or not isinstance(level, int) or not 0 <= level <= self.depth:
            raise OffsetOutOfBoundsError(
                level,
                self.depth + 1,
                f"Level {level} out of bounds (tree has levels 0..{self.depth})",
            )
        width = 1 << level
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < width:
            raise OffsetOutOfBoundsError(
                index,
                width,
                f"Index {index} out of bounds for level {level} (width is {width})",
            )
        return self._nodes[width - 1 + index]

    def levels(self) -> List[Tuple[bytes, ...]]:
        """Get all levels of the tree, root level first."""
        return [
            tuple(self._nodes[(1 << level) - 1:(2 << level) - 1])
            for level in range(self.depth + 1)
        ]

    def num_leaves(self) -> int:
        return self.leaf_count

    def num_levels(self) -> int:
        return self.depth

    def commitment(self) -> RootCommitment:
        """
        Snapshot the current root together with its generation.

        Returns:
            RootCommitment for the current tree state
        """
        return RootCommitment(
            root=self.root(),
            generation=self.generation,
            depth=self.depth,
            algorithm=self.engine.name,
        )

    def copy(self) -> "MerkleTree":
        """Create an independent copy of this tree."""
        clone = type(self).__new__(type(self))
        clone.engine = self.engine
        clone.padding = self.padding
        clone.padding_count = self.padding_count
        clone.depth = self.depth
        clone.leaf_count = self.leaf_count
        clone.generation = self.generation
        clone._leaf_index = self._leaf_index.copy()
        clone._nodes = list(self._nodes)
        return clone

    def _leaf_position(self, offset: int) -> int:
        if isinstance(offset, bool) or not isinstance(offset, int):
            raise OffsetOutOfBoundsError(
                offset,
                self.leaf_count,
                f"Offset must be an integer, got {type(offset).__name__}",
            )
        if not 0 <= offset < self.leaf_count:
            raise OffsetOutOfBoundsError(offset, self.leaf_count)
        return self.leaf_count - 1 + offset

    def _walk(self, position: int) -> Proof:
        """Collect sibling digests from a node position up to the root."""
        proof: Proof = []
        nodes = self._nodes

        while position > 0:
            if position % 2 == 1:
                # Left child, sibling is on the right
                proof.append(ProofStep(Direction.RIGHT, nodes[position + 1]))
            else:
                proof.append(ProofStep(Direction.LEFT, nodes[position - 1]))
            position = (position - 1) // 2

        return proof

    def __len__(self) -> int:
        return self.leaf_count

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MerkleTree):
            return NotImplemented
        return self.engine == other.engine and self._nodes == other._nodes

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"MerkleTree(depth={self.depth}, leaf_count={self.leaf_count}, "
            f"algorithm={self.engine.name!r}, root={self.root().hex()[:16]}...)"
        )
