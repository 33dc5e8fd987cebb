"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

merkle-tree - Fixed-size binary Merkle tree with incremental updates

Commit to a collection of leaf digests with one root hash, update leaves in
O(log n), and issue or check inclusion proofs.
"""

from merkle_tree._version import __version__
from merkle_tree.exceptions import (
    InvalidDigestError,
    InvalidShapeError,
    LeafNotFoundError,
    MerkleTreeError,
    OffsetOutOfBoundsError,
    UnsupportedHashAlgorithmError,
)
from merkle_tree.hashing import (
    DEFAULT_ENGINE,
    HashEngine,
    HashlibEngine,
    combine,
    create_hash_engine,
    hash_data,
)
from merkle_tree.proof import Direction, Proof, ProofStep, RootCommitment
from merkle_tree.tree import MerkleTree, PaddingPolicy
from merkle_tree.verifier import ProofVerifier, verify_proof

__all__ = [
    "__version__",
    # Tree
    "MerkleTree",
    "PaddingPolicy",
    "Direction",
    "ProofStep",
    "Proof",
    "RootCommitment",
    # Hashing
    "HashEngine",
    "HashlibEngine",
    "DEFAULT_ENGINE",
    "create_hash_engine",
    "hash_data",
    "combine",
    # Verification
    "ProofVerifier",
    "verify_proof",
    # Errors
    "MerkleTreeError",
    "InvalidShapeError",
    "InvalidDigestError",
    "OffsetOutOfBoundsError",
    "LeafNotFoundError",
    "UnsupportedHashAlgorithmError",
]
