"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Proof and commitment value types.

A proof is an ordered list of ProofStep values, from the leaf's immediate
sibling up to (but excluding) the root. Each step records the sibling digest
and which side of the next combination it sits on.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, NamedTuple


class Direction(str, Enum):
    """Side of the combination a sibling digest sits on."""

    LEFT = "left"
    RIGHT = "right"


class ProofStep(NamedTuple):
    """
    One step of a Merkle proof.

    Attributes:
        direction: LEFT if the sibling is the left operand of the next
            combination, RIGHT otherwise
        sibling: Sibling digest at this level
    """
    direction: Direction
    sibling: bytes


Proof = List[ProofStep]


@dataclass(frozen=True)
class RootCommitment:
    """
    Versioned snapshot of a tree root.

    The generation counts updates applied since construction, so a verifier
    can tell which tree state a proof was issued against.

    Attributes:
        root: Root digest
        generation: Number of updates applied when the snapshot was taken
        depth: Number of levels below the root
        algorithm: Name of the hash algorithm that produced the root
    """
    root: bytes
    generation: int
    depth: int
    algorithm: str

    @property
    def leaf_count(self) -> int:
        return 1 << self.depth
