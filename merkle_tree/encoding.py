"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Hex and JSON encoding of digests, proofs and root commitments.

The tree itself never serializes. These helpers are used by collaborators
(such as the CLI) that store or transmit proofs.

Proof wire format (JSON):
    [{"direction": "left", "sibling": "<hex>"}, ...]
"""

import binascii
import json
from typing import Any, Dict, List

from merkle_tree.exceptions import EncodingError
from merkle_tree.proof import Direction, Proof, ProofStep, RootCommitment


def digest_to_hex(digest: bytes) -> str:
    return bytes(digest).hex()


def digest_from_hex(value: str) -> bytes:
    """
    Decode a hex encoded digest.

    Args:
        value: Hex string, optionally prefixed with "0x"

    Returns:
        Digest bytes

    Raises:
        EncodingError: If value is not valid hex
    """
    if not isinstance(value, str):
        raise EncodingError(f"Digest must be a hex string, got {type(value).__name__}")

    text = value.strip()
    if text.startswith(("0x", "0X")):
        text = text[2:]

    try:
        return binascii.unhexlify(text)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Invalid hex digest '{value}': {e}")


def proof_to_list(proof: Proof) -> List[Dict[str, str]]:
    return [
        {"direction": Direction(direction).value, "sibling": digest_to_hex(sibling)}
        for direction, sibling in proof
    ]


def proof_from_list(data: Any) -> Proof:
    """
    Decode a proof from its list form.

    Args:
        data: List of {"direction": ..., "sibling": ...} mappings

    Returns:
        Proof

    Raises:
        EncodingError: If data is not a well formed proof
    """
    if not isinstance(data, list):
        raise EncodingError(f"Proof must be a list, got {type(data).__name__}")

    proof: Proof = []
    for position, step in enumerate(data):
        if not isinstance(step, dict) or "direction" not in step or "sibling" not in step:
            raise EncodingError(
                f"Proof step {position} must have 'direction' and 'sibling' fields"
            )
        try:
            direction = Direction(step["direction"])
        except ValueError:
            raise EncodingError(
                f"Proof step {position} has invalid direction: {step['direction']!r}"
            )
        proof.append(ProofStep(direction, digest_from_hex(step["sibling"])))

    return proof


def proof_to_json(proof: Proof, **kwargs: Any) -> str:
    return json.dumps(proof_to_list(proof), **kwargs)


def proof_from_json(text: str) -> Proof:
    """
    Decode a proof from JSON.

    Raises:
        EncodingError: If text is not valid JSON or not a well formed proof
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise EncodingError(f"Invalid proof JSON: {e}")
    return proof_from_list(data)


def commitment_to_dict(commitment: RootCommitment) -> Dict[str, Any]:
    return {
        "root": digest_to_hex(commitment.root),
        "generation": commitment.generation,
        "depth": commitment.depth,
        "leaf_count": commitment.leaf_count,
        "algorithm": commitment.algorithm,
    }


def commitment_from_dict(data: Dict[str, Any]) -> RootCommitment:
    """
    Decode a root commitment from its dictionary form.

    Raises:
        EncodingError: If a field is missing or has the wrong type
    """
    try:
        generation = data["generation"]
        depth = data["depth"]
        algorithm = data["algorithm"]
        root = digest_from_hex(data["root"])
    except (KeyError, TypeError) as e:
        raise EncodingError(f"Invalid root commitment: missing field {e}")

    if not isinstance(generation, int) or not isinstance(depth, int) or not isinstance(algorithm, str):
        raise EncodingError("Invalid root commitment: wrong field types")

    return RootCommitment(root=root, generation=generation, depth=depth, algorithm=algorithm)
