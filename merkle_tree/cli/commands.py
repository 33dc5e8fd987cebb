"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

CLI commands for Merkle tree operations.

Provides commands for:
- Hashing data into leaf digests
- Computing the root of a leaf file
- Generating inclusion proofs
- Verifying inclusion proofs against a root
"""

import json
import sys
import time
from pathlib import Path
from typing import List, Optional

import click

from merkle_tree.cli.context import CLIContext, pass_context
from merkle_tree.encoding import (
    digest_from_hex,
    digest_to_hex,
    proof_from_list,
    proof_to_list,
)
from merkle_tree.exceptions import EncodingError, MerkleTreeError
from merkle_tree.hashing import HashEngine, create_hash_engine
from merkle_tree.logging_config import get_logger, log_proof_verification, log_tree_construction
from merkle_tree.verifier import verify_proof

logger = get_logger(__name__)


def _read_leaves(path: Path, engine: HashEngine, hashed: bool) -> List[bytes]:
    """
    Read one leaf per non-blank line of a file.

    Lines are raw data to be hashed, or hex digests when hashed is True.
    """
    leaves = []
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            line = line.rstrip("\r\n")
            if not line.strip():
                continue
            leaves.append(_leaf_digest(line, engine, hashed))
    return leaves


def _leaf_digest(value: str, engine: HashEngine, hashed: bool) -> bytes:
    if hashed:
        return digest_from_hex(value)
    return engine.hash(value.encode("utf-8"))


@click.command('hash')
@click.argument('data', nargs=-1, required=True)
@pass_context
def hash_command(ctx: CLIContext, data):
    """
    Hash each DATA argument into a leaf digest.

    Examples:

        merkle-tree hash a b c
    """
    engine = ctx.create_engine()
    for item in data:
        click.echo(digest_to_hex(engine.hash(item.encode("utf-8"))))


@click.command()
@click.argument('leaf_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--hashed', is_flag=True, help='Lines are hex leaf digests instead of raw data')
@pass_context
def root(ctx: CLIContext, leaf_file: Path, hashed: bool):
    """
    Compute the Merkle root of LEAF_FILE (one leaf per line).

    Examples:

        merkle-tree root leaves.txt

        merkle-tree root --hashed digests.txt
    """
    try:
        engine = ctx.create_engine()
        leaves = _read_leaves(leaf_file, engine, hashed)

        start = time.perf_counter()
        tree = ctx.build_tree(leaves)
        duration_ms = (time.perf_counter() - start) * 1000

        log_tree_construction(
            logger,
            leaf_count=tree.leaf_count,
            depth=tree.depth,
            merkle_root=digest_to_hex(tree.root()),
            duration_ms=duration_ms,
            padding_count=tree.padding_count,
        )

        click.echo(digest_to_hex(tree.root()))
        if ctx.verbose:
            click.echo(f"  Algorithm: {tree.engine.name}")
            click.echo(f"  Depth: {tree.depth}")
            click.echo(f"  Leaves: {tree.leaf_count} ({tree.padding_count} padding)")

    except (MerkleTreeError, OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        logger.error(f"Failed to compute root: {e}", exc_info=True)
        sys.exit(1)


@click.command()
@click.argument('leaf_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('leaf')
@click.option('--hashed', is_flag=True, help='Leaves and LEAF are hex digests instead of raw data')
@click.option(
    '--output',
    '-o',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Write the proof document to a file instead of stdout',
)
@pass_context
def prove(ctx: CLIContext, leaf_file: Path, leaf: str, hashed: bool, output: Optional[Path]):
    """
    Generate an inclusion proof for LEAF in LEAF_FILE.

    The proof document is JSON and carries the root, the leaf digest, the
    hash algorithm and the proof steps, so it can be checked later with
    `merkle-tree verify`.

    Examples:

        merkle-tree prove leaves.txt b -o proof.json
    """
    try:
        engine = ctx.create_engine()
        tree = ctx.build_tree(_read_leaves(leaf_file, engine, hashed))
        leaf_digest = _leaf_digest(leaf, engine, hashed)

        proof = tree.proof(leaf_digest)

        document = {
            "algorithm": tree.engine.name,
            "root": digest_to_hex(tree.root()),
            "leaf": digest_to_hex(leaf_digest),
            "offset": tree.index_of(leaf_digest),
            "depth": tree.depth,
            "proof": proof_to_list(proof),
        }
        text = json.dumps(document, indent=2)

        if output is not None:
            output.write_text(text + "\n")
            click.echo(f"✓ Proof written to {output}")
        else:
            click.echo(text)

    except (MerkleTreeError, OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        logger.error(f"Failed to generate proof: {e}", exc_info=True)
        sys.exit(1)


@click.command()
@click.argument('proof_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--root', 'root_hex', default=None, help='Trusted root (hex); overrides the proof document')
@click.option('--leaf', default=None, help='Leaf to check; overrides the proof document')
@click.option('--hashed', is_flag=True, help='--leaf is a hex digest instead of raw data')
@pass_context
def verify(ctx: CLIContext, proof_file: Path, root_hex: Optional[str], leaf: Optional[str], hashed: bool):
    """
    Verify the proof document in PROOF_FILE.

    Exits with status 0 if the proof is valid and 1 otherwise.

    Examples:

        merkle-tree verify proof.json

        merkle-tree verify proof.json --root 3f1c... --leaf b
    """
    try:
        try:
            document = json.loads(proof_file.read_text())
        except json.JSONDecodeError as e:
            raise EncodingError(f"Invalid proof document: {e}")
        if not isinstance(document, dict):
            raise EncodingError("Invalid proof document: expected a JSON object")

        if "algorithm" in document:
            engine = create_hash_engine(str(document["algorithm"]))
        else:
            engine = ctx.create_engine()

        proof = proof_from_list(document.get("proof"))

        if root_hex is None:
            root_hex = document.get("root")
        if root_hex is None:
            raise EncodingError("No root given and the proof document has none")
        expected_root = digest_from_hex(root_hex)

        if leaf is not None:
            leaf_digest = _leaf_digest(leaf, engine, hashed)
        elif document.get("leaf") is not None:
            leaf_digest = digest_from_hex(document["leaf"])
        else:
            raise EncodingError("No leaf given and the proof document has none")

    except MerkleTreeError as e:
        click.echo(f"Error: {e}", err=True)
        logger.error(f"Failed to load proof: {e}", exc_info=True)
        sys.exit(1)

    start = time.perf_counter()
    valid = verify_proof(proof, leaf_digest, expected_root, engine)
    duration_ms = (time.perf_counter() - start) * 1000

    log_proof_verification(
        logger,
        merkle_root=digest_to_hex(expected_root),
        success=valid,
        duration_ms=duration_ms,
        failure_reason=None if valid else "computed root does not match",
        proof_length=len(proof),
    )

    if valid:
        click.echo("✓ Proof is valid")
        sys.exit(0)
    else:
        click.echo("✗ Proof is invalid", err=True)
        sys.exit(1)
