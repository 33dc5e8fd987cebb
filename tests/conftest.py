"""
Pytest configuration and shared fixtures for merkle-tree tests.
"""

import os
import tempfile
from pathlib import Path
from typing import Generator, List

import pytest

from merkle_tree.tree import MerkleTree


def make_leaves(count: int) -> List[bytes]:
    """
    Create count distinct leaf digests.

    Args:
        count: Number of leaves

    Returns:
        Leaf digests hashed from "leaf0", "leaf1", ...
    """
    return [MerkleTree.hash(f"leaf{i}".encode()) for i in range(count)]


def create_test_config_content(temp_dir: Path, **overrides) -> str:
    """
    Generate test configuration YAML content.

    Args:
        temp_dir: Temporary directory for the log file.
        **overrides: Values for the tree section (hash_algorithm, padding, pad_digest).

    Returns:
        YAML configuration content as string.
    """
    hash_algorithm = overrides.get("hash_algorithm", "sha3_256")
    padding = overrides.get("padding", "reject")
    pad_digest = overrides.get("pad_digest", "")

    return f"""
tree:
  hash_algorithm: {hash_algorithm}
  padding: {padding}
  pad_digest: "{pad_digest}"

logging:
  level: INFO
  file: {temp_dir}/merkle_tree.log
  format: json

bench:
  depth: 4
  iterations: 5
"""


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """
    Create a temporary directory for test files.

    Yields:
        Path to temporary directory that is cleaned up after test.
    """
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def sample_leaves() -> List[bytes]:
    """Sixteen distinct leaf digests."""
    return make_leaves(16)


@pytest.fixture
def sample_tree(sample_leaves: List[bytes]) -> MerkleTree:
    """Tree of depth 4 over sample_leaves."""
    return MerkleTree(sample_leaves)


@pytest.fixture
def sample_config_path(temp_dir: Path) -> Path:
    """
    Create a sample configuration file for testing.

    Args:
        temp_dir: Temporary directory fixture.

    Returns:
        Path to sample config file.
    """
    config_path = temp_dir / "config.yaml"
    config_path.write_text(create_test_config_content(temp_dir))
    return config_path


@pytest.fixture
def make_config_yaml(temp_dir: Path):
    """
    Factory fixture that writes a config file with tree overrides.

    Usage:
        def test_something(make_config_yaml):
            config_path = make_config_yaml(padding="duplicate_last")
    """
    def _make_config(**overrides) -> Path:
        config_path = temp_dir / "config.yaml"
        config_path.write_text(create_test_config_content(temp_dir, **overrides))
        return config_path
    return _make_config


# Hypothesis settings for property-based tests
from hypothesis import settings, Verbosity

# Register custom profile for merkle-tree tests
settings.register_profile("merkle_tree", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("merkle_tree-ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("merkle_tree-dev", max_examples=10, verbosity=Verbosity.verbose)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "merkle_tree"))
