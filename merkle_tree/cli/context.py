"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

CLI context for merkle-tree.

Provides shared context object and decorators for CLI commands.
"""

from typing import Optional, Sequence

import click

from merkle_tree.config.settings import MerkleTreeConfig, get_default_config
from merkle_tree.hashing import HashEngine
from merkle_tree.tree import MerkleTree


# Global context object to share configuration across commands
class CLIContext:
    """Context object for CLI commands."""

    def __init__(self):
        self.config: Optional[MerkleTreeConfig] = None
        self.config_path: Optional[str] = None
        self.verbose = False

    def get_config(self) -> MerkleTreeConfig:
        if self.config is None:
            self.config = get_default_config()
        return self.config

    def create_engine(self) -> HashEngine:
        return self.get_config().tree.create_engine()

    def build_tree(self, leaves: Sequence[bytes]) -> MerkleTree:
        """Build a tree using the configured hash algorithm and padding policy."""
        tree_config = self.get_config().tree
        return MerkleTree(
            leaves,
            engine=tree_config.create_engine(),
            padding=tree_config.padding,
            pad_digest=tree_config.pad_digest_bytes(),
        )


pass_context = click.make_pass_decorator(CLIContext, ensure=True)
