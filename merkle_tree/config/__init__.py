"""
Configuration management for merkle-tree.

Handles loading and validation of configuration files.
"""

from merkle_tree.config.settings import (
    BenchConfig,
    LoggingConfig,
    MerkleTreeConfig,
    TreeConfig,
    get_default_config,
    get_default_config_path,
    load_config,
)

__all__ = [
    "BenchConfig",
    "LoggingConfig",
    "MerkleTreeConfig",
    "TreeConfig",
    "get_default_config",
    "get_default_config_path",
    "load_config",
]
