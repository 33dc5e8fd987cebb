"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Configuration management for merkle-tree.

Loads YAML configuration from file with sensible defaults and validation.
Supports environment variable substitution using ${ENV_VAR} syntax.
"""

import os
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml

from merkle_tree.exceptions import InvalidConfigurationError, MerkleTreeError
from merkle_tree.hashing import DEFAULT_ALGORITHM, SUPPORTED_ALGORITHMS, HashEngine, create_hash_engine
from merkle_tree.logging_config import get_logger

logger = get_logger(__name__)


def _expand_env_vars(value: Any) -> Any:
    """
    Recursively expand environment variables in configuration values.

    Supports ${ENV_VAR} syntax with optional default values: ${ENV_VAR:default}

    Args:
        value: Configuration value (string, dict, list, or other)

    Returns:
        Value with environment variables expanded

    Examples:
        "${MERKLE_HASH}" -> value of MERKLE_HASH env var
        "${MERKLE_HASH:sha256}" -> value of MERKLE_HASH or "sha256" if not set
    """
    if isinstance(value, str):
        # Pattern matches ${VAR} or ${VAR:default}
        pattern = r'\$\{([^}:]+)(?::([^}]*))?\}'

        def replace_env_var(match):
            var_name = match.group(1)
            default_value = match.group(2) if match.group(2) is not None else ""
            return os.environ.get(var_name, default_value)

        return re.sub(pattern, replace_env_var, value)
    elif isinstance(value, dict):
        return {k: _expand_env_vars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [_expand_env_vars(item) for item in value]
    else:
        return value


@dataclass
class TreeConfig:
    """Merkle tree construction configuration."""

    hash_algorithm: str = DEFAULT_ALGORITHM
    padding: str = "reject"  # "reject", "duplicate_last" or "zero"
    pad_digest: str = ""  # Hex digest, only used with padding: zero

    def create_engine(self) -> HashEngine:
        """Create the hash engine named by hash_algorithm."""
        return create_hash_engine(self.hash_algorithm)

    def pad_digest_bytes(self) -> Optional[bytes]:
        if not self.pad_digest:
            return None
        return bytes.fromhex(self.pad_digest)


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    file: str = ""
    format: str = "console"  # "console" or "json"


@dataclass
class BenchConfig:
    """Benchmark harness configuration."""

    depth: int = 20
    iterations: int = 1000


@dataclass
class MerkleTreeConfig:
    """Main merkle-tree configuration."""

    tree: TreeConfig = field(default_factory=TreeConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    bench: BenchConfig = field(default_factory=BenchConfig)


VALID_PADDING_POLICIES = ["reject", "duplicate_last", "zero"]
VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
VALID_LOG_FORMATS = ["console", "json"]

# 2 ** 30 leaves is the largest tree the benchmark will allocate
MAX_BENCH_DEPTH = 30


def get_default_config_path() -> str:
    """Get the default configuration file path."""
    return os.path.expanduser("~/.merkle_tree/config.yaml")


def get_default_config() -> MerkleTreeConfig:
    """
    Get default configuration with sensible defaults.

    Returns:
        MerkleTreeConfig: Default configuration object
    """
    return MerkleTreeConfig()


def load_config(config_path: Optional[str] = None) -> MerkleTreeConfig:
    """
    Load configuration from YAML file with validation.

    If config file is not found, returns default configuration.
    If config file is malformed or invalid, raises InvalidConfigurationError.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        MerkleTreeConfig: Loaded and validated configuration

    Raises:
        InvalidConfigurationError: If configuration is invalid or malformed
    """
    if config_path is None:
        config_path = get_default_config_path()

    config_path = os.path.expanduser(str(config_path))

    if not os.path.exists(config_path):
        logger.debug(f"Configuration file not found at {config_path}, using defaults")
        return get_default_config()

    try:
        with open(config_path, 'r') as f:
            config_data = yaml.safe_load(f)
        logger.debug(f"Loaded configuration from {config_path}")
    except yaml.YAMLError as e:
        logger.error(f"Failed to parse YAML configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to parse YAML configuration file '{config_path}': {e}"
        )
    except OSError as e:
        logger.error(f"Failed to read configuration file '{config_path}': {e}")
        raise InvalidConfigurationError(
            f"Failed to read configuration file '{config_path}': {e}"
        )

    if config_data is None:
        logger.debug(f"Configuration file {config_path} is empty, using defaults")
        return get_default_config()

    if not isinstance(config_data, dict):
        raise InvalidConfigurationError(
            f"Invalid configuration in '{config_path}': top level must be a mapping"
        )

    config_data = _expand_env_vars(config_data)

    try:
        config = _build_config_from_dict(config_data)
        _validate_config(config)
    except InvalidConfigurationError as e:
        logger.error(f"Invalid configuration in '{config_path}': {e}")
        raise InvalidConfigurationError(f"Invalid configuration in '{config_path}': {e}")

    logger.debug(f"Successfully loaded and validated configuration from {config_path}")
    return config


def _section(config_data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = config_data.get(name) or {}
    if not isinstance(section, dict):
        raise InvalidConfigurationError(f"'{name}' section must be a mapping")
    return section


def _as_int(value: Any, name: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"{name} must be an integer, got {value!r}")


def _build_config_from_dict(config_data: Dict[str, Any]) -> MerkleTreeConfig:
    """
    Build MerkleTreeConfig from dictionary loaded from YAML.

    Merges user configuration with defaults.

    Args:
        config_data: Dictionary loaded from YAML file

    Returns:
        MerkleTreeConfig: Configuration object

    Raises:
        InvalidConfigurationError: If a section or value has the wrong type
    """
    default_config = get_default_config()

    tree_data = _section(config_data, 'tree')
    tree = TreeConfig(
        hash_algorithm=str(tree_data.get('hash_algorithm', default_config.tree.hash_algorithm)),
        padding=str(tree_data.get('padding', default_config.tree.padding)),
        pad_digest=str(tree_data.get('pad_digest', default_config.tree.pad_digest) or ""),
    )

    logging_data = _section(config_data, 'logging')
    logging = LoggingConfig(
        level=str(logging_data.get('level', default_config.logging.level)),
        file=os.path.expanduser(str(logging_data.get('file', default_config.logging.file) or "")),
        format=str(logging_data.get('format', default_config.logging.format)),
    )

    bench_data = _section(config_data, 'bench')
    bench = BenchConfig(
        depth=_as_int(bench_data.get('depth', default_config.bench.depth), "bench.depth"),
        iterations=_as_int(
            bench_data.get('iterations', default_config.bench.iterations), "bench.iterations"
        ),
    )

    return MerkleTreeConfig(tree=tree, logging=logging, bench=bench)


def _validate_config(config: MerkleTreeConfig) -> None:
    """
    Validate configuration values.

    Args:
        config: Configuration to validate

    Raises:
        InvalidConfigurationError: If configuration is invalid
    """
    if config.tree.hash_algorithm.lower().replace("-", "_") not in SUPPORTED_ALGORITHMS:
        raise InvalidConfigurationError(
            f"hash_algorithm must be one of {list(SUPPORTED_ALGORITHMS)}, "
            f"got '{config.tree.hash_algorithm}'"
        )

    if config.tree.padding not in VALID_PADDING_POLICIES:
        raise InvalidConfigurationError(
            f"padding must be one of {VALID_PADDING_POLICIES}, got '{config.tree.padding}'"
        )

    if config.tree.pad_digest:
        if config.tree.padding != "zero":
            raise InvalidConfigurationError("pad_digest is only allowed with padding 'zero'")
        try:
            pad_digest = config.tree.pad_digest_bytes()
        except ValueError:
            raise InvalidConfigurationError(
                f"pad_digest must be hex encoded, got '{config.tree.pad_digest}'"
            )
        try:
            digest_size = config.tree.create_engine().digest_size
        except MerkleTreeError as e:
            raise InvalidConfigurationError(str(e))
        if len(pad_digest) != digest_size:
            raise InvalidConfigurationError(
                f"pad_digest must be {digest_size} bytes for {config.tree.hash_algorithm}, "
                f"got {len(pad_digest)}"
            )

    if config.logging.level.upper() not in VALID_LOG_LEVELS:
        raise InvalidConfigurationError(
            f"logging level must be one of {VALID_LOG_LEVELS}, "
            f"got '{config.logging.level}'"
        )

    if config.logging.format not in VALID_LOG_FORMATS:
        raise InvalidConfigurationError(
            f"logging format must be one of {VALID_LOG_FORMATS}, "
            f"got '{config.logging.format}'"
        )

    if not 0 <= config.bench.depth <= MAX_BENCH_DEPTH:
        raise InvalidConfigurationError(
            f"bench depth must be between 0 and {MAX_BENCH_DEPTH}, got {config.bench.depth}"
        )
    if config.bench.iterations < 1:
        raise InvalidConfigurationError(
            f"bench iterations must be at least 1, got {config.bench.iterations}"
        )
