"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

Logging configuration for merkle-tree.

Provides centralized structured logging setup with JSON output for production
and human-readable output for development.
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import structlog


def reset_logging() -> None:
    """
    Restore the library default used until setup_logging() is called.

    Events are routed to stdlib logging and filtered by level there, so an
    application that never configures logging sees nothing below WARNING.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.KeyValueRenderer(key_order=["event"]),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def setup_logging(
    level: str = "INFO",
    log_file: Optional[Path] = None,
    json_format: bool = True,
) -> None:
    """
    Configure structured logging for merkle-tree.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to log file. If None, logs only to stderr.
        json_format: If True, use JSON format. If False, use human-readable format.
    """
    # Convert string level to logging constant
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Clear existing handlers to avoid duplicates
    root_logger.handlers.clear()

    if log_file is not None:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(file_handler)
    else:
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(numeric_level)
        stderr_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(stderr_handler)

    processors: list = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_format:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance for a specific module.

    Args:
        name: Logger name (typically __name__ of the module).

    Returns:
        Structured logger instance.
    """
    if name.startswith("merkle_tree"):
        return structlog.get_logger(name)
    return structlog.get_logger(f"merkle_tree.{name}")


# Convenience functions for common logging patterns

def log_tree_construction(
    logger: structlog.stdlib.BoundLogger,
    leaf_count: int,
    depth: int,
    merkle_root: str,
    duration_ms: float,
    **kwargs: Any,
) -> None:
    """
    Log a Merkle tree construction.

    Args:
        logger: Logger instance
        leaf_count: Number of leaves in the tree (after padding)
        depth: Number of levels below the root
        merkle_root: Computed Merkle root (hex encoded)
        duration_ms: Construction duration in milliseconds
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_tree_construction",
        "leaf_count": leaf_count,
        "depth": depth,
        "merkle_root": merkle_root,
        "duration_ms": duration_ms,
    }

    log_data.update(kwargs)

    logger.info("merkle_tree_construction", **log_data)


def log_proof_verification(
    logger: structlog.stdlib.BoundLogger,
    merkle_root: str,
    success: bool,
    duration_ms: float,
    failure_reason: Optional[str] = None,
    **kwargs: Any,
) -> None:
    """
    Log a Merkle proof verification.

    Args:
        logger: Logger instance
        merkle_root: Root the proof was checked against (hex encoded)
        success: Whether verification succeeded
        duration_ms: Verification duration in milliseconds
        failure_reason: Reason for failure if not successful
        **kwargs: Additional context to log
    """
    log_data: Dict[str, Any] = {
        "event_type": "merkle_proof_verification",
        "merkle_root": merkle_root,
        "success": success,
        "duration_ms": duration_ms,
    }

    if failure_reason is not None:
        log_data["failure_reason"] = failure_reason

    log_data.update(kwargs)

    if success:
        logger.info("merkle_proof_verification", **log_data)
    else:
        logger.warning("merkle_proof_verification_failed", **log_data)


if not structlog.is_configured():
    reset_logging()
