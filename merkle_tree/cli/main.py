"""
Copyright (C) 2026 Garudex Labs.  All Rights Reserved.
merkle-tree, a product of Garudex Labs

CLI entry point for merkle-tree.

Provides command-line access to hashing, root computation, proof generation,
proof verification and benchmarking.
"""

import sys
from pathlib import Path
from typing import Optional

import click

from merkle_tree._version import __version__
from merkle_tree.config.settings import get_default_config_path, load_config
from merkle_tree.exceptions import InvalidConfigurationError
from merkle_tree.logging_config import get_logger, setup_logging
from merkle_tree.cli.context import CLIContext, pass_context


@click.group()
@click.option(
    '--config',
    '-c',
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help=f'Path to configuration file (default: {get_default_config_path()})',
)
@click.option(
    '--log-level',
    '-l',
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'], case_sensitive=False),
    default=None,
    help='Set logging level (overrides configuration)',
)
@click.option(
    '--verbose',
    '-v',
    is_flag=True,
    help='Enable verbose output',
)
@click.version_option(version=__version__, prog_name='merkle-tree')
@pass_context
def cli(ctx: CLIContext, config: Optional[Path], log_level: Optional[str], verbose: bool):
    """
    merkle-tree - Fixed-size Merkle trees with inclusion proofs.

    Commit to a list of items with one root hash, prove that an item is
    included, and verify proofs against a trusted root.
    """
    ctx.verbose = verbose
    ctx.config_path = str(config) if config else None

    # Load configuration
    try:
        ctx.config = load_config(ctx.config_path)
    except InvalidConfigurationError as e:
        click.echo(f"Error: Invalid configuration: {e}", err=True)
        sys.exit(1)

    # Set up logging
    effective_log_level = log_level.upper() if log_level else ctx.config.logging.level.upper()
    log_file = Path(ctx.config.logging.file) if ctx.config.logging.file else None
    try:
        setup_logging(
            level=effective_log_level,
            log_file=log_file,
            json_format=ctx.config.logging.format == "json",
        )
    except OSError as e:
        click.echo(f"Error: Failed to set up logging: {e}", err=True)
        sys.exit(1)

    if verbose:
        logger = get_logger(__name__)
        logger.info(f"Loaded configuration from: {ctx.config_path or 'defaults'}")
        logger.info(f"Log level: {effective_log_level}")


# Import and register tree commands
from merkle_tree.cli.commands import hash_command, prove, root, verify
cli.add_command(hash_command, name='hash')
cli.add_command(root)
cli.add_command(prove)
cli.add_command(verify)

# Import and register benchmark command
from merkle_tree.cli.bench import bench
cli.add_command(bench)


def main():
    cli()


if __name__ == '__main__':
    main()
