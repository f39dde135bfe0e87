"""
Install command implementation.

Resolves a version spec against published releases and installs it.
"""

import logging

from npmvm.cli.utils import create_manager

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the install command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    manager = create_manager(args)
    result = manager.install(args.spec)

    if result.was_cached:
        print(f"npm {result.version} is already installed")
    else:
        print(f"Installed npm {result.version} in {result.path}")
        if result.repaired_links:
            logger.info(f"Repaired {result.repaired_links} workspace links")
    return 0
