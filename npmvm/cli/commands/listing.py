"""
List command implementation.

Prints installed npm versions and marks the one in effect.
"""

import logging

from npmvm.cli.utils import create_manager, print_versions

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the list command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    manager = create_manager(args)
    versions = manager.list_installed()

    if not versions:
        logger.info("No npm versions installed")
        return 0

    print_versions(versions, current=manager.current())
    return 0
