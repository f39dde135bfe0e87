"""
Resolve command implementation.
"""

import logging

from npmvm.cli.utils import create_manager

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the resolve command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if nothing installed matches with --local)
    """
    manager = create_manager(args)

    if args.local:
        version = manager.resolve_locally(args.spec)
        if version is None:
            logger.error(f"No installed npm version matches '{args.spec}'")
            return 1
    else:
        version = manager.resolve(args.spec)

    print(version)
    return 0
