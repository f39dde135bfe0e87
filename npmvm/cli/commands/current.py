"""
Current command implementation.

Shows the installed npm version selected by the env, local or global
record, in that order of precedence.
"""

import logging

from npmvm.cli.utils import create_manager

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the current command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if no usable version is selected)
    """
    manager = create_manager(args)
    record = manager.active()

    if record is None:
        logger.error("No npm version selected (set one with 'npmvm global SPEC')")
        return 1

    version = manager.resolve_locally(record.spec)
    if version is None:
        logger.error(
            f"npm '{record.spec}' ({record.scope}) is not installed; "
            f"run 'npmvm install {record.spec}'"
        )
        return 1

    source = f" from {record.path}" if record.path else ""
    logger.debug(f"Selected by {record.scope} record{source}")
    print(version)
    return 0
