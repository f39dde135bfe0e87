"""
Available command implementation.

Prints published npm versions in ascending order.
"""

from npmvm.cli.utils import create_manager, print_versions
from npmvm.core.versions import clean_version, sort_versions


def run(args) -> int:
    """
    Run the available command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    tags = create_manager(args).list_available()
    versions = {clean_version(tag) for tag in tags} - {None}
    print_versions(sort_versions(versions))
    return 0
