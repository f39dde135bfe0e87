"""
Remove command implementation.
"""

from npmvm.cli.utils import create_manager


def run(args) -> int:
    """
    Run the remove command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    version = create_manager(args).remove(args.spec)
    print(f"Removed npm {version}")
    return 0
