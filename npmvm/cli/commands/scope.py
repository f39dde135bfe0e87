"""
Global and local command implementation.

Without a spec, shows the recorded version for the scope. With a spec,
installs the version it resolves to and records the specifier.
"""

import logging

from npmvm.cli.utils import create_manager

logger = logging.getLogger(__name__)


def _show(manager, scope: str) -> int:
    if scope == "global":
        try:
            spec = manager.get_global()
        except FileNotFoundError:
            logger.error("No global npm version set")
            return 1
        print(spec)
        return 0

    local = manager.get_local()
    if local is None:
        logger.error("No local npm version set")
        return 1
    print(f"{local.spec} ({local.path})")
    return 0


def run(args) -> int:
    """
    Run the global or local command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    manager = create_manager(args)
    scope = args.command

    if not args.spec:
        return _show(manager, scope)

    result = manager.use(args.spec, scope=scope)
    print(f"{scope.capitalize()} npm version set to {args.spec} (npm {result.version})")
    return 0
