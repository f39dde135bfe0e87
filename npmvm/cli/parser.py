"""
npmvm CLI argument parser.

This module implements the command-line interface for npmvm using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from npmvm.core.exceptions import NpmvmError

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("npmvm")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """npmvm command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="npmvm",
            description="npmvm - npm version manager",
            epilog='Use "npmvm COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"npmvm {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--home",
            type=Path,
            metavar="PATH",
            help="Configuration directory (default: $NPMVM_HOME or ~/.npmvm)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_remove_command(subparsers)
        self._add_list_command(subparsers)
        self._add_available_command(subparsers)
        self._add_resolve_command(subparsers)
        self._add_global_command(subparsers)
        self._add_local_command(subparsers)
        self._add_current_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install an npm version",
            description="Resolve a version spec against published releases and install it",
        )
        parser.add_argument(
            "spec",
            nargs="?",
            default="latest",
            metavar="SPEC",
            help="Version, range, 'latest' or 'match' [default: latest]",
        )

    def _add_remove_command(self, subparsers):
        """Add 'remove' subcommand."""
        parser = subparsers.add_parser(
            "remove",
            aliases=["rm"],
            help="Remove an installed npm version",
            description="Remove an installed npm version (exact version only)",
        )
        parser.add_argument("spec", metavar="VERSION", help="Version to remove")

    def _add_list_command(self, subparsers):
        """Add 'list' subcommand."""
        subparsers.add_parser(
            "list",
            aliases=["ls"],
            help="List installed npm versions",
            description="List installed npm versions in ascending order",
        )

    def _add_available_command(self, subparsers):
        """Add 'available' subcommand."""
        subparsers.add_parser(
            "available",
            aliases=["ls-remote"],
            help="List published npm versions",
            description="List npm versions published as GitHub releases",
        )

    def _add_resolve_command(self, subparsers):
        """Add 'resolve' subcommand."""
        parser = subparsers.add_parser(
            "resolve",
            help="Resolve a version spec",
            description="Resolve a version spec to a concrete npm version",
        )
        parser.add_argument(
            "spec",
            nargs="?",
            default="",
            metavar="SPEC",
            help="Version, range, 'latest' or 'match' [default: latest]",
        )
        parser.add_argument(
            "--local",
            action="store_true",
            help="Resolve against installed versions instead of published ones",
        )

    def _add_global_command(self, subparsers):
        """Add 'global' subcommand."""
        parser = subparsers.add_parser(
            "global",
            help="Show or set the global npm version",
            description="Show the global npm version, or install SPEC and make it global",
        )
        parser.add_argument("spec", nargs="?", metavar="SPEC", help="Version spec to set")

    def _add_local_command(self, subparsers):
        """Add 'local' subcommand."""
        parser = subparsers.add_parser(
            "local",
            help="Show or set the npm version for this directory",
            description=(
                "Show the nearest .npm-version, or install SPEC and write it "
                "to .npm-version in the current directory"
            ),
        )
        parser.add_argument("spec", nargs="?", metavar="SPEC", help="Version spec to set")

    def _add_current_command(self, subparsers):
        """Add 'current' subcommand."""
        subparsers.add_parser(
            "current",
            help="Show the npm version in effect",
            description="Show the installed npm version selected by env, local or global records",
        )

    def parse_args(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse command-line arguments.

        Args:
            args: Argument list (default: sys.argv[1:])

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Argument list (default: sys.argv[1:])

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130  # Standard exit code for SIGINT
        except (NpmvmError, OSError) as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(
            level=level,
            format=format_str,
            force=True,  # Reconfigure if already configured
        )

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "install": "npmvm.cli.commands.install",
            "remove": "npmvm.cli.commands.remove",
            "rm": "npmvm.cli.commands.remove",
            "list": "npmvm.cli.commands.listing",
            "ls": "npmvm.cli.commands.listing",
            "available": "npmvm.cli.commands.available",
            "ls-remote": "npmvm.cli.commands.available",
            "resolve": "npmvm.cli.commands.resolve",
            "global": "npmvm.cli.commands.scope",
            "local": "npmvm.cli.commands.scope",
            "current": "npmvm.cli.commands.current",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()
