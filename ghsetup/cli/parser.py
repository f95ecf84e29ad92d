"""
ghsetup CLI argument parser.

This module implements the command-line interface for ghsetup using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ghsetup.core.runner import Runner, WorkflowCommandHandler

# Get version from package
try:
    from importlib.metadata import version

    __version__ = version("ghsetup")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """ghsetup command-line interface."""

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
            prog="ghsetup",
            description="ghsetup - Install the GitHub CLI on a CI runner",
            epilog='Use "ghsetup COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        # Global options
        parser.add_argument(
            "--version", action="version", version=f"ghsetup {__version__}"
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
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./ghsetup.yaml)",
        )

        # Subcommands
        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_install_command(subparsers)
        self._add_cache_command(subparsers)

        return parser

    def _add_install_command(self, subparsers):
        """Add 'install' subcommand."""
        parser = subparsers.add_parser(
            "install",
            help="Install gh and put it on PATH",
            description=(
                "Resolve a gh version, install it into the tool cache if needed, "
                "and add it to PATH"
            ),
        )
        parser.add_argument(
            "--version-spec",
            metavar="SPEC",
            help="'stable', 'latest' or a version such as v2.40.0 "
            "(default: the step's 'version' input)",
        )
        parser.add_argument(
            "--github-token",
            metavar="TOKEN",
            help="Token for the GitHub API (default: the step's 'github-token' input)",
        )
        parser.add_argument(
            "--tool-cache",
            type=Path,
            metavar="DIR",
            help="Tool cache root (default: $RUNNER_TOOL_CACHE)",
        )

    def _add_cache_command(self, subparsers):
        """Add 'cache' subcommand with sub-subcommands."""
        parser = subparsers.add_parser(
            "cache",
            help="Inspect the tool cache",
            description="Inspect gh installations in the tool cache",
        )
        cache_subparsers = parser.add_subparsers(
            dest="cache_command", help="Cache commands", metavar="COMMAND"
        )
        list_parser = cache_subparsers.add_parser(
            "list", help="List cached gh versions"
        )
        list_parser.add_argument(
            "--tool-cache",
            type=Path,
            metavar="DIR",
            help="Tool cache root (default: $RUNNER_TOOL_CACHE)",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Parse arguments and run the selected command.

        Args:
            args: Arguments to parse (uses sys.argv if None)

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

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags and runner debug mode.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose or Runner().is_debug():
            level = logging.DEBUG
            format_str = "[%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        handler = WorkflowCommandHandler()
        handler.setFormatter(logging.Formatter(format_str))
        logging.basicConfig(
            level=level,
            handlers=[handler],
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
            "install": "ghsetup.cli.commands.install",
            "cache": "ghsetup.cli.commands.cache",
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
