"""Command-line interface for apm."""

import argparse
import importlib
import logging
import pkgutil
import sys
from pathlib import Path

from app_plugin_manager.commands.version import get_apm_version


def _discover_commands():
    """Discover all command modules and return a dict mapping command name to module."""
    commands = {}
    commands_module = Path(__file__).parent / "commands"

    for _, module_name, _ in pkgutil.iter_modules([str(commands_module)]):
        module = importlib.import_module(f"app_plugin_manager.commands.{module_name}")
        if hasattr(module, "register"):
            commands[module_name] = module

    return commands


def _configure_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s" if not verbose else "%(levelname)s %(name)s: %(message)s",
    )


def main(argv=None):
    """Main entry point for CLI."""
    version = get_apm_version()
    parser = argparse.ArgumentParser(
        prog="apm",
        description=f"App Plugin Manager (v{version})",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug output")
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    # Discover and register all commands
    command_handlers = {}
    for module_name, module in _discover_commands().items():
        command_handlers[module_name] = module.register(subparsers)

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(0)

    _configure_logging(args.verbose)

    if args.command in command_handlers:
        command_handlers[args.command](args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
