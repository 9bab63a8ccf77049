"""Entry point for python -m commander."""

import argparse
import logging
import sys
from pathlib import Path

from commander.app import Commander
from commander.cli import build_custom_commands, run_init
from commander.commands import Command
from commander.config import (
    COMMANDER_HOME,
    CommanderSettings,
    CommandOverride,
    SystemCommandKey,
    load_commands_config,
    load_overrides,
    load_settings,
)
from commander.exceptions import ConfigError
from commander.prompts import ConsolePrompter


def _build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(prog="commander", description="Interactive command dispatcher")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument(
        "--config",
        help="Directory holding settings.yaml and commands.yaml "
        "(default: ~/.commander, then ./config)",
    )
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("init", help="Initialize ~/.commander config directory")
    return parser


def _find_config_dir(explicit: str | None = None) -> Path | None:
    """Return the first config directory that holds a settings.yaml."""
    if explicit:
        return Path(explicit).expanduser()
    for candidate in (COMMANDER_HOME.expanduser(), Path("./config")):
        if (candidate / "settings.yaml").exists():
            return candidate
    return None


def _load_configuration(
    config_dir: Path | None,
) -> tuple[CommanderSettings, dict[SystemCommandKey, CommandOverride | None], list[Command]]:
    """Load settings, overrides and custom commands, or fall back to defaults."""
    if config_dir is None:
        return CommanderSettings(), {}, []

    settings_path = config_dir / "settings.yaml"
    settings = load_settings(settings_path)
    overrides = load_overrides(settings_path)

    commands_path = config_dir / "commands.yaml"
    custom: list[Command] = []
    if commands_path.exists():
        custom = build_custom_commands(load_commands_config(commands_path), shell=settings.shell)
    return settings, overrides, custom


def main() -> int:
    """Run the CLI or the command loop."""
    parser = _build_parser()
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "init":
        run_init()
        return 0

    try:
        settings, overrides, custom = _load_configuration(_find_config_dir(args.config))
        commander = Commander(
            settings=settings,
            prompter=ConsolePrompter(),
            custom_commands=custom,
            overrides=overrides,
        )
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    with commander:
        try:
            commander.run()
        except (KeyboardInterrupt, EOFError):
            print("\nBye.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
