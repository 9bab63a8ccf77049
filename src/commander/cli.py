"""Shared logic for CLI subcommands and config-defined commands."""

import subprocess
from collections.abc import Callable

from commander.commands import Command
from commander.config import COMMANDER_HOME, CustomCommandConfig

DEFAULT_SETTINGS_YAML = """\
commander:
  prompt: "Enter command"
  confirmation_prompt: "Are you sure?"
  use_aliases: true
  match_case: true
  ask_for_confirmation: true
  shell: /bin/sh

# Overrides for the built-in Quit and Help commands, e.g.
# overrides:
#   Quit:
#     name: leave
#     use_aliases: true
#     aliases: [bye]
#     confirmation_prompt: "Really leave?"
overrides: {}
"""

DEFAULT_COMMANDS_YAML = """\
commands: {}
"""


def run_init() -> None:
    """Bootstrap the ~/.commander directory with default config files.

    Creates the directory and writes settings.yaml and commands.yaml
    if they don't already exist. Idempotent: never overwrites existing files.
    """
    home = COMMANDER_HOME.expanduser()
    created_anything = False

    if not home.exists():
        home.mkdir(parents=True)
        print(f"Created {home}")
        created_anything = True

    for filename, content in (
        ("settings.yaml", DEFAULT_SETTINGS_YAML),
        ("commands.yaml", DEFAULT_COMMANDS_YAML),
    ):
        path = home / filename
        if not path.exists():
            path.write_text(content)
            print(f"Created {path}")
            created_anything = True

    if not created_anything:
        print(f"Already initialized: {home}")


def shell_action(command: str, shell: str = "/bin/sh") -> Callable[[], None]:
    """Build an action that runs a shell line and reports a non-zero exit."""

    def _run() -> None:
        result = subprocess.run([shell, "-c", command])
        if result.returncode != 0:
            print(f"\nCommand failed (exit code {result.returncode})")

    return _run


def build_custom_commands(configs: list[CustomCommandConfig], shell: str) -> list[Command]:
    """Turn commands.yaml entries into dispatchable commands."""
    return [
        Command(
            settings=config.settings,
            action=shell_action(config.command, shell=shell),
            description=config.description,
        )
        for config in configs
    ]
