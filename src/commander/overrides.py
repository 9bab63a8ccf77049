"""Validation and merging of system command overrides."""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace

from commander.commands import Command
from commander.config import CommandOverride, CommandSettings, SystemCommandKey
from commander.exceptions import ConfigError

logger = logging.getLogger(__name__)


def _rejected(key: SystemCommandKey, reason: str) -> ConfigError:
    return ConfigError(f'System command with key "{key}" can\'t be overridden. {reason}')


def merge_override(
    key: SystemCommandKey, base: CommandSettings, override: CommandOverride | None
) -> CommandSettings:
    """Return a copy of ``base`` with the fields present in ``override`` applied."""
    if override is None:
        raise _rejected(key, "The command override is null.")

    merged = replace(base, aliases=list(base.aliases))

    if override.name is not None:
        name = override.name.strip()
        if not name:
            raise _rejected(key, "The requested name can't be empty or whitespace.")
        merged.name = name

    if override.use_aliases is not None:
        merged.use_aliases = override.use_aliases
        if override.use_aliases is False:
            merged.aliases = []
        elif override.aliases:
            merged.aliases = list(override.aliases)
    elif override.aliases:
        logger.debug("Ignoring aliases for '%s': use_aliases is not set", key)

    if override.match_case is not None:
        merged.match_case = override.match_case

    if override.ask_for_confirmation is not None:
        merged.ask_for_confirmation = override.ask_for_confirmation

    if override.confirmation_prompt is not None:
        prompt = override.confirmation_prompt.strip()
        if not prompt:
            raise _rejected(
                key, "The requested confirmation prompt can't be empty or whitespace."
            )
        merged.confirmation_prompt = prompt

    return merged


def apply_overrides(
    system_commands: Sequence[Command],
    overrides: Mapping[SystemCommandKey, CommandOverride | None],
) -> None:
    """Apply overrides to system commands in place.

    Every override is validated before any command changes, so a
    :class:`ConfigError` leaves all system commands as they were.
    """
    resolved: list[tuple[Command, CommandSettings]] = []
    for key, override in overrides.items():
        target = next(
            (command for command in system_commands if command.settings.name == key.name),
            None,
        )
        if target is None:
            raise _rejected(key, "The command with this key is not registered.")
        if any(command is target for command, _ in resolved):
            raise _rejected(key, "The command is overridden more than once.")
        resolved.append((target, merge_override(key, target.settings, override)))

    for command, settings in resolved:
        logger.debug("Overriding system command '%s' as '%s'", command.name, settings.name)
        command.settings = settings
