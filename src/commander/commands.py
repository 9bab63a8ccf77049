"""Commands, built-in system commands and the token registry."""

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from commander.config import CommanderSettings, CommandSettings, SystemCommandKey
from commander.exceptions import CommandNotFoundError

logger = logging.getLogger(__name__)


@dataclass
class Command:
    """A named action with its matching and confirmation settings."""

    settings: CommandSettings
    action: Callable[[], None]
    description: str = ""

    @property
    def name(self) -> str:
        return self.settings.name


def quit_command(action: Callable[[], None]) -> Command:
    """Quit system command in its default state."""
    return Command(
        settings=CommandSettings(
            name=SystemCommandKey.QUIT.name,
            aliases=list(SystemCommandKey.QUIT.aliases),
            ask_for_confirmation=True,
        ),
        action=action,
        description="Leave the command loop",
    )


def help_command(action: Callable[[], None]) -> Command:
    """Help system command in its default state."""
    return Command(
        settings=CommandSettings(
            name=SystemCommandKey.HELP.name,
            aliases=list(SystemCommandKey.HELP.aliases),
            ask_for_confirmation=False,
        ),
        action=action,
        description="List available commands",
    )


class CommandRegistry:
    """Ordered commands plus the index of every token that selects one.

    Commands that don't match case are indexed by their case-folded tokens and
    typed input is folded the same way before it is compared against them. When
    two commands claim the same token the one registered first wins.
    """

    def __init__(self, commands: Iterable[Command], defaults: CommanderSettings) -> None:
        self._commands = list(commands)
        self._defaults = defaults
        # token -> position in self._commands
        self._exact: dict[str, int] = {}
        self._folded: dict[str, int] = {}
        self._tokens: list[str] = []

        for position, command in enumerate(self._commands):
            match_case = command.settings.resolved_match_case(defaults)
            table = self._exact if match_case else self._folded
            for token in command.settings.tokens(defaults):
                key = token if match_case else token.casefold()
                owner = self._find_position(token)
                if owner is not None and owner != position:
                    logger.warning(
                        "Token '%s' of command '%s' is shadowed by command '%s'",
                        token,
                        command.name,
                        self._commands[owner].name,
                    )
                table.setdefault(key, position)
                if token not in self._tokens:
                    self._tokens.append(token)

        logger.debug(
            "Registry built with %d commands and %d tokens",
            len(self._commands),
            len(self._tokens),
        )

    @classmethod
    def build(
        cls,
        system_commands: Iterable[Command],
        custom_commands: Iterable[Command],
        defaults: CommanderSettings,
    ) -> "CommandRegistry":
        """Combine system commands then custom commands into one registry."""
        return cls([*system_commands, *custom_commands], defaults)

    @property
    def commands(self) -> list[Command]:
        return list(self._commands)

    @property
    def index(self) -> Mapping[str, Command]:
        """Read-only snapshot of the token mapping.

        Case-insensitive tokens appear in their folded form. Every key maps to
        the command :meth:`find` returns for it.
        """
        merged: dict[str, Command] = {}
        for key in [*self._exact, *self._folded]:
            if key not in merged:
                merged[key] = self._commands[self._find_position(key)]  # type: ignore[index]
        return MappingProxyType(merged)

    def _find_position(self, token: str) -> int | None:
        candidates = [
            position
            for position in (self._exact.get(token), self._folded.get(token.casefold()))
            if position is not None
        ]
        return min(candidates) if candidates else None

    def find(self, token: str) -> Command | None:
        """Return the command a token selects, or None."""
        position = self._find_position(token)
        return None if position is None else self._commands[position]

    def get(self, token: str) -> Command:
        """Return the command a token selects."""
        command = self.find(token)
        if command is None:
            raise CommandNotFoundError(token, available=self.list_names())
        return command

    def has(self, token: str) -> bool:
        return self._find_position(token) is not None

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.has(token)

    def __iter__(self) -> Iterator[str]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def tokens(self) -> list[str]:
        """Return every recognized token as configured, in registration order."""
        return list(self._tokens)

    def list_names(self) -> list[str]:
        """Return all command names."""
        return [command.name for command in self._commands]
