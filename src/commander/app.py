"""The command dispatch loop."""

import enum
import logging
from collections.abc import Callable, Iterable, Mapping
from types import TracebackType

from commander.commands import Command, CommandRegistry, help_command, quit_command
from commander.config import CommanderSettings, CommandOverride, SystemCommandKey
from commander.exceptions import ConfigError
from commander.overrides import apply_overrides
from commander.prompts import Prompter

logger = logging.getLogger(__name__)


class LoopState(enum.Enum):
    """Where the dispatch loop currently is."""

    AWAITING_INPUT = "awaiting_input"
    RESOLVING = "resolving"
    CONFIRMING = "confirming"
    EXECUTING = "executing"
    STOPPED = "stopped"


def _check_name(command: Command) -> None:
    name = command.settings.name
    if not name or not name.strip():
        raise ConfigError("Custom command names can't be empty or whitespace.")
    if name != name.strip():
        raise ConfigError(f"Custom command name '{name}' has leading or trailing whitespace.")


class Commander:
    """Prompts for commands, confirms them and runs their actions.

    System commands (Quit and Help) are created here and the host's overrides
    are applied to them right away, so a bad override fails construction
    before any prompt is shown.
    """

    def __init__(
        self,
        settings: CommanderSettings,
        prompter: Prompter,
        custom_commands: Iterable[Command] = (),
        overrides: Mapping[SystemCommandKey, CommandOverride | None] | None = None,
        help_action: Callable[[], None] | None = None,
    ) -> None:
        self._settings = settings
        self._prompter = prompter
        self._custom_commands = list(custom_commands)
        for command in self._custom_commands:
            _check_name(command)
        self._system_commands = [
            quit_command(self.stop),
            help_command(help_action or self.print_help),
        ]
        self._overrides = dict(overrides or {})
        apply_overrides(self._system_commands, self._overrides)
        self._registry: CommandRegistry | None = None
        self._state = LoopState.AWAITING_INPUT

    @property
    def settings(self) -> CommanderSettings:
        return self._settings

    @property
    def state(self) -> LoopState:
        return self._state

    @property
    def running(self) -> bool:
        return self._state is not LoopState.STOPPED

    @property
    def system_commands(self) -> list[Command]:
        return list(self._system_commands)

    @property
    def custom_commands(self) -> list[Command]:
        return list(self._custom_commands)

    @property
    def registry(self) -> CommandRegistry:
        """The registry of the current run, or a fresh one before the first run."""
        if self._registry is not None:
            return self._registry
        return self.build_registry()

    def build_registry(self) -> CommandRegistry:
        return CommandRegistry.build(self._system_commands, self._custom_commands, self._settings)

    def stop(self) -> None:
        """Ask the loop to stop after the current command."""
        logger.debug("Stop requested")
        self._state = LoopState.STOPPED

    def describe_commands(self) -> list[str]:
        """Format one line per command with its usable aliases."""
        lines = []
        for command in self.registry.commands:
            aliases = command.settings.tokens(self._settings)[1:]
            alias_text = f" ({', '.join(aliases)})" if aliases else ""
            description = f"  -- {command.description}" if command.description else ""
            lines.append(f"  {command.name}{alias_text}{description}")
        return lines

    def print_help(self) -> None:
        print("Available commands:")
        for line in self.describe_commands():
            print(line)

    def dispatch(self, token: str) -> bool:
        """Resolve, confirm and run a single token. Return True if an action ran."""
        try:
            return self._dispatch(token)
        finally:
            if self._state is not LoopState.STOPPED:
                self._state = LoopState.AWAITING_INPUT

    def _dispatch(self, token: str) -> bool:
        self._state = LoopState.RESOLVING
        command = self.registry.find(token)
        if command is None:
            logger.debug("No command for token '%s'", token)
            return False

        settings = command.settings
        if settings.resolved_ask_for_confirmation(self._settings):
            self._state = LoopState.CONFIRMING
            prompt = settings.resolved_confirmation_prompt(self._settings)
            if not self._prompter.ask_yes_no(prompt):
                logger.debug("Command '%s' was not confirmed", command.name)
                return False

        self._state = LoopState.EXECUTING
        logger.debug("Running command '%s'", command.name)
        command.action()
        return True

    def run(self) -> "Commander":
        """Run the loop until a command stops it. Action errors propagate."""
        self._registry = self.build_registry()
        self._state = LoopState.AWAITING_INPUT

        while self.running:
            token = self._prompter.ask(self._settings.prompt, self._registry)
            self.dispatch(token)

        return self

    def dispose(self) -> None:
        """Release resources held for the host. Nothing to release by default."""

    def __enter__(self) -> "Commander":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()
