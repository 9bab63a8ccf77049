"""Tests for system command overrides."""

import copy

import pytest

from commander.commands import Command, help_command, quit_command
from commander.config import CommandOverride, CommandSettings, SystemCommandKey
from commander.exceptions import ConfigError
from commander.overrides import apply_overrides, merge_override


def _noop() -> None:
    pass


@pytest.fixture
def system_commands() -> list[Command]:
    return [quit_command(_noop), help_command(_noop)]


def _settings(commands: list[Command]) -> list[CommandSettings]:
    return [copy.deepcopy(command.settings) for command in commands]


class TestApplyOverrides:
    def test_only_overridden_fields_change(self, system_commands: list[Command]) -> None:
        apply_overrides(system_commands, {SystemCommandKey.QUIT: CommandOverride(name="leave")})
        settings = system_commands[0].settings
        assert settings == CommandSettings(
            name="leave", aliases=["exit", "q"], ask_for_confirmation=True
        )

    def test_all_fields(self, system_commands: list[Command]) -> None:
        apply_overrides(
            system_commands,
            {
                SystemCommandKey.QUIT: CommandOverride(
                    name="  leave ",
                    use_aliases=True,
                    aliases=("bye",),
                    match_case=False,
                    ask_for_confirmation=False,
                    confirmation_prompt=" Really? ",
                )
            },
        )
        assert system_commands[0].settings == CommandSettings(
            name="leave",
            aliases=["bye"],
            use_aliases=True,
            match_case=False,
            ask_for_confirmation=False,
            confirmation_prompt="Really?",
        )

    def test_other_commands_untouched(self, system_commands: list[Command]) -> None:
        before = copy.deepcopy(system_commands[1].settings)
        apply_overrides(system_commands, {SystemCommandKey.QUIT: CommandOverride(name="leave")})
        assert system_commands[1].settings == before

    def test_use_aliases_false_clears_aliases(self, system_commands: list[Command]) -> None:
        apply_overrides(
            system_commands,
            {SystemCommandKey.QUIT: CommandOverride(use_aliases=False, aliases=("bye", "x"))},
        )
        assert system_commands[0].settings.use_aliases is False
        assert system_commands[0].settings.aliases == []

    def test_use_aliases_true_without_aliases_keeps_list(
        self, system_commands: list[Command]
    ) -> None:
        apply_overrides(system_commands, {SystemCommandKey.HELP: CommandOverride(use_aliases=True)})
        assert system_commands[1].settings.aliases == ["about", "h"]

    def test_use_aliases_true_with_empty_aliases_keeps_list(
        self, system_commands: list[Command]
    ) -> None:
        apply_overrides(
            system_commands,
            {SystemCommandKey.HELP: CommandOverride(use_aliases=True, aliases=())},
        )
        assert system_commands[1].settings.aliases == ["about", "h"]

    def test_aliases_without_use_aliases_are_ignored(
        self, system_commands: list[Command]
    ) -> None:
        apply_overrides(system_commands, {SystemCommandKey.HELP: CommandOverride(aliases=("x",))})
        assert system_commands[1].settings.aliases == ["about", "h"]
        assert system_commands[1].settings.use_aliases is None

    def test_empty_override_changes_nothing(self, system_commands: list[Command]) -> None:
        before = _settings(system_commands)
        apply_overrides(system_commands, {SystemCommandKey.QUIT: CommandOverride()})
        assert _settings(system_commands) == before

    def test_unknown_target(self, system_commands: list[Command]) -> None:
        with pytest.raises(ConfigError, match="not registered"):
            apply_overrides(
                system_commands, {SystemCommandKey(name="Reboot"): CommandOverride(name="x")}
            )

    def test_null_override(self, system_commands: list[Command]) -> None:
        with pytest.raises(ConfigError, match="null"):
            apply_overrides(system_commands, {SystemCommandKey.QUIT: None})

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_empty_name(self, system_commands: list[Command], name: str) -> None:
        with pytest.raises(ConfigError, match="name can't be empty"):
            apply_overrides(system_commands, {SystemCommandKey.QUIT: CommandOverride(name=name)})

    def test_empty_confirmation_prompt(self, system_commands: list[Command]) -> None:
        with pytest.raises(ConfigError, match="confirmation prompt"):
            apply_overrides(
                system_commands,
                {SystemCommandKey.QUIT: CommandOverride(confirmation_prompt="  ")},
            )

    def test_error_names_the_key(self, system_commands: list[Command]) -> None:
        with pytest.raises(ConfigError, match='"Help"'):
            apply_overrides(system_commands, {SystemCommandKey.HELP: CommandOverride(name=" ")})

    def test_failure_mutates_nothing(self, system_commands: list[Command]) -> None:
        before = _settings(system_commands)
        with pytest.raises(ConfigError):
            apply_overrides(
                system_commands,
                {
                    SystemCommandKey.QUIT: CommandOverride(name="leave", use_aliases=False),
                    SystemCommandKey(name="Reboot"): CommandOverride(name="boot"),
                },
            )
        assert _settings(system_commands) == before

    def test_same_command_overridden_twice(self, system_commands: list[Command]) -> None:
        before = _settings(system_commands)
        with pytest.raises(ConfigError, match="more than once"):
            apply_overrides(
                system_commands,
                {
                    SystemCommandKey.QUIT: CommandOverride(name="leave"),
                    SystemCommandKey(name="Quit"): CommandOverride(match_case=False),
                },
            )
        assert _settings(system_commands) == before

    def test_no_overrides(self, system_commands: list[Command]) -> None:
        before = _settings(system_commands)
        apply_overrides(system_commands, {})
        assert _settings(system_commands) == before


class TestMergeOverride:
    def test_returns_copy(self) -> None:
        base = CommandSettings(name="Quit", aliases=["exit"])
        merged = merge_override(SystemCommandKey.QUIT, base, CommandOverride(use_aliases=True))
        merged.aliases.append("bye")
        assert base.aliases == ["exit"]
        assert base.use_aliases is None
