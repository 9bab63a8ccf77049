"""Command settings, global defaults and YAML config loading."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar

import yaml

from commander.exceptions import ConfigError

COMMANDER_HOME = Path("~/.commander")
DEFAULT_PROMPT = "Enter command"
DEFAULT_CONFIRMATION_PROMPT = "Are you sure?"

OVERRIDE_FIELDS = (
    "name",
    "use_aliases",
    "aliases",
    "match_case",
    "ask_for_confirmation",
    "confirmation_prompt",
)


@dataclass
class CommanderSettings:
    """Global defaults consulted when a command leaves a setting unset."""

    use_aliases: bool = True
    match_case: bool = True
    ask_for_confirmation: bool = True
    prompt: str = DEFAULT_PROMPT
    confirmation_prompt: str = DEFAULT_CONFIRMATION_PROMPT
    shell: str = "/bin/sh"


@dataclass
class CommandSettings:
    """Matching and confirmation settings of a single command.

    ``None`` in any of the optional fields means the command defers to the
    matching value of :class:`CommanderSettings`.
    """

    name: str
    aliases: list[str] = field(default_factory=list)
    use_aliases: bool | None = None
    match_case: bool | None = None
    ask_for_confirmation: bool | None = None
    confirmation_prompt: str | None = None

    def resolved_use_aliases(self, defaults: CommanderSettings) -> bool:
        return defaults.use_aliases if self.use_aliases is None else self.use_aliases

    def resolved_match_case(self, defaults: CommanderSettings) -> bool:
        return defaults.match_case if self.match_case is None else self.match_case

    def resolved_ask_for_confirmation(self, defaults: CommanderSettings) -> bool:
        if self.ask_for_confirmation is None:
            return defaults.ask_for_confirmation
        return self.ask_for_confirmation

    def resolved_confirmation_prompt(self, defaults: CommanderSettings) -> str:
        return self.confirmation_prompt or defaults.confirmation_prompt

    def tokens(self, defaults: CommanderSettings) -> list[str]:
        """Return the name followed by the aliases if aliases are in use."""
        tokens = [self.name]
        if self.resolved_use_aliases(defaults):
            tokens.extend(self.aliases)
        return tokens


@dataclass(frozen=True)
class CommandOverride:
    """Partial replacement for a system command's settings. ``None`` = absent."""

    name: str | None = None
    use_aliases: bool | None = None
    aliases: tuple[str, ...] | None = None
    match_case: bool | None = None
    ask_for_confirmation: bool | None = None
    confirmation_prompt: str | None = None


@dataclass(frozen=True)
class SystemCommandKey:
    """Canonical identity of a system command: its default name and aliases."""

    name: str
    aliases: tuple[str, ...] = ()

    QUIT: ClassVar["SystemCommandKey"]
    HELP: ClassVar["SystemCommandKey"]

    def __str__(self) -> str:
        return self.name

    @classmethod
    def known(cls) -> tuple["SystemCommandKey", ...]:
        return (cls.QUIT, cls.HELP)

    @classmethod
    def from_name(cls, name: str) -> "SystemCommandKey":
        """Look up a known key by its canonical name.

        Unknown names produce a key that matches no system command, so the
        override resolver can report it as an unknown target.
        """
        for key in cls.known():
            if key.name == name:
                return key
        return cls(name=name)


SystemCommandKey.QUIT = SystemCommandKey(name="Quit", aliases=("exit", "q"))
SystemCommandKey.HELP = SystemCommandKey(name="Help", aliases=("about", "h"))


@dataclass
class CustomCommandConfig:
    """A custom command defined in commands.yaml."""

    settings: CommandSettings
    command: str
    description: str = ""


def _load_yaml(path: Path) -> dict[str, Any]:
    """Load and parse a YAML file."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a mapping in {path}, got {type(data).__name__}")
    return data


def _optional_bool(data: dict[str, Any], key: str, where: str) -> bool | None:
    value = data.get(key)
    if value is not None and not isinstance(value, bool):
        raise ConfigError(f"{where}: '{key}' must be true or false, got {value!r}")
    return value


def _optional_str(data: dict[str, Any], key: str, where: str) -> str | None:
    value = data.get(key)
    if value is not None and not isinstance(value, str):
        raise ConfigError(f"{where}: '{key}' must be a string, got {value!r}")
    return value


def _optional_aliases(data: dict[str, Any], where: str) -> list[str] | None:
    value = data.get("aliases")
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(a, str) for a in value):
        raise ConfigError(f"{where}: 'aliases' must be a list of strings")
    return value


def _or_default(value: bool | None, default: bool) -> bool:
    return default if value is None else value


def load_settings(path: Path) -> CommanderSettings:
    """Load and validate the global defaults from settings.yaml."""
    data = _load_yaml(path)
    section = data.get("commander", {}) or {}
    if not isinstance(section, dict):
        raise ConfigError(f"'commander' in {path} must be a mapping")

    defaults = CommanderSettings()
    where = f"{path} [commander]"
    prompt = _optional_str(section, "prompt", where)
    confirmation_prompt = _optional_str(section, "confirmation_prompt", where)
    shell = _optional_str(section, "shell", where)

    return CommanderSettings(
        use_aliases=_or_default(_optional_bool(section, "use_aliases", where), defaults.use_aliases),
        match_case=_or_default(_optional_bool(section, "match_case", where), defaults.match_case),
        ask_for_confirmation=_or_default(
            _optional_bool(section, "ask_for_confirmation", where),
            defaults.ask_for_confirmation,
        ),
        # Blank prompts fall back to the defaults
        prompt=prompt.strip() if prompt and prompt.strip() else defaults.prompt,
        confirmation_prompt=(
            confirmation_prompt.strip()
            if confirmation_prompt and confirmation_prompt.strip()
            else defaults.confirmation_prompt
        ),
        shell=shell or defaults.shell,
    )


def load_overrides(path: Path) -> dict[SystemCommandKey, CommandOverride | None]:
    """Load system command overrides from the 'overrides' section of settings.yaml.

    Values are only type-checked here. Semantic validation (unknown targets,
    empty names and prompts) is done by :func:`commander.overrides.apply_overrides`.
    """
    data = _load_yaml(path)
    raw = data.get("overrides", {}) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"'overrides' in {path} must be a mapping")

    overrides: dict[SystemCommandKey, CommandOverride | None] = {}
    for name, entry in raw.items():
        key = SystemCommandKey.from_name(str(name))
        if entry is None:
            overrides[key] = None
            continue
        if not isinstance(entry, dict):
            raise ConfigError(f"Override '{name}' must be a mapping")
        unknown = sorted(set(entry) - set(OVERRIDE_FIELDS))
        if unknown:
            raise ConfigError(f"Override '{name}' has unknown fields: {', '.join(unknown)}")

        where = f"Override '{name}'"
        aliases = _optional_aliases(entry, where)
        overrides[key] = CommandOverride(
            name=_optional_str(entry, "name", where),
            use_aliases=_optional_bool(entry, "use_aliases", where),
            aliases=tuple(aliases) if aliases is not None else None,
            match_case=_optional_bool(entry, "match_case", where),
            ask_for_confirmation=_optional_bool(entry, "ask_for_confirmation", where),
            confirmation_prompt=_optional_str(entry, "confirmation_prompt", where),
        )

    return overrides


def load_commands_config(path: Path) -> list[CustomCommandConfig]:
    """Load and validate custom commands from commands.yaml."""
    data = _load_yaml(path)
    raw_commands = data.get("commands", {}) or {}
    if not isinstance(raw_commands, dict):
        raise ConfigError(f"'commands' in {path} must be a mapping")

    commands: list[CustomCommandConfig] = []
    for name, cmd_data in raw_commands.items():
        if not isinstance(cmd_data, dict):
            raise ConfigError(f"Command '{name}' must be a mapping")
        formatted_name = str(name).strip()
        if not formatted_name:
            raise ConfigError("Command names can't be empty or whitespace")
        command = cmd_data.get("command")
        if not isinstance(command, str) or not command.strip():
            raise ConfigError(f"Command '{name}' needs a non-empty 'command'")

        where = f"Command '{name}'"
        confirmation_prompt = _optional_str(cmd_data, "confirmation_prompt", where)
        if confirmation_prompt is not None and not confirmation_prompt.strip():
            raise ConfigError(f"{where}: 'confirmation_prompt' can't be empty or whitespace")

        settings = CommandSettings(
            name=formatted_name,
            aliases=list(_optional_aliases(cmd_data, where) or []),
            use_aliases=_optional_bool(cmd_data, "use_aliases", where),
            match_case=_optional_bool(cmd_data, "match_case", where),
            ask_for_confirmation=_optional_bool(cmd_data, "ask_for_confirmation", where),
            confirmation_prompt=confirmation_prompt.strip() if confirmation_prompt else None,
        )
        commands.append(
            CustomCommandConfig(
                settings=settings,
                command=command,
                description=_optional_str(cmd_data, "description", where) or "",
            )
        )

    return commands
