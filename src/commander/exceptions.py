"""Custom exception hierarchy for the command dispatcher."""


class CommanderError(Exception):
    """Base exception for all dispatcher errors."""


class ConfigError(CommanderError):
    """Raised when configuration loading, validation or overriding fails."""


class CommandNotFoundError(CommanderError):
    """Raised when a token does not resolve to any registered command."""

    def __init__(self, token: str, available: list[str] | None = None) -> None:
        self.token = token
        self.available = available or []
        suggestions = ""
        if self.available:
            suggestions = f" Available: {', '.join(self.available)}"
        super().__init__(f"Command not found: {token}.{suggestions}")
