"""Shared test fixtures."""

from collections.abc import Collection
from pathlib import Path

import pytest

from commander.prompts import parse_yes_no


class ScriptedPrompter:
    """Prompter that replays canned answers instead of reading a terminal.

    Like the console prompter it keeps asking until it gets a valid answer,
    so invalid answers in the script are consumed and skipped.
    """

    def __init__(self, answers: list[str]) -> None:
        self._answers = list(answers)
        self.questions: list[str] = []
        self.confirmations: list[str] = []

    @property
    def remaining(self) -> list[str]:
        return list(self._answers)

    def _next(self) -> str:
        if not self._answers:
            raise AssertionError("Prompter ran out of scripted answers")
        return self._answers.pop(0)

    def ask(self, prompt: str, valid_answers: Collection[str]) -> str:
        self.questions.append(prompt)
        while True:
            answer = self._next()
            if answer in valid_answers:
                return answer

    def ask_yes_no(self, prompt: str) -> bool:
        self.confirmations.append(prompt)
        while True:
            answer = parse_yes_no(self._next())
            if answer is not None:
                return answer


@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def tmp_config(tmp_path: Path) -> Path:
    """Create a temporary config directory."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    return config_dir


@pytest.fixture
def scripted() -> type[ScriptedPrompter]:
    """Factory for scripted prompters."""
    return ScriptedPrompter
