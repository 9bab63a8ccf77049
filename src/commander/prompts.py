"""Blocking prompt primitives the dispatch loop asks its questions through."""

from collections.abc import Collection
from typing import Protocol

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import InMemoryHistory

YES_ANSWERS = ("y", "yes")
NO_ANSWERS = ("n", "no")


class Prompter(Protocol):
    """Asks questions until a valid answer is given."""

    def ask(self, prompt: str, valid_answers: Collection[str]) -> str:
        """Block until the answer is in ``valid_answers`` and return it verbatim."""
        ...

    def ask_yes_no(self, prompt: str) -> bool:
        """Block until a yes/no answer is given. Return True for yes."""
        ...


def parse_yes_no(text: str) -> bool | None:
    """Interpret a yes/no answer. None if the answer is neither."""
    answer = text.strip().lower()
    if answer in YES_ANSWERS:
        return True
    if answer in NO_ANSWERS:
        return False
    return None


def format_prompt(prompt: str, suffix: str = "") -> str:
    return f"{prompt.rstrip()}{suffix}: "


class ConsolePrompter:
    """Prompter backed by a prompt_toolkit session.

    History lives in memory only and is dropped with the session.
    """

    def __init__(self, session: PromptSession[str] | None = None) -> None:
        self._session: PromptSession[str] = session or PromptSession(history=InMemoryHistory())

    def ask(self, prompt: str, valid_answers: Collection[str]) -> str:
        completer = WordCompleter(sorted(set(valid_answers)), ignore_case=True)
        while True:
            text = self._session.prompt(format_prompt(prompt), completer=completer).strip()
            if text in valid_answers:
                return text
            if text:
                print(f"Unknown command: {text}")

    def ask_yes_no(self, prompt: str) -> bool:
        while True:
            text = self._session.prompt(format_prompt(prompt, " [y/n]"))
            answer = parse_yes_no(text)
            if answer is not None:
                return answer
            print("Please answer 'y' or 'n'.")
