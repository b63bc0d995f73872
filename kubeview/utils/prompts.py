"""One-line prompts shown on the controlling terminal after the picker closes."""

from __future__ import annotations

from typing import Optional, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.input.defaults import create_input
from prompt_toolkit.output.defaults import create_output
from prompt_toolkit.validation import Validator


def _session() -> PromptSession:
    return PromptSession(
        input=create_input(always_prefer_tty=True),
        output=create_output(always_prefer_tty=True),
    )


def choose_container(containers: Sequence[str]) -> Optional[str]:
    """Ask which of a pod's containers to use; None when the user backs out."""

    choices = list(containers)
    validator = Validator.from_callable(
        lambda text: text.strip() in choices,
        error_message="unknown container",
        move_cursor_to_end=True,
    )
    try:
        answer = _session().prompt(
            "container: ",
            default=choices[0] if choices else "",
            completer=WordCompleter(choices),
            complete_while_typing=True,
            validator=validator,
        )
    except (EOFError, KeyboardInterrupt):
        return None
    return answer.strip() or None


def ask_command() -> Optional[str]:
    """Read the command line to exec inside a pod."""

    try:
        answer = _session().prompt("command to run: ")
    except (EOFError, KeyboardInterrupt):
        return None
    return answer.strip() or None


__all__ = ["choose_container", "ask_command"]
