"""Terminal used for every operator prompt and progress line.

One :class:`Terminal` is opened per run and handed to the controller.  It
wraps two rich consoles (stdout for progress, stderr for fatal errors) and an
optional input stream; tests pass :class:`io.StringIO` objects for all three.

Prompt formats::

    Number of attempts (default: 6):
    Modify workflow "orders"? (y/n, default: yes):
"""
from __future__ import annotations

import logging
from typing import IO, Optional

from rich.console import Console
from rich.markup import escape

logger = logging.getLogger(__name__)

AFFIRMATIVE = ("y", "yes")


class Terminal:
    """Line-oriented prompt/output channel with an explicit close."""

    def __init__(
        self,
        stdin: Optional[IO[str]] = None,
        stdout: Optional[IO[str]] = None,
        stderr: Optional[IO[str]] = None,
    ):
        self._stdin = stdin
        self.out = Console(file=stdout, highlight=False, emoji=False, soft_wrap=True)
        self.err = Console(
            file=stderr,
            stderr=stderr is None,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )
        self.closed = False

    def __enter__(self) -> "Terminal":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _readline(self, prompt: str) -> str:
        if self.closed:
            raise EOFError("terminal is closed")
        answer = self.out.input(escape(prompt), stream=self._stdin)
        # Console.input returns "" only at end of a supplied stream.
        if self._stdin is not None and answer == "":
            raise EOFError("end of input")
        return answer.strip()

    def ask(self, question: str, default: str = "") -> str:
        """Ask a free-text question; an empty answer returns *default*."""
        suffix = f" (default: {default})" if default else ""
        return self._readline(f"{question}{suffix}: ") or default

    def ask_yes_no(self, question: str, default: bool = True) -> bool:
        """Ask a y/n question. Only ``y``/``yes`` (any case) count as yes."""
        shown = "yes" if default else "no"
        answer = self._readline(f"{question} (y/n, default: {shown}): ").lower()
        if not answer:
            return default
        return answer in AFFIRMATIVE

    def say(self, message: str = "", style: Optional[str] = None) -> None:
        self.out.print(escape(message), style=style)

    def error(self, message: str) -> None:
        self.err.print(escape(message), style="red")

    def close(self) -> None:
        """Release the terminal. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        logger.debug("terminal closed")
