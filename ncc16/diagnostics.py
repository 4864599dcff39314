"""Compiler diagnostics: errors, warnings and notes with source snippets."""

from __future__ import annotations

import sys
from typing import TextIO

_RED = "\033[1;31m"
_YELLOW = "\033[1;33m"
_BLUE = "\033[1;34m"
_RESET = "\033[0m"

DEFAULT_MAX_ERRORS = 20


class TooManyErrors(Exception):
    """Raised once the error limit has been reached."""

    def __init__(self, count: int) -> None:
        super().__init__(f"too many errors ({count}), stopping compilation")
        self.count = count


class Diagnostics:
    """Reports problems found in one source buffer to a text stream."""

    def __init__(
        self,
        filename: str | None = None,
        source: str | None = None,
        quiet: bool = False,
        stream: TextIO | None = None,
        max_errors: int = DEFAULT_MAX_ERRORS,
    ) -> None:
        self.filename = filename
        self.source = source
        self.quiet = quiet
        self.max_errors = max_errors
        self._stream = stream
        self._errors = 0
        self._warnings = 0

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def short_filename(self) -> str:
        """The source filename without any directory part."""
        if not self.filename:
            return "unknown"
        cut = max(self.filename.rfind("/"), self.filename.rfind("\\"))
        return self.filename[cut + 1:]

    def _line_start(self, position: int) -> int:
        text = self.source or ""
        return text.rfind("\n", 0, max(position, 0)) + 1

    def location(self, position: int) -> tuple[int, int]:
        """Return the 1-based (line, column) of a position in the source."""
        text = self.source or ""
        line = text.count("\n", 0, max(position, 0)) + 1
        column = position - self._line_start(position) + 1
        return line, column

    def snippet(self, position: int) -> str:
        """Two lines showing the source line and a marker under the position."""
        text = self.source or ""
        start = self._line_start(position)
        end = text.find("\n", max(position, 0))
        if end < 0:
            end = len(text)
        line_number, _ = self.location(position)
        column = position - start
        return (
            f" {line_number:4d} | {text[start:end]}\n"
            f"      | {' ' * column}^~~~\n"
        )

    def _report(self, label: str, colour: str, position: int, message: str,
                locate: bool, show_snippet: bool) -> None:
        parts = [f"{colour}{label}:{_RESET} "]
        if locate:
            line, column = self.location(position)
            parts.append(f"{self.filename}:{line}:{column}: ")
        parts.append(f"{message}\n")
        if show_snippet:
            parts.append(self.snippet(position))
        self.stream.write("".join(parts))

    def error(self, position: int, message: str) -> None:
        """Report an error; raise TooManyErrors when the limit is reached."""
        if self._errors >= self.max_errors:
            return
        self._errors += 1
        self._report(
            "error", _RED, position, message,
            locate=self.filename is not None,
            show_snippet=self.source is not None and position >= 0,
        )
        if self._errors >= self.max_errors:
            self.stream.write("Too many errors, stopping compilation.\n")
            raise TooManyErrors(self._errors)

    def warning(self, position: int, message: str) -> None:
        """Report a warning."""
        self._warnings += 1
        self._report(
            "warning", _YELLOW, position, message,
            locate=self.filename is not None,
            show_snippet=self.source is not None and position >= 0,
        )

    def note(self, position: int, message: str) -> None:
        """Report additional information; silent in quiet mode."""
        if self.quiet:
            return
        self._report(
            "note", _BLUE, position, message,
            locate=self.filename is not None and position >= 0,
            show_snippet=self.source is not None and position >= 0,
        )

    @property
    def error_count(self) -> int:
        return self._errors

    @property
    def warning_count(self) -> int:
        return self._warnings