"""Line-oriented C preprocessor: object-like macros, conditionals and includes."""

from __future__ import annotations

import os
import string
from dataclasses import dataclass
from typing import Callable

from ncc16.diagnostics import Diagnostics
from ncc16.expression import ExpressionError, evaluate
from ncc16.macros import MacroTable

_SPACE = frozenset(" \t\n\r\v\f")
_NAME_START = frozenset(string.ascii_letters + "_")
_NAME_CHARS = frozenset(string.ascii_letters + string.digits + "_")
_MAX_DIRECTIVE = 4095

_BUILTIN_MACROS = (
    ("__NCC__", "65536"),
    ("__NCC_MAJOR__", "1"),
    ("__NCC_MINOR__", "10"),
    ("__x86_16__", "1"),
)


class PreprocessorError(Exception):
    """Raised when a source file cannot be read."""


def _skip_space(text: str, pos: int) -> int:
    while pos < len(text) and text[pos] in _SPACE:
        pos += 1
    return pos


def _read_name(text: str, pos: int) -> tuple[str, int]:
    """Skip blanks, then read an identifier; return it and the end position."""
    start = pos = _skip_space(text, pos)
    while pos < len(text) and text[pos] in _NAME_CHARS:
        pos += 1
    return text[start:pos], pos


def _read_value(text: str, pos: int) -> str:
    """Skip blanks, then take the rest of the line without trailing blanks."""
    pos = _skip_space(text, pos)
    end = pos
    while end < len(text) and text[end] not in "\n\r":
        end += 1
    return text[pos:end].rstrip(" \t\n\r\v\f")


@dataclass
class _Conditionals:
    """Nesting state of #if-style blocks within one source buffer."""

    depth: int = 0
    skip: int = 0

    @property
    def skipping(self) -> bool:
        return self.skip > 0

    def open(self, test: Callable[[], bool]) -> None:
        self.depth += 1
        if self.skip > 0:
            self.skip += 1
            return
        if not test():
            self.skip = self.depth

    def flip(self) -> None:
        if self.skip == self.depth:
            self.skip = 0
        elif self.skip == 0 and self.depth > 0:
            self.skip = self.depth

    def close(self) -> None:
        if self.skip == self.depth:
            self.skip = 0
        elif self.skip > self.depth:
            self.skip -= 1
        if self.depth > 0:
            self.depth -= 1


class Preprocessor:
    """Expands object-like macros and handles conditional directives.

    An ``#include`` is preprocessed for the macros it defines; its text is
    not inserted into the including file. Every file is read at most once
    (compared case-insensitively); later requests for it yield "".
    """

    def __init__(self, diagnostics: Diagnostics | None = None) -> None:
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self.macros = MacroTable()
        self.include_paths: list[str] = []
        self._included: set[str] = set()
        self.reset()

    def reset(self) -> None:
        """Forget macros, include paths and included files; restore built-ins."""
        self.macros.clear()
        self.include_paths.clear()
        self._included.clear()
        for name, value in _BUILTIN_MACROS:
            self.macros.define(name, value)

    def define(self, name: str, value: str) -> None:
        self.macros.define(name, value)

    def add_include_path(self, path: str | os.PathLike[str]) -> None:
        self.include_paths.append(os.fspath(path))

    def _already_included(self, filename: str) -> bool:
        """Record a file; report whether it had been recorded before."""
        key = filename.lower()
        if key in self._included:
            return True
        self._included.add(key)
        return False

    def _find_include(self, filename: str, system: bool) -> str | None:
        if not system and os.path.isfile(filename):
            return filename
        for directory in self.include_paths:
            candidate = f"{directory}/{filename}"
            if os.path.isfile(candidate):
                return candidate
        return None

    def preprocess_file(self, filename: str | os.PathLike[str]) -> str:
        """Read and preprocess a file, defining ``__FILE__`` for it."""
        name = os.fspath(filename)
        if self._already_included(name):
            return ""
        try:
            with open(name, encoding="utf-8", errors="surrogateescape",
                      newline="") as handle:
                content = handle.read()
        except OSError as exc:
            raise PreprocessorError(f"Cannot read file '{name}'") from exc
        self.macros.define("__FILE__", f'"{name}"')
        return self.preprocess_source(content)

    def preprocess_source(self, source: str) -> str:
        """Apply directives and macro replacement to a source text."""
        out: list[str] = []
        state = _Conditionals()
        line_start = True
        length = len(source)
        i = 0
        while i < length:
            char = source[i]
            if line_start and char == "#":
                end = source.find("\n", i)
                if end < 0:
                    end = length
                self._directive(source[i:end][:_MAX_DIRECTIVE], state)
                i = end
                continue
            if char in "\n\r":
                line_start = True
                if not state.skipping:
                    out.append(char)
                i += 1
                continue
            if char not in _SPACE:
                line_start = False
            if state.skipping:
                i += 1
                continue
            if char in _NAME_START and (i == 0 or source[i - 1] not in _NAME_CHARS):
                end = i + 1
                while end < length and source[end] in _NAME_CHARS:
                    end += 1
                value = self.macros.value(source[i:end])
                # A macro name that ends the whole text is left as it is.
                if value is not None and end < length:
                    out.append(value)
                    i = end
                    continue
            out.append(char)
            i += 1
        return "".join(out)

    def _directive(self, line: str, state: _Conditionals) -> None:
        pos = _skip_space(line, 1)

        def at(word: str, allow_end: bool = False) -> bool:
            if not line.startswith(word, pos):
                return False
            after = pos + len(word)
            if after >= len(line):
                return allow_end
            return line[after] in _SPACE

        if at("define"):
            if state.skipping:
                return
            name, rest = _read_name(line, pos + len("define"))
            value = _read_value(line, rest)
            if name:
                self.macros.define(name, value)
        elif at("undef"):
            if state.skipping:
                return
            name, _ = _read_name(line, pos + len("undef"))
            self.macros.undefine(name)
        elif at("ifdef"):
            name, _ = _read_name(line, pos + len("ifdef"))
            state.open(lambda: self.macros.is_defined(name))
        elif at("ifndef"):
            name, _ = _read_name(line, pos + len("ifndef"))
            state.open(lambda: not self.macros.is_defined(name))
        elif at("if"):
            expr = line[_skip_space(line, pos + len("if")):]
            state.open(lambda: self._condition(expr))
        elif at("else", allow_end=True):
            state.flip()
        elif at("endif", allow_end=True):
            state.close()
        elif at("org"):
            if state.skipping:
                return
            self.macros.define("__ORG_ADDRESS__",
                               _read_value(line, pos + len("org")))
        elif at("include"):
            if state.skipping:
                return
            self._include(line, _skip_space(line, pos + len("include")))
        elif at("pragma"):
            # "#pragma once" needs no action: every file is recorded
            # the first time it is read.
            return

    def _condition(self, expr: str) -> bool:
        try:
            return bool(evaluate(expr, self.macros))
        except ExpressionError as exc:
            self.diagnostics.error(-1, str(exc))
            return False

    def _include(self, line: str, pos: int) -> None:
        opener = line[pos:pos + 1]
        if opener == "<":
            closer, system = ">", True
        elif opener == '"':
            closer, system = '"', False
        else:
            self.diagnostics.error(
                -1, "Malformed #include directive, expected < or \"")
            return
        end = line.find(closer, pos + 1)
        if end < 0:
            self.diagnostics.error(
                -1, f"Malformed #include directive, missing closing {closer}")
            return
        path = line[pos + 1:end]
        resolved = self._find_include(path, system)
        if resolved is None:
            self.diagnostics.error(-1, f"Cannot find include file '{path}'")
            return
        try:
            self.preprocess_file(resolved)
        except PreprocessorError:
            self.diagnostics.error(
                -1, f"Failed to preprocess include file '{path}'")