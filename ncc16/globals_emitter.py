"""Collects global variable declarations and emits their assembly data."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import TextIO


class ValueType(enum.Enum):
    INT = enum.auto()
    SHORT = enum.auto()
    LONG = enum.auto()
    CHAR = enum.auto()
    BOOL = enum.auto()
    VOID = enum.auto()
    UNSIGNED_INT = enum.auto()
    UNSIGNED_SHORT = enum.auto()
    UNSIGNED_LONG = enum.auto()
    UNSIGNED_CHAR = enum.auto()
    FAR_POINTER = enum.auto()
    STRUCT = enum.auto()


_BYTE_TYPES = {ValueType.CHAR, ValueType.UNSIGNED_CHAR, ValueType.BOOL}


@dataclass
class Literal:
    """A constant initializer."""

    data_type: ValueType
    int_value: int = 0
    char_value: str = "\0"
    segment: int = 0
    offset: int = 0


@dataclass
class GlobalDeclaration:
    """A file-scope variable declaration."""

    name: str
    type: ValueType = ValueType.INT
    initializer: Literal | None = None
    is_array: bool = False
    is_static: bool = False
    is_far_pointer: bool = False


class GlobalsEmitter:
    """Gathers globals and writes them once, at a marker or at the end."""

    def __init__(self, prefix: str | None = None) -> None:
        self.prefix = prefix if prefix else "unknown"
        self.declarations: list[GlobalDeclaration] = []
        self.marker_found = False
        self._redefine_start = 0
        self._emitted: set[str] = set()

    def add(self, declaration: GlobalDeclaration) -> None:
        self.declarations.append(declaration)

    def mark_redefine_start(self) -> None:
        """Globals added from now on belong to a redefined location."""
        self._redefine_start = len(self.declarations)

    def _label(self, declaration: GlobalDeclaration) -> str:
        return f"_{self.prefix}_{declaration.name}"

    def emit_at_marker(self, out: TextIO, redefine: bool = False) -> None:
        """Write the collected globals unless they were already written."""
        if (self.marker_found and not redefine) or not self.declarations:
            return
        self.marker_found = True
        suffix = " (redefined)" if redefine else ""
        out.write(f"; Global variables placed at _NCC_GLOBAL_LOC{suffix}\n")

        if redefine:
            self._emitted.update(
                self._label(decl)
                for decl in self.declarations[:self._redefine_start]
                if not decl.is_array
            )
        start = self._redefine_start if redefine else 0

        for decl in self.declarations[start:]:
            if decl.is_array:
                continue
            label = self._label(decl)
            if redefine:
                if label in self._emitted:
                    continue
                self._emitted.add(label)
            self._write_one(out, decl, label)

    @staticmethod
    def _write_one(out: TextIO, decl: GlobalDeclaration, label: str) -> None:
        scope = ("Static global variable (file scope)" if decl.is_static
                 else "Global variable (program scope)")
        out.write(f"; {scope}: {decl.name}\n{label}:\n")

        init = decl.initializer
        if init is not None:
            if init.data_type is ValueType.INT:
                out.write(f"    #dw {init.int_value} ; Integer value\n\n")
            elif init.data_type is ValueType.CHAR:
                out.write(f"    #db '{init.char_value}' ; Character value\n\n")
            elif init.data_type is ValueType.BOOL:
                word = "true" if init.int_value else "false"
                out.write(f"    #db {init.int_value} ; Boolean value ({word})\n\n")
            elif init.data_type is ValueType.FAR_POINTER:
                out.write(f"    #dw {init.offset} ; Offset\n")
                out.write(f"    #dw {init.segment} ; Segment\n\n")
            else:
                out.write("    #dw 0 ; Default zero initialization\n\n")
        elif decl.type in _BYTE_TYPES:
            out.write("    #db 0 ; Zero initialization\n\n")
        elif decl.is_far_pointer:
            out.write("    #dw 0 ; Offset (zero initialization)\n")
            out.write("    #dw 0 ; Segment (zero initialization)\n\n")
        else:
            out.write("    #dw 0 ; Zero initialization\n\n")

    def emit_remaining(self, out: TextIO) -> None:
        """Write the globals at the end if no marker placed them earlier."""
        if self.marker_found or not self.declarations:
            return
        out.write("; Global variables (no _NCC_GLOBAL_LOC marker found)\n")
        self.emit_at_marker(out)

    def reset(self) -> None:
        self.declarations.clear()
        self.marker_found = False
        self._redefine_start = 0
        self._emitted.clear()