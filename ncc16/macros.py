"""Object-like macro table used by the preprocessor."""

from __future__ import annotations

from dataclasses import dataclass


class TooManyMacrosError(Exception):
    """Raised when a new macro would exceed the table's capacity."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"too many macro definitions, limit is {limit}")
        self.limit = limit


@dataclass
class _Macro:
    value: str
    defined: bool = True


class MacroTable:
    """Named replacement texts that can be defined, undefined and redefined.

    An undefined macro keeps its slot in the table, so it still counts
    towards the capacity and can be defined again later.
    """

    MAX_MACROS = 1024

    def __init__(self) -> None:
        self._macros: dict[str, _Macro] = {}

    def define(self, name: str, value: str) -> None:
        """Define ``name`` or replace its value, marking it defined."""
        if len(self._macros) >= self.MAX_MACROS:
            raise TooManyMacrosError(self.MAX_MACROS)
        entry = self._macros.get(name)
        if entry is None:
            self._macros[name] = _Macro(value)
        else:
            entry.value = value
            entry.defined = True

    def undefine(self, name: str) -> None:
        """Mark ``name`` as undefined; unknown names are ignored."""
        entry = self._macros.get(name)
        if entry is not None:
            entry.defined = False

    def is_defined(self, name: str) -> bool:
        entry = self._macros.get(name)
        return entry is not None and entry.defined

    def value(self, name: str) -> str | None:
        """The replacement text of a defined macro, or None."""
        entry = self._macros.get(name)
        if entry is None or not entry.defined:
            return None
        return entry.value

    def clear(self) -> None:
        self._macros.clear()

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.is_defined(name)

    def __len__(self) -> int:
        """Number of currently defined macros."""
        return sum(1 for entry in self._macros.values() if entry.defined)