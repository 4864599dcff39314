"""Optimization level selection."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class OptimizationLevel(enum.IntEnum):
    NONE = 0
    BASIC = 1


@dataclass(frozen=True)
class OptimizationSettings:
    """Which optimizations are enabled for a compilation."""

    level: OptimizationLevel = OptimizationLevel.NONE
    merge_strings: bool = False

    @classmethod
    def from_level(cls, level: int) -> OptimizationSettings:
        """Settings for a numeric level; unknown levels mean no optimization."""
        if level == OptimizationLevel.BASIC:
            return cls(OptimizationLevel.BASIC, merge_strings=True)
        return cls(OptimizationLevel.NONE, merge_strings=False)

    def describe(self, debug: bool = False) -> str:
        """Human-readable summary of the enabled optimizations."""
        lines = []
        if debug:
            lines.append(f"Compiler optimization level: O{int(self.level)}\n")
        if self.merge_strings:
            lines.append("  - String merging: enabled\n")
        return "".join(lines)