"""Preprocessor, #if expression evaluator, diagnostics and global-data emitter for a 16-bit C compiler."""

__version__ = "1.10.0"

__all__ = [
    "diagnostics",
    "expression",
    "globals_emitter",
    "macros",
    "optimization",
    "preprocessor",
]