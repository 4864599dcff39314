# ncc16

Front-end support pieces of a small C compiler for 16-bit x86 targets:

- `ncc16.preprocessor` – a line-oriented C preprocessor with object-like
  macros, `#include`, conditional compilation (`#if`, `#ifdef`, `#ifndef`,
  `#else`, `#endif`), `#undef` and an `#org` directive that records the
  origin address in the macro `__ORG_ADDRESS__`;
- `ncc16.expression` – an integer evaluator for `#if` expressions, with
  `defined`, `sizeof` and the usual C operators;
- `ncc16.macros` – the macro table used by both;
- `ncc16.diagnostics` – compiler-style errors, warnings and notes with
  file, line and column and a source snippet;
- `ncc16.globals_emitter` – writes global variable definitions as
  assembler data directives;
- `ncc16.optimization` – optimization-level settings.

The package has no dependencies outside the standard library.

## Preprocessing

```python
from ncc16.diagnostics import Diagnostics
from ncc16.preprocessor import Preprocessor

pp = Preprocessor(Diagnostics("main.c", ""))
pp.add_include_path("include")
pp.define("DEBUG", "1")

text = pp.preprocess_source(
    "#ifdef DEBUG\n"
    "int level = DEBUG;\n"
    "#endif\n"
)
# text == "\nint level = 1;\n\n"
```

Directive lines are dropped from the output but their line breaks are
kept, and lines inside a false conditional block are removed entirely.
An identifier is replaced by its macro value when the macro is defined;
a macro name that is the very last thing in the text is left unchanged.

`preprocess_file(filename)` reads a file, defines `__FILE__` as its quoted
name and processes it the same way. It raises `PreprocessorError` if the
file cannot be read. Every file is read at most once per preprocessor
(names are compared case-insensitively); asking for it again returns an
empty string, so `#pragma once` needs no further handling.

`reset()` forgets all macros, include paths and read files, and defines
the built-in macros again: `__NCC__` (`65536`), `__NCC_MAJOR__` (`1`),
`__NCC_MINOR__` (`10`) and `__x86_16__` (`1`).

Problems in directives – a malformed `#include`, an include file that
cannot be found, an invalid `#if` expression (treated as false) – are
reported as errors through the preprocessor's `Diagnostics`.

### Includes

`#include "file"` looks first at the given path as it stands, then in each
include path in order; `#include <file>` looks only in the include paths.
The included file is preprocessed, so the macros it defines become
available, but its text is not inserted into the including file's output.

## Evaluating `#if` expressions

```python
from ncc16.expression import evaluate, sizeof_type
from ncc16.macros import MacroTable

macros = MacroTable()
macros.define("WIDTH", "16")

evaluate("defined(WIDTH) && WIDTH >= 8", macros)   # 1
evaluate("sizeof(char) + 0x10", macros)             # 17
sizeof_type("unsigned int")                         # 2
```

Results are signed 32-bit integers. An identifier takes the leading
integer of its macro value, and undefined identifiers count as 0.
Division or modulo by zero, missing parentheses, a missing `:` and
unexpected characters raise `ExpressionError`. `sizeof` knows `char`,
`short`, `int`, `long` (signed and unsigned), pointers (2 bytes) and
`void` (0); any other type issues a Python warning and counts as 2.

## Macro table

`MacroTable` supports `define`, `undefine`, `is_defined`, `value`,
`clear`, `in` and `len()` (the number of defined macros). It holds at
most `MacroTable.MAX_MACROS` names; defining beyond that raises
`TooManyMacrosError`.

## Diagnostics

```python
import io
from ncc16.diagnostics import Diagnostics

out = io.StringIO()
source = "int x = ;\n"
diag = Diagnostics("src/main.c", source, stream=out)
diag.error(8, "Expected expression")
diag.error_count          # 1
diag.location(8)          # (1, 9)
diag.short_filename()     # "main.c"
```

Messages go to `stream`, or to standard error when none is given. Notes
are suppressed when `quiet` is true. Once `max_errors` errors (20 by
default) have been reported, `error` raises `TooManyErrors`.

## Emitting global variables

```python
import io
from ncc16.globals_emitter import GlobalDeclaration, GlobalsEmitter, Literal, ValueType

emitter = GlobalsEmitter("main")
emitter.add(GlobalDeclaration("count", initializer=Literal(ValueType.INT, int_value=5)))
out = io.StringIO()
emitter.emit_remaining(out)
```

Each non-array global is written under the label `_<prefix>_<name>` as
`#dw` or `#db` directives. `emit_at_marker(out, redefine=False)` writes
the collected globals once; with `redefine=True` it writes only those
added since `mark_redefine_start()` whose labels were not written before.
`emit_remaining(out)` writes them if no marker has done so. `reset()`
clears everything.

## Optimization levels

```python
from ncc16.optimization import OptimizationSettings

settings = OptimizationSettings.from_level(1)
print(settings.describe(debug=True))
```

Level 0 turns everything off and level 1 turns on string merging. Any
other level falls back to 0.

## What this package does not do

It provides no lexer, parser, code generator or assembler step, and no
command-line program: it cannot compile a C file on its own. The
preprocessor handles only object-like macros, not function-like ones.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.