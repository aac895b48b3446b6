"""
Minilang - A Compiler for a Tiny Imperative Language
====================================================

Minilang programs declare typed variables up front and then run a list
of statements over them:

    var n : int;
    var total : float;
    read n;
    while n do
        total = total + n * 1.5;
        n = n - 1;
    done
    print total;

Main Components
---------------
- **frontend**: scanner, parser, type checker and C code generator
- **cli**: the 'mlc' command-line driver

Quick Start
-----------
    >>> from minilang import compile_source
    >>> result = compile_source('var x : int; x = 3; print x;')
    >>> print(result.c_code)

Or from the command line:
    $ mlc typecheck prog.ml
    $ mlc c prog.ml -o prog.c
"""

__version__ = "0.1.0"

from minilang.errors import MinilangError
from minilang.frontend import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    FrontendError,
    scan,
    parse,
    typecheck,
    generate_c,
    compile_source,
    compile_file,
)

__all__ = [
    "__version__",
    "MinilangError",
    "FrontendError",
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "scan",
    "parse",
    "typecheck",
    "generate_c",
    "compile_source",
    "compile_file",
]
