"""
Minilang Compiler Main Module
=============================

This module provides the main compiler interface for Minilang.
It orchestrates the complete compilation process:

    Source → Scan → Parse → Type check → Generate C

Usage
-----
Command line:
    $ mlc c hello.ml -o hello.c

Programmatic:
    >>> from minilang.frontend import compile_source
    >>> result = compile_source('var x : int; x = 3; print x;')
    >>> result.symtable
    {'x': <Type.INT: 'int'>}

Each stage is also available on its own (scan, parse, typecheck,
generate_c), and CompilerOptions.stop_after ends a compilation early so
that front-end tools can stop at the stage they need.

Error Handling
--------------
Every stage stops at its first error. The error is raised to the caller
unchanged; nothing is collected or reported here.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from minilang.frontend.ast import Program
from minilang.frontend.codegen import CodeGenerator
from minilang.frontend.parser import Parser
from minilang.frontend.scanner import Scanner, Token
from minilang.frontend.typecheck import ExprTypeTable, Symtable, TypeChecker

logger = logging.getLogger(__name__)


# Compilation stages, in pipeline order
STAGES = ("scan", "parse", "typecheck", "codegen")


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        enable_strings: Accept string literals and the 'string' type.
                        False selects the int/float-only language, in which
                        'string' is an ordinary identifier and '"' is an
                        illegal character.
        stop_after: Last stage to run: "scan", "parse", "typecheck" or
                    "codegen" (default, the whole pipeline)
        filename: Name used in error locations when none is given
    """
    enable_strings: bool = True
    stop_after: str = "codegen"
    filename: str = "<input>"

    def __post_init__(self):
        if self.stop_after not in STAGES:
            raise ValueError(
                f"invalid stage '{self.stop_after}', expected one of: {', '.join(STAGES)}"
            )


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Fields belonging to stages after options.stop_after stay at their
    defaults.

    Attributes:
        filename: Source filename
        tokens: Token sequence, ending with EOF
        program: Parsed AST
        symtable: Variable name -> declared type
        expr_types: Expression node_id -> inferred type
        c_code: Generated C source
    """
    filename: str = ""
    tokens: list[Token] = field(default_factory=list)
    program: Optional[Program] = None
    symtable: Symtable = field(default_factory=dict)
    expr_types: ExprTypeTable = field(default_factory=dict)
    c_code: str = ""


class Compiler:
    """
    Minilang compiler.

    Example:
        compiler = Compiler()
        result = compiler.compile_file("hello.ml")
        print(result.c_code)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        """
        Initialize the compiler.

        Args:
            options: Compiler configuration (uses defaults if None)
        """
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: Optional[str] = None) -> CompilerResult:
        """
        Compile Minilang source code.

        Args:
            source: Minilang source code string
            filename: Source filename for error messages

        Returns:
            CompilerResult filled up to options.stop_after

        Raises:
            FrontendError: The first error of the first failing stage
        """
        filename = filename or self.options.filename
        source_lines = source.splitlines()
        last_stage = STAGES.index(self.options.stop_after)
        result = CompilerResult(filename=filename)

        # Stage 1: Scanning
        scanner = Scanner(source, filename, enable_strings=self.options.enable_strings)
        result.tokens = list(scanner.tokenize())
        logger.debug(f"{filename}: scanned {len(result.tokens)} tokens")
        if last_stage < STAGES.index("parse"):
            return result

        # Stage 2: Parsing
        result.program = Parser(result.tokens, filename, source_lines).parse_program()
        logger.debug(
            f"{filename}: parsed {len(result.program.declarations)} declarations, "
            f"{len(result.program.statements)} statements"
        )
        if last_stage < STAGES.index("typecheck"):
            return result

        # Stage 3: Type checking
        result.symtable, result.expr_types = TypeChecker(source_lines).check(result.program)
        if last_stage < STAGES.index("codegen"):
            return result

        # Stage 4: C code generation
        generator = CodeGenerator(result.symtable, result.expr_types)
        result.c_code = generator.generate(result.program)
        return result

    def compile_file(self, filepath: str) -> CompilerResult:
        """
        Compile a Minilang source file.

        Raises:
            FrontendError: If compilation fails
            FileNotFoundError: If source file not found
        """
        path = Path(filepath)
        if not path.exists():
            raise FileNotFoundError(f"Source file not found: {filepath}")

        source = path.read_text(encoding="utf-8")
        return self.compile_source(source, str(filepath))


# =============================================================================
# Convenience Functions
# =============================================================================

def scan(source: str, filename: str = "<input>", enable_strings: bool = True) -> list[Token]:
    """Tokenize source text; the result always ends with an EOF token."""
    return list(Scanner(source, filename, enable_strings=enable_strings).tokenize())


def parse(tokens: list[Token], source: Optional[str] = None) -> Program:
    """
    Parse a token sequence into a Program.

    Args:
        tokens: Tokens ending with EOF, as returned by scan()
        source: Original source text, used only for error context
    """
    filename = tokens[-1].position.filename if tokens else "<input>"
    source_lines = source.splitlines() if source is not None else None
    return Parser(tokens, filename, source_lines).parse_program()


def typecheck(program: Program, source: Optional[str] = None) -> tuple[Symtable, ExprTypeTable]:
    """Type-check a program and return (symtable, expr_types)."""
    source_lines = source.splitlines() if source is not None else None
    return TypeChecker(source_lines).check(program)


def compile_source(source: str, filename: Optional[str] = None,
                   options: Optional[CompilerOptions] = None) -> CompilerResult:
    """
    Compile Minilang source code.

    Args:
        source: Minilang source code
        filename: Source filename for error messages (default: options.filename)
        options: Compiler options (uses defaults if None)

    Returns:
        CompilerResult with tokens, AST, tables and C code
    """
    return Compiler(options).compile_source(source, filename)


def compile_file(filepath: str, options: Optional[CompilerOptions] = None) -> CompilerResult:
    """Compile a Minilang source file."""
    return Compiler(options).compile_file(filepath)
