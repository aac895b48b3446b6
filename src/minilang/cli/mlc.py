"""
mlc - Minilang Compiler Command-Line Interface
=============================================

This module implements the command-line driver for the Minilang compiler.
Every subcommand runs the pipeline up to one stage and reports either the
result of that stage or its first error.

Usage Examples
--------------
Check a program for lexical errors only:
    $ mlc scan prog.ml

List the tokens of a program:
    $ mlc tokens prog.ml

Show the AST, with and without inferred expression types:
    $ mlc ast prog.ml
    $ mlc typed-ast prog.ml

Type-check a program read from standard input:
    $ cat prog.ml | mlc typecheck -

Compile to C and build a native executable:
    $ mlc c prog.ml -o prog.c
    $ cc -o prog prog.c

Use the int/float-only language:
    $ mlc --no-strings typecheck prog.ml

Exit Codes
----------
0 - Success
1 - Compilation error (lexical, syntactic, semantic or code generation)
2 - Invalid arguments or missing input file
3 - Internal error
"""

import logging
from pathlib import Path
from typing import IO, Optional

import click

from minilang import __version__
from minilang.cli.errors import handle_cli_exception
from minilang.frontend.ast import ASTPrinter
from minilang.frontend.compiler import Compiler, CompilerOptions, CompilerResult

logger = logging.getLogger(__name__)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the global options and runs the compiler on behalf of the
    subcommands.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.enable_strings: bool = True

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )

    def compile(self, source_file: IO[str], stop_after: str) -> CompilerResult:
        """
        Run the pipeline on an open source file up to the given stage.

        Any error is reported and turned into the matching exit code.
        """
        filename = str(getattr(source_file, "name", "<stdin>"))
        try:
            source = source_file.read()
            options = CompilerOptions(
                enable_strings=self.enable_strings,
                stop_after=stop_after,
                filename=filename,
            )
            result = Compiler(options).compile_source(source, filename)
        except Exception as e:
            handle_cli_exception(e, verbose=self.verbose)

        logger.debug(f"{filename}: stopped after {stop_after}")
        return result


pass_context = click.make_pass_decorator(Context, ensure=True)

source_argument = click.argument(
    "source_file",
    type=click.File("r", encoding="utf-8"),
)


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable debug logging",
)
@click.option(
    "--no-strings",
    is_flag=True,
    help="Use the int/float-only language (no string type or literals)",
)
@click.version_option(version=__version__, prog_name="mlc")
@pass_context
def main(ctx: Context, verbose: bool, no_strings: bool) -> None:
    """
    Minilang compiler.

    Each command reads SOURCE_FILE (use '-' for standard input) and runs
    the compiler up to the stage it names.
    """
    ctx.verbose = verbose
    ctx.enable_strings = not no_strings
    ctx.setup_logging()


# =============================================================================
# Lexical Analysis Commands
# =============================================================================

@main.command()
@source_argument
@pass_context
def scan(ctx: Context, source_file: IO[str]) -> None:
    """
    Check that a program contains only valid tokens.

    Prints nothing and exits with status 0 on success.
    """
    ctx.compile(source_file, "scan")


@main.command()
@source_argument
@pass_context
def tokens(ctx: Context, source_file: IO[str]) -> None:
    """
    Print the tokens of a program, one per line.

    Example:
        $ echo 'print x;' | mlc tokens -
        1:1     PRINT
        1:7     IDENTIFIER      x
        1:8     SEMICOLON
        2:1     EOF
    """
    result = ctx.compile(source_file, "scan")
    for token in result.tokens:
        line = f"{token.position.line}:{token.position.column}\t{token.type.name}"
        if token.lexeme is not None:
            line += f"\t{token.lexeme}"
        click.echo(line)


# =============================================================================
# Syntax Analysis Commands
# =============================================================================

@main.command()
@source_argument
@pass_context
def parse(ctx: Context, source_file: IO[str]) -> None:
    """Check that a program is syntactically valid."""
    ctx.compile(source_file, "parse")


@main.command()
@source_argument
@pass_context
def ast(ctx: Context, source_file: IO[str]) -> None:
    """Print the abstract syntax tree of a program."""
    result = ctx.compile(source_file, "parse")
    click.echo(ASTPrinter().print(result.program))


# =============================================================================
# Type Checking Commands
# =============================================================================

@main.command()
@source_argument
@pass_context
def typecheck(ctx: Context, source_file: IO[str]) -> None:
    """Check that a program is well-typed."""
    ctx.compile(source_file, "typecheck")


@main.command("typed-ast")
@source_argument
@pass_context
def typed_ast(ctx: Context, source_file: IO[str]) -> None:
    """Print the abstract syntax tree with the type of every expression."""
    result = ctx.compile(source_file, "typecheck")
    click.echo(ASTPrinter(result.expr_types).print(result.program))


# =============================================================================
# Code Generation Command
# =============================================================================

@main.command("c")
@source_argument
@click.option(
    "-o", "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output C file (default: standard output)",
)
@pass_context
def c_code(ctx: Context, source_file: IO[str], output: Optional[Path]) -> None:
    """
    Compile a program to C.

    The generated file is a single translation unit with a main()
    function and can be built with any C99 compiler.
    """
    result = ctx.compile(source_file, "codegen")

    if output is None:
        click.echo(result.c_code, nl=False)
        return

    try:
        output.write_text(result.c_code, encoding="utf-8")
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)
    logger.debug(f"Wrote {output}")


if __name__ == "__main__":
    main()
