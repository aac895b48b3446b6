# =============================================================================
# test_cli.py - mlc Command-Line Tests
# =============================================================================
# Tests for the mlc command-line driver, run through click's CliRunner.
#
# Test coverage includes:
#   - Every subcommand on valid input, from files and standard input
#   - Error reporting and exit codes
#   - Global options (--no-strings, --verbose, --version)
# =============================================================================

import pytest
from click.testing import CliRunner

from minilang import __version__
from minilang.cli.mlc import main
from minilang.cli.errors import ExitCode


PROGRAM = "var x : int;\nread x;\nprint x + 1;\n"


@pytest.fixture
def runner():
    return CliRunner()


# =============================================================================
# Lexical Commands
# =============================================================================

class TestScanCommands:
    """Test the scan and tokens commands."""

    def test_scan_valid(self, runner):
        result = runner.invoke(main, ["scan", "-"], input="x = 1;")
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output == ""

    def test_scan_accepts_syntax_errors(self, runner):
        result = runner.invoke(main, ["scan", "-"], input="print print")
        assert result.exit_code == ExitCode.SUCCESS

    def test_scan_illegal_character(self, runner):
        result = runner.invoke(main, ["scan", "-"], input="1 @ 2;")
        assert result.exit_code == ExitCode.COMPILE_ERROR
        assert "error: illegal character '@'" in result.output

    def test_tokens(self, runner):
        result = runner.invoke(main, ["tokens", "-"], input="print x;\n")
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output.splitlines() == [
            "1:1\tPRINT",
            "1:7\tIDENTIFIER\tx",
            "1:8\tSEMICOLON",
            "2:1\tEOF",
        ]


# =============================================================================
# Syntax Commands
# =============================================================================

class TestParseCommands:
    """Test the parse and ast commands."""

    def test_parse_valid(self, runner):
        result = runner.invoke(main, ["parse", "-"], input="y = 1;")
        assert result.exit_code == ExitCode.SUCCESS

    def test_parse_error(self, runner):
        result = runner.invoke(main, ["parse", "-"], input="print 1")
        assert result.exit_code == ExitCode.COMPILE_ERROR
        assert "unexpected end of input" in result.output
        assert "hint: expected ';'" in result.output

    def test_ast(self, runner):
        result = runner.invoke(main, ["ast", "-"], input=PROGRAM)
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output.splitlines() == [
            "Program",
            "  Var x : int",
            "  Read x",
            "  Print (x + 1)",
        ]


# =============================================================================
# Type Checking Commands
# =============================================================================

class TestTypecheckCommands:
    """Test the typecheck and typed-ast commands."""

    def test_typecheck_valid(self, runner):
        result = runner.invoke(main, ["typecheck", "-"], input=PROGRAM)
        assert result.exit_code == ExitCode.SUCCESS

    def test_typecheck_error(self, runner):
        result = runner.invoke(main, ["typecheck", "-"], input="var x : int;\nx = 1.5;\n")
        assert result.exit_code == ExitCode.COMPILE_ERROR
        assert "type mismatch: expected 'int', got 'float'" in result.output
        assert "    x = 1.5;" in result.output

    def test_typed_ast(self, runner):
        result = runner.invoke(main, ["typed-ast", "-"], input=PROGRAM)
        assert result.exit_code == ExitCode.SUCCESS
        assert "  Print [([x : int] + [1 : int]) : int]" in result.output.splitlines()


# =============================================================================
# Code Generation Command
# =============================================================================

class TestCCommand:
    """Test the c command."""

    def test_c_to_stdout(self, runner):
        result = runner.invoke(main, ["c", "-"], input=PROGRAM)
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output.startswith("#include <stdio.h>\n")
        assert 'scanf("%d", &v_x);' in result.output

    def test_c_to_file(self, runner, tmp_path):
        source = tmp_path / "prog.ml"
        target = tmp_path / "prog.c"
        source.write_text(PROGRAM, encoding="utf-8")
        result = runner.invoke(main, ["c", str(source), "-o", str(target)])
        assert result.exit_code == ExitCode.SUCCESS
        assert result.output == ""
        code = target.read_text(encoding="utf-8")
        assert code.rstrip().endswith("return 0;\n}")

    def test_c_unsupported_feature(self, runner):
        result = runner.invoke(main, ["c", "-"], input='print "ab" - "b";')
        assert result.exit_code == ExitCode.COMPILE_ERROR
        assert "unsupported feature" in result.output

    def test_c_stops_at_first_failing_stage(self, runner, tmp_path):
        target = tmp_path / "out.c"
        result = runner.invoke(main, ["c", "-", "-o", str(target)], input="y = 1;")
        assert result.exit_code == ExitCode.COMPILE_ERROR
        assert not target.exists()


# =============================================================================
# Input and Global Option Tests
# =============================================================================

class TestInputAndOptions:
    """Test file handling and global options."""

    def test_error_location_uses_file_name(self, runner, tmp_path):
        source = tmp_path / "bad.ml"
        source.write_text("var x : int;\nx = y;\n", encoding="utf-8")
        result = runner.invoke(main, ["typecheck", str(source)])
        assert result.exit_code == ExitCode.COMPILE_ERROR
        assert f"{source}:2:5: error: undeclared variable 'y'" in result.output

    def test_missing_file(self, runner, tmp_path):
        result = runner.invoke(main, ["typecheck", str(tmp_path / "missing.ml")])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_file_not_utf8(self, runner, tmp_path):
        source = tmp_path / "latin1.ml"
        source.write_bytes(b"print 1; # \xff\n")
        result = runner.invoke(main, ["typecheck", str(source)])
        assert result.exit_code == ExitCode.INVALID_ARGS
        assert "Internal error" not in result.output

    def test_long_sum(self, runner):
        source = "print " + " + ".join(["1"] * 1500) + ";"
        result = runner.invoke(main, ["c", "-"], input=source)
        assert result.exit_code == ExitCode.SUCCESS
        assert 'printf("%d\\n", tmp_2999);' in result.output

    def test_unknown_command(self, runner):
        result = runner.invoke(main, ["link", "-"])
        assert result.exit_code == ExitCode.INVALID_ARGS

    def test_no_strings(self, runner):
        result = runner.invoke(main, ["--no-strings", "typecheck", "-"],
                               input="var s : string;")
        assert result.exit_code == ExitCode.COMPILE_ERROR
        assert "unexpected identifier 'string'" in result.output

    def test_no_strings_allows_string_identifier(self, runner):
        result = runner.invoke(main, ["--no-strings", "typecheck", "-"],
                               input="var string : int; string = 2;")
        assert result.exit_code == ExitCode.SUCCESS

    def test_verbose(self, runner):
        result = runner.invoke(main, ["-v", "typecheck", "-"], input=PROGRAM)
        assert result.exit_code == ExitCode.SUCCESS

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == ExitCode.SUCCESS
        assert __version__ in result.output

    def test_help_lists_commands(self, runner):
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == ExitCode.SUCCESS
        for command in ["scan", "tokens", "parse", "ast", "typecheck", "typed-ast", "c"]:
            assert command in result.output
