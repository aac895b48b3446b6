# =============================================================================
# test_typecheck.py - Type Checker Unit Tests
# =============================================================================
# Tests for the Minilang static type checker.
#
# Test coverage includes:
#   - Symbol table construction and duplicate declarations
#   - Undeclared variables (with suggestions)
#   - Numeric promotion and string operators
#   - Assignment compatibility and condition types
#   - The expression-type table (one entry per expression)
#   - Fail-fast behavior and partial tables
# =============================================================================

import copy
import itertools

import pytest

from minilang.frontend.parser import parse_source
from minilang.frontend.typecheck import TypeChecker, check_program
from minilang.frontend.types import Type, binop_result_type, is_assignable
from minilang.frontend.ast import BinaryOperator, iter_expressions
from minilang.frontend.errors import (
    SemanticError,
    DuplicateVariableError,
    UndeclaredVariableError,
    UnexpectedTypeError,
    IllTypedBinopError,
)


# =============================================================================
# Helper Functions
# =============================================================================

DECLS = "var i : int; var f : float; var s : string;\n"

VARIABLE_OF = {Type.INT: "i", Type.FLOAT: "f", Type.STRING: "s"}


def check(source: str):
    """Parse and type-check source, returning (symtable, expr_types)."""
    return check_program(parse_source(source, "<test>"), source)


def printed_type(source: str) -> Type:
    """Type of the expression in the last 'print' statement of source."""
    program = parse_source(source, "<test>")
    _, expr_types = check_program(program, source)
    return expr_types[program.statements[-1].expression.node_id]


# =============================================================================
# Declaration Tests
# =============================================================================

class TestDeclarations:
    """Test symbol table construction."""

    def test_symtable(self):
        symtable, _ = check("var a : int; var b : float; var c : string;")
        assert symtable == {"a": Type.INT, "b": Type.FLOAT, "c": Type.STRING}

    def test_symtable_keeps_declaration_order(self):
        symtable, _ = check("var z : int; var a : int; var m : int;")
        assert list(symtable) == ["z", "a", "m"]

    def test_empty_program(self):
        assert check("") == ({}, {})

    def test_duplicate_declaration(self):
        with pytest.raises(DuplicateVariableError) as exc_info:
            check("var x : int; var x : float;")
        err = exc_info.value
        assert err.name == "x"
        assert (err.location.line, err.location.column) == (1, 14)
        assert (err.original_location.line, err.original_location.column) == (1, 1)

    def test_duplicate_with_same_type(self):
        with pytest.raises(DuplicateVariableError):
            check("var x : int; var x : int;")

    def test_duplicate_hint(self):
        with pytest.raises(DuplicateVariableError) as exc_info:
            check("var x : int;\nvar x : float;")
        assert "hint: 'x' was first declared at <test>:1:1" in str(exc_info.value)


# =============================================================================
# Variable Use Tests
# =============================================================================

class TestVariableUse:
    """Test lookups of declared and undeclared variables."""

    def test_undeclared_assignment_target(self):
        with pytest.raises(UndeclaredVariableError) as exc_info:
            check("y = 1;")
        err = exc_info.value
        assert err.name == "y"
        assert (err.location.line, err.location.column) == (1, 1)

    def test_undeclared_in_expression(self):
        with pytest.raises(UndeclaredVariableError) as exc_info:
            check("var x : int; x = x + z;")
        assert exc_info.value.name == "z"
        assert exc_info.value.location.column == 22

    def test_undeclared_read(self):
        with pytest.raises(UndeclaredVariableError) as exc_info:
            check("read n;")
        assert exc_info.value.name == "n"

    def test_undeclared_print(self):
        with pytest.raises(UndeclaredVariableError):
            check("print q;")

    def test_suggestion(self):
        with pytest.raises(UndeclaredVariableError) as exc_info:
            check("var count : int; cuont = 1;")
        assert "count" in exc_info.value.similar_names
        assert "did you mean 'count'?" in str(exc_info.value)

    def test_no_suggestion(self):
        with pytest.raises(UndeclaredVariableError) as exc_info:
            check("var alpha : int; zzz = 1;")
        assert exc_info.value.similar_names == []
        assert exc_info.value.hint is None

    def test_read_any_type(self):
        check(DECLS + "read i; read f; read s;")

    def test_print_any_type(self):
        check(DECLS + 'print i; print f; print s; print "lit"; print 1.5;')


# =============================================================================
# Operator Typing Tests
# =============================================================================

class TestPromotion:
    """Binary operator result types."""

    @pytest.mark.parametrize("op", ["+", "-", "*", "/"])
    @pytest.mark.parametrize("lhs,rhs,expected", [
        (Type.INT, Type.INT, Type.INT),
        (Type.INT, Type.FLOAT, Type.FLOAT),
        (Type.FLOAT, Type.INT, Type.FLOAT),
        (Type.FLOAT, Type.FLOAT, Type.FLOAT),
    ])
    def test_numeric(self, op, lhs, rhs, expected):
        source = DECLS + f"print {VARIABLE_OF[lhs]} {op} {VARIABLE_OF[rhs]};"
        assert printed_type(source) == expected

    @pytest.mark.parametrize("op", ["+", "-", "*", "/"])
    def test_numeric_literals(self, op):
        assert printed_type(f"print 1 {op} 2;") == Type.INT
        assert printed_type(f"print 1 {op} 2.0;") == Type.FLOAT
        assert printed_type(f"print 1.0 {op} 2;") == Type.FLOAT

    @pytest.mark.parametrize("op", ["+", "-"])
    def test_string_operators(self, op):
        assert printed_type(DECLS + f"print s {op} s;") == Type.STRING
        assert printed_type(f'print "a" {op} "b";') == Type.STRING

    @pytest.mark.parametrize("op", ["*", "/"])
    def test_string_multiplicative_rejected(self, op):
        with pytest.raises(IllTypedBinopError) as exc_info:
            check(DECLS + f"print s {op} s;")
        err = exc_info.value
        assert err.operator.symbol == op
        assert (err.lhs, err.rhs) == (Type.STRING, Type.STRING)

    @pytest.mark.parametrize("other", [Type.INT, Type.FLOAT])
    @pytest.mark.parametrize("op", ["+", "-", "*", "/"])
    def test_string_with_number_rejected(self, op, other):
        with pytest.raises(IllTypedBinopError):
            check(DECLS + f"print s {op} {VARIABLE_OF[other]};")
        with pytest.raises(IllTypedBinopError):
            check(DECLS + f"print {VARIABLE_OF[other]} {op} s;")

    def test_ill_typed_location_is_left_operand(self):
        with pytest.raises(IllTypedBinopError) as exc_info:
            check('print 1 + "a";')
        assert exc_info.value.location.column == 7

    def test_ill_typed_message(self):
        with pytest.raises(IllTypedBinopError) as exc_info:
            check('print "a" * 2;')
        assert "invalid operands to '*': 'string' and 'int'" in str(exc_info.value)

    def test_nested_promotion(self):
        assert printed_type("print (1 + 2) * 3;") == Type.INT
        assert printed_type("print (1 + 2) * 3.0;") == Type.FLOAT

    @pytest.mark.parametrize("value,expected", [
        ("1", Type.INT),
        ("1.5", Type.FLOAT),
        ('"a"', Type.STRING),
    ])
    def test_negate_keeps_operand_type(self, value, expected):
        assert printed_type(f"print -{value};") == expected

    def test_promotion_table_is_total(self):
        """Every operator/type combination either has a result or is rejected."""
        for op, lhs, rhs in itertools.product(BinaryOperator, Type, Type):
            result = binop_result_type(op, lhs, rhs)
            if lhs.is_numeric and rhs.is_numeric:
                expected_result = Type.FLOAT if Type.FLOAT in (lhs, rhs) else Type.INT
                assert result == expected_result
            elif lhs == rhs == Type.STRING and op in (BinaryOperator.ADD, BinaryOperator.SUB):
                assert result == Type.STRING
            else:
                assert result is None


# =============================================================================
# Assignment and Condition Tests
# =============================================================================

class TestAssignment:
    """Test assignment compatibility."""

    @pytest.mark.parametrize("target,value", [
        ("i", "1"),
        ("f", "1"),
        ("f", "1.5"),
        ("s", '"x"'),
        ("f", "i"),
    ])
    def test_compatible(self, target, value):
        check(DECLS + f"{target} = {value};")

    @pytest.mark.parametrize("target,value,expected,actual", [
        ("i", "1.5", Type.INT, Type.FLOAT),
        ("i", "f", Type.INT, Type.FLOAT),
        ("i", '"x"', Type.INT, Type.STRING),
        ("f", '"x"', Type.FLOAT, Type.STRING),
        ("s", "1", Type.STRING, Type.INT),
        ("s", "1.5", Type.STRING, Type.FLOAT),
    ])
    def test_incompatible(self, target, value, expected, actual):
        with pytest.raises(UnexpectedTypeError) as exc_info:
            check(DECLS + f"{target} = {value};")
        assert exc_info.value.expected == expected
        assert exc_info.value.actual == actual

    def test_narrowing_at_assignment_position(self):
        with pytest.raises(UnexpectedTypeError) as exc_info:
            check("var x : int; x = 1.5;")
        err = exc_info.value
        assert (err.expected, err.actual) == (Type.INT, Type.FLOAT)
        assert (err.location.line, err.location.column) == (1, 14)

    def test_assignable_table(self):
        assert is_assignable(Type.FLOAT, Type.INT)
        assert not is_assignable(Type.INT, Type.FLOAT)
        assert not is_assignable(Type.STRING, Type.INT)


class TestConditions:
    """if/while conditions must be int."""

    def test_int_condition(self):
        check(DECLS + "if i then print i; end while i do i = i - 1; done")

    @pytest.mark.parametrize("cond,actual", [("f", Type.FLOAT), ("s", Type.STRING),
                                             ("1.0", Type.FLOAT), ("i * 1.0", Type.FLOAT)])
    def test_if_condition_rejected(self, cond, actual):
        with pytest.raises(UnexpectedTypeError) as exc_info:
            check(DECLS + f"if {cond} then end")
        err = exc_info.value
        assert (err.expected, err.actual) == (Type.INT, actual)
        assert (err.location.line, err.location.column) == (2, 1)

    def test_while_condition_rejected(self):
        with pytest.raises(UnexpectedTypeError) as exc_info:
            check(DECLS + "print 1;\nwhile f do done")
        assert exc_info.value.location.line == 3

    def test_errors_inside_branches(self):
        with pytest.raises(UnexpectedTypeError):
            check(DECLS + "if i then i = 1; else i = 2.0; end")
        with pytest.raises(UndeclaredVariableError):
            check(DECLS + "while i do k = 1; done")

    def test_scenario_f_if_without_else(self):
        program = parse_source("if 1 then print 1; end")
        assert program.statements[0].else_branch == []
        symtable, expr_types = check_program(program)
        assert symtable == {}
        assert len(expr_types) == 2


# =============================================================================
# Expression-Type Table Tests
# =============================================================================

class TestExpressionTypeTable:
    """Test the node_id -> Type table."""

    def test_every_expression_has_entry(self):
        source = DECLS + """
            read i;
            f = i * 2 + f / 3.0;
            if i - 1 then print -f; else print s + "!"; end
            while i do i = i - 1; done
        """
        program = parse_source(source)
        _, expr_types = check_program(program)
        ids = {e.node_id for e in iter_expressions(program)}
        assert set(expr_types) == ids

    def test_entries_for_operands(self):
        program = parse_source("var x : float; print x + 1;")
        _, expr_types = check_program(program)
        expr = program.statements[0].expression
        assert expr_types[expr.left.node_id] == Type.FLOAT
        assert expr_types[expr.right.node_id] == Type.INT
        assert expr_types[expr.node_id] == Type.FLOAT

    def test_identical_expressions_separate_entries(self):
        program = parse_source("var x : int; print x; print x;")
        _, expr_types = check_program(program)
        assert len(expr_types) == 2

    def test_equal_float_literals_separate_entries(self):
        program = parse_source("print 0.1; print 0.1;")
        _, expr_types = check_program(program)
        assert list(expr_types.values()) == [Type.FLOAT, Type.FLOAT]

    def test_program_not_modified(self):
        program = parse_source(DECLS + "f = i + 1; if i then print s; end")
        before = copy.deepcopy(program)
        check_program(program)
        assert program == before

    def test_deterministic(self):
        source = DECLS + "read i; while i do f = f + i * 0.5; i = i - 1; done print f;"
        assert check(source) == check(source)

    def test_long_sum(self):
        program = parse_source("print " + " + ".join(["1"] * 1499) + " + 0.5;")
        _, expr_types = check_program(program)
        assert len(expr_types) == 2999
        assert expr_types[program.statements[0].expression.node_id] == Type.FLOAT

    def test_long_sum_reports_bad_operand(self):
        source = "var x : int; print " + " + ".join(["x"] * 1500) + ' * "a";'
        with pytest.raises(IllTypedBinopError):
            check(source)


# =============================================================================
# Fail-Fast Tests
# =============================================================================

class TestFailFast:
    """The first error stops the check; tables keep only earlier entries."""

    def test_partial_expression_table(self):
        program = parse_source("var x : int; print 1; print y; print 2;")
        checker = TypeChecker()
        with pytest.raises(UndeclaredVariableError):
            checker.check(program)
        first = program.statements[0].expression
        assert checker.expr_types == {first.node_id: Type.INT}
        assert checker.symtable == {"x": Type.INT}

    def test_partial_symtable_on_duplicate(self):
        program = parse_source("var a : int; var b : float; var a : string; var c : int;")
        checker = TypeChecker()
        with pytest.raises(DuplicateVariableError):
            checker.check(program)
        assert checker.symtable == {"a": Type.INT, "b": Type.FLOAT}
        assert checker.expr_types == {}

    def test_operands_recorded_before_failing_operator(self):
        program = parse_source('print 1 + "a"; print 2;')
        checker = TypeChecker()
        with pytest.raises(IllTypedBinopError):
            checker.check(program)
        expr = program.statements[0].expression
        assert checker.expr_types == {
            expr.left.node_id: Type.INT,
            expr.right.node_id: Type.STRING,
        }

    def test_assignment_value_recorded_before_target_lookup(self):
        program = parse_source("y = 1;")
        checker = TypeChecker()
        with pytest.raises(UndeclaredVariableError):
            checker.check(program)
        assert list(checker.expr_types.values()) == [Type.INT]

    def test_first_error_wins(self):
        with pytest.raises(UndeclaredVariableError):
            check("var x : int; y = 1; x = 1.5;")

    def test_all_semantic_errors_share_base(self):
        for source in ["var x : int; var x : int;", "y = 1;",
                       "var x : int; x = 1.5;", 'print 1 * "a";']:
            with pytest.raises(SemanticError):
                check(source)

    def test_error_message_has_source_line(self):
        source = "var x : int;\nx = 2.5;"
        with pytest.raises(UnexpectedTypeError) as exc_info:
            check(source)
        lines = str(exc_info.value).splitlines()
        assert lines[0] == "<test>:2:1: error: type mismatch: expected 'int', got 'float'"
        assert lines[1] == "    x = 2.5;"
        assert lines[2] == "    ^"
