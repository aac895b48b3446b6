"""
Minilang Type Checker
=====================

Single-pass static verification of a parsed Program. The checker builds
two tables and hands them to its caller:

- Symtable: variable name -> declared Type
- ExprTypeTable: expression node_id -> inferred Type

Checking Order
--------------
1. Declarations, in source order. A repeated name is a
   DuplicateVariableError at the repeated declaration.
2. Statements, in source order, descending into branches and loop bodies.

Every expression gets exactly one table entry, written after its operands
have been checked. Identical expressions at different positions have
different node ids and therefore separate entries.

Fail-Fast
---------
The first error aborts the check. The tables keep whatever was written
before the failing node and nothing after it, and remain available as
attributes of the TypeChecker.

The Program is never modified.
"""

import difflib
import logging
from typing import Optional

from minilang.frontend.ast import (
    Program,
    Declaration,
    Statement,
    ReadStatement,
    PrintStatement,
    AssignStatement,
    IfStatement,
    WhileStatement,
    Expression,
    IdentifierExpression,
    IntLiteral,
    FloatLiteral,
    StringLiteral,
    NegateExpression,
    BinaryExpression,
)
from minilang.frontend.errors import (
    DuplicateVariableError,
    UndeclaredVariableError,
    UnexpectedTypeError,
    IllTypedBinopError,
)
from minilang.frontend.position import Position
from minilang.frontend.types import Type, binop_result_type, is_assignable

logger = logging.getLogger(__name__)

Symtable = dict[str, Type]
ExprTypeTable = dict[int, Type]


class TypeChecker:
    """
    Static type checker for Minilang programs.

    Usage:
        checker = TypeChecker()
        symtable, expr_types = checker.check(program)

    Attributes:
        symtable: Declared variables and their types (append-only)
        expr_types: Inferred type of every checked expression, by node_id
        source_lines: Original source lines for error context
    """

    def __init__(self, source_lines: Optional[list[str]] = None):
        self.symtable: Symtable = {}
        self.expr_types: ExprTypeTable = {}
        self.source_lines = source_lines or []

        # Where each variable was declared, for duplicate diagnostics
        self._declared_at: dict[str, Position] = {}

    def check(self, program: Program) -> tuple[Symtable, ExprTypeTable]:
        """
        Type-check a whole program.

        Returns:
            (symtable, expr_types)

        Raises:
            SemanticError: On the first typing or scoping error
        """
        for decl in program.declarations:
            self._check_declaration(decl)

        self._check_statements(program.statements)

        logger.debug(
            f"Type check passed: {len(self.symtable)} variables, "
            f"{len(self.expr_types)} expressions"
        )
        return self.symtable, self.expr_types

    def _get_source_line(self, location: Position) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < location.line <= len(self.source_lines):
            return self.source_lines[location.line - 1]
        return None

    # =========================================================================
    # Declarations
    # =========================================================================

    def _check_declaration(self, decl: Declaration) -> None:
        if decl.name in self.symtable:
            raise DuplicateVariableError(
                decl.name,
                decl.location,
                original_location=self._declared_at[decl.name],
                source_line=self._get_source_line(decl.location),
            )
        self.symtable[decl.name] = decl.var_type
        self._declared_at[decl.name] = decl.location

    # =========================================================================
    # Statements
    # =========================================================================

    def _check_statements(self, statements: list[Statement]) -> None:
        for stmt in statements:
            self._check_statement(stmt)

    def _check_statement(self, stmt: Statement) -> None:
        if isinstance(stmt, AssignStatement):
            self._check_assign(stmt)
        elif isinstance(stmt, ReadStatement):
            self._lookup(stmt.name, stmt.location)
        elif isinstance(stmt, PrintStatement):
            self._check_expression(stmt.expression)
        elif isinstance(stmt, IfStatement):
            self._check_condition(stmt.condition, stmt.location)
            self._check_statements(stmt.then_branch)
            self._check_statements(stmt.else_branch)
        elif isinstance(stmt, WhileStatement):
            self._check_condition(stmt.condition, stmt.location)
            self._check_statements(stmt.body)
        else:
            raise TypeError(f"unknown statement node {stmt!r}")

    def _check_assign(self, stmt: AssignStatement) -> None:
        """
        Assignment compatibility:
            int := int, float := int, float := float, string := string
        """
        value_type = self._check_expression(stmt.expression)
        target_type = self._lookup(stmt.name, stmt.location)

        if not is_assignable(target_type, value_type):
            raise UnexpectedTypeError(
                expected=target_type,
                actual=value_type,
                location=stmt.location,
                source_line=self._get_source_line(stmt.location),
            )

    def _check_condition(self, condition: Expression, location: Position) -> None:
        """if/while conditions must be int; there is no boolean type."""
        cond_type = self._check_expression(condition)
        if cond_type != Type.INT:
            raise UnexpectedTypeError(
                expected=Type.INT,
                actual=cond_type,
                location=location,
                source_line=self._get_source_line(location),
            )

    def _lookup(self, name: str, location: Position) -> Type:
        """Return the declared type of a variable or raise UndeclaredVariableError."""
        var_type = self.symtable.get(name)
        if var_type is None:
            raise UndeclaredVariableError(
                name,
                location,
                source_line=self._get_source_line(location),
                similar_names=difflib.get_close_matches(name, list(self.symtable)),
            )
        return var_type

    # =========================================================================
    # Expressions
    # =========================================================================

    def _check_expression(self, expr: Expression) -> Type:
        """
        Infer the type of an expression and record it under its node_id.

        The tree is walked with an explicit stack so long operator chains
        do not exhaust the interpreter's recursion limit. Operands are
        visited left to right and each node is recorded after them.
        """
        stack: list[tuple[Expression, bool]] = [(expr, False)]
        while stack:
            node, operands_done = stack.pop()
            if not operands_done and isinstance(node, NegateExpression):
                stack.append((node, True))
                stack.append((node.operand, False))
            elif not operands_done and isinstance(node, BinaryExpression):
                stack.append((node, True))
                stack.append((node.right, False))
                stack.append((node.left, False))
            else:
                self.expr_types[node.node_id] = self._infer(node)
        return self.expr_types[expr.node_id]

    def _infer(self, expr: Expression) -> Type:
        """Type of one node whose operands are already in expr_types."""
        if isinstance(expr, IntLiteral):
            return Type.INT
        elif isinstance(expr, FloatLiteral):
            return Type.FLOAT
        elif isinstance(expr, StringLiteral):
            return Type.STRING
        elif isinstance(expr, IdentifierExpression):
            return self._lookup(expr.name, expr.location)
        elif isinstance(expr, NegateExpression):
            return self.expr_types[expr.operand.node_id]
        elif isinstance(expr, BinaryExpression):
            return self._check_binary(expr)
        raise TypeError(f"unknown expression node {expr!r}")

    def _check_binary(self, expr: BinaryExpression) -> Type:
        lhs = self.expr_types[expr.left.node_id]
        rhs = self.expr_types[expr.right.node_id]

        result = binop_result_type(expr.operator, lhs, rhs)
        if result is None:
            raise IllTypedBinopError(
                expr.operator,
                lhs,
                rhs,
                location=expr.location,
                source_line=self._get_source_line(expr.location),
            )
        return result


# =============================================================================
# Convenience Functions
# =============================================================================

def check_program(program: Program,
                  source: Optional[str] = None) -> tuple[Symtable, ExprTypeTable]:
    """
    Type-check a program and return (symtable, expr_types).

    Args:
        program: Parsed program
        source: Original source text, used only for error context
    """
    source_lines = source.splitlines() if source is not None else None
    return TypeChecker(source_lines).check(program)
