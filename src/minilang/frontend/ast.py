"""
Minilang Abstract Syntax Tree (AST) Definitions
===============================================

This module defines the AST node types built by the parser and consumed,
read-only, by the type checker and the code generator.

Node Hierarchy
--------------
Program - root: declarations followed by statements
ASTNode (base, carries a source location)
├── Declaration - 'var name : type;'
├── Statements
│   ├── ReadStatement - read name;
│   ├── PrintStatement - print expr;
│   ├── AssignStatement - name = expr;
│   ├── IfStatement - if expr then ... [else ...] end
│   └── WhileStatement - while expr do ... done
└── Expressions (each also carries a node_id)
    ├── IdentifierExpression - variable reference
    ├── IntLiteral - integer constant
    ├── FloatLiteral - float constant
    ├── StringLiteral - string constant
    ├── NegateExpression - unary minus
    └── BinaryExpression - + - * /

Design Notes
------------
- The statement and expression variant sets are closed. Consumers
  dispatch with an isinstance chain over every variant and treat any
  other node as an internal error.
- node_id is unique within one parse and is handed out by the parser in
  construction order. The type checker keys the expression-type table by
  node_id, so two identical expressions at different positions are
  distinct entries, and float values never need to be hashed.
- Nodes are not modified after the parser returns the Program.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from minilang.frontend.position import Position
from minilang.frontend.types import Type


# =============================================================================
# AST Node Base Classes
# =============================================================================

@dataclass
class ASTNode:
    """
    Base class for all AST nodes.

    Attributes:
        location: Source location of the node's first token
    """
    location: Position


@dataclass
class Expression(ASTNode):
    """
    Base class for all expression nodes.

    Attributes:
        location: Source location
        node_id: Identity of this occurrence, key into the expression-type table
    """
    node_id: int


@dataclass
class Statement(ASTNode):
    """Base class for all statement nodes."""
    pass


# =============================================================================
# Declarations
# =============================================================================

@dataclass
class Declaration(ASTNode):
    """
    Variable declaration: var name : type;

    Uniqueness of names is checked by the type checker, not the parser.

    Attributes:
        name: Variable name
        var_type: Declared type
    """
    name: str
    var_type: Type


# =============================================================================
# Statement Nodes
# =============================================================================

@dataclass
class ReadStatement(Statement):
    """read name;"""
    name: str


@dataclass
class PrintStatement(Statement):
    """print expression;"""
    expression: Expression


@dataclass
class AssignStatement(Statement):
    """
    name = expression;

    Attributes:
        name: Target variable
        expression: Value to store
    """
    name: str
    expression: Expression


@dataclass
class IfStatement(Statement):
    """
    If statement with optional else clause.

    Attributes:
        condition: The condition expression (must be int)
        then_branch: Statements run when the condition is non-zero
        else_branch: Statements run otherwise; empty when there is no 'else'
    """
    condition: Expression
    then_branch: list[Statement] = field(default_factory=list)
    else_branch: list[Statement] = field(default_factory=list)


@dataclass
class WhileStatement(Statement):
    """
    While loop statement.

    Attributes:
        condition: Loop condition (must be int)
        body: Loop body statements
    """
    condition: Expression
    body: list[Statement] = field(default_factory=list)


# =============================================================================
# Expression Nodes
# =============================================================================

class BinaryOperator(Enum):
    """Binary operator types."""
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"

    @property
    def symbol(self) -> str:
        """Source (and C) spelling of the operator."""
        return self.value


@dataclass
class IdentifierExpression(Expression):
    """Variable reference."""
    name: str


@dataclass
class IntLiteral(Expression):
    """Integer literal."""
    value: int


@dataclass
class FloatLiteral(Expression):
    """Float literal."""
    value: float


@dataclass
class StringLiteral(Expression):
    """String literal; value is the text between the quotes."""
    value: str


@dataclass
class NegateExpression(Expression):
    """
    Unary minus.

    The operand is a full expression: '-a + b' negates 'a + b'.
    """
    operand: Expression


@dataclass
class BinaryExpression(Expression):
    """
    Binary operation expression (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: BinaryOperator
    left: Expression
    right: Expression


# =============================================================================
# Program Root
# =============================================================================

@dataclass
class Program:
    """
    Root of the AST for one compilation unit.

    Attributes:
        declarations: Variable declarations, in source order
        statements: Top-level statements, in source order
    """
    declarations: list[Declaration] = field(default_factory=list)
    statements: list[Statement] = field(default_factory=list)


def iter_expressions(program: Program):
    """
    Yield every expression node of the program in pre-order.

    Children of a binary expression are yielded left before right, and
    statements in program order, descending into branches and loop bodies.
    """
    stack: list[Union[Statement, Expression]] = list(reversed(program.statements))
    while stack:
        node = stack.pop()
        if isinstance(node, Expression):
            yield node
            if isinstance(node, NegateExpression):
                stack.append(node.operand)
            elif isinstance(node, BinaryExpression):
                stack.append(node.right)
                stack.append(node.left)
        elif isinstance(node, ReadStatement):
            continue
        elif isinstance(node, (PrintStatement, AssignStatement)):
            stack.append(node.expression)
        elif isinstance(node, IfStatement):
            stack.extend(reversed(node.else_branch))
            stack.extend(reversed(node.then_branch))
            stack.append(node.condition)
        elif isinstance(node, WhileStatement):
            stack.extend(reversed(node.body))
            stack.append(node.condition)
        else:
            raise TypeError(f"unknown AST node {node!r}")


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter:
    """
    Pretty printer for AST debugging.

    Produces an indented, human-readable view of the program. When an
    expression-type table is supplied every expression is annotated with
    its inferred type, giving the "typed AST" view.

    Usage:
        printer = ASTPrinter()
        print(printer.print(program))

        typed = ASTPrinter(expr_types)
        print(typed.print(program))
    """

    def __init__(self, expr_types: Optional[dict[int, Type]] = None):
        self.expr_types = expr_types
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, program: Program) -> str:
        """Print the AST and return it as a string."""
        self.output = []
        self.indent_level = 0

        self._emit("Program")
        self._indent()
        for decl in program.declarations:
            self._emit(f"Var {decl.name} : {decl.var_type}")
        self._print_statements(program.statements)
        self._dedent()

        return "\n".join(self.output)

    def _emit(self, text: str) -> None:
        """Emit a line with current indentation."""
        indent = "  " * self.indent_level
        self.output.append(f"{indent}{text}")

    def _indent(self) -> None:
        """Increase indentation level."""
        self.indent_level += 1

    def _dedent(self) -> None:
        """Decrease indentation level."""
        self.indent_level = max(0, self.indent_level - 1)

    def _print_statements(self, statements: list[Statement]) -> None:
        for stmt in statements:
            self._print_statement(stmt)

    def _print_statement(self, stmt: Statement) -> None:
        if isinstance(stmt, ReadStatement):
            self._emit(f"Read {stmt.name}")
        elif isinstance(stmt, PrintStatement):
            self._emit(f"Print {self._expr_str(stmt.expression)}")
        elif isinstance(stmt, AssignStatement):
            self._emit(f"Assign {stmt.name} = {self._expr_str(stmt.expression)}")
        elif isinstance(stmt, IfStatement):
            self._emit(f"If {self._expr_str(stmt.condition)}")
            self._indent()
            self._emit("Then:")
            self._indent()
            self._print_statements(stmt.then_branch)
            self._dedent()
            if stmt.else_branch:
                self._emit("Else:")
                self._indent()
                self._print_statements(stmt.else_branch)
                self._dedent()
            self._dedent()
        elif isinstance(stmt, WhileStatement):
            self._emit(f"While {self._expr_str(stmt.condition)}")
            self._indent()
            self._print_statements(stmt.body)
            self._dedent()
        else:
            raise TypeError(f"unknown statement node {stmt!r}")

    def _expr_str(self, expr: Expression) -> str:
        """Convert expression to string representation, operands first."""
        texts: dict[int, str] = {}
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
                texts[node.node_id] = self._node_str(node, texts)
        return texts[expr.node_id]

    def _node_str(self, expr: Expression, texts: dict[int, str]) -> str:
        if isinstance(expr, IntLiteral):
            text = str(expr.value)
        elif isinstance(expr, FloatLiteral):
            text = repr(expr.value)
        elif isinstance(expr, StringLiteral):
            text = f'"{expr.value}"'
        elif isinstance(expr, IdentifierExpression):
            text = expr.name
        elif isinstance(expr, NegateExpression):
            text = f"(-{texts[expr.operand.node_id]})"
        elif isinstance(expr, BinaryExpression):
            left = texts[expr.left.node_id]
            right = texts[expr.right.node_id]
            text = f"({left} {expr.operator.symbol} {right})"
        else:
            raise TypeError(f"unknown expression node {expr!r}")

        if self.expr_types is None:
            return text
        return f"[{text} : {self.expr_types.get(expr.node_id, '?')}]"
