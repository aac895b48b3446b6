"""
C Code Generator for Minilang
=============================

This module lowers a type-checked Program to a single C translation unit.
It reads the Program, the symbol table and the expression-type table
read-only; every expression's node_id must have an entry in the
expression-type table, which the type checker guarantees for any program
it accepted.

Code Generation Strategy
------------------------
- All variables become locals of main(), declared up front in symbol
  table order and zero-initialized. User names are prefixed with 'v_' so
  they can never collide with C keywords, library functions or
  temporaries.
- Every expression except a plain variable reference is evaluated into a
  fresh temporary (tmp_1, tmp_2, ...) whose C type comes from the
  expression-type table. Operands are evaluated left to right.
- while loops re-evaluate their condition on every iteration:

      while (1) {
          <condition code>
          if (!tmp_N) break;
          <body>
      }

Type Mapping
------------
| Minilang | C            | printf/scanf |
|----------|--------------|--------------|
| int      | int          | %d           |
| float    | float        | %f           |
| string   | const char * | %s           |

Strings use two small helpers emitted only when the program needs them:
ml_concat() for '+', and ml_read_string() for 'read'. String '-' and
negation of a string have no C lowering and raise UnsupportedFeatureError.

Example output for 'var x : int; x = 3; print x;':

    #include <stdio.h>

    int main(void)
    {
        int v_x = 0;

        int tmp_1 = 3;
        v_x = tmp_1;
        printf("%d\\n", v_x);
        return 0;
    }
"""

import logging

from minilang.frontend.ast import (
    Program,
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
    BinaryOperator,
)
from minilang.frontend.errors import CodeGenError, UnsupportedFeatureError
from minilang.frontend.typecheck import ExprTypeTable, Symtable
from minilang.frontend.types import Type

logger = logging.getLogger(__name__)


# Zero value used to initialize each variable type
ZERO_VALUES = {
    Type.INT: "0",
    Type.FLOAT: "0.0f",
    Type.STRING: '""',
}

PRINTF_FORMATS = {
    Type.INT: "%d",
    Type.FLOAT: "%f",
    Type.STRING: "%s",
}

STRING_HELPERS = """\
static const char *ml_concat(const char *a, const char *b)
{
    size_t la = strlen(a);
    size_t lb = strlen(b);
    char *s = malloc(la + lb + 1);
    if (s == NULL) {
        fputs("out of memory\\n", stderr);
        exit(1);
    }
    memcpy(s, a, la);
    memcpy(s + la, b, lb + 1);
    return s;
}

static const char *ml_read_string(void)
{
    char buf[256];
    size_t len;
    char *s;
    if (scanf("%255s", buf) != 1) {
        buf[0] = '\\0';
    }
    len = strlen(buf);
    s = malloc(len + 1);
    if (s == NULL) {
        fputs("out of memory\\n", stderr);
        exit(1);
    }
    memcpy(s, buf, len + 1);
    return s;
}"""


def c_variable_name(name: str) -> str:
    """C identifier used for a Minilang variable."""
    return f"v_{name}"


def c_string_literal(value: str) -> str:
    """Quote a string value as a C string literal."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\t", "\\t")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


def c_float_literal(value: float) -> str:
    """Spell a float value as a C float constant."""
    text = repr(value)
    if "." not in text and "e" not in text:
        text += ".0"
    return f"{text}f"


class CodeGenerator:
    """
    Generates C source from a type-checked Minilang program.

    Usage:
        generator = CodeGenerator(symtable, expr_types)
        c_source = generator.generate(program)

    Attributes:
        symtable: Variable name -> Type, from the type checker
        expr_types: node_id -> Type, from the type checker
    """

    INDENT = "    "

    def __init__(self, symtable: Symtable, expr_types: ExprTypeTable):
        self.symtable = symtable
        self.expr_types = expr_types

        self._output: list[str] = []
        self._indent_level = 0
        self._tmp_counter = 0

    def generate(self, program: Program) -> str:
        """
        Generate C code for a program.

        Returns:
            Complete C source text ending with a newline

        Raises:
            CodeGenError: If an expression has no recorded type, or a
                construct has no C lowering
        """
        self._output = []
        self._indent_level = 0
        self._tmp_counter = 0

        uses_strings = (
            Type.STRING in self.symtable.values()
            or Type.STRING in self.expr_types.values()
        )

        self._emit("#include <stdio.h>")
        if uses_strings:
            self._emit("#include <stdlib.h>")
            self._emit("#include <string.h>")
            self._emit()
            self._output.extend(STRING_HELPERS.splitlines())
        self._emit()

        self._emit("int main(void)")
        self._emit("{")
        self._indent_level += 1

        for name, var_type in self.symtable.items():
            self._emit(f"{var_type.c_name} {c_variable_name(name)} = {ZERO_VALUES[var_type]};")
        if self.symtable:
            self._emit()

        self._generate_statements(program.statements)

        self._emit("return 0;")
        self._indent_level -= 1
        self._emit("}")

        logger.debug(
            f"Generated C: {len(self._output)} lines, {self._tmp_counter} temporaries"
        )
        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Output Methods
    # =========================================================================

    def _emit(self, line: str = "") -> None:
        """Emit a line at the current indentation; empty lines stay empty."""
        if line:
            self._output.append(f"{self.INDENT * self._indent_level}{line}")
        else:
            self._output.append("")

    def _new_tmp(self) -> str:
        self._tmp_counter += 1
        return f"tmp_{self._tmp_counter}"

    def _type_of(self, expr: Expression) -> Type:
        expr_type = self.expr_types.get(expr.node_id)
        if expr_type is None:
            raise CodeGenError(
                f"no type recorded for expression #{expr.node_id}",
                location=expr.location,
                hint="run the type checker before code generation",
            )
        return expr_type

    # =========================================================================
    # Statements
    # =========================================================================

    def _generate_statements(self, statements: list[Statement]) -> None:
        for stmt in statements:
            self._generate_statement(stmt)

    def _generate_statement(self, stmt: Statement) -> None:
        if isinstance(stmt, ReadStatement):
            self._generate_read(stmt)
        elif isinstance(stmt, PrintStatement):
            value = self._generate_expression(stmt.expression)
            fmt = PRINTF_FORMATS[self._type_of(stmt.expression)]
            self._emit(f'printf("{fmt}\\n", {value});')
        elif isinstance(stmt, AssignStatement):
            value = self._generate_expression(stmt.expression)
            self._emit(f"{c_variable_name(stmt.name)} = {value};")
        elif isinstance(stmt, IfStatement):
            self._generate_if(stmt)
        elif isinstance(stmt, WhileStatement):
            self._generate_while(stmt)
        else:
            raise TypeError(f"unknown statement node {stmt!r}")

    def _generate_read(self, stmt: ReadStatement) -> None:
        var_type = self.symtable.get(stmt.name)
        if var_type is None:
            raise CodeGenError(f"variable '{stmt.name}' missing from symbol table",
                               location=stmt.location)

        target = c_variable_name(stmt.name)
        if var_type == Type.STRING:
            self._emit(f"{target} = ml_read_string();")
        else:
            self._emit(f'scanf("{PRINTF_FORMATS[var_type]}", &{target});')

    def _generate_if(self, stmt: IfStatement) -> None:
        condition = self._generate_expression(stmt.condition)
        self._emit(f"if ({condition}) {{")
        self._indent_level += 1
        self._generate_statements(stmt.then_branch)
        self._indent_level -= 1
        if stmt.else_branch:
            self._emit("} else {")
            self._indent_level += 1
            self._generate_statements(stmt.else_branch)
            self._indent_level -= 1
        self._emit("}")

    def _generate_while(self, stmt: WhileStatement) -> None:
        self._emit("while (1) {")
        self._indent_level += 1
        condition = self._generate_expression(stmt.condition)
        self._emit(f"if (!{condition}) break;")
        self._generate_statements(stmt.body)
        self._indent_level -= 1
        self._emit("}")

    # =========================================================================
    # Expressions
    # =========================================================================

    def _generate_expression(self, expr: Expression) -> str:
        """
        Emit code evaluating an expression.

        Operands are lowered left to right before the node that uses them,
        walking an explicit stack instead of recursing so long operator
        chains stay within the interpreter's recursion limit.

        Returns:
            The C name holding the value: a temporary, or the variable
            itself for identifier expressions
        """
        values: dict[int, str] = {}
        stack: list[tuple[Expression, bool]] = [(expr, False)]
        while stack:
            node, operands_done = stack.pop()
            expr_type = self._type_of(node)
            if not operands_done and isinstance(node, NegateExpression):
                if expr_type == Type.STRING:
                    raise UnsupportedFeatureError(
                        "negation of a string",
                        location=node.location,
                    )
                stack.append((node, True))
                stack.append((node.operand, False))
            elif not operands_done and isinstance(node, BinaryExpression):
                stack.append((node, True))
                stack.append((node.right, False))
                stack.append((node.left, False))
            else:
                values[node.node_id] = self._lower(node, expr_type, values)
        return values[expr.node_id]

    def _lower(self, expr: Expression, expr_type: Type, values: dict[int, str]) -> str:
        """Emit one node whose operands are already lowered into values."""
        if isinstance(expr, IdentifierExpression):
            return c_variable_name(expr.name)

        if isinstance(expr, IntLiteral):
            value = str(expr.value)
        elif isinstance(expr, FloatLiteral):
            value = c_float_literal(expr.value)
        elif isinstance(expr, StringLiteral):
            value = c_string_literal(expr.value)
        elif isinstance(expr, NegateExpression):
            value = f"-{values[expr.operand.node_id]}"
        elif isinstance(expr, BinaryExpression):
            value = self._generate_binary(expr, expr_type, values)
        else:
            raise TypeError(f"unknown expression node {expr!r}")

        tmp = self._new_tmp()
        self._emit(f"{expr_type.c_name} {tmp} = {value};")
        return tmp

    def _generate_binary(self, expr: BinaryExpression, expr_type: Type,
                         values: dict[int, str]) -> str:
        left = values[expr.left.node_id]
        right = values[expr.right.node_id]

        if expr_type != Type.STRING:
            return f"{left} {expr.operator.symbol} {right}"

        if expr.operator == BinaryOperator.ADD:
            return f"ml_concat({left}, {right})"

        raise UnsupportedFeatureError(
            f"string operator '{expr.operator.symbol}'",
            location=expr.location,
            alternative="only '+' can be compiled for strings",
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def generate_c(program: Program, symtable: Symtable, expr_types: ExprTypeTable) -> str:
    """Generate C code for a type-checked program."""
    return CodeGenerator(symtable, expr_types).generate(program)
