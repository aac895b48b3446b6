"""
Minilang Compiler Error Hierarchy
=================================

This module defines the exception hierarchy for the Minilang front end.
All exceptions inherit from FrontendError, which itself inherits from
MinilangError for consistent error handling across the toolchain.

Exception Hierarchy
-------------------
FrontendError (base for all compiler errors)
├── LexicalError - the scanner met input it cannot tokenize
│   ├── IllegalCharacterError - character matches no token rule
│   └── UnterminatedStringError - missing closing quote
├── SyntacticError - token stream does not match the grammar
│   ├── UnexpectedTokenError - wrong token at this point
│   ├── InvalidIntLiteralError - integer lexeme out of range
│   ├── InvalidFloatLiteralError - malformed float lexeme
│   └── NestingTooDeepError - nesting past the recursion limit
├── SemanticError - well-formed program violating typing/scoping rules
│   ├── DuplicateVariableError - variable declared twice
│   ├── UndeclaredVariableError - use of an unbound name
│   ├── UnexpectedTypeError - condition or assignment type mismatch
│   └── IllTypedBinopError - no promotion rule for the operand types
└── CodeGenError - code generation errors
    └── UnsupportedFeatureError - construct with no C lowering

Every stage fails fast: the first error raised aborts the stage and is
propagated to the caller unchanged.

Error Message Format
--------------------
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing

Example:
    prog.ml:3:5: error: undeclared variable 'cuont'
        cuont = cuont + 1;
        ^
    hint: did you mean 'count'?
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

from minilang.errors import MinilangError
from minilang.frontend.position import Position

if TYPE_CHECKING:
    from minilang.frontend.ast import BinaryOperator
    from minilang.frontend.scanner import Token, TokenType
    from minilang.frontend.types import Type


# =============================================================================
# Base Front-End Exception
# =============================================================================

class FrontendError(MinilangError):
    """
    Base exception for all Minilang compiler errors.

    Provides source location tracking, source line context, and an
    optional hint for every subclass.

    Attributes:
        message: The error description
        location: Where in the source the error occurred
        hint: A suggestion for fixing the error
        source_line: The actual source text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[Position] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            prog.ml:2:5: error: cannot assign 'float' to 'int'
                x = 1.5;
                ^
            hint: expected 'int', got 'float'
        """
        parts = []

        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Lexical Errors (Scanner)
# =============================================================================

class LexicalError(FrontendError):
    """
    The scanner met input it cannot turn into a token.

    Scanning does not recover: once one of these is raised the caller
    must stop pulling tokens.
    """
    pass


class IllegalCharacterError(LexicalError):
    """
    Character that starts no token.

    Example:
        1 @ 2;     # '@' is not part of the language
    """

    def __init__(
        self,
        char: str,
        location: Optional[Position] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"illegal character '{char}' (0x{ord(char):02X})",
            location=location,
            source_line=source_line,
        )


class UnterminatedStringError(LexicalError):
    """String literal not closed before the end of the line or file."""

    def __init__(
        self,
        location: Optional[Position] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "unterminated string literal",
            location=location,
            hint="add closing '\"' to complete the string",
            source_line=source_line,
        )


# =============================================================================
# Syntactic Errors (Parser)
# =============================================================================

class SyntacticError(FrontendError):
    """
    Token present but not grammatically valid at its position, or a
    numeric token whose lexeme is not a valid value.
    """
    pass


class UnexpectedTokenError(SyntacticError):
    """
    Unexpected token during parsing.

    Attributes:
        found: The offending token
        expected: Non-empty set of token types acceptable at this point
    """

    def __init__(
        self,
        found: Token,
        expected: Iterable[TokenType],
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = frozenset(expected)

        ordered = sorted(self.expected, key=lambda t: t.value)
        choices = ", ".join(t.display for t in ordered)
        if len(ordered) == 1:
            hint = f"expected {choices}"
        else:
            hint = f"expected one of: {choices}"

        super().__init__(
            f"unexpected {found.describe()}",
            location=found.position,
            hint=hint,
            source_line=source_line,
        )


class InvalidIntLiteralError(SyntacticError):
    """Integer lexeme that does not fit a signed 64-bit value."""

    def __init__(
        self,
        text: str,
        location: Optional[Position] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"invalid integer literal '{text}'",
            location=location,
            hint="integer literals must fit in 64 bits",
            source_line=source_line,
        )


class InvalidFloatLiteralError(SyntacticError):
    """Float lexeme that does not denote a finite value."""

    def __init__(
        self,
        text: str,
        location: Optional[Position] = None,
        source_line: Optional[str] = None,
    ):
        self.text = text
        super().__init__(
            f"invalid float literal '{text}'",
            location=location,
            hint="write at least one digit after the decimal point",
            source_line=source_line,
        )


class NestingTooDeepError(SyntacticError):
    """Parentheses, negations or blocks nested past the parser's depth limit."""

    def __init__(
        self,
        location: Optional[Position] = None,
        source_line: Optional[str] = None,
    ):
        super().__init__(
            "expression or block nested too deeply",
            location=location,
            hint="split the expression using intermediate variables",
            source_line=source_line,
        )


# =============================================================================
# Semantic Errors (Type Checker)
# =============================================================================

class SemanticError(FrontendError):
    """
    Grammatically valid program that violates the static typing or
    scoping rules.
    """
    pass


class DuplicateVariableError(SemanticError):
    """A 'var' declaration redeclares an existing name."""

    def __init__(
        self,
        name: str,
        location: Optional[Position] = None,
        original_location: Optional[Position] = None,
        source_line: Optional[str] = None,
    ):
        self.name = name
        self.original_location = original_location

        hint = None
        if original_location:
            hint = f"'{name}' was first declared at {original_location}"

        super().__init__(
            f"redeclaration of variable '{name}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UndeclaredVariableError(SemanticError):
    """
    Reference to a variable that has no 'var' declaration.

    Similar names from the symbol table are offered as suggestions to help
    catch typos.
    """

    def __init__(
        self,
        name: str,
        location: Optional[Position] = None,
        source_line: Optional[str] = None,
        similar_names: Optional[list[str]] = None,
    ):
        self.name = name
        self.similar_names = similar_names or []

        hint = None
        if self.similar_names:
            suggestions = ", ".join(f"'{s}'" for s in self.similar_names[:3])
            hint = f"did you mean {suggestions}?"

        super().__init__(
            f"undeclared variable '{name}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class UnexpectedTypeError(SemanticError):
    """
    Expression type incompatible with its context.

    Raised when an if/while condition is not 'int', or when the right-hand
    side of an assignment cannot be stored in the declared variable type.

    Attributes:
        expected: The type the context requires
        actual: The type the expression has
    """

    def __init__(
        self,
        expected: Type,
        actual: Type,
        location: Optional[Position] = None,
        source_line: Optional[str] = None,
    ):
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"type mismatch: expected '{expected}', got '{actual}'",
            location=location,
            source_line=source_line,
        )


class IllTypedBinopError(SemanticError):
    """
    Binary operator applied to operand types with no promotion rule.

    Example:
        print "a" * "b";     # strings only support + and -
    """

    def __init__(
        self,
        operator: BinaryOperator,
        lhs: Type,
        rhs: Type,
        location: Optional[Position] = None,
        source_line: Optional[str] = None,
    ):
        self.operator = operator
        self.lhs = lhs
        self.rhs = rhs
        super().__init__(
            f"invalid operands to '{operator.symbol}': '{lhs}' and '{rhs}'",
            location=location,
            source_line=source_line,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(FrontendError):
    """
    Error during code generation.

    Raised when the generator meets a situation it cannot handle, such as
    an expression without an entry in the expression-type table.
    """
    pass


class UnsupportedFeatureError(CodeGenError):
    """Well-typed construct that has no C lowering."""

    def __init__(
        self,
        feature: str,
        location: Optional[Position] = None,
        source_line: Optional[str] = None,
        alternative: Optional[str] = None,
    ):
        self.feature = feature
        super().__init__(
            f"unsupported feature: {feature}",
            location=location,
            hint=alternative,
            source_line=source_line,
        )
