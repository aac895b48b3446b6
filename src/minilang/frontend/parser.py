"""
Minilang Recursive Descent Parser
=================================

This module implements a recursive descent parser for Minilang. It takes
the token sequence produced by the scanner and builds the Program AST,
using exactly one token of lookahead.

Grammar (EBNF)
--------------
program     ::= decl* stmt* EOF
decl        ::= 'var' IDENTIFIER ':' type ';'
type        ::= 'int' | 'float' | 'string'
stmt        ::= read | print | assign | if | while
read        ::= 'read' IDENTIFIER ';'
print       ::= 'print' expr ';'
assign      ::= IDENTIFIER '=' expr ';'
if          ::= 'if' expr 'then' stmt* ('else' stmt*)? 'end'
while       ::= 'while' expr 'do' stmt* 'done'

Expression Precedence (lowest to highest)
-----------------------------------------
1. additive        + -     (left-associative)
2. multiplicative  * /     (left-associative)
3. factor          INT, FLOAT, STRING, IDENTIFIER, '(' expr ')', '-' expr

Unary minus takes a whole expression, so '-a + b' is '-(a + b)' and
'a * -b + c' is 'a * -(b + c)'.

Node Identity
-------------
Every expression node takes the next value of a counter owned by the
parser at the moment it is constructed. Operands are built before the
operator node that combines them, so for 'a + 1' the ids are
a=0, 1=1, (a + 1)=2. The numbering depends only on the input. This is
construction order, not a pre-order walk of the finished tree, and is
kept that way on purpose.

Error Handling
--------------
The parser stops at the first error. UnexpectedTokenError carries the
offending token and the set of token types that would have been accepted.
Input nested deeper than the interpreter's recursion limit (parentheses,
negations, if/while blocks) is reported as NestingTooDeepError.

Example Usage
-------------
>>> from minilang.frontend.parser import parse_source
>>> program = parse_source("var x : int; x = 3; print x;")
>>> len(program.declarations), len(program.statements)
(1, 2)
"""

from typing import Callable, Iterable, Optional

from minilang.frontend.scanner import Scanner, Token, TokenType
from minilang.frontend.types import Type
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
    BinaryOperator,
)
from minilang.frontend.errors import (
    UnexpectedTokenError,
    InvalidIntLiteralError,
    InvalidFloatLiteralError,
    NestingTooDeepError,
)


# Token types that can begin a statement
STATEMENT_START = frozenset({
    TokenType.READ,
    TokenType.PRINT,
    TokenType.IDENTIFIER,
    TokenType.IF,
    TokenType.WHILE,
})

# Token types that can begin a factor
FACTOR_START = frozenset({
    TokenType.INT,
    TokenType.FLOAT,
    TokenType.STRING,
    TokenType.IDENTIFIER,
    TokenType.LPAREN,
    TokenType.MINUS,
})

TYPE_KEYWORDS: dict[TokenType, Type] = {
    TokenType.TYPE_INT: Type.INT,
    TokenType.TYPE_FLOAT: Type.FLOAT,
    TokenType.TYPE_STRING: Type.STRING,
}

ADDITIVE_OPERATORS: dict[TokenType, BinaryOperator] = {
    TokenType.PLUS: BinaryOperator.ADD,
    TokenType.MINUS: BinaryOperator.SUB,
}

MULTIPLICATIVE_OPERATORS: dict[TokenType, BinaryOperator] = {
    TokenType.STAR: BinaryOperator.MUL,
    TokenType.SLASH: BinaryOperator.DIV,
}

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1


class Parser:
    """
    Recursive descent parser for Minilang.

    The parser owns the token cursor and the node-identity counter; it is
    the only place AST nodes are constructed. A Parser instance parses
    one token sequence.

    Attributes:
        tokens: Token sequence ending with EOF
        filename: Source filename for error reporting
        source_lines: Original source lines for error context
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        if not tokens or tokens[-1].type != TokenType.EOF:
            raise ValueError("token sequence must end with an EOF token")

        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []

        # Current position in token stream
        self._pos = 0

        # Next expression node identity
        self._next_node_id = 0

    def parse_program(self) -> Program:
        """
        Parse the whole token sequence.

        Returns:
            The Program AST

        Raises:
            SyntacticError: On the first grammar or literal error
        """
        try:
            return self._parse_program()
        except RecursionError:
            found = self._peek()
            raise NestingTooDeepError(
                found.position,
                self._get_source_line(found.position.line),
            ) from None

    def _parse_program(self) -> Program:
        declarations = []
        while self._check(TokenType.VAR):
            declarations.append(self._parse_declaration())

        statements = self._parse_statements()

        if not self._check(TokenType.EOF):
            expected = set(STATEMENT_START) | {TokenType.EOF}
            if not statements:
                expected.add(TokenType.VAR)
            raise self._unexpected(expected)

        return Program(declarations=declarations, statements=statements)

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _peek(self) -> Token:
        """Look at the current token."""
        return self.tokens[self._pos]

    def _advance(self) -> Token:
        """Consume and return the current token; EOF is never consumed."""
        token = self.tokens[self._pos]
        if token.type != TokenType.EOF:
            self._pos += 1
        return token

    def _check(self, *types: TokenType) -> bool:
        """Check if current token is one of the given types."""
        return self._peek().type in types

    def _match(self, *types: TokenType) -> Optional[Token]:
        """
        Consume current token if it matches one of the types.

        Returns:
            The consumed token, or None if no match
        """
        if self._check(*types):
            return self._advance()
        return None

    def _expect(self, token_type: TokenType) -> Token:
        """
        Expect and consume a specific token type.

        Raises:
            UnexpectedTokenError: If the current token has another type
        """
        if self._check(token_type):
            return self._advance()
        raise self._unexpected({token_type})

    def _unexpected(self, expected: Iterable[TokenType]) -> UnexpectedTokenError:
        """Build an UnexpectedTokenError for the current token."""
        found = self._peek()
        return UnexpectedTokenError(
            found,
            expected,
            self._get_source_line(found.position.line),
        )

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    def _new_node_id(self) -> int:
        """Hand out the next expression node identity."""
        node_id = self._next_node_id
        self._next_node_id += 1
        return node_id

    # =========================================================================
    # Declarations
    # =========================================================================

    def _parse_declaration(self) -> Declaration:
        """Parse 'var' IDENTIFIER ':' type ';'."""
        location = self._expect(TokenType.VAR).position
        name = self._expect(TokenType.IDENTIFIER).lexeme
        self._expect(TokenType.COLON)

        type_token = self._match(*TYPE_KEYWORDS)
        if type_token is None:
            raise self._unexpected(TYPE_KEYWORDS)

        self._expect(TokenType.SEMICOLON)

        return Declaration(
            location=location,
            name=name,
            var_type=TYPE_KEYWORDS[type_token.type],
        )

    # =========================================================================
    # Statements
    # =========================================================================

    def _parse_statements(self) -> list[Statement]:
        """Parse statements while the current token can start one."""
        statements = []
        while self._peek().type in STATEMENT_START:
            statements.append(self._parse_statement())
        return statements

    def _parse_block(self, *terminators: TokenType) -> list[Statement]:
        """Parse a statement list that must be followed by one of the terminators."""
        statements = self._parse_statements()
        if not self._check(*terminators):
            raise self._unexpected(STATEMENT_START | set(terminators))
        return statements

    def _parse_statement(self) -> Statement:
        """Parse any statement."""
        token = self._peek()

        if token.type == TokenType.READ:
            return self._parse_read_statement()
        if token.type == TokenType.PRINT:
            return self._parse_print_statement()
        if token.type == TokenType.IDENTIFIER:
            return self._parse_assign_statement()
        if token.type == TokenType.IF:
            return self._parse_if_statement()
        if token.type == TokenType.WHILE:
            return self._parse_while_statement()

        raise self._unexpected(STATEMENT_START)

    def _parse_read_statement(self) -> ReadStatement:
        """Parse read statement."""
        location = self._expect(TokenType.READ).position
        name = self._expect(TokenType.IDENTIFIER).lexeme
        self._expect(TokenType.SEMICOLON)
        return ReadStatement(location=location, name=name)

    def _parse_print_statement(self) -> PrintStatement:
        """Parse print statement."""
        location = self._expect(TokenType.PRINT).position
        expression = self._parse_expression()
        self._expect(TokenType.SEMICOLON)
        return PrintStatement(location=location, expression=expression)

    def _parse_assign_statement(self) -> AssignStatement:
        """Parse assignment; its location is the target identifier's."""
        target = self._expect(TokenType.IDENTIFIER)
        self._expect(TokenType.EQUAL)
        expression = self._parse_expression()
        self._expect(TokenType.SEMICOLON)
        return AssignStatement(
            location=target.position,
            name=target.lexeme,
            expression=expression,
        )

    def _parse_if_statement(self) -> IfStatement:
        """Parse if statement; a missing else clause gives an empty else branch."""
        location = self._expect(TokenType.IF).position
        condition = self._parse_expression()
        self._expect(TokenType.THEN)

        then_branch = self._parse_block(TokenType.ELSE, TokenType.END)

        else_branch = []
        if self._match(TokenType.ELSE):
            else_branch = self._parse_block(TokenType.END)

        self._expect(TokenType.END)

        return IfStatement(
            location=location,
            condition=condition,
            then_branch=then_branch,
            else_branch=else_branch,
        )

    def _parse_while_statement(self) -> WhileStatement:
        """Parse while statement."""
        location = self._expect(TokenType.WHILE).position
        condition = self._parse_expression()
        self._expect(TokenType.DO)

        body = self._parse_block(TokenType.DONE)
        self._expect(TokenType.DONE)

        return WhileStatement(
            location=location,
            condition=condition,
            body=body,
        )

    # =========================================================================
    # Expressions
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Parse additive expression (+ -)."""
        return self._parse_binary(self._parse_term, ADDITIVE_OPERATORS)

    def _parse_term(self) -> Expression:
        """Parse multiplicative expression (* /)."""
        return self._parse_binary(self._parse_factor, MULTIPLICATIVE_OPERATORS)

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[TokenType, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Map of token types to binary operators
        """
        expr = operand_parser()

        while self._peek().type in operators:
            op_token = self._advance()
            right = operand_parser()
            expr = BinaryExpression(
                location=expr.location,
                node_id=self._new_node_id(),
                operator=operators[op_token.type],
                left=expr,
                right=right,
            )

        return expr

    def _parse_factor(self) -> Expression:
        """Parse factor (literals, identifiers, parenthesized, negation)."""
        token = self._peek()

        if token.type == TokenType.INT:
            self._advance()
            return IntLiteral(
                location=token.position,
                node_id=self._new_node_id(),
                value=self._int_value(token),
            )

        if token.type == TokenType.FLOAT:
            self._advance()
            return FloatLiteral(
                location=token.position,
                node_id=self._new_node_id(),
                value=self._float_value(token),
            )

        if token.type == TokenType.STRING:
            self._advance()
            return StringLiteral(
                location=token.position,
                node_id=self._new_node_id(),
                value=token.lexeme,
            )

        if token.type == TokenType.IDENTIFIER:
            self._advance()
            return IdentifierExpression(
                location=token.position,
                node_id=self._new_node_id(),
                name=token.lexeme,
            )

        if token.type == TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression()
            self._expect(TokenType.RPAREN)
            return expr

        if token.type == TokenType.MINUS:
            self._advance()
            operand = self._parse_expression()
            return NegateExpression(
                location=token.position,
                node_id=self._new_node_id(),
                operand=operand,
            )

        raise self._unexpected(FACTOR_START)

    # =========================================================================
    # Literal Values
    # =========================================================================

    def _int_value(self, token: Token) -> int:
        """Convert an INT lexeme, rejecting values outside 64 bits."""
        # Long lexemes are rejected before int(), which refuses huge digit strings
        digits = token.lexeme.lstrip("0")
        value = int(digits or "0") if len(digits) <= len(str(INT64_MAX)) else None
        if value is None or not INT64_MIN <= value <= INT64_MAX:
            raise InvalidIntLiteralError(
                token.lexeme,
                token.position,
                self._get_source_line(token.position.line),
            )
        return value

    def _float_value(self, token: Token) -> float:
        """Convert a FLOAT lexeme, rejecting a bare trailing '.' and overflow."""
        text = token.lexeme
        if text.endswith(".") or float(text) == float("inf"):
            raise InvalidFloatLiteralError(
                text,
                token.position,
                self._get_source_line(token.position.line),
            )
        return float(text)


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_tokens(tokens: list[Token], source: Optional[str] = None,
                 filename: str = "<input>") -> Program:
    """
    Parse a token sequence into a Program.

    Args:
        tokens: Tokens ending with EOF
        source: Original source text, used only for error context
        filename: Source filename for error messages
    """
    source_lines = source.splitlines() if source is not None else None
    return Parser(tokens, filename, source_lines).parse_program()


def parse_source(source: str, filename: str = "<input>",
                 enable_strings: bool = True) -> Program:
    """
    Parse Minilang source code into an AST.

    This is a convenience function that combines scanning and parsing.

    Raises:
        LexicalError: If scanning fails
        SyntacticError: If parsing fails
    """
    scanner = Scanner(source, filename, enable_strings=enable_strings)
    tokens = list(scanner.tokenize())
    return parse_tokens(tokens, source, filename)
