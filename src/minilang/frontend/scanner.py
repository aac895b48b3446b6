"""
Minilang Scanner (Tokenizer)
============================

This module implements the scanner for Minilang. It converts source text
into a stream of classified tokens for the parser.

Token Categories
----------------
- Values: integer and float literals, string literals, identifiers
- Punctuation: + - * / = ( ) : ; ,
- Keywords: if then else end while do done read print var int float string
- Terminal: EOF, always the last token, exactly once

Numbers
-------
A digit starts a maximal run of digits. If a '.' follows, a second run of
digits is scanned and the token is a FLOAT, otherwise an INT. There is no
exponent notation, and the lexeme is not validated here: '1.' is a FLOAT
token whose value the parser rejects.

Comments
--------
'#' starts a comment running to the end of the line.

Example Usage
-------------
>>> from minilang.frontend.scanner import Scanner
>>> for token in Scanner("var x : int;").tokenize():
...     print(token)
Token(VAR, 1:1)
Token(IDENTIFIER, 'x', 1:5)
Token(COLON, 1:7)
Token(TYPE_INT, 1:9)
Token(SEMICOLON, 1:12)
Token(EOF, 1:13)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional
import string

from minilang.frontend.errors import (
    IllegalCharacterError,
    UnterminatedStringError,
)
from minilang.frontend.position import Position, PositionTracker


# =============================================================================
# Token Type Enumeration
# =============================================================================

class TokenType(Enum):
    """
    Token types for the Minilang language.

    The set is closed: the scanner produces nothing else and the parser
    handles nothing else. Keywords are distinguished from identifiers to
    simplify parsing.
    """

    # === Values (carry a lexeme) ===
    INT = auto()            # 42
    FLOAT = auto()          # 3.14
    STRING = auto()         # "text"
    IDENTIFIER = auto()     # variable names

    # === Punctuation ===
    PLUS = auto()           # +
    MINUS = auto()          # -
    STAR = auto()           # *
    SLASH = auto()          # /
    EQUAL = auto()          # =
    LPAREN = auto()         # (
    RPAREN = auto()         # )
    COLON = auto()          # :
    SEMICOLON = auto()      # ;
    COMMA = auto()          # ,

    # === Keywords ===
    IF = auto()             # if
    THEN = auto()           # then
    ELSE = auto()           # else
    END = auto()            # end
    WHILE = auto()          # while
    DO = auto()             # do
    DONE = auto()           # done
    READ = auto()           # read
    PRINT = auto()          # print
    VAR = auto()            # var
    TYPE_INT = auto()       # int
    TYPE_FLOAT = auto()     # float
    TYPE_STRING = auto()    # string

    # === Terminal ===
    EOF = auto()            # end of input

    @property
    def display(self) -> str:
        """Human-readable form used in diagnostics."""
        return _DISPLAY_NAMES[self]


# =============================================================================
# Keyword and Punctuation Tables
# =============================================================================

KEYWORDS: dict[str, TokenType] = {
    "if": TokenType.IF,
    "then": TokenType.THEN,
    "else": TokenType.ELSE,
    "end": TokenType.END,
    "while": TokenType.WHILE,
    "do": TokenType.DO,
    "done": TokenType.DONE,
    "read": TokenType.READ,
    "print": TokenType.PRINT,
    "var": TokenType.VAR,
    "int": TokenType.TYPE_INT,
    "float": TokenType.TYPE_FLOAT,
    "string": TokenType.TYPE_STRING,
}

SINGLE_CHAR_TOKENS: dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "=": TokenType.EQUAL,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
    ":": TokenType.COLON,
    ";": TokenType.SEMICOLON,
    ",": TokenType.COMMA,
}

_DISPLAY_NAMES: dict[TokenType, str] = {
    TokenType.INT: "integer literal",
    TokenType.FLOAT: "float literal",
    TokenType.STRING: "string literal",
    TokenType.IDENTIFIER: "identifier",
    TokenType.EOF: "end of input",
}
_DISPLAY_NAMES.update({t: f"'{c}'" for c, t in SINGLE_CHAR_TOKENS.items()})
_DISPLAY_NAMES.update({t: f"'{k}'" for k, t in KEYWORDS.items()})


# =============================================================================
# Token Data Class
# =============================================================================

@dataclass(frozen=True)
class Token:
    """
    A single token from Minilang source code.

    Attributes:
        type: The TokenType classification
        lexeme: Source text for INT, FLOAT, STRING and IDENTIFIER tokens
                (for strings, the text between the quotes); None otherwise
        position: Position of the token's first character
    """
    type: TokenType
    lexeme: Optional[str]
    position: Position

    def __repr__(self) -> str:
        """Format token for debugging output."""
        pos = f"{self.position.line}:{self.position.column}"
        if self.lexeme is not None:
            return f"Token({self.type.name}, {self.lexeme!r}, {pos})"
        return f"Token({self.type.name}, {pos})"

    def describe(self) -> str:
        """Describe the token for an error message."""
        if self.type == TokenType.STRING:
            return f'string literal "{self.lexeme}"'
        if self.lexeme is not None:
            return f"{self.type.display} '{self.lexeme}'"
        return self.type.display


# =============================================================================
# Scanner Implementation
# =============================================================================

class Scanner:
    """
    Tokenizes Minilang source code.

    Pull tokens one at a time with next_token(), or iterate tokenize() to
    get the whole sequence ending with EOF. Once EOF has been reached,
    next_token() keeps returning EOF.

    Errors are not recovered from: after an IllegalCharacterError or
    UnterminatedStringError the caller must stop pulling tokens.

    Usage:
        scanner = Scanner(source_text, filename)
        tokens = list(scanner.tokenize())

    Attributes:
        source: The source code being tokenized
        filename: Name of the source file (for error reporting)
        enable_strings: False selects the int/float-only language variant,
                        where '"' is illegal and 'string' is an identifier
    """

    # Characters that can start an identifier
    IDENT_START = string.ascii_letters + "_"

    # Characters that can continue an identifier
    IDENT_CHARS = string.ascii_letters + string.digits + "_"

    DIGITS = frozenset(string.digits)

    WHITESPACE = " \t\r\n\f\v"

    def __init__(
        self,
        source: str,
        filename: str = "<input>",
        enable_strings: bool = True,
    ):
        self.source = source
        self.filename = filename
        self.enable_strings = enable_strings

        self._pos = 0
        self._tracker = PositionTracker(filename)

        # Track line start offset for error context
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source code.

        Yields:
            Token objects, the last one of type EOF

        Raises:
            LexicalError: If a character matches no token rule
        """
        while True:
            token = self.next_token()
            yield token
            if token.type == TokenType.EOF:
                return

    def next_token(self) -> Token:
        """
        Scan and return the next token.

        Raises:
            IllegalCharacterError: If the current character starts no token
            UnterminatedStringError: If a string literal is not closed
        """
        self._skip_whitespace_and_comments()

        start = self._tracker.snapshot()

        if self._at_end():
            return Token(TokenType.EOF, None, start)

        char = self._peek()

        if char in SINGLE_CHAR_TOKENS:
            self._advance()
            return Token(SINGLE_CHAR_TOKENS[char], None, start)

        if char in self.DIGITS:
            return self._scan_number(start)

        if char in self.IDENT_START:
            return self._scan_identifier(start)

        if char == '"' and self.enable_strings:
            return self._scan_string(start)

        raise IllegalCharacterError(char, start, self._get_current_line())

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        """Check if we've reached the end of source."""
        return self._pos >= len(self.source)

    def _peek(self) -> str:
        """Look at the current character; empty string at end of source."""
        if self._at_end():
            return ""
        return self.source[self._pos]

    def _advance(self) -> str:
        """Consume and return the current character, updating the position."""
        if self._at_end():
            return ""

        char = self.source[self._pos]
        self._pos += 1
        self._tracker.advance(char)
        if char == "\n":
            self._line_start_pos = self._pos

        return char

    # =========================================================================
    # Whitespace and Comment Handling
    # =========================================================================

    def _skip_whitespace_and_comments(self) -> None:
        """Skip whitespace and '#' comments, in any order and number."""
        while not self._at_end():
            char = self._peek()

            if char in self.WHITESPACE:
                self._advance()
                continue

            if char == "#":
                while not self._at_end() and self._peek() != "\n":
                    self._advance()
                continue

            break

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_number(self, start: Position) -> Token:
        """Scan an INT, or a FLOAT if the digit run is followed by '.'."""
        chars = self._scan_digits()

        if self._peek() != ".":
            return Token(TokenType.INT, "".join(chars), start)

        chars.append(self._advance())
        chars.extend(self._scan_digits())
        return Token(TokenType.FLOAT, "".join(chars), start)

    def _scan_digits(self) -> list[str]:
        """Consume a maximal run of decimal digits."""
        chars = []
        while self._peek() in self.DIGITS:
            chars.append(self._advance())
        return chars

    def _scan_identifier(self, start: Position) -> Token:
        """
        Scan an identifier or keyword.

        Identifiers start with a letter or underscore and continue with
        letters, digits and underscores. Keywords are an exact match
        against the keyword table.
        """
        chars = []
        while self._peek() and self._peek() in self.IDENT_CHARS:
            chars.append(self._advance())

        name = "".join(chars)

        token_type = KEYWORDS.get(name)
        if token_type == TokenType.TYPE_STRING and not self.enable_strings:
            token_type = None

        if token_type is not None:
            return Token(token_type, None, start)

        return Token(TokenType.IDENTIFIER, name, start)

    def _scan_string(self, start: Position) -> Token:
        """Scan a double-quoted string literal confined to one line."""
        source_line = self._get_current_line()
        self._advance()  # consume opening "

        chars = []
        while not self._at_end():
            char = self._peek()

            if char == '"':
                self._advance()  # consume closing "
                return Token(TokenType.STRING, "".join(chars), start)

            if char == "\n":
                break

            chars.append(self._advance())

        raise UnterminatedStringError(start, source_line)

    # =========================================================================
    # Utility Methods
    # =========================================================================

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]
