"""
Source Position Tracking
========================

Every token and AST node carries the position of its first character so
that diagnostics can point at the exact spot in the source.

Two classes are provided:

- Position: an immutable (line, column) pair plus the filename, attached
  to tokens, nodes and errors.
- PositionTracker: the mutable cursor the scanner advances one character
  at a time. A newline moves to column 1 of the next line; any other
  character moves one column right.

Lines and columns are both 1-indexed.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class Position:
    """
    A location in source code.

    Frozen so a captured position can be shared between tokens, nodes and
    errors without being modified afterwards.

    Attributes:
        line: Line number (1-indexed)
        column: Column number (1-indexed)
        filename: Name of the source file (or "<input>" for string input)
    """
    line: int
    column: int
    filename: str = "<input>"

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"


class PositionTracker:
    """
    Mutable (line, column) cursor advanced character by character.

    Usage:
        tracker = PositionTracker("prog.ml")
        for char in text:
            tracker.advance(char)
        pos = tracker.snapshot()
    """

    def __init__(self, filename: str = "<input>", line: int = 1, column: int = 1):
        self.filename = filename
        self.line = line
        self.column = column

    def advance(self, char: str) -> None:
        """Move the cursor past a single character."""
        if char == "\n":
            self.line += 1
            self.column = 1
        else:
            self.column += 1

    def snapshot(self) -> Position:
        """Return the current cursor as an immutable Position."""
        return Position(self.line, self.column, self.filename)
