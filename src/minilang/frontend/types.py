"""
Minilang Type System
====================

Minilang has three static types and no type variables:

| Type   | Literal form | C representation |
|--------|--------------|------------------|
| int    | 42           | int              |
| float  | 3.14         | float            |
| string | "text"       | const char *     |

There is no boolean type; if/while conditions use int.

Promotion Rules (binary + - * /)
--------------------------------
| left   | right  | result                  |
|--------|--------|-------------------------|
| int    | int    | int                     |
| int    | float  | float                   |
| float  | int    | float                   |
| float  | float  | float                   |
| string | string | string (only + and -)   |

Every other pairing is ill-typed.

Assignment Compatibility
------------------------
int := int, float := int, float := float, string := string.
Narrowing (int := float) is rejected.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from minilang.frontend.ast import BinaryOperator


class Type(Enum):
    """The static types of Minilang."""
    INT = "int"
    FLOAT = "float"
    STRING = "string"

    def __str__(self) -> str:
        """Return the Minilang type name."""
        return self.value

    @property
    def c_name(self) -> str:
        """The C type used for variables and temporaries of this type."""
        return _C_NAMES[self]

    @property
    def is_numeric(self) -> bool:
        """Return True for int and float."""
        return self in (Type.INT, Type.FLOAT)


_C_NAMES = {
    Type.INT: "int",
    Type.FLOAT: "float",
    Type.STRING: "const char *",
}

_NUMERIC_PROMOTIONS: dict[tuple[Type, Type], Type] = {
    (Type.INT, Type.INT): Type.INT,
    (Type.INT, Type.FLOAT): Type.FLOAT,
    (Type.FLOAT, Type.INT): Type.FLOAT,
    (Type.FLOAT, Type.FLOAT): Type.FLOAT,
}

_ASSIGNABLE: frozenset[tuple[Type, Type]] = frozenset({
    (Type.INT, Type.INT),
    (Type.FLOAT, Type.INT),
    (Type.FLOAT, Type.FLOAT),
    (Type.STRING, Type.STRING),
})


def binop_result_type(operator: BinaryOperator, lhs: Type, rhs: Type) -> Optional[Type]:
    """
    Result type of a binary operator applied to the given operand types.

    Args:
        operator: The binary operator
        lhs: Type of the left operand
        rhs: Type of the right operand

    Returns:
        The result type, or None if no rule admits this combination
    """
    from minilang.frontend.ast import BinaryOperator

    numeric = _NUMERIC_PROMOTIONS.get((lhs, rhs))
    if numeric is not None:
        return numeric

    if lhs == Type.STRING and rhs == Type.STRING:
        if operator in (BinaryOperator.ADD, BinaryOperator.SUB):
            return Type.STRING

    return None


def is_assignable(target: Type, value: Type) -> bool:
    """Return True if a value of type 'value' may be stored in a 'target' variable."""
    return (target, value) in _ASSIGNABLE
