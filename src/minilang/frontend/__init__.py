"""
Minilang Compiler Front End
===========================

This package implements the front end of the Minilang compiler, plus a
small C back end:

- A scanner turning source text into tokens
- A recursive descent parser producing an AST
- A type checker producing the symbol and expression-type tables
- A code generator emitting portable C

Pipeline
--------
    Source → Scanner → Parser → AST → Type Checker → Code Generator → C

Each stage stops at its first error and raises a FrontendError subclass
carrying the source position.

Usage
-----
>>> from minilang.frontend import scan, parse, typecheck
>>> source = 'var n : int; read n; print n * 2;'
>>> program = parse(scan(source))
>>> symtable, expr_types = typecheck(program)
>>> symtable
{'n': <Type.INT: 'int'>}

Language Summary
----------------
- Types: int, float, string (no booleans; conditions are int)
- Statements: read, print, assignment, if/then/else/end, while/do/done
- Operators: + - * / and unary minus; int promotes to float
- Comments: '#' to end of line
"""

from minilang.frontend.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    scan,
    parse,
    typecheck,
    compile_source,
    compile_file,
)
from minilang.frontend.codegen import CodeGenerator, generate_c
from minilang.frontend.errors import (
    FrontendError,
    LexicalError,
    IllegalCharacterError,
    UnterminatedStringError,
    SyntacticError,
    UnexpectedTokenError,
    InvalidIntLiteralError,
    InvalidFloatLiteralError,
    NestingTooDeepError,
    SemanticError,
    DuplicateVariableError,
    UndeclaredVariableError,
    UnexpectedTypeError,
    IllTypedBinopError,
    CodeGenError,
    UnsupportedFeatureError,
)
from minilang.frontend.position import Position
from minilang.frontend.scanner import Scanner, Token, TokenType
from minilang.frontend.parser import Parser, parse_source
from minilang.frontend.typecheck import TypeChecker, Symtable, ExprTypeTable
from minilang.frontend.types import Type
from minilang.frontend.ast import (
    Program,
    Declaration,
    ReadStatement,
    PrintStatement,
    AssignStatement,
    IfStatement,
    WhileStatement,
    IdentifierExpression,
    IntLiteral,
    FloatLiteral,
    StringLiteral,
    NegateExpression,
    BinaryExpression,
    BinaryOperator,
    ASTPrinter,
)

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "scan",
    "parse",
    "typecheck",
    "generate_c",
    "compile_source",
    "compile_file",
    "parse_source",
    # Errors
    "FrontendError",
    "LexicalError",
    "IllegalCharacterError",
    "UnterminatedStringError",
    "SyntacticError",
    "UnexpectedTokenError",
    "InvalidIntLiteralError",
    "InvalidFloatLiteralError",
    "NestingTooDeepError",
    "SemanticError",
    "DuplicateVariableError",
    "UndeclaredVariableError",
    "UnexpectedTypeError",
    "IllTypedBinopError",
    "CodeGenError",
    "UnsupportedFeatureError",
    # Scanner
    "Position",
    "Scanner",
    "Token",
    "TokenType",
    # Parser
    "Parser",
    # Type Checker
    "TypeChecker",
    "Symtable",
    "ExprTypeTable",
    "Type",
    # Code Generator
    "CodeGenerator",
    # AST Nodes
    "Program",
    "Declaration",
    "ReadStatement",
    "PrintStatement",
    "AssignStatement",
    "IfStatement",
    "WhileStatement",
    "IdentifierExpression",
    "IntLiteral",
    "FloatLiteral",
    "StringLiteral",
    "NegateExpression",
    "BinaryExpression",
    "BinaryOperator",
    "ASTPrinter",
]
