"""
Minilang Command-Line Interface
===============================

This package provides the 'mlc' command-line driver, a Click-based
application exposing each compiler stage as a subcommand:

- **scan** / **tokens**: lexical analysis
- **parse** / **ast**: syntax analysis
- **typecheck** / **typed-ast**: static type checking
- **c**: C code generation
"""

__all__ = ["mlc"]
