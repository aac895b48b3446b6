"""
Minilang Error Root
===================

This module defines the root of the exception hierarchy for the whole
Minilang toolchain. Every exception raised by the front end, the code
generator and the command-line driver inherits from MinilangError, so
callers can catch everything the toolchain raises with a single clause:

    try:
        compile_source(source)
    except MinilangError as e:
        print(f"Error: {e}")

The concrete compiler errors (lexical, syntactic, semantic, code
generation) live in minilang.frontend.errors.
"""


class MinilangError(Exception):
    """
    Base exception for all Minilang errors.

    Raised directly only for failures that have no more specific class;
    everything else uses one of the subclasses in minilang.frontend.errors.
    """
    pass
