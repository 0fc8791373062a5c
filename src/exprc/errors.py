"""
exprc Error Hierarchy
=====================

This module defines the exception hierarchy for the expression compiler.
All exceptions inherit from ExprError, allowing callers to catch every
compiler-related error with a single except clause.

Exception Hierarchy
-------------------
ExprError (base)
├── ExprSyntaxError - input does not match the grammar
├── ExprSemanticError - integer literal out of range
├── ExprNestingError - expression too deeply nested to process
├── UnknownTargetError - no code generator registered under a name
└── ExecutionError - stack-machine module could not be executed

Error messages follow this format:
    error: description

Syntax errors deliberately carry no position: every syntax error is
reported as the same "bad syntax" message.
"""

from typing import Iterable, Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class ExprError(Exception):
    """
    Base exception for all expression compiler errors.

        try:
            compile_expr("2 ^ (3 + 4")
        except ExprError as e:
            print(e)

    Attributes:
        message: The error description (without the "error:" prefix)
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format as 'error: description'."""
        return f"error: {self.message}"


# =============================================================================
# Compilation Errors
# =============================================================================

class ExprSyntaxError(ExprError):
    """
    Syntax error in expression source.

    Raised by the parser when the current token cannot start or continue
    any production it expects. This covers premature end of input, stray
    characters (BAD_TOKEN), unbalanced parentheses and trailing tokens.
    All syntax errors are reported identically.
    """

    MESSAGE = "bad syntax"

    def __init__(self):
        super().__init__(self.MESSAGE)


class ExprSemanticError(ExprError):
    """
    Integer literal does not fit the supported integer width.

    Attributes:
        literal: The source text of the offending literal
    """

    def __init__(self, literal: str):
        self.literal = literal
        super().__init__(f"integer literal too large: {literal}")


class ExprNestingError(ExprError):
    """Expression nests deeper than the interpreter stack allows."""

    MESSAGE = "expression nested too deeply"

    def __init__(self):
        super().__init__(self.MESSAGE)


# =============================================================================
# Configuration and Runtime Errors
# =============================================================================

class UnknownTargetError(ExprError):
    """
    Requested code generation target does not exist.

    Attributes:
        target: The name that was requested
        available: Names of the registered targets
    """

    def __init__(self, target: str, available: Optional[Iterable[str]] = None):
        self.target = target
        self.available = sorted(available or [])
        message = f"unknown target '{target}'"
        if self.available:
            message += f" (choose from: {', '.join(self.available)})"
        super().__init__(message)


class ExecutionError(ExprError):
    """
    Stack-machine module could not be loaded or executed.

    Raised when:
    - The module header or footer is malformed
    - A required import or export is missing
    - An instruction is unknown
    - The operand stack underflows or holds leftover values
    """
    pass
