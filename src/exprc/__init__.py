"""
exprc - Simple Expression Compiler
==================================

A small front-end compiler for an arithmetic expression language with
integers, '+', '*', '^' and parentheses.

Pipeline
--------
    Source → Lexer → Parser → AST → Semantic Checker → Code Generator

Main Components
---------------
- **lexer**: source text to tokens
- **parser**: LL(1) recursive descent parser producing the AST
- **semantic**: integer literal range check
- **codegen**: evaluator, Lisp, C and WebAssembly text generators
- **runtime**: stack machine that executes generated WebAssembly text

Quick Start
-----------
    >>> from exprc import compile_expr
    >>> compile_expr("2^3^2")
    512
    >>> print(compile_expr("2^3^2", target="lisp"))
    (expt 2 (expt 3 2))

Or use the command-line tool:
    $ exprc "2^3^2" --target c
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from exprc.errors import (
    ExprError,
    ExprSyntaxError,
    ExprSemanticError,
    ExprNestingError,
    UnknownTargetError,
    ExecutionError,
)
from exprc.lexer import Lexer, Token, TokenCategory, tokenize
from exprc.ast import (
    ASTNode,
    ASTVisitor,
    ASTPrinter,
    nesting_guard,
    Prog,
    BinaryNode,
    Plus,
    Times,
    Pow,
    Int,
)
from exprc.parser import Parser, parse_source
from exprc.semantic import SemanticChecker
from exprc.codegen import (
    CodeGenerator,
    Evaluator,
    LispGenerator,
    CGenerator,
    WatGenerator,
    GENERATORS,
    get_generator,
)
from exprc.runtime import StackMachine
from exprc.compiler import Compiler, CompilerOptions, CompilerResult, compile_expr
from exprc.config import ExprConfig

__all__ = [
    "__version__",
    # Errors
    "ExprError",
    "ExprSyntaxError",
    "ExprSemanticError",
    "ExprNestingError",
    "UnknownTargetError",
    "ExecutionError",
    # Lexer
    "Lexer",
    "Token",
    "TokenCategory",
    "tokenize",
    # AST
    "ASTNode",
    "ASTVisitor",
    "ASTPrinter",
    "nesting_guard",
    "Prog",
    "BinaryNode",
    "Plus",
    "Times",
    "Pow",
    "Int",
    # Parser and checker
    "Parser",
    "parse_source",
    "SemanticChecker",
    # Code generation
    "CodeGenerator",
    "Evaluator",
    "LispGenerator",
    "CGenerator",
    "WatGenerator",
    "GENERATORS",
    "get_generator",
    "StackMachine",
    # Compiler
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_expr",
    "ExprConfig",
]
