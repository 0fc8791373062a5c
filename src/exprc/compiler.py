"""
exprc Compiler Main Module
==========================

This module orchestrates the complete compilation of one expression:

    Source → Lex → Parse → Semantic Check → Generate

Usage
-----
Command line:
    $ exprc "2^3^2" --target wat

Programmatic:
    >>> from exprc import compile_expr
    >>> compile_expr("2+3*4")
    14
    >>> compile_expr("2+3*4", target="lisp")
    '(+ 2 (* 3 4))'

Error Handling
--------------
The pipeline is strictly linear. ExprSyntaxError from the parser or
ExprSemanticError from the checker propagates to the caller unchanged
and no later stage runs. Nothing is recovered or retried.
"""

from dataclasses import dataclass, field
from typing import Optional, Union
import logging

from exprc.ast import Prog, nesting_guard
from exprc.codegen import DEFAULT_TARGET, get_generator
from exprc.lexer import Lexer, Token
from exprc.parser import Parser
from exprc.semantic import SemanticChecker


logger = logging.getLogger(__name__)


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        target: Name of the code generator to run (eval, lisp, c, wat)
    """
    target: str = DEFAULT_TARGET


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        source: The expression text
        target: Target the output was generated for
        tokens: Tokens produced by the lexer
        ast: The checked tree
        output: Generated output (int for eval, str otherwise)
    """
    source: str = ""
    target: str = DEFAULT_TARGET
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Prog] = None
    output: Union[int, str, None] = None


class Compiler:
    """
    Expression compiler.

    Example:
        compiler = Compiler(CompilerOptions(target="c"))
        result = compiler.compile_source("2 * (3 + 4)")
        print(result.output)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str) -> CompilerResult:
        """
        Compile one expression.

        Raises:
            ExprSyntaxError: If the source does not parse
            ExprSemanticError: If a literal is out of range
            ExprNestingError: If the expression nests too deeply
            UnknownTargetError: If the configured target does not exist
        """
        # Resolve the target first so a bad option fails before any work.
        generator = get_generator(self.options.target)
        result = CompilerResult(source=source, target=self.options.target)

        # Stage 1: Lexical analysis
        result.tokens = self._lex(source)
        logger.debug("Lexed %d tokens", len(result.tokens))

        # Stage 2: Parsing
        tree = self._parse(result.tokens)

        with nesting_guard(len(result.tokens)):
            # Stage 3: Semantic check
            result.ast = SemanticChecker().check(tree)

            # Stage 4: Code generation
            result.output = generator.generate(result.ast)
        logger.debug("Generated %s output", self.options.target)
        return result

    def _lex(self, source: str) -> list[Token]:
        return list(Lexer(source).tokenize())

    def _parse(self, tokens: list[Token]) -> Prog:
        return Parser(tokens).parse()


def compile_expr(source: str, target: str = DEFAULT_TARGET) -> Union[int, str]:
    """
    Compile an expression and return only the generated output.

    Args:
        source: Expression text
        target: eval, lisp, c or wat

    Returns:
        int for the eval target, program text for the others
    """
    return Compiler(CompilerOptions(target=target)).compile_source(source).output
