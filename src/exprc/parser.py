"""
Expression Recursive Descent Parser
===================================

This module implements an LL(1) recursive descent parser for the
expression language. It takes the token stream from the lexer and
builds an Abstract Syntax Tree (AST).

Source Grammar
--------------
The natural grammar uses left recursion for the left-associative
operators and right recursion for '^':

    Exp  ::= Exp '+' Term  | Term
    Term ::= Term '*' Pow  | Pow
    Pow  ::= Fact '^' Pow  | Fact
    Fact ::= INT | '(' Exp ')'

LL(1) Grammar
-------------
Left recursion is replaced by iteration, which keeps left associativity
by folding each new operand onto the tree built so far:

    Prog ::= Exp EOF
    Exp  ::= Term ('+' Term)*
    Term ::= Pow ('*' Pow)*
    Pow  ::= Fact ('^' Pow)?
    Fact ::= INT | '(' Exp ')'

Operator Precedence (lowest to highest)
---------------------------------------
1. additive        +   left
2. multiplicative  *   left
3. power           ^   right
4. primary         INT, '(' Exp ')'

Example Usage
-------------
>>> from exprc.parser import parse_source
>>> print(parse_source("2+3*4").expression)
Plus [PLUS, "+"]
"""

from typing import Iterable
import logging

from exprc.lexer import Lexer, Token, TokenCategory
from exprc.ast import ASTNode, Int, Plus, Pow, Prog, Times, nesting_guard
from exprc.errors import ExprSyntaxError


logger = logging.getLogger(__name__)


class Parser:
    """
    LL(1) recursive descent parser for expressions.

    The parser reads the token stream strictly forward with a single
    token of lookahead. There is no error recovery: the first token that
    does not fit the grammar raises ExprSyntaxError.

    Attributes:
        tokens: Materialized token list, ending with EOF
    """

    def __init__(self, tokens: Iterable[Token]):
        """
        Initialize the parser.

        Args:
            tokens: Tokens from the lexer (a generator is fine)
        """
        self.tokens = list(tokens)
        if not self.tokens or self.tokens[-1].category != TokenCategory.EOF:
            self.tokens.append(Token(TokenCategory.EOF, None))

        # Current position in token stream
        self._pos = 0

    def parse(self) -> Prog:
        """
        Parse the token stream into an AST.

        Returns:
            Prog node wrapping the top-level expression

        Raises:
            ExprSyntaxError: If the tokens do not form an expression
            ExprNestingError: If the expression nests too deeply
        """
        self._pos = 0
        with nesting_guard(len(self.tokens)):
            tree = self._parse_prog()
        logger.debug("Parsed %d tokens", len(self.tokens))
        return tree

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    @property
    def current(self) -> Token:
        """The lookahead token."""
        return self.tokens[self._pos]

    def _check(self, category: TokenCategory) -> bool:
        """Check if the current token has the given category."""
        return self.current.category == category

    def expect(self, category: TokenCategory) -> Token:
        """
        Consume and return the current token if it has the given category.

        Raises:
            ExprSyntaxError: If the current token has another category
        """
        token = self.current
        if token.category != category:
            logger.debug("Expected %s, found %s", category.name, token)
            raise ExprSyntaxError()
        if category != TokenCategory.EOF:
            self._pos += 1
        return token

    # =========================================================================
    # Grammar Productions
    # =========================================================================

    def _parse_prog(self) -> Prog:
        """Prog ::= Exp EOF"""
        expression = self._parse_exp()
        self.expect(TokenCategory.EOF)
        return Prog(expression)

    def _parse_exp(self) -> ASTNode:
        """Exp ::= Term ('+' Term)*"""
        result = self._parse_term()
        while self._check(TokenCategory.PLUS):
            anchor = self.expect(TokenCategory.PLUS)
            result = Plus(result, self._parse_term(), anchor)
        return result

    def _parse_term(self) -> ASTNode:
        """Term ::= Pow ('*' Pow)*"""
        result = self._parse_pow()
        while self._check(TokenCategory.TIMES):
            anchor = self.expect(TokenCategory.TIMES)
            result = Times(result, self._parse_pow(), anchor)
        return result

    def _parse_pow(self) -> ASTNode:
        """Pow ::= Fact ('^' Pow)?"""
        result = self._parse_fact()
        if self._check(TokenCategory.POW):
            anchor = self.expect(TokenCategory.POW)
            # Recurse rather than loop: the exponent nests to the right.
            result = Pow(result, self._parse_pow(), anchor)
        return result

    def _parse_fact(self) -> ASTNode:
        """Fact ::= INT | '(' Exp ')'"""
        if self._check(TokenCategory.INT):
            return Int(self.expect(TokenCategory.INT))

        if self._check(TokenCategory.OPEN_PAR):
            self.expect(TokenCategory.OPEN_PAR)
            result = self._parse_exp()
            self.expect(TokenCategory.CLOSE_PAR)
            return result

        logger.debug("No expression can start with %s", self.current)
        raise ExprSyntaxError()


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_source(source: str) -> Prog:
    """
    Parse expression source into an AST.

    Combines lexing and parsing.

    Raises:
        ExprSyntaxError: If parsing fails
    """
    return Parser(Lexer(source).tokenize()).parse()
