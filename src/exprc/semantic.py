"""
Semantic Checker
================

Validates a parsed tree before code generation. The only semantic rule
of the language is that every integer literal fits a signed 32-bit
integer; the code generators rely on it and do no range checking.
"""

import logging

from exprc.ast import ASTNode, ASTVisitor, Int, Plus, Pow, Prog, Times
from exprc.errors import ExprSemanticError


logger = logging.getLogger(__name__)

INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1


class SemanticChecker(ASTVisitor[None]):
    """
    Depth-first literal range check, one visit per node.

    Usage:
        tree = SemanticChecker().check(parse_source("2 ^ 10"))
    """

    def check(self, tree: ASTNode) -> ASTNode:
        """
        Check the tree and return it unchanged.

        Raises:
            ExprSemanticError: On the first literal outside the int32 range
        """
        self.visit(tree)
        logger.debug("Semantic check passed")
        return tree

    def visit_Prog(self, node: Prog) -> None:
        self.visit(node.expression)

    def visit_Plus(self, node: Plus) -> None:
        self.visit(node.left)
        self.visit(node.right)

    def visit_Times(self, node: Times) -> None:
        self.visit(node.left)
        self.visit(node.right)

    def visit_Pow(self, node: Pow) -> None:
        self.visit(node.base)
        self.visit(node.exponent)

    def visit_Int(self, node: Int) -> None:
        # Literals are unsigned digit runs; leading zeros are allowed.
        # Length is checked first since int() refuses very long strings.
        digits = node.lexeme.lstrip("0") or "0"
        if len(digits) > len(str(INT32_MAX)) or int(digits) > INT32_MAX:
            raise ExprSemanticError(node.lexeme)
