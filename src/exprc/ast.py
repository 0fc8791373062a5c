"""
Expression Abstract Syntax Tree (AST) Definitions
=================================================

This module defines the AST node types produced by the parser and the
visitor interface implemented by every pass over the tree (semantic
checking and the code generators).

Node Hierarchy
--------------
ASTNode (base)
├── Prog - root node, exactly one child expression
├── BinaryNode - exactly two children (left, right)
│   ├── Plus - addition
│   ├── Times - multiplication
│   └── Pow - exponentiation (base, exponent)
└── Int - integer literal, no children

Design Notes
------------
- Every variant has a fixed arity; there is no open child list.
- Nodes are frozen dataclasses, so a tree is immutable once parsed.
- Parentheses are not represented: they only shape the tree.
- Associativity is encoded by shape. "1+2+3" nests to the left,
  "2^3^2" nests to the right.
- Operator anchors are excluded from equality, so trees built by hand
  in tests compare equal to parsed trees.
- ASTVisitor declares one abstract method per variant. A visitor that
  forgets a variant cannot be instantiated.
"""

from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Generic, Iterator, Optional, TypeVar
import sys

from exprc.errors import ExprNestingError
from exprc.lexer import Token


T = TypeVar("T")


# =============================================================================
# AST Node Base Class
# =============================================================================

class ASTNode(ABC):
    """
    Base class for all AST nodes.

    Subclasses provide `children` (ordered, fixed length), an optional
    `anchor` token, and `accept` for double dispatch into an ASTVisitor.
    """

    anchor: Optional[Token]

    @property
    @abstractmethod
    def children(self) -> tuple["ASTNode", ...]:
        """Child nodes in evaluation order."""

    @abstractmethod
    def accept(self, visitor: "ASTVisitor[T]") -> T:
        """Dispatch to the visitor method for this variant."""

    def __str__(self) -> str:
        if self.anchor is None:
            return self.__class__.__name__
        return f"{self.__class__.__name__} {self.anchor}"


# =============================================================================
# Program Root Node
# =============================================================================

@dataclass(frozen=True)
class Prog(ASTNode):
    """
    Root of the tree.

    Attributes:
        expression: The single top-level expression
    """
    expression: ASTNode
    anchor: Optional[Token] = field(default=None, compare=False)

    @property
    def children(self) -> tuple[ASTNode, ...]:
        return (self.expression,)

    def accept(self, visitor: "ASTVisitor[T]") -> T:
        return visitor.visit_Prog(self)


# =============================================================================
# Binary Operator Nodes
# =============================================================================

@dataclass(frozen=True)
class BinaryNode(ASTNode):
    """
    Base class for binary operators.

    Attributes:
        left: Left operand
        right: Right operand
        anchor: The operator token
    """
    left: ASTNode
    right: ASTNode
    anchor: Optional[Token] = field(default=None, compare=False)

    @property
    def children(self) -> tuple[ASTNode, ...]:
        return (self.left, self.right)


@dataclass(frozen=True)
class Plus(BinaryNode):
    """Addition, left-associative."""

    def accept(self, visitor: "ASTVisitor[T]") -> T:
        return visitor.visit_Plus(self)


@dataclass(frozen=True)
class Times(BinaryNode):
    """Multiplication, left-associative."""

    def accept(self, visitor: "ASTVisitor[T]") -> T:
        return visitor.visit_Times(self)


@dataclass(frozen=True)
class Pow(BinaryNode):
    """Exponentiation, right-associative. `left` is the base."""

    @property
    def base(self) -> ASTNode:
        return self.left

    @property
    def exponent(self) -> ASTNode:
        return self.right

    def accept(self, visitor: "ASTVisitor[T]") -> T:
        return visitor.visit_Pow(self)


# =============================================================================
# Literal Node
# =============================================================================

@dataclass(frozen=True)
class Int(ASTNode):
    """
    Integer literal.

    Attributes:
        anchor: The INT token; its lexeme is the literal text
    """
    anchor: Token

    @property
    def lexeme(self) -> str:
        return self.anchor.lexeme

    @property
    def children(self) -> tuple[ASTNode, ...]:
        return ()

    def accept(self, visitor: "ASTVisitor[T]") -> T:
        return visitor.visit_Int(self)


# =============================================================================
# AST Visitor Interface
# =============================================================================

class ASTVisitor(ABC, Generic[T]):
    """
    Base class for AST visitors.

    Every pass over the tree implements one visit method per variant.
    All of them are abstract, so adding a variant here forces every
    visitor to handle it before it can be instantiated.

    Usage:
        class Depth(ASTVisitor[int]):
            def visit_Prog(self, node): return self.visit(node.expression)
            ...

        Depth().visit(tree)
    """

    def visit(self, node: ASTNode) -> T:
        """Visit a node by dispatching to the method for its variant."""
        return node.accept(self)

    @abstractmethod
    def visit_Prog(self, node: Prog) -> T: ...

    @abstractmethod
    def visit_Plus(self, node: Plus) -> T: ...

    @abstractmethod
    def visit_Times(self, node: Times) -> T: ...

    @abstractmethod
    def visit_Pow(self, node: Pow) -> T: ...

    @abstractmethod
    def visit_Int(self, node: Int) -> T: ...


# =============================================================================
# Recursion Depth
# =============================================================================

# Parsing and visiting use at most this many Python frames per token.
FRAMES_PER_TOKEN = 4

# Ceiling for the interpreter recursion limit while a tree is processed.
MAX_RECURSION_LIMIT = 50_000


@contextmanager
def nesting_guard(token_count: int) -> Iterator[None]:
    """
    Allow recursion deep enough for a tree built from `token_count` tokens.

    The parser and every visitor recurse once per tree level, so a long
    flat sum or deeply nested parentheses can exceed the interpreter
    default. The limit is raised for the duration of the block (never
    above MAX_RECURSION_LIMIT) and restored afterwards.

    Raises:
        ExprNestingError: If the tree is still too deep for the ceiling
    """
    old_limit = sys.getrecursionlimit()
    wanted = old_limit + FRAMES_PER_TOKEN * token_count
    sys.setrecursionlimit(max(old_limit, min(wanted, MAX_RECURSION_LIMIT)))
    try:
        yield
    except RecursionError:
        raise ExprNestingError() from None
    finally:
        sys.setrecursionlimit(old_limit)


# =============================================================================
# AST Pretty Printer
# =============================================================================

class ASTPrinter(ASTVisitor[None]):
    """
    Pretty printer for AST debugging.

    Produces one line per node, children indented two spaces under
    their parent:

        Prog
          Plus [PLUS, "+"]
            Int [INT, "2"]
            Int [INT, "3"]

    Usage:
        print(ASTPrinter().print(tree))
    """

    def __init__(self):
        self.output: list[str] = []
        self.indent_level = 0

    def print(self, node: ASTNode) -> str:
        """Print the tree and return it as a string."""
        self.output = []
        self.indent_level = 0
        self.visit(node)
        return "\n".join(self.output)

    def _emit_node(self, node: ASTNode) -> None:
        self.output.append(f"{'  ' * self.indent_level}{node}")
        self.indent_level += 1
        for child in node.children:
            self.visit(child)
        self.indent_level -= 1

    def visit_Prog(self, node: Prog) -> None:
        self._emit_node(node)

    def visit_Plus(self, node: Plus) -> None:
        self._emit_node(node)

    def visit_Times(self, node: Times) -> None:
        self._emit_node(node)

    def visit_Pow(self, node: Pow) -> None:
        self._emit_node(node)

    def visit_Int(self, node: Int) -> None:
        self._emit_node(node)
