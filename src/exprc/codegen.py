"""
Code Generators
===============

This module turns a checked AST into one of four target representations.
Every generator is a CodeGenerator: an ASTVisitor with one method per
node variant and a public `generate(tree)` entry point.

Targets
-------
| Name | Class          | Output                                       |
|------|----------------|----------------------------------------------|
| eval | Evaluator      | int, the value of the expression             |
| lisp | LispGenerator  | prefix expression, e.g. (+ 2 (* 3 4))        |
| c    | CGenerator     | C program printing the value                 |
| wat  | WatGenerator   | WebAssembly text module exporting "start"    |

Arithmetic Semantics
--------------------
All targets compute with signed 32-bit integers. '+' and '*' wrap on
overflow. '^' is computed as a real power and truncated toward zero, as
`(int) pow(a, b)` does in C. The Evaluator and the stack-machine runtime
share `int_pow`, which maps results that are not finite or do not fit
32 bits to INT32_MIN.

The C program agrees with the other targets only while every power fits
in 32 bits. Converting an out-of-range double to int is undefined in C;
gcc, for one, folds `(int) pow(2, 31)` to INT32_MAX.

The generators assume the tree passed semantic checking: literal text is
emitted or converted without any further range check.
"""

from abc import abstractmethod
from typing import Type, TypeVar, Union
import logging
import math

from exprc.ast import ASTNode, ASTVisitor, Int, Plus, Pow, Prog, Times
from exprc.errors import UnknownTargetError
from exprc.semantic import INT32_MIN, INT32_MAX


logger = logging.getLogger(__name__)

T = TypeVar("T")


# =============================================================================
# 32-bit Integer Arithmetic
# =============================================================================

def wrap_int32(value: int) -> int:
    """Reduce an integer to the signed 32-bit range, two's complement."""
    return (value + 2 ** 31) % 2 ** 32 - 2 ** 31


def int_pow(base: int, exponent: int) -> int:
    """
    Real exponentiation truncated to a signed 32-bit integer.

    Examples:
        int_pow(2, 10) == 1024
        int_pow(2, -1) == 0        (0.5 truncated)
        int_pow(2, 31) == INT32_MIN (out of range)
    """
    try:
        result = math.pow(float(base), float(exponent))
    except (OverflowError, ValueError):
        # math.pow raises for 0 ** negative (infinite) and huge results
        return INT32_MIN
    if not math.isfinite(result) or not INT32_MIN - 1 < result < INT32_MAX + 1:
        return INT32_MIN
    return int(result)


# =============================================================================
# Generator Base Class
# =============================================================================

class CodeGenerator(ASTVisitor[T]):
    """A visitor that renders a whole checked tree into one target."""

    @abstractmethod
    def generate(self, tree: ASTNode) -> Union[int, str]:
        """Render the tree: an int for the evaluator, text for the others."""


# =============================================================================
# Evaluator
# =============================================================================

class Evaluator(CodeGenerator[int]):
    """Computes the value of the expression directly."""

    def generate(self, tree: ASTNode) -> int:
        return self.visit(tree)

    def visit_Prog(self, node: Prog) -> int:
        return self.visit(node.expression)

    def visit_Plus(self, node: Plus) -> int:
        return wrap_int32(self.visit(node.left) + self.visit(node.right))

    def visit_Times(self, node: Times) -> int:
        return wrap_int32(self.visit(node.left) * self.visit(node.right))

    def visit_Pow(self, node: Pow) -> int:
        return int_pow(self.visit(node.base), self.visit(node.exponent))

    def visit_Int(self, node: Int) -> int:
        return int(node.lexeme)


# =============================================================================
# Prefix (Lisp) Generator
# =============================================================================

class LispGenerator(CodeGenerator[str]):
    """Renders the expression in prefix notation: (+ 2 (* 3 4))."""

    def generate(self, tree: ASTNode) -> str:
        return self.visit(tree)

    def visit_Prog(self, node: Prog) -> str:
        return self.visit(node.expression)

    def visit_Plus(self, node: Plus) -> str:
        return f"(+ {self.visit(node.left)} {self.visit(node.right)})"

    def visit_Times(self, node: Times) -> str:
        return f"(* {self.visit(node.left)} {self.visit(node.right)})"

    def visit_Pow(self, node: Pow) -> str:
        return f"(expt {self.visit(node.base)} {self.visit(node.exponent)})"

    def visit_Int(self, node: Int) -> str:
        return node.lexeme


# =============================================================================
# C Generator
# =============================================================================

class CGenerator(CodeGenerator[str]):
    """
    Emits a standalone C program that prints the value.

    Every operation is fully parenthesized, so no C precedence rules are
    involved. Link with the math library (-lm) for pow().
    """

    PROGRAM_TEMPLATE = (
        "#include <stdio.h>\n"
        "#include <math.h>\n"
        "\n"
        "int main(void) {{\n"
        "    printf(\"%d\\n\", {expression});\n"
        "    return 0;\n"
        "}}\n"
    )

    def generate(self, tree: ASTNode) -> str:
        return self.visit(tree)

    def visit_Prog(self, node: Prog) -> str:
        return self.PROGRAM_TEMPLATE.format(expression=self.visit(node.expression))

    def visit_Plus(self, node: Plus) -> str:
        return f"({self.visit(node.left)}+{self.visit(node.right)})"

    def visit_Times(self, node: Times) -> str:
        return f"({self.visit(node.left)}*{self.visit(node.right)})"

    def visit_Pow(self, node: Pow) -> str:
        return f"(int) pow({self.visit(node.base)}, {self.visit(node.exponent)})"

    def visit_Int(self, node: Int) -> str:
        # Leading zeros would make the literal octal in C.
        return str(int(node.lexeme))


# =============================================================================
# WebAssembly Text (Stack Machine) Generator
# =============================================================================

class WatGenerator(CodeGenerator[None]):
    """
    Emits a WebAssembly text module.

    The module imports the host function math.pow as $pow and exports a
    zero-argument function "start" returning the value as i32. Operands
    are always emitted before the instruction that consumes them, so each
    subtree leaves exactly one value on the stack.

    Example output for "2+3":
        (module
          (import "math" "pow" (func $pow (param i32) (param i32) (result i32)))
          (func
            (export "start")
            (result i32)
            i32.const 2
            i32.const 3
            i32.add
          )
        )
    """

    POW_IMPORT = '(import "math" "pow" (func $pow (param i32) (param i32) (result i32)))'
    EXPORT_NAME = "start"

    def __init__(self):
        self._output: list[str] = []

    def generate(self, tree: ASTNode) -> str:
        """Generate the module text. Per-call state is reset each time."""
        self._output = []
        self.visit(tree)
        return "\n".join(self._output) + "\n"

    def _emit(self, line: str, indent: int = 0) -> None:
        self._output.append(f"{'  ' * indent}{line}")

    def _emit_instruction(self, instruction: str) -> None:
        self._emit(instruction, indent=2)

    def visit_Prog(self, node: Prog) -> None:
        self._emit("(module")
        self._emit(self.POW_IMPORT, indent=1)
        self._emit("(func", indent=1)
        self._emit(f'(export "{self.EXPORT_NAME}")', indent=2)
        self._emit("(result i32)", indent=2)
        self.visit(node.expression)
        self._emit(")", indent=1)
        self._emit(")")

    def visit_Plus(self, node: Plus) -> None:
        self.visit(node.left)
        self.visit(node.right)
        self._emit_instruction("i32.add")

    def visit_Times(self, node: Times) -> None:
        self.visit(node.left)
        self.visit(node.right)
        self._emit_instruction("i32.mul")

    def visit_Pow(self, node: Pow) -> None:
        self.visit(node.base)
        self.visit(node.exponent)
        self._emit_instruction("call $pow")

    def visit_Int(self, node: Int) -> None:
        self._emit_instruction(f"i32.const {int(node.lexeme)}")


# =============================================================================
# Target Registry
# =============================================================================

GENERATORS: dict[str, Type[CodeGenerator]] = {
    "eval": Evaluator,
    "lisp": LispGenerator,
    "c": CGenerator,
    "wat": WatGenerator,
}

DEFAULT_TARGET = "eval"


def get_generator(target: str) -> CodeGenerator:
    """
    Create a fresh generator for a target name.

    Raises:
        UnknownTargetError: If no generator is registered under the name
    """
    try:
        generator_class = GENERATORS[target.lower()]
    except KeyError:
        raise UnknownTargetError(target, GENERATORS) from None
    logger.debug("Selected %s for target '%s'", generator_class.__name__, target)
    return generator_class()
