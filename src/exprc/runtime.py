"""
Stack-Machine Runtime
=====================

Executes the WebAssembly text modules produced by WatGenerator without an
external WebAssembly engine. Only the subset of the text format that the
generator emits is understood:

    (module
      (import "math" "pow" (func $pow (param i32) (param i32) (result i32)))
      (func
        (export "start")
        (result i32)
        <instructions>
      )
    )

Instruction Set
---------------
| Instruction   | Stack effect            |
|---------------|-------------------------|
| i32.const N   | push N                  |
| i32.add       | pop b, pop a, push a+b  |
| i32.mul       | pop b, pop a, push a*b  |
| call $pow     | pop e, pop b, push f(b,e) |

Values are signed 32-bit integers; add and mul wrap. The function bound
to $pow comes from the import object passed to the machine, keyed by
module and field name the way a WebAssembly host supplies imports:

>>> from exprc import compile_expr
>>> machine = StackMachine({"math": {"pow": lambda b, e: b ** e}})
>>> machine.run(compile_expr("2^3", target="wat"))
8
"""

from typing import Callable, Optional
import logging
import re

from exprc.codegen import int_pow, wrap_int32
from exprc.errors import ExecutionError


logger = logging.getLogger(__name__)

HostFunction = Callable[[int, int], int]

DEFAULT_IMPORTS: dict[str, dict[str, HostFunction]] = {
    "math": {"pow": int_pow},
}

IMPORT_PATTERN = re.compile(
    r'^\(import "(?P<module>[^"]+)" "(?P<field>[^"]+)" '
    r'\(func \$(?P<name>[A-Za-z_][A-Za-z0-9_]*)'
    r'(?: \(param i32\)){2} \(result i32\)\)\)$'
)
EXPORT_PATTERN = re.compile(r'^\(export "(?P<name>[^"]+)"\)$')


class StackMachine:
    """
    Loads and runs a generated module's exported entry point.

    Attributes:
        imports: Host functions by module name, then field name
        entry_point: Name of the exported function to run
    """

    def __init__(
        self,
        imports: Optional[dict[str, dict[str, HostFunction]]] = None,
        entry_point: str = "start",
    ):
        self.imports = imports if imports is not None else DEFAULT_IMPORTS
        self.entry_point = entry_point

    def run(self, module_text: str) -> int:
        """
        Execute the module's entry point and return its i32 result.

        Raises:
            ExecutionError: If the module is malformed or execution fails
        """
        functions, body = self._load(module_text)
        return self._execute(body, functions)

    # =========================================================================
    # Module Loading
    # =========================================================================

    def _load(self, module_text: str) -> tuple[dict[str, HostFunction], list[str]]:
        """Split the module into resolved imports and the instruction body."""
        lines = [line.strip() for line in module_text.splitlines() if line.strip()]

        if len(lines) < 7 or lines[0] != "(module" or lines[-2:] != [")", ")"]:
            raise ExecutionError("malformed module")

        functions: dict[str, HostFunction] = {}
        pos = 1
        while pos < len(lines) and lines[pos].startswith("(import"):
            match = IMPORT_PATTERN.match(lines[pos])
            if match is None:
                raise ExecutionError(f"malformed import: {lines[pos]}")
            functions[match.group("name")] = self._resolve_import(
                match.group("module"), match.group("field")
            )
            pos += 1

        if lines[pos:pos + 1] != ["(func"]:
            raise ExecutionError("module defines no function")
        export = EXPORT_PATTERN.match(lines[pos + 1])
        if export is None or export.group("name") != self.entry_point:
            raise ExecutionError(f"module does not export '{self.entry_point}'")
        if lines[pos + 2] != "(result i32)":
            raise ExecutionError(f"'{self.entry_point}' must return i32")

        body = lines[pos + 3:-2]
        logger.debug("Loaded module: %d imports, %d instructions", len(functions), len(body))
        return functions, body

    def _resolve_import(self, module: str, field: str) -> HostFunction:
        try:
            return self.imports[module][field]
        except KeyError:
            raise ExecutionError(f"unresolved import {module}.{field}") from None

    # =========================================================================
    # Execution
    # =========================================================================

    def _execute(self, body: list[str], functions: dict[str, HostFunction]) -> int:
        stack: list[int] = []

        def pop() -> int:
            if not stack:
                raise ExecutionError("stack underflow")
            return stack.pop()

        for instruction in body:
            opcode, _, operand = instruction.partition(" ")

            if opcode == "i32.const":
                try:
                    stack.append(wrap_int32(int(operand)))
                except ValueError:
                    raise ExecutionError(f"bad constant: {instruction}") from None

            elif opcode == "i32.add":
                right, left = pop(), pop()
                stack.append(wrap_int32(left + right))

            elif opcode == "i32.mul":
                right, left = pop(), pop()
                stack.append(wrap_int32(left * right))

            elif opcode == "call":
                function = functions.get(operand.lstrip("$"))
                if function is None:
                    raise ExecutionError(f"call to unknown function {operand}")
                exponent, base = pop(), pop()
                stack.append(wrap_int32(function(base, exponent)))

            else:
                raise ExecutionError(f"unknown instruction: {instruction}")

        if len(stack) != 1:
            raise ExecutionError(f"function must leave one value, found {len(stack)}")
        return stack[0]
