"""
Stack-Machine Runtime Test Suite
================================

Tests for executing generated WebAssembly text, including agreement with
the evaluator and with a natively compiled C program.
"""

import shutil
import subprocess

import pytest
from exprc.compiler import compile_expr
from exprc.errors import ExecutionError
from exprc.runtime import StackMachine


EXPRESSIONS = [
    "0",
    "2+3*4",
    "2^3^2",
    "(2^3)^2",
    "(1+2)*(3+4)^2",
    "2^10+1",
    "1+2+3+4+5*6*7",
    "10^(2*3)",
    "3^(1+1)^2",
    "010+08",
    "007*2",
]

C_COMPILER = shutil.which("cc") or shutil.which("gcc") or shutil.which("clang")

requires_c_compiler = pytest.mark.skipif(
    C_COMPILER is None,
    reason="no C compiler on PATH",
)


def module(body: list, export: str = "start") -> str:
    """Wrap instructions in the module layout the generator uses."""
    lines = [
        "(module",
        '  (import "math" "pow" (func $pow (param i32) (param i32) (result i32)))',
        "  (func",
        f'    (export "{export}")',
        "    (result i32)",
    ]
    lines += [f"    {instruction}" for instruction in body]
    lines += ["  )", ")"]
    return "\n".join(lines) + "\n"


# =============================================================================
# Execution Tests
# =============================================================================

class TestExecution:

    def test_constant(self):
        assert StackMachine().run(module(["i32.const 7"])) == 7

    def test_add_and_mul(self):
        body = ["i32.const 2", "i32.const 3", "i32.const 4", "i32.mul", "i32.add"]
        assert StackMachine().run(module(body)) == 14

    def test_pow_uses_host_function(self):
        calls = []

        def fake_pow(base, exponent):
            calls.append((base, exponent))
            return 99

        machine = StackMachine({"math": {"pow": fake_pow}})
        assert machine.run(module(["i32.const 2", "i32.const 5", "call $pow"])) == 99
        assert calls == [(2, 5)]

    def test_wraps_to_int32(self):
        body = ["i32.const 2147483647", "i32.const 1", "i32.add"]
        assert StackMachine().run(module(body)) == -2147483648

    @pytest.mark.parametrize("source", EXPRESSIONS)
    def test_agrees_with_evaluator(self, source):
        assert StackMachine().run(compile_expr(source, target="wat")) == compile_expr(source)

    def test_agrees_with_evaluator_on_overflow(self):
        for source in ("2147483647+1", "65536*65536", "2^31", "7^(2^5)"):
            assert StackMachine().run(compile_expr(source, target="wat")) == compile_expr(source)


# =============================================================================
# Error Tests
# =============================================================================

class TestExecutionErrors:

    def test_unresolved_import(self):
        with pytest.raises(ExecutionError, match="unresolved import"):
            StackMachine(imports={}).run(module(["i32.const 1"]))

    def test_missing_export(self):
        with pytest.raises(ExecutionError, match="does not export"):
            StackMachine().run(module(["i32.const 1"], export="main"))

    def test_unknown_instruction(self):
        with pytest.raises(ExecutionError, match="unknown instruction"):
            StackMachine().run(module(["i32.const 1", "i32.sub"]))

    def test_stack_underflow(self):
        with pytest.raises(ExecutionError, match="underflow"):
            StackMachine().run(module(["i32.const 1", "i32.add"]))

    def test_leftover_values(self):
        with pytest.raises(ExecutionError, match="one value"):
            StackMachine().run(module(["i32.const 1", "i32.const 2"]))

    def test_not_a_module(self):
        with pytest.raises(ExecutionError, match="malformed module"):
            StackMachine().run("i32.const 1\n")


# =============================================================================
# Native C Cross-Check
# =============================================================================

@requires_c_compiler
class TestCompiledC:
    """The C program prints the same value the evaluator computes."""

    @pytest.mark.parametrize("source", EXPRESSIONS)
    def test_agrees_with_evaluator(self, source, tmp_path):
        c_file = tmp_path / "prog.c"
        binary = tmp_path / "prog"
        c_file.write_text(compile_expr(source, target="c"))

        subprocess.run(
            [C_COMPILER, str(c_file), "-o", str(binary), "-lm"],
            check=True,
            capture_output=True,
        )
        completed = subprocess.run([str(binary)], check=True, capture_output=True, text=True)

        assert int(completed.stdout.strip()) == compile_expr(source)
