# =============================================================================
# test_codegen.py - Code Generator Unit Tests
# =============================================================================
# Tests for the four code generators: evaluator, Lisp, C and WebAssembly
# text. Covers output format, postfix operand ordering, 32-bit arithmetic,
# idempotence and visitor exhaustiveness.
# =============================================================================

import pytest
from exprc.ast import ASTVisitor
from exprc.codegen import (
    CGenerator,
    CodeGenerator,
    Evaluator,
    GENERATORS,
    LispGenerator,
    WatGenerator,
    get_generator,
    int_pow,
    wrap_int32,
)
from exprc.errors import UnknownTargetError
from exprc.parser import parse_source
from exprc.semantic import INT32_MIN, INT32_MAX


# =============================================================================
# Helper Functions
# =============================================================================

def evaluate(source: str) -> int:
    return Evaluator().generate(parse_source(source))


def wat_body(source: str) -> list:
    """Return the instruction lines of the generated module."""
    lines = WatGenerator().generate(parse_source(source)).splitlines()
    # Header: module, import, func, export, result. Footer: two ')'.
    return [line.strip() for line in lines[5:-2]]


# =============================================================================
# 32-bit Arithmetic Tests
# =============================================================================

class TestInt32Arithmetic:

    def test_wrap_in_range(self):
        assert wrap_int32(5) == 5
        assert wrap_int32(-5) == -5

    def test_wrap_overflow(self):
        assert wrap_int32(INT32_MAX + 1) == INT32_MIN
        assert wrap_int32(2 ** 32) == 0

    def test_int_pow(self):
        assert int_pow(2, 10) == 1024
        assert int_pow(-2, 3) == -8
        assert int_pow(0, 0) == 1

    def test_int_pow_truncates(self):
        assert int_pow(2, -1) == 0

    def test_int_pow_out_of_range(self):
        assert int_pow(2, 31) == INT32_MIN
        assert int_pow(10, 1000) == INT32_MIN
        assert int_pow(0, -1) == INT32_MIN


# =============================================================================
# Evaluator Tests
# =============================================================================

class TestEvaluator:

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("7", 7),
            ("2+3*4", 14),
            ("(2+3)*4", 20),
            ("2^3^2", 512),
            ("(2^3)^2", 64),
            ("1+2+3+4", 10),
            ("2*3^2", 18),
            ("0^0", 1),
            ("007", 7),
        ],
    )
    def test_values(self, source, expected):
        assert evaluate(source) == expected

    def test_addition_wraps(self):
        assert evaluate("2147483647+1") == INT32_MIN

    def test_multiplication_wraps(self):
        assert evaluate("65536*65536") == 0

    def test_pow_out_of_range(self):
        assert evaluate("2^31") == INT32_MIN
        assert evaluate("2^30") == 2 ** 30


# =============================================================================
# Lisp Generator Tests
# =============================================================================

class TestLispGenerator:

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("42", "42"),
            ("2+3*4", "(+ 2 (* 3 4))"),
            ("1+2+3", "(+ (+ 1 2) 3)"),
            ("2^3^2", "(expt 2 (expt 3 2))"),
            ("(1+2)*3", "(* (+ 1 2) 3)"),
            ("007", "007"),
        ],
    )
    def test_output(self, source, expected):
        assert LispGenerator().generate(parse_source(source)) == expected


# =============================================================================
# C Generator Tests
# =============================================================================

class TestCGenerator:

    def test_program(self):
        output = CGenerator().generate(parse_source("2+3"))
        assert output == (
            "#include <stdio.h>\n"
            "#include <math.h>\n"
            "\n"
            "int main(void) {\n"
            "    printf(\"%d\\n\", (2+3));\n"
            "    return 0;\n"
            "}\n"
        )

    @pytest.mark.parametrize(
        "source,expected",
        [
            ("5", "5"),
            ("2*3+4", "((2*3)+4)"),
            ("2^3", "(int) pow(2, 3)"),
            ("2^3^2", "(int) pow(2, (int) pow(3, 2))"),
            ("010+08", "(10+8)"),
        ],
    )
    def test_expressions(self, source, expected):
        output = CGenerator().generate(parse_source(source))
        assert f"printf(\"%d\\n\", {expected});" in output


# =============================================================================
# WebAssembly Text Generator Tests
# =============================================================================

class TestWatGenerator:

    def test_module(self):
        output = WatGenerator().generate(parse_source("2+3"))
        assert output == (
            "(module\n"
            "  (import \"math\" \"pow\" (func $pow (param i32) (param i32) (result i32)))\n"
            "  (func\n"
            "    (export \"start\")\n"
            "    (result i32)\n"
            "    i32.const 2\n"
            "    i32.const 3\n"
            "    i32.add\n"
            "  )\n"
            ")\n"
        )

    def test_operands_before_operator(self):
        assert wat_body("2*(3+4)") == [
            "i32.const 2",
            "i32.const 3",
            "i32.const 4",
            "i32.add",
            "i32.mul",
        ]

    def test_left_associative_order(self):
        assert wat_body("1+2+3") == [
            "i32.const 1",
            "i32.const 2",
            "i32.add",
            "i32.const 3",
            "i32.add",
        ]

    def test_pow_calls_import(self):
        assert wat_body("2^3^2") == [
            "i32.const 2",
            "i32.const 3",
            "i32.const 2",
            "call $pow",
            "call $pow",
        ]

    def test_constant_value(self):
        assert wat_body("007") == ["i32.const 7"]


# =============================================================================
# Generator Contract Tests
# =============================================================================

class TestGeneratorContract:

    @pytest.mark.parametrize("target", sorted(GENERATORS))
    def test_idempotent(self, target):
        """Rendering the same tree twice gives identical output."""
        tree = parse_source("(1+2)*3^2^1+4")
        generator = get_generator(target)
        assert generator.generate(tree) == generator.generate(tree)

    @pytest.mark.parametrize("target", sorted(GENERATORS))
    def test_generators_share_base(self, target):
        assert isinstance(get_generator(target), CodeGenerator)

    def test_generator_must_define_generate(self):
        """A visitor without generate() is not a usable generator."""

        class NoGenerate(CodeGenerator[int]):
            def visit_Prog(self, node): return 0
            def visit_Plus(self, node): return 0
            def visit_Times(self, node): return 0
            def visit_Pow(self, node): return 0
            def visit_Int(self, node): return 0

        with pytest.raises(TypeError):
            NoGenerate()

    def test_get_generator_case_insensitive(self):
        assert isinstance(get_generator("WAT"), WatGenerator)

    def test_get_generator_fresh_instance(self):
        assert get_generator("c") is not get_generator("c")

    def test_unknown_target(self):
        with pytest.raises(UnknownTargetError) as exc_info:
            get_generator("fortran")
        assert exc_info.value.target == "fortran"
        assert "wat" in str(exc_info.value)

    def test_visitor_must_handle_every_variant(self):
        """A visitor missing a variant cannot be instantiated."""

        class Partial(ASTVisitor[int]):
            def visit_Prog(self, node): return 0
            def visit_Plus(self, node): return 0
            def visit_Times(self, node): return 0
            def visit_Int(self, node): return 0

        with pytest.raises(TypeError):
            Partial()
