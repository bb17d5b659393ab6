"""Tests for the tree-walking evaluator and builtin functions."""

from fractions import Fraction

import pytest

from conftest import c, ev, f, i, parse

from constcalc.constant import BoolValue, StringValue
from constcalc.errors import (
    ArgumentCountError,
    DivisionByZeroError,
    ExprSyntaxError,
    InvalidShiftError,
    TypeMismatchError,
    UnknownIdentifierError,
)
from constcalc.evaluate import BUILTIN_FUNCTIONS, Evaluator, Scope
from constcalc.model.expressions import LiteralExpr, LiteralKind, UnaryExpr, UnaryOp


# ---------------------------------------------------------------------------
# Literals and operators
# ---------------------------------------------------------------------------

class TestEvaluateExpressions:
    def test_literal(self):
        assert ev("42") == i(42)

    def test_precedence(self):
        assert ev("1 + 2 * 3") == i(7)
        assert ev("(1 + 2) * 3") == i(9)

    def test_unbounded_intermediate(self):
        assert ev("1<<100 + 2 - 1<<100") == i(2)

    def test_legacy_octal(self):
        assert ev("0777") == i(511)

    def test_mixed_radix(self):
        assert ev("0xFF - 0b11111110") == i(1)
        assert ev("0b1010 ^ 0b0101") == i(15)

    def test_float_stays_exact(self):
        assert ev("0.1 + 0.2") == f(3, 10)
        assert ev("0.1 + 0.2 == 0.3") == BoolValue(True)

    def test_integral_float_keeps_float_kind(self):
        assert ev("2.5 * 2") == f(5)

    def test_int_division(self):
        assert ev("7 / 2") == i(3)
        assert ev("7.0 / 2") == f(7, 2)

    def test_complex(self):
        assert ev("(1 + 2i) * (1 - 2i)") == c(5, 0)

    def test_rune_arithmetic(self):
        assert ev("'a' + 1") == i(98)

    def test_string_concatenation(self):
        assert ev('"foo" + `bar`') == StringValue(b"foobar")

    def test_unary(self):
        assert ev("-(3)") == i(-3)
        assert ev("^0") == i(-1)
        assert ev("!false") == BoolValue(True)

    def test_comparison_chain_with_logic(self):
        assert ev("1 < 2 && 2 < 3 || false") == BoolValue(True)

    def test_accepts_parsed_tree(self):
        assert ev(parse("6 * 7")) == i(42)

    def test_comments_ignored(self):
        assert ev("1 /* one */ + 2 // two") == i(3)


class TestEvaluateErrors:
    def test_division_by_zero(self):
        with pytest.raises(DivisionByZeroError):
            ev("1/0")

    def test_negative_shift(self):
        with pytest.raises(InvalidShiftError):
            ev("1<<(-1)")

    def test_huge_shift_count(self):
        with pytest.raises(InvalidShiftError):
            ev("1 << (1 << 100)")

    def test_type_mismatch(self):
        with pytest.raises(TypeMismatchError):
            ev('1 + "a"')

    def test_unknown_identifier(self):
        with pytest.raises(UnknownIdentifierError, match="undefined: x"):
            ev("x + 1")

    def test_syntax_error(self):
        with pytest.raises(ExprSyntaxError):
            ev("1 +")

    def test_malformed_literal_node(self):
        # Trees built by hand skip lexer validation.
        node = LiteralExpr(literal=LiteralKind.INT, value="12ab", pos=3)
        with pytest.raises(ExprSyntaxError) as exc:
            ev(node)
        assert exc.value.pos == 3


class TestShortCircuit:
    def test_and_skips_right(self):
        assert ev("false && undefinedVar") == BoolValue(False)

    def test_or_skips_right(self):
        assert ev("true || 1/0 == 1") == BoolValue(True)

    def test_and_evaluates_right(self):
        with pytest.raises(UnknownIdentifierError):
            ev("true && undefinedVar")

    def test_non_bool_left(self):
        with pytest.raises(TypeMismatchError, match="operator &&"):
            ev("1 && true")

    def test_non_bool_right(self):
        with pytest.raises(TypeMismatchError):
            ev("false || true && 1")
        with pytest.raises(TypeMismatchError):
            ev("false || 1")


class TestEvaluatorClass:
    def test_bound_to_scope(self):
        scope = Scope()
        scope.assign("x", "5")
        assert Evaluator(scope).evaluate(parse("x * 2")) == i(10)


# ---------------------------------------------------------------------------
# Builtins
# ---------------------------------------------------------------------------

class TestBuiltins:
    def test_table(self):
        assert set(BUILTIN_FUNCTIONS) == {"len", "real", "imag", "complex", "min", "max"}

    def test_len_counts_bytes(self):
        assert ev('len("abc")') == i(3)
        assert ev('len("é")') == i(2)

    def test_len_of_int(self):
        with pytest.raises(TypeMismatchError, match="operator len"):
            ev("len(3)")

    def test_real_imag(self):
        assert ev("real(3 + 4i)") == f(3)
        assert ev("imag(3 + 4i)") == f(4)
        assert ev("imag(2.5)") == f(0)

    def test_complex(self):
        assert ev("complex(1, 0.5)") == c(1, Fraction(1, 2))

    def test_complex_requires_real_parts(self):
        with pytest.raises(TypeMismatchError):
            ev("complex(1i, 1)")

    def test_min_max(self):
        assert ev("min(3, 1, 2)") == i(1)
        assert ev("max(3, 1, 2)") == i(3)

    def test_min_max_promote(self):
        assert ev("max(1, 2.5)") == f(5, 2)
        assert ev("min(1, 2.5)") == f(1)

    def test_min_strings(self):
        assert ev('min("b", "a")') == StringValue(b"a")

    def test_max_complex(self):
        with pytest.raises(TypeMismatchError):
            ev("max(1i, 2)")

    def test_max_mixed(self):
        with pytest.raises(TypeMismatchError):
            ev('max("a", 1)')

    def test_argument_count(self):
        with pytest.raises(ArgumentCountError, match="expected 1, got 2"):
            ev('len("a", "b")')
        with pytest.raises(ArgumentCountError, match="expected at least 1, got 0"):
            ev("min()")

    def test_unknown_function(self):
        with pytest.raises(UnknownIdentifierError, match="undefined: sqrt"):
            ev("sqrt(4)")

    def test_builtin_in_expression(self):
        assert ev('len("ab") * max(2, 3) + 1') == i(7)


# ---------------------------------------------------------------------------
# Deep trees
# ---------------------------------------------------------------------------

class TestDeepExpressions:
    def test_long_sum(self):
        assert ev("+".join(["1"] * 3000)) == i(3000)

    def test_long_mixed_chain(self):
        source = "0" + " + 2 - 1" * 2000
        assert ev(source) == i(2000)

    def test_long_logical_chain_short_circuits(self):
        assert ev(" && ".join(["false"] + ["undefinedVar"] * 2000)) == BoolValue(False)

    def test_deep_nesting_is_a_syntax_error(self):
        with pytest.raises(ExprSyntaxError, match="nested too deeply"):
            ev("(" * 5000 + "1" + ")" * 5000)

    def test_deep_tree_built_by_hand(self):
        node = LiteralExpr(literal=LiteralKind.INT, value="1")
        for _ in range(5000):
            node = UnaryExpr(op=UnaryOp.NEG, operand=node)
        with pytest.raises(ExprSyntaxError, match="nested too deeply"):
            ev(node)

    def test_moderate_nesting(self):
        assert ev("(" * 50 + "1" + ")" * 50) == i(1)
