"""Tests for the expression parser."""

import pytest

from conftest import parse

from constcalc.errors import ExprSyntaxError
from constcalc.model.expressions import (
    BinaryExpr,
    BinaryOp,
    CallExpr,
    IdentifierExpr,
    LiteralExpr,
    LiteralKind,
    ParenExpr,
    UnaryExpr,
    UnaryOp,
)
from constcalc.syntax import parse as parse_tokens
from constcalc.syntax import tokenize


# ---------------------------------------------------------------------------
# Primaries
# ---------------------------------------------------------------------------

class TestPrimaries:
    def test_int_literal(self):
        node = parse("42")
        assert isinstance(node, LiteralExpr)
        assert node.literal == LiteralKind.INT
        assert node.value == "42"

    def test_literal_kinds(self):
        assert parse("2.5").literal == LiteralKind.FLOAT
        assert parse("3i").literal == LiteralKind.IMAG
        assert parse("'x'").literal == LiteralKind.CHAR
        assert parse('"s"').literal == LiteralKind.STRING
        assert parse("true").literal == LiteralKind.BOOL

    def test_identifier(self):
        node = parse("seconds")
        assert node == IdentifierExpr(name="seconds", pos=0)
        assert node.qualified_name == "seconds"

    def test_qualified_identifier(self):
        node = parse("time.D")
        assert isinstance(node, IdentifierExpr)
        assert node.namespace == "time"
        assert node.name == "D"
        assert node.qualified_name == "time.D"

    def test_nested_namespace_rejected(self):
        with pytest.raises(ExprSyntaxError, match="nested namespaces are not supported"):
            parse("a.b.C")

    def test_parenthesized(self):
        node = parse("(1)")
        assert isinstance(node, ParenExpr)
        assert isinstance(node.inner, LiteralExpr)

    def test_call(self):
        node = parse("max(1, x, 3)")
        assert isinstance(node, CallExpr)
        assert node.function_name == "max"
        assert len(node.args) == 3
        assert isinstance(node.args[1], IdentifierExpr)

    def test_call_no_args(self):
        node = parse("len()")
        assert isinstance(node, CallExpr)
        assert node.args == ()

    def test_call_trailing_comma(self):
        node = parse("min(1, 2,)")
        assert len(node.args) == 2

    def test_qualified_call_rejected(self):
        with pytest.raises(ExprSyntaxError, match="cannot call qualified name"):
            parse("time.f(1)")


# ---------------------------------------------------------------------------
# Operators and precedence
# ---------------------------------------------------------------------------

class TestPrecedence:
    def test_mul_binds_tighter_than_add(self):
        node = parse("1 + 2 * 3")
        assert node.op == BinaryOp.ADD
        assert node.right.op == BinaryOp.MUL

    def test_shift_binds_like_mul(self):
        # 1<<100 + 2 == (1<<100) + 2
        node = parse("1<<100 + 2")
        assert node.op == BinaryOp.ADD
        assert node.left.op == BinaryOp.SHL

    def test_left_associative(self):
        node = parse("10 - 4 - 3")
        assert node.op == BinaryOp.SUB
        assert node.left.op == BinaryOp.SUB
        assert node.right.value == "3"

    def test_comparison_below_additive(self):
        node = parse("1 + 1 == 2")
        assert node.op == BinaryOp.EQ
        assert node.left.op == BinaryOp.ADD

    def test_and_binds_tighter_than_or(self):
        node = parse("a || b && c")
        assert node.op == BinaryOp.LOR
        assert node.right.op == BinaryOp.LAND

    def test_binary_xor_additive_level(self):
        node = parse("1 ^ 2 * 3")
        assert node.op == BinaryOp.XOR
        assert node.right.op == BinaryOp.MUL

    def test_and_not(self):
        node = parse("0xFF &^ 0x0F")
        assert node.op == BinaryOp.AND_NOT

    def test_unary_binds_tightest(self):
        node = parse("-2 * 3")
        assert node.op == BinaryOp.MUL
        assert isinstance(node.left, UnaryExpr)
        assert node.left.op == UnaryOp.NEG

    def test_unary_chain(self):
        node = parse("!!true")
        assert node.op == UnaryOp.NOT
        assert node.operand.op == UnaryOp.NOT

    def test_unary_complement(self):
        node = parse("^0")
        assert node == UnaryExpr(op=UnaryOp.XOR, operand=LiteralExpr(literal=LiteralKind.INT, value="0", pos=1), pos=0)

    def test_parentheses_override(self):
        node = parse("(1 + 2) * 3")
        assert node.op == BinaryOp.MUL
        assert isinstance(node.left, ParenExpr)
        assert node.left.inner.op == BinaryOp.ADD

    def test_binary_position_is_left_operand(self):
        node = parse("  a + b")
        assert node.pos == 2


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class TestParseErrors:
    def test_empty(self):
        with pytest.raises(ExprSyntaxError, match="empty expression"):
            parse("   ")

    def test_missing_operand(self):
        with pytest.raises(ExprSyntaxError, match="unexpected end of expression") as exc:
            parse("1 +")
        assert exc.value.pos == 3

    def test_unexpected_operator(self):
        with pytest.raises(ExprSyntaxError, match=r"unexpected '\*'") as exc:
            parse("1 + * 2")
        assert exc.value.pos == 4

    def test_missing_close_paren(self):
        with pytest.raises(ExprSyntaxError, match=r"missing '\)'"):
            parse("(1 + 2")

    def test_unmatched_close_paren(self):
        with pytest.raises(ExprSyntaxError, match=r"unmatched '\)'") as exc:
            parse("1 + 2)")
        assert exc.value.pos == 5

    def test_trailing_input(self):
        with pytest.raises(ExprSyntaxError, match="after expression"):
            parse("1 2")

    def test_message_shows_source_and_caret(self):
        with pytest.raises(ExprSyntaxError) as exc:
            parse("1 + * 2")
        assert "1 + * 2" in str(exc.value)
        assert "    ^" in str(exc.value)

    def test_unterminated_call(self):
        with pytest.raises(ExprSyntaxError, match=r"missing '\)'"):
            parse("max(1, 2")

    def test_bad_argument_separator(self):
        with pytest.raises(ExprSyntaxError, match="expected ',' or '\\)'"):
            parse("max(1 2)")


class TestParseTokens:
    def test_parse_from_token_list(self):
        node = parse_tokens(tokenize("2 * x"))
        assert isinstance(node, BinaryExpr)
        assert node.right == IdentifierExpr(name="x", pos=4)

    def test_trees_are_immutable(self):
        node = parse("1 + 2")
        with pytest.raises(Exception):
            node.op = BinaryOp.SUB


class TestNestingDepth:
    def test_long_flat_chain(self):
        node = parse("+".join(["1"] * 3000))
        assert node.op == BinaryOp.ADD
        assert node.right.value == "1"

    def test_deep_parentheses(self):
        with pytest.raises(ExprSyntaxError, match="expression nested too deeply"):
            parse("(" * 5000 + "1" + ")" * 5000)

    def test_deep_unary_chain(self):
        with pytest.raises(ExprSyntaxError, match="nested too deeply"):
            parse("-" * 5000 + "1")
