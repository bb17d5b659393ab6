"""Precedence-climbing parser for constant expressions.

Grammar (precedence low to high)::

    expr     -> binary(1)
    binary   -> unary (binop unary)*       left associative
    unary    -> ("+" | "-" | "!" | "^") unary | primary
    primary  -> literal | IDENT | IDENT "(" args ")" | "(" expr ")"
    args     -> (expr ("," expr)* ","?)?

Binary precedence::

    5   *  /  %  <<  >>  &  &^
    4   +  -  |  ^
    3   ==  !=  <  <=  >  >=
    2   &&
    1   ||
"""

from __future__ import annotations

from constcalc.errors import ExprSyntaxError
from constcalc.model.expressions import (
    BinaryExpr,
    BinaryOp,
    CallExpr,
    Expression,
    IdentifierExpr,
    LiteralExpr,
    LiteralKind,
    ParenExpr,
    UnaryExpr,
    UnaryOp,
)

from ._lexer import Token, TokenKind, tokenize


_BINARY_OPS: dict[TokenKind, tuple[BinaryOp, int]] = {
    TokenKind.STAR: (BinaryOp.MUL, 5),
    TokenKind.SLASH: (BinaryOp.DIV, 5),
    TokenKind.PERCENT: (BinaryOp.MOD, 5),
    TokenKind.SHL: (BinaryOp.SHL, 5),
    TokenKind.SHR: (BinaryOp.SHR, 5),
    TokenKind.AMP: (BinaryOp.AND, 5),
    TokenKind.AMP_CARET: (BinaryOp.AND_NOT, 5),
    TokenKind.PLUS: (BinaryOp.ADD, 4),
    TokenKind.MINUS: (BinaryOp.SUB, 4),
    TokenKind.PIPE: (BinaryOp.OR, 4),
    TokenKind.CARET: (BinaryOp.XOR, 4),
    TokenKind.EQ: (BinaryOp.EQ, 3),
    TokenKind.NE: (BinaryOp.NE, 3),
    TokenKind.LT: (BinaryOp.LT, 3),
    TokenKind.LE: (BinaryOp.LE, 3),
    TokenKind.GT: (BinaryOp.GT, 3),
    TokenKind.GE: (BinaryOp.GE, 3),
    TokenKind.LAND: (BinaryOp.LAND, 2),
    TokenKind.LOR: (BinaryOp.LOR, 1),
}

_UNARY_OPS: dict[TokenKind, UnaryOp] = {
    TokenKind.PLUS: UnaryOp.POS,
    TokenKind.MINUS: UnaryOp.NEG,
    TokenKind.BANG: UnaryOp.NOT,
    TokenKind.CARET: UnaryOp.XOR,
}

_LITERALS: dict[TokenKind, LiteralKind] = {
    TokenKind.INT: LiteralKind.INT,
    TokenKind.FLOAT: LiteralKind.FLOAT,
    TokenKind.IMAG: LiteralKind.IMAG,
    TokenKind.CHAR: LiteralKind.CHAR,
    TokenKind.STRING: LiteralKind.STRING,
    TokenKind.TRUE: LiteralKind.BOOL,
    TokenKind.FALSE: LiteralKind.BOOL,
}


class _Parser:
    """Recursive descent parser over a token list ending with EOF."""

    def __init__(self, tokens: list[Token], source: str | None = None) -> None:
        self.tokens = tokens
        self.source = source
        self.pos = 0

    @property
    def current(self) -> Token:
        return self.tokens[self.pos]

    def advance(self) -> Token:
        tok = self.tokens[self.pos]
        if self.pos < len(self.tokens) - 1:
            self.pos += 1
        return tok

    def error(self, message: str, tok: Token) -> ExprSyntaxError:
        return ExprSyntaxError(message, tok.pos, self.source)

    # -- Grammar rules --

    def parse(self) -> Expression:
        if self.current.kind == TokenKind.EOF:
            raise self.error("empty expression", self.current)
        expr = self.parse_binary(1)
        tok = self.current
        if tok.kind == TokenKind.RPAREN:
            raise self.error("unmatched ')'", tok)
        if tok.kind != TokenKind.EOF:
            raise self.error(f"unexpected {tok.describe()} after expression", tok)
        return expr

    def parse_binary(self, min_prec: int) -> Expression:
        left = self.parse_unary()
        while True:
            entry = _BINARY_OPS.get(self.current.kind)
            if entry is None or entry[1] < min_prec:
                return left
            op, prec = entry
            self.advance()
            right = self.parse_binary(prec + 1)
            left = BinaryExpr(op=op, left=left, right=right, pos=left.pos)

    def parse_unary(self) -> Expression:
        tok = self.current
        op = _UNARY_OPS.get(tok.kind)
        if op is None:
            return self.parse_primary()
        self.advance()
        return UnaryExpr(op=op, operand=self.parse_unary(), pos=tok.pos)

    def parse_primary(self) -> Expression:
        tok = self.current

        literal = _LITERALS.get(tok.kind)
        if literal is not None:
            self.advance()
            return LiteralExpr(literal=literal, value=tok.text, pos=tok.pos)

        if tok.kind == TokenKind.IDENT:
            return self.parse_identifier()

        if tok.kind == TokenKind.LPAREN:
            self.advance()
            inner = self.parse_binary(1)
            if self.current.kind != TokenKind.RPAREN:
                raise self.error(
                    f"missing ')' to close '(' at position {tok.pos}, "
                    f"got {self.current.describe()}",
                    self.current,
                )
            self.advance()
            return ParenExpr(inner=inner, pos=tok.pos)

        raise self.error(f"unexpected {tok.describe()}", tok)

    def parse_identifier(self) -> Expression:
        tok = self.advance()
        parts = tok.text.split(".")
        if len(parts) > 2:
            raise self.error(
                f"nested namespaces are not supported: {tok.text}", tok,
            )

        if self.current.kind == TokenKind.LPAREN:
            if len(parts) == 2:
                raise self.error(f"cannot call qualified name {tok.text}", tok)
            return self.parse_call(tok)

        if len(parts) == 2:
            return IdentifierExpr(namespace=parts[0], name=parts[1], pos=tok.pos)
        return IdentifierExpr(name=tok.text, pos=tok.pos)

    def parse_call(self, name_tok: Token) -> CallExpr:
        open_tok = self.advance()
        args: list[Expression] = []
        while self.current.kind != TokenKind.RPAREN:
            if self.current.kind == TokenKind.EOF:
                raise self.error(
                    f"missing ')' to close '(' at position {open_tok.pos}",
                    self.current,
                )
            args.append(self.parse_binary(1))
            if self.current.kind == TokenKind.COMMA:
                self.advance()
            elif self.current.kind != TokenKind.RPAREN:
                raise self.error(
                    f"expected ',' or ')' in argument list, got {self.current.describe()}",
                    self.current,
                )
        self.advance()
        return CallExpr(function_name=name_tok.text, args=tuple(args), pos=name_tok.pos)


def parse(tokens: list[Token], source: str | None = None) -> Expression:
    """Parse a token list (as produced by ``tokenize``) into an expression tree."""
    parser = _Parser(tokens, source)
    try:
        return parser.parse()
    except RecursionError:
        raise parser.error("expression nested too deeply", parser.current) from None


def parse_expr(source: str) -> Expression:
    """Tokenize and parse expression text."""
    return parse(tokenize(source), source)
