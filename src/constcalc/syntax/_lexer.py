"""Lexer: expression text -> token list.

Literal text is validated here (digits valid for their base, ``_``
placement, escapes) but kept raw in the token; conversion to exact
values happens at evaluation time.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from constcalc.constant import unquote, unquote_char
from constcalc.errors import ExprSyntaxError


class TokenKind(str, Enum):
    """Token types for the expression language."""

    # Literals
    INT = "INT"
    FLOAT = "FLOAT"
    IMAG = "IMAG"
    CHAR = "CHAR"
    STRING = "STRING"
    TRUE = "true"
    FALSE = "false"

    # Identifiers, possibly qualified (ns.Name)
    IDENT = "IDENT"

    # Operators
    PLUS = "+"
    MINUS = "-"
    STAR = "*"
    SLASH = "/"
    PERCENT = "%"
    AMP = "&"
    PIPE = "|"
    CARET = "^"
    AMP_CARET = "&^"
    SHL = "<<"
    SHR = ">>"
    LAND = "&&"
    LOR = "||"
    BANG = "!"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="

    # Punctuation
    LPAREN = "("
    RPAREN = ")"
    COMMA = ","

    EOF = "EOF"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    text: str
    pos: int

    def describe(self) -> str:
        if self.kind == TokenKind.EOF:
            return "end of expression"
        return repr(self.text)


_KEYWORDS = {
    "true": TokenKind.TRUE,
    "false": TokenKind.FALSE,
}

_TWO_CHAR_OPS = {
    "&^": TokenKind.AMP_CARET,
    "<<": TokenKind.SHL,
    ">>": TokenKind.SHR,
    "&&": TokenKind.LAND,
    "||": TokenKind.LOR,
    "==": TokenKind.EQ,
    "!=": TokenKind.NE,
    "<=": TokenKind.LE,
    ">=": TokenKind.GE,
}

_ONE_CHAR_OPS = {
    "+": TokenKind.PLUS,
    "-": TokenKind.MINUS,
    "*": TokenKind.STAR,
    "/": TokenKind.SLASH,
    "%": TokenKind.PERCENT,
    "&": TokenKind.AMP,
    "|": TokenKind.PIPE,
    "^": TokenKind.CARET,
    "!": TokenKind.BANG,
    "<": TokenKind.LT,
    ">": TokenKind.GT,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    ",": TokenKind.COMMA,
}

_RADIX = {"x": 16, "o": 8, "b": 2}

_RADIX_NAMES = {16: "hexadecimal", 10: "decimal", 8: "octal", 2: "binary"}

_HEX = frozenset("0123456789abcdefABCDEF")
_DEC = frozenset("0123456789")


def _is_ident_start(c: str) -> bool:
    return c == "_" or c.isalpha()


def _is_ident_part(c: str) -> bool:
    return c == "_" or c.isalnum()


class _Lexer:
    def __init__(self, source: str) -> None:
        self.source = source
        self.n = len(source)
        self.tokens: list[Token] = []

    def error(self, message: str, pos: int) -> ExprSyntaxError:
        return ExprSyntaxError(message, pos, self.source)

    def run(self) -> list[Token]:
        src = self.source
        i = 0
        while i < self.n:
            c = src[i]

            if c in " \t\n\r":
                i += 1
                continue

            if src.startswith("//", i):
                end = src.find("\n", i)
                i = self.n if end < 0 else end + 1
                continue

            if src.startswith("/*", i):
                end = src.find("*/", i + 2)
                if end < 0:
                    raise self.error("comment not terminated", i)
                i = end + 2
                continue

            if c.isdigit() or (c == "." and i + 1 < self.n and src[i + 1].isdigit()):
                i = self._number(i)
                continue

            if c == '"':
                i = self._string(i)
                continue

            if c == "`":
                end = src.find("`", i + 1)
                if end < 0:
                    raise self.error("raw string literal not terminated", i)
                self.tokens.append(Token(TokenKind.STRING, src[i:end + 1], i))
                i = end + 1
                continue

            if c == "'":
                i = self._char(i)
                continue

            if _is_ident_start(c):
                i = self._identifier(i)
                continue

            two = src[i:i + 2]
            if two in _TWO_CHAR_OPS:
                self.tokens.append(Token(_TWO_CHAR_OPS[two], two, i))
                i += 2
                continue

            if c in _ONE_CHAR_OPS:
                self.tokens.append(Token(_ONE_CHAR_OPS[c], c, i))
                i += 1
                continue

            raise self.error(f"invalid character {c!r}", i)

        self.tokens.append(Token(TokenKind.EOF, "", self.n))
        return self.tokens

    # -- Identifiers -------------------------------------------------------

    def _identifier(self, start: int) -> int:
        src = self.source
        i = start + 1
        while i < self.n and _is_ident_part(src[i]):
            i += 1
        # Qualified name: ns.Name (one or more dots are kept; the parser
        # rejects nesting)
        while i + 1 < self.n and src[i] == "." and _is_ident_start(src[i + 1]):
            i += 2
            while i < self.n and _is_ident_part(src[i]):
                i += 1
        word = src[start:i]
        self.tokens.append(Token(_KEYWORDS.get(word, TokenKind.IDENT), word, start))
        return i

    # -- Numbers -----------------------------------------------------------

    def _digits(self, i: int, base: int) -> tuple[int, int, int]:
        """Scan digits (and ``_``) from ``i``.

        Returns ``(end, digit_count, first_invalid_pos)``; the last is -1
        when every digit is valid for ``base``.
        """
        src = self.source
        allowed = _HEX if base == 16 else _DEC
        count = 0
        invalid = -1
        while i < self.n and (src[i] in allowed or src[i] == "_"):
            if src[i] != "_":
                count += 1
                if base < 10 and int(src[i]) >= base and invalid < 0:
                    invalid = i
            i += 1
        return i, count, invalid

    def _number(self, start: int) -> int:
        src = self.source
        i = start
        kind = TokenKind.INT
        base = 10
        prefix = ""
        digits = 0
        invalid = -1

        if src[i] != ".":
            if src[i] == "0" and i + 1 < self.n and src[i + 1].lower() in _RADIX:
                prefix = src[i + 1].lower()
                base = _RADIX[prefix]
                i, digits, invalid = self._digits(i + 2, base)
            else:
                i, digits, _ = self._digits(i, 10)

        if i < self.n and src[i] == ".":
            if prefix in ("o", "b"):
                raise self.error(f"invalid radix point in {_RADIX_NAMES[base]} literal", i)
            kind = TokenKind.FLOAT
            i, frac, invalid_frac = self._digits(i + 1, base)
            digits += frac
            if invalid < 0:
                invalid = invalid_frac

        if digits == 0:
            raise self.error(f"{_RADIX_NAMES[base]} literal has no digits", start)

        if i < self.n and src[i] in "eEpP":
            exp = src[i].lower()
            if exp == "e" and prefix:
                raise self.error("'e' exponent requires decimal mantissa", i)
            if exp == "p" and prefix != "x":
                raise self.error("'p' exponent requires hexadecimal mantissa", i)
            kind = TokenKind.FLOAT
            i += 1
            if i < self.n and src[i] in "+-":
                i += 1
            i, exp_digits, _ = self._digits(i, 10)
            if exp_digits == 0:
                raise self.error("exponent has no digits", i)
        elif prefix == "x" and kind == TokenKind.FLOAT:
            raise self.error("hexadecimal mantissa requires a 'p' exponent", i)

        if i < self.n and src[i] == "i":
            kind = TokenKind.IMAG
            i += 1

        text = src[start:i]

        if invalid >= 0:
            raise self.error(
                f"invalid digit {src[invalid]!r} in {_RADIX_NAMES[base]} literal", invalid,
            )
        if kind == TokenKind.INT and not prefix and len(text) > 1 and text[0] == "0":
            for j, ch in enumerate(text):
                if ch in "89":
                    raise self.error(f"invalid digit {ch!r} in octal literal", start + j)

        bad = _misplaced_underscore(text, prefix)
        if bad >= 0:
            raise self.error("'_' must separate successive digits", start + bad)

        self.tokens.append(Token(kind, text, start))
        return i

    # -- Strings and runes -------------------------------------------------

    def _string(self, start: int) -> int:
        src = self.source
        i = start + 1
        while i < self.n:
            c = src[i]
            if c == "\\":
                i += 2
                continue
            if c == "\n":
                break
            if c == '"':
                text = src[start:i + 1]
                try:
                    unquote(text)
                except ValueError as e:
                    raise self.error(str(e), start) from None
                self.tokens.append(Token(TokenKind.STRING, text, start))
                return i + 1
            i += 1
        raise self.error("string literal not terminated", start)

    def _char(self, start: int) -> int:
        src = self.source
        i = start + 1
        while i < self.n:
            c = src[i]
            if c == "\\":
                i += 2
                continue
            if c == "\n":
                break
            if c == "'":
                text = src[start:i + 1]
                try:
                    unquote_char(text)
                except ValueError as e:
                    raise self.error(str(e), start) from None
                self.tokens.append(Token(TokenKind.CHAR, text, start))
                return i + 1
            i += 1
        raise self.error("rune literal not terminated", start)


def _misplaced_underscore(text: str, prefix: str) -> int:
    """Offset of the first ``_`` not between two digits, or -1.

    A base prefix (``0x``) counts as a digit, so ``0x_FF`` is valid.
    """
    digits = _HEX if prefix == "x" else _DEC
    for j, ch in enumerate(text):
        if ch != "_":
            continue
        before = text[j - 1] if j > 0 else ""
        after = text[j + 1] if j + 1 < len(text) else ""
        prefix_before = prefix and j == 2
        if not (before in digits or prefix_before) or after not in digits:
            return j
    return -1


def tokenize(source: str) -> list[Token]:
    """Tokenize an expression string into a list of tokens ending with EOF."""
    return _Lexer(source).run()
