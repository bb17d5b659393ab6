"""Literal parsing: raw literal text -> exact constant value.

Malformed text raises ``ValueError``; the lexer turns that into an
``ExprSyntaxError`` carrying the literal's position.
"""

from __future__ import annotations

from fractions import Fraction

from constcalc.model.expressions import LiteralKind

from ._values import (
    BoolValue,
    ComplexValue,
    ConstantValue,
    FloatValue,
    IntValue,
    StringValue,
)


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

def _is_hex(text: str) -> bool:
    return text[:2] in ("0x", "0X")


def _is_float_text(text: str) -> bool:
    if "." in text:
        return True
    if _is_hex(text):
        return "p" in text or "P" in text
    return "e" in text or "E" in text


def parse_int(text: str) -> int:
    """Parse an integer literal: decimal, 0x/0o/0b prefixed or legacy 0777 octal."""
    s = text.replace("_", "")
    if len(s) > 1 and s[0] == "0" and s[1].isdigit():
        return int(s, 8)
    return int(s, 0)


def parse_float(text: str) -> Fraction:
    """Parse a decimal or hexadecimal float literal into an exact rational."""
    s = text.replace("_", "")
    if not _is_hex(s):
        return Fraction(s)

    mantissa, _, exponent = s[2:].lower().partition("p")
    if not exponent:
        raise ValueError(f"hexadecimal mantissa requires a 'p' exponent: {text}")
    int_part, _, frac_part = mantissa.partition(".")
    digits = int_part + frac_part
    if not digits:
        raise ValueError(f"hexadecimal literal has no digits: {text}")
    value = Fraction(int(digits, 16), 16 ** len(frac_part))
    return value * Fraction(2) ** int(exponent)


def parse_imag(text: str) -> Fraction:
    """Parse the imaginary literal ``text`` (with its trailing ``i``)."""
    body = text[:-1].replace("_", "")
    if body.isdigit():
        # Leading zeros are decimal here: 0777i == 777i
        return Fraction(int(body, 10))
    if _is_float_text(body):
        return parse_float(body)
    return Fraction(parse_int(body))


# ---------------------------------------------------------------------------
# Strings and runes
# ---------------------------------------------------------------------------

_SIMPLE_ESCAPES = {
    "a": 0x07,
    "b": 0x08,
    "f": 0x0C,
    "n": 0x0A,
    "r": 0x0D,
    "t": 0x09,
    "v": 0x0B,
    "\\": 0x5C,
}

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


def _read_escape(text: str, i: int, quote: str) -> tuple[int, bool, int]:
    """Decode the escape whose backslash is at ``text[i - 1]``.

    Returns ``(value, is_byte, next_index)``. ``is_byte`` is true for
    ``\\x`` and octal escapes, which denote a single raw byte rather than
    a Unicode code point.
    """
    if i >= len(text):
        raise ValueError("escape sequence not terminated")
    c = text[i]
    if c in _SIMPLE_ESCAPES:
        return _SIMPLE_ESCAPES[c], False, i + 1
    if c == quote:
        return ord(quote), False, i + 1
    if c in "01234567":
        digits = text[i:i + 3]
        if len(digits) != 3 or any(d not in "01234567" for d in digits):
            raise ValueError("octal escape needs 3 digits")
        value = int(digits, 8)
        if value > 255:
            raise ValueError(f"octal escape value {value} > 255")
        return value, True, i + 3
    widths = {"x": 2, "u": 4, "U": 8}
    if c in widths:
        n = widths[c]
        digits = text[i + 1:i + 1 + n]
        if len(digits) != n or any(d not in _HEX_DIGITS for d in digits):
            raise ValueError(f"\\{c} escape needs {n} hex digits")
        value = int(digits, 16)
        if c == "x":
            return value, True, i + 1 + n
        if value > 0x10FFFF or 0xD800 <= value <= 0xDFFF:
            raise ValueError("escape sequence is invalid Unicode code point")
        return value, False, i + 1 + n
    raise ValueError(f"unknown escape sequence \\{c}")


def unquote(text: str) -> bytes:
    """Decode a quoted ``"..."`` or raw ```...``` string literal to bytes."""
    if len(text) < 2 or text[0] != text[-1] or text[0] not in "\"`":
        raise ValueError(f"invalid string literal: {text}")

    body = text[1:-1]
    if text[0] == "`":
        return body.replace("\r", "").encode("utf-8")

    out = bytearray()
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\n":
            raise ValueError("newline in string")
        if c == '"':
            raise ValueError("unescaped quote in string")
        if c != "\\":
            out += c.encode("utf-8")
            i += 1
            continue
        value, is_byte, i = _read_escape(body, i + 1, '"')
        if is_byte:
            out.append(value)
        else:
            out += chr(value).encode("utf-8")
    return bytes(out)


def unquote_char(text: str) -> int:
    """Decode a rune literal ``'x'`` to its integer value."""
    if len(text) < 2 or text[0] != "'" or text[-1] != "'":
        raise ValueError(f"invalid rune literal: {text}")
    body = text[1:-1]
    if not body:
        raise ValueError("empty rune literal or unescaped ' in rune literal")
    if body[0] == "\\":
        value, _, end = _read_escape(body, 1, "'")
    else:
        value, end = ord(body[0]), 1
    if end != len(body):
        raise ValueError("more than one character in rune literal")
    return value


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------

def parse_literal(literal: LiteralKind, text: str) -> ConstantValue:
    """Parse literal source text of the given kind into a constant value.

    - ``true``/``false`` -> BoolValue
    - ``42``, ``0x2A``, ``0o52``, ``0b101010``, ``052`` -> IntValue
    - ``2.5``, ``1e3``, ``0x1p-2`` -> FloatValue (exact)
    - ``2i``, ``1.5i`` -> ComplexValue with zero real part
    - ``'a'`` -> IntValue (code point)
    - ``"text"``, ```raw``` -> StringValue
    """
    if literal == LiteralKind.BOOL:
        if text not in ("true", "false"):
            raise ValueError(f"invalid boolean literal: {text}")
        return BoolValue(text == "true")
    if literal == LiteralKind.INT:
        return IntValue(parse_int(text))
    if literal == LiteralKind.FLOAT:
        return FloatValue(parse_float(text))
    if literal == LiteralKind.IMAG:
        return ComplexValue(Fraction(0), parse_imag(text))
    if literal == LiteralKind.CHAR:
        return IntValue(unquote_char(text))
    if literal == LiteralKind.STRING:
        return StringValue(unquote(text))
    raise ValueError(f"unsupported literal kind: {literal}")
