"""constcalc syntax: lexer and parser.

Public API::

    from constcalc.syntax import parse_expr
    tree = parse_expr("2*time.D + 4*time.H")
"""

from ._lexer import Token, TokenKind, tokenize
from ._parser import parse, parse_expr

__all__ = ["Token", "TokenKind", "parse", "parse_expr", "tokenize"]
