"""Expression AST nodes produced by the parser."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class LiteralKind(str, Enum):
    INT = "int"
    FLOAT = "float"
    IMAG = "imag"
    CHAR = "char"
    STRING = "string"
    BOOL = "bool"


class BinaryOp(str, Enum):
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    AND = "&"
    OR = "|"
    XOR = "^"
    AND_NOT = "&^"
    SHL = "<<"
    SHR = ">>"
    EQ = "=="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    LAND = "&&"
    LOR = "||"


class UnaryOp(str, Enum):
    POS = "+"
    NEG = "-"
    NOT = "!"
    XOR = "^"


class _Node(BaseModel):
    model_config = ConfigDict(frozen=True)

    pos: int = 0
    """Offset of the node's first token in the source text."""


class LiteralExpr(_Node):
    """A constant literal, kept as raw source text (e.g. 0x1F, 2.5e3, "a\\n")."""

    kind: Literal["literal"] = "literal"
    literal: LiteralKind
    value: str


class IdentifierExpr(_Node):
    """Reference to a named constant, optionally qualified: ``ns.Name``."""

    kind: Literal["identifier"] = "identifier"
    namespace: str | None = None
    name: str

    @property
    def qualified_name(self) -> str:
        if self.namespace is None:
            return self.name
        return f"{self.namespace}.{self.name}"


class UnaryExpr(_Node):
    kind: Literal["unary"] = "unary"
    op: UnaryOp
    operand: Expression


class BinaryExpr(_Node):
    kind: Literal["binary"] = "binary"
    op: BinaryOp
    left: Expression
    right: Expression


class ParenExpr(_Node):
    kind: Literal["paren"] = "paren"
    inner: Expression


class CallExpr(_Node):
    """Call of a predeclared builtin function: len(x), min(a, b)."""

    kind: Literal["call"] = "call"
    function_name: str
    args: tuple[Expression, ...] = ()


Expression = Annotated[
    Union[
        LiteralExpr,
        IdentifierExpr,
        UnaryExpr,
        BinaryExpr,
        ParenExpr,
        CallExpr,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression references.
UnaryExpr.model_rebuild()
BinaryExpr.model_rebuild()
ParenExpr.model_rebuild()
CallExpr.model_rebuild()
