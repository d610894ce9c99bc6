"""Operator grammar for expression graphs.

The set of tags is closed. Every tag a graph may carry is a member of
ExpressionType; the category decides which child fields the node needs
and how the compiler evaluates it.
"""

from enum import Enum, auto
from dataclasses import dataclass


class ExpressionType(str, Enum):
    """Operator tags accepted in the `type` field of a graph node."""

    # Variadic arithmetic
    ADD = "add"
    SUB = "sub"
    MULTIPLY = "multiply"
    DIVIDE = "divide"
    MODULO = "modulo"
    POW = "pow"

    # Unary math
    SQRT = "sqrt"
    LOG = "log"
    SIN = "sin"
    COS = "cos"
    TAN = "tan"
    ACOS = "acos"
    ASIN = "asin"
    ATAN = "atan"
    EXP = "exp"
    ROUND = "round"

    # Logical
    AND = "and"
    OR = "or"
    NOT = "not"

    # Comparison
    EQ = "eq"
    NEQ = "neq"
    LESS_THAN = "lessThan"
    GREATER_THAN = "greaterThan"
    LESS_OR_EQ = "lessOrEq"
    GREATER_OR_EQ = "greaterOrEq"

    # Leaves
    VALUE = "value"
    NUMBER = "number"

    # Conditional
    COND = "cond"

    # Statements (reserved, no evaluator)
    SET = "set"
    BLOCK = "block"

    @classmethod
    def lookup(cls, tag: str) -> "ExpressionType | None":
        """Find the member for a tag, case-sensitively."""
        try:
            return cls(tag)
        except ValueError:
            return None


class OperatorCategory(Enum):
    """Shapes of graph nodes."""

    MULTI = auto()        # a, b, others[]
    SINGLE = auto()       # v
    LOGICAL = auto()      # a, b, others[] over truthiness
    COMPARISON = auto()   # left, right
    REFERENCE = auto()    # tag
    LITERAL = auto()      # value
    CONDITIONAL = auto()  # expr, ifNode, elseNode
    STATEMENT = auto()    # reserved, unimplemented


@dataclass(frozen=True)
class OperatorSignature:
    """Shape of a node for a given operator tag.

    Attributes:
        type: The operator tag
        category: How the node is compiled
        fields: Child node fields that must be present
    """

    type: ExpressionType
    category: OperatorCategory
    fields: tuple[str, ...]

    @property
    def supported(self) -> bool:
        """Whether the compiler has an evaluator for this tag."""
        return self.category != OperatorCategory.STATEMENT


_CATEGORY_FIELDS: dict[OperatorCategory, tuple[str, ...]] = {
    OperatorCategory.MULTI: ("a", "b"),
    OperatorCategory.SINGLE: ("v",),
    OperatorCategory.LOGICAL: ("a", "b"),
    OperatorCategory.COMPARISON: ("left", "right"),
    OperatorCategory.REFERENCE: (),
    OperatorCategory.LITERAL: (),
    OperatorCategory.CONDITIONAL: ("expr", "ifNode", "elseNode"),
    OperatorCategory.STATEMENT: (),
}

_CATEGORIES: dict[OperatorCategory, tuple[ExpressionType, ...]] = {
    OperatorCategory.MULTI: (
        ExpressionType.ADD,
        ExpressionType.SUB,
        ExpressionType.MULTIPLY,
        ExpressionType.DIVIDE,
        ExpressionType.MODULO,
        ExpressionType.POW,
    ),
    OperatorCategory.SINGLE: (
        ExpressionType.SQRT,
        ExpressionType.LOG,
        ExpressionType.SIN,
        ExpressionType.COS,
        ExpressionType.TAN,
        ExpressionType.ACOS,
        ExpressionType.ASIN,
        ExpressionType.ATAN,
        ExpressionType.EXP,
        ExpressionType.ROUND,
        ExpressionType.NOT,
    ),
    OperatorCategory.LOGICAL: (ExpressionType.AND, ExpressionType.OR),
    OperatorCategory.COMPARISON: (
        ExpressionType.EQ,
        ExpressionType.NEQ,
        ExpressionType.LESS_THAN,
        ExpressionType.GREATER_THAN,
        ExpressionType.LESS_OR_EQ,
        ExpressionType.GREATER_OR_EQ,
    ),
    OperatorCategory.REFERENCE: (ExpressionType.VALUE,),
    OperatorCategory.LITERAL: (ExpressionType.NUMBER,),
    OperatorCategory.CONDITIONAL: (ExpressionType.COND,),
    OperatorCategory.STATEMENT: (ExpressionType.SET, ExpressionType.BLOCK),
}


OPERATOR_SIGNATURES: dict[ExpressionType, OperatorSignature] = {
    op: OperatorSignature(op, category, _CATEGORY_FIELDS[category])
    for category, ops in _CATEGORIES.items()
    for op in ops
}


def get_operators_in(category: OperatorCategory) -> list[ExpressionType]:
    """Get all operator tags of the given category."""
    return [
        op for op, sig in OPERATOR_SIGNATURES.items()
        if sig.category == category
    ]
