"""Helpers for building wire-format expression graphs.

Operands may be plain numbers, existing graph mappings, parsed nodes, or
any object with an integer `tag` attribute (referenced by tag):

    multiply(2, 3, 4)
    # {"type": "multiply", "a": {...}, "b": {...}, "others": [{...}]}
"""

from collections.abc import Mapping
from numbers import Real
from typing import Any, Callable, Union

from animatedexpr.expression.nodes import Node
from animatedexpr.expression.types import ExpressionType

Operand = Union[float, int, Mapping[str, Any], Node, Any]
Graph = dict[str, Any]


def number(value: float) -> Graph:
    return {"type": ExpressionType.NUMBER.value, "value": float(value)}


def value(tag: int) -> Graph:
    return {"type": ExpressionType.VALUE.value, "tag": int(tag)}


def to_graph(operand: Operand) -> Graph:
    """Convert an operand to a graph mapping."""
    if isinstance(operand, Node):
        return operand.to_dict()
    if isinstance(operand, Mapping):
        if "type" not in operand:
            raise ValueError("Graph mapping must have a 'type' field")
        return dict(operand)
    if isinstance(operand, Real) and not isinstance(operand, bool):
        return number(operand)
    tag = getattr(operand, "tag", None)
    if isinstance(tag, int) and not isinstance(tag, bool):
        return value(tag)
    raise TypeError(f"Cannot build an expression from {type(operand).__name__}")


def _multi(op: ExpressionType) -> Callable[..., Graph]:
    def build(a: Operand, b: Operand, *others: Operand) -> Graph:
        return {
            "type": op.value,
            "a": to_graph(a),
            "b": to_graph(b),
            "others": [to_graph(o) for o in others],
        }

    build.__name__ = op.value
    return build


def _single(op: ExpressionType) -> Callable[[Operand], Graph]:
    def build(v: Operand) -> Graph:
        return {"type": op.value, "v": to_graph(v)}

    build.__name__ = op.value
    return build


def _comparison(op: ExpressionType) -> Callable[[Operand, Operand], Graph]:
    def build(left: Operand, right: Operand) -> Graph:
        return {"type": op.value, "left": to_graph(left), "right": to_graph(right)}

    build.__name__ = op.value
    return build


def cond(expr: Operand, if_node: Operand, else_node: Operand = 0) -> Graph:
    """Conditional; the else branch defaults to literal 0."""
    return {
        "type": ExpressionType.COND.value,
        "expr": to_graph(expr),
        "ifNode": to_graph(if_node),
        "elseNode": to_graph(else_node),
    }


add = _multi(ExpressionType.ADD)
sub = _multi(ExpressionType.SUB)
multiply = _multi(ExpressionType.MULTIPLY)
divide = _multi(ExpressionType.DIVIDE)
modulo = _multi(ExpressionType.MODULO)
pow_ = _multi(ExpressionType.POW)

sqrt = _single(ExpressionType.SQRT)
log = _single(ExpressionType.LOG)
sin = _single(ExpressionType.SIN)
cos = _single(ExpressionType.COS)
tan = _single(ExpressionType.TAN)
acos = _single(ExpressionType.ACOS)
asin = _single(ExpressionType.ASIN)
atan = _single(ExpressionType.ATAN)
exp = _single(ExpressionType.EXP)
round_ = _single(ExpressionType.ROUND)

and_ = _multi(ExpressionType.AND)
or_ = _multi(ExpressionType.OR)
not_ = _single(ExpressionType.NOT)

eq = _comparison(ExpressionType.EQ)
neq = _comparison(ExpressionType.NEQ)
less_than = _comparison(ExpressionType.LESS_THAN)
greater_than = _comparison(ExpressionType.GREATER_THAN)
less_or_eq = _comparison(ExpressionType.LESS_OR_EQ)
greater_or_eq = _comparison(ExpressionType.GREATER_OR_EQ)
