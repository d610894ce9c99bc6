"""Expression graph grammar, parsing and compilation."""

from animatedexpr.expression.types import ExpressionType, OperatorCategory
from animatedexpr.expression.nodes import (
    Node,
    NumberNode,
    ValueNode,
    MultiOpNode,
    SingleOpNode,
    ComparisonNode,
    CondNode,
    UnsupportedNode,
    parse_node,
)
from animatedexpr.expression.resolver import ValueHandle, ValueResolver
from animatedexpr.expression.compiler import (
    CompiledExpression,
    ExpressionCompiler,
    compile_graph,
    evaluate_graph,
)

__all__ = [
    "ExpressionType",
    "OperatorCategory",
    "Node",
    "NumberNode",
    "ValueNode",
    "MultiOpNode",
    "SingleOpNode",
    "ComparisonNode",
    "CondNode",
    "UnsupportedNode",
    "parse_node",
    "ValueHandle",
    "ValueResolver",
    "CompiledExpression",
    "ExpressionCompiler",
    "compile_graph",
    "evaluate_graph",
]
