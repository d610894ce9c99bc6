"""
animatedexpr: Compile-once, evaluate-per-frame expression graphs.

Declarative arithmetic/logical graphs are compiled to closure trees on
first use and re-evaluated every animation tick against the current
values of the nodes they reference.
"""

__version__ = "0.1.0"

from animatedexpr.config import EvaluatorConfig, ReferenceMode
from animatedexpr.errors import (
    AnimatedExprError,
    MalformedGraphError,
    UnsupportedOperatorError,
)
from animatedexpr.expression.compiler import ExpressionCompiler, compile_graph
from animatedexpr.runtime.animated import AnimatedExpressionNode
from animatedexpr.runtime.registry import AnimatedValue, NodeRegistry

__all__ = [
    "__version__",
    "EvaluatorConfig",
    "ReferenceMode",
    "AnimatedExprError",
    "MalformedGraphError",
    "UnsupportedOperatorError",
    "ExpressionCompiler",
    "compile_graph",
    "AnimatedExpressionNode",
    "AnimatedValue",
    "NodeRegistry",
]
