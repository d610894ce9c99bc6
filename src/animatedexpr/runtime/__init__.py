"""Animated nodes that evaluate expression graphs once per tick."""

from animatedexpr.runtime.registry import AnimatedValue, NodeRegistry
from animatedexpr.runtime.animated import AnimatedExpressionNode, ExpressionNodeConfig

__all__ = [
    "AnimatedValue",
    "NodeRegistry",
    "AnimatedExpressionNode",
    "ExpressionNodeConfig",
]
