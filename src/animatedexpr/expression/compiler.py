"""Compiler for expression graphs to evaluation closures.

Walks the graph once and composes one closure per node, mirroring the
graph's shape. Calling the result re-evaluates the whole tree without
re-parsing; only reference leaves observe external state.

Arithmetic runs on numpy float64 so division by zero and domain errors
yield inf/NaN instead of raising.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional
import logging

import numpy as np

from animatedexpr.config import DEFAULT_CONFIG, EvaluatorConfig, ReferenceMode
from animatedexpr.errors import UnsupportedOperatorError
from animatedexpr.expression.coercion import is_truthy, to_flag, to_scalar
from animatedexpr.expression.nodes import (
    ComparisonNode,
    CondNode,
    MultiOpNode,
    Node,
    NumberNode,
    SingleOpNode,
    UnsupportedNode,
    ValueNode,
    collect_references,
    count_nodes,
    get_depth,
    parse_node,
)
from animatedexpr.expression.resolver import ValueResolver, resolve
from animatedexpr.expression.types import ExpressionType as E

logger = logging.getLogger(__name__)

EvalFunc = Callable[[], np.float64]

_ZERO = np.float64(0.0)


def _zero() -> np.float64:
    return _ZERO


def _floored_mod(p: np.float64, c: np.float64) -> np.float64:
    """Modulo that is never negative for a positive divisor."""
    return np.fmod(np.fmod(p, c) + c, c)


def _round_half_up(v: np.float64) -> np.float64:
    """Round to nearest integer, ties toward positive infinity."""
    r = np.floor(v)
    return r + 1.0 if v - r >= 0.5 else r


# =============================================================================
# CompiledExpression dataclass
# =============================================================================

@dataclass(frozen=True)
class CompiledExpression:
    """A compiled expression ready for evaluation.

    Attributes:
        root: Parsed graph the closures were built from
        evaluate: Zero-argument closure tree
        references: Tags read by the expression
    """

    root: Node
    evaluate: EvalFunc
    references: frozenset[int]

    def __call__(self) -> float:
        """Evaluate the expression against current external values."""
        with np.errstate(all="ignore"):
            return float(self.evaluate())


# =============================================================================
# ExpressionCompiler class
# =============================================================================

class ExpressionCompiler:
    """Compiles expression graphs to closure trees.

    Compilation is a single recursive-descent pass. Every structural
    problem surfaces here as MalformedGraphError, never during evaluation.
    """

    # Operator implementations
    MULTI_OPERATORS: dict[E, Callable[[np.float64, np.float64], np.float64]] = {}
    SINGLE_OPERATORS: dict[E, Callable[[np.float64], np.float64]] = {}
    COMPARISONS: dict[E, Callable[[np.float64, np.float64], bool]] = {}

    def __init__(self, config: Optional[EvaluatorConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self._register_operators()

    def _register_operators(self) -> None:
        """Register all operator implementations."""
        self.MULTI_OPERATORS = {
            # Arithmetic
            E.ADD: np.add,
            E.SUB: np.subtract,
            E.MULTIPLY: np.multiply,
            E.DIVIDE: np.divide,
            E.MODULO: _floored_mod,
            E.POW: np.power,

            # Logical
            E.AND: lambda p, c: to_flag(is_truthy(p) and is_truthy(c)),
            E.OR: lambda p, c: to_flag(is_truthy(p) or is_truthy(c)),
        }
        self.SINGLE_OPERATORS = {
            E.SQRT: np.sqrt,
            E.LOG: np.log,
            E.SIN: np.sin,
            E.COS: np.cos,
            E.TAN: np.tan,
            E.ACOS: np.arccos,
            E.ASIN: np.arcsin,
            E.ATAN: np.arctan,
            E.EXP: np.exp,
            E.ROUND: _round_half_up,
            E.NOT: lambda v: to_flag(not is_truthy(v)),
        }
        self.COMPARISONS = {
            E.EQ: lambda left, right: left == right,
            E.NEQ: lambda left, right: left != right,
            E.LESS_THAN: lambda left, right: left < right,
            E.GREATER_THAN: lambda left, right: left > right,
            E.LESS_OR_EQ: lambda left, right: left <= right,
            E.GREATER_OR_EQ: lambda left, right: left >= right,
        }

    def compile(
        self,
        graph: Node | Mapping[str, Any],
        resolver: Optional[ValueResolver] = None,
    ) -> CompiledExpression:
        """Compile an expression graph to executable closures.

        Args:
            graph: Root node, either parsed or as a wire mapping
            resolver: Source of external values for `value` references

        Returns:
            CompiledExpression ready for evaluation

        Raises:
            MalformedGraphError: If the graph has the wrong shape
            UnsupportedOperatorError: If strict mode is on and a tag has no evaluator
        """
        root = graph if isinstance(graph, Node) else parse_node(graph)
        evaluate = self._compile_node(root, resolver, "graph")

        logger.debug(
            f"Compiled expression {root.to_string()} "
            f"(nodes={count_nodes(root)}, depth={get_depth(root)})"
        )
        return CompiledExpression(
            root=root,
            evaluate=evaluate,
            references=frozenset(collect_references(root)),
        )

    def _compile_node(
        self,
        node: Node,
        resolver: Optional[ValueResolver],
        path: str,
    ) -> EvalFunc:
        """Recursively compile a node."""
        if isinstance(node, NumberNode):
            constant = np.float64(node.value)
            return lambda: constant

        elif isinstance(node, ValueNode):
            return self._compile_reference(node, resolver, path)

        elif isinstance(node, MultiOpNode):
            reducer = self.MULTI_OPERATORS[node.type]
            a = self._compile_node(node.a, resolver, f"{path}.a")
            b = self._compile_node(node.b, resolver, f"{path}.b")
            others = [
                self._compile_node(o, resolver, f"{path}.others[{i}]")
                for i, o in enumerate(node.others)
            ]

            def fold() -> np.float64:
                acc = reducer(a(), b())
                for other in others:
                    acc = reducer(acc, other())
                return acc

            return fold

        elif isinstance(node, SingleOpNode):
            op = self.SINGLE_OPERATORS[node.type]
            v = self._compile_node(node.v, resolver, f"{path}.v")
            return lambda: op(v())

        elif isinstance(node, ComparisonNode):
            compare = self.COMPARISONS[node.type]
            left = self._compile_node(node.left, resolver, f"{path}.left")
            right = self._compile_node(node.right, resolver, f"{path}.right")
            return lambda: to_flag(compare(left(), right()))

        elif isinstance(node, CondNode):
            expr = self._compile_node(node.expr, resolver, f"{path}.expr")
            if_eval = self._compile_node(node.if_node, resolver, f"{path}.ifNode")
            else_eval = self._compile_node(node.else_node, resolver, f"{path}.elseNode")

            def select() -> np.float64:
                if is_truthy(expr()):
                    return if_eval()
                return else_eval()

            return select

        elif isinstance(node, UnsupportedNode):
            if self.config.strict_operators:
                raise UnsupportedOperatorError(node.tag, path)
            kind = "reserved statement" if node.reserved else "unknown operator"
            logger.warning(f"{path}: {kind} '{node.tag}' compiled to constant 0.0")
            return _zero

        else:
            raise TypeError(f"Unknown node type: {type(node)}")

    def _compile_reference(
        self,
        node: ValueNode,
        resolver: Optional[ValueResolver],
        path: str,
    ) -> EvalFunc:
        """Compile a `value` leaf according to the reference mode."""
        tag = node.tag

        if self.config.reference_mode == ReferenceMode.TICK:
            return lambda: to_scalar(resolve(resolver, tag))

        handle = resolver.lookup(tag) if resolver is not None else None
        if handle is None:
            logger.warning(f"{path}: unresolved reference to node {tag}, compiled to constant 0.0")
            return _zero
        return lambda: to_scalar(handle.current_value())


# =============================================================================
# Compiler singleton - avoids re-registering operators
# =============================================================================

_COMPILER: ExpressionCompiler | None = None


def get_compiler() -> ExpressionCompiler:
    """Get the singleton compiler instance (default configuration)."""
    global _COMPILER
    if _COMPILER is None:
        _COMPILER = ExpressionCompiler()
    return _COMPILER


def compile_graph(
    graph: Node | Mapping[str, Any],
    resolver: Optional[ValueResolver] = None,
) -> CompiledExpression:
    """Convenience function to compile a graph using the singleton compiler."""
    return get_compiler().compile(graph, resolver)


def evaluate_graph(
    graph: Node | Mapping[str, Any],
    resolver: Optional[ValueResolver] = None,
) -> float:
    """Convenience function to compile and evaluate a graph once."""
    return compile_graph(graph, resolver)()
