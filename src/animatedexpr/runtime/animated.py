"""Animated node driven by an expression graph.

The scheduler calls update() once per tick. The graph is compiled on the
first call and the closure tree is reused for every later tick.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, ValidationError

from animatedexpr.errors import MalformedGraphError
from animatedexpr.expression.compiler import (
    CompiledExpression,
    ExpressionCompiler,
    get_compiler,
)
from animatedexpr.expression.nodes import Node, collect_references, parse_node
from animatedexpr.expression.resolver import ValueResolver


class ExpressionNodeConfig(BaseModel):
    """Creation payload for an expression node."""

    type: Literal["expression"] = "expression"
    graph: dict[str, Any] = Field(..., description="Root node of the expression graph")


@dataclass(frozen=True)
class Uncompiled:
    """Graph held as received, not yet compiled."""

    graph: Union[Node, Mapping[str, Any]]


@dataclass(frozen=True)
class Compiled:
    """Graph compiled to a closure tree."""

    expression: CompiledExpression


CompileState = Union[Uncompiled, Compiled]


class AnimatedExpressionNode:
    """Value node whose output is an expression over other nodes.

    The node moves from Uncompiled to Compiled exactly once. Only the
    values of referenced nodes change between ticks, never the graph.
    Not thread-safe: one caller per node at a time.
    """

    def __init__(
        self,
        graph: Union[Node, Mapping[str, Any]],
        resolver: Optional[ValueResolver] = None,
        compiler: Optional[ExpressionCompiler] = None,
    ) -> None:
        self._resolver = resolver
        self._compiler = compiler or get_compiler()
        self._state: CompileState = Uncompiled(graph)
        self._value = 0.0

    @classmethod
    def from_config(
        cls,
        config: Mapping[str, Any],
        resolver: Optional[ValueResolver] = None,
        compiler: Optional[ExpressionCompiler] = None,
    ) -> "AnimatedExpressionNode":
        """Create a node from a {"graph": ...} payload.

        Raises:
            MalformedGraphError: If the payload has no graph mapping
        """
        try:
            parsed = ExpressionNodeConfig.model_validate(config)
        except ValidationError as e:
            raise MalformedGraphError(f"invalid expression config: {e}", "config") from e
        return cls(parsed.graph, resolver=resolver, compiler=compiler)

    @property
    def state(self) -> CompileState:
        return self._state

    @property
    def is_compiled(self) -> bool:
        return isinstance(self._state, Compiled)

    @property
    def compiled(self) -> Optional[CompiledExpression]:
        """The compiled expression, or None before the first tick."""
        if isinstance(self._state, Compiled):
            return self._state.expression
        return None

    def compile(self) -> CompiledExpression:
        """Compile the graph if this has not happened yet."""
        if isinstance(self._state, Compiled):
            return self._state.expression
        expression = self._compiler.compile(self._state.graph, self._resolver)
        self._state = Compiled(expression)
        return expression

    def evaluate(self) -> float:
        """Run one evaluation pass and store the result."""
        self._value = self.compile()()
        return self._value

    def update(self) -> None:
        """Per-tick hook called by the scheduler."""
        self.evaluate()

    def current_value(self) -> float:
        """Result of the last evaluation (0.0 before the first tick)."""
        return self._value

    def references(self) -> list[int]:
        """Tags of the value nodes this expression reads."""
        if isinstance(self._state, Compiled):
            return collect_references(self._state.expression.root)
        graph = self._state.graph
        root = graph if isinstance(graph, Node) else parse_node(graph)
        return collect_references(root)

    def formula(self) -> Optional[str]:
        """Readable formula of the graph, or None if it does not parse."""
        if isinstance(self._state, Compiled):
            return self._state.expression.root.to_string()
        graph = self._state.graph
        if isinstance(graph, Node):
            return graph.to_string()
        try:
            return parse_node(graph).to_string()
        except MalformedGraphError:
            return None

    def __repr__(self) -> str:
        state = "compiled" if self.is_compiled else "uncompiled"
        formula = self.formula() or "<malformed>"
        return f"AnimatedExpressionNode({state}, {formula}, value={self._value})"
