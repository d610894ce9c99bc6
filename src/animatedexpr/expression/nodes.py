"""Typed nodes of an expression graph.

Implements the parsed form of the wire graph:
- NumberNode: Literal value (e.g., {"type": "number", "value": 2})
- ValueNode: Reference to an external value node by tag
- MultiOpNode: Left-folded variadic operators (add, and, ...)
- SingleOpNode: Unary operators (sqrt, not, ...)
- ComparisonNode: Binary comparisons (eq, lessThan, ...)
- CondNode: Conditional with if/else branches
- UnsupportedNode: Unknown or reserved statement tags
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from numbers import Integral, Real
from typing import Any

from animatedexpr.errors import MalformedGraphError
from animatedexpr.expression.types import (
    ExpressionType,
    OperatorCategory,
    OPERATOR_SIGNATURES,
)


class Node(ABC):
    """Abstract base class for expression graph nodes."""

    @property
    @abstractmethod
    def children(self) -> tuple["Node", ...]:
        """Child nodes in evaluation order."""
        pass

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Convert node back to its wire mapping."""
        pass

    @abstractmethod
    def to_string(self) -> str:
        """Convert node to a readable formula."""
        pass

    def __str__(self) -> str:
        return self.to_string()


@dataclass(frozen=True)
class NumberNode(Node):
    """Literal value baked in at compile time."""

    value: float

    @property
    def children(self) -> tuple[Node, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        return {"type": ExpressionType.NUMBER.value, "value": self.value}

    def to_string(self) -> str:
        return repr(float(self.value))


@dataclass(frozen=True)
class ValueNode(Node):
    """Reference to an externally owned value node."""

    tag: int

    @property
    def children(self) -> tuple[Node, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        return {"type": ExpressionType.VALUE.value, "tag": self.tag}

    def to_string(self) -> str:
        return f"value#{self.tag}"


@dataclass(frozen=True)
class MultiOpNode(Node):
    """Variadic operator folded left over a, b, *others."""

    type: ExpressionType
    a: Node
    b: Node
    others: tuple[Node, ...] = ()

    @property
    def children(self) -> tuple[Node, ...]:
        return (self.a, self.b, *self.others)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "a": self.a.to_dict(),
            "b": self.b.to_dict(),
            "others": [o.to_dict() for o in self.others],
        }

    def to_string(self) -> str:
        return f"{self.type.value}({', '.join(c.to_string() for c in self.children)})"


@dataclass(frozen=True)
class SingleOpNode(Node):
    """Unary operator."""

    type: ExpressionType
    v: Node

    @property
    def children(self) -> tuple[Node, ...]:
        return (self.v,)

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "v": self.v.to_dict()}

    def to_string(self) -> str:
        return f"{self.type.value}({self.v.to_string()})"


@dataclass(frozen=True)
class ComparisonNode(Node):
    """Binary comparison yielding 1.0 or 0.0."""

    type: ExpressionType
    left: Node
    right: Node

    @property
    def children(self) -> tuple[Node, ...]:
        return (self.left, self.right)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "left": self.left.to_dict(),
            "right": self.right.to_dict(),
        }

    def to_string(self) -> str:
        return f"{self.type.value}({self.left.to_string()}, {self.right.to_string()})"


@dataclass(frozen=True)
class CondNode(Node):
    """Conditional selecting one of two branches."""

    expr: Node
    if_node: Node
    else_node: Node

    @property
    def children(self) -> tuple[Node, ...]:
        return (self.expr, self.if_node, self.else_node)

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": ExpressionType.COND.value,
            "expr": self.expr.to_dict(),
            "ifNode": self.if_node.to_dict(),
            "elseNode": self.else_node.to_dict(),
        }

    def to_string(self) -> str:
        return (
            f"cond({self.expr.to_string()}, "
            f"{self.if_node.to_string()}, {self.else_node.to_string()})"
        )


@dataclass(frozen=True)
class UnsupportedNode(Node):
    """Node whose tag has no evaluator.

    Covers unknown tags as well as the reserved statement tags. The raw
    mapping is kept so the node can be converted back unchanged.
    """

    tag: str
    raw: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def reserved(self) -> bool:
        """Whether the tag is a known but unimplemented statement."""
        return ExpressionType.lookup(self.tag) is not None

    @property
    def children(self) -> tuple[Node, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw) if self.raw else {"type": self.tag}

    def to_string(self) -> str:
        return f"{self.tag}?"


# =============================================================================
# Parsing wire mappings
# =============================================================================

def _child(data: Mapping[str, Any], name: str, path: str) -> Node:
    if name not in data:
        raise MalformedGraphError(f"missing required field '{name}'", path)
    return parse_node(data[name], f"{path}.{name}")


def _others(data: Mapping[str, Any], path: str) -> tuple[Node, ...]:
    if "others" not in data:
        raise MalformedGraphError("missing required field 'others'", path)
    others = data["others"]
    if not isinstance(others, (list, tuple)):
        raise MalformedGraphError(
            f"'others' must be a list, got {type(others).__name__}", path
        )
    return tuple(
        parse_node(o, f"{path}.others[{i}]") for i, o in enumerate(others)
    )


def _number(data: Mapping[str, Any], path: str) -> float:
    if "value" not in data:
        raise MalformedGraphError("missing required field 'value'", path)
    value = data["value"]
    if isinstance(value, bool) or not isinstance(value, Real):
        raise MalformedGraphError(
            f"'value' must be a number, got {type(value).__name__}", path
        )
    try:
        return float(value)
    except OverflowError as e:
        raise MalformedGraphError(f"'value' {value} is out of float range", path) from e


def _tag(data: Mapping[str, Any], path: str) -> int:
    if "tag" not in data:
        raise MalformedGraphError("missing required field 'tag'", path)
    tag = data["tag"]
    # Whole-number floats are accepted as tags
    if isinstance(tag, float) and tag.is_integer():
        return int(tag)
    if isinstance(tag, bool) or not isinstance(tag, Integral):
        raise MalformedGraphError(
            f"'tag' must be an integer, got {type(tag).__name__}", path
        )
    return int(tag)


def parse_node(data: Any, path: str = "graph") -> Node:
    """Parse a wire mapping into a typed node tree.

    Child fields required by each operator come from OPERATOR_SIGNATURES.

    Args:
        data: Mapping with a string `type` plus operator-specific fields
        path: Location of the node, used in error messages

    Returns:
        The typed root node

    Raises:
        MalformedGraphError: If a required field is missing or has the wrong shape
    """
    if not isinstance(data, Mapping):
        raise MalformedGraphError(
            f"expected a node mapping, got {type(data).__name__}", path
        )
    tag = data.get("type")
    if not isinstance(tag, str):
        raise MalformedGraphError("missing or non-string 'type' field", path)

    op = ExpressionType.lookup(tag)
    if op is None:
        return UnsupportedNode(tag=tag, raw=data)

    signature = OPERATOR_SIGNATURES[op]
    if not signature.supported:
        return UnsupportedNode(tag=tag, raw=data)

    children = [_child(data, name, path) for name in signature.fields]
    category = signature.category

    if category in (OperatorCategory.MULTI, OperatorCategory.LOGICAL):
        a, b = children
        return MultiOpNode(type=op, a=a, b=b, others=_others(data, path))
    elif category == OperatorCategory.SINGLE:
        (v,) = children
        return SingleOpNode(type=op, v=v)
    elif category == OperatorCategory.COMPARISON:
        left, right = children
        return ComparisonNode(type=op, left=left, right=right)
    elif category == OperatorCategory.REFERENCE:
        return ValueNode(tag=_tag(data, path))
    elif category == OperatorCategory.LITERAL:
        return NumberNode(value=_number(data, path))
    elif category == OperatorCategory.CONDITIONAL:
        expr, if_node, else_node = children
        return CondNode(expr=expr, if_node=if_node, else_node=else_node)
    else:
        raise TypeError(f"Unknown operator category: {category}")


# =============================================================================
# Tree helpers
# =============================================================================

def count_nodes(node: Node) -> int:
    """Count total nodes in a subtree."""
    return 1 + sum(count_nodes(c) for c in node.children)


def get_depth(node: Node) -> int:
    """Get the depth of a subtree."""
    if node.children:
        return 1 + max(get_depth(c) for c in node.children)
    return 1


def collect_nodes(node: Node) -> list[Node]:
    """Collect all nodes in a subtree (pre-order traversal)."""
    result = [node]
    for child in node.children:
        result.extend(collect_nodes(child))
    return result


def collect_references(node: Node) -> list[int]:
    """Collect referenced value tags in pre-order, duplicates included."""
    return [n.tag for n in collect_nodes(node) if isinstance(n, ValueNode)]
