"""In-memory node registry.

Stores animated nodes by integer tag and serves as the ValueResolver for
compiled expressions. Expressions only ever hold tags, never the nodes.
"""

from dataclasses import dataclass
from typing import Any, Iterator, Optional
import logging

from animatedexpr.errors import DuplicateNodeError, NodeNotFoundError
from animatedexpr.expression.resolver import ValueHandle

logger = logging.getLogger(__name__)


@dataclass
class AnimatedValue:
    """A settable value node.

    Attributes:
        value: Current scalar value
    """

    value: float = 0.0

    def set_value(self, value: float) -> None:
        """Set the value read by expressions on the next tick."""
        self.value = float(value)

    def current_value(self) -> float:
        return self.value


class NodeRegistry:
    """Registry of animated nodes keyed by tag."""

    def __init__(self) -> None:
        self._nodes: dict[int, Any] = {}

    def add(self, tag: int, node: Any) -> Any:
        """Register a node under tag.

        Raises:
            DuplicateNodeError: If tag is already taken
        """
        if tag in self._nodes:
            raise DuplicateNodeError(f"Node {tag} is already registered")
        self._nodes[tag] = node
        return node

    def remove(self, tag: int) -> Any:
        """Unregister and return the node under tag.

        Raises:
            NodeNotFoundError: If no node is registered under tag
        """
        try:
            return self._nodes.pop(tag)
        except KeyError:
            raise NodeNotFoundError(f"Node {tag} does not exist")

    def get(self, tag: int) -> Optional[Any]:
        """Get the node under tag, or None."""
        return self._nodes.get(tag)

    def lookup(self, tag: int) -> Optional[ValueHandle]:
        """Get the node under tag if it produces a value."""
        node = self._nodes.get(tag)
        if node is None:
            return None
        if not isinstance(node, ValueHandle):
            logger.debug(f"Node {tag} ({type(node).__name__}) does not produce a value")
            return None
        return node

    def __contains__(self, tag: object) -> bool:
        return tag in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[int]:
        return iter(self._nodes)
