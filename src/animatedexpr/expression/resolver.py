"""Lookup interface between compiled expressions and external value nodes.

Compiled expressions never own the nodes they read. They hold a tag and
go through a ValueResolver, so any registry (or a test stub) can back them.
"""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class ValueHandle(Protocol):
    """A value-producing node."""

    def current_value(self) -> float:
        """Get the node's current scalar value."""
        ...


@runtime_checkable
class ValueResolver(Protocol):
    """Looks up value-producing nodes by integer tag."""

    def lookup(self, tag: int) -> Optional[ValueHandle]:
        """Get the node registered under tag, or None if absent."""
        ...


def resolve(resolver: Optional[ValueResolver], tag: int) -> Optional[float]:
    """Get the current value of the node under tag, or None if absent."""
    if resolver is None:
        return None
    handle = resolver.lookup(tag)
    if handle is None:
        return None
    return handle.current_value()
