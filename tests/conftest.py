"""
Pytest fixtures for animatedexpr tests.

Registries and resolver stubs are built fresh for each test.
"""

import pytest

from animatedexpr.runtime.registry import AnimatedValue, NodeRegistry


class CountingResolver:
    """Resolver stub that records every lookup and value read."""

    def __init__(self, values: dict[int, float] | None = None) -> None:
        self.values = dict(values or {})
        self.lookups: list[int] = []
        self.reads: list[int] = []

    def lookup(self, tag: int):
        self.lookups.append(tag)
        if tag not in self.values:
            return None
        return _Handle(self, tag)


class _Handle:
    def __init__(self, resolver: CountingResolver, tag: int) -> None:
        self._resolver = resolver
        self._tag = tag

    def current_value(self) -> float:
        self._resolver.reads.append(self._tag)
        return self._resolver.values[self._tag]


@pytest.fixture
def counting_resolver():
    """Resolver with nodes 1 -> 5.0 and 2 -> 10.0."""
    return CountingResolver({1: 5.0, 2: 10.0})


@pytest.fixture
def registry() -> NodeRegistry:
    """Registry holding value nodes 1 -> 5.0 and 2 -> 10.0."""
    registry = NodeRegistry()
    registry.add(1, AnimatedValue(5.0))
    registry.add(2, AnimatedValue(10.0))
    return registry
