"""Exception types raised by animatedexpr.

Only structural problems are fatal. Unresolved references and unsupported
operators compile to constant-zero leaves unless strict mode is enabled.
"""


class AnimatedExprError(Exception):
    """Base class for all animatedexpr errors."""


class MalformedGraphError(AnimatedExprError, ValueError):
    """A graph node is missing a required field or has the wrong shape."""

    def __init__(self, message: str, path: str = "graph") -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class UnsupportedOperatorError(AnimatedExprError, ValueError):
    """An operator tag has no evaluator (strict mode only)."""

    def __init__(self, operator: str, path: str = "graph") -> None:
        self.operator = operator
        self.path = path
        super().__init__(f"{path}: unsupported operator '{operator}'")


class DuplicateNodeError(AnimatedExprError, ValueError):
    """A node id is already registered."""


class NodeNotFoundError(AnimatedExprError, LookupError):
    """No node is registered under the given id."""
