"""Evaluator configuration."""

import os
from dataclasses import dataclass
from enum import Enum


class ReferenceMode(Enum):
    """When `value` references are looked up in the registry."""

    COMPILE = "compile"  # Once, while compiling; absent ids stay 0.0 forever
    TICK = "tick"        # On every evaluation


_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})


@dataclass(frozen=True)
class EvaluatorConfig:
    """Configuration for compiling expression graphs.

    Attributes:
        reference_mode: Lookup strategy for `value` references
        strict_operators: Raise on unsupported operator tags instead of
            compiling them to a constant-zero leaf
    """

    reference_mode: ReferenceMode = ReferenceMode.COMPILE
    strict_operators: bool = False

    @classmethod
    def from_env(cls) -> "EvaluatorConfig":
        """Build a config from ANIMATEDEXPR_* environment variables."""
        mode = os.environ.get("ANIMATEDEXPR_REFERENCE_MODE", ReferenceMode.COMPILE.value)
        strict = os.environ.get("ANIMATEDEXPR_STRICT_OPERATORS", "")
        try:
            reference_mode = ReferenceMode(mode.strip().lower())
        except ValueError:
            raise ValueError(
                f"Invalid ANIMATEDEXPR_REFERENCE_MODE '{mode}'. "
                f"Valid: {[m.value for m in ReferenceMode]}"
            )
        return cls(
            reference_mode=reference_mode,
            strict_operators=strict.strip().lower() in _TRUE_VALUES,
        )


DEFAULT_CONFIG = EvaluatorConfig()
