"""Example: Driving a UI property from an expression graph.

A progress value moves from 0 to 1 over ten frames. The expression maps it
to an opacity that stays at 0 until halfway, then ramps up linearly.
"""

from animatedexpr import AnimatedExpressionNode, AnimatedValue, NodeRegistry
from animatedexpr.expression import builders as E


def main():
    registry = NodeRegistry()
    progress = registry.add(1, AnimatedValue(0.0))

    opacity = AnimatedExpressionNode(
        E.cond(
            E.greater_than(E.value(1), 0.5),
            E.multiply(E.sub(E.value(1), 0.5), 2),
            0,
        ),
        resolver=registry,
    )

    for frame in range(11):
        progress.set_value(frame / 10)
        opacity.update()
        print(f"frame {frame:2d}: progress={progress.current_value():.1f} "
              f"opacity={opacity.current_value():.2f}")


if __name__ == "__main__":
    main()
