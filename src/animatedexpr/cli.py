"""
Command-line interface for animatedexpr.

Provides commands for:
- Evaluating an expression graph over a number of ticks
- Describing the structure of an expression graph
"""

import json
import logging
import math
import sys
from pathlib import Path
from typing import Any

import click

from animatedexpr import __version__

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("animatedexpr")


def _load_config(path: str) -> dict[str, Any]:
    """Read a {"graph": ...} payload from a JSON file."""
    try:
        return json.loads(Path(path).read_text())
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}") from e


def _parse_binding(text: str) -> tuple[int, list[float]]:
    """Parse TAG=V1[,V2,...] into a tag and its per-tick values."""
    tag, sep, values = text.partition("=")
    try:
        if not sep or not values:
            raise ValueError
        return int(tag), [float(v) for v in values.split(",")]
    except ValueError as e:
        raise click.BadParameter(
            f"'{text}' (expected TAG=VALUE or TAG=V1,V2,...)", param_hint="--bind"
        ) from e


@click.group()
@click.version_option(version=__version__)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
def main(verbose: bool) -> None:
    """animatedexpr - Expression graph evaluator."""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


@main.command()
@click.argument("graph_file", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--bind",
    "-b",
    multiple=True,
    help="Value node TAG=VALUE, or TAG=V1,V2,... for one value per tick",
)
@click.option("--ticks", "-n", default=1, show_default=True, help="Number of ticks to run")
@click.option("--strict", is_flag=True, help="Fail on unsupported operators")
@click.option(
    "--per-tick-references",
    is_flag=True,
    help="Look up referenced nodes on every tick instead of once at compile time",
)
@click.option("--output", "-o", default=None, help="Output file for results")
def evaluate(
    graph_file: str,
    bind: tuple[str, ...],
    ticks: int,
    strict: bool,
    per_tick_references: bool,
    output: str,
) -> None:
    """Evaluate an expression graph once per tick."""
    from animatedexpr.config import EvaluatorConfig, ReferenceMode
    from animatedexpr.errors import AnimatedExprError
    from animatedexpr.expression.compiler import ExpressionCompiler
    from animatedexpr.runtime import AnimatedExpressionNode, AnimatedValue, NodeRegistry

    if ticks < 1:
        raise click.BadParameter("must be at least 1", param_hint="--ticks")

    bindings = dict(_parse_binding(b) for b in bind)
    config = EvaluatorConfig(
        reference_mode=ReferenceMode.TICK if per_tick_references else ReferenceMode.COMPILE,
        strict_operators=strict,
    )

    registry = NodeRegistry()
    values = {tag: registry.add(tag, AnimatedValue(seq[0])) for tag, seq in bindings.items()}

    try:
        node = AnimatedExpressionNode.from_config(
            _load_config(graph_file),
            resolver=registry,
            compiler=ExpressionCompiler(config),
        )
        results = []
        for tick in range(ticks):
            for tag, seq in bindings.items():
                values[tag].set_value(seq[min(tick, len(seq) - 1)])
            node.update()
            results.append(node.current_value())
            click.echo(f"tick {tick + 1}: {node.current_value()!r}")
    except AnimatedExprError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    # Save if output specified
    if output:
        # NaN and infinities are written as null so the file stays valid JSON
        output_path = Path(output)
        saved = [r if math.isfinite(r) else None for r in results]
        output_path.write_text(json.dumps({"results": saved}, indent=2, allow_nan=False))
        click.echo(f"\nResults saved to {output}")


@main.command()
@click.argument("graph_file", type=click.Path(exists=True, dir_okay=False))
def describe(graph_file: str) -> None:
    """Show the formula, size and references of an expression graph."""
    from animatedexpr.errors import AnimatedExprError
    from animatedexpr.expression.nodes import (
        collect_references,
        count_nodes,
        get_depth,
        parse_node,
    )
    from animatedexpr.runtime.animated import ExpressionNodeConfig
    from pydantic import ValidationError

    try:
        config = ExpressionNodeConfig.model_validate(_load_config(graph_file))
        root = parse_node(config.graph)
    except ValidationError as e:
        click.echo(f"Error: invalid expression config: {e}", err=True)
        sys.exit(1)
    except AnimatedExprError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    references = sorted(set(collect_references(root)))
    click.echo(f"Formula:    {root.to_string()}")
    click.echo(f"Nodes:      {count_nodes(root)}")
    click.echo(f"Depth:      {get_depth(root)}")
    click.echo(f"References: {', '.join(str(r) for r in references) or 'none'}")


if __name__ == "__main__":
    main()
