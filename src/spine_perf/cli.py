"""Command-line interface for the animation performance report."""

import importlib
import json
from importlib.metadata import PackageNotFoundError, version
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

try:
    __version__ = version("spine-perf")
except PackageNotFoundError:
    __version__ = "unknown"

from spine_perf.model import Pose
from spine_perf.utils.constants import DEFAULT_SAMPLE_RATE, DEFAULT_THRESHOLDS
from spine_perf.utils.logging import (
    cyan,
    log_detail,
    log_error,
    log_info,
    log_ok,
    log_warn,
    score_color,
    set_verbose,
)

app = typer.Typer(
    name="spine-perf",
    help="Score the runtime cost of skeletal animations",
    add_completion=False,
    rich_markup_mode="rich",
    suggest_commands=True,
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    if value:
        print(f"spine-perf {__version__}")
        raise typer.Exit()


def load_pose(factory_ref: str) -> Pose:
    """
    Import ``module:callable`` and call it to obtain a Pose.

    Raises ValueError when the string is malformed or the factory returns
    something other than a Pose; import errors propagate.
    """
    module_name, sep, attr = factory_ref.partition(":")
    if not sep or not module_name or not attr:
        raise ValueError(f"Expected MODULE:FACTORY, got {factory_ref!r}")

    module = importlib.import_module(module_name)
    factory = getattr(module, attr, None)
    if factory is None or not callable(factory):
        raise ValueError(f"{module_name} has no callable {attr!r}")

    pose = factory()
    if not isinstance(pose, Pose):
        raise ValueError(f"{factory_ref} returned {type(pose).__name__}, not a Pose")
    return pose


def _score_style(score: float) -> str:
    if score >= 75:
        return "green"
    if score >= DEFAULT_THRESHOLDS["poor_score"]:
        return "yellow"
    return "red"


def _render_table(result) -> None:
    table = Table(title=f"{result.skeleton_name} - median score {result.median_score:.1f}")
    table.add_column("Animation")
    table.add_column("Duration", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Mesh", justify="right")
    table.add_column("Clipping", justify="right")
    table.add_column("Blend", justify="right")
    table.add_column("Constraints", justify="right")

    for a in result.animations:
        style = _score_style(a.overall_score)
        table.add_row(
            a.name,
            f"{a.duration:.2f}s",
            f"[{style}]{a.overall_score:.1f}[/]",
            f"{a.mesh_metrics.score:.0f}",
            f"{a.clipping_metrics.score:.0f}",
            f"{a.blend_mode_metrics.score:.0f}",
            f"{a.constraint_metrics.score:.0f}",
        )
    console.print(table)

    metrics = result.skeleton.metrics
    console.print(
        f"Bones: {metrics.total_bones} (max depth {metrics.max_depth}), "
        f"skins: {result.total_skins}, animations: {result.total_animations}"
    )
    if result.best_animation is not None and result.worst_animation is not None:
        console.print(
            f"Best: [green]{result.best_animation.name}[/]  "
            f"Worst: [red]{result.worst_animation.name}[/]"
        )


@app.command()
def report(
    factory: Annotated[
        str,
        typer.Argument(
            help="Pose factory as [bold green]module:callable[/] (must return a Pose)",
            metavar="MODULE:FACTORY",
        ),
    ],
    sample_rate: Annotated[
        float,
        typer.Option(
            "--sample-rate",
            "-r",
            help="Samples per second of animation time",
            rich_help_panel="Analysis",
        ),
    ] = DEFAULT_SAMPLE_RATE,
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Print the JSON summary instead of a table",
            rich_help_panel="Output",
        ),
    ] = False,
    show_recommendations: Annotated[
        bool,
        typer.Option(
            "--recommendations/--no-recommendations",
            help="List optimization advice after the table",
            rich_help_panel="Output",
        ),
    ] = True,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            help="Show debug output (sampling, resolution misses, timings)",
            rich_help_panel="Output",
        ),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            callback=version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    """
    Analyze every animation of a skeleton and report its performance scores.
    """
    # Debug lines would interleave with the JSON document
    set_verbose(verbose and not as_json)

    # Lazy import to keep --help snappy
    from spine_perf.recommendations import generate_recommendations
    from spine_perf.report import analyze, export_json

    try:
        pose = load_pose(factory)
    except (ImportError, ValueError) as e:
        console.print(f"[bold red][ERROR][/] Cannot load pose: {e}")
        raise typer.Exit(code=1)

    try:
        result = analyze(pose, {"sample_rate": sample_rate})
    except ValueError as e:
        log_error(str(e))
        raise typer.Exit(code=1)

    if as_json:
        print(json.dumps(export_json(result), indent=2))
        return

    if result.total_animations == 0:
        log_warn(f"{cyan(result.skeleton_name)} has no animations")
    else:
        median = score_color(result.median_score, DEFAULT_THRESHOLDS["poor_score"])
        log_ok(
            f"Analyzed {result.total_animations} animations of "
            f"{cyan(result.skeleton_name)} (median {median})"
        )

    _render_table(result)

    if show_recommendations:
        log_info("Recommendations")
        for rec in generate_recommendations(result):
            subjects = f": {', '.join(rec.subjects)}" if rec.subjects else ""
            log_detail(f"- {rec.code.value}{subjects}")


def main() -> None:
    """Entry point for the ``spine-perf`` script."""
    app()


if __name__ == "__main__":
    main()
