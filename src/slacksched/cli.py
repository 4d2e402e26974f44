"""Command-line interface for slacksched."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from . import context
from .exceptions import SlackschedError
from .logger import setup_logger
from .parser import load_machines, load_tasks
from .report import render_report
from .scheduler import (
    AlgorithmConfig,
    AlgorithmType,
    Schedule,
    SchedulingResult,
    SchedulingService,
    build_optimal_schedule,
    check_feasibility,
)

app = typer.Typer(
    name="slacksched",
    help="Deadline scheduling on identical parallel machines, starting every machine as late as possible",
    add_completion=False,
)


@app.callback()
def main_callback(
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose",
            "-v",
            help="Verbosity level: 0=silent (default), 1=show changes, 2=show all checks, 3=debug",
            min=0,
            max=3,
        ),
    ] = 0,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a YAML config file with a 'scheduler' section",
        ),
    ] = None,
) -> None:
    """Global options for slacksched commands."""
    setup_logger(verbose)
    context.set_config_path(config)


@app.command()
def schedule(  # noqa: PLR0913 - CLI command needs multiple options
    tasks_file: Annotated[Path, typer.Argument(help="Tasks file (count, then 'id name duration deadline')")],
    machines_file: Annotated[Path, typer.Argument(help="Machines file (count, then 'id name')")],
    algorithm: Annotated[
        str | None,
        typer.Option(
            "--algorithm",
            "-a",
            help="Scheduling algorithm to use. Overrides config. Default: 'auto'",
        ),
    ] = None,
    exact: Annotated[
        bool,
        typer.Option("--exact", help="Also run branch and bound and report whether the result is optimal"),
    ] = False,
    epoch: Annotated[
        float | None,
        typer.Option("--epoch", help="Time the deadline offsets are relative to. Overrides config"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output file (default: stdout)"),
    ] = None,
) -> None:
    """Schedule tasks on machines and print the report."""
    try:
        scheduler_config = context.get_scheduling_config().model_copy(deep=True)
    except SlackschedError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    # Command-line options win over the config file
    if algorithm:
        try:
            algorithm_type = AlgorithmType(algorithm)
        except ValueError:
            typer.echo(
                f"Error: Invalid algorithm '{algorithm}'. "
                f"Available: {', '.join(a.value for a in AlgorithmType)}",
                err=True,
            )
            raise typer.Exit(1) from None
        scheduler_config.algorithm = AlgorithmConfig(type=algorithm_type)

    if epoch is not None:
        scheduler_config.epoch = epoch

    try:
        tasks = load_tasks(tasks_file, scheduler_config.epoch)
        machines = load_machines(machines_file)
    except SlackschedError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None

    result = SchedulingService(tasks, machines, scheduler_config).schedule()
    sections: list[tuple[str, Schedule | None]] = [
        ("By the fast algorithm" if exact else "", result.schedule)
    ]

    if exact:
        optimum = build_optimal_schedule(tasks, machines)
        accurate = optimum if not check_feasibility(optimum, scheduler_config.epoch) else None
        sections.append(("By the accurate algorithm", accurate))

    report = render_report(len(tasks), len(machines), sections, scheduler_config.epoch)
    if output:
        output.write_text(report, encoding="utf-8")
        typer.echo(f"Report written to {output}")
    else:
        typer.echo(report, nl=False)

    _display_summary(result, exact=exact, accurate=sections[-1][1] if exact else None)

    if result.schedule is None:
        raise typer.Exit(1)


def _display_summary(result: SchedulingResult, *, exact: bool, accurate: Schedule | None) -> None:
    typer.echo(f"\nStrategy: {result.strategy}", err=True)
    if result.schedule is not None:
        typer.echo(f"Optimal: {'yes' if result.optimal else 'not certified'}", err=True)
        if exact and accurate is not None:
            same = result.schedule.compare(accurate) == 0
            typer.echo(f"Matches branch and bound: {'yes' if same else 'no'}", err=True)

    if result.warnings:
        typer.echo("\nWarnings:", err=True)
        for warning in result.warnings:
            typer.echo(f"  - {warning}", err=True)


def main() -> int:
    """Main entry point."""
    app()
    return 0


if __name__ == "__main__":
    main()
