"""Typer-based command line interface for running savings scenarios."""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Dict, Optional

import typer
import yaml
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import LOG_LEVEL
from ..core.data_loader import ScenarioLoader
from ..core.scenario_generator import build_base_case
from ..core.validator import ValidationError
from ..engine import SavingsEngine, validate
from ..models.results import SimulationResult
from ..models.scenario import Scenario
from ..utils.numbers import format_currency, format_percent

app = typer.Typer(help="Monte Carlo estimator of apple purchasing savings")
console = Console()
LOGGER = logging.getLogger(__name__)

HISTOGRAM_BAR_WIDTH = 40


def _configure_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _load_engine(scenario_file: Path) -> SavingsEngine:
    """Load the scenario file, converting loader failures into CLI errors."""
    try:
        result = ScenarioLoader().load(scenario_file)
    except ValidationError as exc:
        if exc.errors:
            _display_errors(str(exc), exc.errors)
        raise typer.BadParameter(str(exc), param_hint="SCENARIO_FILE") from exc
    return SavingsEngine(result.scenario_set)


def _display_errors(title: str, errors: Dict[str, str]) -> None:
    table = Table(title=title, title_style="bold red")
    table.add_column("Field")
    table.add_column("Problem", style="red")
    for field, message in errors.items():
        table.add_row(field, message)
    console.print(table)


def _display_stats(scenario: Scenario, result: SimulationResult) -> None:
    stats = result.stats
    table = Table(title=f"{scenario.name}: savings vs last year ({result.trials:,} trials)")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Median savings", format_currency(stats.median))
    table.add_row("Mean savings", format_currency(stats.mean))
    table.add_row("Std deviation", format_currency(stats.std))
    table.add_row("P10", format_currency(stats.p10))
    table.add_row("P90", format_currency(stats.p90))
    table.add_row("Min", format_currency(stats.min))
    table.add_row("Max", format_currency(stats.max))
    table.add_row("Probability of saving", format_percent(stats.prob_positive))
    console.print(table)
    console.print(
        f"Median savings: [bold]{format_currency(stats.median)}[/bold] "
        "(in half the simulated scenarios you save more, in half you save less)."
    )
    console.print(
        f"In 80% of simulations, savings were between [bold]{format_currency(stats.p10)}"
        f"[/bold] and [bold]{format_currency(stats.p90)}[/bold]."
    )


def _display_histogram(result: SimulationResult) -> None:
    peak = max((b.count for b in result.histogram), default=0) or 1
    table = Table(title="Savings distribution", show_header=True, box=None)
    table.add_column("Savings from", justify="right")
    table.add_column("Trials", justify="right")
    table.add_column("")
    for bin_ in result.histogram:
        bar = "█" * round(HISTOGRAM_BAR_WIDTH * bin_.count / peak)
        table.add_row(format_currency(bin_.lower_edge), f"{bin_.count:,}", f"[green]{bar}[/green]")
    console.print(table)


@app.callback()
def _main_options(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    _configure_logging(verbose)


@app.command("validate")
def validate_command(
    scenario_file: Path = typer.Argument(..., help="YAML or JSON scenario file"),
) -> None:
    """Check every scenario in the file and report all problems."""
    engine = _load_engine(scenario_file)
    failed = False
    for scenario in engine.scenario_set.scenarios:
        report = validate(scenario)
        if report.ok:
            console.print(f"[green]✓[/green] {scenario.name}")
        else:
            failed = True
            _display_errors(f"{scenario.name}: {len(report.errors)} problem(s)", report.errors)
    if failed:
        raise typer.Exit(code=1)


@app.command("run")
def run_command(
    scenario_file: Path = typer.Argument(..., help="YAML or JSON scenario file"),
    scenario_id: Optional[int] = typer.Option(
        None, "--scenario", "-s", help="Scenario id to run (default: all)"
    ),
    seed: Optional[int] = typer.Option(None, "--seed", help="Override the RNG seed"),
    trials: Optional[int] = typer.Option(None, "--trials", "-n", help="Override trial count"),
    histogram: bool = typer.Option(True, "--histogram/--no-histogram"),
) -> None:
    """Simulate scenarios and print statistics and the savings histogram."""
    engine = _load_engine(scenario_file)
    if scenario_id is not None:
        try:
            targets = [engine.select(scenario_id)]
        except KeyError as exc:
            raise typer.BadParameter(str(exc), param_hint="--scenario") from exc
    else:
        targets = list(engine.scenario_set.scenarios)
    LOGGER.debug("Running %d scenario(s) from %s", len(targets), scenario_file)

    failed = False
    for scenario in targets:
        if trials is not None:
            engine.scenario_set.update(scenario.id, trials=trials)
        report = validate(scenario)
        if not report.ok:
            failed = True
            _display_errors(f"{scenario.name}: not simulated", report.errors)
            continue
        with console.status(f"Simulating {scenario.name}..."):
            result = engine.run(scenario.id, seed=seed)
        _display_stats(scenario, result)
        if histogram:
            _display_histogram(result)
    if failed:
        raise typer.Exit(code=1)


@app.command("compare")
def compare_command(
    scenario_file: Path = typer.Argument(..., help="YAML or JSON scenario file"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Override the RNG seed"),
) -> None:
    """Run every valid scenario and compare median, range and probability of saving."""
    engine = _load_engine(scenario_file)
    with console.status("Simulating scenarios..."):
        engine.run_all(seed=seed)

    frame = engine.comparison_frame()
    table = Table(title="Scenario Comparison")
    table.add_column("Metric")
    for name in frame["name"]:
        table.add_column(str(name), justify="right")
    table.add_row("Median savings", *[format_currency(v) for v in frame["median"]])
    table.add_row(
        "80% range (P10 to P90)",
        *[
            "N/A" if math.isnan(p10) else f"{format_currency(p10)} to {format_currency(p90)}"
            for p10, p90 in zip(frame["p10"], frame["p90"])
        ],
    )
    table.add_row("Probability of saving", *[format_percent(v) for v in frame["prob_positive"]])
    console.print(table)


@app.command("template")
def template_command() -> None:
    """Print the default Base Case scenario as YAML."""
    payload = build_base_case().model_dump(mode="json", exclude={"results"}, exclude_none=True)
    typer.echo(yaml.safe_dump(payload, sort_keys=False))


def main() -> None:
    """Entry point for CLI execution."""
    app()


if __name__ == "__main__":
    main()
