"""
Gamekins Command Line Interface.

Host-side tools to inspect reports, preview the rank table and run a
generation round from a manifest.
"""

import random
import sys
from collections import Counter
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gamekins.version import __version__

console = Console()

_STATUS_STYLES = {"fc": "green", "pc": "yellow", "nc": "red"}


@click.group()
@click.version_option(version=__version__, prog_name="gamekins")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """Gamekins: coding challenges from coverage and quality reports."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose


@main.command()
@click.argument("source_page", type=click.Path(exists=True, dir_okay=False))
@click.option("--uncovered", is_flag=True, help="Only list not or partially covered lines")
@click.option("--method-page", type=click.Path(exists=True, dir_okay=False), help="JaCoCo class page")
def report(source_page: str, uncovered: bool, method_page: str | None) -> None:
    """Show the line coverage of a JaCoCo source page.

    SOURCE_PAGE is a ``<File>.<ext>.html`` page of the JaCoCo report.
    """
    from gamekins.models.base import CoverageStatus
    from gamekins.reports.jacoco import load_method_entries, load_source_report

    source = load_source_report(Path(source_page))
    if source.is_empty:
        console.print("[yellow]No coverage data found in the page.[/yellow]")
        sys.exit(1)

    lines = source.uncovered_lines() if uncovered else list(source.lines)
    line_table = Table(title=Path(source_page).name)
    line_table.add_column("Line", style="cyan", justify="right")
    line_table.add_column("Status")
    line_table.add_column("Branches", justify="right")
    line_table.add_column("Source")
    for line in lines:
        style = _STATUS_STYLES[line.status.value]
        branches = f"{line.covered_branches}/{line.total_branches}" if line.is_branching else ""
        line_table.add_row(
            str(line.number), f"[{style}]{line.status.value}[/{style}]", branches, line.text
        )
    console.print(line_table)

    console.print(
        f"fully covered: {source.count(CoverageStatus.FULLY_COVERED)}  "
        f"partially covered: {source.count(CoverageStatus.PARTIALLY_COVERED)}  "
        f"not covered: {source.count(CoverageStatus.NOT_COVERED)}"
    )

    if method_page:
        methods = load_method_entries(Path(method_page), source)
        method_table = Table(title="Methods")
        method_table.add_column("Method", style="cyan")
        method_table.add_column("Lines", justify="right")
        method_table.add_column("Missed", justify="right")
        method_table.add_column("Coverage", justify="right")
        for method in methods:
            method_table.add_row(
                method.name,
                f"{method.first_line}-{method.last_line}",
                str(method.missed_lines),
                f"{method.coverage:.0%}",
            )
        console.print(method_table)


@main.command()
@click.argument("coverages", nargs=-1, required=True, type=click.FloatRange(0.0, 1.0))
@click.option("--bias", type=click.FloatRange(1.0, 2.0), default=1.5, help="Selection pressure")
@click.option("--draws", type=click.IntRange(min=0), default=0, help="Simulate this many draws")
@click.option("--seed", type=int, default=None, help="Seed for the simulated draws")
def select(coverages: tuple[float, ...], bias: float, draws: int, seed: int | None) -> None:
    """Show the rank table for a set of coverage ratios.

    COVERAGES are the coverage ratios of the candidate files.
    """
    from gamekins.generation.selection import initialize_rank_selection, select_candidate

    ordered = sorted(coverages)
    rank_values = initialize_rank_selection(len(ordered), bias)

    counts: Counter[int] = Counter()
    if draws:
        rng = random.Random(seed)
        positions = list(range(len(ordered)))
        for _ in range(draws):
            counts[select_candidate(positions, rank_values, rng)] += 1

    table = Table(title=f"Rank selection (c={bias})")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Coverage", style="cyan", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Cumulative", justify="right")
    if draws:
        table.add_column("Drawn", style="green", justify="right")

    previous = 0.0
    for position, (coverage, cumulative) in enumerate(zip(ordered, rank_values)):
        row = [str(position), f"{coverage:.2f}", f"{cumulative - previous:.4f}", f"{cumulative:.4f}"]
        if draws:
            row.append(str(counts[position]))
        table.add_row(*row)
        previous = cumulative
    console.print(table)


@main.command()
@click.argument("manifest", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to configuration file")
@click.option("--seed", type=int, default=None, help="Seed of the random source")
@click.option("--xml", "show_xml", is_flag=True, help="Print the serialized challenges")
@click.pass_context
def generate(
    ctx: click.Context,
    manifest: str,
    config: str | None,
    seed: int | None,
    show_xml: bool,
) -> None:
    """Run one generation round described by a manifest.

    MANIFEST is a YAML file naming the project, its workspace and the
    files each user changed.
    """
    from gamekins.config import ConfigurationError, configure_logging, load_config
    from gamekins.generation.factory import ChallengeFactory
    from gamekins.manifest import load_manifest
    from gamekins.state.repository import ChallengeRepository

    verbose = ctx.obj.get("verbose", False)
    try:
        cfg = load_config(config)
        round_manifest = load_manifest(Path(manifest))
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)

    configure_logging(cfg.logging, verbose=verbose)
    if seed is not None:
        cfg = cfg.model_copy(update={"generation": cfg.generation.model_copy(update={"seed": seed})})

    parameters = round_manifest.build_parameters(cfg.reports, Path(manifest).resolve().parent)
    files = round_manifest.file_details(parameters)
    factory = ChallengeFactory.from_config(cfg)
    repository = ChallengeRepository(max_stored=cfg.generation.stored_challenges)

    console.print(
        Panel(
            f"[bold blue]Gamekins v{__version__}[/bold blue]\n"
            f"Project {parameters.project_name} on branch {parameters.branch}",
            title="Generation",
        )
    )

    for user in round_manifest.users:
        if round_manifest.committer:
            factory.generate_build_challenge(
                user, parameters, repository, round_manifest.committer
            )
        added = factory.generate_new_challenges(user, parameters, files, repository)

        table = Table(title=f"{user} ({added} generated)")
        table.add_column("Kind", style="cyan")
        table.add_column("Score", justify="right")
        table.add_column("Challenge")
        for challenge in repository.current(user, parameters.project_name):
            table.add_row(challenge.kind.value, str(challenge.score), str(challenge))
        console.print(table)

        if show_xml:
            for challenge in repository.current(user, parameters.project_name):
                console.print(challenge.serialize(indent="  "), markup=False)


@main.command(name="config")
@click.option("--config", "-c", type=click.Path(exists=True), help="Path to configuration file")
def show_config(config: str | None) -> None:
    """Display the effective configuration."""
    from gamekins.config import ConfigurationError, load_config

    try:
        cfg = load_config(config)
    except ConfigurationError as e:
        console.print(f"[red]Configuration error:[/red] {e}")
        sys.exit(1)

    console.print("[bold]Generation[/bold]")
    for name, value in cfg.generation.model_dump().items():
        console.print(f"  {name}: {value}")
    console.print()

    console.print("[bold]Weights[/bold]")
    for kind, weight in cfg.weights.as_mapping().items():
        console.print(f"  {kind.value}: {weight}")
    console.print()

    console.print("[bold]Reports[/bold]")
    for name, value in cfg.reports.model_dump().items():
        console.print(f"  {name}: {value}")


if __name__ == "__main__":
    main()
