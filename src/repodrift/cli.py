"""CLI entry point for repodrift."""

import asyncio
import json
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import typer
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from repodrift.analytics.usage import InMemoryFingerprintUsageAggregator
from repodrift.aspects.problems import InMemoryProblemStore
from repodrift.config import ConfigError, Settings
from repodrift.defaults import create_default_registry
from repodrift.logs import configure_logging
from repodrift.models.schemas import Analyzed, ProblemUsage, TagAndScoreOptions
from repodrift.tree.drift import drift_report
from repodrift.tree.explore import explore_tree
from repodrift.tree.sunburst import SunburstLevel, is_sunburst_tree
from repodrift.util.bands import star_band

app = typer.Typer(help="Repository scoring, tagging and drift reporting.")

console = Console()

DEFAULT_WORKSPACE = "local"


def _load_analyses(path: Path) -> list[Analyzed]:
    """Read a JSON array of repository analyses.

    Raises:
        typer.Exit: If the file is missing or malformed.
    """
    try:
        return TypeAdapter(list[Analyzed]).validate_json(path.read_bytes())
    except OSError as e:
        console.print(f"[red]Cannot read {path}: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    except ValidationError as e:
        console.print(f"[red]Invalid analyses in {path}: {escape(str(e))}[/red]")
        raise typer.Exit(1)


def _load_problems(path: Path | None, workspace: str) -> InMemoryProblemStore:
    if path is None:
        return InMemoryProblemStore()
    try:
        problems = TypeAdapter(list[ProblemUsage]).validate_json(path.read_bytes())
    except (OSError, ValidationError) as e:
        console.print(f"[red]Invalid problems file {path}: {escape(str(e))}[/red]")
        raise typer.Exit(1)
    return InMemoryProblemStore({workspace: problems})


def _settings() -> Settings:
    try:
        return Settings.from_env()
    except ConfigError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(1)


@app.command()
def score(
    analyses: Path = typer.Argument(..., help="JSON file holding an array of repository analyses"),
    workspace: str = typer.Option(DEFAULT_WORKSPACE, "--workspace", "-w", help="Workspace id"),
    category: str | None = typer.Option(None, "--category", "-c", help="Only count scores in this category"),
    problems: Path | None = typer.Option(None, "--problems", "-p", help="JSON file of flagged fingerprints"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Tag and score repositories."""
    configure_logging(verbose=verbose)
    asyncio.run(_score(analyses, workspace, category, problems, output))


async def _score(
    path: Path,
    workspace: str,
    category: str | None,
    problems: Path | None,
    output: Path | None,
) -> None:
    """Async implementation of score."""
    repos = _load_analyses(path)
    registry = create_default_registry(_settings(), problem_store=_load_problems(problems, workspace))
    scored = await registry.tag_and_score_repos(workspace, repos, TagAndScoreOptions(category=category))

    table = Table(title=f"Scores for {len(scored)} repositories in {workspace}")
    table.add_column("Repository", style="cyan")
    table.add_column("Score", justify="right", style="green")
    table.add_column("Stars")
    table.add_column("Tags", style="white", max_width=60)

    for repo in sorted(scored, key=lambda r: r.weighted_score.weighted_score, reverse=True):
        table.add_row(
            repo.id.full_name,
            f"{repo.weighted_score.weighted_score:.2f}",
            star_band(repo.weighted_score.weighted_score),
            ", ".join(t.name for t in repo.tags) or "-",
        )
    console.print(table)

    if output:
        data = [r.model_dump(mode="json") for r in scored]
        output.write_text(json.dumps(data, indent=2))
        console.print(f"\n[green]Saved to {output}[/green]")


def _rich_tree(level: SunburstLevel, into: Tree) -> None:
    for child in level.children:
        if is_sunburst_tree(child):
            _rich_tree(child, into.add(f"[bold]{child.name}[/bold]"))
        else:
            entropy = getattr(child, "entropy", None)
            detail = f" [dim](entropy {entropy:.2f}, {child.size:g} variants)[/dim]" if entropy is not None else ""
            into.add(f"{child.name}{detail}")


@app.command()
def drift(
    analyses: Path = typer.Argument(..., help="JSON file holding an array of repository analyses"),
    workspace: str = typer.Option(DEFAULT_WORKSPACE, "--workspace", "-w", help="Workspace id"),
    percentile: float | None = typer.Option(None, "--percentile", help="Entropy percentile threshold (0-100)"),
    type: str | None = typer.Option(None, "--type", "-t", help="Only this aspect type"),
    band: bool = typer.Option(False, "--band", "-b", help="Group by entropy band"),
    output: Path | None = typer.Option(None, "--output", "-o", help="Output JSON file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show fingerprint kinds whose values drift across the workspace."""
    configure_logging(verbose=verbose)
    asyncio.run(_drift(analyses, workspace, percentile, type, band, output))


async def _drift(
    path: Path,
    workspace: str,
    percentile: float | None,
    type: str | None,
    band: bool,
    output: Path | None,
) -> None:
    """Async implementation of drift."""
    settings = _settings()
    if percentile is None:
        percentile = settings.drift_percentile
    if not 0 <= percentile <= 100:
        console.print(f"[red]Percentile must be between 0 and 100, got {percentile}[/red]")
        raise typer.Exit(1)

    aggregator = InMemoryFingerprintUsageAggregator({workspace: _load_analyses(path)})
    registry = create_default_registry(settings)
    planted = await drift_report(registry, aggregator, workspace, percentile=percentile, type=type, band=band)

    legend = " / ".join(c.meaning for c in planted.circles)
    root = Tree(f"[bold cyan]{planted.tree.name}[/bold cyan] [dim]({legend})[/dim]")
    _rich_tree(planted.tree, root)
    console.print(root)

    if output:
        output.write_text(planted.model_dump_json(indent=2))
        console.print(f"\n[green]Saved to {output}[/green]")


@app.command()
def tags(
    analyses: Path = typer.Argument(..., help="JSON file holding an array of repository analyses"),
    workspace: str = typer.Option(DEFAULT_WORKSPACE, "--workspace", "-w", help="Workspace id"),
    select: list[str] = typer.Option([], "--tag", help="Require a tag; prefix with ! to exclude it"),
    problems: Path | None = typer.Option(None, "--problems", "-p", help="JSON file of flagged fingerprints"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose logging"),
) -> None:
    """Show how often each tag occurs among repositories matching a tag selection."""
    configure_logging(verbose=verbose)
    asyncio.run(_tags(analyses, workspace, select, problems))


async def _tags(path: Path, workspace: str, selected: list[str], problems: Path | None) -> None:
    """Async implementation of tags."""
    repos = _load_analyses(path)
    registry = create_default_registry(_settings(), problem_store=_load_problems(problems, workspace))
    scored = await registry.tag_and_score_repos(workspace, repos)
    tag_tree = explore_tree(workspace, scored, selected, by_org=False)

    table = Table(title=f"{tag_tree.tree.name}: {tag_tree.matching_repo_count} of {tag_tree.repo_count} repositories")
    table.add_column("Tag", style="cyan")
    table.add_column("Repos", justify="right", style="green")
    table.add_column("Severity")
    table.add_column("Description", style="white", max_width=60)
    for usage in tag_tree.tags:
        table.add_row(
            usage.name,
            str(usage.count),
            usage.severity.value if usage.severity else "-",
            usage.description or "-",
        )
    console.print(table)


@app.command()
def version() -> None:
    """Show version information."""
    from repodrift import __version__

    console.print(f"repodrift v{__version__}")


if __name__ == "__main__":
    app()
