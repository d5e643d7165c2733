"""
Rendering functions for harborrp output.

This module handles all pretty-printing and table formatting.
Services return data, this module makes it human-readable.
"""

from typing import Iterable

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from .domain import RepoCandidate
from .services.eviction import EvictionResult
from .services.tag_retention import RepositoryTagOutcome, TagRetentionReport

console = Console()

GC_HINT = """You have finished the 'soft deletion' stage. To free disk space you should:
1. Enter Harbor's installation directory (e.g. /opt/apps/harbor/)
2. Preview which files/images will be deleted:
    a. docker-compose stop
    b. docker run -it --name gc --rm --volumes-from registry vmware/registry:2.6.2-photon garbage-collect --dry-run /etc/registry/config.yml
3. Trigger the GC operation:
    a. docker run -it --name gc --rm --volumes-from registry vmware/registry:2.6.2-photon garbage-collect /etc/registry/config.yml
    b. docker-compose start

WARNING: make sure nobody is pushing images, or that Harbor is stopped, while GC runs.
An image pushed during GC may lose layers and end up corrupted."""


def render_ranking(listing: Iterable[RepoCandidate]) -> None:
    """
    Render the deletion suggestion, lowest score first.

    Args:
        listing: Scored repositories in ascending rank order
    """
    listing = list(listing)
    if not listing:
        console.print("[yellow]No public repositories found.[/yellow]")
        return

    table = Table(
        title="Suggested deletion order (lowest score first)",
        box=box.ROUNDED,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("#", justify="right", style="dim")
    table.add_column("Score", justify="right", style="yellow")
    table.add_column("ID", justify="right")
    table.add_column("Repository", style="green")
    table.add_column("Pulls", justify="right")
    table.add_column("Tags", justify="right")
    table.add_column("Updated", style="cyan")

    for rank, repo in enumerate(listing, start=1):
        table.add_row(
            str(rank),
            f"{repo.score:.2f}",
            str(repo.id),
            escape(repo.name),
            str(repo.pull_count),
            str(repo.tags_count),
            repo.update_time.strftime('%Y-%m-%d %H:%M') if repo.update_time else "",
        )

    console.print(table)


def render_eviction_result(result: EvictionResult) -> None:
    """Summarise a repository deletion batch."""
    for repo in result.deleted:
        console.print(f"[green]deleted[/green] {escape(repo.name)}")
    for repo, error in result.failed:
        console.print(f"[red]failed[/red] {escape(repo.name)}: {escape(error)}")

    console.print(
        f"\nDeleted {len(result.deleted)} of {result.requested} requested repositories"
        + (f", {len(result.failed)} failed" if result.failed else "")
    )


def render_gc_hint() -> None:
    """Explain how to reclaim storage after soft deletion."""
    console.print(Panel(escape(GC_HINT), title="Garbage collection", border_style="yellow"))


def render_tag_outcome(outcome: RepositoryTagOutcome, day: int, max_keep: int) -> None:
    """
    Render one repository's tag decisions.

    Tags older than ``day`` days are marked with ``*``.
    """
    table = Table(
        title=f"{escape(outcome.repository)} ({outcome.tags_count} tags)",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold magenta"
    )
    table.add_column("Action", justify="center", style="red")
    table.add_column("Tag")
    table.add_column("Created", style="cyan")
    table.add_column("Days past", justify="right")

    for decision in outcome.decisions:
        table.add_row(
            "*" if decision.evictable else "",
            escape(decision.tag.name),
            escape(decision.tag.created),
            f"{decision.age_days:.2f}",
        )
    console.print(table)

    console.print(
        f"--> tags within {day} days: {outcome.retained}, "
        f"tags older than {day} days: {outcome.candidates}"
    )
    if outcome.candidates <= max_keep:
        console.print(f"--> keep up to {max_keep} older tags, have {outcome.candidates}: nothing to do")
        return

    if outcome.dry_run:
        for name in outcome.evicted:
            console.print(f"would delete {escape(name)}")
        console.print("[yellow]dry run: no tag was deleted[/yellow]")
    else:
        for name in outcome.evicted:
            console.print(f"[green]deleted[/green] {escape(name)}")


def render_tag_report(report: TagRetentionReport) -> None:
    """Final line of a tag retention run."""
    verb = "would delete" if report.options.dry_run else "deleted"
    console.print(
        f"\n=== Finished: {len(report.repositories)} repositories, "
        f"{verb} {report.evicted_count} tags ==="
    )
