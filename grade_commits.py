#!/usr/bin/env python3
"""
CommitGrade CLI

Grades the commits of a Git repository A-F from the size of each change and
the structure of its message, for reviewing your own commit habits.

Usage:
    python grade_commits.py log [START_COMMIT] [OPTIONS]
    python grade_commits.py config

Examples:
    python grade_commits.py log                      # Grade history from HEAD
    python grade_commits.py log -n 20 --author "Jane Doe"
    python grade_commits.py log v1.2.0 --score       # Numeric message scores
    python grade_commits.py log --grade C-           # Only commits graded C or worse
"""

import json
import logging
import sys
from itertools import islice
from typing import Iterable, Iterator, List, Optional, Tuple

import click
from pydantic import ValidationError
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table
from rich.text import Text

from config.settings import (
    Settings,
    configure_logging,
    export_config,
    get_settings,
    validate_configuration,
)
from services.commit_grading import GradingEngine
from services.commit_history import (
    AuthorFilter,
    CommitFilters,
    GitHistory,
    HistoryEntry,
    MergeFilter,
    RepositoryError,
    read_entries,
)
from shared.models import Grade, GradedCommit, GradeSpec

logger = logging.getLogger(__name__)

GRADE_STYLES = {
    Grade.A: "bright_green",
    Grade.B: "bright_white",
    Grade.C: "bright_yellow",
    Grade.D: "bright_red",
    Grade.F: "red",
}

# Commits graded per batch while streaming history.
BATCH_SIZE = 64


class CommitGradeCLI:
    """Rendering and orchestration for the commit grading commands."""

    def __init__(self, settings: Settings, console: Optional[Console] = None):
        self.settings = settings
        self.console = console or Console()
        self.err_console = Console(stderr=True)
        self.engine = GradingEngine(settings)

    def grade_entries(
        self,
        entries: Iterable[HistoryEntry],
        workers: int,
        spec: Optional[GradeSpec] = None,
        limit: Optional[int] = None,
    ) -> Iterator[Tuple[HistoryEntry, Optional[GradedCommit]]]:
        """Grade entries in batches, keeping history order.

        Merge commits are passed through ungraded. With a grade spec only
        matching commits are yielded and ``limit`` counts matches.
        """
        entries = iter(entries)
        emitted = 0
        while limit is None or emitted < limit:
            batch = list(islice(entries, BATCH_SIZE))
            if not batch:
                return
            to_grade = [entry.commit for entry in batch if not entry.commit.is_merge]
            graded = iter(self.engine.grade_many(to_grade, workers=workers))
            for entry in batch:
                result = None if entry.commit.is_merge else next(graded)
                if spec is not None and (result is None or not spec.matches(result.grade)):
                    continue
                yield entry, result
                emitted += 1
                if limit is not None and emitted >= limit:
                    return

    def build_table(
        self,
        rows: List[Tuple[HistoryEntry, Optional[GradedCommit]]],
        show_score: bool = False,
    ) -> Table:
        """Create the COMMIT / GRADE / AUTHOR / SUBJECT table."""
        output = self.settings.output
        table = Table(show_header=True, header_style="bold magenta", box=box.SIMPLE_HEAD)
        table.add_column("COMMIT", style="yellow", no_wrap=True)
        table.add_column("SCORE" if show_score else "GRADE", no_wrap=True)
        table.add_column(
            "AUTHOR", no_wrap=True, max_width=output.author_width, overflow="ellipsis"
        )
        table.add_column("SUBJECT", no_wrap=True, overflow="ellipsis")

        for entry, result in rows:
            table.add_row(
                entry.metadata.id[: output.short_id_length],
                self.format_result(result, show_score),
                entry.metadata.author,
                Text(entry.commit.subject),
            )
        return table

    def format_result(self, result: Optional[GradedCommit], show_score: bool) -> Text:
        if result is None:
            return Text("-", style="white")
        style = GRADE_STYLES[result.grade]
        if show_score:
            return Text(str(result.score.value), style=style)
        return Text(str(result.grade), style=style)

    def display_error_message(self, title: str, message: str):
        """Display error message in a rich format."""
        error_text = Text()
        error_text.append("❌ ", style="bold red")
        error_text.append(title, style="bold red")
        error_text.append("\n\n", style="red")
        error_text.append(message, style="red")

        self.err_console.print(Panel(error_text, title="Error", border_style="red"))

    def display_config(self):
        validation = validate_configuration(self.settings)
        self.console.print_json(json.dumps(export_config(self.settings)))
        self.console.print_json(json.dumps(validation))


def load_settings() -> Settings:
    try:
        return get_settings()
    except ValidationError as e:
        Console(stderr=True).print(
            Panel(Text(str(e), style="red"), title="Invalid configuration", border_style="red")
        )
        sys.exit(1)


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, verbose: bool):
    """CommitGrade - grade Git commits by change size and message quality."""
    settings = load_settings()
    configure_logging(settings)
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
    ctx.obj = settings


@main.command()
@click.argument("start_commit", default="HEAD")
@click.option("--repo-path", default=".", help="Path inside the repository to grade")
@click.option("--author", "-a", default=None, help="Only grade commits by this author")
@click.option("--merges", "-m", is_flag=True, help="Include (but do not grade) merge commits")
@click.option(
    "--number", "-n", default=None, type=click.IntRange(min=0), help="Maximum number of commits to show"
)
@click.option("--score", "-s", "show_score", is_flag=True, help="Show numeric message scores")
@click.option("--grade", "-g", "grade_spec", default=None, help="Only show grades matching SPEC, e.g. B, B+ or C-")
@click.option("--workers", "-w", default=None, type=click.IntRange(1, 64), help="Parallel grading workers")
@click.pass_obj
def log(
    settings: Settings,
    start_commit: str,
    repo_path: str,
    author: Optional[str],
    merges: bool,
    number: Optional[int],
    show_score: bool,
    grade_spec: Optional[str],
    workers: Optional[int],
):
    """Grade commits reachable from START_COMMIT, newest first."""
    cli = CommitGradeCLI(settings)

    spec = None
    if grade_spec:
        try:
            spec = GradeSpec.parse(grade_spec)
        except ValueError as e:
            raise click.BadParameter(str(e), param_hint="--grade")

    filters = []
    if author:
        filters.append(AuthorFilter(author))
    if not merges:
        filters.append(MergeFilter())

    try:
        history = GitHistory.open(repo_path)
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=cli.err_console,
            transient=True,
        ) as progress:
            progress.add_task("Grading commits...", total=None)
            entries = read_entries(history.traverse(start_commit), CommitFilters(filters))
            rows = list(
                cli.grade_entries(
                    entries,
                    workers=workers or settings.output.workers,
                    spec=spec,
                    limit=number,
                )
            )
    except RepositoryError as e:
        logger.error(f"Cannot read history: {e}")
        cli.display_error_message("Cannot read commit history", str(e))
        sys.exit(1)

    cli.console.print(cli.build_table(rows, show_score=show_score))


@main.command()
@click.pass_obj
def config(settings: Settings):
    """Show the active configuration and its validation report."""
    CommitGradeCLI(settings).display_config()


if __name__ == "__main__":
    main()
