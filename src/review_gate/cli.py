"""Command-line interface for Review Gate."""

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from review_gate import __version__
from review_gate.analysis.report import ReportError, load_report
from review_gate.config import Config, load_config, validate_config
from review_gate.facade import ReviewFacade
from review_gate.gerrit.client import GerritReviewFacade
from review_gate.github.client import GitHubReviewFacade
from review_gate.orchestrator.post_job import ReviewPostJob

console = Console()


def setup_logging(verbose: bool = False) -> None:
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )


def build_facade(config: Config) -> ReviewFacade:
    """Create the review-system client selected by the configuration."""
    if config.backend == "gerrit":
        gerrit = config.gerrit
        return GerritReviewFacade(
            url=gerrit.url,
            change_id=gerrit.change_id,
            revision_id=gerrit.revision_id,
            username=gerrit.username,
            password=gerrit.password,
            path_prefix=gerrit.path_prefix,
            timeout_seconds=gerrit.timeout_seconds,
        )
    github = config.github
    return GitHubReviewFacade(
        token=github.token,
        repo=github.repo,
        pr_number=github.pr_number,
        base_url=github.base_url,
        path_prefix=github.path_prefix,
        allow_approve=github.allow_approve,
    )


@click.group()
@click.version_option(version=__version__)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
def cli(verbose: bool) -> None:
    """Review Gate - turn analysis findings into review comments and a vote."""
    setup_logging(verbose)


@cli.command("run")
@click.argument("report", type=click.Path(exists=True, dir_okay=False))
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
@click.option(
    "--base-dir",
    type=click.Path(exists=True, file_okay=False),
    help="Analysis workspace, used to check that reported paths are files",
)
@click.option("--dry-run", is_flag=True, help="Don't post the review")
@click.option("--output", type=click.Choice(["text", "json"]), default="text")
def run(
    report: str,
    config_path: str | None,
    base_dir: str | None,
    dry_run: bool,
    output: str,
) -> None:
    """Post the findings of an analysis REPORT to the configured review."""
    try:
        config = load_config(Path(config_path) if config_path else None)
    except ValueError as e:
        console.print(f"[red]Config error:[/red] {e}")
        sys.exit(1)

    errors = validate_config(config)
    if errors:
        for error in errors:
            console.print(f"[red]Config error:[/red] {error}")
        sys.exit(1)

    try:
        findings = load_report(Path(report), Path(base_dir) if base_dir else None)
    except ReportError as e:
        console.print(f"[red]Error:[/red] {e}")
        sys.exit(1)

    console.print(f"🔍 Correlating {len(findings)} findings with [bold]{config.backend}[/bold]...")

    job = ReviewPostJob(
        settings=config.review,
        properties=config.properties,
        facade=build_facade(config),
        dry_run=dry_run,
    )
    review = job.execute(findings)

    if review is None:
        console.print("[yellow]No review was built.[/yellow]")
        return

    if output == "json":
        print(json.dumps(review.to_payload(), indent=2))
        return

    vote = review.vote
    console.print(f"✅ Review built: {review.size()} comments on {len(review.comments)} files")
    if vote:
        console.print(f"   Vote: [bold]{vote[1]} {vote[0]:+d}[/bold]")
    if dry_run:
        console.print("\n[yellow]Dry run - review not posted[/yellow]")


@cli.group("config")
def config_group() -> None:
    """Configuration commands."""
    pass


@config_group.command("validate")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
def config_validate(config_path: str | None) -> None:
    """Validate configuration file."""
    try:
        config = load_config(Path(config_path) if config_path else None)
        errors = validate_config(config)

        if errors:
            console.print("[red]Configuration is invalid:[/red]")
            for error in errors:
                console.print(f"  • {error}")
            sys.exit(1)
        else:
            console.print("[green]✓ Configuration is valid[/green]")
    except Exception as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)


@config_group.command("show")
@click.option("--config", "config_path", type=click.Path(exists=True), help="Config file path")
def config_show(config_path: str | None) -> None:
    """Show current configuration."""
    config = load_config(Path(config_path) if config_path else None)
    review = config.review

    console.print("\n[bold]Current Configuration[/bold]\n")

    table = Table(title="Review Settings")
    table.add_column("Setting")
    table.add_column("Value")

    table.add_row("enabled", str(review.enabled))
    table.add_row("threshold", review.threshold)
    table.add_row("label", review.label)
    table.add_row("vote_no_issue", str(review.vote_no_issue))
    table.add_row("vote_below_threshold", str(review.vote_below_threshold))
    table.add_row("vote_above_threshold", str(review.vote_above_threshold))
    table.add_row("new_issues_only", str(review.new_issues_only))
    table.add_row("message", escape(review.message))
    table.add_row("issue_comment", escape(review.issue_comment))

    console.print(table)

    console.print(f"\n[bold]Backend:[/bold] {config.backend}")
    console.print(f"[bold]Properties:[/bold] {len(config.properties)}")


if __name__ == "__main__":
    cli()
