"""Command-line interface for PublicationWatch."""

import asyncio
import logging
from pathlib import Path

import click

from publication_watch.config import Settings, get_settings
from publication_watch.models import Action
from publication_watch.runners.decision_runner import run_decision_cycle
from publication_watch.runners.fetch_runner import run_from_settings
from publication_watch.services.dataset_store import DatasetError, DatasetStore
from publication_watch.services.feed import published_feed


def _set_output(settings: Settings, name: str, value: object) -> None:
    """Record a step output for the CI workflow, if it provided an output file."""
    if not settings.github_output:
        return
    with Path(settings.github_output).open("a", encoding="utf-8") as fh:
        fh.write(f"{name}={value}\n")


@click.group()
@click.version_option(package_name="publication-watch")
@click.option(
    "--log-level",
    default=None,
    help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...)",
)
@click.pass_context
def main(ctx: click.Context, log_level: str | None):
    """PublicationWatch: keep the lab publication list up to date."""
    settings = get_settings()
    logging.basicConfig(
        level=(log_level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    ctx.obj = settings


@main.command()
@click.pass_obj
def fetch(settings: Settings):
    """Fetch ORCID and PubMed, and file a review request per new publication."""
    try:
        summary = asyncio.run(run_from_settings(settings))
    except DatasetError as e:
        raise click.ClickException(f"Error loading publications file: {e}")

    click.echo(f"Unique publications found: {summary.unique_count}")
    click.echo(f"New publications: {summary.new_count}")
    click.echo(f"Review requests created: {summary.issues_created}")
    _set_output(settings, "new_count", summary.new_count)


@main.command()
@click.option(
    "-c",
    "--comment",
    envvar="ISSUE_COMMENT",
    required=True,
    help="Reviewer comment holding the /approve or /reject command",
)
@click.option(
    "-b",
    "--body",
    envvar="ISSUE_BODY",
    default="",
    help="Body of the review request the comment was left on",
)
@click.pass_obj
def apply(settings: Settings, comment: str, body: str):
    """Apply a reviewer's /approve or /reject command to the dataset."""
    if not comment.strip():
        raise click.UsageError("No comment provided")

    try:
        outcome = run_decision_cycle(
            comment, body, DatasetStore(settings.publications_file)
        )
    except DatasetError as e:
        raise click.ClickException(str(e))

    if outcome is None:
        click.echo("No valid command found in comment")
        return

    if outcome.publication is None:
        click.echo(f"Already curated as {outcome.duplicate_of.id}; nothing to do")
        return

    action = outcome.decision.action.value
    target = "approved" if outcome.decision.action == Action.APPROVE else "rejected"
    click.echo(f"Added \"{outcome.publication.title}\" to {target} publications")
    _set_output(settings, "action", action)
    _set_output(settings, "title", outcome.publication.title)


@main.command()
@click.pass_obj
def feed(settings: Settings):
    """Print the approved publications, grouped by year."""
    try:
        dataset = DatasetStore(settings.publications_file).load()
    except DatasetError as e:
        raise click.ClickException(str(e))

    groups = published_feed(dataset)
    if not groups:
        click.echo("No publications available at this time.")
        return

    for year, publications in groups:
        click.echo(f"{year if year is not None else 'Undated'}")
        for publication in publications:
            click.echo(f"  {publication.title}")
            if publication.authors:
                click.echo(f"    {publication.authors}")
            if publication.journal:
                click.echo(f"    {publication.journal}")
            for kind, url in publication.links.items():
                click.echo(f"    {kind}: {url}")


if __name__ == "__main__":
    main()
