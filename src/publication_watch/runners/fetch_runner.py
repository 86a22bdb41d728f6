"""Fetch-and-propose cycle: fetch, reconcile, file review requests."""

import asyncio
import logging

from pydantic import BaseModel

from publication_watch.config import Settings, get_settings
from publication_watch.data_sources.github_issues import GitHubIssuesClient
from publication_watch.data_sources.orcid import OrcidClient
from publication_watch.data_sources.pubmed import PubMedClient
from publication_watch.services.aggregator import PublicationSource, SourceAggregator
from publication_watch.services.dataset_store import DatasetStore
from publication_watch.services.reconciliation import find_new
from publication_watch.services.review_gateway import ReviewGateway, ReviewSink

logger = logging.getLogger(__name__)


class FetchSummary(BaseModel):
    """Counts reported at the end of a fetch cycle."""

    unique_count: int = 0
    new_count: int = 0
    issues_created: int = 0


async def run_fetch_cycle(
    store: DatasetStore,
    sources: list[PublicationSource],
    sink: ReviewSink | None,
) -> FetchSummary:
    """Run one fetch cycle against explicit collaborators.

    The dataset is loaded first so that an unreadable file aborts the run
    before any network call. DatasetLoadError propagates.
    """
    dataset = store.load()

    unique = await SourceAggregator(sources).fetch_all()
    new = find_new(unique, dataset)
    if not new:
        logger.info("No new publications found.")
        return FetchSummary(unique_count=len(unique))

    logger.info("Creating review requests for %d new publications", len(new))
    issues = await ReviewGateway(sink).submit(new)
    return FetchSummary(
        unique_count=len(unique), new_count=len(new), issues_created=len(issues)
    )


async def run_from_settings(settings: Settings | None = None) -> FetchSummary:
    """Build the ORCID, PubMed and GitHub clients from settings and run a cycle."""
    settings = settings or get_settings()
    timeout = settings.request_timeout

    orcid = OrcidClient(settings.orcid_id, timeout_seconds=timeout)
    pubmed = PubMedClient(
        settings.pubmed_author,
        api_key=settings.ncbi_api_key,
        max_results=settings.pubmed_max_results,
        timeout_seconds=timeout,
    )
    github = None
    if settings.review_sink_configured:
        github = GitHubIssuesClient(
            settings.github_token, settings.github_repository, timeout_seconds=timeout
        )

    try:
        return await run_fetch_cycle(
            DatasetStore(settings.publications_file), [orcid, pubmed], github
        )
    finally:
        await asyncio.gather(
            orcid.close(), pubmed.close(), *([github.close()] if github else [])
        )
