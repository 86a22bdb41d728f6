"""
Source aggregation.

Fetches every configured provider concurrently, tolerates per-provider
failure, and collapses duplicates within the fetch cycle.
"""

import asyncio
import logging
from typing import Protocol

from publication_watch.data_sources.base_client import DataSourceError
from publication_watch.helpers.publication_helpers import dedup_key
from publication_watch.models import PublicationRecord, Source

logger = logging.getLogger(__name__)


class PublicationSource(Protocol):
    source: Source

    async def fetch_publications(self) -> list[PublicationRecord]: ...


def deduplicate(records: list[PublicationRecord]) -> list[PublicationRecord]:
    """Keep the first record for each doi / pmid / normalized-title key."""
    seen: set[str] = set()
    unique = []
    for record in records:
        key = dedup_key(record)
        if key in seen:
            continue
        seen.add(key)
        unique.append(record)
    return unique


class SourceAggregator:
    """Fetch from all providers and merge the results in provider order."""

    def __init__(self, sources: list[PublicationSource]) -> None:
        self.sources = sources

    async def _fetch_one(self, source: PublicationSource) -> list[PublicationRecord]:
        try:
            return await source.fetch_publications()
        except DataSourceError as e:
            logger.error("Error fetching from %s: %s", source.source.value, e)
            return []

    async def fetch_all(self) -> list[PublicationRecord]:
        """Fetch every provider concurrently and return deduplicated records.

        A failing provider contributes no records. Duplicates keep the
        occurrence from the earliest provider in ``self.sources``.
        """
        results = await asyncio.gather(
            *(self._fetch_one(source) for source in self.sources)
        )
        combined = [record for records in results for record in records]
        unique = deduplicate(combined)
        logger.info(
            "Total unique publications found: %d (of %d fetched)",
            len(unique),
            len(combined),
        )
        return unique
