"""
PubMed API client.

Three methods:
  1. search             — Find PMIDs for an author query
  2. fetch_summaries    — Fetch esummary documents for given PMIDs
  3. fetch_publications — Both of the above, as PublicationRecords
"""

from __future__ import annotations

import logging
from typing import Any

from publication_watch.constants import (
    DEFAULT_PUBMED_AUTHOR,
    DEFAULT_TIMEOUT,
    PUBMED_MAX_RESULTS,
    PUBMED_SEARCH_URL,
    PUBMED_SUMMARY_URL,
)
from publication_watch.data_sources.base_client import (
    BaseClient,
    DataSourceError,
    RequestContext,
)
from publication_watch.models import PublicationRecord, Source

logger = logging.getLogger(__name__)


class PubMedClient(BaseClient):
    """Client for querying PubMed/NCBI E-utilities."""

    source = Source.PUBMED

    SEARCH_URL = PUBMED_SEARCH_URL
    SUMMARY_URL = PUBMED_SUMMARY_URL

    def __init__(
        self,
        author: str = DEFAULT_PUBMED_AUTHOR,
        api_key: str = "",
        max_results: int = PUBMED_MAX_RESULTS,
        timeout_seconds: float = DEFAULT_TIMEOUT,
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds)
        self.author = author
        self.api_key = api_key
        self.max_results = max_results

    @property
    def _source_name(self) -> str:
        return "pubmed"

    def _with_api_key(self, params: dict[str, Any]) -> dict[str, Any]:
        if self.api_key:
            return {**params, "api_key": self.api_key}
        return params

    async def search(self) -> list[str]:
        """Search PubMed by author and return the list of PMIDs."""
        params = self._with_api_key(
            {
                "db": "pubmed",
                "term": f"{self.author}[Author]",
                "retmax": self.max_results,
                "retmode": "json",
            }
        )
        data = await self._rest_get(
            self.SEARCH_URL,
            params,
            context=RequestContext(
                source=self._source_name,
                method="search",
                params={"author": self.author},
            ),
        )
        if not isinstance(data, dict):
            raise DataSourceError(self._source_name, "Unexpected search response shape")
        try:
            idlist = (data.get("esearchresult") or {}).get("idlist") or []
            return [str(pmid) for pmid in idlist]
        except (AttributeError, TypeError) as e:
            raise DataSourceError(self._source_name, f"Malformed search response: {e}")

    async def fetch_summaries(self, pmids: list[str]) -> dict[str, Any]:
        """Fetch esummary documents keyed by PMID."""
        if not pmids:
            return {}

        params = self._with_api_key(
            {"db": "pubmed", "id": ",".join(pmids), "retmode": "json"}
        )
        data = await self._rest_get(
            self.SUMMARY_URL,
            params,
            context=RequestContext(
                source=self._source_name,
                method="fetch_summaries",
                params={"count": len(pmids)},
            ),
        )
        if not isinstance(data, dict):
            raise DataSourceError(
                self._source_name, "Unexpected summary response shape"
            )
        return data.get("result") or {}

    async def fetch_publications(self) -> list[PublicationRecord]:
        pmids = await self.search()
        if not pmids:
            logger.info("No publications found in PubMed for %s", self.author)
            return []

        summaries = await self.fetch_summaries(pmids)
        try:
            records = [
                self._parse_summary(pmid, summaries[pmid])
                for pmid in pmids
                if isinstance(summaries.get(pmid), dict)
            ]
        except (AttributeError, TypeError, ValueError) as e:
            raise DataSourceError(self._source_name, f"Malformed summary response: {e}")
        logger.info("Fetched %d publications from PubMed", len(records))
        return records

    @staticmethod
    def _parse_summary(pmid: str, article: dict[str, Any]) -> PublicationRecord:
        """Convert one esummary document into a PublicationRecord."""
        authors = ", ".join(
            author.get("name", "") for author in article.get("authors") or []
        )
        pubdate = article.get("pubdate") or ""
        year = int(pubdate[:4]) if pubdate[:4].isdigit() else None

        doi = next(
            (
                entry.get("value")
                for entry in article.get("articleids") or []
                if entry.get("idtype") == "doi" and entry.get("value")
            ),
            None,
        )

        return PublicationRecord(
            title=article.get("title") or "",
            authors=authors,
            journal=article.get("source") or "",
            year=year,
            doi=doi,
            pmid=pmid,
            source=Source.PUBMED,
        )
