"""ORCID public API client."""

import logging
from typing import Any

from publication_watch.constants import DEFAULT_ORCID_ID, DEFAULT_TIMEOUT, ORCID_BASE_URL
from publication_watch.data_sources.base_client import (
    BaseClient,
    DataSourceError,
    RequestContext,
)
from publication_watch.models import PublicationRecord, Source

logger = logging.getLogger(__name__)


class OrcidClient(BaseClient):
    """Client for the works listing of a single ORCID record."""

    source = Source.ORCID

    def __init__(
        self, orcid_id: str = DEFAULT_ORCID_ID, timeout_seconds: float = DEFAULT_TIMEOUT
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds)
        self.orcid_id = orcid_id

    @property
    def _source_name(self) -> str:
        return "orcid"

    @property
    def works_url(self) -> str:
        return f"{ORCID_BASE_URL}/{self.orcid_id}/works"

    async def fetch_works(self) -> dict[str, Any]:
        """Fetch the raw works document for the configured ORCID id."""
        data = await self._rest_get(
            self.works_url,
            params={},
            headers={"Accept": "application/json"},
            context=RequestContext(
                source=self._source_name,
                method="fetch_works",
                params={"orcid_id": self.orcid_id},
            ),
        )
        if not isinstance(data, dict):
            raise DataSourceError(
                self._source_name,
                f"Unexpected response shape for ORCID id '{self.orcid_id}'",
            )
        return data

    async def fetch_publications(self) -> list[PublicationRecord]:
        """Fetch works and convert them into PublicationRecords."""
        data = await self.fetch_works()
        try:
            records = self._parse_works(data)
        except (AttributeError, TypeError, ValueError) as e:
            raise DataSourceError(self._source_name, f"Malformed works response: {e}")
        logger.info("Fetched %d publications from ORCID", len(records))
        return records

    def _parse_works(self, data: dict[str, Any]) -> list[PublicationRecord]:
        """Take the first work summary of each group.

        ORCID groups the same work reported by several sources; the first
        summary is the preferred version.
        """
        records = []
        for group in data.get("group") or []:
            summaries = group.get("work-summary") or []
            if not summaries:
                continue
            summary = summaries[0]

            title = ((summary.get("title") or {}).get("title") or {}).get("value") or ""
            year_raw = ((summary.get("publication-date") or {}).get("year") or {}).get(
                "value"
            )
            journal = (summary.get("journal-title") or {}).get("value") or ""
            doi, pmid = self._external_ids(summary)

            records.append(
                PublicationRecord(
                    title=title,
                    journal=journal,
                    year=int(year_raw) if str(year_raw or "").isdigit() else None,
                    doi=doi,
                    pmid=pmid,
                    source=Source.ORCID,
                )
            )
        return records

    @staticmethod
    def _external_ids(summary: dict[str, Any]) -> tuple[str | None, str | None]:
        """Return (doi, pmid); the first identifier of each type wins."""
        found: dict[str, str] = {}
        external_ids = (summary.get("external-ids") or {}).get("external-id") or []
        for ext in external_ids:
            id_type = ext.get("external-id-type")
            value = ext.get("external-id-value")
            if id_type in ("doi", "pmid") and value and id_type not in found:
                found[id_type] = value
        return found.get("doi"), found.get("pmid")
