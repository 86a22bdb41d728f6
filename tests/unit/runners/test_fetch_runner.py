"""Unit tests for the fetch-and-propose cycle."""

import json
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from publication_watch.config import Settings
from publication_watch.data_sources.base_client import DataSourceError
from publication_watch.models import (
    CuratedPublication,
    Dataset,
    PublicationRecord,
    ReviewIssue,
    Source,
)
from publication_watch.runners import fetch_runner
from publication_watch.runners.fetch_runner import run_fetch_cycle, run_from_settings
from publication_watch.services.dataset_store import DatasetLoadError, DatasetStore


class StubSource:
    def __init__(self, source: Source, records=None, error=None):
        self.source = source
        self.records = records or []
        self.error = error
        self.calls = 0

    async def fetch_publications(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.records


def _write(path: Path, dataset: Dataset) -> Path:
    path.write_text(json.dumps(dataset.model_dump(mode="json", by_alias=True)))
    return path


@pytest.mark.asyncio
class TestRunFetchCycle:
    async def test_rejected_publication_is_not_proposed(self, tmp_path: Path):
        path = _write(
            tmp_path / "publications.json",
            Dataset(rejected=[CuratedPublication(id="pub-2020-abc", title="Old", doi="10.1/x")]),
        )
        source = StubSource(
            Source.ORCID,
            [PublicationRecord(title="Old, refetched", doi="10.1/x", source=Source.ORCID)],
        )
        sink = AsyncMock()

        summary = await run_fetch_cycle(DatasetStore(path), [source], sink)

        assert summary.unique_count == 1
        assert summary.new_count == 0
        sink.create_issue.assert_not_called()

    async def test_files_one_request_per_new_publication(self, tmp_path: Path):
        path = _write(tmp_path / "publications.json", Dataset())
        orcid = StubSource(
            Source.ORCID,
            [PublicationRecord(title="Shared", doi="10.1/s", source=Source.ORCID)],
        )
        pubmed = StubSource(
            Source.PUBMED,
            [
                PublicationRecord(title="Shared", doi="10.1/s", pmid="1", source=Source.PUBMED),
                PublicationRecord(title="Only PubMed", pmid="2", source=Source.PUBMED),
            ],
        )
        sink = AsyncMock()
        sink.create_issue = AsyncMock(
            side_effect=[
                ReviewIssue(number=1),
                DataSourceError("github", "HTTP 500"),
            ]
        )

        summary = await run_fetch_cycle(DatasetStore(path), [orcid, pubmed], sink)

        assert summary.unique_count == 2
        assert summary.new_count == 2
        assert summary.issues_created == 1
        assert sink.create_issue.call_count == 2

    async def test_unreadable_dataset_aborts_before_fetching(self, tmp_path: Path):
        source = StubSource(Source.ORCID)

        with pytest.raises(DatasetLoadError):
            await run_fetch_cycle(
                DatasetStore(tmp_path / "missing.json"), [source], AsyncMock()
            )

        assert source.calls == 0

    async def test_dataset_is_not_written(self, tmp_path: Path):
        path = _write(tmp_path / "publications.json", Dataset())
        before = path.read_text()
        source = StubSource(Source.ORCID, [PublicationRecord(title="New", doi="10.1/n")])

        await run_fetch_cycle(DatasetStore(path), [source], None)

        assert path.read_text() == before


@pytest.mark.asyncio
class TestRunFromSettings:
    async def test_builds_clients_and_skips_sink_without_token(
        self, tmp_path: Path, monkeypatch
    ):
        path = _write(tmp_path / "publications.json", Dataset())
        settings = Settings(
            publications_file=path,
            orcid_id="0000-0002-1825-0097",
            pubmed_author="Doe J",
            ncbi_api_key="k",
            github_token="",
            github_repository="lab/site",
        )
        captured = {}

        async def fake_cycle(store, sources, sink):
            captured.update(store=store, sources=sources, sink=sink)
            return fetch_runner.FetchSummary()

        monkeypatch.setattr(fetch_runner, "run_fetch_cycle", fake_cycle)

        await run_from_settings(settings)

        orcid, pubmed = captured["sources"]
        assert orcid.orcid_id == "0000-0002-1825-0097"
        assert pubmed.author == "Doe J"
        assert pubmed.api_key == "k"
        assert captured["sink"] is None
        assert captured["store"].path == path

    async def test_builds_github_sink_when_configured(self, tmp_path: Path, monkeypatch):
        path = _write(tmp_path / "publications.json", Dataset())
        settings = Settings(
            publications_file=path, github_token="tok", github_repository="lab/site"
        )
        captured = {}

        async def fake_cycle(store, sources, sink):
            captured["sink"] = sink
            return fetch_runner.FetchSummary()

        monkeypatch.setattr(fetch_runner, "run_fetch_cycle", fake_cycle)

        await run_from_settings(settings)

        assert captured["sink"].repository == "lab/site"
        assert captured["sink"].token == "tok"
