"""Pytest configuration and fixtures."""

import json
from pathlib import Path

import pytest

from publication_watch.config import Settings, get_settings
from publication_watch.models import CuratedPublication, Dataset, PublicationRecord, Source


@pytest.fixture
def orcid_record() -> PublicationRecord:
    """A record as fetched from ORCID."""
    return PublicationRecord(
        title="Ant colony genomics across the Neotropics",
        journal="Molecular Ecology",
        year=2022,
        doi="10.1111/mec.16000",
        source=Source.ORCID,
    )


@pytest.fixture
def pubmed_record() -> PublicationRecord:
    """A record as fetched from PubMed."""
    return PublicationRecord(
        title="Symbiont transmission in turtle ants",
        authors="Rubin BE, Moreau CS",
        journal="Proc Biol Sci",
        year=2023,
        doi="10.1098/rspb.2023.0001",
        pmid="36700001",
        source=Source.PUBMED,
    )


@pytest.fixture
def curated_entry() -> CuratedPublication:
    return CuratedPublication(
        id="pub-2019-a1b",
        title="Social insect microbiomes",
        authors="Rubin BE",
        journal="Insectes Sociaux",
        year=2019,
        doi="10.1007/s00040-019-00001-1",
        links={"paper": "https://doi.org/10.1007/s00040-019-00001-1"},
    )


@pytest.fixture
def dataset_file(tmp_path: Path, curated_entry: CuratedPublication) -> Path:
    """A publications file with one approved entry."""
    path = tmp_path / "data" / "publications.json"
    path.parent.mkdir()
    path.write_text(
        json.dumps(
            Dataset(approved=[curated_entry]).model_dump(mode="json", by_alias=True)
        )
    )
    return path


@pytest.fixture
def clean_settings(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    """Clear cached settings and isolate them from the developer's environment."""
    env_names = [field.upper() for field in Settings.model_fields]
    for name in [*env_names, "ISSUE_COMMENT", "ISSUE_BODY"]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
