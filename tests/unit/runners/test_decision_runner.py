"""Unit tests for the decision-apply cycle."""

import json
from pathlib import Path

import pytest

from publication_watch.models import Action, CuratedPublication, Dataset, IdType
from publication_watch.runners.decision_runner import run_decision_cycle
from publication_watch.services.dataset_store import DatasetLoadError, DatasetStore
from publication_watch.services.review_gateway import render_body


@pytest.fixture
def store(tmp_path: Path) -> DatasetStore:
    path = tmp_path / "publications.json"
    path.write_text(
        json.dumps(
            {
                "approved": [],
                "pending": [],
                "rejected": [],
                "lastUpdated": "2024-01-01T00:00:00.000Z",
            }
        )
    )
    return DatasetStore(path)


def test_approve_adds_entry_with_doi_link(store: DatasetStore):
    body = "**Title:** Foo\n\n**DOI:** 10.5/y\n"

    outcome = run_decision_cycle("/approve doi:10.5/y", body, store)

    assert outcome.decision.action is Action.APPROVE
    assert outcome.decision.id_type is IdType.DOI
    assert outcome.decision.id_value == "10.5/y"

    dataset = store.load()
    assert len(dataset.approved) == 1
    assert dataset.approved[0].title == "Foo"
    assert dataset.approved[0].links["paper"] == "https://doi.org/10.5/y"
    assert dataset.approved[0] == outcome.publication


def test_comment_without_command_leaves_file_untouched(store: DatasetStore):
    before = store.path.read_text()

    outcome = run_decision_cycle("Looks relevant, will check later", "**Title:** Foo", store)

    assert outcome is None
    assert store.path.read_text() == before


def test_reject_from_rendered_request(store: DatasetStore, pubmed_record):
    body = render_body(pubmed_record)

    outcome = run_decision_cycle(f"/reject pmid:{pubmed_record.pmid}", body, store)

    dataset = store.load()
    assert dataset.approved == []
    assert len(dataset.rejected) == 1
    entry = dataset.rejected[0]
    assert entry.title == pubmed_record.title
    assert entry.authors == pubmed_record.authors
    assert entry.year == 2023
    assert entry.pmid == "36700001"
    assert entry.id.startswith("pub-2023-")
    assert outcome.publication == entry


def test_repeated_command_does_not_duplicate(store: DatasetStore):
    body = "**Title:** Foo\n\n**DOI:** 10.5/y\n"
    run_decision_cycle("/approve doi:10.5/y", body, store)
    after_first = store.path.read_text()

    outcome = run_decision_cycle("/approve doi:10.5/y", body, store)

    assert outcome.publication is None
    assert outcome.duplicate_of.doi == "10.5/y"
    assert store.path.read_text() == after_first


def test_existing_entries_are_preserved(store: DatasetStore):
    dataset = store.load().model_copy(
        update={"approved": [CuratedPublication(id="pub-2010-old", title="Old work")]}
    )
    store.save(dataset)

    run_decision_cycle("/approve doi:10.5/new", "**Title:** New work\n", store)

    assert [e.id for e in store.load().approved][0] == "pub-2010-old"
    assert len(store.load().approved) == 2


def test_missing_dataset_is_fatal(tmp_path: Path):
    with pytest.raises(DatasetLoadError):
        run_decision_cycle(
            "/approve doi:10.5/y", "**Title:** Foo", DatasetStore(tmp_path / "none.json")
        )
