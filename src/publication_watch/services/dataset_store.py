"""
Dataset store: the persisted publications file.

The file is the single source of truth shared with the static site. It is
read and written whole; writes go through a temporary file in the same
directory and ``os.replace`` so readers never see a partial document.
Concurrent decision runs against the same file must be serialized by the
caller (read-modify-write is not transactional).
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from publication_watch.constants import DEFAULT_PUBLICATIONS_FILE, DOI_RESOLVER_URL
from publication_watch.helpers.publication_helpers import generate_publication_id
from publication_watch.models import (
    Action,
    CuratedPublication,
    Dataset,
    Decision,
    IdType,
    PublicationRecord,
)
from publication_watch.models.model_dataset import as_utc

logger = logging.getLogger(__name__)


class DatasetError(Exception):
    """Base exception for dataset persistence failures."""

    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"[{path}] {message}")


class DatasetLoadError(DatasetError):
    """The dataset file is missing, unreadable, or malformed."""


class DatasetSaveError(DatasetError):
    """The dataset file could not be written."""


class DatasetStore:
    """Load and save a Dataset at a fixed path."""

    def __init__(self, path: Path = DEFAULT_PUBLICATIONS_FILE) -> None:
        self.path = Path(path)

    def load(self) -> Dataset:
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except OSError as e:
            raise DatasetLoadError(self.path, f"Cannot read dataset: {e}")
        except json.JSONDecodeError as e:
            raise DatasetLoadError(self.path, f"Invalid JSON: {e}")

        if not isinstance(raw, dict):
            raise DatasetLoadError(self.path, "Dataset must be a JSON object")
        try:
            return Dataset.model_validate(raw)
        except ValidationError as e:
            raise DatasetLoadError(self.path, f"Invalid dataset: {e}")

    def save(self, dataset: Dataset) -> Dataset:
        """Write the whole dataset atomically and return it with a fresh timestamp.

        ``lastUpdated`` never moves backwards, even if the stored value is
        ahead of the local clock.
        """
        now = datetime.now(timezone.utc)
        if dataset.last_updated is not None:
            now = max(now, as_utc(dataset.last_updated))
        saved = dataset.model_copy(update={"last_updated": now})
        payload = json.dumps(
            saved.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False
        )

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload + "\n")
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise DatasetSaveError(self.path, f"Cannot write dataset: {e}")

        logger.info("Publications file updated: %s", self.path)
        return saved


def build_publication(
    decision: Decision, fields: PublicationRecord, existing_ids: set[str]
) -> CuratedPublication:
    """Build the curated entry for a decision from the re-parsed request fields.

    The identifier typed in the command fills in the matching field when the
    request body did not carry it.
    """
    doi = fields.doi
    pmid = fields.pmid
    if decision.id_type == IdType.DOI and not doi:
        doi = decision.id_value
    elif decision.id_type == IdType.PMID and not pmid:
        pmid = decision.id_value

    links = {"paper": f"{DOI_RESOLVER_URL}/{doi}"} if doi else {}
    return CuratedPublication(
        id=generate_publication_id(fields.year, existing_ids),
        title=fields.title,
        authors=fields.authors,
        journal=fields.journal,
        year=fields.year,
        doi=doi,
        pmid=pmid,
        links=links,
    )


def add_publication(
    dataset: Dataset, action: Action, publication: CuratedPublication
) -> Dataset:
    """Return a new Dataset with ``publication`` appended to the list for ``action``."""
    if action == Action.APPROVE:
        update = {"approved": [*dataset.approved, publication]}
        logger.info("Added %r to approved publications", publication.title)
    else:
        update = {"rejected": [*dataset.rejected, publication]}
        logger.info("Added %r to rejected publications", publication.title)
    return dataset.model_copy(update=update)


def apply_decision(
    dataset: Dataset, decision: Decision, fields: PublicationRecord
) -> Dataset:
    """Return a new Dataset with the decided publication appended.

    Approvals go to ``approved`` and rejections to ``rejected``; ``pending``
    is never populated here. The input dataset is left untouched.
    """
    publication = build_publication(decision, fields, dataset.ids())
    return add_publication(dataset, decision.action, publication)
