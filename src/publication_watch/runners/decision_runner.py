"""Decision-apply cycle: one reviewer comment in, at most one dataset write."""

import logging

from pydantic import BaseModel

from publication_watch.models import CuratedPublication, Decision
from publication_watch.services.dataset_store import (
    DatasetStore,
    add_publication,
    build_publication,
)
from publication_watch.services.matcher import find_match
from publication_watch.services.review_gateway import parse_command, parse_request_body

logger = logging.getLogger(__name__)


class DecisionOutcome(BaseModel):
    """What a decision run did. ``publication`` is None when nothing was written."""

    decision: Decision
    publication: CuratedPublication | None = None
    duplicate_of: CuratedPublication | None = None


def run_decision_cycle(
    comment: str, request_body: str, store: DatasetStore
) -> DecisionOutcome | None:
    """Apply the command in ``comment`` to the dataset.

    Returns None, without touching the dataset, when the comment holds no
    command. A publication already present in any list is not added again.
    DatasetLoadError and DatasetSaveError propagate.
    """
    decision = parse_command(comment)
    if decision is None:
        logger.info("No valid command found in comment")
        return None

    logger.info(
        "Processing command: %s %s:%s",
        decision.action.value,
        decision.id_type.value,
        decision.id_value,
    )
    fields = parse_request_body(request_body)
    logger.debug("Publication details: %s", fields.model_dump())

    dataset = store.load()
    publication = build_publication(decision, fields, dataset.ids())

    duplicate = find_match(publication, dataset)
    if duplicate is not None:
        logger.warning(
            "%r already curated as %s, leaving dataset unchanged",
            publication.title,
            duplicate.id,
        )
        return DecisionOutcome(decision=decision, duplicate_of=duplicate)

    store.save(add_publication(dataset, decision.action, publication))
    return DecisionOutcome(decision=decision, publication=publication)
