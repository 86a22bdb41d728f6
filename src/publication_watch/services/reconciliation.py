"""Reconciliation of fetched records against the curated dataset."""

import logging

from publication_watch.models import Dataset, PublicationRecord
from publication_watch.services.matcher import exists

logger = logging.getLogger(__name__)


def find_new(
    aggregated: list[PublicationRecord], dataset: Dataset
) -> list[PublicationRecord]:
    """Return the records that match nothing in the dataset, in input order.

    Rejected entries count as matches, so a rejected publication is never
    proposed again.
    """
    new = [record for record in aggregated if not exists(record, dataset)]
    logger.info("New publications: %d", len(new))
    return new
