"""
Identity matching between bibliographic records.

Two records denote the same publication when any one of these holds,
checked in order:

  1. both have a DOI and the DOIs are equal (case-sensitive, as supplied)
  2. both have a PMID and the PMIDs are equal
  3. their normalized titles are equal

The title fallback is deliberately permissive: it keeps already-judged
work from being proposed again when identifiers are missing or differ
between sources.
"""

from publication_watch.helpers.publication_helpers import normalize_title
from publication_watch.models import CuratedPublication, Dataset, PublicationRecord

PublicationLike = PublicationRecord | CuratedPublication


def matches(a: PublicationLike, b: PublicationLike) -> bool:
    """Return True if ``a`` and ``b`` refer to the same publication."""
    if a.doi and b.doi and a.doi == b.doi:
        return True
    if a.pmid and b.pmid and a.pmid == b.pmid:
        return True
    return normalize_title(a.title) == normalize_title(b.title)


def find_match(candidate: PublicationLike, dataset: Dataset) -> CuratedPublication | None:
    """Return the first curated entry matching ``candidate``, if any."""
    return next(
        (entry for entry in dataset.entries() if matches(candidate, entry)), None
    )


def exists(candidate: PublicationLike, dataset: Dataset) -> bool:
    """Check ``candidate`` against approved, pending and rejected entries."""
    return find_match(candidate, dataset) is not None
