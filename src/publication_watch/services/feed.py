"""The published feed: approved publications grouped by year, newest first."""

from publication_watch.models import CuratedPublication, Dataset


def group_by_year(
    publications: list[CuratedPublication],
) -> list[tuple[int | None, list[CuratedPublication]]]:
    """Group publications by year, years descending and undated last.

    Order within a year follows the input order.
    """
    grouped: dict[int | None, list[CuratedPublication]] = {}
    for publication in publications:
        grouped.setdefault(publication.year, []).append(publication)

    years = sorted(grouped, key=lambda year: (year is None, -(year or 0)))
    return [(year, grouped[year]) for year in years]


def published_feed(dataset: Dataset) -> list[tuple[int | None, list[CuratedPublication]]]:
    """Only approved entries are published."""
    return group_by_year(dataset.approved)
