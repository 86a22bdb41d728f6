"""Publication records fetched from upstream bibliographic sources."""

from enum import StrEnum

from pydantic import BaseModel, model_validator


class Source(StrEnum):
    """Upstream provider a record was fetched from."""

    ORCID = "orcid"
    PUBMED = "pubmed"


class PublicationRecord(BaseModel):
    """A publication as seen in a single fetch cycle.

    Records carry no identity of their own; two records are compared with
    ``publication_watch.services.matcher.matches``. ``source`` is absent only
    for records re-parsed from a review request that did not name one.
    """

    title: str = ""
    authors: str = ""
    journal: str = ""
    year: int | None = None
    doi: str | None = None
    pmid: str | None = None
    source: Source | None = None

    @model_validator(mode="before")
    @classmethod
    def coerce_nones(cls, values: dict) -> dict:
        if not isinstance(values, dict):
            return values
        for field_name, field_info in cls.model_fields.items():
            if values.get(field_name) is None and field_info.default is not None:
                values[field_name] = field_info.default
        return values
