"""Pydantic models for the persisted publications dataset.

The JSON layout is shared with the static site renderer, so field names and
the ``lastUpdated`` key are part of a published contract.
"""

from collections.abc import Iterator
from datetime import datetime, timezone
from itertools import chain

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_validator


def as_utc(value: datetime) -> datetime:
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 with milliseconds and a ``Z`` suffix, e.g. 2024-05-01T12:00:00.000Z."""
    return as_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CuratedPublication(BaseModel):
    """A publication that has been through human review."""

    model_config = ConfigDict(extra="allow", coerce_numbers_to_str=True)

    id: str
    title: str = ""
    authors: str = ""
    journal: str = ""
    year: int | None = None
    doi: str | None = None
    pmid: str | None = None
    links: dict[str, str] = {}  # link kind -> URL, e.g. "paper", "pdf", "code"

    @model_validator(mode="before")
    @classmethod
    def coerce_nones(cls, values: dict) -> dict:
        if not isinstance(values, dict):
            return values
        for field_name, field_info in cls.model_fields.items():
            if field_info.is_required():
                continue
            if values.get(field_name) is None and field_info.default is not None:
                values[field_name] = field_info.default
        return values


class Dataset(BaseModel):
    """The whole curated store: three disjoint lists plus a timestamp."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    approved: list[CuratedPublication] = []
    pending: list[CuratedPublication] = []
    rejected: list[CuratedPublication] = []
    last_updated: datetime | None = Field(default=None, alias="lastUpdated")

    @field_serializer("last_updated")
    def _serialize_last_updated(self, value: datetime | None) -> str | None:
        return format_timestamp(value) if value is not None else None

    def entries(self) -> Iterator[CuratedPublication]:
        """Iterate approved, pending and rejected entries in that order."""
        return chain(self.approved, self.pending, self.rejected)

    def ids(self) -> set[str]:
        return {entry.id for entry in self.entries()}
