"""Data models for PublicationWatch."""

from publication_watch.models.model_dataset import CuratedPublication, Dataset
from publication_watch.models.model_publication import PublicationRecord, Source
from publication_watch.models.model_review import (
    Action,
    Decision,
    IdType,
    ReviewIssue,
    ReviewRequest,
)

__all__ = [
    "Action",
    "CuratedPublication",
    "Dataset",
    "Decision",
    "IdType",
    "PublicationRecord",
    "ReviewIssue",
    "ReviewRequest",
    "Source",
]
