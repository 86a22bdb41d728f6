"""Models for review requests and the decisions parsed back from them."""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Action(StrEnum):
    APPROVE = "approve"
    REJECT = "reject"


class IdType(StrEnum):
    DOI = "doi"
    PMID = "pmid"


class Decision(BaseModel):
    """A reviewer's command, e.g. ``/approve doi:10.1234/abc``."""

    model_config = ConfigDict(frozen=True)

    action: Action
    id_type: IdType
    id_value: str


class ReviewRequest(BaseModel):
    """A rendered review request, ready to be filed with the issue tracker."""

    title: str
    body: str
    labels: list[str] = []


class ReviewIssue(BaseModel):
    """The tracker's reference to a filed review request."""

    number: int
    html_url: str = ""
