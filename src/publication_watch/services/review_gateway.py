"""
Review request gateway.

Outbound, a new PublicationRecord is rendered into a review request body
and filed with the issue tracker. Inbound, a reviewer's comment is parsed
into a Decision, and the original request body is parsed back into the
publication fields, since the fetched record is not kept between runs.

Body format, version 1 — a marker line, then one labeled field per line::

    <!-- publication-watch:review-request v1 -->
    **Title:** ...
    **Authors:** ...        (N/A when empty)
    **Journal:** ...        (N/A when empty)
    **Year:** ...           (N/A when empty)
    **DOI:** ...            (only when present)
    **PMID:** ...           (only when present)
    **Source:** orcid|pubmed

followed by the literal ``/approve`` and ``/reject`` commands.
"""

import logging
import re
from typing import Protocol

from publication_watch.constants import (
    MISSING_FIELD_PLACEHOLDER,
    REVIEW_LABELS,
    REVIEW_MARKER_PREFIX,
    REVIEW_SCHEMA_VERSION,
    REVIEW_TITLE_MAX_CHARS,
    REVIEW_TITLE_PREFIX,
)
from publication_watch.data_sources.base_client import DataSourceError
from publication_watch.models import (
    Action,
    Decision,
    IdType,
    PublicationRecord,
    ReviewIssue,
    ReviewRequest,
    Source,
)

logger = logging.getLogger(__name__)

_COMMANDS = [
    (action, re.compile(rf"/{action.value}\s+(doi|pmid):(\S+)", re.IGNORECASE))
    for action in (Action.APPROVE, Action.REJECT)
]
_FIELD_LINE = re.compile(
    r"^\*\*(Title|Authors|Journal|Year|DOI|PMID|Source):\*\*[ \t]*(.*?)\s*$"
)
_MARKER = re.compile(rf"<!--\s*{re.escape(REVIEW_MARKER_PREFIX)}\s+v(\d+)\s*-->")
_LINE_BREAKS = re.compile(r"\s*[\r\n]+\s*")


class ReviewSink(Protocol):
    async def create_issue(self, request: ReviewRequest) -> ReviewIssue: ...


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


def _single_line(value: str) -> str:
    return _LINE_BREAKS.sub(" ", value).strip()


def command_target(record: PublicationRecord) -> str:
    """The ``<type>:<value>`` argument of the approve/reject commands.

    DOI is preferred. A record with neither identifier yields ``pmid:``
    with an empty value, which ``parse_command`` will not accept.
    """
    if record.doi:
        return f"{IdType.DOI.value}:{record.doi}"
    return f"{IdType.PMID.value}:{record.pmid or ''}"


def render_body(record: PublicationRecord) -> str:
    placeholder = MISSING_FIELD_PLACEHOLDER
    target = command_target(record)

    lines = [
        f"<!-- {REVIEW_MARKER_PREFIX} v{REVIEW_SCHEMA_VERSION} -->",
        "## New Publication Detected",
        "",
        f"**Title:** {_single_line(record.title)}",
        "",
        f"**Authors:** {_single_line(record.authors) or placeholder}",
        "",
        f"**Journal:** {_single_line(record.journal) or placeholder}",
        "",
        f"**Year:** {record.year or placeholder}",
        "",
    ]
    if record.doi:
        lines += [f"**DOI:** {record.doi}", ""]
    if record.pmid:
        lines += [f"**PMID:** {record.pmid}", ""]
    lines += [
        f"**Source:** {record.source.value if record.source else placeholder}",
        "",
        "---",
        "",
        "### Actions",
        "",
        "To approve this publication and add it to the website, comment:",
        "```",
        f"/approve {target}",
        "```",
        "",
        "To reject this publication (won't be asked again), comment:",
        "```",
        f"/reject {target}",
        "```",
    ]
    return "\n".join(lines)


def render_request(record: PublicationRecord) -> ReviewRequest:
    """Render a record into an issue title, body and labels."""
    if not record.doi and not record.pmid:
        logger.warning(
            "Publication %r has no DOI or PMID; its review commands carry an empty id",
            record.title,
        )
    title = _single_line(record.title)[:REVIEW_TITLE_MAX_CHARS]
    return ReviewRequest(
        title=f"{REVIEW_TITLE_PREFIX} {title}...",
        body=render_body(record),
        labels=list(REVIEW_LABELS),
    )


class ReviewGateway:
    """Files one review request per new publication, best effort."""

    def __init__(self, sink: ReviewSink | None) -> None:
        self.sink = sink

    async def submit(self, records: list[PublicationRecord]) -> list[ReviewIssue]:
        """Create a request per record in order; failures are logged and skipped."""
        if self.sink is None:
            logger.info(
                "GitHub token or repository not configured, skipping issue creation"
            )
            return []

        issues = []
        for record in records:
            try:
                issues.append(await self.sink.create_issue(render_request(record)))
            except DataSourceError as e:
                logger.error("Error creating issue for %r: %s", record.title, e)
        return issues


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


def parse_command(comment: str) -> Decision | None:
    """Parse the reviewer command in a comment.

    An ``/approve`` command takes precedence over a ``/reject`` anywhere in
    the same comment. Returns None when the comment holds no command.
    """
    for action, pattern in _COMMANDS:
        match = pattern.search(comment)
        if match is not None:
            id_type, id_value = match.groups()
            return Decision(
                action=action, id_type=IdType(id_type.lower()), id_value=id_value
            )
    return None


def _present(value: str | None) -> str:
    if not value or value == MISSING_FIELD_PLACEHOLDER:
        return ""
    return value


def parse_request_body(body: str) -> PublicationRecord:
    """Re-extract publication fields from a rendered request body.

    Missing fields come back empty (text) or None (year, identifiers).
    """
    marker = _MARKER.search(body)
    if marker and int(marker.group(1)) != REVIEW_SCHEMA_VERSION:
        logger.warning(
            "Review request uses schema v%s, expected v%d; parsing anyway",
            marker.group(1),
            REVIEW_SCHEMA_VERSION,
        )

    fields: dict[str, str] = {}
    for line in body.splitlines():
        match = _FIELD_LINE.match(line)
        if match and match.group(1) not in fields:
            fields[match.group(1)] = match.group(2)

    year = re.match(r"\d+", _present(fields.get("Year")))
    doi = _present(fields.get("DOI")).split()
    pmid = _present(fields.get("PMID")).split()
    source = _present(fields.get("Source"))

    return PublicationRecord(
        title=fields.get("Title", ""),
        authors=_present(fields.get("Authors")),
        journal=_present(fields.get("Journal")),
        year=int(year.group()) if year else None,
        doi=doi[0] if doi else None,
        pmid=pmid[0] if pmid else None,
        source=Source(source) if source in {s.value for s in Source} else None,
    )
