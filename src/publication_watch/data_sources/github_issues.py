"""GitHub issues client, used as the review-request sink."""

import logging

from publication_watch.constants import DEFAULT_TIMEOUT, GITHUB_API_URL
from publication_watch.data_sources.base_client import (
    BaseClient,
    DataSourceError,
    RequestContext,
)
from publication_watch.models import ReviewIssue, ReviewRequest

logger = logging.getLogger(__name__)


class GitHubIssuesClient(BaseClient):
    """Files review requests as issues in a single repository."""

    def __init__(
        self, token: str, repository: str, timeout_seconds: float = DEFAULT_TIMEOUT
    ) -> None:
        super().__init__(timeout_seconds=timeout_seconds)
        self.token = token
        self.repository = repository

    @property
    def _source_name(self) -> str:
        return "github"

    @property
    def issues_url(self) -> str:
        return f"{GITHUB_API_URL}/repos/{self.repository}/issues"

    async def create_issue(self, request: ReviewRequest) -> ReviewIssue:
        """Create an issue for the review request and return its number and URL."""
        data = await self._rest_post(
            self.issues_url,
            {"title": request.title, "body": request.body, "labels": request.labels},
            headers={
                "Authorization": f"Bearer {self.token}",
                "Accept": "application/vnd.github+json",
            },
            context=RequestContext(
                source=self._source_name,
                method="create_issue",
                params={"repository": self.repository},
            ),
        )
        if not isinstance(data, dict) or "number" not in data:
            raise DataSourceError(self._source_name, "Unexpected issue response shape")

        issue = ReviewIssue(number=data["number"], html_url=data.get("html_url") or "")
        logger.info("Created issue #%d: %s", issue.number, issue.html_url)
        return issue
