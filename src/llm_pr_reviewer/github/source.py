"""
Change Source

Async collaborator boundary between the review pipeline and the
source-hosting platform.
"""

import asyncio
import logging
from typing import List, Optional, Protocol, Sequence

from ..models.pr_diff import ChangeContext
from ..models.review import ExtractedComment
from .client import GitHubClient
from .parser import PRDiffParser


logger = logging.getLogger(__name__)


class ChangeSource(Protocol):
    """What the pipeline needs from the hosting platform."""

    async def fetch_change_context(self) -> ChangeContext:
        ...

    async def fetch_tree(self, path: str, ref: str) -> List[str]:
        ...

    async def post_line_comments(self, comments: Sequence[ExtractedComment]) -> None:
        ...

    async def post_summary_comment(self, body: str) -> None:
        ...


class GitHubChangeSource:
    """
    ChangeSource for one GitHub pull request.

    Wraps the blocking GitHubClient; each call runs in a worker thread
    so the pipeline's awaits are real suspension points.
    """

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repo: str,
        pr_number: int,
        parser: Optional[PRDiffParser] = None
    ):
        """
        Initialize change source.

        Args:
            client: GitHub API client
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            parser: Optional PR data parser
        """
        self.client = client
        self.owner = owner
        self.repo = repo
        self.pr_number = pr_number
        self.parser = parser or PRDiffParser()

    async def fetch_change_context(self) -> ChangeContext:
        pr_data = await asyncio.to_thread(self.client.get_pull_request, self.owner, self.repo, self.pr_number)
        files_data = await asyncio.to_thread(
            self.client.get_pull_request_files, self.owner, self.repo, self.pr_number
        )
        return self.parser.parse_change_context(pr_data, files_data)

    async def fetch_tree(self, path: str, ref: str) -> List[str]:
        return await asyncio.to_thread(self.client.get_repository_tree, self.owner, self.repo, path, ref)

    async def post_line_comments(self, comments: Sequence[ExtractedComment]) -> None:
        payload = [comment.to_github_comment().to_payload() for comment in comments]
        await asyncio.to_thread(self.client.create_review, self.owner, self.repo, self.pr_number, payload)

    async def post_summary_comment(self, body: str) -> None:
        await asyncio.to_thread(self.client.create_issue_comment, self.owner, self.repo, self.pr_number, body)
