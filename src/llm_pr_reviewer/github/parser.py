"""
PR Data Parser

Parses GitHub pull request and file data into the immutable
ChangeContext snapshot used by the review pipeline.
"""

import logging
from typing import Dict, List

from ..exceptions import GitHubAPIError
from ..models.pr_diff import ChangedFile, ChangeContext


logger = logging.getLogger(__name__)


class PRDiffParser:
    """
    Parser for GitHub PR data.

    Converts GitHub API responses into a ChangeContext with one
    ChangedFile per entry of the PR files listing.
    """

    def __init__(self):
        """Initialize PR diff parser."""
        self.status_mapping = {
            'added': 'added',
            'removed': 'removed',
            'modified': 'modified',
            'renamed': 'renamed',
            'copied': 'added',
            'changed': 'modified',
            'unchanged': 'modified',
        }

    def parse_change_context(self, pr_data: Dict, files_data: List[Dict]) -> ChangeContext:
        """
        Parse PR data and files into a ChangeContext.

        Args:
            pr_data: PR information from GitHub API
            files_data: List of file changes from GitHub API

        Returns:
            ChangeContext snapshot
        """
        logger.info(f"Parsing PR #{pr_data.get('number')}")

        files = [self.parse_changed_file(file_data) for file_data in files_data]

        try:
            context = ChangeContext(
                repository=pr_data['base']['repo']['full_name'],
                number=pr_data['number'],
                title=pr_data.get('title') or '',
                description=pr_data.get('body') or '',
                author=(pr_data.get('user') or {}).get('login', ''),
                head_ref=pr_data['head']['ref'],
                base_ref=pr_data['base']['ref'],
                files=tuple(files),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise GitHubAPIError(f"Unexpected pull request data: {e!r}", response_data=pr_data)

        logger.info(f"Parsed PR: {len(files)} files, +{context.total_additions}/-{context.total_deletions}")
        return context

    def parse_changed_file(self, file_data: Dict) -> ChangedFile:
        """
        Parse individual file change data.

        Args:
            file_data: File change data from GitHub API

        Returns:
            ChangedFile object
        """
        file_path = file_data.get('filename')
        if not file_path:
            raise GitHubAPIError("Unexpected file data: missing filename", response_data=file_data)
        logger.debug(f"Parsing file change: {file_path}")

        additions = file_data.get('additions', 0)
        deletions = file_data.get('deletions', 0)

        try:
            return ChangedFile(
                path=file_path,
                status=self._determine_status(file_data.get('status', 'modified')),
                additions=additions,
                deletions=deletions,
                changes=file_data.get('changes', additions + deletions),
                patch=file_data.get('patch') or None,
                previous_path=file_data.get('previous_filename'),
            )
        except (TypeError, ValueError) as e:
            raise GitHubAPIError(f"Unexpected file data for {file_path}: {e}", response_data=file_data)

    def _determine_status(self, status: str) -> str:
        """Normalize GitHub file status."""
        return self.status_mapping.get(status, 'modified')
