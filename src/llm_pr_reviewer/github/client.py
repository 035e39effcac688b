"""
GitHub API Client

Handles GitHub API authentication, rate limiting, and communication.
Provides methods for PR metadata, changed files, repository contents
and posting review comments.
"""

import base64
import time
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime
import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from ..exceptions import GitHubAPIError, RateLimitExceeded


logger = logging.getLogger(__name__)

# 변경 파일은 한 페이지만 조회
FILES_PER_PAGE = 100


class GitHubClient:
    """
    GitHub API client with authentication, rate limiting, and error handling.

    Provides methods for:
    - Pull request and changed file retrieval
    - Repository tree and file content retrieval
    - Review and issue comment creation
    """

    def __init__(self, token: str, base_url: str = "https://api.github.com", timeout: int = 30):
        """
        Initialize GitHub client.

        Args:
            token: GitHub personal access token
            base_url: GitHub API base URL (default: https://api.github.com)
            timeout: Request timeout in seconds
        """
        if not token:
            raise ValueError("GitHub token is required")

        self.token = token
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = self._create_session()
        self.rate_limit_remaining = 5000
        self.rate_limit_reset = datetime.now()

    def _create_session(self) -> requests.Session:
        """Create requests session with retry strategy and authentication."""
        session = requests.Session()

        # Configure retry strategy
        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        # Set authentication headers
        session.headers.update({
            'Authorization': f'token {self.token}',
            'Accept': 'application/vnd.github.v3+json',
            'User-Agent': 'LLM-PR-Reviewer/1.0'
        })

        return session

    def _check_rate_limit(self) -> None:
        """Check and handle GitHub API rate limits."""
        if self.rate_limit_remaining <= 10 and datetime.now() < self.rate_limit_reset:
            wait_time = (self.rate_limit_reset - datetime.now()).total_seconds()
            if wait_time > 0:
                logger.warning(f"Rate limit low ({self.rate_limit_remaining}), resets in {wait_time:.1f}s")
                raise RateLimitExceeded(self.rate_limit_reset)

    def _update_rate_limit(self, response: requests.Response) -> None:
        """Update rate limit information from response headers."""
        if 'X-RateLimit-Remaining' in response.headers:
            self.rate_limit_remaining = int(response.headers['X-RateLimit-Remaining'])

        if 'X-RateLimit-Reset' in response.headers:
            reset_timestamp = int(response.headers['X-RateLimit-Reset'])
            self.rate_limit_reset = datetime.fromtimestamp(reset_timestamp)

    def _make_request(self, method: str, endpoint: str, **kwargs) -> requests.Response:
        """
        Make authenticated request to GitHub API with rate limiting.

        Args:
            method: HTTP method (GET, POST, etc.)
            endpoint: API endpoint (without base URL)
            **kwargs: Additional arguments for requests

        Returns:
            Response object

        Raises:
            GitHubAPIError: For API errors
            RateLimitExceeded: When rate limit is exceeded
        """
        self._check_rate_limit()

        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        kwargs.setdefault('timeout', self.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request failed: {e}")
            raise GitHubAPIError(f"Request failed: {str(e)}")

        self._update_rate_limit(response)

        if response.status_code == 429 or (
            response.status_code == 403 and response.headers.get('X-RateLimit-Remaining') == '0'
        ):
            reset_time = datetime.fromtimestamp(int(response.headers.get('X-RateLimit-Reset', time.time() + 3600)))
            raise RateLimitExceeded(reset_time)

        if not response.ok:
            error_data = self._error_data(response)
            raise GitHubAPIError(
                f"GitHub API error: {response.status_code} - {error_data.get('message', 'Unknown error')}",
                status_code=response.status_code,
                response_data=error_data
            )

        return response

    def _error_data(self, response: requests.Response) -> Dict:
        if not response.content:
            return {}
        try:
            data = response.json()
        except ValueError:
            return {'message': response.text[:200]}
        return data if isinstance(data, dict) else {'message': str(data)}

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> Dict:
        """
        Get pull request information.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            Pull request data
        """
        logger.info(f"Fetching PR {owner}/{repo}#{pr_number}")

        response = self._make_request('GET', f'/repos/{owner}/{repo}/pulls/{pr_number}')
        return response.json()

    def get_pull_request_files(self, owner: str, repo: str, pr_number: int) -> List[Dict]:
        """
        Get files changed in a pull request.

        Only the first page (up to 100 files) is fetched.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number

        Returns:
            List of file change data
        """
        logger.info(f"Fetching PR files for {owner}/{repo}#{pr_number}")

        response = self._make_request(
            'GET',
            f'/repos/{owner}/{repo}/pulls/{pr_number}/files',
            params={'per_page': FILES_PER_PAGE}
        )
        files = response.json()

        if len(files) >= FILES_PER_PAGE:
            logger.warning(f"PR has at least {FILES_PER_PAGE} changed files; only the first page is reviewed")

        logger.info(f"Found {len(files)} changed files")
        return files

    def get_contents(self, owner: str, repo: str, path: str, ref: str) -> Any:
        """
        Get repository contents at a path.

        Args:
            owner: Repository owner
            repo: Repository name
            path: Directory or file path ('' for the root)
            ref: Branch name or commit SHA

        Returns:
            List of entries for a directory, a dict for a file
        """
        endpoint = f'/repos/{owner}/{repo}/contents/{path.strip("/")}'.rstrip('/')
        response = self._make_request('GET', endpoint, params={'ref': ref})
        return response.json()

    def get_repository_tree(self, owner: str, repo: str, path: str = '', ref: str = 'main') -> List[str]:
        """
        List every file below a directory, recursively.

        Args:
            owner: Repository owner
            repo: Repository name
            path: Directory to start from ('' for the root)
            ref: Branch name or commit SHA

        Returns:
            File paths (order is not significant)
        """
        logger.info(f"Fetching repository tree for {owner}/{repo}:{path or '/'}@{ref}")

        files: List[str] = []
        pending = [path]

        while pending:
            current = pending.pop()
            entries = self.get_contents(owner, repo, current, ref)
            if not isinstance(entries, list):
                continue

            for entry in entries:
                if entry.get('type') == 'file':
                    files.append(entry['path'])
                elif entry.get('type') == 'dir':
                    pending.append(entry['path'])

        logger.info(f"Found {len(files)} files in repository tree")
        return files

    def get_file_content(self, owner: str, repo: str, path: str, ref: str) -> str:
        """
        Get decoded content of a single file.

        Args:
            owner: Repository owner
            repo: Repository name
            path: File path
            ref: Branch name or commit SHA

        Returns:
            File content as text
        """
        data = self.get_contents(owner, repo, path, ref)

        if not isinstance(data, dict) or 'content' not in data:
            raise GitHubAPIError(f"Unexpected response format for {path}")

        encoding = data.get('encoding')
        if encoding != 'base64':
            raise GitHubAPIError(f"Unsupported encoding: {encoding}")

        return base64.b64decode(data['content']).decode('utf-8')

    def create_review(
        self,
        owner: str,
        repo: str,
        pr_number: int,
        comments: List[Dict],
        body: Optional[str] = None,
        event: str = 'COMMENT'
    ) -> Dict:
        """
        Create a pull request review with inline comments.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            comments: Review comment payloads (path, position, body)
            body: Optional review body
            event: Review event (default: COMMENT)

        Returns:
            Created review data
        """
        logger.info(f"Posting review with {len(comments)} comments to {owner}/{repo}#{pr_number}")

        payload: Dict[str, Any] = {'event': event, 'comments': comments}
        if body:
            payload['body'] = body

        response = self._make_request('POST', f'/repos/{owner}/{repo}/pulls/{pr_number}/reviews', json=payload)
        return response.json()

    def create_issue_comment(self, owner: str, repo: str, pr_number: int, body: str) -> Dict:
        """
        Post a top-level comment on a pull request.

        Args:
            owner: Repository owner
            repo: Repository name
            pr_number: Pull request number
            body: Comment body

        Returns:
            Created comment data
        """
        logger.info(f"Posting summary comment to {owner}/{repo}#{pr_number}")

        response = self._make_request(
            'POST',
            f'/repos/{owner}/{repo}/issues/{pr_number}/comments',
            json={'body': body}
        )
        return response.json()
