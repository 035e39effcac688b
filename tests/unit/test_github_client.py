"""
Unit tests for the GitHub API client.
"""

import base64
import time
from datetime import datetime, timedelta
from unittest.mock import Mock, patch

import pytest
import requests

from llm_pr_reviewer.exceptions import GitHubAPIError, RateLimitExceeded, TransportError
from llm_pr_reviewer.github.client import GitHubClient


def make_response(status_code=200, json_data=None, headers=None):
    response = Mock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.headers = headers or {}
    response.json.return_value = json_data if json_data is not None else {}
    response.content = b"{}" if json_data is not None else b""
    response.text = ""
    return response


class TestGitHubClient:
    """Unit tests for GitHubClient class."""

    def setup_method(self):
        self.client = GitHubClient("ghp_test_token")

    def test_client_initialization(self):
        assert self.client.base_url == "https://api.github.com"
        assert self.client.session.headers["Authorization"] == "token ghp_test_token"
        assert self.client.session.headers["Accept"] == "application/vnd.github.v3+json"

    @pytest.mark.parametrize("token", ["", None])
    def test_token_is_required(self, token):
        with pytest.raises(ValueError):
            GitHubClient(token)

    def test_custom_base_url(self):
        client = GitHubClient("t", base_url="https://github.example.com/api/v3/")

        assert client.base_url == "https://github.example.com/api/v3"

    def test_get_pull_request(self):
        with patch.object(self.client.session, "request", return_value=make_response(json_data={"number": 5})) as mock_request:
            data = self.client.get_pull_request("octo", "app", 5)

        assert data == {"number": 5}
        method, url = mock_request.call_args[0]
        assert method == "GET"
        assert url == "https://api.github.com/repos/octo/app/pulls/5"
        assert mock_request.call_args[1]["timeout"] == 30

    def test_get_pull_request_files_single_page(self):
        files = [{"filename": "a.ts"}]
        with patch.object(self.client.session, "request", return_value=make_response(json_data=files)) as mock_request:
            result = self.client.get_pull_request_files("octo", "app", 5)

        assert result == files
        assert mock_request.call_args[1]["params"] == {"per_page": 100}
        assert mock_request.call_count == 1

    def test_rate_limit_headers_are_tracked(self):
        reset = int(time.time()) + 600
        response = make_response(
            json_data={},
            headers={"X-RateLimit-Remaining": "4321", "X-RateLimit-Reset": str(reset)},
        )
        with patch.object(self.client.session, "request", return_value=response):
            self.client.get_pull_request("octo", "app", 1)

        assert self.client.rate_limit_remaining == 4321
        assert self.client.rate_limit_reset == datetime.fromtimestamp(reset)

    def test_exhausted_rate_limit_response(self):
        response = make_response(
            status_code=403,
            json_data={"message": "API rate limit exceeded"},
            headers={"X-RateLimit-Remaining": "0", "X-RateLimit-Reset": str(int(time.time()) + 3600)},
        )
        with patch.object(self.client.session, "request", return_value=response):
            with pytest.raises(RateLimitExceeded) as exc_info:
                self.client.get_pull_request("octo", "app", 1)

        assert exc_info.value.status_code == 429

    def test_low_rate_limit_blocks_before_request(self):
        self.client.rate_limit_remaining = 3
        self.client.rate_limit_reset = datetime.now() + timedelta(minutes=5)

        with patch.object(self.client.session, "request") as mock_request:
            with pytest.raises(RateLimitExceeded):
                self.client.get_pull_request("octo", "app", 1)

        mock_request.assert_not_called()

    def test_http_error_raises_github_api_error(self):
        response = make_response(status_code=404, json_data={"message": "Not Found"})
        with patch.object(self.client.session, "request", return_value=response):
            with pytest.raises(GitHubAPIError) as exc_info:
                self.client.get_pull_request("octo", "app", 999)

        assert exc_info.value.status_code == 404
        assert exc_info.value.response_data == {"message": "Not Found"}
        assert "Not Found" in str(exc_info.value)

    def test_network_error_is_a_transport_error(self):
        with patch.object(self.client.session, "request", side_effect=requests.ConnectionError("boom")):
            with pytest.raises(TransportError, match="Request failed"):
                self.client.get_pull_request("octo", "app", 1)

    def test_repository_tree_recurses_into_directories(self):
        listings = {
            "https://api.github.com/repos/octo/app/contents": [
                {"type": "file", "path": "README.md"},
                {"type": "dir", "path": "src"},
                {"type": "symlink", "path": "link"},
            ],
            "https://api.github.com/repos/octo/app/contents/src": [
                {"type": "file", "path": "src/app.py"},
                {"type": "dir", "path": "src/util"},
            ],
            "https://api.github.com/repos/octo/app/contents/src/util": [
                {"type": "file", "path": "src/util/io.py"},
            ],
        }

        def fake_request(method, url, **kwargs):
            assert kwargs["params"] == {"ref": "main"}
            return make_response(json_data=listings[url])

        with patch.object(self.client.session, "request", side_effect=fake_request):
            paths = self.client.get_repository_tree("octo", "app", "", "main")

        assert sorted(paths) == ["README.md", "src/app.py", "src/util/io.py"]

    def test_repository_tree_propagates_errors(self):
        response = make_response(status_code=500, json_data={"message": "Server Error"})
        with patch.object(self.client.session, "request", return_value=response):
            with pytest.raises(GitHubAPIError):
                self.client.get_repository_tree("octo", "app", "", "main")

    def test_get_file_content_decodes_base64(self):
        encoded = base64.b64encode("print('hi')\n".encode("utf-8")).decode("ascii")
        response = make_response(json_data={"content": encoded, "encoding": "base64"})
        with patch.object(self.client.session, "request", return_value=response):
            content = self.client.get_file_content("octo", "app", "src/app.py", "main")

        assert content == "print('hi')\n"

    def test_get_file_content_rejects_unknown_encoding(self):
        response = make_response(json_data={"content": "x", "encoding": "none"})
        with patch.object(self.client.session, "request", return_value=response):
            with pytest.raises(GitHubAPIError, match="Unsupported encoding"):
                self.client.get_file_content("octo", "app", "big.bin", "main")

    def test_create_review(self):
        comments = [{"path": "a.ts", "position": 2, "body": "fix this"}]
        with patch.object(self.client.session, "request", return_value=make_response(json_data={"id": 1})) as mock_request:
            self.client.create_review("octo", "app", 5, comments)

        method, url = mock_request.call_args[0]
        assert method == "POST"
        assert url.endswith("/repos/octo/app/pulls/5/reviews")
        assert mock_request.call_args[1]["json"] == {"event": "COMMENT", "comments": comments}

    def test_create_issue_comment(self):
        with patch.object(self.client.session, "request", return_value=make_response(json_data={"id": 2})) as mock_request:
            self.client.create_issue_comment("octo", "app", 5, "summary")

        method, url = mock_request.call_args[0]
        assert method == "POST"
        assert url.endswith("/repos/octo/app/issues/5/comments")
        assert mock_request.call_args[1]["json"] == {"body": "summary"}
