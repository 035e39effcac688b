"""
Unit tests for the command line entry point.
"""

from unittest.mock import AsyncMock, Mock, patch

import pytest

from llm_pr_reviewer.cli import build_parser, main
from llm_pr_reviewer.exceptions import GitHubAPIError, ModelError
from llm_pr_reviewer.models.review import ExtractedComment, ReviewResult


ENV = {
    "GITHUB_TOKEN": "ghp_test",
    "GITHUB_REPOSITORY": "octo/app",
    "PULL_REQUEST_NUMBER": "7",
    "ANTHROPIC_API_KEY": "sk-test",
}


def fake_pipeline(result=None, error=None):
    pipeline = Mock()
    pipeline.run = AsyncMock(return_value=result, side_effect=error)
    return pipeline


@pytest.fixture(autouse=True)
def quiet_logging():
    with patch("llm_pr_reviewer.cli.setup_logging"):
        yield


def test_missing_configuration_exits_with_error(capsys):
    with patch("llm_pr_reviewer.cli.ReviewPipeline") as pipeline_cls:
        status = main([], environ={})

    assert status == 1
    assert "GITHUB_TOKEN is required" in capsys.readouterr().err
    pipeline_cls.from_config.assert_not_called()


def test_successful_review(capsys):
    result = ReviewResult(
        repository="octo/app",
        pr_number=7,
        summary="LGTM",
        comments=[ExtractedComment(path="a.ts", line=11, position=2, body="fix this")],
    )

    with patch("llm_pr_reviewer.cli.ReviewPipeline") as pipeline_cls:
        pipeline_cls.from_config.return_value = fake_pipeline(result=result)
        status = main([], environ=ENV)

    assert status == 0
    config = pipeline_cls.from_config.call_args[0][0]
    assert config.github.repository == "octo/app"
    assert config.github.pr_number == 7
    assert "octo/app#7: 1 line comments" in capsys.readouterr().out


@pytest.mark.parametrize("error", [
    GitHubAPIError("GitHub API error: 500", status_code=500),
    ModelError("Model request failed"),
])
def test_transport_failure_exits_with_error(error):
    with patch("llm_pr_reviewer.cli.ReviewPipeline") as pipeline_cls:
        pipeline_cls.from_config.return_value = fake_pipeline(error=error)
        status = main([], environ=ENV)

    assert status == 1


def test_log_level_override():
    with patch("llm_pr_reviewer.cli.ReviewPipeline") as pipeline_cls:
        pipeline_cls.from_config.return_value = fake_pipeline(
            result=ReviewResult(repository="octo/app", pr_number=7, summary="ok")
        )
        main(["--log-level", "DEBUG"], environ=ENV)

    config = pipeline_cls.from_config.call_args[0][0]
    assert config.logging.level == "DEBUG"


def test_config_file_option(tmp_path):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        "github: {token: t, owner: octo, repo: app, pr_number: 9}\n"
        "llm: {api_key: k}\n",
        encoding="utf-8",
    )

    with patch("llm_pr_reviewer.cli.ReviewPipeline") as pipeline_cls:
        pipeline_cls.from_config.return_value = fake_pipeline(
            result=ReviewResult(repository="octo/app", pr_number=9, summary="ok")
        )
        status = main(["--config", str(config_file)], environ={})

    assert status == 0
    assert pipeline_cls.from_config.call_args[0][0].github.pr_number == 9


def test_parser_rejects_unknown_log_level():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--log-level", "LOUD"])
