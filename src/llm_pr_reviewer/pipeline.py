"""
Review Pipeline

Orchestrates one review pass: fetch the pull request, run the three
model steps (structure, review, summary), extract anchored comments
and post the results.
"""

import asyncio
import logging
from datetime import datetime
from typing import List, Optional

from .config import AppConfig, ReviewConfig
from .github.client import GitHubClient
from .github.source import ChangeSource, GitHubChangeSource
from .llm.client import AnthropicModelClient, ModelClient
from .llm.prompts import PromptBuilder
from .models.pr_diff import ChangeContext
from .models.review import ExtractedComment, ReviewResult
from .review.extractor import CommentExtractor
from .review.focus import compose_review_focus, format_review_focus


logger = logging.getLogger(__name__)


class ReviewPipeline:
    """
    Single-pass pull request review.

    Steps run strictly in order because every prompt embeds the output
    of the previous model call:
    1. Fetch change context and repository tree
    2. Analyze repository structure
    3. Perform the detailed code review
    4. Generate the summary comment
    5. Extract line comments and post everything

    Nothing is posted unless all model calls succeeded.
    """

    def __init__(
        self,
        source: ChangeSource,
        model: ModelClient,
        review_config: Optional[ReviewConfig] = None,
        model_name: str = "",
        extractor: Optional[CommentExtractor] = None,
    ):
        """
        Initialize review pipeline.

        Args:
            source: Hosting platform collaborator
            model: Language model collaborator
            review_config: Review focus options
            model_name: Model name shown in the summary footer
            extractor: Optional comment extractor
        """
        self.source = source
        self.model = model
        self.review_config = review_config or ReviewConfig()
        self.model_name = model_name
        self.prompt_builder = PromptBuilder(language=self.review_config.language)
        self.extractor = extractor or CommentExtractor()

    @classmethod
    def from_config(cls, config: AppConfig) -> "ReviewPipeline":
        """Wire the GitHub source and Anthropic model client from configuration."""
        github_client = GitHubClient(
            config.github.token,
            base_url=config.github.api_base_url,
            timeout=config.github.timeout_seconds,
        )
        source = GitHubChangeSource(
            github_client,
            owner=config.github.owner,
            repo=config.github.repo,
            pr_number=config.github.pr_number,
        )
        model = AnthropicModelClient(config.llm)
        return cls(source, model, review_config=config.review, model_name=config.llm.model)

    async def run(self) -> ReviewResult:
        """
        Run the complete review.

        Returns:
            ReviewResult that has been posted to the pull request

        Raises:
            TransportError: When fetching context or any model call fails
        """
        start_time = datetime.now()
        logger.info("Starting pull request review...")

        context = await self.source.fetch_change_context()
        logger.info(f"Fetched PR #{context.number}: {len(context.files)} changed files")

        repository_info = await self._analyze_structure(context)
        logger.info("Repository structure analysis completed")

        detailed_review = await self._perform_review(context, repository_info)
        logger.info("Code review completed")

        summary = await self._generate_summary(context, detailed_review)
        logger.info("Summary comment generated")

        comments = self.extractor.extract_comments(detailed_review, context.files)

        result = ReviewResult(
            repository=context.repository,
            pr_number=context.number,
            summary=summary,
            comments=comments,
            overall_assessment=self.extractor.extract_overall_assessment(detailed_review),
            suggested_improvements=self.extractor.extract_suggested_improvements(detailed_review),
            created_at=start_time,
        )

        # 게시 단계는 취소되어도 코멘트와 요약이 함께 나가도록 보호
        await asyncio.shield(self._publish(result.comments, result.summary))

        result.processing_time = (datetime.now() - start_time).total_seconds()
        logger.info(f"Review completed for {context.repository}#{context.number} ({result.processing_time:.2f}s)")
        return result

    async def _analyze_structure(self, context: ChangeContext) -> str:
        paths = await self.source.fetch_tree('', context.base_ref)
        logger.info(f"Fetched repository tree: {len(paths)} files")
        prompt = self.prompt_builder.build_structure_prompt(paths)
        return await self.model.invoke(prompt)

    async def _perform_review(self, context: ChangeContext, repository_info: str) -> str:
        review_focus = format_review_focus(compose_review_focus(self.review_config))
        prompt = self.prompt_builder.build_review_prompt(context, repository_info, review_focus)
        return await self.model.invoke(prompt)

    async def _generate_summary(self, context: ChangeContext, detailed_review: str) -> str:
        prompt = self.prompt_builder.build_summary_prompt(context, detailed_review, self.model_name)
        return await self.model.invoke(prompt)

    async def _publish(self, comments: List[ExtractedComment], summary: str) -> None:
        if comments:
            await self.source.post_line_comments(comments)
            logger.info(f"Posted {len(comments)} review comments")
        else:
            logger.info("No line comments to post")

        await self.source.post_summary_comment(summary)
        logger.info("Posted summary comment")
