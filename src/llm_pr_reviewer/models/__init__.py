"""
Data Models

LLM PR Reviewer 시스템의 핵심 데이터 모델들
"""

from .pr_diff import ChangedFile, ChangeContext, DiffPositionIndex
from .review import (
    ReviewFocus,
    ExtractedComment,
    GitHubComment,
    ReviewResult,
    ReviewOptionsModel,
    ReviewRequestModel,
)

__all__ = [
    "ChangedFile",
    "ChangeContext",
    "DiffPositionIndex",
    "ReviewFocus",
    "ExtractedComment",
    "GitHubComment",
    "ReviewResult",
    "ReviewOptionsModel",
    "ReviewRequestModel",
]
