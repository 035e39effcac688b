"""
LLM PR Reviewer

GitHub Pull Request 자동 코드 리뷰 시스템
"""

__version__ = "1.0.0"

from .pipeline import ReviewPipeline

__all__ = ["ReviewPipeline"]
