"""
Error Types

리뷰 파이프라인 예외 계층
"""

from datetime import datetime
from typing import Dict, Optional


class ReviewerError(Exception):
    """리뷰어 기본 예외"""


class ConfigError(ReviewerError):
    """필수 설정 누락 또는 잘못된 설정"""


class TransportError(ReviewerError):
    """GitHub / 모델 API 통신 실패"""


class GitHubAPIError(TransportError):
    """GitHub API related errors"""
    def __init__(self, message: str, status_code: Optional[int] = None, response_data: Optional[Dict] = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class RateLimitExceeded(GitHubAPIError):
    """GitHub API rate limit exceeded"""
    def __init__(self, reset_time: datetime):
        super().__init__(f"Rate limit exceeded. Resets at {reset_time}", status_code=429)
        self.reset_time = reset_time


class ModelError(TransportError):
    """Language model invocation failed"""
