"""
Review Data Models

코드 리뷰 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, Field, field_validator


# 리뷰 관점 체크리스트 (순서가 프롬프트 내용이 됨)
ReviewFocus = Tuple[str, ...]


@dataclass(frozen=True)
class ExtractedComment:
    """모델 응답에서 추출한 라인 코멘트"""
    path: str
    line: int
    position: int
    body: str

    def to_github_comment(self) -> "GitHubComment":
        """GitHub 리뷰 코멘트 형식으로 변환"""
        return GitHubComment(
            path=self.path,
            position=self.position,
            body=self.body,
            line=self.line,
        )


@dataclass
class GitHubComment:
    """GitHub PR 리뷰 코멘트 형식"""
    path: str
    position: int
    body: str
    line: Optional[int] = None
    side: str = 'RIGHT'  # 'RIGHT' for new code, 'LEFT' for old code

    def __post_init__(self):
        """데이터 검증"""
        valid_sides = {'RIGHT', 'LEFT'}
        if self.side not in valid_sides:
            raise ValueError(f"Invalid side: {self.side}")

        if self.position <= 0:
            raise ValueError("Position must be positive")

        if not self.body.strip():
            raise ValueError("Comment body cannot be empty")

    def to_payload(self) -> Dict[str, Any]:
        """리뷰 API 요청 payload"""
        # position 기반 코멘트는 line/side와 함께 보내지 않음
        return {
            'path': self.path,
            'position': self.position,
            'body': self.body,
        }


@dataclass
class ReviewResult:
    """전체 리뷰 결과"""
    repository: str
    pr_number: int
    summary: str
    comments: List[ExtractedComment] = field(default_factory=list)
    overall_assessment: str = ""
    suggested_improvements: List[str] = field(default_factory=list)
    processing_time: float = 0.0
    created_at: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        """데이터 검증"""
        if self.pr_number <= 0:
            raise ValueError("PR number must be positive")

        if self.processing_time < 0:
            raise ValueError("Processing time must be non-negative")

    @property
    def files_with_comments(self) -> List[str]:
        """코멘트가 달린 파일 목록 (등장 순서)"""
        seen: List[str] = []
        for comment in self.comments:
            if comment.path not in seen:
                seen.append(comment.path)
        return seen

    def to_dict(self) -> Dict[str, Any]:
        """결과를 딕셔너리로 변환"""
        return {
            'repository': self.repository,
            'pr_number': self.pr_number,
            'summary': self.summary,
            'comments': [
                {'path': c.path, 'line': c.line, 'position': c.position, 'body': c.body}
                for c in self.comments
            ],
            'overall_assessment': self.overall_assessment,
            'suggested_improvements': list(self.suggested_improvements),
            'processing_time': self.processing_time,
            'created_at': self.created_at.isoformat(),
        }


# Pydantic models for API validation
class ReviewOptionsModel(BaseModel):
    """API 요청용 리뷰 옵션"""
    depth: Optional[str] = None
    include_positive_feedback: Optional[bool] = None
    code_quality: Optional[bool] = None
    best_practices: Optional[bool] = None
    security: Optional[bool] = None
    performance: Optional[bool] = None
    focus_areas: Optional[List[str]] = None
    language: Optional[str] = None

    @field_validator('depth')
    @classmethod
    def validate_depth(cls, v):
        if v is not None and v not in {'basic', 'detailed', 'comprehensive'}:
            raise ValueError('Invalid review depth')
        return v

    @field_validator('language')
    @classmethod
    def validate_language(cls, v):
        if v is not None and v not in {'japanese', 'english'}:
            raise ValueError('Invalid review language')
        return v

    @field_validator('focus_areas')
    @classmethod
    def validate_focus_areas(cls, v):
        if v is None:
            return v
        return [area.strip() for area in v if area.strip()]


class ReviewRequestModel(BaseModel):
    """API 요청용 리뷰 생성 요청"""
    repository: str
    pr_number: int
    github_token: Optional[str] = None
    options: ReviewOptionsModel = Field(default_factory=ReviewOptionsModel)

    @field_validator('repository')
    @classmethod
    def validate_repository(cls, v):
        owner, _, repo = v.partition('/')
        if not owner or not repo or '/' in repo:
            raise ValueError('Repository must be in format "owner/repo"')
        return v

    @field_validator('pr_number')
    @classmethod
    def validate_pr_number(cls, v):
        if v <= 0:
            raise ValueError('PR number must be positive')
        return v
