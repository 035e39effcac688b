"""
Change Request Data Models

Pull Request 변경사항 관련 데이터 모델들
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


VALID_STATUSES = {'added', 'modified', 'removed', 'renamed'}


@dataclass(frozen=True)
class ChangedFile:
    """변경된 파일"""
    path: str
    status: str  # 'added', 'modified', 'removed', 'renamed'
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: Optional[str] = None
    previous_path: Optional[str] = None

    def __post_init__(self):
        """데이터 검증"""
        if not self.path:
            raise ValueError("File path cannot be empty")
        if self.status not in VALID_STATUSES:
            raise ValueError(f"Invalid status: {self.status}")
        if self.additions < 0 or self.deletions < 0 or self.changes < 0:
            raise ValueError("Change counts must be non-negative")

    @property
    def has_patch(self) -> bool:
        """patch 텍스트 존재 여부"""
        return bool(self.patch)


@dataclass(frozen=True)
class ChangeContext:
    """한 번의 리뷰 실행에 대한 Pull Request 스냅샷"""
    repository: str
    number: int
    title: str
    description: str
    author: str
    head_ref: str
    base_ref: str
    files: Tuple[ChangedFile, ...] = ()

    def __post_init__(self):
        """데이터 검증"""
        if self.number <= 0:
            raise ValueError("PR number must be positive")
        if '/' not in self.repository:
            raise ValueError("Repository must be in format 'owner/repo'")
        # list로 전달되어도 불변으로 보관
        object.__setattr__(self, 'files', tuple(self.files))

    @property
    def file_paths(self) -> List[str]:
        """변경 파일 경로 목록"""
        return [f.path for f in self.files]

    @property
    def total_additions(self) -> int:
        return sum(f.additions for f in self.files)

    @property
    def total_deletions(self) -> int:
        return sum(f.deletions for f in self.files)

    def get_file(self, path: str) -> Optional[ChangedFile]:
        """경로로 변경 파일 조회"""
        for changed_file in self.files:
            if changed_file.path == path:
                return changed_file
        return None


@dataclass
class DiffPositionIndex:
    """
    patch 내 위치 인덱스.

    파일의 절대 라인 번호를 GitHub 리뷰 API가 사용하는 diff position으로 매핑
    """
    new_positions: Dict[int, int] = field(default_factory=dict)
    old_positions: Dict[int, int] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not self.new_positions and not self.old_positions

    def position_for(self, line: int, side: str = 'RIGHT') -> Optional[int]:
        """라인 번호에 대한 position 반환 (매핑 불가 시 None)"""
        if side == 'LEFT':
            return self.old_positions.get(line)
        return self.new_positions.get(line)
