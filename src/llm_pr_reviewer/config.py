"""
Configuration Management

시스템 설정 관리
"""

import os
import yaml
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Mapping
from pathlib import Path
import logging

from .exceptions import ConfigError


VALID_DEPTHS = {'basic', 'detailed', 'comprehensive'}
VALID_LANGUAGES = {'japanese', 'english'}
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class GitHubConfig:
    """GitHub API 설정"""
    token: Optional[str] = None
    owner: str = ""
    repo: str = ""
    pr_number: int = 0
    api_base_url: str = "https://api.github.com"
    timeout_seconds: int = 30

    @property
    def repository(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass
class LLMConfig:
    """언어 모델 API 설정"""
    api_key: Optional[str] = None
    model: str = "claude-3-7-sonnet-latest"
    temperature: float = 0.7
    max_tokens: int = 4000
    timeout_seconds: float = 120.0
    max_retries: int = 2


@dataclass
class ReviewConfig:
    """리뷰 관점 설정"""
    depth: str = "detailed"
    include_positive_feedback: bool = False
    code_quality: bool = False
    best_practices: bool = False
    security: bool = False
    performance: bool = False
    focus_areas: List[str] = field(default_factory=list)
    language: str = "japanese"


@dataclass
class LoggingConfig:
    """로깅 설정"""
    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file_path: Optional[str] = None
    max_file_size: int = 10 * 1024 * 1024  # 10MB
    backup_count: int = 5


def _env_bool(env: Mapping[str, str], name: str, default: bool = False) -> bool:
    value = env.get(name)
    if value is None:
        return default
    return value.strip().lower() == "true"


def _env_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


def split_focus_areas(raw: Optional[str]) -> List[str]:
    """쉼표로 구분된 focus area 목록 파싱"""
    if not raw:
        return []
    return [area.strip() for area in raw.split(',') if area.strip()]


@dataclass
class AppConfig:
    """전체 애플리케이션 설정"""
    github: GitHubConfig
    llm: LLMConfig
    review: ReviewConfig
    logging: LoggingConfig
    debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        """환경 변수에서 설정 로드"""
        env = os.environ if environ is None else environ
        # 빈 문자열로 설정된 변수는 미설정으로 취급

        # GITHUB_REPOSITORY 는 'owner/repo' 형식
        repository = env.get("GITHUB_REPOSITORY", "")
        owner, _, repo = repository.partition('/')
        owner = owner or env.get("GITHUB_REPOSITORY_OWNER", "")

        return cls(
            github=GitHubConfig(
                token=env.get("GITHUB_TOKEN"),
                owner=owner,
                repo=repo,
                pr_number=_env_number(env, "PULL_REQUEST_NUMBER", 0, int),
                api_base_url=env.get("GITHUB_API_URL") or "https://api.github.com",
                timeout_seconds=_env_number(env, "GITHUB_TIMEOUT", 30, int),
            ),
            llm=LLMConfig(
                api_key=env.get("ANTHROPIC_API_KEY"),
                model=env.get("LLM_MODEL") or "claude-3-7-sonnet-latest",
                temperature=_env_number(env, "LLM_TEMPERATURE", 0.7, float),
                max_tokens=_env_number(env, "LLM_MAX_TOKENS", 4000, int),
                timeout_seconds=_env_number(env, "LLM_TIMEOUT", 120.0, float),
                max_retries=_env_number(env, "LLM_MAX_RETRIES", 2, int),
            ),
            review=ReviewConfig(
                depth=env.get("REVIEW_DEPTH") or "detailed",
                include_positive_feedback=_env_bool(env, "INCLUDE_POSITIVE_FEEDBACK"),
                code_quality=_env_bool(env, "REVIEW_CODE_QUALITY"),
                best_practices=_env_bool(env, "REVIEW_BEST_PRACTICES"),
                security=_env_bool(env, "REVIEW_SECURITY"),
                performance=_env_bool(env, "REVIEW_PERFORMANCE"),
                focus_areas=split_focus_areas(env.get("REVIEW_FOCUS_AREAS")),
                language=env.get("REVIEW_LANGUAGE") or "japanese",
            ),
            logging=LoggingConfig(
                level=env.get("LOG_LEVEL") or "INFO",
                format=env.get("LOG_FORMAT") or DEFAULT_LOG_FORMAT,
                file_path=env.get("LOG_FILE") or None,
                max_file_size=_env_number(env, "LOG_MAX_SIZE", 10 * 1024 * 1024, int),
                backup_count=_env_number(env, "LOG_BACKUP_COUNT", 5, int),
            ),
            debug=_env_bool(env, "DEBUG"),
        )

    @classmethod
    def from_yaml(cls, config_path: str) -> "AppConfig":
        """YAML 파일에서 설정 로드"""
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        with open(config_file, 'r', encoding='utf-8') as f:
            config_data = yaml.safe_load(f) or {}

        try:
            return cls(
                github=GitHubConfig(**config_data.get('github', {})),
                llm=LLMConfig(**config_data.get('llm', {})),
                review=ReviewConfig(**config_data.get('review', {})),
                logging=LoggingConfig(**config_data.get('logging', {})),
                debug=config_data.get('debug', False),
            )
        except TypeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}")

    def validate(self) -> None:
        """설정 유효성 검사"""
        errors = []

        # GitHub 필수 값 확인
        if not self.github.token:
            errors.append("GITHUB_TOKEN is required")

        if not self.github.owner or not self.github.repo:
            errors.append("GITHUB_REPOSITORY is required")

        if self.github.pr_number <= 0:
            errors.append("PULL_REQUEST_NUMBER is required")

        # 모델 API 키 확인
        if not self.llm.api_key:
            errors.append("ANTHROPIC_API_KEY is required")

        if not 0.0 <= self.llm.temperature <= 1.0:
            errors.append("Temperature must be between 0.0 and 1.0")

        if self.llm.max_tokens <= 0:
            errors.append("Max tokens must be positive")

        # 리뷰 설정 검증
        if self.review.depth not in VALID_DEPTHS:
            errors.append(f"Invalid review depth: {self.review.depth}")

        if self.review.language not in VALID_LANGUAGES:
            errors.append(f"Invalid review language: {self.review.language}")

        # 로그 레벨 검증
        valid_log_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if self.logging.level.upper() not in valid_log_levels:
            errors.append(f"Invalid log level: {self.logging.level}")

        if errors:
            raise ConfigError(f"Configuration validation failed: {'; '.join(errors)}")

    def to_dict(self) -> Dict[str, Any]:
        """설정을 딕셔너리로 변환"""
        return {
            'github': {
                'owner': self.github.owner,
                'repo': self.github.repo,
                'pr_number': self.github.pr_number,
                'api_base_url': self.github.api_base_url,
                'timeout_seconds': self.github.timeout_seconds,
                # 보안상 토큰은 제외
            },
            'llm': {
                'model': self.llm.model,
                'temperature': self.llm.temperature,
                'max_tokens': self.llm.max_tokens,
                'timeout_seconds': self.llm.timeout_seconds,
                'max_retries': self.llm.max_retries,
                # API 키도 제외
            },
            'review': {
                'depth': self.review.depth,
                'include_positive_feedback': self.review.include_positive_feedback,
                'code_quality': self.review.code_quality,
                'best_practices': self.review.best_practices,
                'security': self.review.security,
                'performance': self.review.performance,
                'focus_areas': list(self.review.focus_areas),
                'language': self.review.language,
            },
            'logging': {
                'level': self.logging.level,
                'format': self.logging.format,
                'file_path': self.logging.file_path,
                'max_file_size': self.logging.max_file_size,
                'backup_count': self.logging.backup_count,
            },
            'debug': self.debug,
        }


def setup_logging(config: LoggingConfig) -> None:
    """로깅 설정"""
    logging.basicConfig(
        level=getattr(logging, config.level.upper()),
        format=config.format,
    )

    # 파일 로깅이 설정된 경우 로테이션 설정
    if config.file_path:
        from logging.handlers import RotatingFileHandler

        handler = RotatingFileHandler(
            config.file_path,
            maxBytes=config.max_file_size,
            backupCount=config.backup_count,
        )
        handler.setFormatter(logging.Formatter(config.format))

        # 루트 로거에 핸들러 추가
        root_logger = logging.getLogger()
        root_logger.addHandler(handler)
