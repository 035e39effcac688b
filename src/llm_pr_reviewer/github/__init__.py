"""
GitHub Integration Layer

This module provides GitHub API integration for pull request retrieval,
repository tree listing and review comment posting.
"""

from .client import GitHubClient
from .parser import PRDiffParser
from .source import ChangeSource, GitHubChangeSource

__all__ = ['GitHubClient', 'PRDiffParser', 'ChangeSource', 'GitHubChangeSource']
