"""
Review Synthesis

This module provides review focus composition, diff position mapping
and comment extraction from model output.
"""

from .focus import compose_review_focus, format_review_focus
from .positions import DiffPositionMapper
from .extractor import CommentExtractor, extract_comments

__all__ = [
    'compose_review_focus',
    'format_review_focus',
    'DiffPositionMapper',
    'CommentExtractor',
    'extract_comments',
]
