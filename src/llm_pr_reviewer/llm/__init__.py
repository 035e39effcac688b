"""
LLM Layer

This module provides prompt templates, template rendering and the
language model client used by the review pipeline.
"""

from .prompts import PromptBuilder, render_template
from .client import ModelClient, AnthropicModelClient

__all__ = ['PromptBuilder', 'render_template', 'ModelClient', 'AnthropicModelClient']
