"""
Model Client

Single-shot, stateless access to the hosted language model.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

import anthropic

from ..config import LLMConfig
from ..exceptions import ModelError


logger = logging.getLogger(__name__)


class ModelClient(Protocol):
    """Anything that turns one rendered prompt into one text reply."""

    async def invoke(self, prompt: str) -> str:
        ...


class AnthropicModelClient:
    """
    Language model client backed by the Anthropic Messages API.

    Retries and timeouts are delegated to the SDK; every SDK failure
    surfaces as ModelError.
    """

    def __init__(self, config: LLMConfig, client: Optional[Any] = None):
        """
        Initialize model client.

        Args:
            config: Model name, sampling and transport settings
            client: Optional pre-built AsyncAnthropic client (used in tests)
        """
        self.config = config
        self.client = client or anthropic.AsyncAnthropic(
            api_key=config.api_key,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
        )

    @property
    def model_name(self) -> str:
        return self.config.model

    async def invoke(self, prompt: str) -> str:
        """
        Send a single user prompt and return the reply text.

        Args:
            prompt: Fully rendered prompt

        Returns:
            Model reply text

        Raises:
            ModelError: On API failures or an empty reply
        """
        return await self._create([{"role": "user", "content": prompt}])

    async def invoke_with_system(self, system_prompt: str, prompt: str) -> str:
        """
        Send a user prompt together with a system prompt.

        Args:
            system_prompt: System instructions
            prompt: Fully rendered user prompt

        Returns:
            Model reply text
        """
        return await self._create([{"role": "user", "content": prompt}], system=system_prompt)

    async def _create(self, messages: List[Dict[str, str]], system: Optional[str] = None) -> str:
        kwargs: Dict[str, Any] = {
            "model": self.config.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "messages": messages,
        }
        if system:
            kwargs["system"] = system

        logger.debug(f"Model request model={self.config.model} chars={sum(len(m['content']) for m in messages)}")

        try:
            response = await self.client.messages.create(**kwargs)
        except anthropic.APIError as e:
            logger.error(f"Model request failed: {e}")
            raise ModelError(f"Model request failed: {e}") from e

        text = self._text(response)
        if not text:
            raise ModelError("Model response did not contain text output")
        return text

    def _text(self, response: Any) -> str:
        parts = [getattr(block, "text", "") or "" for block in getattr(response, "content", None) or []]
        return "".join(parts).strip()
