"""
Text-generation capability.

The orchestrator depends only on the TextGenerator protocol: a blocking
call that takes a prompt and returns freeform text. OpenAIGenerator is the
bundled implementation backed by the OpenAI chat completions API.
"""

import logging
from typing import Optional, Protocol

from chunking.token_estimator import count_tokens
from shared.config import settings
from shared.errors import TransportError

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    def generate(self, prompt: str, temperature: Optional[float] = None, max_tokens: Optional[int] = None) -> str:
        ...


class OpenAIGenerator:
    """
    OpenAI-backed text generator.

    Usage:
        generator = OpenAIGenerator(model="gpt-4o-mini")
        text = generator.generate(prompt, temperature=0.7, max_tokens=2000)
    """

    def __init__(
        self,
        api_key: str = None,
        model: str = None,
        temperature: float = None,
        max_tokens: int = None,
        timeout: int = None,
        system_prompt: str = None,
    ):
        self.api_key = api_key or settings.OPENAI_API_KEY
        self.model = model or settings.llm.model
        self.temperature = (
            temperature if temperature is not None else settings.llm.temperature
        )
        self.max_tokens = max_tokens or settings.llm.max_tokens
        self.timeout = timeout or settings.llm.timeout
        self.system_prompt = system_prompt
        self._client = None

    @property
    def client(self):
        """Lazy load OpenAI client."""
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(api_key=self.api_key, timeout=self.timeout)
        return self._client

    def is_configured(self) -> bool:
        """True when an API key is available."""
        return bool(self.api_key)

    def generate(
        self,
        prompt: str,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Generate text for a prompt.

        Args:
            prompt: Complete prompt
            temperature: Override temperature
            max_tokens: Override max completion tokens

        Returns:
            Response text (may be empty)

        Raises:
            TransportError: If the provider call fails
        """
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": prompt})

        logger.debug(f"Calling {self.model} with a {count_tokens(prompt)}-token prompt")

        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature if temperature is not None else self.temperature,
                max_tokens=max_tokens or self.max_tokens,
            )
        except Exception as e:
            logger.error(f"LLM generation failed: {e}")
            raise TransportError(f"{type(e).__name__}: {e}") from e

        content = response.choices[0].message.content
        return content or ""
