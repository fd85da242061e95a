"""Evaluator agent - sends a synthesized prompt to the AI and returns its raw answer."""

from typing import Optional

from ..errors import AIServiceUnavailable
from .base import BaseAgent


class ScenarioEvaluator(BaseAgent):
    """
    Performs the single AI evaluation call for a submission.

    The answer is returned untouched; extracting structure from it is the
    normalizer's job. Failed calls are not retried.
    """

    agent_name = "evaluator"
    default_provider = "anthropic"
    default_model = "claude-haiku-4-5-20251001"

    def __init__(self, *args, json_mode: bool = False, max_tokens: int = 4096, **kwargs):
        """
        Args:
            json_mode: Ask OpenAI-compatible providers for a JSON object response.
            max_tokens: Maximum tokens in the response.
        """
        self.json_mode = json_mode
        self.max_tokens = max_tokens
        super().__init__(*args, **kwargs)

    def run(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """
        Evaluate a prompt.

        Args:
            prompt: Fully rendered evaluation request.
            system_prompt: Optional system instructions.

        Returns:
            Raw response text.

        Raises:
            AIServiceUnavailable: The provider call failed or returned nothing.
        """
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})

        response_format = None
        if self.json_mode and self.provider in ("openai", "groq"):
            response_format = {"type": "json_object"}

        try:
            text = self._call_llm(
                messages=messages,
                max_tokens=self.max_tokens,
                response_format=response_format,
            )
        except Exception as e:
            raise AIServiceUnavailable(f"{self.provider} call failed: {e}") from e

        if not text or not text.strip():
            raise AIServiceUnavailable(f"{self.provider} returned an empty response")
        return text
