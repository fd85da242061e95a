"""Base agent: one chat interface over the supported LLM providers."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional

from ..config import API_KEY_VARS, GROQ_BASE_URL, load_environment, require_env


class BaseAgent(ABC):
    """
    Abstract base for agents backed by a chat model.

    Subclasses choose a default provider and model and implement run().
    Every provider is reached through _call_llm, which takes OpenAI-style
    role/content messages and returns plain text.
    """

    agent_name: str = "base"
    default_provider: str = "openai"
    default_model: str = "gpt-4o"

    def __init__(
        self,
        provider: Optional[str] = None,
        model: Optional[str] = None,
        env_path: Optional[Path] = None,
        temperature: float = 0.7,
        api_key: Optional[str] = None,
        client: Any = None,
    ):
        """
        Args:
            provider: openai, groq, anthropic or google.
            model: Model identifier.
            env_path: Environment file holding API keys.
            temperature: Sampling temperature (ignored by Gemini).
            api_key: Key to use instead of the environment's.
            client: Ready-made provider client; no key is needed then.
        """
        self.provider = provider or self.default_provider
        self.model = model or self.default_model
        self.temperature = temperature

        if self.provider not in API_KEY_VARS:
            raise ValueError(f"Unknown provider: {self.provider}")

        load_environment(env_path)
        self._client = client if client is not None else self._create_client(api_key)

    def _create_client(self, api_key: Optional[str]) -> Any:
        """Build the SDK client; provider SDKs other than openai load lazily."""
        key = require_env(API_KEY_VARS[self.provider], api_key)

        if self.provider in ("openai", "groq"):
            from openai import OpenAI
            base_url = GROQ_BASE_URL if self.provider == "groq" else None
            return OpenAI(api_key=key, base_url=base_url)

        if self.provider == "anthropic":
            from anthropic import Anthropic
            return Anthropic(api_key=key)

        import google.generativeai as genai
        genai.configure(api_key=key)
        return genai.GenerativeModel(self.model)

    def _call_llm(
        self,
        messages: list[dict],
        max_tokens: int = 4096,
        response_format: Optional[dict] = None,
    ) -> str:
        """
        Send a chat to the configured provider.

        Args:
            messages: Dicts with 'role' (system, user, assistant) and 'content'.
            max_tokens: Response length limit.
            response_format: OpenAI-style response format; other providers ignore it.

        Returns:
            Response text ("" when the provider sent none).
        """
        if self.provider in ("openai", "groq"):
            return self._chat_openai(messages, max_tokens, response_format)
        if self.provider == "anthropic":
            return self._chat_anthropic(messages, max_tokens)
        return self._chat_gemini(messages)

    def _chat_openai(self, messages: list[dict], max_tokens: int, response_format: Optional[dict]) -> str:
        request = dict(
            model=self.model,
            messages=messages,
            max_tokens=max_tokens,
            temperature=self.temperature,
        )
        if response_format:
            request["response_format"] = response_format

        completion = self._client.chat.completions.create(**request)
        return completion.choices[0].message.content or ""

    def _chat_anthropic(self, messages: list[dict], max_tokens: int) -> str:
        # System instructions travel outside the message list
        system = "\n\n".join(m["content"] for m in messages if m["role"] == "system")
        request = dict(
            model=self.model,
            max_tokens=max_tokens,
            temperature=self.temperature,
            messages=[
                {"role": m["role"], "content": m["content"]}
                for m in messages if m["role"] != "system"
            ],
        )
        if system:
            request["system"] = system

        reply = self._client.messages.create(**request)
        return "".join(part.text for part in reply.content if getattr(part, "type", "") == "text")

    def _chat_gemini(self, messages: list[dict]) -> str:
        labels = {"system": "Instructions", "user": "User", "assistant": "Assistant"}
        transcript = "\n\n".join(
            f"{labels.get(m['role'], m['role'])}: {m['content']}" for m in messages
        )
        return self._client.generate_content(transcript).text or ""

    @abstractmethod
    def run(self, *args, **kwargs) -> Any:
        """Execute the agent's task."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(provider={self.provider}, model={self.model})"
