"""Completion service client (OpenAI chat completions / Anthropic messages)."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import httpx

from config import Settings, settings as default_settings
from sna.errors import CompletionFailed
from sna.utils.timeout_config import get_external_client

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "AI service temporarily unavailable"


class CompletionClient:
    """Sends ``(instructions, user_text)`` to a language model and returns its text."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client_factory: Optional[Callable[[], httpx.AsyncClient]] = None,
    ):
        self.settings = settings or default_settings
        self._client_factory = client_factory or (lambda: get_external_client(self.settings))

    def select_provider(self, requested: Optional[str] = None) -> str:
        """Anthropic is used only when asked for and configured; OpenAI otherwise."""
        provider = (requested or self.settings.default_provider or "openai").lower()
        if provider == "anthropic" and self.settings.anthropic_api_key:
            return "anthropic"
        return "openai"

    async def complete(self, instructions: str, user_text: str, provider: Optional[str] = None) -> str:
        """Run one completion. Raises ``CompletionFailed``; never retries."""
        selected = self.select_provider(provider)
        if selected == "anthropic":
            url, headers, body = self._anthropic_request(instructions, user_text)
        else:
            url, headers, body = self._openai_request(instructions, user_text)

        try:
            async with self._client_factory() as client:
                response = await client.post(url, headers=headers, json=body)
        except httpx.TimeoutException as exc:
            logger.error(f"{selected} request timed out")
            raise CompletionFailed(UNAVAILABLE_MESSAGE) from exc
        except httpx.HTTPError as exc:
            logger.error(f"{selected} request failed: {exc}")
            raise CompletionFailed(UNAVAILABLE_MESSAGE) from exc

        if response.status_code >= 400:
            logger.error(f"{selected} API error {response.status_code}: {response.text[:500]}")
            raise CompletionFailed(UNAVAILABLE_MESSAGE)

        try:
            data = response.json()
        except ValueError as exc:
            logger.error(f"{selected} returned invalid JSON")
            raise CompletionFailed(UNAVAILABLE_MESSAGE) from exc

        text = self._extract_anthropic_text(data) if selected == "anthropic" else self._extract_openai_text(data)
        return text.strip()

    def _openai_request(self, instructions: str, user_text: str):
        if not self.settings.openai_api_key:
            logger.error("OPENAI_API_KEY is not configured")
            raise CompletionFailed(UNAVAILABLE_MESSAGE)
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.settings.openai_api_key}",
        }
        body: Dict[str, Any] = {
            "model": self.settings.openai_model,
            "messages": [
                {"role": "system", "content": instructions},
                {"role": "user", "content": user_text},
            ],
            "temperature": self.settings.completion_temperature,
            "max_tokens": self.settings.completion_max_tokens,
        }
        return self.settings.openai_url, headers, body

    def _anthropic_request(self, instructions: str, user_text: str):
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.settings.anthropic_api_key or "",
            "anthropic-version": self.settings.anthropic_version,
        }
        body: Dict[str, Any] = {
            "model": self.settings.anthropic_model,
            "max_tokens": self.settings.completion_max_tokens,
            "system": instructions,
            "messages": [{"role": "user", "content": user_text}],
            "temperature": self.settings.completion_temperature,
        }
        return self.settings.anthropic_url, headers, body

    @staticmethod
    def _extract_openai_text(data: Any) -> str:
        try:
            return data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError):
            return ""

    @staticmethod
    def _extract_anthropic_text(data: Any) -> str:
        try:
            return data["content"][0]["text"] or ""
        except (KeyError, IndexError, TypeError):
            return ""
