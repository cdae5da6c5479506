"""Completion client — OpenAI-compatible chat completions over requests."""
from __future__ import annotations
import logging, os, time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import requests

from core.errors import CompletionError

logger = logging.getLogger(__name__)

# ── Providers ─────────────────────────────────────────────────────────────────
_BASE_URLS = {
    'openai': "https://api.openai.com/v1",
    'groq':   "https://api.groq.com/openai/v1",
}
_DEFAULT_MODELS = {
    'openai': "gpt-3.5-turbo-16k",
    'groq':   "llama-3.1-8b-instant",
}


# ── Settings ──────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class LLMSettings:
    """Explicit client configuration. Build it with from_env(); never hard-code a key."""
    provider: str = "openai"
    api_key: str = ""
    model: str = _DEFAULT_MODELS['openai']
    base_url: str = _BASE_URLS['openai']
    timeout: int = 60

    @classmethod
    def from_env(cls) -> "LLMSettings":
        _env = os.getenv
        provider = _env("LLM_PROVIDER", "openai").lower()
        if provider not in _BASE_URLS:
            logger.warning(f"Unknown LLM provider '{provider}', falling back to openai")
            provider = "openai"
        prefix = provider.upper()
        return cls(
            provider=provider,
            api_key=_env(f"{prefix}_API_KEY", ""),
            model=_env(f"{prefix}_MODEL", _DEFAULT_MODELS[provider]),
            base_url=_env(f"{prefix}_BASE_URL", _BASE_URLS[provider]).rstrip("/"),
            timeout=int(_env("LLM_TIMEOUT", "60")),
        )


# ── Clients ───────────────────────────────────────────────────────────────────
class CompletionClient(ABC):
    @abstractmethod
    def complete(self, system: str, prompt: str, temperature: Optional[float] = None,
                 max_tokens: Optional[int] = None) -> str:
        """Send a system + user conversation and return the first choice's text.

        Raises CompletionError when no content comes back.
        """

    @property
    @abstractmethod
    def model_name(self) -> str: ...


class ChatCompletionClient(CompletionClient):
    __slots__ = ('_key', '_model', '_url', '_timeout')

    def __init__(self, settings: LLMSettings):
        self._key, self._model = settings.api_key, settings.model
        self._url = f"{settings.base_url}/chat/completions"
        self._timeout = settings.timeout

    @property
    def model_name(self) -> str: return self._model

    def complete(self, system: str, prompt: str, temperature: Optional[float] = None,
                 max_tokens: Optional[int] = None) -> str:
        body: dict = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
        }
        # Omitted fields fall back to the service defaults.
        if temperature is not None: body["temperature"] = temperature
        if max_tokens is not None: body["max_tokens"] = max_tokens

        t0 = time.time()
        try:
            r = requests.post(self._url, headers={"Authorization": f"Bearer {self._key}",
                                                  "Content-Type": "application/json"},
                              json=body, timeout=(5, self._timeout))
        except requests.exceptions.Timeout as e:
            raise CompletionError(f"Completion request timed out after {self._timeout}s") from e
        except requests.exceptions.RequestException as e:
            raise CompletionError(f"Completion request failed: {e}") from e

        if not 200 <= r.status_code < 300:
            raise CompletionError(f"Completion service status {r.status_code}: {r.text[:200]}")
        try:
            content = r.json()['choices'][0]['message']['content']
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise CompletionError(f"Unexpected completion payload: {r.text[:200]}") from e
        if not isinstance(content, str):
            raise CompletionError(f"Unsupported completion content type: {type(content).__name__}")
        if not content:
            raise CompletionError("Empty response from completion service")

        logger.debug(f"{self._model} responded in {time.time() - t0:.2f}s")
        return content


def create_client(settings: Optional[LLMSettings] = None) -> CompletionClient:
    settings = settings or LLMSettings.from_env()
    if not settings.api_key:
        logger.warning(f"No API key configured for provider '{settings.provider}' — requests will fail")
    return ChatCompletionClient(settings)
