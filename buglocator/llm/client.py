"""
LLM Client
==========
Asynchronous text-completion client for the reasoning step.

The engine only needs a single request/response boundary:

    complete(user_prompt, system_prompt) -> completion text

Providers:
    - "openai": any OpenAI-compatible /chat/completions endpoint
    - "gemini": Google Gemini REST generateContent

Failure Policy:
    - Every call is bounded by LLM_TIMEOUT_SECONDS (default 60s).
    - HTTP errors, timeouts and empty responses raise ReasoningError.
    - No built-in retry; callers may wrap one.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from buglocator.core.config import (
    LLM_API_KEY,
    LLM_BASE_URL,
    LLM_MODEL,
    LLM_PROVIDER,
    LLM_TIMEOUT_SECONDS,
)
from buglocator.core.errors import ReasoningError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Provider Configuration
# ---------------------------------------------------------------------------
@dataclass
class ProviderConfig:
    """Configuration for the reasoning provider."""
    name: str = LLM_PROVIDER
    api_key: str = LLM_API_KEY
    base_url: str = LLM_BASE_URL
    model: str = LLM_MODEL
    timeout_seconds: float = LLM_TIMEOUT_SECONDS
    temperature: float = 0.2
    max_tokens: int = 4000


class ReasoningClient(Protocol):
    """Capability boundary for the reasoning collaborator."""

    async def complete(self, user_prompt: str, system_prompt: str = "") -> str:
        ...


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding ```json ... ``` fence if present."""
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        first_newline = cleaned.find("\n")
        if first_newline != -1:
            cleaned = cleaned[first_newline + 1:]
        if cleaned.rstrip().endswith("```"):
            cleaned = cleaned.rstrip()[:-3].rstrip()
    return cleaned


# ---------------------------------------------------------------------------
# LLM Client
# ---------------------------------------------------------------------------
class LLMClient:
    """
    Async HTTP client for the configured provider.

    Usage:
        client = LLMClient()
        text = await client.complete("Analyse this bug...", "You are...")
        await client.close()
    """

    def __init__(self, provider: Optional[ProviderConfig] = None) -> None:
        self.provider = provider or ProviderConfig()
        self._http: Optional[httpx.AsyncClient] = None

    async def _get_http(self) -> httpx.AsyncClient:
        """Lazy-initialise the HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(timeout=httpx.Timeout(self.provider.timeout_seconds))
        return self._http

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http and not self._http.is_closed:
            await self._http.aclose()
            self._http = None

    async def complete(self, user_prompt: str, system_prompt: str = "") -> str:
        """
        Send one prompt and return the completion text.

        Raises
        ------
        ReasoningError
            On timeout, HTTP error, transport error or empty completion.
        """
        provider = self.provider
        logger.debug("Sending reasoning request to %s (%d chars)", provider.name, len(user_prompt))
        try:
            if provider.name == "gemini":
                text = await self._call_gemini(user_prompt, system_prompt)
            else:
                text = await self._call_openai_compatible(user_prompt, system_prompt)
        except httpx.TimeoutException as e:
            raise ReasoningError(
                f"{provider.name} request timed out after {provider.timeout_seconds:.0f}s"
            ) from e
        except httpx.HTTPStatusError as e:
            raise ReasoningError(
                f"{provider.name} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise ReasoningError(f"{provider.name} request failed: {e}") from e

        if not text or not text.strip():
            raise ReasoningError(f"{provider.name} returned an empty completion")
        return text

    async def _call_gemini(self, user_prompt: str, system_prompt: str) -> str:
        """Call Gemini REST API."""
        http = await self._get_http()
        provider = self.provider
        url = (
            f"{provider.base_url}/models/{provider.model}:generateContent"
            f"?key={provider.api_key}"
        )
        payload = {
            "contents": [
                {"parts": [{"text": user_prompt}]}
            ],
            "generationConfig": {
                "temperature": provider.temperature,
                "maxOutputTokens": provider.max_tokens,
            },
        }
        if system_prompt:
            payload["system_instruction"] = {"parts": [{"text": system_prompt}]}

        resp = await http.post(url, json=payload)
        resp.raise_for_status()
        data = resp.json()

        try:
            candidates = data.get("candidates", [])
            if candidates:
                parts = candidates[0].get("content", {}).get("parts", [])
                if parts:
                    return parts[0].get("text", "")
        except (IndexError, KeyError, TypeError, AttributeError):
            pass
        return ""

    async def _call_openai_compatible(self, user_prompt: str, system_prompt: str) -> str:
        """Call an OpenAI-compatible chat completions API."""
        http = await self._get_http()
        provider = self.provider
        url = f"{provider.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {provider.api_key}",
            "Content-Type": "application/json",
        }
        messages = [{"role": "user", "content": user_prompt}]
        if system_prompt:
            messages.insert(0, {"role": "system", "content": system_prompt})
        payload = {
            "model": provider.model,
            "messages": messages,
            "temperature": provider.temperature,
            "max_tokens": provider.max_tokens,
        }
        resp = await http.post(url, json=payload, headers=headers)
        resp.raise_for_status()
        data = resp.json()

        try:
            choices = data.get("choices", [])
            if choices:
                return choices[0].get("message", {}).get("content", "") or ""
        except (IndexError, KeyError, TypeError, AttributeError):
            pass
        return ""
