"""Groq adapter — OpenAI-compatible chat completions over aiohttp.

Implements TextGenerationPort.
"""

import asyncio
import sys
from datetime import datetime
from typing import Optional

import aiohttp

from socratic_coach.config import ProviderConfig
from socratic_coach.ports.outbound import ProviderError


def _log(msg: str):
    print(f"[groq] {msg}", file=sys.stderr)


class GroqAdapter:
    """Single-attempt chat completion client. Raises ProviderError on failure."""

    def __init__(self, config: Optional[ProviderConfig] = None, system_prompt: Optional[str] = None):
        self.config = config or ProviderConfig()
        self.system_prompt = system_prompt

    @property
    def is_configured(self) -> bool:
        return bool(self.config.api_key)

    @property
    def endpoint(self) -> str:
        return self.config.base_url.rstrip("/") + "/chat/completions"

    def _payload(self, prompt: str) -> dict:
        messages = []
        if self.system_prompt:
            messages.append({"role": "system", "content": self.system_prompt})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self.config.model,
            "messages": messages,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
        }

    async def generate_text(self, prompt: str) -> str:
        if not self.is_configured:
            raise ProviderError("GROQ_API_KEY not configured.")

        headers = {
            "Authorization": f"Bearer {self.config.api_key}",
            "Content-Type": "application/json",
        }
        timeout = aiohttp.ClientTimeout(total=self.config.timeout)
        _log(f"[{datetime.now().isoformat()}] Requesting completion ({self.config.model})")

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(self.endpoint, headers=headers, json=self._payload(prompt)) as resp:
                    if resp.status >= 400:
                        body = await resp.text()
                        raise ProviderError(f"HTTP {resp.status}: {body[:500]}")
                    data = await resp.json()
        except asyncio.TimeoutError as e:
            raise ProviderError(f"Timeout ({self.config.timeout:g}s)") from e
        except (aiohttp.ClientError, ValueError) as e:
            raise ProviderError(f"Request failed: {e!r}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise ProviderError(f"Unexpected response shape: {str(data)[:200]}")
        if not content or not content.strip():
            raise ProviderError("Groq returned empty response")
        _log(f"[{datetime.now().isoformat()}] Completed ({len(content)} chars)")
        return content.strip()
