"""Configuration and shared state."""

__version__ = "0.1.0"

import os
import sys
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

SUPPORTED_AI_PROVIDERS = ("groq", "claude")
AI_PROVIDER = os.getenv("AI_PROVIDER", "groq").strip().lower()
if AI_PROVIDER not in SUPPORTED_AI_PROVIDERS:
    _stderr_print(f"Unsupported AI_PROVIDER={AI_PROVIDER!r}, falling back to 'groq'")
    AI_PROVIDER = "groq"

DEFAULT_MODELS_BY_PROVIDER = {
    "groq": os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile"),
    "claude": os.getenv("CLAUDE_MODEL", "claude-sonnet-4-5-20250929"),
}


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, using {default}")
        return default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, using {default}")
        return default


CONFIG = {
    "port": _int_env("PORT", 3000),
    "ai_provider": AI_PROVIDER,
    "model": DEFAULT_MODELS_BY_PROVIDER[AI_PROVIDER],
    # Groq (OpenAI-compatible chat completions)
    "groq_api_key": os.getenv("GROQ_API_KEY", ""),
    "groq_base_url": os.getenv("GROQ_BASE_URL", "https://api.groq.com/openai/v1"),
    "max_tokens": 1024,
    "temperature": 0.7,
    # One attempt per turn, no retry; the coach falls back on timeout
    "provider_timeout": _float_env("COACH_PROVIDER_TIMEOUT", 30.0),
    "history_window": _int_env("COACH_HISTORY_WINDOW", 6),
    "storage_dir": os.getenv("COACH_STORAGE_DIR", "memory"),
    # Optional directory of persona/prompt overrides (persona.md, ...)
    "template_dir": os.getenv("COACH_TEMPLATE_DIR", ""),
}


# ── Typed config ────────────────────────────────────────────


@dataclass
class ProviderConfig:
    name: str = "groq"
    model: str = "llama-3.3-70b-versatile"
    api_key: str = ""
    base_url: str = "https://api.groq.com/openai/v1"
    max_tokens: int = 1024
    temperature: float = 0.7
    timeout: float = 30.0


@dataclass
class CoachConfig:
    """Typed configuration for the coach service."""

    port: int = 3000
    history_window: int = 6
    storage_dir: str = "memory"
    template_dir: str = ""
    provider: ProviderConfig = field(default_factory=ProviderConfig)

    @classmethod
    def from_env(cls) -> "CoachConfig":
        """Create CoachConfig from environment variables."""
        return cls(
            port=CONFIG["port"],
            history_window=CONFIG["history_window"],
            storage_dir=CONFIG["storage_dir"],
            template_dir=CONFIG["template_dir"],
            provider=ProviderConfig(
                name=CONFIG["ai_provider"],
                model=CONFIG["model"],
                api_key=CONFIG["groq_api_key"],
                base_url=CONFIG["groq_base_url"],
                max_tokens=CONFIG["max_tokens"],
                temperature=CONFIG["temperature"],
                timeout=CONFIG["provider_timeout"],
            ),
        )
