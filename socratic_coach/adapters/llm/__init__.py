"""LLM adapters — Groq HTTP and Claude CLI text generation."""

from typing import Optional

from socratic_coach.adapters.llm.claude_adapter import ClaudeCliAdapter
from socratic_coach.adapters.llm.groq_adapter import GroqAdapter
from socratic_coach.config import ProviderConfig
from socratic_coach.ports.outbound import TextGenerationPort


def create_provider(config: Optional[ProviderConfig] = None) -> TextGenerationPort:
    """Create a text-generation adapter for the configured provider."""
    config = config or ProviderConfig()
    selected = config.name.strip().lower()
    if selected == "groq":
        return GroqAdapter(config)
    if selected == "claude":
        return ClaudeCliAdapter(config)
    raise ValueError(f"Unsupported provider: {selected}")


__all__ = [
    "ClaudeCliAdapter",
    "GroqAdapter",
    "create_provider",
]
