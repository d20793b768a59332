"""Outbound ports — interfaces for external system adapters."""

from typing import Protocol, runtime_checkable


class ProviderError(Exception):
    """Raised by text-generation adapters when a completion cannot be produced."""


@runtime_checkable
class TextGenerationPort(Protocol):
    """Interface for text-completion backends."""

    async def generate_text(self, prompt: str) -> str: ...


@runtime_checkable
class StoragePort(Protocol):
    """Interface for persistent storage."""

    def load(self, key: str) -> list: ...
    def save(self, key: str, data: list) -> None: ...
    def delete(self, key: str) -> None: ...
