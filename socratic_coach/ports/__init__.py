"""Port interfaces (Hexagonal Architecture)."""

from socratic_coach.ports.outbound import ProviderError, StoragePort, TextGenerationPort

__all__ = [
    "ProviderError",
    "StoragePort",
    "TextGenerationPort",
]
