"""Runtime inference modules - LLM clients and the generation boundary."""

from .base_client import (
    BaseLLMClient,
    GenerationResult,
    LLMClient,
    TransportError,
)

__all__ = [
    "BaseLLMClient",
    "GenerationResult",
    "LLMClient",
    "TransportError",
]
