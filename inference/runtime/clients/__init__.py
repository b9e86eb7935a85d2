"""Concrete runtime LLM client implementations."""

from .default_client import LLMClient

__all__ = ["LLMClient"]
