"""
Inference Module - Generation Boundary and Prompt Processing Tools

This module provides:
- OpenAI-compatible client behind an abstract ``invoke`` boundary
- Attachment handling for data-URI request fields
- Prompt template rendering with conditional / iteration / media sections
- Configuration loading and model registry
"""

from .runtime.base_client import (
    BaseLLMClient,
    GenerationResult,
    LLMClient,
    TransportError,
)
from .input_processing import Attachment, InputUtils, is_data_uri, parse_data_uri
from .prompt.templates import (
    PromptTemplate,
    RenderedPrompt,
    TemplateRenderError,
    TemplateSyntaxError,
)
from .config.config_loader import ConfigLoader
from .config.model_config import ModelInfo, ModelRegistry

__version__ = "0.1.0"
__all__ = [
    "Attachment",
    "BaseLLMClient",
    "ConfigLoader",
    "GenerationResult",
    "InputUtils",
    "LLMClient",
    "ModelInfo",
    "ModelRegistry",
    "PromptTemplate",
    "RenderedPrompt",
    "TemplateRenderError",
    "TemplateSyntaxError",
    "TransportError",
    "is_data_uri",
    "parse_data_uri",
]
