"""Prompt modules - template rendering."""

from .templates import (
    PromptTemplate,
    RenderedPrompt,
    TemplateReference,
    TemplateRenderError,
    TemplateSyntaxError,
    is_truthy,
    stringify,
)

__all__ = [
    "PromptTemplate",
    "RenderedPrompt",
    "TemplateReference",
    "TemplateRenderError",
    "TemplateSyntaxError",
    "is_truthy",
    "stringify",
]
