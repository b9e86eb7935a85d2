"""
Model Configuration and Registry

Known chat models and their capabilities.  The client consults the registry
to decide whether to request JSON mode and to warn when attachments are
sent to a text-only model.
"""

from typing import Dict, Iterable, Optional
from dataclasses import dataclass


@dataclass
class ModelInfo:
    """Information about a model"""
    name: str
    provider: str  # e.g., "openai", "google", "ollama"
    model_id: str  # The actual model identifier
    supports_json_mode: bool = True
    supports_multimodal: bool = False


def _models(*infos: ModelInfo) -> Dict[str, ModelInfo]:
    return {info.model_id: info for info in infos}


class ModelRegistry:
    """
    Registry for all available models

    Maintains a list of supported models and their capabilities.  Unknown
    models are allowed; callers treat them as capable of everything.
    """

    OPENAI_MODELS = _models(
        ModelInfo("GPT-5", "openai", "gpt-5", supports_multimodal=True),
        ModelInfo("GPT-5 Mini", "openai", "gpt-5-mini", supports_multimodal=True),
        ModelInfo("GPT-4.1", "openai", "gpt-4.1", supports_multimodal=True),
        ModelInfo("GPT-4o", "openai", "gpt-4o", supports_multimodal=True),
        ModelInfo("GPT-4o Mini", "openai", "gpt-4o-mini", supports_multimodal=True),
        ModelInfo("GPT-3.5 Turbo", "openai", "gpt-3.5-turbo"),
    )

    # Served through OpenAI-compatible endpoints (see pipeline_runtime.yaml)
    COMPATIBLE_MODELS = _models(
        ModelInfo("Gemini 2.0 Flash", "google", "gemini-2.0-flash", supports_multimodal=True),
        # Local models follow the JSON instruction in the prompt only.
        ModelInfo("Llama 3", "ollama", "llama3", supports_json_mode=False),
        ModelInfo("Mistral", "ollama", "mistral", supports_json_mode=False),
    )

    def __init__(self, extra_models: Iterable[ModelInfo] = ()):
        """Initialize the model registry"""
        self._models: Dict[str, ModelInfo] = {
            **self.OPENAI_MODELS,
            **self.COMPATIBLE_MODELS,
        }
        for info in extra_models:
            self.register_model(info)

    def register_model(self, model_info: ModelInfo):
        """
        Register a custom model

        Args:
            model_info: ModelInfo object containing model details
        """
        self._models[model_info.model_id] = model_info

    def get_model(self, model_id: Optional[str]) -> Optional[ModelInfo]:
        """
        Get model information by ID

        Args:
            model_id: Model identifier

        Returns:
            ModelInfo if found, None otherwise
        """
        if not model_id:
            return None
        return self._models.get(model_id)
