"""Runtime LLM base abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
import os
from typing import Any, Dict, Optional, Sequence

from ..config.model_config import ModelRegistry
from ..input_processing.attachments import Attachment

DEFAULT_MODEL = "gpt-4o-mini"


class TransportError(RuntimeError):
    """The generation backend was unreachable or returned a service error."""

    def __init__(self, message: str, *, provider: str = "", status_code: Optional[int] = None):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code


@dataclass(frozen=True)
class GenerationResult:
    """Raw backend output for one invocation.

    ``text`` is passed on uninterpreted; coercion happens in the flow.
    """

    text: str
    model: str = ""
    usage: Dict[str, Any] = field(default_factory=dict)


class BaseLLMClient(ABC):
    """Base class shared by all concrete client implementations."""
    _env_initialized: bool = False
    _routing_initialized: bool = False
    _runtime_routing: Dict[str, Any] = {}

    def __init__(
        self,
        default_model: Optional[str] = None,
        *,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
    ):
        if not BaseLLMClient._env_initialized:
            # Load .env once per process before reading os.getenv defaults.
            from ..config.config_loader import ConfigLoader

            ConfigLoader.load_env_file()
            BaseLLMClient._env_initialized = True
        if not BaseLLMClient._routing_initialized:
            BaseLLMClient._runtime_routing = self._load_runtime_routing()
            BaseLLMClient._routing_initialized = True

        routing_model = self.get_runtime_routing().get("default_model")
        self.default_model = (
            model
            or default_model
            or os.getenv("INFERENCE_DEFAULT_MODEL")
            or routing_model
            or DEFAULT_MODEL
        )
        self.model = self.default_model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._api_key = api_key
        self._base_url = base_url
        self.model_registry = ModelRegistry()

    @classmethod
    def reset_runtime_state(cls) -> None:
        """Forget cached .env / routing state (tests and reconfiguration)."""
        BaseLLMClient._env_initialized = False
        BaseLLMClient._routing_initialized = False
        BaseLLMClient._runtime_routing = {}

    def _load_runtime_routing(self) -> Dict[str, Any]:
        """Load user-defined runtime routing config from project root."""
        from ..config.config_loader import ConfigLoader

        config_path = os.getenv("PIPELINE_RUNTIME_CONFIG")
        if not config_path:
            config_path = (
                ConfigLoader.find_file_upwards("pipeline_runtime.yaml")
                or ConfigLoader.find_file_upwards("pipeline_runtime.yml")
            )
        if not config_path:
            return {}

        config = ConfigLoader.load(config_path, use_env=True)
        routing = config.get("routing", {}) if isinstance(config, dict) else {}
        api_keys = config.get("api_keys", {}) if isinstance(config, dict) else {}

        if isinstance(api_keys, dict):
            provider_key_env = routing.get("provider_key_env", {}) if isinstance(routing, dict) else {}
            for provider, key_value in api_keys.items():
                if key_value in (None, ""):
                    continue
                env_name = provider_key_env.get(provider, f"{str(provider).upper()}_API_KEY")
                if not os.getenv(env_name):
                    os.environ[env_name] = str(key_value)

        return routing if isinstance(routing, dict) else {}

    def get_runtime_routing(self) -> Dict[str, Any]:
        """Return cached runtime routing config."""
        return BaseLLMClient._runtime_routing

    def resolve_provider_for_model(self, model: Optional[str]) -> str:
        """Resolve provider using user routing first, then model registry."""
        resolved_model = model or self.model or self.default_model
        if not resolved_model:
            return "openai"

        routing = self.get_runtime_routing()
        model_provider_map = routing.get("model_provider", {}) if isinstance(routing, dict) else {}
        if isinstance(model_provider_map, dict):
            mapped = model_provider_map.get(resolved_model)
            if mapped:
                return str(mapped)

        model_info = self.model_registry.get_model(resolved_model)
        if model_info is not None and model_info.provider:
            return model_info.provider

        default_provider = routing.get("default_provider") if isinstance(routing, dict) else None
        return str(default_provider) if default_provider else "openai"

    def provider_env_name(self, provider: str, category: str) -> str:
        """Environment variable holding a provider's ``api_key`` or ``base_url``."""
        routing = self.get_runtime_routing()
        table = "provider_key_env" if category == "api_key" else "provider_base_url_env"
        mapped = routing.get(table, {}).get(provider) if isinstance(routing, dict) else None
        if mapped:
            return str(mapped)
        suffix = "API_KEY" if category == "api_key" else "BASE_URL"
        return f"{provider.upper()}_{suffix}"

    def supports_attachments(self, model: Optional[str] = None) -> bool:
        """True unless the registry knows the model to be text-only."""
        model_info = self.model_registry.get_model(model or self.model)
        return model_info is None or model_info.supports_multimodal

    def supports_json_mode(self, model: Optional[str] = None) -> bool:
        """True unless the registry knows the model lacks JSON response mode."""
        model_info = self.model_registry.get_model(model or self.model)
        return model_info is None or model_info.supports_json_mode

    async def aclose(self) -> None:
        """Release connections held for the running event loop."""

    @abstractmethod
    async def invoke(
        self,
        prompt: str,
        output_shape: Any,
        attachments: Sequence[Attachment] = (),
        *,
        system_prompt: Optional[str] = None,
    ) -> GenerationResult:
        """Send one rendered prompt and its output contract to the backend.

        Args:
            prompt: Rendered prompt text.
            output_shape: Declared output shape; its JSON schema is the
                contract handed to the backend.
            attachments: Binary attachments referenced by the prompt.
            system_prompt: Optional flow-specific system instruction.

        Raises:
            TransportError: The backend was unreachable or failed.
        """


from .clients.default_client import LLMClient


__all__ = [
    "BaseLLMClient",
    "GenerationResult",
    "LLMClient",
    "TransportError",
]
