"""Default LLM client implementation."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import threading
import weakref
from typing import Any, Dict, List, Optional, Sequence

from openai import AsyncOpenAI, OpenAIError

from ...input_processing.attachments import Attachment
from ...input_processing.message_utils import InputUtils
from ..base_client import BaseLLMClient, GenerationResult, TransportError

logger = logging.getLogger(__name__)

_CONTRACT_INSTRUCTION = (
    "Respond with a single JSON object that conforms to this JSON schema. "
    "Do not wrap it in markdown and do not add commentary.\n"
)


class LLMClient(BaseLLMClient):
    """OpenAI-SDK client speaking chat completions in JSON mode.

    JSON mode is requested only for models the registry does not mark as
    lacking it; the system message always carries the JSON contract.

    Works against any OpenAI-compatible endpoint; the base URL and API key
    env names come from the runtime routing config.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._clients: weakref.WeakKeyDictionary = weakref.WeakKeyDictionary()
        self._clients_lock = threading.Lock()

    @property
    def client(self) -> AsyncOpenAI:
        # The SDK connection pool is bound to the loop it was created on, so
        # each loop (one per run_sync() call or thread) gets its own client.
        loop = asyncio.get_running_loop()
        with self._clients_lock:
            openai_client = self._clients.get(loop)
            if openai_client is None:
                provider = self.resolve_provider_for_model(self.model)
                openai_client = AsyncOpenAI(
                    api_key=self._api_key or os.getenv(self.provider_env_name(provider, "api_key")),
                    base_url=self._base_url or os.getenv(self.provider_env_name(provider, "base_url")),
                )
                self._clients[loop] = openai_client
        return openai_client

    async def aclose(self) -> None:
        """Close the SDK client bound to the running loop, if one was built."""
        with self._clients_lock:
            openai_client = self._clients.pop(asyncio.get_running_loop(), None)
        if openai_client is not None:
            await openai_client.close()

    @staticmethod
    def build_system_message(output_shape: Any, system_prompt: Optional[str] = None) -> str:
        schema = output_shape.to_json_schema() if hasattr(output_shape, "to_json_schema") else output_shape
        contract = _CONTRACT_INSTRUCTION + json.dumps(schema, ensure_ascii=False, indent=2)
        if system_prompt:
            return f"{system_prompt}\n\n{contract}"
        return contract

    def _build_messages(
        self,
        prompt: str,
        output_shape: Any,
        attachments: Sequence[Attachment],
        system_prompt: Optional[str],
    ) -> List[Dict[str, Any]]:
        return [
            {"role": "system", "content": self.build_system_message(output_shape, system_prompt)},
            InputUtils.create_multimodal_message(prompt, attachments),
        ]

    def _build_request_kwargs(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "messages": messages,
        }
        if self.supports_json_mode():
            kwargs["response_format"] = {"type": "json_object"}
        if self.max_tokens is not None:
            # GPT-5 chat completion uses max_completion_tokens.
            key = "max_completion_tokens" if self.model.startswith("gpt-5") else "max_tokens"
            kwargs[key] = self.max_tokens
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        return kwargs

    @staticmethod
    def _usage_dict(response: Any) -> Dict[str, Any]:
        usage = getattr(response, "usage", None)
        if usage is None:
            return {}
        if hasattr(usage, "model_dump"):
            return usage.model_dump()
        return dict(usage) if isinstance(usage, dict) else {}

    async def invoke(
        self,
        prompt: str,
        output_shape: Any,
        attachments: Sequence[Attachment] = (),
        *,
        system_prompt: Optional[str] = None,
    ) -> GenerationResult:
        if attachments and not self.supports_attachments():
            logger.warning(
                "[LLMClient] Model %s is not marked multimodal; sending %d attachment(s) anyway",
                self.model, len(attachments),
            )

        messages = self._build_messages(prompt, output_shape, attachments, system_prompt)
        request_kwargs = self._build_request_kwargs(messages)
        logger.debug(
            "[LLMClient] model=%s prompt_chars=%d attachments=%d",
            self.model, len(prompt), len(attachments),
        )

        try:
            response = await self.client.chat.completions.create(**request_kwargs)
        except OpenAIError as exc:
            provider = self.resolve_provider_for_model(self.model)
            raise TransportError(
                f"{provider} request failed: {exc}",
                provider=provider,
                status_code=getattr(exc, "status_code", None),
            ) from exc

        choices = getattr(response, "choices", None) or []
        text = ""
        if choices and choices[0].message is not None:
            text = choices[0].message.content or ""
        return GenerationResult(
            text=text,
            model=getattr(response, "model", "") or self.model,
            usage=self._usage_dict(response),
        )
