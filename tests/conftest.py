"""Shared pytest fixtures for flow and inference unit tests.

Auto-loaded for the whole ``tests/`` tree.  Puts the project root on
``sys.path`` and provides a scripted generation client so no test ever
talks to a real backend.
"""

from __future__ import annotations

import asyncio
import json
import sys
from datetime import date
from pathlib import Path
from typing import Any, Callable, List, Optional, Sequence, Union

import pytest

_repo_root = Path(__file__).resolve().parents[1]
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

from inference.runtime.base_client import BaseLLMClient, GenerationResult


Reply = Union[str, dict, Exception, Callable[[str], Any]]


class _FakeLLMClient:
    """Stands in for ``LLMClient``; records calls and replays scripted replies.

    ``reply`` may be a JSON-able dict, raw text, an exception to raise, or a
    callable receiving the rendered prompt and returning one of those.
    """

    def __init__(self, reply: Reply = "{}", model: str = "fake-model"):
        self.reply = reply
        self.model = model
        self.calls: List[dict] = []

    async def invoke(
        self,
        prompt: str,
        output_shape: Any,
        attachments: Sequence[Any] = (),
        *,
        system_prompt: Optional[str] = None,
    ) -> GenerationResult:
        self.calls.append({
            "prompt": prompt,
            "output_shape": output_shape,
            "attachments": tuple(attachments),
            "system_prompt": system_prompt,
        })
        # Yield so concurrent invocations interleave.
        await asyncio.sleep(0)
        reply = self.reply(prompt) if callable(self.reply) else self.reply
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, (dict, list)):
            reply = json.dumps(reply)
        return GenerationResult(text=reply, model=self.model)


@pytest.fixture
def fake_llm():
    return _FakeLLMClient()


@pytest.fixture
def make_llm() -> Callable[..., _FakeLLMClient]:
    return _FakeLLMClient


@pytest.fixture
def fixed_today():
    return date(2024, 6, 20)


@pytest.fixture
def fixed_clock(fixed_today) -> Callable[[], date]:
    return lambda: fixed_today


@pytest.fixture
def clean_runtime_env(monkeypatch, tmp_path):
    """Isolate client construction from the developer's .env and routing files."""
    for name in (
        "INFERENCE_DEFAULT_MODEL",
        "PIPELINE_RUNTIME_CONFIG",
        "OPENAI_API_KEY",
        "OPENAI_BASE_URL",
        "LOG_LEVEL",
        "FLOW_RESPONSE_CACHE",
        "FLOW_RESPONSE_CACHE_SIZE",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    BaseLLMClient.reset_runtime_state()
    yield tmp_path
    BaseLLMClient.reset_runtime_state()
