"""Flow orchestrator: one generic engine for every registered flow.

``Flow.run()`` drives a single invocation through:

  1. input validation against ``definition.input_shape``
  2. deterministic pre-computation (facts merged into the render context)
  3. prompt rendering (text plus data-URI attachments)
  4. the generation call through the shared LLM client
  5. output coercion and validation against ``definition.output_shape``

and returns the validated output dict or raises ``FlowError``.  Nothing is
retried; retry policy belongs to the caller.

Each invocation owns a ``FlowInvocation`` record that walks the state
machine ``CREATED -> INPUT_VALIDATED -> PROMPT_RENDERED -> INVOKED ->
OUTPUT_VALIDATED -> COMPLETED`` with ``FAILED`` reachable from every
non-terminal state (an invalid request fails straight from ``CREATED``).
A ``Flow`` itself holds only immutable configuration, so any number of
invocations may run concurrently on one instance.
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from inference.prompt.templates import RenderedPrompt
from inference.runtime.base_client import BaseLLMClient, LLMClient, TransportError

from .coercion import coerce_and_validate
from .descriptor import FlowDefinition
from .errors import FlowError, FlowErrorKind
from .validator import validate

if TYPE_CHECKING:
    from .response_cache import ResponseCache

logger = logging.getLogger(__name__)


class FlowState(Enum):
    CREATED = "CREATED"
    INPUT_VALIDATED = "INPUT_VALIDATED"
    PROMPT_RENDERED = "PROMPT_RENDERED"
    INVOKED = "INVOKED"
    OUTPUT_VALIDATED = "OUTPUT_VALIDATED"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


_NEXT_STATE: dict[FlowState, FlowState] = {
    FlowState.CREATED: FlowState.INPUT_VALIDATED,
    FlowState.INPUT_VALIDATED: FlowState.PROMPT_RENDERED,
    FlowState.PROMPT_RENDERED: FlowState.INVOKED,
    FlowState.INVOKED: FlowState.OUTPUT_VALIDATED,
    FlowState.OUTPUT_VALIDATED: FlowState.COMPLETED,
}


# ---------------------------------------------------------------------------
# Per-invocation record
# ---------------------------------------------------------------------------

@dataclass
class FlowInvocation:
    """State history of one ``Flow.run()`` call.

    Attributes:
        flow_name:     Flow being run.
        invocation_id: Short random id used in log lines.
        history:       States visited, starting with ``CREATED``.
        error_kind:    Set when the invocation ends in ``FAILED``; None for
                       unexpected (unclassified) exceptions.
    """

    flow_name: str
    invocation_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    history: list[FlowState] = field(default_factory=lambda: [FlowState.CREATED])
    error_kind: Optional[FlowErrorKind] = None
    started_at: float = field(default_factory=time.monotonic)

    @property
    def state(self) -> FlowState:
        return self.history[-1]

    @property
    def elapsed(self) -> float:
        return time.monotonic() - self.started_at

    def advance(self, target: FlowState) -> None:
        if _NEXT_STATE.get(self.state) is not target:
            raise RuntimeError(
                f"illegal flow transition {self.state.value} -> {target.value}"
            )
        self.history.append(target)

    def fail(self, kind: Optional[FlowErrorKind]) -> None:
        if self.state in (FlowState.COMPLETED, FlowState.FAILED):
            raise RuntimeError(f"cannot fail from {self.state.value}")
        self.error_kind = kind
        self.history.append(FlowState.FAILED)


# ---------------------------------------------------------------------------
# Orchestrator
# ---------------------------------------------------------------------------

class Flow:
    """Runs one ``FlowDefinition`` against a generation client.

    Args:
        definition: The flow manifest.
        llm_client: Shared client; an ``LLMClient`` is created if omitted.
        clock:      Returns "today" for pre-computation.
        cache:      Optional ``ResponseCache`` shared across flows.
    """

    def __init__(
        self,
        definition: FlowDefinition,
        llm_client: BaseLLMClient | None = None,
        *,
        clock: Callable[[], date] = date.today,
        cache: ResponseCache | None = None,
    ) -> None:
        self.definition = definition
        self.llm = llm_client or LLMClient()
        self.clock = clock
        self.cache = cache

    @property
    def name(self) -> str:
        return self.definition.name

    async def aclose(self) -> None:
        """Release backend connections held for the running event loop."""
        close = getattr(self.llm, "aclose", None)
        if close is not None:
            await close()

    async def run(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Run one invocation and return the validated output."""
        value, _ = await self.run_traced(data)
        return value

    async def run_traced(self, data: Mapping[str, Any]) -> tuple[dict[str, Any], FlowInvocation]:
        """Like ``run()`` but also returns the invocation record."""
        invocation = FlowInvocation(self.name)
        logger.info("[%s] invocation %s started", self.name, invocation.invocation_id)
        try:
            value = await self._execute(data, invocation)
        except FlowError as exc:
            if not exc.failed_state:
                exc.failed_state = invocation.state.value
            exc.flow_name = exc.flow_name or self.name
            invocation.fail(exc.kind)
            logger.warning(
                "[%s] invocation %s failed after %s: %s (%s)",
                self.name, invocation.invocation_id, exc.failed_state,
                exc.kind.value, exc.detail,
            )
            raise
        except Exception:
            invocation.fail(None)
            raise

        invocation.advance(FlowState.COMPLETED)
        logger.info(
            "[%s] invocation %s completed in %.2fs",
            self.name, invocation.invocation_id, invocation.elapsed,
        )
        return value, invocation

    async def _execute(self, data: Mapping[str, Any], invocation: FlowInvocation) -> dict[str, Any]:
        definition = self.definition

        # -- 1. input ----------------------------------------------------
        checked = validate(data, definition.input_shape)
        if not checked.ok:
            raise FlowError(
                FlowErrorKind.INVALID_INPUT,
                "; ".join(f"{v.path}: {v.reason}" for v in checked.violations),
                violations=checked.violations,
                flow_name=self.name,
                failed_state=FlowState.CREATED.value,
            )
        validated_input = checked.value
        invocation.advance(FlowState.INPUT_VALIDATED)

        # -- 2/3. facts + prompt ----------------------------------------
        today = self.clock()
        facts = definition.compute_facts(validated_input, today)
        context = definition.build_context(validated_input, facts)
        rendered = definition.template.render(context)
        invocation.advance(FlowState.PROMPT_RENDERED)
        logger.debug(
            "[%s] prompt rendered: %d chars, %d attachment(s)",
            self.name, len(rendered.text), len(rendered.attachments),
        )

        # -- 4/5. generation + output -----------------------------------
        try:
            if self.cache is not None:
                key = self.cache.make_key(
                    self.name,
                    validated_input,
                    today if definition.has_precompute else None,
                )
                value = await self.cache.get_or_compute(key, lambda: self._generate(rendered))
            else:
                value = await self._generate(rendered)
        except FlowError as exc:
            if exc.failed_state == FlowState.INVOKED.value:
                invocation.advance(FlowState.INVOKED)
            raise

        invocation.advance(FlowState.INVOKED)
        invocation.advance(FlowState.OUTPUT_VALIDATED)
        return value

    async def _generate(self, rendered: RenderedPrompt) -> dict[str, Any]:
        """Invoke the backend and coerce its output; raises ``FlowError``."""
        definition = self.definition
        try:
            result = await self.llm.invoke(
                rendered.text,
                definition.output_shape,
                rendered.attachments,
                system_prompt=definition.system_prompt or None,
            )
        except TransportError as exc:
            raise FlowError(
                FlowErrorKind.TRANSPORT_ERROR,
                str(exc),
                flow_name=self.name,
                failed_state=FlowState.PROMPT_RENDERED.value,
            ) from exc

        text = getattr(result, "text", result)
        logger.debug("[%s] generation returned %d chars", self.name, len(text or ""))

        outcome = coerce_and_validate(text, definition.output_shape)
        if not outcome.ok:
            raise FlowError(
                outcome.kind,
                outcome.detail,
                violations=outcome.violations,
                flow_name=self.name,
                failed_state=FlowState.INVOKED.value,
            )
        return outcome.value
