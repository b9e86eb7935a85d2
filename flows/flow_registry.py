# Flow Registry: holds flow definitions and lazily builds runnable flows
#
# Definitions are registered once at start-up (a bad definition never gets
# this far: FlowDefinition raises while being constructed).  Flow instances
# share one LLM client and, when enabled, one ResponseCache.

import logging
from datetime import date
from threading import Lock
from typing import Any, Callable, Dict, Iterable, List, Optional

from .base_flow import Flow
from .descriptor import FlowDefinition
from .response_cache import ResponseCache

logger = logging.getLogger(__name__)


class FlowRegistry:
    """Registry of ``FlowDefinition`` manifests and their ``Flow`` runners.

    ``get_flow()`` builds a ``Flow`` on first request and reuses it; the
    shared LLM client is created lazily as well, so listing flows never
    needs API credentials.
    """

    def __init__(
        self,
        definitions: Iterable[FlowDefinition] = (),
        llm_client: Optional[Any] = None,
        *,
        cache: Optional[ResponseCache] = None,
        clock: Callable[[], date] = date.today,
    ):
        self._definitions: Dict[str, FlowDefinition] = {}
        self._flows: Dict[str, Flow] = {}
        self._llm_client = llm_client
        self._cache = cache
        self._clock = clock
        self._init_lock = Lock()
        for definition in definitions:
            self.register(definition)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, definition: FlowDefinition) -> None:
        if not isinstance(definition, FlowDefinition):
            raise TypeError(f"expected FlowDefinition, got {type(definition).__name__}")
        if definition.name in self._definitions:
            raise ValueError(f"Flow {definition.name!r} is already registered")
        self._definitions[definition.name] = definition
        logger.info("Registered flow: %s", definition.name)

    def get_definition(self, name: str) -> Optional[FlowDefinition]:
        return self._definitions.get(name)

    # ------------------------------------------------------------------
    # Runnable flows
    # ------------------------------------------------------------------

    @property
    def llm_client(self) -> Any:
        if self._llm_client is None:
            with self._init_lock:
                if self._llm_client is None:
                    from inference.runtime.base_client import LLMClient

                    self._llm_client = LLMClient()
        return self._llm_client

    def get_flow(self, name: str) -> Optional[Flow]:
        flow = self._flows.get(name)
        if flow is not None:
            return flow

        definition = self._definitions.get(name)
        if definition is None:
            return None

        llm_client = self.llm_client
        with self._init_lock:
            flow = self._flows.get(name)
            if flow is None:
                flow = Flow(definition, llm_client, clock=self._clock, cache=self._cache)
                self._flows[name] = flow
            return flow

    # ------------------------------------------------------------------
    # Listings
    # ------------------------------------------------------------------

    def list_flows(self) -> List[str]:
        return sorted(self._definitions.keys())

    def get_catalog(self) -> List[Dict[str, Any]]:
        return [self._definitions[name].to_catalog() for name in self.list_flows()]

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)


# Global registry singleton
_registry: Optional[FlowRegistry] = None
_registry_lock = Lock()


def get_flow_registry() -> FlowRegistry:
    """Return the global flow registry (singleton).

    Loaded with every definition in ``FLOW_REGISTRY``; the response cache is
    enabled when ``FLOW_RESPONSE_CACHE`` is set.
    """
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                from . import FLOW_REGISTRY
                from .config import get_settings

                settings = get_settings()
                cache = ResponseCache(settings.cache_size) if settings.response_cache else None
                _registry = FlowRegistry(FLOW_REGISTRY.values(), cache=cache)
    return _registry


def reset_flow_registry() -> None:
    """Drop the singleton so the next call rebuilds it (tests, reconfiguration)."""
    global _registry
    with _registry_lock:
        _registry = None
