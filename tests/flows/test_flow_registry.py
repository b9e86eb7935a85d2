# Unit tests for FlowRegistry and the global singleton

import pytest

import flows.flow_registry as registry_module
from flows import FLOW_REGISTRY, Flow, FlowRegistry, ResponseCache, get_flow_registry
from flows.flow_registry import reset_flow_registry


_ALL_FLOWS = [
    "ai_assistant",
    "chatbot_concierge",
    "international_shipping",
    "loan_forecasting",
    "predictive_forecasting",
    "shopping_recommendations",
    "site_analytics",
    "transaction_categorization",
]


@pytest.fixture
def fresh_singleton(monkeypatch):
    monkeypatch.delenv("FLOW_RESPONSE_CACHE", raising=False)
    monkeypatch.delenv("FLOW_RESPONSE_CACHE_SIZE", raising=False)
    reset_flow_registry()
    yield
    reset_flow_registry()


def test_builtin_registry_lists_every_flow():
    assert sorted(FLOW_REGISTRY) == _ALL_FLOWS
    registry = FlowRegistry(FLOW_REGISTRY.values())
    assert registry.list_flows() == _ALL_FLOWS
    assert len(registry) == 8
    assert "site_analytics" in registry
    assert "unknown" not in registry


def test_register_rejects_duplicates_and_non_definitions():
    registry = FlowRegistry([FLOW_REGISTRY["ai_assistant"]])
    with pytest.raises(ValueError):
        registry.register(FLOW_REGISTRY["ai_assistant"])
    with pytest.raises(TypeError):
        registry.register({"name": "ai_assistant"})


def test_get_flow_is_lazy_and_reused(fake_llm):
    registry = FlowRegistry(FLOW_REGISTRY.values(), fake_llm)

    flow = registry.get_flow("international_shipping")

    assert isinstance(flow, Flow)
    assert flow.llm is fake_llm
    assert registry.get_flow("international_shipping") is flow
    assert registry.get_flow("missing") is None


def test_flows_share_client_and_cache(fake_llm):
    cache = ResponseCache()
    registry = FlowRegistry(FLOW_REGISTRY.values(), fake_llm, cache=cache)

    shipping = registry.get_flow("international_shipping")
    assistant = registry.get_flow("ai_assistant")

    assert shipping.llm is assistant.llm
    assert shipping.cache is cache and assistant.cache is cache


def test_catalog_entries():
    registry = FlowRegistry(FLOW_REGISTRY.values())
    catalog = {entry["name"]: entry for entry in registry.get_catalog()}

    shipping = catalog["international_shipping"]
    assert shipping["description"].startswith("international_shipping")
    assert shipping["input_schema"]["required"] == ["destinationCountry"]
    assert set(shipping["output_schema"]["required"]) == {"rateNPR", "estimatedDeliveryTime"}


def test_listing_does_not_build_a_client(monkeypatch):
    def _fail():
        raise AssertionError("client must not be built for listings")

    monkeypatch.setattr("inference.runtime.base_client.LLMClient", _fail)
    registry = FlowRegistry(FLOW_REGISTRY.values())
    assert registry.list_flows() == _ALL_FLOWS
    assert len(registry.get_catalog()) == 8


def test_singleton_reads_cache_setting(fresh_singleton, monkeypatch):
    first = get_flow_registry()
    assert get_flow_registry() is first
    assert first._cache is None

    reset_flow_registry()
    monkeypatch.setenv("FLOW_RESPONSE_CACHE", "true")
    monkeypatch.setenv("FLOW_RESPONSE_CACHE_SIZE", "8")
    cached = get_flow_registry()
    assert cached is not first
    assert isinstance(cached._cache, ResponseCache)
    assert cached._cache.max_entries == 8
    assert registry_module._registry is cached
