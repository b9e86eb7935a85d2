# Unit tests for FlowDefinition construction and the built-in flows

from datetime import date

import pytest

from flows import FLOW_REGISTRY, FlowDefinition, FlowDefinitionError, FlowErrorKind
from flows.shapes import ArrayShape, ObjectShape, StringShape, prop
from inference.prompt.templates import TemplateSyntaxError


_INPUT = ObjectShape.of(
    country=prop(StringShape()),
    items=prop(ArrayShape(items=ObjectShape.of(sku=StringShape())), optional=True),
)
_OUTPUT = ObjectShape.of(answer=prop(StringShape()))


def _define(template, **kwargs):
    return FlowDefinition(
        name=kwargs.pop("name", "demo"),
        input_shape=_INPUT,
        output_shape=_OUTPUT,
        prompt_template=template,
        **kwargs,
    )


def test_builtin_definitions_are_consistent():
    for name, definition in FLOW_REGISTRY.items():
        assert definition.name == name
        assert definition.catalog_entry.startswith(name)
        assert set(definition.template.variables) <= (
            set(definition.input_shape.names) | set(definition.facts)
        )


def test_only_loan_forecasting_precomputes():
    precomputing = [name for name, d in FLOW_REGISTRY.items() if d.has_precompute]
    assert precomputing == ["loan_forecasting"]


def test_unknown_reference_is_rejected_at_definition_time():
    with pytest.raises(FlowDefinitionError) as exc_info:
        _define("Ship to {{{country}}} via {{carrier}}")
    assert exc_info.value.kind is FlowErrorKind.PROMPT_DEFINITION_ERROR
    assert "carrier" in exc_info.value.detail


def test_item_fields_resolve_inside_each():
    definition = _define("{{#each items}}{{sku}}{{#unless @last}},{{/unless}}{{/each}} to {{country}}")
    assert definition.template.variables == ["country", "items"]

    with pytest.raises(FlowDefinitionError):
        _define("{{sku}}")


def test_local_names_outside_each_are_rejected():
    with pytest.raises(FlowDefinitionError):
        _define("{{#unless @last}},{{/unless}}")


def test_template_syntax_errors_propagate():
    with pytest.raises(TemplateSyntaxError):
        _define("{{#if country}}unclosed")


def test_fact_rules():
    with pytest.raises(FlowDefinitionError):
        _define("{{country}}", facts=("eta",))
    with pytest.raises(FlowDefinitionError):
        _define("{{country}}", facts=("country",), precompute=lambda data, today: {})
    with pytest.raises(FlowDefinitionError):
        _define("{{country}}", name="")


def test_compute_facts_drops_undeclared_keys(caplog):
    definition = _define(
        "{{country}} {{eta}}",
        facts=("eta",),
        precompute=lambda data, today: {"eta": today.isoformat(), "stray": 1},
    )

    facts = definition.compute_facts({"country": "Japan"}, date(2024, 6, 20))

    assert facts == {"eta": "2024-06-20"}
    assert "undeclared fact 'stray'" in caplog.text


def test_build_context_includes_absent_optionals():
    definition = _define("{{country}}")
    assert definition.build_context({"country": "Japan"}, {}) == {"country": "Japan", "items": None}


def test_to_catalog():
    catalog = FLOW_REGISTRY["transaction_categorization"].to_catalog()
    assert catalog["name"] == "transaction_categorization"
    receipt = catalog["input_schema"]["properties"]["receiptDataUri"]
    assert receipt["type"] == "string"
    assert receipt["contentEncoding"] == "base64"
    assert catalog["output_schema"]["properties"]["isIncome"]["type"] == "boolean"
