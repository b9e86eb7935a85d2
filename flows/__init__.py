"""Flows: schema-validated generative tasks for the Peak Pulse storefront.

Every flow is a ``FlowDefinition`` (input shape, output shape, prompt
template, optional pre-computation) run by the one generic ``Flow``
orchestrator.  ``FLOW_REGISTRY`` maps flow names to the built-in
definitions; ``get_flow_registry()`` wraps them in a ``FlowRegistry`` that
builds runnable flows on demand.
"""

from .shapes import (
    ArrayShape,
    BooleanShape,
    EnumShape,
    NumberShape,
    ObjectShape,
    Property,
    StringShape,
    prop,
)
from .validator import ValidationResult, Violation, validate
from .errors import FlowDefinitionError, FlowError, FlowErrorKind
from .descriptor import FlowDefinition
from .base_flow import Flow, FlowInvocation, FlowState
from .response_cache import ResponseCache
from .flow_registry import FlowRegistry, get_flow_registry, reset_flow_registry
from .sync_adapter import run_sync

# -- Descriptors -----------------------------------------------------------
from .assistant.descriptor import DESCRIPTOR as _assistant_desc
from .concierge.descriptor import DESCRIPTOR as _concierge_desc
from .forecasting.descriptor import DESCRIPTOR as _forecasting_desc
from .shipping.descriptor import DESCRIPTOR as _shipping_desc
from .loan_forecast.descriptor import DESCRIPTOR as _loan_forecast_desc
from .shopping.descriptor import DESCRIPTOR as _shopping_desc
from .site_analytics.descriptor import DESCRIPTOR as _site_analytics_desc
from .transactions.descriptor import DESCRIPTOR as _transactions_desc

# ---------------------------------------------------------------------------
# FLOW_REGISTRY: built-in flow definitions keyed by name
# ---------------------------------------------------------------------------

FLOW_REGISTRY: dict[str, FlowDefinition] = {
    d.name: d
    for d in [
        _assistant_desc,
        _concierge_desc,
        _forecasting_desc,
        _shipping_desc,
        _loan_forecast_desc,
        _shopping_desc,
        _site_analytics_desc,
        _transactions_desc,
    ]
}

__all__ = [
    "ArrayShape",
    "BooleanShape",
    "EnumShape",
    "NumberShape",
    "ObjectShape",
    "Property",
    "StringShape",
    "prop",
    "ValidationResult",
    "Violation",
    "validate",
    "FlowDefinitionError",
    "FlowError",
    "FlowErrorKind",
    "FlowDefinition",
    "Flow",
    "FlowInvocation",
    "FlowState",
    "ResponseCache",
    "FlowRegistry",
    "get_flow_registry",
    "reset_flow_registry",
    "run_sync",
    "FLOW_REGISTRY",
]
