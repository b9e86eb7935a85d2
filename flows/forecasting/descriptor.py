"""Predictive forecasting descriptor: cash flow and profitability outlook."""

from ..descriptor import FlowDefinition
from .schema import INPUT_SHAPE, OUTPUT_SHAPE

PROMPT_TEMPLATE = """\
You are an expert financial analyst specializing in creating financial forecasts for \
businesses.

Based on the historical financial data and loan terms provided, generate insightful \
financial forecasts for Peak Pulse, predicting cash flow and profitability.

Historical Data: {{{historicalData}}}
Loan Terms: {{{loanTerms}}}

Return "cashFlowForecast" and "profitabilityForecast" as prose."""

CATALOG_ENTRY = (
    "predictive_forecasting\n"
    "  - Input: historicalData (text), loanTerms (text)\n"
    "  - Output: cashFlowForecast (text), profitabilityForecast (text)\n"
    "  - Purpose: Forecast cash flow and profitability given a loan."
)

DESCRIPTOR = FlowDefinition(
    name="predictive_forecasting",
    input_shape=INPUT_SHAPE,
    output_shape=OUTPUT_SHAPE,
    prompt_template=PROMPT_TEMPLATE,
    catalog_entry=CATALOG_ENTRY,
)
