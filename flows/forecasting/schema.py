"""Input/output shapes for the predictive financial forecasting flow."""

from ..shapes import ObjectShape, StringShape, prop

INPUT_SHAPE = ObjectShape.of(
    historicalData=prop(
        StringShape(min_length=1),
        "Historical financial data for Peak Pulse, including income, expenses, and cash flow.",
    ),
    loanTerms=prop(
        StringShape(min_length=1),
        "Terms of the loan, including loan amount, interest rate, and repayment schedule.",
    ),
)

OUTPUT_SHAPE = ObjectShape.of(
    cashFlowForecast=prop(
        StringShape(min_length=1),
        "A forecast of Peak Pulse cash flow over a specified period.",
    ),
    profitabilityForecast=prop(
        StringShape(min_length=1),
        "A forecast of Peak Pulse profitability over a specified period.",
    ),
)
