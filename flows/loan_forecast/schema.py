"""Input/output shapes and fact names for the loan forecasting flow."""

from ..shapes import ArrayShape, NumberShape, ObjectShape, StringShape, prop

INPUT_SHAPE = ObjectShape.of(
    loan_name=prop(StringShape(min_length=1), "Name of the loan for identification."),
    lender_name=prop(
        StringShape(min_length=1),
        "Name of the institution or individual providing the loan.",
    ),
    principal_amount=prop(
        NumberShape(minimum=0),
        "The initial amount of the loan in NPR.",
    ),
    interest_rate=prop(
        NumberShape(minimum=0, maximum=100),
        "The annual interest rate as a percentage (e.g., 5 for 5%).",
    ),
    loan_term_months=prop(
        NumberShape(minimum=1, integer=True),
        "The total term of the loan in months.",
    ),
    start_date=prop(
        StringShape(min_length=1),
        "The start date of the loan in YYYY-MM-DD format.",
    ),
    status=prop(
        StringShape(min_length=1),
        "Current status of the loan (e.g., 'Active', 'Paid Off').",
    ),
    recent_sales_revenue_last_30_days=prop(
        NumberShape(minimum=0),
        "Peak Pulse's sales revenue in NPR for the last 30 days, if available.",
        optional=True,
    ),
)

# Produced by the pre-computation step, never by the caller.
FACTS = (
    "calculated_next_payment_date",
    "calculated_monthly_payment_npr",
    "current_date_for_context",
)

OUTPUT_SHAPE = ObjectShape.of(
    estimated_next_payment_date=prop(
        StringShape(),
        "Estimated next payment date if the loan is active.",
        optional=True,
    ),
    estimated_monthly_payment_npr=prop(
        NumberShape(minimum=0),
        "Roughly estimated monthly payment in NPR.",
        optional=True,
    ),
    financial_outlook_summary=prop(
        StringShape(min_length=1),
        "A brief summary of the financial outlook regarding this loan.",
    ),
    repayment_capacity_assessment=prop(
        StringShape(),
        "Assessment of repayment capacity based on provided sales data.",
        optional=True,
    ),
    potential_risks_or_advice=prop(
        ArrayShape(items=StringShape()),
        "Key potential risks or actionable advice related to this loan.",
    ),
)
