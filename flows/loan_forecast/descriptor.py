"""Loan forecasting descriptor: outlook, repayment capacity and risks.

The next payment date and a rough monthly payment are computed here and
handed to the model as facts to confirm or refine, so calendar and
interest arithmetic never depend on the model.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping

from ..descriptor import FlowDefinition
from ..precompute import approximate_periodic_payment, next_scheduled_date, round_half_up
from .schema import FACTS, INPUT_SHAPE, OUTPUT_SHAPE


def compute_loan_facts(loan: Mapping[str, Any], today: date) -> dict[str, Any]:
    """Pre-compute the loan facts for one validated request.

    ``calculated_monthly_payment_npr`` is set for active loans only and is
    rounded half-up to whole rupees.
    """
    schedule = next_scheduled_date(
        loan["start_date"], loan["loan_term_months"], loan["status"], today,
    )
    monthly_payment = None
    if str(loan["status"]).strip().lower() == "active":
        monthly_payment = round_half_up(approximate_periodic_payment(
            loan["principal_amount"], loan["interest_rate"], loan["loan_term_months"],
        ))
    return {
        "calculated_next_payment_date": schedule.as_fact(),
        "calculated_monthly_payment_npr": monthly_payment,
        "current_date_for_context": today.isoformat(),
    }


PROMPT_TEMPLATE = """\
You are an expert financial advisor for "Peak Pulse", a Nepali clothing brand.
Analyze the following loan details and provide insights. Today's date is \
{{{current_date_for_context}}}.

Loan Details:
- Loan Name: {{{loan_name}}}
- Lender: {{{lender_name}}}
- Principal: NPR {{{principal_amount}}}
- Annual Interest Rate: {{{interest_rate}}}%
- Term: {{{loan_term_months}}} months
- Start Date: {{{start_date}}}
- Current Status: {{{status}}}
{{#if recent_sales_revenue_last_30_days includeZero=true}}
- Recent Sales Revenue (Last 30 Days for Peak Pulse): NPR {{{recent_sales_revenue_last_30_days}}}
{{/if}}

Deterministic Pre-calculations (for your context, verify or refine if needed):
- Estimated Next Payment Date (if active): {{#if calculated_next_payment_date}}\
{{{calculated_next_payment_date}}}{{else}}N/A (Not Active or Past Term){{/if}}
- Simplified Estimated Monthly Payment (NPR): {{#if calculated_monthly_payment_npr}}\
{{{calculated_monthly_payment_npr}}}{{else}}N/A (Not Active){{/if}}

Instructions:
1.  **Financial Outlook Summary:** Provide a concise summary of the financial outlook \
concerning this loan. Consider its terms and status.
2.  **Repayment Capacity Assessment:** {{#if recent_sales_revenue_last_30_days includeZero=true}}\
Based on the recent sales revenue, assess Peak Pulse's capacity to meet the estimated monthly \
payments for this loan. Be realistic.{{else}}Sales data not provided; cannot assess repayment \
capacity based on current sales.{{/if}}
3.  **Potential Risks or Advice:** List 2-3 key potential risks or actionable pieces of \
advice for Peak Pulse regarding this loan.
4.  **Estimated Next Payment Date:** If the loan is 'Active' and a future payment is \
expected, confirm or refine the pre-calculated estimated next payment date. If not active or \
term ended, omit the field.
5.  **Estimated Monthly Payment (NPR):** If the loan is 'Active', confirm or refine the \
pre-calculated estimated monthly payment. If not active, omit the field.

Output ONLY the JSON object as specified by the output schema. Ensure amounts are numbers.
"""

CATALOG_ENTRY = (
    "loan_forecasting\n"
    "  - Input: loan_name, lender_name, principal_amount, interest_rate (0-100),\n"
    "    loan_term_months, start_date (YYYY-MM-DD), status,\n"
    "    recent_sales_revenue_last_30_days?\n"
    "  - Output: financial_outlook_summary, potential_risks_or_advice[],\n"
    "    estimated_next_payment_date?, estimated_monthly_payment_npr?,\n"
    "    repayment_capacity_assessment?\n"
    "  - Purpose: Advise on a business loan using pre-computed schedule facts."
)

DESCRIPTOR = FlowDefinition(
    name="loan_forecasting",
    input_shape=INPUT_SHAPE,
    output_shape=OUTPUT_SHAPE,
    prompt_template=PROMPT_TEMPLATE,
    precompute=compute_loan_facts,
    facts=FACTS,
    catalog_entry=CATALOG_ENTRY,
)
