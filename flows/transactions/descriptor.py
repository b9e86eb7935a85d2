"""Transaction categorisation descriptor.

Bank statements and receipts arrive as data URIs and reach the model as
attachments, never as inline base64 text.
"""

from ..descriptor import FlowDefinition
from .schema import INPUT_SHAPE, OUTPUT_SHAPE

PROMPT_TEMPLATE = """\
You are an expert accounting assistant. Your task is to categorize transactions based on \
their description, amount, and any available bank statement or receipt data.

Analyze the following transaction details:
Description: {{{transactionDescription}}}
Amount: {{{transactionAmount}}}
{{#if bankStatementDataUri}}
Bank Statement: {{media url=bankStatementDataUri}}
{{/if}}
{{#if receiptDataUri}}
Receipt: {{media url=receiptDataUri}}
{{/if}}

Determine the most appropriate category, sub-category (if applicable), and whether the \
transaction is income or expense. Provide a confidence score between 0 and 1 indicating the \
accuracy of your categorization.

Respond in the following JSON format:
{
  "category": "",
  "subCategory": "",
  "isIncome": true/false,
  "confidence": 0.0
}"""

CATALOG_ENTRY = (
    "transaction_categorization\n"
    "  - Input: transactionDescription, transactionAmount,\n"
    "    bankStatementDataUri? (data URI), receiptDataUri? (data URI)\n"
    "  - Output: category, subCategory?, isIncome (boolean), confidence (0-1)\n"
    "  - Purpose: Categorise a bookkeeping transaction, using attached documents."
)

DESCRIPTOR = FlowDefinition(
    name="transaction_categorization",
    input_shape=INPUT_SHAPE,
    output_shape=OUTPUT_SHAPE,
    prompt_template=PROMPT_TEMPLATE,
    catalog_entry=CATALOG_ENTRY,
)
