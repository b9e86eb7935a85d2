"""AI assistant descriptor: Q&A about Peak Pulse accounting."""

from ..descriptor import FlowDefinition
from .schema import INPUT_SHAPE, OUTPUT_SHAPE

PROMPT_TEMPLATE = """\
You are a helpful AI assistant answering questions about Peak Pulse accounting. \
Use the provided context to answer the question accurately and concisely.

Context: Peak Pulse is a Nepali clothing brand that blends traditional Nepali \
craftsmanship with contemporary streetwear aesthetics. The brand has core accounting \
modules (general ledger, invoicing, expenses, inventory, reporting) and loan management \
integration.

Question: {{{question}}}

Answer: """

CATALOG_ENTRY = (
    "ai_assistant\n"
    "  - Input: question (text)\n"
    "  - Output: answer (text)\n"
    "  - Purpose: Answer questions about Peak Pulse accounting modules and loans."
)

DESCRIPTOR = FlowDefinition(
    name="ai_assistant",
    input_shape=INPUT_SHAPE,
    output_shape=OUTPUT_SHAPE,
    prompt_template=PROMPT_TEMPLATE,
    catalog_entry=CATALOG_ENTRY,
)
