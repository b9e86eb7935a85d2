"""Personal shopping descriptor."""

from ..descriptor import FlowDefinition
from .schema import INPUT_SHAPE, OUTPUT_SHAPE

PROMPT_TEMPLATE = """\
You are an expert personal shopping assistant. Your task is to provide personalized \
shopping recommendations based on the user's preferences and past purchases.

Analyze the following user details:
Preferences: {{{userPreferences}}}
Past Purchases: {{#if pastPurchases}}{{{pastPurchases}}}{{else}}None yet{{/if}}

Provide personalized shopping recommendations for the user.

Recommendations: """

CATALOG_ENTRY = (
    "shopping_recommendations\n"
    "  - Input: userPreferences (text), pastPurchases (text)\n"
    "  - Output: recommendations (text)\n"
    "  - Purpose: Personal shopping suggestions from style and purchase history."
)

DESCRIPTOR = FlowDefinition(
    name="shopping_recommendations",
    input_shape=INPUT_SHAPE,
    output_shape=OUTPUT_SHAPE,
    prompt_template=PROMPT_TEMPLATE,
    catalog_entry=CATALOG_ENTRY,
)
