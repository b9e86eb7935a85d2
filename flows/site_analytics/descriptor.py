"""Site analytics descriptor: summarise storefront traffic metrics."""

from ..descriptor import FlowDefinition
from .schema import INPUT_SHAPE, OUTPUT_SHAPE

PROMPT_TEMPLATE = """\
You are an expert Web Analyst for an e-commerce brand called "Peak Pulse", which sells \
Nepali-inspired contemporary streetwear.
Analyze the following website performance metrics for the period: {{{period}}}.

Metrics:
- Total Page Views: {{{totalPageViews}}}
- Unique Visitors: {{{uniqueVisitors}}}
- New Users: {{{newUsers}}}
- Conversion Rate: {{{conversionRate}}} (as a decimal, e.g., 0.05 for 5%)
{{#if bounceRate includeZero=true~}}
- Bounce Rate: {{{bounceRate}}} (as a decimal, e.g., 0.4 for 40%)
{{/if~}}
- Top Pages/Products: {{#each topPages}}{{{this}}}{{#unless @last}}, {{/unless}}\
{{else}}none recorded{{/each}}

Based on these metrics, provide:
1.  A concise overall 'summary' of the site's performance for Peak Pulse.
2.  A list of 'positiveObservations' (2-3 key positive points or trends).
3.  A list of 'areasForImprovement' (2-3 areas that might need attention).
4.  A list of 'actionableRecommendations' (2-3 specific, actionable steps Peak Pulse could \
take to improve engagement, conversions, or user experience).

Focus on insights relevant to an e-commerce clothing brand. Be clear and constructive.
Output ONLY the JSON object as specified by the output schema.
"""

CATALOG_ENTRY = (
    "site_analytics\n"
    "  - Input: period, totalPageViews, uniqueVisitors, conversionRate (0-1),\n"
    "    topPages[], newUsers, bounceRate? (0-1)\n"
    "  - Output: summary, positiveObservations[], areasForImprovement[],\n"
    "    actionableRecommendations[]\n"
    "  - Purpose: Turn raw traffic metrics into observations and next steps."
)

DESCRIPTOR = FlowDefinition(
    name="site_analytics",
    input_shape=INPUT_SHAPE,
    output_shape=OUTPUT_SHAPE,
    prompt_template=PROMPT_TEMPLATE,
    catalog_entry=CATALOG_ENTRY,
)
