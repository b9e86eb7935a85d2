"""International shipping descriptor: rate and delivery time from Kathmandu."""

from ..descriptor import FlowDefinition
from .schema import INPUT_SHAPE, OUTPUT_SHAPE

PROMPT_TEMPLATE = """\
You are an expert logistics coordinator specializing in international shipping from \
Kathmandu, Nepal.
A customer wants to ship a standard small package (approximately 1kg, dimensions 30cm x \
20cm x 10cm) from Kathmandu, Nepal to {{{destinationCountry}}}.

Provide an estimated shipping cost in Nepali Rupees (NPR) and an estimated delivery time.
Focus on reliable but cost-effective standard international shipping options (e.g., postal \
services, budget couriers).
The rateNPR should be a number.
The estimatedDeliveryTime should be a string (e.g., "7-10 business days").
You can add a brief disclaimer if necessary (e.g., "Estimates may vary based on exact \
location and chosen carrier.").

Output ONLY the JSON object with the fields "rateNPR", "estimatedDeliveryTime", and \
optionally "disclaimer".
Example for France: {"rateNPR": 3500, "estimatedDeliveryTime": "7-12 business days", \
"disclaimer": "Estimate via standard postal service."}
Example for USA: {"rateNPR": 4500, "estimatedDeliveryTime": "10-15 business days"}
"""

CATALOG_ENTRY = (
    "international_shipping\n"
    "  - Input: destinationCountry (text)\n"
    "  - Output: rateNPR (number), estimatedDeliveryTime (text), disclaimer?\n"
    "  - Purpose: Estimate cost and delivery time for a 1kg parcel from Kathmandu."
)

DESCRIPTOR = FlowDefinition(
    name="international_shipping",
    input_shape=INPUT_SHAPE,
    output_shape=OUTPUT_SHAPE,
    prompt_template=PROMPT_TEMPLATE,
    catalog_entry=CATALOG_ENTRY,
)
