"""Input/output shapes for the international shipping estimate flow."""

from ..shapes import NumberShape, ObjectShape, StringShape, prop

INPUT_SHAPE = ObjectShape.of(
    destinationCountry=prop(
        StringShape(min_length=1),
        "The destination country for the shipment.",
    ),
)

OUTPUT_SHAPE = ObjectShape.of(
    rateNPR=prop(
        NumberShape(minimum=0),
        "Estimated shipping cost in Nepali Rupees (NPR).",
    ),
    estimatedDeliveryTime=prop(
        StringShape(min_length=1),
        'Estimated delivery time, e.g. "5-7 business days", "1-2 weeks".',
    ),
    disclaimer=prop(
        StringShape(),
        "Any disclaimers or important notes about the estimate.",
        optional=True,
    ),
)
