"""Input/output shapes for the site analytics summary flow."""

from ..shapes import ArrayShape, NumberShape, ObjectShape, StringShape, prop

INPUT_SHAPE = ObjectShape.of(
    period=prop(
        StringShape(min_length=1),
        'The time period for the analytics (e.g., "Last 7 Days", "Last Month").',
    ),
    totalPageViews=prop(
        NumberShape(minimum=0, integer=True),
        "Total number of page views during the period.",
    ),
    uniqueVisitors=prop(
        NumberShape(minimum=0, integer=True),
        "Number of unique visitors during the period.",
    ),
    conversionRate=prop(
        NumberShape(minimum=0, maximum=1),
        "Overall conversion rate (e.g., 0.05 for 5%).",
    ),
    topPages=prop(
        ArrayShape(items=StringShape(min_length=1)),
        "List of top 2-3 most visited pages/products.",
    ),
    newUsers=prop(
        NumberShape(minimum=0, integer=True),
        "Number of new users acquired during the period.",
    ),
    bounceRate=prop(
        NumberShape(minimum=0, maximum=1),
        "Overall bounce rate (e.g., 0.4 for 40%).",
        optional=True,
    ),
)

_OBSERVATIONS = ArrayShape(items=StringShape(min_length=1))

OUTPUT_SHAPE = ObjectShape.of(
    summary=prop(
        StringShape(min_length=1),
        "A concise summary of the site performance based on the provided metrics.",
    ),
    positiveObservations=prop(_OBSERVATIONS, "Key positive observations or trends."),
    areasForImprovement=prop(
        _OBSERVATIONS, "Areas that might need attention or improvement.",
    ),
    actionableRecommendations=prop(
        _OBSERVATIONS,
        "Specific, actionable recommendations to improve site performance or "
        "engagement based on the data.",
    ),
)
