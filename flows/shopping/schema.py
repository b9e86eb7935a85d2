"""Input/output shapes for the personal shopping recommendations flow."""

from ..shapes import ObjectShape, StringShape, prop

INPUT_SHAPE = ObjectShape.of(
    userPreferences=prop(StringShape(min_length=1), "The user's style and preferences."),
    pastPurchases=prop(StringShape(), "The user's past purchases."),
)

OUTPUT_SHAPE = ObjectShape.of(
    recommendations=prop(
        StringShape(),
        "Personalized shopping recommendations for the user.",
    ),
)
