"""Input/output shapes for the chatbot concierge flow."""

from ..shapes import BooleanShape, ObjectShape, StringShape, prop

INPUT_SHAPE = ObjectShape.of(
    query=prop(StringShape(min_length=1), "The customer query or admin request."),
    orderId=prop(
        StringShape(),
        "The order ID, if applicable (for customer queries).",
        optional=True,
    ),
    productId=prop(
        StringShape(),
        "The product ID, if applicable (for customer queries).",
        optional=True,
    ),
    isAdmin=prop(
        BooleanShape(),
        "True if the query is from an admin user seeking strategic advice.",
        optional=True,
    ),
)

OUTPUT_SHAPE = ObjectShape.of(
    response=prop(StringShape(), "The chatbot response to the query."),
)
