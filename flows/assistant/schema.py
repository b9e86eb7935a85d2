"""Input/output shapes for the accounting assistant flow."""

from ..shapes import ObjectShape, StringShape, prop

INPUT_SHAPE = ObjectShape.of(
    question=prop(
        StringShape(min_length=1),
        "The user question about Peak Pulse accounting.",
    ),
)

OUTPUT_SHAPE = ObjectShape.of(
    answer=prop(StringShape(), "The answer to the user question."),
)
