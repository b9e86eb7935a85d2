"""Input/output shapes for the transaction categorisation flow."""

from ..shapes import BooleanShape, NumberShape, ObjectShape, StringShape, prop

_DATA_URI_HINT = (
    "as a data URI that must include a MIME type and use Base64 encoding. "
    "Expected format: 'data:<mimetype>;base64,<encoded_data>'."
)

INPUT_SHAPE = ObjectShape.of(
    transactionDescription=prop(
        StringShape(min_length=1),
        "The description of the transaction.",
    ),
    transactionAmount=prop(NumberShape(), "The amount of the transaction."),
    bankStatementDataUri=prop(
        StringShape(format="data_uri"),
        f"A bank statement, {_DATA_URI_HINT}",
        optional=True,
    ),
    receiptDataUri=prop(
        StringShape(format="data_uri"),
        f"A receipt, {_DATA_URI_HINT}",
        optional=True,
    ),
)

OUTPUT_SHAPE = ObjectShape.of(
    category=prop(
        StringShape(min_length=1),
        'The category of the transaction (e.g., "Rent", "Supplies", "Sales").',
    ),
    subCategory=prop(
        StringShape(),
        'A more specific sub-category (e.g., "Office Supplies", "Raw Materials").',
        optional=True,
    ),
    isIncome=prop(BooleanShape(), "Whether the transaction is income or expense."),
    confidence=prop(
        NumberShape(minimum=0, maximum=1),
        "A confidence score between 0 and 1 indicating the accuracy of the categorization.",
    ),
)
