# Unit tests for shape descriptors and the schema validator

from flows.shapes import (
    ArrayShape,
    BooleanShape,
    EnumShape,
    NumberShape,
    ObjectShape,
    StringShape,
    prop,
)
from flows.validator import validate


_ANALYTICS = ObjectShape.of(
    period=prop(StringShape(min_length=1)),
    conversionRate=prop(NumberShape(minimum=0, maximum=1)),
    topPages=prop(ArrayShape(items=StringShape(min_length=1))),
    bounceRate=prop(NumberShape(minimum=0, maximum=1), optional=True),
)


def _codes(result):
    return {v.path: v.code for v in result.violations}


# -----------------------------------------------------------------------
# Shapes
# -----------------------------------------------------------------------

def test_object_shape_of_preserves_order_and_optional_flags():
    assert _ANALYTICS.names == ("period", "conversionRate", "topPages", "bounceRate")
    assert _ANALYTICS.get("bounceRate").optional is True
    assert _ANALYTICS.get("period").optional is False
    assert _ANALYTICS.get("nope") is None


def test_prop_description_lands_in_json_schema():
    shape = ObjectShape.of(
        rateNPR=prop(NumberShape(minimum=0), "Estimated cost in NPR."),
        disclaimer=prop(StringShape(), optional=True),
    )
    schema = shape.to_json_schema()

    assert schema["type"] == "object"
    assert schema["required"] == ["rateNPR"]
    assert schema["properties"]["rateNPR"] == {
        "type": "number",
        "minimum": 0,
        "description": "Estimated cost in NPR.",
    }


def test_enum_and_integer_json_schema():
    assert EnumShape(values=("a", "b")).to_json_schema() == {"type": "string", "enum": ["a", "b"]}
    assert NumberShape(integer=True).to_json_schema() == {"type": "integer"}


# -----------------------------------------------------------------------
# validate()
# -----------------------------------------------------------------------

def test_valid_value_is_normalized():
    result = validate(
        {
            "period": "Last 7 Days",
            "conversionRate": 0,
            "topPages": ["/hoodies", "/caps"],
            "bounceRate": None,
            "unexpected": "dropped",
        },
        _ANALYTICS,
    )

    assert result.ok
    assert result.value == {
        "period": "Last 7 Days",
        "conversionRate": 0,
        "topPages": ["/hoodies", "/caps"],
    }


def test_collects_every_violation_with_paths():
    result = validate(
        {"period": "", "conversionRate": 1.5, "topPages": ["/ok", ""]},
        _ANALYTICS,
    )

    assert not result.ok
    assert _codes(result) == {
        "period": "min_length",
        "conversionRate": "bounds",
        "topPages[1]": "min_length",
    }


def test_missing_required_fields():
    result = validate({}, _ANALYTICS)

    assert _codes(result) == {
        "period": "missing",
        "conversionRate": "missing",
        "topPages": "missing",
    }


def test_type_errors_do_not_raise():
    result = validate("not an object", _ANALYTICS)
    assert not result.ok
    assert result.violations[0].path == "$"
    assert result.violations[0].reason == "expected object, got string"

    result = validate({"flag": "yes"}, ObjectShape.of(flag=BooleanShape()))
    assert _codes(result) == {"flag": "type"}


def test_boolean_is_not_a_number():
    result = validate({"n": True}, ObjectShape.of(n=NumberShape()))
    assert _codes(result) == {"n": "type"}


def test_integer_flag_accepts_integral_floats():
    shape = ObjectShape.of(term=NumberShape(minimum=1, integer=True))

    ok = validate({"term": 12.0}, shape)
    assert ok.ok and ok.value == {"term": 12}
    assert isinstance(ok.value["term"], int)

    assert _codes(validate({"term": 12.5}, shape)) == {"term": "type"}
    assert _codes(validate({"term": 0}, shape)) == {"term": "bounds"}


def test_non_finite_numbers_are_rejected():
    result = validate({"n": float("nan")}, ObjectShape.of(n=NumberShape()))
    assert not result.ok


def test_enum_and_min_items():
    shape = ObjectShape.of(
        status=EnumShape(values=("Active", "Paid Off")),
        tags=ArrayShape(items=StringShape(), min_items=1),
    )
    result = validate({"status": "Closed", "tags": []}, shape)
    assert _codes(result) == {"status": "enum", "tags": "min_items"}


def test_data_uri_format():
    shape = ObjectShape.of(receipt=StringShape(format="data_uri"))

    assert validate({"receipt": "data:image/png;base64,iVBORw0KGgo="}, shape).ok
    bad = validate({"receipt": "https://example.com/receipt.png"}, shape)
    assert _codes(bad) == {"receipt": "format"}


def test_nested_object_paths():
    shape = ObjectShape.of(
        loan=ObjectShape.of(terms=ObjectShape.of(rate=NumberShape(maximum=100))),
    )
    result = validate({"loan": {"terms": {"rate": 120}}}, shape)
    assert _codes(result) == {"loan.terms.rate": "bounds"}
    assert result.violations[0].to_dict() == {
        "path": "loan.terms.rate",
        "reason": "must be <= 100",
        "code": "bounds",
    }


def test_short_array_reports_one_violation_for_the_field():
    shape = ObjectShape.of(tags=prop(ArrayShape(items=NumberShape(), min_items=3)))
    result = validate({"tags": ["a"]}, shape)
    assert [(v.path, v.code) for v in result.violations] == [("tags", "min_items")]


def test_root_violations_use_dollar_path():
    assert validate("", StringShape(min_length=1)).violations[0].path == "$"
    assert validate(5, NumberShape(maximum=1)).violations[0].path == "$"
    assert validate("x", StringShape(format="data_uri")).violations[0].path == "$"
    assert validate([], ArrayShape(items=StringShape(), min_items=1)).violations[0].path == "$"
    assert validate(7, NumberShape()).ok
