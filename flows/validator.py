"""Schema validator: interprets shape descriptors against plain values.

``validate()`` never raises for a bad value.  It walks the whole value and
collects every violation (one per offending leaf) so the caller can report all
problems at once.  On success the returned value is normalised: unknown
object keys are dropped, optional ``None`` members are omitted and integral
floats declared as integers become ``int``.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable

from inference.input_processing.attachments import is_data_uri

from .shapes import (
    ArrayShape,
    BooleanShape,
    EnumShape,
    NumberShape,
    ObjectShape,
    StringShape,
)


@dataclass(frozen=True)
class Violation:
    """A single field-level problem.

    Attributes:
        path:   Dotted / indexed location, e.g. ``"topPages[2]"``.
        reason: Human-readable explanation.
        code:   Machine-readable category: ``missing``, ``type``,
                ``bounds``, ``min_length``, ``max_length``, ``enum``,
                ``format``, ``min_items`` (coercion adds
                ``malformed_number``).
    """

    path: str
    reason: str
    code: str = "type"

    def to_dict(self) -> dict[str, str]:
        return {"path": self.path, "reason": self.reason, "code": self.code}


@dataclass
class ValidationResult:
    ok: bool
    value: Any = None
    violations: list[Violation] = field(default_factory=list)


def validate(value: Any, shape: Any) -> ValidationResult:
    violations: list[Violation] = []
    normalized = _check(value, shape, "", violations)
    if violations:
        return ValidationResult(ok=False, violations=violations)
    return ValidationResult(ok=True, value=normalized)


def join_path(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _where(path: str) -> str:
    # The root value itself is reported as "$".
    return path or "$"


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def _type_violation(path: str, expected: str, value: Any) -> Violation:
    return Violation(
        path=_where(path),
        reason=f"expected {expected}, got {_type_name(value)}",
        code="type",
    )


# ---------------------------------------------------------------------------
# Per-kind checkers
# ---------------------------------------------------------------------------

def _check_string(value: Any, shape: StringShape, path: str, out: list[Violation]) -> Any:
    if not isinstance(value, str):
        out.append(_type_violation(path, "string", value))
        return value
    if shape.min_length is not None and len(value) < shape.min_length:
        out.append(Violation(
            _where(path), f"must be at least {shape.min_length} characters", "min_length",
        ))
    elif shape.max_length is not None and len(value) > shape.max_length:
        out.append(Violation(
            _where(path), f"must be at most {shape.max_length} characters", "max_length",
        ))
    elif shape.format == "data_uri" and not is_data_uri(value):
        out.append(Violation(
            _where(path), "must be a data URI of the form data:<mimetype>;base64,<data>", "format",
        ))
    return value


def _check_number(value: Any, shape: NumberShape, path: str, out: list[Violation]) -> Any:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        out.append(_type_violation(path, "number", value))
        return value
    if not math.isfinite(value):
        out.append(Violation(_where(path), "must be a finite number", "type"))
        return value
    if shape.integer:
        if not float(value).is_integer():
            out.append(_type_violation(path, "integer", value))
            return value
        value = int(value)
    if shape.minimum is not None and value < shape.minimum:
        out.append(Violation(_where(path), f"must be >= {shape.minimum:g}", "bounds"))
    elif shape.maximum is not None and value > shape.maximum:
        out.append(Violation(_where(path), f"must be <= {shape.maximum:g}", "bounds"))
    return value


def _check_boolean(value: Any, shape: BooleanShape, path: str, out: list[Violation]) -> Any:
    if not isinstance(value, bool):
        out.append(_type_violation(path, "boolean", value))
    return value


def _check_enum(value: Any, shape: EnumShape, path: str, out: list[Violation]) -> Any:
    if not isinstance(value, str) or value not in shape.values:
        out.append(Violation(
            _where(path), f"must be one of {', '.join(shape.values)}", "enum",
        ))
    return value


def _check_array(value: Any, shape: ArrayShape, path: str, out: list[Violation]) -> Any:
    if not isinstance(value, (list, tuple)):
        out.append(_type_violation(path, "array", value))
        return value
    if shape.min_items is not None and len(value) < shape.min_items:
        out.append(Violation(
            _where(path), f"must contain at least {shape.min_items} items", "min_items",
        ))
        return list(value)
    return [
        _check(item, shape.items, f"{path}[{i}]", out)
        for i, item in enumerate(value)
    ]


def _check_object(value: Any, shape: ObjectShape, path: str, out: list[Violation]) -> Any:
    if not isinstance(value, Mapping):
        out.append(_type_violation(path, "object", value))
        return value
    normalized: dict[str, Any] = {}
    for prop in shape.properties:
        member_path = join_path(path, prop.name)
        member = value.get(prop.name)
        if member is None:
            if not prop.optional:
                out.append(Violation(member_path, "required field missing", "missing"))
            continue
        normalized[prop.name] = _check(member, prop.shape, member_path, out)
    return normalized


_CHECKERS: dict[str, Callable[[Any, Any, str, list[Violation]], Any]] = {
    "string": _check_string,
    "number": _check_number,
    "boolean": _check_boolean,
    "enum": _check_enum,
    "array": _check_array,
    "object": _check_object,
}


def _check(value: Any, shape: Any, path: str, out: list[Violation]) -> Any:
    return _CHECKERS[shape.kind](value, shape, path, out)
