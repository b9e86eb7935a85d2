"""Output coercion: turn raw generation text into a validated output value.

Models asked for JSON still produce fenced blocks, numbers as strings
(``"4,500"``) or bare prose.  ``coerce_and_validate`` repairs what can be
repaired without guessing, runs the schema validator on every result and
classifies anything it cannot fix.  It never raises for a bad generation.

Classification precedence:
  1. blank text, ``null`` or ``{}``          -> EMPTY_GENERATION_RESULT
  2. text that is not JSON (and not repairable) -> MALFORMED_GENERATION_RESULT
  3. a numeric field that does not parse       -> MALFORMED_NUMERIC_FIELD
  4. a required field is missing               -> MISSING_REQUIRED_FIELD
  5. any other violation                       -> OUTPUT_SCHEMA_VIOLATION
"""

from __future__ import annotations

import json
import math
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import FlowErrorKind
from .shapes import ObjectShape
from .validator import Violation, join_path, validate

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_INTEGER_RE = re.compile(r"^[+-]?\d+$")
# Placeholders a model writes for "no value" in an optional field.
_ABSENT_MARKERS = frozenset({"", "n/a", "na", "none", "null"})


@dataclass
class CoercionResult:
    ok: bool
    value: Any = None
    kind: Optional[FlowErrorKind] = None
    detail: str = ""
    violations: list[Violation] = field(default_factory=list)

    @classmethod
    def failure(
        cls,
        kind: FlowErrorKind,
        detail: str,
        violations: Optional[list[Violation]] = None,
    ) -> "CoercionResult":
        return cls(ok=False, kind=kind, detail=detail, violations=violations or [])


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    content = text.strip()
    if content.startswith("```"):
        content = content.split("\n", 1)[1] if "\n" in content else content[3:]
    if content.endswith("```"):
        content = content.rsplit("```", 1)[0]
    return content.strip()


def parse_number(text: str) -> Optional[float | int]:
    """Parse a numeric-looking string (``" 3,500.50 "``); None when it is not one."""
    cleaned = text.strip().replace(",", "")
    if not _NUMBER_RE.match(cleaned):
        return None
    if _INTEGER_RE.match(cleaned):
        return int(cleaned)
    number = float(cleaned)
    if not math.isfinite(number):
        return None
    return number


def _single_text_property(shape: Any) -> Optional[str]:
    """Name of the only required property when it is a string, else None."""
    if not isinstance(shape, ObjectShape):
        return None
    required = [p for p in shape.properties if not p.optional]
    if len(required) == 1 and required[0].shape.kind == "string":
        return required[0].name
    return None


def _is_empty(value: Any) -> bool:
    if isinstance(value, str):
        return not value.strip()
    return value is None or (isinstance(value, Mapping) and not value)


# ---------------------------------------------------------------------------
# Lenient conversion pass (runs before validation)
# ---------------------------------------------------------------------------

def _coerce(value: Any, shape: Any, path: str, malformed: list[Violation]) -> Any:
    kind = shape.kind
    if kind == "number" and isinstance(value, str):
        number = parse_number(value)
        if number is None:
            malformed.append(Violation(
                path or "$", f"could not parse {value!r} as a number", "malformed_number",
            ))
            return value
        return number
    if kind == "boolean" and isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("true", "false"):
            return lowered == "true"
        return value
    if kind == "array" and isinstance(value, list):
        return [
            _coerce(item, shape.items, f"{path}[{i}]", malformed)
            for i, item in enumerate(value)
        ]
    if kind == "object" and isinstance(value, Mapping):
        coerced: dict[str, Any] = {}
        for prop in shape.properties:
            member = value.get(prop.name)
            if member is None:
                continue
            if (
                prop.optional
                and prop.shape.kind == "number"
                and isinstance(member, str)
                and member.strip().lower() in _ABSENT_MARKERS
            ):
                continue
            coerced[prop.name] = _coerce(
                member, prop.shape, join_path(path, prop.name), malformed,
            )
        return coerced
    return value


def coerce_and_validate(raw: Any, output_shape: Any) -> CoercionResult:
    """Parse, repair and validate raw generation output against ``output_shape``."""
    if isinstance(raw, (Mapping, list)):
        parsed = raw
    else:
        text = strip_code_fences("" if raw is None else str(raw))
        if not text:
            return CoercionResult.failure(
                FlowErrorKind.EMPTY_GENERATION_RESULT, "generation returned no content",
            )
        text_field = _single_text_property(output_shape)
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as exc:
            if text_field is None:
                return CoercionResult.failure(
                    FlowErrorKind.MALFORMED_GENERATION_RESULT,
                    f"generation is not valid JSON: {exc.msg} at position {exc.pos}",
                )
            parsed = {text_field: text}
        else:
            if isinstance(parsed, str) and text_field is not None and parsed.strip():
                parsed = {text_field: parsed}

    if _is_empty(parsed):
        return CoercionResult.failure(
            FlowErrorKind.EMPTY_GENERATION_RESULT, "generation returned an empty result",
        )

    malformed: list[Violation] = []
    coerced = _coerce(parsed, output_shape, "", malformed)
    if malformed:
        return CoercionResult.failure(
            FlowErrorKind.MALFORMED_NUMERIC_FIELD,
            "; ".join(f"{v.path}: {v.reason}" for v in malformed),
            malformed,
        )

    result = validate(coerced, output_shape)
    if result.ok:
        return CoercionResult(ok=True, value=result.value)

    detail = "; ".join(f"{v.path}: {v.reason}" for v in result.violations)
    if any(v.code == "missing" for v in result.violations):
        return CoercionResult.failure(
            FlowErrorKind.MISSING_REQUIRED_FIELD, detail, result.violations,
        )
    return CoercionResult.failure(
        FlowErrorKind.OUTPUT_SCHEMA_VIOLATION, detail, result.violations,
    )
