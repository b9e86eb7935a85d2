"""Error kinds raised by flow invocations and definitions.

Every failed invocation raises ``FlowError`` carrying one ``FlowErrorKind``.
Kinds are terminal for the invocation; nothing is retried internally.
Callers map kinds to distinct messages with ``user_message``.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable, Optional


class FlowErrorKind(Enum):
    """Classified failure of a flow invocation or definition."""
    INVALID_INPUT = "INVALID_INPUT"
    PROMPT_DEFINITION_ERROR = "PROMPT_DEFINITION_ERROR"
    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    EMPTY_GENERATION_RESULT = "EMPTY_GENERATION_RESULT"
    MALFORMED_GENERATION_RESULT = "MALFORMED_GENERATION_RESULT"
    MALFORMED_NUMERIC_FIELD = "MALFORMED_NUMERIC_FIELD"
    MISSING_REQUIRED_FIELD = "MISSING_REQUIRED_FIELD"
    OUTPUT_SCHEMA_VIOLATION = "OUTPUT_SCHEMA_VIOLATION"


_USER_MESSAGES: dict[FlowErrorKind, str] = {
    FlowErrorKind.INVALID_INPUT: (
        "Some of the details you entered are missing or invalid. "
        "Please correct the highlighted fields and try again."
    ),
    FlowErrorKind.PROMPT_DEFINITION_ERROR: (
        "This assistant feature is misconfigured and is unavailable. "
        "Please contact support."
    ),
    FlowErrorKind.TRANSPORT_ERROR: (
        "The AI service could not be reached right now. "
        "Please try again in a few moments."
    ),
    FlowErrorKind.EMPTY_GENERATION_RESULT: (
        "The AI service returned no answer for this request. "
        "Try rephrasing or adding more detail."
    ),
    FlowErrorKind.MALFORMED_GENERATION_RESULT: (
        "The AI service returned an answer we could not read. "
        "Please try again."
    ),
    FlowErrorKind.MALFORMED_NUMERIC_FIELD: (
        "The AI service returned an invalid figure, so no estimate is shown. "
        "Please try again."
    ),
    FlowErrorKind.MISSING_REQUIRED_FIELD: (
        "The AI service returned an incomplete answer. "
        "Please try again."
    ),
    FlowErrorKind.OUTPUT_SCHEMA_VIOLATION: (
        "The AI service returned an answer outside the expected range. "
        "Please try again."
    ),
}


def user_message(kind: FlowErrorKind) -> str:
    """Return the caller-facing message for ``kind``."""
    return _USER_MESSAGES[kind]


class FlowError(Exception):
    """A classified, terminal failure of one flow invocation.

    Attributes:
        kind:         The ``FlowErrorKind``.
        detail:       Developer-facing explanation.
        violations:   Field-level ``Violation`` records (input or output).
        flow_name:    Flow that failed, when known.
        failed_state: Last state reached before failing, e.g.
                      ``"INPUT_VALIDATED"``.
    """

    def __init__(
        self,
        kind: FlowErrorKind,
        detail: str = "",
        *,
        violations: Optional[Iterable[Any]] = None,
        flow_name: str = "",
        failed_state: str = "",
    ):
        self.kind = kind
        self.detail = detail
        self.violations = list(violations or [])
        self.flow_name = flow_name
        self.failed_state = failed_state
        prefix = f"[{flow_name}] " if flow_name else ""
        super().__init__(f"{prefix}{kind.value}: {detail}" if detail else f"{prefix}{kind.value}")

    @property
    def user_message(self) -> str:
        return user_message(self.kind)

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "detail": self.detail,
            "message": self.user_message,
            "flow_name": self.flow_name,
            "failed_state": self.failed_state,
            "violations": [
                v.to_dict() if hasattr(v, "to_dict") else v for v in self.violations
            ],
        }


class FlowDefinitionError(FlowError):
    """A flow definition is inconsistent; raised before registration."""

    def __init__(self, detail: str, *, flow_name: str = ""):
        super().__init__(
            FlowErrorKind.PROMPT_DEFINITION_ERROR, detail, flow_name=flow_name,
        )
