"""
Attachment Utilities - data URI parsing

Request fields that carry binary content (a receipt photo, a bank statement
scan) arrive as data URIs.  They are handed to the generation backend as
typed attachments instead of being inlined into prompt text.
"""

from __future__ import annotations

import base64
import binascii
import re
from dataclasses import dataclass

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)(?:;[\w.-]+=[^;,]+)*;base64,(?P<data>[A-Za-z0-9+/=\s]*)$",
    re.DOTALL,
)


@dataclass(frozen=True)
class Attachment:
    """Binary content referenced from a prompt.

    Attributes:
        mime_type: e.g. ``"image/png"``.
        data:      Base64 payload without the ``data:`` prefix.
    """

    mime_type: str
    data: str

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    def to_data_uri(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


def is_data_uri(value: object) -> bool:
    """True for ``data:<mime>;base64,<payload>`` strings with a valid payload."""
    if not isinstance(value, str):
        return False
    match = _DATA_URI_RE.match(value)
    if match is None:
        return False
    try:
        base64.b64decode(match.group("data"), validate=False)
    except (binascii.Error, ValueError):
        return False
    return True


def parse_data_uri(value: str) -> Attachment:
    """Split a data URI into an ``Attachment``.

    Raises:
        ValueError: If ``value`` is not a base64 data URI.
    """
    match = _DATA_URI_RE.match(value) if isinstance(value, str) else None
    if match is None:
        raise ValueError("Not a base64 data URI")
    data = re.sub(r"\s+", "", match.group("data"))
    return Attachment(mime_type=match.group("mime"), data=data)

