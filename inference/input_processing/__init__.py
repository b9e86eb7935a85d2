"""Input processing modules - attachment and text/attachment message utilities."""

from .attachments import Attachment, is_data_uri, parse_data_uri
from .message_utils import InputUtils

__all__ = [
    "Attachment",
    "InputUtils",
    "is_data_uri",
    "parse_data_uri",
]
