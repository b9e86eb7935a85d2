"""
Message Utilities - text / attachment chat message assembly.

Provides utilities for building OpenAI-style chat messages from a rendered
prompt and its attachments.  Images go out as ``image_url`` parts and PDFs
as ``file`` parts; other types cannot be sent in a chat message and are
dropped with a warning.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .attachments import Attachment

logger = logging.getLogger(__name__)


class InputUtils:
    """General utilities for text/attachment message preprocessing."""

    @staticmethod
    def attachment_part(attachment: Attachment, index: int = 1) -> Optional[Dict[str, Any]]:
        """Content part for one attachment, or None if its type is unsupported."""
        if attachment.is_image:
            return {"type": "image_url", "image_url": {"url": attachment.to_data_uri()}}
        if attachment.mime_type.lower() == "application/pdf":
            return {
                "type": "file",
                "file": {
                    "filename": f"attachment-{index}.pdf",
                    "file_data": attachment.to_data_uri(),
                },
            }
        return None

    @staticmethod
    def create_multimodal_message(
        text: str,
        attachments: Sequence[Attachment] = (),
        role: str = "user",
    ) -> Dict[str, Any]:
        """
        Create a single chat message for LLM APIs.

        Plain-text content is used when no attachment can be sent, so
        text-only models never see a content list.

        Args:
            text: Text content
            attachments: Binary attachments to append after the text
            role: Message role (default: "user")

        Returns:
            Message dictionary compatible with OpenAI-style format
        """
        parts: List[Dict[str, Any]] = []
        for index, attachment in enumerate(attachments, start=1):
            part = InputUtils.attachment_part(attachment, index)
            if part is None:
                logger.warning(
                    "[InputUtils] Skipping attachment #%d: %s cannot be sent in a chat message",
                    index, attachment.mime_type,
                )
                continue
            parts.append(part)

        if not parts:
            return {"role": role, "content": text}
        return {"role": role, "content": [{"type": "text", "text": text}, *parts]}
