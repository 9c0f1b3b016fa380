"""Pending image attachments and their transport encoding.

The store owns the pending set exclusively: the session and the gateway only
ever see immutable :class:`Attachment` snapshots and encoded copies.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
import logging
import mimetypes
from pathlib import Path
from urllib.parse import unquote, urlparse
import uuid

from .exceptions import (
    AttachmentTooLargeError,
    InvalidAttachmentError,
    InvalidAttachmentKind,
)

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_IMAGE_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class SelectedFile:
    """A file picked or dropped by the user, before validation."""

    name: str
    mime_type: str
    data: bytes


@dataclass(frozen=True)
class Attachment:
    """A validated image awaiting (or already part of) a submission."""

    name: str
    mime_type: str
    data: bytes = field(repr=False)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def size(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class InlinePayload:
    """Encoded bytes plus declared media type, ready for the model gateway."""

    mime_type: str
    data: bytes = field(repr=False)


def is_image_type(mime_type: str | None) -> bool:
    """Return True when the declared media type is an image type."""
    return bool(mime_type) and mime_type.strip().lower().startswith("image/")


def normalize_dropped_path(raw: str) -> Path:
    """Turn a pasted or dropped path into a filesystem path.

    Terminals paste dropped files as plain paths, quoted paths, or
    ``file://`` URIs depending on the emulator.
    """
    candidate = raw.strip()
    if len(candidate) >= 2 and candidate[0] == candidate[-1] and candidate[0] in "'\"":
        candidate = candidate[1:-1]
    if candidate.startswith("file://"):
        candidate = unquote(urlparse(candidate).path)
    return Path(candidate).expanduser()


class AttachmentStore:
    """Hold pending image attachments in selection order."""

    def __init__(self, *, max_image_bytes: int = DEFAULT_MAX_IMAGE_BYTES) -> None:
        self.max_image_bytes = max_image_bytes
        self._pending: list[Attachment] = []

    def __len__(self) -> int:
        return len(self._pending)

    def __bool__(self) -> bool:
        return bool(self._pending)

    @property
    def pending(self) -> tuple[Attachment, ...]:
        """Return an ordered snapshot of pending attachments."""
        return tuple(self._pending)

    def add(self, file: SelectedFile) -> Attachment:
        """Validate ``file`` and add it to the pending set.

        Raises ``InvalidAttachmentKind`` for non-image media types and
        ``AttachmentTooLargeError`` above the size limit. The pending set is
        untouched on failure.
        """
        if not is_image_type(file.mime_type):
            LOGGER.warning(
                "attachments.rejected.kind",
                extra={
                    "event": "attachments.rejected.kind",
                    "file_name": file.name,
                    "mime_type": file.mime_type,
                },
            )
            raise InvalidAttachmentKind(
                f"{file.name} is not an image ({file.mime_type or 'unknown type'})."
            )
        if len(file.data) > self.max_image_bytes:
            max_mb = self.max_image_bytes / (1024 * 1024)
            LOGGER.warning(
                "attachments.rejected.size",
                extra={
                    "event": "attachments.rejected.size",
                    "file_name": file.name,
                    "size": len(file.data),
                },
            )
            raise AttachmentTooLargeError(f"Image too large (max {max_mb:.1f}MB).")

        attachment = Attachment(
            name=file.name,
            mime_type=file.mime_type.strip().lower(),
            data=file.data,
        )
        self._pending.append(attachment)
        LOGGER.info(
            "attachments.added",
            extra={
                "event": "attachments.added",
                "attachment_id": attachment.id,
                "mime_type": attachment.mime_type,
                "size": attachment.size,
            },
        )
        return attachment

    def add_path(self, path: str | Path) -> Attachment:
        """Read a file from disk (picker or drag-and-drop) and add it."""
        resolved = normalize_dropped_path(str(path))
        if not resolved.exists():
            raise InvalidAttachmentError(f"Image not found: {path}")
        if not resolved.is_file():
            raise InvalidAttachmentError(f"Not a file: {path}")

        mime_type, _ = mimetypes.guess_type(resolved.name)
        if not is_image_type(mime_type):
            # Checked before reading so large non-images are never loaded.
            return self.add(SelectedFile(resolved.name, mime_type or "", b""))
        if resolved.stat().st_size > self.max_image_bytes:
            max_mb = self.max_image_bytes / (1024 * 1024)
            raise AttachmentTooLargeError(f"Image too large (max {max_mb:.1f}MB).")
        try:
            data = resolved.read_bytes()
        except OSError as exc:
            raise InvalidAttachmentError(f"Unable to read {resolved.name}: {exc}") from exc
        return self.add(SelectedFile(resolved.name, mime_type or "", data))

    def remove(self, attachment_id: str) -> None:
        """Remove a pending attachment by id; unknown ids are ignored."""
        self._pending = [item for item in self._pending if item.id != attachment_id]

    def clear(self) -> None:
        """Drop every pending attachment."""
        self._pending.clear()

    @staticmethod
    def encode(attachment: Attachment) -> bytes:
        """Return the base64 transport encoding of the attachment bytes."""
        return base64.b64encode(attachment.data)

    @classmethod
    def payload(cls, attachment: Attachment) -> InlinePayload:
        """Return the encoded bytes paired with the declared media type."""
        return InlinePayload(mime_type=attachment.mime_type, data=cls.encode(attachment))
