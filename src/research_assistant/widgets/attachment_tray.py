"""Pending attachment list; selecting an entry removes it."""

from __future__ import annotations

from collections.abc import Sequence

from textual.message import Message
from textual.widgets import OptionList
from textual.widgets.option_list import Option

from ..attachments import Attachment


def _format_size(size: int) -> str:
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.1f}MB"
    return f"{max(1, size // 1024)}KB"


class AttachmentTray(OptionList):
    """Preview of images waiting to be submitted."""

    class RemoveRequested(Message):
        """Posted when the user selects a pending attachment."""

        def __init__(self, attachment_id: str) -> None:
            super().__init__()
            self.attachment_id = attachment_id

    def show_attachments(self, attachments: Sequence[Attachment]) -> None:
        """Replace the listed options and hide the tray when empty."""
        self.clear_options()
        self.add_options(
            Option(
                f"✕ {item.name} ({item.mime_type}, {_format_size(item.size)})",
                id=item.id,
            )
            for item in attachments
        )
        self.display = bool(attachments)

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        event.stop()
        if event.option.id is not None:
            self.post_message(self.RemoveRequested(event.option.id))
