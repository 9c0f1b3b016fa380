"""Message bubble widget for conversation rendering."""

from __future__ import annotations

from typing import Any

from rich.markdown import Markdown
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widgets import Static

from ..messages import Message, MessageRole

ROLE_LABELS: dict[MessageRole, str] = {
    MessageRole.USER: "You",
    MessageRole.ASSISTANT: "Assistant",
    MessageRole.SYSTEM_ERROR: "Error",
}


class MessageBubble(Vertical):
    """Render a single immutable message with role, timestamp, and attachments."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
        margin-bottom: 1;
    }
    MessageBubble > #header-block {
        padding: 0;
    }
    MessageBubble > #attachment-block {
        color: $text-muted;
        padding: 0 1;
        border-left: solid $panel;
    }
    MessageBubble > #content-block {
        height: auto;
    }
    MessageBubble.role-system-error > #content-block {
        color: $error;
    }
    """

    def __init__(
        self,
        message: Message,
        show_timestamp: bool = True,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.message = message
        self.show_timestamp = show_timestamp
        self.add_class(f"role-{message.role.value}")

    @property
    def role_prefix(self) -> str:
        """Return a human-friendly role label."""
        return ROLE_LABELS[self.message.role]

    @property
    def timestamp(self) -> str:
        if not self.show_timestamp:
            return ""
        return self.message.created_at.astimezone().strftime("%H:%M:%S")

    def _compose_header(self) -> str:
        if self.timestamp:
            return f"**{self.role_prefix}**  _{self.timestamp}_"
        return f"**{self.role_prefix}**"

    def _attachment_summary(self) -> str:
        names = [item.name for item in self.message.attachments]
        if not names:
            return ""
        return "Attached: " + ", ".join(names)

    def compose(self) -> ComposeResult:
        yield Static(Markdown(self._compose_header()), id="header-block")
        summary = self._attachment_summary()
        if summary:
            yield Static(Text(summary, style="dim"), id="attachment-block")
        text = self.message.text.rstrip()
        if self.message.role is MessageRole.ASSISTANT:
            body: Markdown | Text = Markdown(text)
        else:
            body = Text(text)
        yield Static(body, id="content-block")
