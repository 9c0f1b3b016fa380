"""Input row containing the message field, attach button, and send button."""

from __future__ import annotations

from typing import Any

from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input


class InputBox(Vertical):
    """Input region with message field, optional attach button, and send button."""

    class AttachRequested(Message):
        """Posted when the user clicks the image attach button."""

    class SendRequested(Message):
        """Posted when the user clicks the send button."""

    def __init__(
        self,
        placeholder: str = "Type your message...",
        allow_attachments: bool = False,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.placeholder = placeholder
        self.allow_attachments = allow_attachments

    def compose(self):  # type: ignore[override]
        with Horizontal(id="input_row"):
            yield Input(placeholder=self.placeholder, id="message_input")
            if self.allow_attachments:
                yield Button("Image", id="attach_button", variant="default")
            yield Button("Send", id="send_button", variant="success")

    def set_busy(self, busy: bool) -> None:
        """Disable every control while a request is outstanding."""
        for widget in self.query("Input, Button"):
            widget.disabled = busy

    def on_button_pressed(self, event: Button.Pressed) -> None:
        """Forward button clicks as typed messages."""
        if event.button.id == "attach_button":
            event.stop()
            self.post_message(self.AttachRequested())
        elif event.button.id == "send_button":
            event.stop()
            self.post_message(self.SendRequested())
