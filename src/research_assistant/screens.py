"""Landing, module, and attachment screens."""

from __future__ import annotations

import logging
from typing import Any

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal
from textual.screen import ModalScreen, Screen
from textual.widgets import Button, Footer, Header, Input, Static

from .exceptions import InvalidAttachmentError
from .messages import Message
from .profiles import ModuleProfile
from .session import ConversationSession
from .state import ConversationState
from .widgets import AttachmentTray, ConversationView, InputBox

LOGGER = logging.getLogger(__name__)


class LandingScreen(Screen[None]):
    """Entry screen offering the chat and image analysis modules."""

    CSS = """
    LandingScreen {
        align: center middle;
    }

    #landing-dialog {
        width: 72;
        height: auto;
        padding: 1 2;
        border: round $panel;
        background: $surface;
    }

    #landing-title {
        text-style: bold;
        padding-bottom: 1;
    }

    #landing-actions {
        height: auto;
        padding-top: 1;
    }

    #landing-actions Button {
        margin-right: 2;
    }
    """

    BINDINGS = [
        Binding("c", "open_module('chat')", "Chat"),
        Binding("i", "open_module('image')", "Images"),
    ]

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="landing-dialog"):
            yield Static("Social Science Research Assistant", id="landing-title")
            yield Static(
                "Ask a question and get a plain-language explanation, or upload "
                "images for a cultural, social, and historical reading."
            )
            with Horizontal(id="landing-actions"):
                yield Button("Ask a question", id="open_chat", variant="primary")
                yield Button("Analyze images", id="open_image", variant="success")
        yield Footer()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "open_chat":
            event.stop()
            self.action_open_module("chat")
        elif event.button.id == "open_image":
            event.stop()
            self.action_open_module("image")

    def action_open_module(self, key: str) -> None:
        self.app.open_module(key)  # type: ignore[attr-defined]


class AttachImageScreen(ModalScreen[str | None]):
    """Prompt for an image path; dropping a file onto the terminal pastes one."""

    CSS = """
    AttachImageScreen {
        align: center middle;
    }

    #attach-dialog {
        width: 70;
        height: auto;
        padding: 1 2;
        border: round $panel;
        background: $surface;
    }

    #attach-title {
        padding-bottom: 1;
        text-style: bold;
    }

    #attach-input {
        width: 100%;
        margin-bottom: 1;
    }
    """

    def compose(self) -> ComposeResult:
        with Container(id="attach-dialog"):
            yield Static("Attach image", id="attach-title")
            yield Input(placeholder="Path to an image, or drop a file here", id="attach-input")
            yield Static("Enter to confirm | Esc to cancel", id="attach-help")

    def on_mount(self) -> None:
        self.query_one("#attach-input", Input).focus()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "attach-input":
            return
        event.stop()
        value = event.value.strip()
        self.dismiss(value or None)

    def on_key(self, event: Any) -> None:  # noqa: ANN401
        if str(getattr(event, "key", "")).lower() == "escape":
            self.dismiss(None)


class ModuleScreen(Screen[None]):
    """Conversation screen bound to one :class:`ConversationSession`."""

    CSS = """
    #conversation {
        height: 1fr;
        padding: 1;
    }

    #busy-indicator {
        height: auto;
        padding: 0 1;
        color: $text-muted;
        text-align: center;
    }

    #attachment_tray {
        height: auto;
        max-height: 6;
        margin: 0 1;
    }

    InputBox {
        height: auto;
        padding: 0 1 1 1;
        border-top: solid $panel;
        background: $surface;
    }

    #input_row {
        height: auto;
    }

    #message_input {
        width: 1fr;
    }

    #attach_button, #send_button {
        margin-left: 1;
        min-width: 10;
    }

    MessageBubble {
        width: 85%;
        padding: 1 2;
        border: round $panel;
    }

    MessageBubble.role-user {
        background: $primary 20%;
    }

    MessageBubble.role-system-error {
        border: round $error;
    }
    """

    BINDINGS = [
        Binding("escape", "back", "Back"),
        Binding("ctrl+n", "new_conversation", "New"),
        Binding("ctrl+o", "attach_image", "Attach", show=False),
    ]

    def __init__(self, session: ConversationSession, show_timestamps: bool = True) -> None:
        super().__init__()
        self.session = session
        self.show_timestamps = show_timestamps

    @property
    def profile(self) -> ModuleProfile:
        return self.session.profile

    def compose(self) -> ComposeResult:
        yield Header()
        yield ConversationView(id="conversation", show_timestamps=self.show_timestamps)
        yield Static(self.profile.busy_text, id="busy-indicator")
        if self.profile.accepts_attachments:
            yield AttachmentTray(id="attachment_tray")
        yield InputBox(
            placeholder=self.profile.placeholder,
            allow_attachments=self.profile.accepts_attachments,
        )
        yield Footer()

    async def on_mount(self) -> None:
        self.sub_title = self.profile.title
        self.session.on_message(self._on_session_message)
        self.session.on_state_change(self._on_session_state)
        await self.query_one(ConversationView).replace_messages(self.session.messages)
        self.query_one("#busy-indicator", Static).display = False
        self._refresh_attachments()
        self.query_one("#message_input", Input).focus()

    async def _on_session_message(self, message: Message) -> None:
        await self.query_one(ConversationView).add_message(message)

    async def _on_session_state(self, state: ConversationState) -> None:
        busy = state is ConversationState.SUBMITTING
        self.query_one(InputBox).set_busy(busy)
        self.query_one("#busy-indicator", Static).display = busy
        input_widget = self.query_one("#message_input", Input)
        input_widget.value = self.session.draft if not busy else ""
        self._refresh_attachments()
        if not busy:
            input_widget.focus()

    def _refresh_attachments(self) -> None:
        if not self.profile.accepts_attachments:
            return
        self.query_one(AttachmentTray).show_attachments(self.session.attachments.pending)

    def _request_submit(self) -> None:
        if self.session.is_awaiting_response:
            self.notify("Busy. Wait for the current request to finish.", severity="warning")
            return
        self.session.draft = self.query_one("#message_input", Input).value
        self.run_worker(self._submit(), group="submit")

    async def _submit(self) -> None:
        accepted = await self.session.submit()
        if not accepted and not self.session.is_awaiting_response:
            self.notify("Cannot send an empty message.", severity="warning")

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "message_input":
            return
        event.stop()
        self._request_submit()

    def on_input_box_send_requested(self, event: InputBox.SendRequested) -> None:
        event.stop()
        self._request_submit()

    def on_input_box_attach_requested(self, event: InputBox.AttachRequested) -> None:
        event.stop()
        self.action_attach_image()

    def on_attachment_tray_remove_requested(
        self, event: AttachmentTray.RemoveRequested
    ) -> None:
        event.stop()
        self.session.attachments.remove(event.attachment_id)
        self._refresh_attachments()

    def action_attach_image(self) -> None:
        if not self.profile.accepts_attachments or self.session.is_awaiting_response:
            return
        self.app.push_screen(AttachImageScreen(), callback=self.attach_path)

    def attach_path(self, path: str | None) -> None:
        """Validate and queue an image path chosen in the attach dialog."""
        if not path:
            return
        try:
            attachment = self.session.attachments.add_path(path)
        except InvalidAttachmentError as exc:
            LOGGER.info(
                "screen.attach.rejected",
                extra={"event": "screen.attach.rejected", "reason": str(exc)},
            )
            self.notify(str(exc), severity="warning")
            return
        self.notify(f"Image attached: {attachment.name} ({len(self.session.attachments)} total)")
        self._refresh_attachments()

    async def action_new_conversation(self) -> None:
        if not await self.session.reset():
            self.notify("Busy. Wait for the current request to finish.", severity="warning")
            return
        await self.query_one(ConversationView).replace_messages(self.session.messages)
        self.query_one("#message_input", Input).value = ""
        self._refresh_attachments()

    def action_back(self) -> None:
        self.app.pop_screen()
