"""Scrollable conversation view widget."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from textual.containers import VerticalScroll

from ..messages import Message
from .message import MessageBubble


class ConversationView(VerticalScroll):
    """A scrollable container that hosts message bubbles."""

    def __init__(self, *, show_timestamps: bool = True, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.show_timestamps = show_timestamps

    async def add_message(self, message: Message) -> MessageBubble:
        """Create, mount, and scroll to a new message bubble."""
        bubble = MessageBubble(message, show_timestamp=self.show_timestamps)
        await self.mount(bubble)
        self.scroll_end(animate=True)
        return bubble

    async def replace_messages(self, messages: Iterable[Message]) -> None:
        """Drop every bubble and render ``messages`` from scratch."""
        await self.remove_children()
        for message in messages:
            await self.add_message(message)
