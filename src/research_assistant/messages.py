"""Immutable conversation messages and the append-only session log."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
import itertools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .attachments import Attachment


class MessageRole(str, Enum):
    """Closed set of message kinds rendered by the presentation shell."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM_ERROR = "system-error"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Message:
    """A single entry in the conversation log.

    ``id`` is assigned by :class:`MessageLog` and sorts in creation order.
    Attachments are kept as a tuple so a submitted message never shares
    mutable state with the pending attachment set.
    """

    id: int
    role: MessageRole
    text: str
    attachments: tuple[Attachment, ...] = ()
    created_at: datetime = field(default_factory=_utc_now, compare=False)

    @property
    def is_error(self) -> bool:
        return self.role is MessageRole.SYSTEM_ERROR


class MessageLog:
    """Append-only, insertion-ordered message history for one session."""

    def __init__(self) -> None:
        self._ids = itertools.count()
        self._messages: list[Message] = []

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(tuple(self._messages))

    @property
    def messages(self) -> tuple[Message, ...]:
        """Return an immutable snapshot of the log."""
        return tuple(self._messages)

    @property
    def last(self) -> Message | None:
        return self._messages[-1] if self._messages else None

    def append(
        self,
        role: MessageRole,
        text: str,
        attachments: Sequence[Attachment] = (),
    ) -> Message:
        """Create, store, and return the next message."""
        message = Message(
            id=next(self._ids),
            role=MessageRole(role),
            text=text,
            attachments=tuple(attachments),
        )
        self._messages.append(message)
        return message

    def count(self, role: MessageRole) -> int:
        """Return the number of messages with the given role."""
        return sum(1 for message in self._messages if message.role is role)
