"""Conversation session: optimistic submit, fan-out/fan-in, and recovery."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
import logging

from .attachments import Attachment, AttachmentStore
from .exceptions import ConfigurationError, GenerationError, ResearchAssistantError
from .gateway import ModelGateway
from .messages import Message, MessageLog, MessageRole
from .profiles import CHAT_PROFILE, ModuleProfile
from .state import ConversationState, StateManager

LOGGER = logging.getLogger(__name__)

MessageListener = Callable[[Message], Awaitable[None]]
StateListener = Callable[[ConversationState], Awaitable[None]]


class ConversationSession:
    """Own the message log and drive one request at a time through the gateway.

    ``submit`` is the only entry point that talks to the model. It never
    raises for generation or configuration failures: those become a single
    ``system-error`` message whose text is fixed by the module profile.
    """

    def __init__(
        self,
        gateway: ModelGateway,
        profile: ModuleProfile = CHAT_PROFILE,
        attachments: AttachmentStore | None = None,
    ) -> None:
        self.gateway = gateway
        self.profile = profile
        self.attachments = attachments if attachments is not None else AttachmentStore()
        self.state = StateManager()
        self.draft = ""
        self._log = MessageLog()
        self._message_listeners: list[MessageListener] = []
        self._state_listeners: list[StateListener] = []
        self._log.append(MessageRole.ASSISTANT, profile.greeting)

    @property
    def messages(self) -> tuple[Message, ...]:
        return self._log.messages

    @property
    def is_awaiting_response(self) -> bool:
        return self.state.current is ConversationState.SUBMITTING

    def on_message(self, callback: MessageListener) -> None:
        """Register an async callback invoked for every appended message."""
        self._message_listeners.append(callback)

    def on_state_change(self, callback: StateListener) -> None:
        """Register an async callback invoked after each state transition."""
        self._state_listeners.append(callback)

    async def _append(
        self,
        role: MessageRole,
        text: str,
        attachments: Sequence[Attachment] = (),
    ) -> Message:
        message = self._log.append(role, text, attachments)
        for callback in self._message_listeners:
            try:
                await callback(message)
            except Exception:  # noqa: BLE001 - a broken view must not stall the session.
                LOGGER.exception(
                    "session.listener.failed",
                    extra={"event": "session.listener.failed", "kind": "message"},
                )
        return message

    async def _notify_state(self, state: ConversationState) -> None:
        for callback in self._state_listeners:
            try:
                await callback(state)
            except Exception:  # noqa: BLE001 - a broken view must not stall the session.
                LOGGER.exception(
                    "session.listener.failed",
                    extra={"event": "session.listener.failed", "kind": "state"},
                )

    async def submit(
        self,
        text: str | None = None,
        attachments: Sequence[Attachment] | None = None,
    ) -> bool:
        """Submit user input; return False when the call was a no-op.

        ``text`` defaults to :attr:`draft` and ``attachments`` to the pending
        set. Blank input with no attachments, or a call made while a request
        is outstanding, leaves the log unchanged.
        """
        prompt_text = self.draft if text is None else text
        selected = tuple(self.attachments.pending if attachments is None else attachments)

        if not prompt_text.strip() and not selected:
            return False

        if not await self.state.transition_if(
            ConversationState.IDLE, ConversationState.SUBMITTING
        ):
            LOGGER.info(
                "session.submit.rejected",
                extra={"event": "session.submit.rejected", "reason": "busy"},
            )
            return False

        try:
            LOGGER.info(
                "session.state.transition",
                extra={
                    "event": "session.state.transition",
                    "from_state": ConversationState.IDLE.value,
                    "to_state": ConversationState.SUBMITTING.value,
                    "module_key": self.profile.key,
                    "attachments": len(selected),
                },
            )
            await self._append(MessageRole.USER, prompt_text, selected)
            await self._notify_state(ConversationState.SUBMITTING)
            try:
                reply = await self._dispatch(prompt_text, selected)
            except ConfigurationError as exc:
                LOGGER.error(
                    "session.submit.config_error",
                    extra={"event": "session.submit.config_error", "error": str(exc)},
                )
                await self._append(
                    MessageRole.SYSTEM_ERROR, self.profile.init_failure_text
                )
            except ResearchAssistantError as exc:
                LOGGER.error(
                    "session.submit.failed",
                    extra={
                        "event": "session.submit.failed",
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )
                await self._append(MessageRole.SYSTEM_ERROR, self.profile.failure_text)
            except Exception:  # noqa: BLE001 - the shell must never see a crash.
                LOGGER.exception(
                    "session.submit.unexpected",
                    extra={"event": "session.submit.unexpected"},
                )
                await self._append(MessageRole.SYSTEM_ERROR, self.profile.failure_text)
            else:
                await self._append(MessageRole.ASSISTANT, reply)
        finally:
            self.attachments.clear()
            self.draft = ""
            await self.state.transition_to(ConversationState.IDLE)
            LOGGER.info(
                "session.state.transition",
                extra={
                    "event": "session.state.transition",
                    "from_state": ConversationState.SUBMITTING.value,
                    "to_state": ConversationState.IDLE.value,
                },
            )
            await self._notify_state(ConversationState.IDLE)
        return True

    async def _dispatch(self, text: str, attachments: Sequence[Attachment]) -> str:
        """Call the gateway once per attachment (or once for text) and join."""
        prompt = self.profile.build_prompt(text, bool(attachments))
        if not attachments:
            return await self.gateway.generate(prompt, ())

        results = await asyncio.gather(
            *(
                self.gateway.generate(prompt, (AttachmentStore.payload(item),))
                for item in attachments
            ),
            return_exceptions=True,
        )
        failures: list[Exception] = []
        for index, item in enumerate(results):
            if not isinstance(item, BaseException):
                continue
            if isinstance(item, asyncio.CancelledError):
                # A cancelled child request counts as a failed analysis.
                item = GenerationError(
                    f"Analysis of {attachments[index].name} was cancelled."
                )
            elif not isinstance(item, Exception):
                raise item
            failures.append(item)
            LOGGER.warning(
                "session.fanout.failure",
                extra={
                    "event": "session.fanout.failure",
                    "index": index,
                    "attachment": attachments[index].name,
                    "error_type": type(item).__name__,
                    "error": str(item),
                },
            )
        # All-or-nothing: one failed analysis fails the whole submission.
        if failures:
            raise failures[0]
        return "\n\n".join(str(item) for item in results)

    async def reset(self) -> bool:
        """Start a fresh log with the greeting; refused while submitting.

        Listeners are not notified; callers re-render from :attr:`messages`.
        """
        if not await self.state.can_submit():
            return False
        self._log = MessageLog()
        self._log.append(MessageRole.ASSISTANT, self.profile.greeting)
        self.attachments.clear()
        self.draft = ""
        return True
