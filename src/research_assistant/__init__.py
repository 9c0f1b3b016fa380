"""Top-level package for research-assistant."""

from __future__ import annotations

from importlib import import_module
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import ResearchAssistantApp
    from .attachments import Attachment, AttachmentStore, InlinePayload, SelectedFile
    from .config import ensure_config_dir, load_config
    from .exceptions import (
        AttachmentTooLargeError,
        ConfigurationError,
        ConfigValidationError,
        GenerationError,
        InvalidAttachmentError,
        InvalidAttachmentKind,
        ResearchAssistantError,
    )
    from .gateway import GeminiGateway, ModelGateway
    from .messages import Message, MessageLog, MessageRole
    from .session import ConversationSession
    from .state import ConversationState, StateManager

_EXPORTS: dict[str, str] = {
    "ResearchAssistantApp": ".app",
    "Attachment": ".attachments",
    "AttachmentStore": ".attachments",
    "InlinePayload": ".attachments",
    "SelectedFile": ".attachments",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "AttachmentTooLargeError": ".exceptions",
    "ConfigurationError": ".exceptions",
    "ConfigValidationError": ".exceptions",
    "GenerationError": ".exceptions",
    "InvalidAttachmentError": ".exceptions",
    "InvalidAttachmentKind": ".exceptions",
    "ResearchAssistantError": ".exceptions",
    "GeminiGateway": ".gateway",
    "ModelGateway": ".gateway",
    "Message": ".messages",
    "MessageLog": ".messages",
    "MessageRole": ".messages",
    "ConversationSession": ".session",
    "ConversationState": ".state",
    "StateManager": ".state",
}

__all__ = sorted(_EXPORTS)


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep UI and SDK dependencies off the import path."""
    module_name = _EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(import_module(module_name, __name__), name)
