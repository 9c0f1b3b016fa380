"""Widget exports for research_assistant UI."""

from .attachment_tray import AttachmentTray
from .conversation import ConversationView
from .input_box import InputBox
from .message import MessageBubble

__all__ = ["AttachmentTray", "ConversationView", "InputBox", "MessageBubble"]
