"""Textual application shell for the research assistant."""

from __future__ import annotations

import logging
import sys
from typing import Any

from textual.app import App
from textual.binding import Binding

from .attachments import AttachmentStore
from .config import load_config
from .gateway import GeminiGateway, ModelGateway
from .logging_utils import configure_logging
from .profiles import get_profile
from .screens import LandingScreen, ModuleScreen
from .session import ConversationSession

LOGGER = logging.getLogger(__name__)


class ResearchAssistantApp(App[None]):
    """Landing page plus chat and image analysis modules over one gateway."""

    CSS = """
    Screen {
        background: $background;
    }

    Header {
        border-bottom: solid $panel;
        background: $surface;
    }

    Footer {
        border-top: solid $panel;
        background: $surface;
    }
    """

    BINDINGS = [Binding("ctrl+q", "quit", "Quit")]

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        gateway: ModelGateway | None = None,
        start_module: str | None = None,
    ) -> None:
        self.config = config if config is not None else load_config()
        configure_logging(self.config["logging"])
        super().__init__()
        self.title = str(self.config["app"]["title"])
        self.gateway: ModelGateway = gateway or GeminiGateway.from_config(self.config)
        self.start_module = start_module or str(self.config["app"]["start_module"])
        LOGGER.info(
            "app.start",
            extra={
                "event": "app.start",
                "python": sys.version.split()[0],
                "start_module": self.start_module,
            },
        )

    def new_session(self, key: str) -> ConversationSession:
        """Create a session for module ``key`` sharing the app's gateway."""
        return ConversationSession(
            self.gateway,
            profile=get_profile(key),
            attachments=AttachmentStore(
                max_image_bytes=int(self.config["attachments"]["max_image_bytes"])
            ),
        )

    def open_module(self, key: str) -> None:
        """Push a fresh module screen on top of the landing screen."""
        LOGGER.info(
            "app.module.open",
            extra={"event": "app.module.open", "module_key": key},
        )
        self.push_screen(
            ModuleScreen(
                self.new_session(key),
                show_timestamps=bool(self.config["ui"]["show_timestamps"]),
            )
        )

    def on_mount(self) -> None:
        self.push_screen(LandingScreen())
        if self.start_module != "landing":
            self.open_module(self.start_module)
