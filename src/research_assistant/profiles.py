"""Per-module copy and prompt templates."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

CHAT_PROMPT_TEMPLATE = """Explain this social science concept in very simple, easy-to-understand language for a general audience:
{message}

Guidelines:
- Use clear, everyday language
- Avoid complex academic jargon
- Explain like you're talking to a friend
- Give a straightforward, practical explanation"""

IMAGE_PROMPT = """Analyze this image from a social science perspective, considering:
1. Cultural significance and symbolism
2. Social context and implications
3. Historical or contemporary relevance
4. Behavioral and psychological insights

Provide a comprehensive yet concise analysis that reveals deeper sociological meanings."""

INIT_FAILURE_TEXT = "Failed to initialize AI. Please check your configuration."


def build_chat_prompt(text: str, has_attachments: bool) -> str:
    if has_attachments:
        return build_image_prompt(text, has_attachments)
    return CHAT_PROMPT_TEMPLATE.format(message=text.strip())


def build_image_prompt(text: str, has_attachments: bool) -> str:  # noqa: ARG001
    note = text.strip()
    if not note:
        return IMAGE_PROMPT
    return f"{IMAGE_PROMPT}\n\nThe viewer also asks: {note}"


@dataclass(frozen=True)
class ModuleProfile:
    """Static settings that parameterise one conversation session."""

    key: str
    title: str
    greeting: str
    placeholder: str
    busy_text: str
    failure_text: str
    build_prompt: Callable[[str, bool], str]
    accepts_attachments: bool = False
    init_failure_text: str = INIT_FAILURE_TEXT


CHAT_PROFILE = ModuleProfile(
    key="chat",
    title="Social Science Explained Simply",
    greeting=(
        "Hey! Need help with social science? I’ve got you covered. "
        "What’s your question?"
    ),
    placeholder="Ask about social science in simple terms",
    busy_text="Thinking... \U0001f914",
    failure_text="I'm having trouble helping you right now. Let's try again.",
    build_prompt=build_chat_prompt,
)

IMAGE_PROFILE = ModuleProfile(
    key="image",
    title="Visual Social Analysis",
    greeting=(
        "Upload your image! Attach one or more pictures, or drop them onto the "
        "terminal, and I'll decode them like a pro historian."
    ),
    placeholder="Optional note about the image(s)",
    busy_text="Scanning for ancient gossip… ⏳",
    failure_text="Failed to analyze image. Please try again.",
    build_prompt=build_image_prompt,
    accepts_attachments=True,
)

PROFILES: dict[str, ModuleProfile] = {
    CHAT_PROFILE.key: CHAT_PROFILE,
    IMAGE_PROFILE.key: IMAGE_PROFILE,
}


def get_profile(key: str) -> ModuleProfile:
    """Return the profile registered under ``key``."""
    try:
        return PROFILES[key.strip().lower()]
    except KeyError as exc:
        raise KeyError(f"Unknown module {key!r}; expected one of {sorted(PROFILES)}") from exc
