"""Gemini model gateway with a lazily created, session-lifetime client."""

from __future__ import annotations

import base64
from collections.abc import Callable, Sequence
import logging
import os
from typing import Any, Protocol

from google import genai
from google.genai import errors as genai_errors
from google.genai import types as genai_types
import httpx

from .attachments import InlinePayload
from .exceptions import ConfigurationError, GenerationError

LOGGER = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_API_KEY_ENV = "GEMINI_API_KEY"


class ModelGateway(Protocol):
    """Text-in/text-out adapter over an external generation service."""

    async def generate(
        self, prompt_text: str, attachments: Sequence[InlinePayload] = ()
    ) -> str: ...


def _default_client_factory(api_key: str) -> Any:
    return genai.Client(api_key=api_key)


class GeminiGateway:
    """Adapter around ``google-genai`` ``generate_content``.

    The client is built on first use and reused for every later call. It is
    rebuilt only when the API key in the environment changes; a missing key
    fails the current attempt and is looked up again on the next one.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key_env: str = DEFAULT_API_KEY_ENV,
        *,
        temperature: float | None = None,
        client_factory: Callable[[str], Any] | None = None,
    ) -> None:
        self.model = model
        self.api_key_env = api_key_env
        self.temperature = temperature
        self._client_factory = client_factory or _default_client_factory
        self._client: Any | None = None
        self._client_key: str | None = None

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> GeminiGateway:
        """Build a gateway from the ``[gemini]`` config section."""
        section = config.get("gemini", {})
        return cls(
            model=section.get("model", DEFAULT_MODEL),
            api_key_env=section.get("api_key_env", DEFAULT_API_KEY_ENV),
            temperature=section.get("temperature"),
        )

    def _read_api_key(self) -> str:
        return os.environ.get(self.api_key_env, "").strip()

    def initialize(self) -> Any:
        """Return the cached client, creating it when needed."""
        api_key = self._read_api_key()
        if not api_key:
            LOGGER.error(
                "gateway.init.missing_key",
                extra={"event": "gateway.init.missing_key", "env": self.api_key_env},
            )
            raise ConfigurationError(
                f"Gemini API key is not configured (set {self.api_key_env})."
            )
        if self._client is not None and api_key == self._client_key:
            return self._client

        try:
            client = self._client_factory(api_key)
        except Exception as exc:  # noqa: BLE001 - SDK constructor failures vary.
            raise ConfigurationError(f"Unable to create Gemini client: {exc}") from exc

        rebuilt = self._client is not None
        self._client = client
        self._client_key = api_key
        LOGGER.info(
            "gateway.client.created",
            extra={
                "event": "gateway.client.created",
                "model": self.model,
                "rebuilt": rebuilt,
            },
        )
        return client

    def _build_contents(
        self, prompt_text: str, attachments: Sequence[InlinePayload]
    ) -> list[Any]:
        contents: list[Any] = []
        for payload in attachments:
            # Blob data takes raw bytes; the SDK applies its own base64 on the wire.
            contents.append(
                genai_types.Part.from_bytes(
                    data=base64.b64decode(payload.data),
                    mime_type=payload.mime_type,
                )
            )
        if prompt_text:
            contents.append(prompt_text)
        return contents

    def _build_config(self) -> genai_types.GenerateContentConfig | None:
        if self.temperature is None:
            return None
        return genai_types.GenerateContentConfig(temperature=self.temperature)

    async def generate(
        self, prompt_text: str, attachments: Sequence[InlinePayload] = ()
    ) -> str:
        """Send one request and return the model's text output unmodified."""
        if not prompt_text.strip() and not attachments:
            raise ValueError("prompt_text may be empty only when attachments are given.")

        client = self.initialize()
        contents = self._build_contents(prompt_text, attachments)
        LOGGER.info(
            "gateway.request.start",
            extra={
                "event": "gateway.request.start",
                "model": self.model,
                "prompt_chars": len(prompt_text),
                "attachments": len(attachments),
            },
        )
        try:
            response = await client.aio.models.generate_content(
                model=self.model,
                contents=contents,
                config=self._build_config(),
            )
        except genai_errors.APIError as exc:
            LOGGER.warning(
                "gateway.request.api_error",
                extra={
                    "event": "gateway.request.api_error",
                    "code": getattr(exc, "code", None),
                    "status": getattr(exc, "status", None),
                    "error": str(exc),
                },
            )
            raise GenerationError(f"Gemini API error: {exc}") from exc
        except httpx.HTTPError as exc:
            LOGGER.warning(
                "gateway.request.transport_error",
                extra={
                    "event": "gateway.request.transport_error",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise GenerationError(f"Unable to reach Gemini: {exc}") from exc
        except Exception as exc:  # noqa: BLE001 - every failure maps to one error kind.
            LOGGER.warning(
                "gateway.request.failed",
                extra={
                    "event": "gateway.request.failed",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise GenerationError(f"Generation failed: {exc}") from exc

        text = getattr(response, "text", None)
        if not isinstance(text, str) or not text:
            LOGGER.warning(
                "gateway.response.empty",
                extra={"event": "gateway.response.empty", "model": self.model},
            )
            raise GenerationError("Gemini returned no text output.")

        LOGGER.info(
            "gateway.request.done",
            extra={"event": "gateway.request.done", "response_chars": len(text)},
        )
        return text
