"""Domain exception hierarchy for the research assistant."""

from __future__ import annotations


class ResearchAssistantError(RuntimeError):
    """Base class for all domain-level assistant errors."""


class ConfigurationError(ResearchAssistantError):
    """Raised when the model credential is missing or unusable."""


class ConfigValidationError(ResearchAssistantError):
    """Raised when configuration cannot be validated safely."""


class InvalidAttachmentError(ResearchAssistantError):
    """Raised when a selected file cannot become a pending attachment."""


class InvalidAttachmentKind(InvalidAttachmentError):
    """Raised when a selected file does not declare an image media type."""


class AttachmentTooLargeError(InvalidAttachmentError):
    """Raised when a selected image exceeds the configured size limit."""


class GenerationError(ResearchAssistantError):
    """Raised when the generation call fails for any reason."""
