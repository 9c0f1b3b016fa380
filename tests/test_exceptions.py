"""Tests for domain exception hierarchy."""

from __future__ import annotations

import unittest

from research_assistant.exceptions import (
    AttachmentTooLargeError,
    ConfigurationError,
    ConfigValidationError,
    GenerationError,
    InvalidAttachmentError,
    InvalidAttachmentKind,
    ResearchAssistantError,
)


class ExceptionHierarchyTests(unittest.TestCase):
    """Validate exception inheritance contract."""

    def test_exception_hierarchy(self) -> None:
        self.assertTrue(issubclass(ResearchAssistantError, RuntimeError))
        self.assertTrue(issubclass(ConfigurationError, ResearchAssistantError))
        self.assertTrue(issubclass(ConfigValidationError, ResearchAssistantError))
        self.assertTrue(issubclass(GenerationError, ResearchAssistantError))
        self.assertTrue(issubclass(InvalidAttachmentError, ResearchAssistantError))
        self.assertTrue(issubclass(InvalidAttachmentKind, InvalidAttachmentError))
        self.assertTrue(issubclass(AttachmentTooLargeError, InvalidAttachmentError))

    def test_generation_and_configuration_are_distinct(self) -> None:
        self.assertFalse(issubclass(GenerationError, ConfigurationError))
        self.assertFalse(issubclass(ConfigurationError, GenerationError))


if __name__ == "__main__":
    unittest.main()
