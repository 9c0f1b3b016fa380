"""Tests for the pending attachment store."""

from __future__ import annotations

import base64
from pathlib import Path
import tempfile
import unittest

from research_assistant.attachments import (
    AttachmentStore,
    SelectedFile,
    is_image_type,
    normalize_dropped_path,
)
from research_assistant.exceptions import (
    AttachmentTooLargeError,
    InvalidAttachmentError,
    InvalidAttachmentKind,
)


class AddRemoveTests(unittest.TestCase):
    """Validate selection, validation, and removal."""

    def test_add_image_returns_attachment_in_pending(self) -> None:
        store = AttachmentStore()
        attachment = store.add(SelectedFile("cat.jpg", "image/jpeg", b"jpegdata"))
        self.assertEqual(store.pending, (attachment,))
        self.assertEqual(attachment.mime_type, "image/jpeg")
        self.assertEqual(attachment.size, 8)

    def test_non_image_rejected_without_state_change(self) -> None:
        store = AttachmentStore()
        store.add(SelectedFile("a.png", "image/png", b"x"))
        before = store.pending
        with self.assertLogs("research_assistant.attachments", level="WARNING") as logs:
            with self.assertRaises(InvalidAttachmentKind):
                store.add(SelectedFile("notes.pdf", "application/pdf", b"%PDF"))
        self.assertEqual(store.pending, before)
        self.assertEqual(logs.records[0].file_name, "notes.pdf")
        self.assertEqual(logs.records[0].event, "attachments.rejected.kind")

    def test_missing_media_type_rejected(self) -> None:
        store = AttachmentStore()
        with self.assertLogs("research_assistant.attachments", level="WARNING"):
            with self.assertRaises(InvalidAttachmentKind):
                store.add(SelectedFile("blob", "", b"x"))
        self.assertEqual(len(store), 0)

    def test_oversized_image_rejected(self) -> None:
        store = AttachmentStore(max_image_bytes=4)
        with self.assertLogs("research_assistant.attachments", level="WARNING") as logs:
            with self.assertRaises(AttachmentTooLargeError):
                store.add(SelectedFile("big.png", "image/png", b"12345"))
        self.assertFalse(store)
        self.assertEqual(logs.records[0].file_name, "big.png")

    def test_pending_keeps_selection_order(self) -> None:
        store = AttachmentStore()
        names = ["one.png", "two.gif", "three.webp"]
        for name in names:
            store.add(SelectedFile(name, "image/png", b"x"))
        self.assertEqual([item.name for item in store.pending], names)

    def test_remove_by_identity(self) -> None:
        store = AttachmentStore()
        first = store.add(SelectedFile("same.png", "image/png", b"x"))
        second = store.add(SelectedFile("same.png", "image/png", b"x"))
        store.remove(first.id)
        self.assertEqual(store.pending, (second,))

    def test_remove_unknown_id_is_noop(self) -> None:
        store = AttachmentStore()
        attachment = store.add(SelectedFile("a.png", "image/png", b"x"))
        store.remove("does-not-exist")
        self.assertEqual(store.pending, (attachment,))

    def test_clear_empties_pending(self) -> None:
        store = AttachmentStore()
        store.add(SelectedFile("a.png", "image/png", b"x"))
        store.clear()
        self.assertEqual(store.pending, ())

    def test_pending_is_a_snapshot(self) -> None:
        store = AttachmentStore()
        snapshot = store.pending
        store.add(SelectedFile("a.png", "image/png", b"x"))
        self.assertEqual(snapshot, ())


class EncodingTests(unittest.TestCase):
    """Validate the transport encoding handed to the gateway."""

    def test_encode_is_base64_of_raw_bytes(self) -> None:
        store = AttachmentStore()
        attachment = store.add(SelectedFile("a.png", "image/png", b"\x89PNG\r\n"))
        encoded = store.encode(attachment)
        self.assertEqual(base64.b64decode(encoded), b"\x89PNG\r\n")
        self.assertEqual(store.encode(attachment), encoded)
        self.assertEqual(store.pending, (attachment,))

    def test_payload_carries_declared_media_type(self) -> None:
        store = AttachmentStore()
        attachment = store.add(SelectedFile("a.gif", "IMAGE/GIF", b"GIF89a"))
        payload = store.payload(attachment)
        self.assertEqual(payload.mime_type, "image/gif")
        self.assertEqual(payload.data, base64.b64encode(b"GIF89a"))


class PathTests(unittest.TestCase):
    """Validate picker and drag-and-drop path handling."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.root = Path(self._tmp.name)

    def test_add_path_guesses_image_type(self) -> None:
        image = self.root / "protest.png"
        image.write_bytes(b"\x89PNG")
        attachment = AttachmentStore().add_path(str(image))
        self.assertEqual(attachment.name, "protest.png")
        self.assertEqual(attachment.mime_type, "image/png")
        self.assertEqual(attachment.data, b"\x89PNG")

    def test_add_path_rejects_text_file(self) -> None:
        note = self.root / "notes.txt"
        note.write_text("hello", encoding="utf-8")
        store = AttachmentStore()
        with self.assertLogs("research_assistant.attachments", level="WARNING"):
            with self.assertRaises(InvalidAttachmentKind):
                store.add_path(note)
        self.assertEqual(store.pending, ())

    def test_add_path_missing_file(self) -> None:
        with self.assertRaises(InvalidAttachmentError):
            AttachmentStore().add_path(self.root / "missing.png")

    def test_add_path_directory(self) -> None:
        with self.assertRaises(InvalidAttachmentError):
            AttachmentStore().add_path(self.root)

    def test_add_path_too_large(self) -> None:
        image = self.root / "big.jpg"
        image.write_bytes(b"0" * 2048)
        with self.assertRaises(AttachmentTooLargeError):
            AttachmentStore(max_image_bytes=1024).add_path(image)

    def test_dropped_path_forms(self) -> None:
        self.assertEqual(
            normalize_dropped_path("'/tmp/my photo.png'"), Path("/tmp/my photo.png")
        )
        self.assertEqual(
            normalize_dropped_path('"/tmp/a.png"  '), Path("/tmp/a.png")
        )
        self.assertEqual(
            normalize_dropped_path("file:///tmp/my%20photo.png"),
            Path("/tmp/my photo.png"),
        )

    def test_is_image_type(self) -> None:
        self.assertTrue(is_image_type("image/png"))
        self.assertTrue(is_image_type(" Image/JPEG "))
        self.assertFalse(is_image_type("text/plain"))
        self.assertFalse(is_image_type(None))
        self.assertFalse(is_image_type(""))


if __name__ == "__main__":
    unittest.main()
