"""Tests for the provider-agnostic conversation model."""

from __future__ import annotations

import unittest

from ai_suite.models import (
    AttachmentRef,
    ConversationProfile,
    Message,
    Provider,
    Role,
)


class AttachmentRefTests(unittest.TestCase):
    def test_requires_exactly_one_payload(self) -> None:
        with self.assertRaises(ValueError):
            AttachmentRef(name="a.pdf")
        with self.assertRaises(ValueError):
            AttachmentRef(name="a.pdf", remote_id="file_1", text="body")

    def test_constructors_set_kind(self) -> None:
        uploaded = AttachmentRef.uploaded("a.pdf", "file_1")
        inlined = AttachmentRef.inlined("b.docx", "hello")
        self.assertTrue(uploaded.is_uploaded)
        self.assertFalse(inlined.is_uploaded)
        self.assertEqual(AttachmentRef.from_dict(uploaded.to_dict()), uploaded)
        self.assertEqual(AttachmentRef.from_dict(inlined.to_dict()), inlined)


class MessageTests(unittest.TestCase):
    def test_role_and_attachments_are_normalized(self) -> None:
        message = Message("user", "hi", [AttachmentRef.inlined("n.docx", "t")])  # type: ignore[arg-type]
        self.assertIs(message.role, Role.USER)
        self.assertIsInstance(message.attachments, tuple)

    def test_from_dict_rejects_unknown_role(self) -> None:
        with self.assertRaises(ValueError):
            Message.from_dict({"role": "robot", "content": "x"})


class ConversationProfileTests(unittest.TestCase):
    def test_pending_lists_uploads_before_inlines(self) -> None:
        profile = ConversationProfile(
            pending_uploads=[AttachmentRef.uploaded("u.pdf", "file_1")],
            pending_inlines=[AttachmentRef.inlined("i.docx", "text")],
        )
        self.assertEqual([ref.name for ref in profile.pending], ["u.pdf", "i.docx"])

    def test_to_dict_excludes_credential(self) -> None:
        profile = ConversationProfile(model="m", credential="sk-secret")
        data = profile.to_dict()
        self.assertNotIn("credential", data)
        self.assertNotIn("sk-secret", repr(data))

    def test_provider_labels(self) -> None:
        self.assertEqual(Provider.OPENAI.label, "OpenAI")
        self.assertEqual(Provider("anthropic").label, "Anthropic")


if __name__ == "__main__":
    unittest.main()
