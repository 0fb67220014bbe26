"""Tests for parts module."""

import unittest
from unittest.mock import Mock

from gemini_ai_sdk.constants import INLINE_SIZE_LIMIT
from gemini_ai_sdk.exceptions import UnsupportedFormatError
from gemini_ai_sdk.parts import FileUpload, is_file_upload, messages_to_parts

MIB = 1024 * 1024
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"
QUICKTIME = b"\x00\x00\x00\x14ftypqt  \x00\x00\x00\x00qt  " + bytes(64)


def png(size: int) -> bytes:
    """Returns a PNG-signed buffer of exactly size bytes."""
    return PNG_SIGNATURE + bytes(size - len(PNG_SIGNATURE))


def make_upload():
    """Returns an upload mock that hands out sequential file URIs."""
    counter = iter(range(1, 1000))
    return Mock(side_effect=lambda data, mime_type: f"files/{next(counter)}")


def kind(part) -> str:
    if part.text is not None:
        return "text"
    if part.inline_data is not None:
        return "inline"
    if part.file_data is not None:
        return "file"
    return "empty"


class TestMessagesToParts(unittest.TestCase):
    """Test suite for messages_to_parts."""

    def test_text_only(self):
        upload = make_upload()
        result = messages_to_parts(["hello", "world"], upload)

        self.assertEqual([p.text for p in result.parts], ["hello", "world"])
        self.assertEqual(result.inline_bytes, 0)
        upload.assert_not_called()

    def test_small_binary_is_inlined(self):
        upload = make_upload()
        image = png(1024)
        result = messages_to_parts([image], upload)

        part = result.parts[0]
        self.assertEqual(part.inline_data.mime_type, "image/png")
        self.assertEqual(part.inline_data.data, image)
        self.assertEqual(result.inline_bytes, 1024)
        upload.assert_not_called()

    def test_preserves_order_and_kinds(self):
        """Each input keeps its position; binary is inline or file, never both."""
        upload = make_upload()
        messages = [
            "first",
            png(100),
            FileUpload(buffer=b"a,b\n1,2\n", file_path="data.csv"),
            QUICKTIME,
            "last",
        ]
        result = messages_to_parts(messages, upload)

        self.assertEqual(
            [kind(p) for p in result.parts],
            ["text", "inline", "inline", "file", "text"],
        )
        self.assertEqual(result.parts[0].text, "first")
        self.assertEqual(result.parts[2].inline_data.mime_type, "text/csv")
        self.assertEqual(result.parts[4].text, "last")
        for part in result.parts[1:4]:
            self.assertFalse(
                part.inline_data is not None and part.file_data is not None
            )

    def test_video_is_uploaded_regardless_of_size(self):
        """QuickTime is normalized to video/mov and uploaded directly."""
        upload = make_upload()
        result = messages_to_parts([QUICKTIME], upload)

        upload.assert_called_once_with(QUICKTIME, "video/mov")
        part = result.parts[0]
        self.assertEqual(part.file_data.mime_type, "video/mov")
        self.assertEqual(part.file_data.file_uri, "files/1")
        self.assertEqual(result.inline_bytes, 0)

    def test_under_threshold_stays_inline(self):
        upload = make_upload()
        result = messages_to_parts([png(5 * MIB), png(5 * MIB)], upload)

        self.assertEqual([kind(p) for p in result.parts], ["inline", "inline"])
        self.assertEqual(result.inline_bytes, 10 * MIB)
        upload.assert_not_called()

    def test_exactly_at_threshold_stays_inline(self):
        upload = make_upload()
        result = messages_to_parts([png(INLINE_SIZE_LIMIT)], upload)

        self.assertEqual(kind(result.parts[0]), "inline")
        upload.assert_not_called()

    def test_large_png_is_promoted(self):
        """A 25 MiB PNG triggers exactly one upload and becomes a file part."""
        upload = make_upload()
        image = png(25 * MIB)
        result = messages_to_parts([image], upload)

        upload.assert_called_once_with(image, "image/png")
        part = result.parts[0]
        self.assertEqual(kind(part), "file")
        self.assertEqual(part.file_data.mime_type, "image/png")
        self.assertEqual(part.file_data.file_uri, "files/1")
        self.assertEqual(result.inline_bytes, 0)

    def test_combined_size_over_threshold_promotes_all_inline_parts(self):
        upload = make_upload()
        messages = ["caption", png(12 * MIB), png(12 * MIB), QUICKTIME]
        result = messages_to_parts(messages, upload)

        self.assertEqual(
            [kind(p) for p in result.parts], ["text", "file", "file", "file"]
        )
        self.assertEqual(result.parts[0].text, "caption")
        # video first, then promotions in order
        self.assertEqual(
            [p.file_data.file_uri for p in result.parts[1:]],
            ["files/2", "files/3", "files/1"],
        )
        self.assertEqual(upload.call_count, 3)

    def test_custom_inline_limit(self):
        upload = make_upload()
        result = messages_to_parts([png(200)], upload, inline_limit=100)
        self.assertEqual(kind(result.parts[0]), "file")

    def test_strict_mode_rejects_unsupported(self):
        with self.assertRaises(UnsupportedFormatError):
            messages_to_parts([b"PK\x03\x04" + bytes(32)], make_upload(), strict=True)

    def test_non_strict_mode_sends_plain_text(self):
        result = messages_to_parts([b"PK\x03\x04" + bytes(32)], make_upload())
        self.assertEqual(result.parts[0].inline_data.mime_type, "text/plain")

    def test_bytearray_and_memoryview(self):
        image = png(64)
        result = messages_to_parts([bytearray(image), memoryview(image)], make_upload())
        self.assertEqual([p.inline_data.data for p in result.parts], [image, image])

    def test_rejects_unknown_message_type(self):
        with self.assertRaises(TypeError):
            messages_to_parts([42], make_upload())


class TestIsFileUpload(unittest.TestCase):
    """Test suite for is_file_upload."""

    def test_file_upload(self):
        self.assertTrue(is_file_upload(FileUpload(buffer=b"x", file_path="x.txt")))

    def test_other_values(self):
        self.assertFalse(is_file_upload(b"x"))
        self.assertFalse(is_file_upload({"buffer": b"x", "file_path": "x.txt"}))
