"""Tests for the gemini-ask command-line interface."""

import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from gemini_ai_sdk import cli
from gemini_ai_sdk.constants import (
    DEFAULT_API_VERSION,
    DEFAULT_TOOLS,
    SAFETY_DISABLED_SETTINGS,
)
from gemini_ai_sdk.exceptions import UploadFailedError


class TestLoadConfig(unittest.TestCase):
    """Test suite for load_config."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.config_path = Path(self.temp_dir.name) / "gemini.yaml"

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_no_config(self):
        self.assertEqual(cli.load_config(None), {})

    def test_loads_yaml(self):
        self.config_path.write_text(
            "model: gemini-2.5-pro\ngeneration_config:\n  temperature: 0.2\n",
            encoding="utf-8",
        )
        config = cli.load_config(str(self.config_path))
        self.assertEqual(config["model"], "gemini-2.5-pro")
        self.assertEqual(config["generation_config"], {"temperature": 0.2})

    def test_rejects_unknown_keys(self):
        self.config_path.write_text("modle: typo\n", encoding="utf-8")
        with self.assertRaises(ValueError):
            cli.load_config(str(self.config_path))

    def test_rejects_non_mapping(self):
        self.config_path.write_text("- a\n- b\n", encoding="utf-8")
        with self.assertRaises(ValueError):
            cli.load_config(str(self.config_path))


class TestBuildAskOptions(unittest.TestCase):
    """Test suite for build_ask_options."""

    def test_flags_override_config(self):
        args = cli.parse_args(["Hi", "-m", "flag-model", "--no-safety", "--web-search"])
        options = cli.build_ask_options(args, {"model": "config-model",
                                               "system_instruction": "Be brief."})

        self.assertEqual(options.model, "flag-model")
        self.assertEqual(options.system_instruction, "Be brief.")
        self.assertEqual(options.safety_settings, SAFETY_DISABLED_SETTINGS)
        self.assertEqual(options.tools, [DEFAULT_TOOLS["web_search"]])

    def test_defaults_leave_options_unset(self):
        options = cli.build_ask_options(cli.parse_args(["Hi"]), {})
        self.assertIsNone(options.model)
        self.assertIsNone(options.safety_settings)
        self.assertIsNone(options.tools)


class TestMain(unittest.TestCase):
    """Test suite for main."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.image = Path(self.temp_dir.name) / "cat.png"
        self.image.write_bytes(b"\x89PNG\r\n\x1a\n" + bytes(32))

    def tearDown(self):
        self.temp_dir.cleanup()

    @patch("gemini_ai_sdk.cli.GeminiClient")
    def test_ask_prints_response(self, mock_client_class):
        client = mock_client_class.return_value.__enter__.return_value
        client.message_to_parts.return_value = ["parts"]
        client.ask.return_value = MagicMock(text="A cat.")

        with patch("builtins.print") as mock_print:
            exit_code = cli.main(["What is this?", "-f", str(self.image)])

        self.assertEqual(exit_code, 0)
        messages = client.message_to_parts.call_args.args[0]
        self.assertEqual(messages[0], "What is this?")
        self.assertEqual(messages[1].file_path, str(self.image))
        client.ask.assert_called_once_with(["parts"])
        mock_print.assert_called_with("A cat.")

    @patch("gemini_ai_sdk.cli.GeminiClient")
    def test_stream(self, mock_client_class):
        client = mock_client_class.return_value.__enter__.return_value
        client.ask_stream.return_value = iter([MagicMock(text="A "), MagicMock(text="cat.")])

        with patch("builtins.print"):
            exit_code = cli.main(["What is this?", "--stream"])

        self.assertEqual(exit_code, 0)
        client.ask_stream.assert_called_once()
        client.ask.assert_not_called()

    @patch("gemini_ai_sdk.cli.GeminiClient")
    def test_client_options(self, mock_client_class):
        with patch("builtins.print"):
            cli.main(["Hi", "--api-version", "v1", "--poll-timeout", "30"])

        options = mock_client_class.call_args.kwargs["options"]
        self.assertEqual(options.api_version, "v1")
        self.assertEqual(options.poll_timeout, 30.0)

    @patch("gemini_ai_sdk.cli.GeminiClient")
    def test_null_api_version_in_config_uses_default(self, mock_client_class):
        config_path = Path(self.temp_dir.name) / "gemini.yaml"
        config_path.write_text("api_version: null\n", encoding="utf-8")

        with patch("builtins.print"):
            cli.main(["Hi", "--config", str(config_path)])

        options = mock_client_class.call_args.kwargs["options"]
        self.assertEqual(options.api_version, DEFAULT_API_VERSION)

    @patch("gemini_ai_sdk.cli.GeminiClient")
    def test_library_error_exit_code(self, mock_client_class):
        client = mock_client_class.return_value.__enter__.return_value
        client.message_to_parts.side_effect = UploadFailedError("boom")

        with patch("builtins.print"):
            exit_code = cli.main(["Hi"])

        self.assertEqual(exit_code, 1)

    def test_missing_file_exit_code(self):
        with patch("builtins.print"):
            exit_code = cli.main(["Hi", "-f", str(Path(self.temp_dir.name) / "nope.png")])
        self.assertEqual(exit_code, 1)


if __name__ == "__main__":
    unittest.main()
