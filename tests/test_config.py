"""Tests for configuration loading and validation."""

from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from ai_suite.config import DEFAULT_CONFIG, load_config


class ConfigTests(unittest.TestCase):
    """Validate config merge and fallback behavior."""

    def test_missing_config_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config = load_config(config_path=Path(temp_dir) / "config.toml")
        self.assertEqual(config, DEFAULT_CONFIG)
        self.assertEqual(config["app"]["title"], "AI Suite")
        self.assertEqual(config["openai"]["timeout"], 120)
        self.assertEqual(config["cli"]["max_file_bytes"], 1_000_000)
        self.assertTrue(config["persistence"]["enabled"])

    def test_partial_config_overrides_selected_values(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[anthropic]
default_model = " claude-3-5-haiku-20241022 "
max_tokens = 2048
base_url = "https://proxy.example.com/v1/"

[persistence]
enabled = false
                """.strip(),
                encoding="utf-8",
            )
            config = load_config(config_path=config_path)
        self.assertEqual(config["anthropic"]["default_model"], "claude-3-5-haiku-20241022")
        self.assertEqual(config["anthropic"]["max_tokens"], 2048)
        self.assertEqual(config["anthropic"]["base_url"], "https://proxy.example.com/v1")
        self.assertFalse(config["persistence"]["enabled"])
        self.assertEqual(config["openai"], DEFAULT_CONFIG["openai"])

    def test_invalid_values_fallback_to_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text(
                """
[openai]
base_url = "ftp://example.com"

[logging]
level = "LOUD"
                """.strip(),
                encoding="utf-8",
            )
            config = load_config(config_path=config_path)
        self.assertEqual(config, DEFAULT_CONFIG)

    def test_unparseable_toml_uses_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            config_path = Path(temp_dir) / "config.toml"
            config_path.write_text("[openai\nbase_url = ", encoding="utf-8")
            config = load_config(config_path=config_path)
        self.assertEqual(config, DEFAULT_CONFIG)


if __name__ == "__main__":
    unittest.main()
