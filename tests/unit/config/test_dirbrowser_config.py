"""Tests for config persistence and input sanitization.

Covers the remembered server URL, sign-in details and the captcha flag.
Ensures malformed config data is safely normalized on load.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from dirbrowser import config


class ConfigBehaviorTests(unittest.TestCase):
    def test_base_url_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "dirbrowser.json"
            with mock.patch("dirbrowser.config.CONFIG_PATH", config_path):
                self.assertIsNone(config.load_base_url())
                config.save_base_url("  http://files.example  ")
                self.assertEqual(config.load_base_url(), "http://files.example")
                config.save_base_url("   ")
                self.assertEqual(config.load_base_url(), "http://files.example")

    def test_password_is_only_kept_when_remembered(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "dirbrowser.json"
            with mock.patch("dirbrowser.config.CONFIG_PATH", config_path):
                config.save_login("user1", "secret", remember=True)
                self.assertEqual(config.load_login(), config.SavedLogin("user1", "secret", True))

                config.save_login("user1", "secret", remember=False)
                self.assertEqual(config.load_login(), config.SavedLogin("user1", "", False))
                self.assertNotIn("login_password", config.load_config())

    def test_clear_login_keeps_name(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "dirbrowser.json"
            with mock.patch("dirbrowser.config.CONFIG_PATH", config_path):
                config.save_login("user1", "secret", remember=True)
                config.clear_login()

                self.assertEqual(config.load_login(), config.SavedLogin("user1", "", False))

    def test_malformed_values_are_ignored(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "dirbrowser.json"
            with mock.patch("dirbrowser.config.CONFIG_PATH", config_path):
                config.save_config(
                    {
                        "base_url": 42,
                        "login_name": ["x"],
                        "login_password": "secret",
                        "auto_login": "yes",
                        "show_captcha": 1,
                    }
                )

                self.assertIsNone(config.load_base_url())
                self.assertEqual(config.load_login(), config.SavedLogin())
                self.assertFalse(config.load_show_captcha())

    def test_show_captcha_round_trip(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "dirbrowser.json"
            with mock.patch("dirbrowser.config.CONFIG_PATH", config_path):
                config.save_show_captcha(True)
                self.assertTrue(config.load_show_captcha())
                config.save_show_captcha(False)
                self.assertFalse(config.load_show_captcha())

    def test_unreadable_or_non_object_config_loads_empty(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "dirbrowser.json"
            with mock.patch("dirbrowser.config.CONFIG_PATH", config_path):
                self.assertEqual(config.load_config(), {})
                config_path.write_text("{not json", encoding="utf-8")
                self.assertEqual(config.load_config(), {})
                config_path.write_text("[1, 2]", encoding="utf-8")
                self.assertEqual(config.load_config(), {})


if __name__ == "__main__":
    unittest.main()
