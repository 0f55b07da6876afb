"""Tests for CLI entrypoint wiring."""

from __future__ import annotations

from contextlib import redirect_stdout
import io
import unittest
from unittest.mock import patch

try:
    from ai_suite.__main__ import main
except ModuleNotFoundError:
    main = None  # type: ignore[assignment]


@unittest.skipIf(main is None, "textual is not installed")
class MainEntrypointTests(unittest.TestCase):
    """Validate top-level main() behavior."""

    def test_main_ensures_config_and_runs_app(self) -> None:
        with patch("ai_suite.__main__.ensure_config_dir") as ensure_mock, patch(
            "ai_suite.__main__.load_dotenv"
        ), patch("ai_suite.__main__.AiSuiteApp") as app_cls_mock:
            app_instance = app_cls_mock.return_value
            main([])  # type: ignore[misc]
            ensure_mock.assert_called_once()
            app_cls_mock.assert_called_once()
            app_instance.run.assert_called_once()

    def test_version_flag_skips_app(self) -> None:
        stdout = io.StringIO()
        with patch("ai_suite.__main__.AiSuiteApp") as app_cls_mock, redirect_stdout(stdout):
            main(["--version"])  # type: ignore[misc]
        app_cls_mock.assert_not_called()
        self.assertTrue(stdout.getvalue().startswith("ai-suite "))


if __name__ == "__main__":
    unittest.main()
