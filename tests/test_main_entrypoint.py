"""Tests for CLI entrypoint wiring."""

from __future__ import annotations

from contextlib import redirect_stdout
import io
from pathlib import Path
import unittest
from unittest.mock import patch

from research_assistant.__main__ import main


class MainEntrypointTests(unittest.TestCase):
    """Validate top-level main() behavior."""

    def test_main_loads_env_config_and_runs_app(self) -> None:
        with patch("research_assistant.__main__.load_dotenv") as dotenv_mock, patch(
            "research_assistant.__main__.ensure_config_dir"
        ) as ensure_mock, patch(
            "research_assistant.__main__.load_config", return_value={"stub": {}}
        ) as load_mock, patch(
            "research_assistant.__main__.ResearchAssistantApp"
        ) as app_cls_mock:
            main([])
            dotenv_mock.assert_called_once()
            ensure_mock.assert_called_once()
            load_mock.assert_called_once_with(None)
            app_cls_mock.assert_called_once_with(config={"stub": {}}, start_module=None)
            app_cls_mock.return_value.run.assert_called_once()

    def test_module_and_config_flags_are_forwarded(self) -> None:
        with patch("research_assistant.__main__.load_dotenv"), patch(
            "research_assistant.__main__.ensure_config_dir"
        ), patch(
            "research_assistant.__main__.load_config", return_value={}
        ) as load_mock, patch(
            "research_assistant.__main__.ResearchAssistantApp"
        ) as app_cls_mock:
            main(["--module", "image", "--config", "/tmp/alt.toml"])
            load_mock.assert_called_once_with(Path("/tmp/alt.toml"))
            self.assertEqual(app_cls_mock.call_args.kwargs["start_module"], "image")

    def test_version_flag_prints_and_skips_app(self) -> None:
        buffer = io.StringIO()
        with patch("research_assistant.__main__.ResearchAssistantApp") as app_cls_mock:
            with redirect_stdout(buffer):
                main(["--version"])
            app_cls_mock.assert_not_called()
        self.assertTrue(buffer.getvalue().startswith("research-assistant "))

    def test_unknown_module_rejected_by_parser(self) -> None:
        with patch("sys.stderr", new_callable=io.StringIO):
            with self.assertRaises(SystemExit):
                main(["--module", "video"])


if __name__ == "__main__":
    unittest.main()
