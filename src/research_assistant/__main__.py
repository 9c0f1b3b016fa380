"""CLI entrypoint for the research assistant."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib import metadata
from pathlib import Path

from dotenv import load_dotenv

from .app import ResearchAssistantApp
from .config import ensure_config_dir, load_config
from .profiles import PROFILES


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="research-assistant",
        description="Research Assistant - social science chat and image analysis",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    parser.add_argument(
        "--module",
        choices=["landing", *sorted(PROFILES)],
        default=None,
        help="Open a module directly instead of the landing screen",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to an alternative config.toml",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Load .env, ensure configuration exists, handle CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("research-assistant")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"research-assistant {version}")
        return

    load_dotenv()
    ensure_config_dir()
    app = ResearchAssistantApp(
        config=load_config(args.config),
        start_module=args.module,
    )
    app.run()


if __name__ == "__main__":
    main()
