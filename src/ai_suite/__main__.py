"""Entrypoint for the interactive ai-suite terminal UI."""

from __future__ import annotations

import argparse
from collections.abc import Sequence
from importlib import metadata

from dotenv import load_dotenv

from .app import AiSuiteApp
from .config import ensure_config_dir


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ai-suite",
        description="AI Suite - terminal chat for OpenAI and Anthropic models",
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> None:
    """Ensure configuration exists, handle CLI flags, and run the TUI."""

    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    if args.version:
        try:
            version = metadata.version("ai-suite")
        except metadata.PackageNotFoundError:
            version = "0.0.0"
        print(f"ai-suite {version}")
        return

    load_dotenv()
    ensure_config_dir()
    app = AiSuiteApp()
    app.run()


if __name__ == "__main__":
    main()
