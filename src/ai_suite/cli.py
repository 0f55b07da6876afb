"""Command-line entrypoint for one-shot prompts (``ai-suite-ask``)."""

from __future__ import annotations

import argparse
import asyncio
import os
import sys
from typing import NoReturn, Sequence

from dotenv import load_dotenv

from .config import load_config
from .logging_utils import configure_logging
from .models import Provider
from .oneshot import CREDENTIAL_ENV, OneShotRequest, run_oneshot
from .providers import build_adapters

_EPILOG = "Environment:\n" + "\n".join(
    f"  {env:<18} required for {provider.value}"
    for provider, env in CREDENTIAL_ENV.items()
)


class _ArgumentParser(argparse.ArgumentParser):
    """Argument parser that exits with status 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {message}\n")


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="ai-suite-ask",
        description="Send one prompt to an allowlisted model and print the reply.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--provider",
        choices=[provider.value for provider in Provider],
        help="openai | anthropic",
    )
    parser.add_argument("--model", help="model name (must be in allowlist)")
    parser.add_argument(
        "--prompt", default="", help="user prompt. If omitted, reads from stdin."
    )
    parser.add_argument("--system", default="", help="system prompt")
    parser.add_argument("--file", help="include file content (explicit opt-in)")
    parser.add_argument(
        "--stream",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="stream output (default: true)",
    )
    parser.add_argument("positional_prompt", nargs="?", default="", help=argparse.SUPPRESS)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse flags, run one request, and return the exit status."""
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if not args.provider or not args.model:
        parser.print_help(sys.stderr)
        return 1

    load_dotenv()
    config = load_config()
    configure_logging(config["logging"])

    request = OneShotRequest(
        provider=args.provider,
        model=args.model,
        prompt=args.prompt or args.positional_prompt,
        system=args.system,
        file=args.file,
        stream=args.stream,
    )
    return asyncio.run(
        run_oneshot(
            request,
            environ=os.environ,
            stdin=sys.stdin,
            out=sys.stdout,
            err=sys.stderr,
            adapters=build_adapters(config),
            max_file_bytes=config["cli"]["max_file_bytes"],
        )
    )


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
