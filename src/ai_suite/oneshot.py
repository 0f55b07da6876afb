"""Non-interactive single request/response cycle used by the command line."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import IO

from .client import ProviderClient
from .exceptions import (
    AiSuiteError,
    DisallowedModelError,
    EmptyReplyError,
    FileTooLargeError,
    MissingCredentialError,
    NoPromptError,
)
from .models import ConversationProfile, Message, Provider, Role
from .providers import get_adapter
from .providers.base import ProviderAdapter

LOGGER = logging.getLogger(__name__)

MODEL_ALLOWLIST: dict[Provider, tuple[str, ...]] = {
    Provider.OPENAI: (
        "gpt-4.1",
        "gpt-4.1-mini",
        "gpt-4.1-nano",
        "gpt-4o",
        "gpt-4o-mini",
    ),
    Provider.ANTHROPIC: (
        "claude-3-5-sonnet-20241022",
        "claude-3-5-haiku-20241022",
        "claude-3-opus-20240229",
    ),
}

CREDENTIAL_ENV: dict[Provider, str] = {
    Provider.OPENAI: "OPENAI_API_KEY",
    Provider.ANTHROPIC: "ANTHROPIC_API_KEY",
}

DEFAULT_MAX_FILE_BYTES = 1_000_000


@dataclass(frozen=True)
class OneShotRequest:
    """Everything one invocation needs, as parsed from the command line."""

    provider: str
    model: str
    prompt: str = ""
    system: str = ""
    file: str | None = None
    stream: bool = True


def ensure_allowlist(provider: str, model: str) -> Provider:
    """Return the provider identity, or raise when provider/model are not allowed."""
    try:
        identity = Provider(provider)
    except ValueError as exc:
        raise DisallowedModelError(f"Provider not allowed: {provider}") from exc
    allowed = MODEL_ALLOWLIST[identity]
    if model not in allowed:
        raise DisallowedModelError(
            f"Model not allowed for {identity.value}. Allowed: {', '.join(allowed)}"
        )
    return identity


def read_prompt(prompt: str, stdin: IO[str]) -> str:
    """Use the explicit prompt, else block on a full read of ``stdin``."""
    text = prompt.strip()
    if not text:
        text = stdin.read().strip()
    if not text:
        raise NoPromptError("No prompt provided. Use --prompt or stdin.")
    return text


def read_file_explicit(file_path: str, max_bytes: int = DEFAULT_MAX_FILE_BYTES) -> str:
    """Read a file verbatim after checking it against the size cap."""
    resolved = Path(file_path).expanduser().resolve()
    size = resolved.stat().st_size
    if size > max_bytes:
        raise FileTooLargeError(f"File too large ({size} bytes). Limit is {max_bytes} bytes.")
    return resolved.read_text(encoding="utf-8")


def build_user_content(prompt: str, file_content: str | None, file_path: str | None) -> str:
    if not file_content:
        return prompt
    return f"{prompt}\n\n[File: {file_path}]\n{file_content}"


async def invoke(
    adapter: ProviderAdapter,
    client: ProviderClient,
    profile: ConversationProfile,
    *,
    stream: bool,
    out: IO[str],
) -> None:
    """Perform exactly one request and write the reply to ``out``.

    A stream that ends without a single token raises ``EmptyReplyError``.
    """
    body = adapter.build_request(profile, stream=stream)
    if stream:
        received = 0
        async for token in client.stream(adapter, body, profile.credential):
            if not token:
                continue
            received += 1
            out.write(token)
            out.flush()
        if not received:
            raise EmptyReplyError(f"{adapter.provider.label} returned no message.")
    else:
        out.write(await client.complete(adapter, body, profile.credential))
    out.write("\n")
    out.flush()


async def run_oneshot(
    request: OneShotRequest,
    *,
    environ: Mapping[str, str],
    stdin: IO[str],
    out: IO[str],
    err: IO[str],
    client: ProviderClient | None = None,
    adapters: Mapping[Provider, ProviderAdapter] | None = None,
    max_file_bytes: int = DEFAULT_MAX_FILE_BYTES,
) -> int:
    """Validate, run one cycle, and return the process exit status."""
    owns_client = client is None
    transport = client or ProviderClient()
    try:
        provider = ensure_allowlist(request.provider, request.model)
        prompt = read_prompt(request.prompt, stdin)
        file_content = (
            read_file_explicit(request.file, max_file_bytes) if request.file else None
        )
        credential = environ.get(CREDENTIAL_ENV[provider], "").strip()
        if not credential:
            raise MissingCredentialError(f"Missing {CREDENTIAL_ENV[provider]}")

        adapter = adapters[provider] if adapters is not None else get_adapter(provider)
        profile = ConversationProfile(
            model=request.model,
            system_prompt=request.system,
            credential=credential,
            messages=[
                Message(Role.USER, build_user_content(prompt, file_content, request.file))
            ],
        )
        await invoke(adapter, transport, profile, stream=request.stream, out=out)
    except (AiSuiteError, OSError, UnicodeDecodeError) as exc:
        LOGGER.info(
            "oneshot.failed",
            extra={"event": "oneshot.failed", "error_type": type(exc).__name__},
        )
        err.write(f"Error: {exc}\n")
        err.flush()
        return 1
    finally:
        if owns_client:
            await transport.aclose()
    return 0
