"""Pure parsing helpers for inline side-channel directives."""

from __future__ import annotations

from dataclasses import dataclass
import re

_KEY_DIRECTIVE_RE = re.compile(r"^/key(?:\s+(\S+))?\s*$")


@dataclass(frozen=True)
class CredentialDirective:
    """A ``/key <value>`` line typed into the message box."""

    credential: str


def parse_credential_directive(text: str) -> CredentialDirective | None:
    """Return the credential update carried by ``text``, if it is one.

    ``/key`` with no value clears the stored key.
    """
    match = _KEY_DIRECTIVE_RE.match(text.strip())
    if match is None:
        return None
    return CredentialDirective(credential=match.group(1) or "")
