"""State file persistence plus snapshot import/export helpers."""

from __future__ import annotations

import contextlib
from datetime import UTC, datetime
import json
import logging
import os
from pathlib import Path
from typing import Any

from .exceptions import ImportParseError

LOGGER = logging.getLogger(__name__)


class StatePersistence:
    """Save and restore the credential-free store snapshot on disk."""

    def __init__(self, enabled: bool, state_path: str) -> None:
        self.enabled = enabled
        self.state_path = Path(state_path).expanduser()

    @staticmethod
    def _restrict(path: Path, mode: int = 0o600) -> None:
        if os.name == "posix":
            with contextlib.suppress(OSError):
                path.chmod(mode)

    def _write_private(self, target: Path, payload: dict[str, Any]) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(
            json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8"
        )
        self._restrict(target)

    def save(self, snapshot: dict[str, Any]) -> None:
        """Persist the snapshot; a no-op when persistence is disabled."""
        if not self.enabled:
            return
        try:
            self._write_private(self.state_path, snapshot)
            self._restrict(self.state_path.parent, 0o700)
        except OSError as exc:
            LOGGER.warning(
                "persistence.save.failed",
                extra={"event": "persistence.save.failed", "reason": str(exc)},
            )

    def load(self) -> dict[str, Any] | None:
        """Return the saved snapshot, or ``None`` when absent or unreadable."""
        if not self.enabled or not self.state_path.exists():
            return None
        try:
            payload = json.loads(self.state_path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            LOGGER.debug(
                "persistence.load.corrupt",
                extra={"event": "persistence.load.corrupt", "path": str(self.state_path)},
            )
            return None
        return payload if isinstance(payload, dict) else None

    def write_export(self, path: str | Path, snapshot: dict[str, Any]) -> Path:
        """Write a snapshot export to ``path`` and return the resolved target."""
        target = Path(path).expanduser()
        self._write_private(target, snapshot)
        return target

    def read_import(self, path: str | Path) -> dict[str, Any]:
        """Read a snapshot for import, raising ``ImportParseError`` on bad input."""
        source = Path(path).expanduser()
        try:
            payload = json.loads(source.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ImportParseError(f"Import failed: {exc}") from exc
        except ValueError as exc:
            raise ImportParseError("Import failed: invalid JSON") from exc
        if not isinstance(payload, dict):
            raise ImportParseError("Import failed: snapshot must be a JSON object")
        return payload

    def export_markdown(
        self, messages: list[dict[str, Any]], model: str, path: str | Path
    ) -> Path:
        """Write one provider's log as a readable markdown transcript."""
        stamp = datetime.now(UTC).strftime("%Y-%m-%d %H:%M UTC")
        sections = [f"# Conversation Export ({model or 'no model'})\n\n_{stamp}_"]
        for entry in messages:
            heading = str(entry.get("role", "assistant")).capitalize()
            body = str(entry.get("content", "")).strip()
            names = [
                f"- attachment: {ref.get('name', '')}"
                for ref in entry.get("attachments") or []
            ]
            parts = [f"## {heading}", body]
            if names:
                parts.append("\n".join(names))
            sections.append("\n\n".join(parts))
        target = Path(path).expanduser()
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text("\n\n".join(sections) + "\n", encoding="utf-8")
        self._restrict(target)
        return target
