"""Turn raw files into inlined text or uploaded-file references."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping
import logging
from pathlib import Path

from docx import Document
from openpyxl import load_workbook

from .client import ProviderClient
from .exceptions import (
    ExtractionError,
    FileTooLargeError,
    MissingCredentialError,
    UploadError,
)
from .models import AttachmentRef, Provider
from .providers.base import ProviderAdapter

LOGGER = logging.getLogger(__name__)

Extractor = Callable[[Path], str]


def extract_docx(path: Path) -> str:
    """Return paragraph and table text from a word-processor document."""
    document = Document(str(path))
    parts = [para.text for para in document.paragraphs if para.text.strip()]
    for table in document.tables:
        for row in table.rows:
            parts.append(" | ".join(cell.text for cell in row.cells))
    return "\n\n".join(parts)


def extract_xlsx(path: Path) -> str:
    """Return every non-empty row of every sheet, one section per sheet."""
    workbook = load_workbook(str(path), read_only=True, data_only=True)
    try:
        sections: list[str] = []
        for sheet_name in workbook.sheetnames:
            rows: list[str] = []
            for row in workbook[sheet_name].iter_rows(values_only=True):
                values = ["" if cell is None else str(cell) for cell in row]
                if any(values):
                    rows.append(" | ".join(values))
            if rows:
                sections.append(f"## {sheet_name}\n\n" + "\n".join(rows))
        return "\n\n".join(sections)
    finally:
        workbook.close()


DEFAULT_EXTRACTORS: dict[str, Extractor] = {
    ".docx": extract_docx,
    ".xlsx": extract_xlsx,
    ".xlsm": extract_xlsx,
}


class AttachmentResolver:
    """Resolve files for a provider: extract known document types, upload the rest.

    Extractable documents are always inlined, even when the provider could
    accept an upload.
    """

    def __init__(
        self,
        client: ProviderClient,
        adapters: Mapping[Provider, ProviderAdapter],
        *,
        max_upload_bytes: int = 20 * 1024 * 1024,
        extractors: Mapping[str, Extractor] | None = None,
    ) -> None:
        self.client = client
        self.adapters = adapters
        self.max_upload_bytes = max_upload_bytes
        self.extractors: dict[str, Extractor] = dict(
            DEFAULT_EXTRACTORS if extractors is None else extractors
        )

    def is_extractable(self, name: str) -> bool:
        return Path(name).suffix.lower() in self.extractors

    def _check_size(self, path: Path) -> None:
        try:
            size = path.stat().st_size
        except OSError as exc:
            raise UploadError(0, f"Unable to read {path.name}: {exc}") from exc
        if size > self.max_upload_bytes:
            raise FileTooLargeError(
                f"File too large ({size} bytes). Limit is {self.max_upload_bytes} bytes."
            )

    async def _extract(self, path: Path) -> AttachmentRef:
        extractor = self.extractors[path.suffix.lower()]
        try:
            text = await asyncio.to_thread(extractor, path)
        except Exception as exc:  # noqa: BLE001 - parser libraries raise many types.
            LOGGER.warning(
                "attachment.extract.failed",
                extra={
                    "event": "attachment.extract.failed",
                    "file": path.name,
                    "error_type": type(exc).__name__,
                },
            )
            raise ExtractionError(f"Could not extract text from {path.name}: {exc}") from exc
        LOGGER.info(
            "attachment.extracted",
            extra={"event": "attachment.extracted", "file": path.name, "chars": len(text)},
        )
        return AttachmentRef.inlined(path.name, text)

    async def _upload(
        self, path: Path, provider: Provider, credential: str
    ) -> AttachmentRef:
        if not credential.strip():
            raise MissingCredentialError(
                f"Missing API key for {provider.label}; cannot upload {path.name}."
            )
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise UploadError(0, f"Unable to read {path.name}: {exc}") from exc
        remote_id = await self.client.upload(
            self.adapters[provider], path.name, data, credential.strip()
        )
        return AttachmentRef.uploaded(path.name, remote_id)

    async def resolve(
        self, path: str | Path, provider: Provider, credential: str
    ) -> AttachmentRef:
        """Return an inlined or uploaded reference for one file."""
        target = Path(path).expanduser()
        self._check_size(target)
        if self.is_extractable(target.name):
            return await self._extract(target)
        return await self._upload(target, provider, credential)

    async def resolve_many(
        self,
        paths: Iterable[str | Path],
        provider: Provider,
        credential: str,
        on_resolved: Callable[[AttachmentRef], None],
    ) -> list[AttachmentRef]:
        """Resolve files in selection order, handing each result to ``on_resolved``.

        Stops at the first failure and re-raises it; earlier files have
        already been delivered.
        """
        resolved: list[AttachmentRef] = []
        for path in paths:
            ref = await self.resolve(path, provider, credential)
            on_resolved(ref)
            resolved.append(ref)
        return resolved
