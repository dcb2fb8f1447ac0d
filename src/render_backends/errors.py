from __future__ import annotations

from typing import Any


class RenderError(Exception):
    """
    Base class for every failure a backend can report.

    `code` is a stable identifier that ends up in composite ledgers.
    """

    code = "RENDER_FAILED"

    def __init__(self, backend: str, message: str, detail: dict[str, Any] | None = None) -> None:
        super().__init__(f"{backend}: {message}")
        self.backend = backend
        self.message = message
        self.detail: dict[str, Any] = dict(detail or {})


class ConfigMissing(RenderError):
    code = "RENDER_CONFIG_MISSING"


class ProcessSpawnFailed(RenderError):
    code = "RENDER_PROCESS_SPAWN_FAILED"


class DecodeFailed(RenderError):
    code = "RENDER_DECODE_FAILED"


class PdfParseFailed(RenderError):
    code = "RENDER_PDF_PARSE_FAILED"


class ExportFailed(RenderError):
    code = "RENDER_EXPORT_FAILED"


class NoOutputProduced(RenderError):
    code = "RENDER_NO_OUTPUT"


class DuplicatePageIndex(RenderError):
    code = "RENDER_DUPLICATE_PAGE_INDEX"
