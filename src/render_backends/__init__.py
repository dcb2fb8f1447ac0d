"""
Rendering backends behind one contract: `render(pdf_bytes, options) -> list[png bytes]`.

- Command line renderers (pdfium, mupdf, poppler, quartz, pdf.js, pdfbox,
  ghostscript) are run through a private temporary workspace.
- pypdfium2 renders in-process.

Data access:
- No environment variable reads outside `BackendConfig.from_environ`
- Failures are raised as `RenderError` subclasses, never swallowed
"""

from .contracts import (
    BackendConfig,
    BackendDescriptor,
    BackendName,
    RenderedDocument,
    RenderedPage,
    RenderOptions,
)
from .errors import (
    ConfigMissing,
    DecodeFailed,
    DuplicatePageIndex,
    ExportFailed,
    NoOutputProduced,
    PdfParseFailed,
    ProcessSpawnFailed,
    RenderError,
)
from .registry import BACKEND_DESCRIPTORS, describe, get_backend, parse_backend_names

__all__ = [
    "BACKEND_DESCRIPTORS",
    "BackendConfig",
    "BackendDescriptor",
    "BackendName",
    "ConfigMissing",
    "DecodeFailed",
    "DuplicatePageIndex",
    "ExportFailed",
    "NoOutputProduced",
    "PdfParseFailed",
    "ProcessSpawnFailed",
    "RenderError",
    "RenderOptions",
    "RenderedDocument",
    "RenderedPage",
    "describe",
    "get_backend",
    "parse_backend_names",
]
