from __future__ import annotations

import io
import threading
from importlib import metadata

import pypdfium2 as pdfium

from ..contracts import RenderedDocument, RenderOptions
from ..errors import ExportFailed, PdfParseFailed
from .base import RenderBackend

# pdfium keeps global state and must not be entered from two threads at once.
_PDFIUM_LOCK = threading.Lock()


class Pypdfium2Backend(RenderBackend):
    """
    In-process renderer: no subprocess, no workspace, same contract as the
    command line backends.
    """

    def backend_version(self) -> str | None:
        try:
            return metadata.version("pypdfium2")
        except metadata.PackageNotFoundError:
            return None

    def render(self, pdf_bytes: bytes, options: RenderOptions) -> RenderedDocument:
        with _PDFIUM_LOCK:
            try:
                doc = pdfium.PdfDocument(pdf_bytes)
            except pdfium.PdfiumError as e:
                raise PdfParseFailed(
                    self.backend_id(), f"failed to parse PDF: {e}", detail={"error": repr(e)}
                ) from e

            try:
                return [
                    self._render_page(doc, page_index=page_index, scale=options.scale)
                    for page_index in range(len(doc))
                ]
            finally:
                doc.close()

    def _render_page(self, doc, *, page_index: int, scale: float) -> bytes:
        try:
            page = doc[page_index]
        except pdfium.PdfiumError as e:
            raise PdfParseFailed(
                self.backend_id(),
                f"failed to load page {page_index}: {e}",
                detail={"page_index": page_index, "error": repr(e)},
            ) from e

        try:
            image = page.render(scale=scale).to_pil()
            return self._encode_png(image, page_index=page_index)
        except pdfium.PdfiumError as e:
            raise ExportFailed(
                self.backend_id(),
                f"failed to rasterize page {page_index}: {e}",
                detail={"page_index": page_index, "error": repr(e)},
            ) from e
        finally:
            page.close()

    def _encode_png(self, image, *, page_index: int) -> bytes:
        buf = io.BytesIO()
        try:
            image.save(buf, format="PNG")
        except (OSError, ValueError) as e:
            raise ExportFailed(
                self.backend_id(),
                f"PNG encoding failed: {e}",
                detail={"page_index": page_index, "error": repr(e)},
            ) from e
        return buf.getvalue()
