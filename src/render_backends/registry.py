from __future__ import annotations

from .contracts import BackendConfig, BackendDescriptor, BackendName
from .engines import (
    GhostscriptBackend,
    MupdfBackend,
    PdfboxBackend,
    PdfiumBackend,
    PdfjsBackend,
    PopplerBackend,
    Pypdfium2Backend,
    QuartzBackend,
    RenderBackend,
)

BACKEND_DESCRIPTORS: dict[BackendName, BackendDescriptor] = {
    BackendName.PDFIUM: BackendDescriptor(BackendName.PDFIUM, "pdfium", (79, 184, 35), "PDFIUM_BIN"),
    BackendName.MUPDF: BackendDescriptor(BackendName.MUPDF, "mupdf", (34, 186, 184), "MUPDF_BIN"),
    BackendName.POPPLER: BackendDescriptor(BackendName.POPPLER, "poppler", (227, 137, 20), "POPPLER_BIN"),
    BackendName.QUARTZ: BackendDescriptor(BackendName.QUARTZ, "quartz", (234, 250, 60), "QUARTZ_BIN"),
    BackendName.PDFJS: BackendDescriptor(BackendName.PDFJS, "pdf.js", (48, 17, 207), "PDFJS_BIN", "node"),
    BackendName.PDFBOX: BackendDescriptor(BackendName.PDFBOX, "pdfbox", (237, 38, 98), "PDFBOX_BIN", "java"),
    BackendName.GHOSTSCRIPT: BackendDescriptor(
        BackendName.GHOSTSCRIPT, "ghostscript", (235, 38, 218), "GHOSTSCRIPT_BIN"
    ),
    BackendName.PYPDFIUM2: BackendDescriptor(BackendName.PYPDFIUM2, "pypdfium2", (100, 149, 237), None),
}

_CLI_BACKENDS = {
    BackendName.PDFIUM: PdfiumBackend,
    BackendName.MUPDF: MupdfBackend,
    BackendName.POPPLER: PopplerBackend,
    BackendName.QUARTZ: QuartzBackend,
    BackendName.PDFJS: PdfjsBackend,
    BackendName.PDFBOX: PdfboxBackend,
    BackendName.GHOSTSCRIPT: GhostscriptBackend,
}


def describe(name: BackendName) -> BackendDescriptor:
    return BACKEND_DESCRIPTORS[BackendName(name)]


def parse_backend_names(text: str) -> tuple[BackendName, ...]:
    """
    Parse "pdfium,mupdf" into backend names, keeping the given order.
    """

    names: list[BackendName] = []
    for part in text.split(","):
        part = part.strip().lower()
        if not part:
            continue
        try:
            names.append(BackendName(part))
        except ValueError:
            supported = ", ".join(n.value for n in BackendName)
            raise ValueError(f"Unknown backend {part!r} (supported: {supported})") from None
    return tuple(names)


def get_backend(name: BackendName, config: BackendConfig) -> RenderBackend:
    descriptor = describe(name)
    if descriptor.name == BackendName.PYPDFIUM2:
        return Pypdfium2Backend(descriptor)
    cls = _CLI_BACKENDS.get(descriptor.name)
    if cls is None:
        raise ValueError(f"Unsupported rendering backend: {name}")
    return cls(descriptor, config)
