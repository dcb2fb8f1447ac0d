"""
Rendering backends.

Command line backends share `process_bridge`; `Pypdfium2Backend` renders in-process.
"""

from .base import RenderBackend
from .cli_backends import (
    CliRenderBackend,
    GhostscriptBackend,
    MupdfBackend,
    PdfboxBackend,
    PdfiumBackend,
    PdfjsBackend,
    PopplerBackend,
    QuartzBackend,
)
from .process_bridge import harvest_output_files, render_via_cli
from .pypdfium2_engine import Pypdfium2Backend

__all__ = [
    "CliRenderBackend",
    "GhostscriptBackend",
    "MupdfBackend",
    "PdfboxBackend",
    "PdfiumBackend",
    "PdfjsBackend",
    "PopplerBackend",
    "Pypdfium2Backend",
    "QuartzBackend",
    "RenderBackend",
    "harvest_output_files",
    "render_via_cli",
]
