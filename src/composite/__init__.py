"""
Side-by-side composites of one PDF rendered by several backends.

For every page index, each backend's page is tagged with a border in the
backend's identity color and the tiles are laid out left-to-right in the
configured backend order. Outputs mirror the input tree under an explicit
output root; nothing is written elsewhere.
"""

from .annotate import annotate_page, border_width_for, decode_page
from .assemble import assemble_composite, composite_size
from .contracts import (
    CompositeConfig,
    CompositeCorpusResult,
    CompositeDocResult,
    CompositeError,
    CompositePageRef,
)
from .doc_module import render_all_backends, run_composite_on_corpus, run_composite_on_pdf_file

__all__ = [
    "CompositeConfig",
    "CompositeCorpusResult",
    "CompositeDocResult",
    "CompositeError",
    "CompositePageRef",
    "annotate_page",
    "assemble_composite",
    "border_width_for",
    "composite_size",
    "decode_page",
    "render_all_backends",
    "run_composite_on_corpus",
    "run_composite_on_pdf_file",
]
