from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any

from render_backends import (
    BackendConfig,
    BackendName,
    RenderedDocument,
    RenderError,
    RenderOptions,
    get_backend,
)
from render_backends.engines import RenderBackend

from .annotate import annotate_page, decode_page
from .assemble import assemble_composite
from .contracts import (
    CompositeConfig,
    CompositeCorpusResult,
    CompositeDocResult,
    CompositeError,
    CompositePageRef,
)
from .data_access import DataAccessError, composite_relpath, discover_pdf_relpaths, resolve_under_root

logger = logging.getLogger(__name__)


def _get_backends(names: Sequence[BackendName], backend_config: BackendConfig) -> list[RenderBackend]:
    return [get_backend(name, backend_config) for name in names]


def _meta(config: CompositeConfig, backends: Sequence[RenderBackend] | None = None) -> dict[str, Any]:
    meta: dict[str, Any] = {"scale": config.scale, "border_fraction": config.border_fraction}
    if backends is not None:
        meta["backend_versions"] = {b.backend_id(): b.backend_version() for b in backends}
    return meta


def _failed(
    *,
    config: CompositeConfig,
    backends: Sequence[RenderBackend],
    source_pdf_relpath: str,
    error: CompositeError,
    page_counts: dict[str, int] | None = None,
) -> CompositeDocResult:
    return CompositeDocResult(
        ok=False,
        source_pdf_relpath=source_pdf_relpath,
        backends=[b.backend_id() for b in backends],
        page_counts=page_counts or {},
        pages=[],
        errors=[error],
        meta=_meta(config, backends),
    )


def _error_from_render_error(e: RenderError) -> CompositeError:
    return CompositeError(code=e.code, message=e.message, detail={"backend": e.backend, **e.detail})


def render_all_backends(
    *,
    pdf_bytes: bytes,
    backends: Sequence[RenderBackend],
    options: RenderOptions,
    max_workers: int | None = None,
    source_label: str = "<bytes>",
) -> list[RenderedDocument]:
    """
    Render one PDF with every backend in parallel.

    Results come back in `backends` order. The first failure (in that order)
    is re-raised once all renders have finished; in-flight renders are never
    cancelled.
    """

    def _render(backend: RenderBackend) -> RenderedDocument:
        logger.info("rendering %s with %s", source_label, backend.descriptor.display_name)
        return backend.render(pdf_bytes, options)

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [executor.submit(_render, backend) for backend in backends]
        return [f.result() for f in futures]


def _composite_document(
    *,
    config: CompositeConfig,
    backends: Sequence[RenderBackend],
    pdf_file: Path,
    source_pdf_relpath: str,
) -> CompositeDocResult:
    backend_ids = [b.backend_id() for b in backends]

    if not pdf_file.is_file():
        return _failed(
            config=config,
            backends=backends,
            source_pdf_relpath=source_pdf_relpath,
            error=CompositeError(
                code="COMPOSITE_INPUT_NOT_FOUND",
                message="Input PDF not found",
                detail={"source_pdf_relpath": source_pdf_relpath},
            ),
        )

    try:
        pdf_bytes = pdf_file.read_bytes()
    except OSError as e:
        return _failed(
            config=config,
            backends=backends,
            source_pdf_relpath=source_pdf_relpath,
            error=CompositeError(
                code="COMPOSITE_INPUT_READ_FAILED",
                message="Failed to read input PDF",
                detail={"source_pdf_relpath": source_pdf_relpath, "error": repr(e)},
            ),
        )

    try:
        documents = render_all_backends(
            pdf_bytes=pdf_bytes,
            backends=backends,
            options=RenderOptions(scale=config.scale),
            max_workers=config.backend_workers,
            source_label=source_pdf_relpath,
        )
    except RenderError as e:
        logger.error("%s: %s", source_pdf_relpath, e)
        return _failed(
            config=config,
            backends=backends,
            source_pdf_relpath=source_pdf_relpath,
            error=_error_from_render_error(e),
        )
    except Exception as e:
        logger.exception("%s: backend crashed", source_pdf_relpath)
        return _failed(
            config=config,
            backends=backends,
            source_pdf_relpath=source_pdf_relpath,
            error=CompositeError(
                code="COMPOSITE_BACKEND_CRASHED",
                message="Backend raised an unexpected error",
                detail={"error": repr(e)},
            ),
        )

    page_counts = {bid: len(doc) for bid, doc in zip(backend_ids, documents)}
    page_count = len(documents[0])

    short = [bid for bid, doc in zip(backend_ids, documents) if len(doc) < page_count]
    if short:
        return _failed(
            config=config,
            backends=backends,
            source_pdf_relpath=source_pdf_relpath,
            page_counts=page_counts,
            error=CompositeError(
                code="COMPOSITE_PAGE_COUNT_MISMATCH",
                message=f"Backends rendered fewer pages than {backend_ids[0]}",
                detail={"expected": page_count, "short_backends": short},
            ),
        )
    for bid, doc in zip(backend_ids, documents):
        if len(doc) > page_count:
            logger.warning(
                "%s: %s rendered %d pages, only the first %d are composited",
                source_pdf_relpath,
                bid,
                len(doc),
                page_count,
            )

    pages: list[CompositePageRef] = []
    for page_index in range(page_count):
        try:
            tiles = [
                annotate_page(
                    decode_page(doc[page_index], backend_id=backend.backend_id()),
                    color=backend.descriptor.color,
                    border_fraction=config.border_fraction,
                )
                for backend, doc in zip(backends, documents)
            ]
            composite = assemble_composite(tiles)
        except RenderError as e:
            logger.error("%s: %s", source_pdf_relpath, e)
            return _failed(
                config=config,
                backends=backends,
                source_pdf_relpath=source_pdf_relpath,
                page_counts=page_counts,
                error=_error_from_render_error(e),
            )
        except Exception as e:
            # Oversized or corrupt pages must only fail this document.
            logger.exception("%s: page %d could not be composited", source_pdf_relpath, page_index)
            return _failed(
                config=config,
                backends=backends,
                source_pdf_relpath=source_pdf_relpath,
                page_counts=page_counts,
                error=CompositeError(
                    code="COMPOSITE_PAGE_FAILED",
                    message="Page could not be composited",
                    detail={"page_index": page_index, "error": repr(e)},
                ),
            )

        relpath = composite_relpath(source_pdf_relpath=source_pdf_relpath, page_index=page_index)
        out_file = config.out_root / relpath
        try:
            out_file.parent.mkdir(parents=True, exist_ok=True)
            composite.save(out_file, format="PNG")
        except OSError as e:
            return _failed(
                config=config,
                backends=backends,
                source_pdf_relpath=source_pdf_relpath,
                page_counts=page_counts,
                error=CompositeError(
                    code="COMPOSITE_WRITE_FAILED",
                    message="Failed to write composite image",
                    detail={"image_relpath": relpath, "error": repr(e)},
                ),
            )

        logger.info("wrote %s", out_file)
        pages.append(
            CompositePageRef(
                page_index=page_index,
                image_relpath=relpath,
                width_px=composite.width,
                height_px=composite.height,
            )
        )

    return CompositeDocResult(
        ok=True,
        source_pdf_relpath=source_pdf_relpath,
        backends=backend_ids,
        page_counts=page_counts,
        pages=pages,
        errors=[],
        meta=_meta(config, backends),
    )


def run_composite_on_pdf_file(
    *,
    config: CompositeConfig,
    pdf_file: Path,
    source_pdf_relpath: str,
    backend_config: BackendConfig,
) -> CompositeDocResult:
    """
    Composite a single PDF. Outputs land under `config.out_root` at the
    location `source_pdf_relpath` mirrors.
    """

    backends = _get_backends(config.backends, backend_config)
    return _composite_document(
        config=config, backends=backends, pdf_file=pdf_file, source_pdf_relpath=source_pdf_relpath
    )


def run_composite_on_corpus(
    *,
    config: CompositeConfig,
    corpus_root: Path,
    backend_config: BackendConfig,
) -> CompositeCorpusResult:
    """
    Composite every PDF under `corpus_root`, mirroring the tree under
    `config.out_root`.

    Documents are processed concurrently; a failing document is recorded in
    its own result and never stops the others. `documents` keeps discovery
    order regardless of completion order.
    """

    backends = _get_backends(config.backends, backend_config)
    relpaths = discover_pdf_relpaths(corpus_root)
    logger.info("found %d PDF files under %s", len(relpaths), corpus_root)

    def _one(relpath: str) -> CompositeDocResult:
        try:
            pdf_file = resolve_under_root(root=corpus_root, relpath=relpath)
        except DataAccessError as e:
            return _failed(
                config=config,
                backends=backends,
                source_pdf_relpath=relpath,
                error=CompositeError(
                    code="COMPOSITE_DATA_ACCESS_ERROR",
                    message=str(e),
                    detail={"corpus_root": str(corpus_root), "relpath": relpath},
                ),
            )
        return _composite_document(
            config=config, backends=backends, pdf_file=pdf_file, source_pdf_relpath=relpath
        )

    with ThreadPoolExecutor(max_workers=config.document_workers) as executor:
        documents = list(executor.map(_one, relpaths))

    failed = sum(1 for d in documents if not d.ok)
    return CompositeCorpusResult(
        ok=failed == 0,
        corpus_root=corpus_root.as_posix(),
        documents=documents,
        meta={**_meta(config), "document_count": len(documents), "failed_count": failed},
    )
