from __future__ import annotations

from pathlib import Path, PurePosixPath


class DataAccessError(Exception):
    pass


def resolve_under_root(*, root: Path, relpath: str) -> Path:
    """
    Resolve a relative path under an explicit, resolved root directory.

    Absolute paths and traversal outside `root` are rejected.
    """

    if relpath.startswith(("/", "\\")) or (":" in relpath and "\\" in relpath):
        raise DataAccessError(f"Expected a relative path under root, got: {relpath!r}")

    base = root.expanduser().resolve()
    candidate = (base / relpath).resolve()
    if not candidate.is_relative_to(base):
        raise DataAccessError(f"Path traversal or external reference detected: relpath={relpath!r}")

    return candidate


def discover_pdf_relpaths(corpus_root: Path) -> list[str]:
    """
    All `*.pdf` files under `corpus_root` (recursive), as sorted posix relpaths.
    """

    root = corpus_root.expanduser().resolve()
    found = [
        p.relative_to(root).as_posix()
        for p in root.rglob("*")
        if p.is_file() and p.name.lower().endswith(".pdf")
    ]
    return sorted(found)


def composite_relpath(*, source_pdf_relpath: str, page_index: int) -> str:
    """
    Output relpath mirroring the source tree: "<dir>/<stem>-<page_index>.png".
    """

    src = PurePosixPath(source_pdf_relpath.replace("\\", "/"))
    return (src.parent / f"{src.stem}-{page_index}.png").as_posix()
