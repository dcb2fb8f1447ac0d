from __future__ import annotations

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from render_backends import BackendName


@dataclass(frozen=True, slots=True)
class CompositeError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class CompositePageRef:
    page_index: int  # 0-indexed, as in the output file name
    image_relpath: str  # out_root-relative posix path of the composite PNG
    width_px: int
    height_px: int


@dataclass(frozen=True, slots=True)
class CompositeDocResult:
    """
    Outcome of compositing one PDF.

    On failure `ok` is False and `pages` is empty; composites already written
    for an aborted document are not reported.
    """

    ok: bool
    source_pdf_relpath: str
    backends: list[str]  # left-to-right tile order
    page_counts: dict[str, int]
    pages: list[CompositePageRef]
    errors: list[CompositeError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class CompositeCorpusResult:
    ok: bool
    corpus_root: str
    documents: list[CompositeDocResult]  # discovery order
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class CompositeConfig:
    """
    Compositing parameters.

    - `backends` fixes the left-to-right order of tiles; the first backend's
      page count is authoritative
    - `border_fraction` None disables border tagging
    - worker counts bound the two thread pools (None => executor default)
    """

    out_root: Path
    backends: tuple[BackendName, ...]
    scale: float = 1.0
    border_fraction: float | None = 1.0 / 50.0
    backend_workers: int | None = None
    document_workers: int | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.out_root, Path):
            raise TypeError("out_root must be a pathlib.Path")
        if not self.backends:
            raise ValueError("at least one backend must be configured")
        if not self.scale > 0:
            raise ValueError("scale must be a positive number")
        if self.border_fraction is not None and not (0.0 < self.border_fraction < 1.0):
            raise ValueError("border_fraction must be within (0, 1)")
        for workers in (self.backend_workers, self.document_workers):
            if workers is not None and workers < 1:
                raise ValueError("worker counts must be >= 1")
