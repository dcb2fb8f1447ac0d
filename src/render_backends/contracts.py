from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path


class BackendName(str, Enum):
    """
    Rendering backend identifiers.

    The set is closed: every member has a descriptor in `registry.BACKEND_DESCRIPTORS`.
    """

    PDFIUM = "pdfium"
    MUPDF = "mupdf"
    POPPLER = "poppler"
    QUARTZ = "quartz"
    PDFJS = "pdfjs"
    PDFBOX = "pdfbox"
    GHOSTSCRIPT = "ghostscript"
    PYPDFIUM2 = "pypdfium2"  # in-process, no external tool


# A page rendered as PNG bytes; a document is its pages in source order (page 0 first).
RenderedPage = bytes
RenderedDocument = list[RenderedPage]

Rgb = tuple[int, int, int]


@dataclass(frozen=True, slots=True)
class RenderOptions:
    scale: float = 1.0  # applied to the backend's native 72 dpi resolution

    def __post_init__(self) -> None:
        if not self.scale > 0:
            raise ValueError("scale must be a positive number")


@dataclass(frozen=True, slots=True)
class BackendDescriptor:
    name: BackendName
    display_name: str
    color: Rgb  # identity color, only used to tag composite tiles
    env_key: str | None  # None for the in-process backend
    host_runtime: str | None = None  # "java" / "node" when the tool needs a launcher


@dataclass(frozen=True, slots=True)
class BackendConfig:
    """
    Paths to the external renderers, built once at startup.

    Data access rule: this is the only object that knows about environment
    variables, and only through `from_environ`. Backends receive it explicitly.
    """

    binaries: Mapping[BackendName, Path] = field(default_factory=dict)
    java_bin: str = "java"
    node_bin: str = "node"

    def binary_for(self, name: BackendName) -> Path | None:
        return self.binaries.get(name)

    @classmethod
    def from_environ(cls, environ: Mapping[str, str]) -> BackendConfig:
        # Local import: the registry imports this module.
        from .registry import BACKEND_DESCRIPTORS

        binaries: dict[BackendName, Path] = {}
        for name, descriptor in BACKEND_DESCRIPTORS.items():
            if descriptor.env_key is None:
                continue
            value = environ.get(descriptor.env_key, "")
            if value.strip():
                binaries[name] = Path(value)

        return cls(
            binaries=binaries,
            java_bin=environ.get("JAVA_BIN") or "java",
            node_bin=environ.get("NODE_BIN") or "node",
        )
