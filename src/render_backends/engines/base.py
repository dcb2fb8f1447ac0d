from __future__ import annotations

from abc import ABC, abstractmethod

from ..contracts import BackendDescriptor, RenderedDocument, RenderOptions


class RenderBackend(ABC):
    """
    Rendering backend abstraction.

    Backends must:
    - Return one PNG per page, in source page order (page 0 first)
    - Raise a `RenderError` subclass on failure, never return partial output
    - Perform NO normalization of the rendered pixels
    """

    def __init__(self, descriptor: BackendDescriptor) -> None:
        self.descriptor = descriptor

    def backend_id(self) -> str:
        return self.descriptor.name.value

    def backend_version(self) -> str | None:
        return None

    @abstractmethod
    def render(self, pdf_bytes: bytes, options: RenderOptions) -> RenderedDocument:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.backend_id()!r})"
