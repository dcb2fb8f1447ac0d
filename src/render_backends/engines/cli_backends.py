from __future__ import annotations

import os
from abc import abstractmethod
from pathlib import Path

from ..contracts import BackendConfig, BackendDescriptor, RenderedDocument, RenderOptions
from ..errors import ConfigMissing
from .base import RenderBackend
from .process_bridge import render_via_cli

# Most renderers name pages "<prefix>-<n>.png"; the ones we point at "out-%d.png" are stricter.
OUT_PATTERN = r"out-(\d+)\.png$"
SUFFIX_PATTERN = r"-(\d+)\.png$"


def format_number(value: float) -> str:
    """
    Shortest exact decimal form, without a trailing ".0" (126.0 -> "126", 1.75 -> "1.75").

    Some tools (pdfbox) only accept integral resolutions written as integers.
    """

    s = repr(float(value))
    return s[:-2] if s.endswith(".0") else s


def ppi(options: RenderOptions) -> str:
    return format_number(72.0 * options.scale)


def _dir_arg(workspace_dir: Path) -> str:
    # Tools taking an output directory append file names to it verbatim.
    return f"{workspace_dir}{os.sep}"


class CliRenderBackend(RenderBackend):
    """
    Backend driven through an external command line tool.

    Subclasses only describe the tool's command line and its output naming;
    staging, invocation and output recovery live in `process_bridge`.
    """

    out_file_pattern: str = OUT_PATTERN

    def __init__(self, descriptor: BackendDescriptor, config: BackendConfig) -> None:
        super().__init__(descriptor)
        self.config = config

    def require_binary(self) -> str:
        binary = self.config.binary_for(self.descriptor.name)
        if binary is None:
            raise ConfigMissing(
                self.backend_id(),
                f"{self.descriptor.env_key} is not set",
                detail={"env_key": self.descriptor.env_key},
            )
        return str(binary)

    def host_launcher(self) -> list[str]:
        runtime = self.descriptor.host_runtime
        if runtime is None:
            return []
        if runtime == "java":
            return [self.config.java_bin]
        if runtime == "node":
            return [self.config.node_bin]
        raise ValueError(f"Unsupported host runtime for {self.backend_id()}: {runtime!r}")

    @abstractmethod
    def build_command(
        self, *, binary: str, options: RenderOptions, input_file: Path, workspace_dir: Path
    ) -> list[str]:
        raise NotImplementedError

    def command(
        self, *, binary: str, options: RenderOptions, input_file: Path, workspace_dir: Path
    ) -> list[str]:
        """
        Full argv: the host runtime launcher, if any, followed by the tool's own arguments.
        """

        return [
            *self.host_launcher(),
            *self.build_command(
                binary=binary, options=options, input_file=input_file, workspace_dir=workspace_dir
            ),
        ]

    def render(self, pdf_bytes: bytes, options: RenderOptions) -> RenderedDocument:
        # Resolve configuration before anything touches the filesystem.
        binary = self.require_binary()
        return render_via_cli(
            backend_id=self.backend_id(),
            pdf_bytes=pdf_bytes,
            build_command=lambda input_file, workspace_dir: self.command(
                binary=binary, options=options, input_file=input_file, workspace_dir=workspace_dir
            ),
            out_file_pattern=self.out_file_pattern,
        )


class PdfiumBackend(CliRenderBackend):
    def build_command(self, *, binary, options, input_file, workspace_dir):
        return [
            binary,
            str(input_file),
            str(workspace_dir / "out-%d.png"),
            format_number(options.scale),
        ]


class MupdfBackend(CliRenderBackend):
    def build_command(self, *, binary, options, input_file, workspace_dir):
        return [
            binary,
            "draw",
            "-q",
            "-r",
            ppi(options),
            "-o",
            str(workspace_dir / "out-%d.png"),
            str(input_file),
        ]


class PopplerBackend(CliRenderBackend):
    # pdftoppm appends "-<n>.png" (zero padded) to the given prefix.
    out_file_pattern = SUFFIX_PATTERN

    def build_command(self, *, binary, options, input_file, workspace_dir):
        return [binary, "-r", ppi(options), "-png", str(input_file), str(workspace_dir / "out")]


class QuartzBackend(CliRenderBackend):
    out_file_pattern = SUFFIX_PATTERN

    def build_command(self, *, binary, options, input_file, workspace_dir):
        return [binary, str(input_file), _dir_arg(workspace_dir), format_number(options.scale)]


class PdfjsBackend(CliRenderBackend):
    out_file_pattern = SUFFIX_PATTERN

    def build_command(self, *, binary, options, input_file, workspace_dir):
        return [
            binary,
            str(input_file),
            _dir_arg(workspace_dir),
            format_number(options.scale),
        ]


class PdfboxBackend(CliRenderBackend):
    # pdfbox writes "<input stem>-<n>.png" next to the input, i.e. into the workspace.
    out_file_pattern = SUFFIX_PATTERN

    def build_command(self, *, binary, options, input_file, workspace_dir):
        return [
            "-jar",
            binary,
            "render",
            "-format",
            "png",
            "-i",
            str(input_file),
            "-dpi",
            ppi(options),
        ]


class GhostscriptBackend(CliRenderBackend):
    def build_command(self, *, binary, options, input_file, workspace_dir):
        return [
            binary,
            "-dNOPAUSE",
            "-sDEVICE=png16m",
            "-dGraphicsAlphaBits=4",
            "-dTextAlphaBits=4",
            "-dBATCH",
            f"-r{ppi(options)}",
            f"-sOutputFile={workspace_dir / 'out-%d.png'}",
            str(input_file),
        ]
