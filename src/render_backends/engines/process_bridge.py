from __future__ import annotations

import logging
import re
import subprocess
import tempfile
from collections.abc import Callable
from pathlib import Path

from ..contracts import RenderedDocument
from ..errors import DuplicatePageIndex, NoOutputProduced, ProcessSpawnFailed

logger = logging.getLogger(__name__)

INPUT_FILE_NAME = "file.pdf"
WORKSPACE_PREFIX = "render_diff_"

# (input_file, workspace_dir) -> argv
CommandBuilder = Callable[[Path, Path], list[str]]


def harvest_output_files(*, backend_id: str, workspace: Path, out_file_pattern: str) -> list[Path]:
    """
    Return workspace files whose name matches `out_file_pattern`, ordered by
    the single integer the pattern captures (the renderer's page number).

    Two files claiming the same page number are rejected rather than resolved
    by directory enumeration order.
    """

    pattern = re.compile(out_file_pattern)
    by_index: dict[int, Path] = {}
    for path in sorted(workspace.iterdir()):
        if not path.is_file():
            continue
        m = pattern.search(path.name)
        if m is None:
            continue
        index = int(m.group(1))
        if index in by_index:
            raise DuplicatePageIndex(
                backend_id,
                f"renderer produced more than one file for page index {index}",
                detail={"page_index": index, "files": [by_index[index].name, path.name]},
            )
        by_index[index] = path

    return [by_index[i] for i in sorted(by_index)]


def render_via_cli(
    *,
    backend_id: str,
    pdf_bytes: bytes,
    build_command: CommandBuilder,
    out_file_pattern: str,
) -> RenderedDocument:
    """
    Run one external renderer inside a private workspace and collect its PNGs.

    The workspace only ever holds the staged input and the renderer's outputs,
    and it is removed before this function returns, whatever the outcome.
    """

    with tempfile.TemporaryDirectory(prefix=WORKSPACE_PREFIX) as tmp:
        workspace = Path(tmp)
        input_file = workspace / INPUT_FILE_NAME
        input_file.write_bytes(pdf_bytes)

        cmd = build_command(input_file, workspace)
        logger.debug("%s: running %s", backend_id, cmd)

        try:
            proc = subprocess.run(cmd, check=False, capture_output=True)
        except OSError as e:
            raise ProcessSpawnFailed(
                backend_id,
                f"failed to run renderer: {e}",
                detail={"command": cmd[0] if cmd else None, "error": repr(e)},
            ) from e

        stderr = proc.stderr.decode("utf-8", errors="replace")
        if stderr.strip():
            # Many renderers print harmless diagnostics on success.
            logger.warning("%s: %s", backend_id, stderr.strip())
        if proc.returncode != 0:
            logger.warning("%s: renderer exited with status %d", backend_id, proc.returncode)

        out_files = harvest_output_files(
            backend_id=backend_id, workspace=workspace, out_file_pattern=out_file_pattern
        )
        if not out_files:
            raise NoOutputProduced(
                backend_id,
                "renderer produced no output files",
                detail={
                    "returncode": proc.returncode,
                    "out_file_pattern": out_file_pattern,
                    "stderr": stderr[-4000:],
                },
            )

        return [f.read_bytes() for f in out_files]
