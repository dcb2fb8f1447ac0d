from __future__ import annotations

import contextlib
import io
import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

import pypdfium2 as pdfium
from PIL import Image

from composite.cli import main


def _blank_pdf(path: Path, page_sizes: list[tuple[float, float]]) -> None:
    doc = pdfium.PdfDocument.new()
    for width, height in page_sizes:
        doc.new_page(width, height)
    path.parent.mkdir(parents=True, exist_ok=True)
    doc.save(str(path))
    doc.close()


class TestCli(unittest.TestCase):
    def test_corpus_run_with_embedded_backend(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _blank_pdf(root / "corpus" / "letters" / "memo.pdf", [(100, 200), (100, 200)])
            stale = root / "out" / "stale.png"
            stale.parent.mkdir(parents=True)
            stale.write_bytes(b"")

            stdout = io.StringIO()
            with patch.dict("os.environ", {}, clear=True), contextlib.redirect_stdout(stdout):
                code = main(
                    [
                        "--corpus-root",
                        str(root / "corpus"),
                        "--out-root",
                        str(root / "out"),
                        "--backends",
                        "pypdfium2,pypdfium2",
                        "--scale",
                        "1",
                        "--border-fraction",
                        "0.02",
                        "--clean",
                        "--out-ledger",
                        str(root / "ledger.json"),
                        "--log-level",
                        "WARNING",
                    ]
                )

            self.assertEqual(code, 0)
            self.assertIn("composites=2 ok=True", stdout.getvalue())
            self.assertFalse(stale.exists())
            for i in (0, 1):
                with Image.open(root / "out" / "letters" / f"memo-{i}.png") as img:
                    self.assertEqual(img.size, (204, 202))

            ledger = json.loads((root / "ledger.json").read_text(encoding="utf-8"))
            self.assertEqual(ledger["documents"][0]["backends"], ["pypdfium2", "pypdfium2"])
            self.assertIn("pypdfium2", ledger["documents"][0]["meta"]["backend_versions"])

    def test_unconfigured_backend_exits_nonzero(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            root = Path(tmp)
            _blank_pdf(root / "in" / "doc.pdf", [(50, 50)])

            with patch.dict("os.environ", {}, clear=True), contextlib.redirect_stdout(io.StringIO()):
                code = main(
                    [
                        "--pdf",
                        str(root / "in" / "doc.pdf"),
                        "--out-root",
                        str(root / "out"),
                        "--backends",
                        "pypdfium2,ghostscript",
                        "--log-level",
                        "ERROR",
                    ]
                )

            self.assertEqual(code, 2)
            self.assertFalse((root / "out" / "in" / "doc-0.png").exists())

    def test_unknown_backend_is_a_usage_error(self) -> None:
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as ctx:
                main(["--pdf", "x.pdf", "--out-root", "out", "--backends", "acrobat"])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == "__main__":
    unittest.main()
