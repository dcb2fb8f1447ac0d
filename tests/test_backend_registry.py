from __future__ import annotations

import unittest
from pathlib import Path
from unittest.mock import patch

from render_backends import (
    BACKEND_DESCRIPTORS,
    BackendConfig,
    BackendName,
    ConfigMissing,
    RenderOptions,
    describe,
    get_backend,
    parse_backend_names,
)
from render_backends.engines import CliRenderBackend, Pypdfium2Backend


class TestBackendRegistry(unittest.TestCase):
    def test_every_backend_has_a_descriptor(self) -> None:
        self.assertEqual(set(BACKEND_DESCRIPTORS), set(BackendName))
        for name, d in BACKEND_DESCRIPTORS.items():
            self.assertEqual(d.name, name)
            self.assertEqual(len(d.color), 3)
            self.assertTrue(all(0 <= c <= 255 for c in d.color))

    def test_identity_colors_are_fixed(self) -> None:
        self.assertEqual(describe(BackendName.PDFIUM).color, (79, 184, 35))
        self.assertEqual(describe(BackendName.GHOSTSCRIPT).color, (235, 38, 218))
        self.assertEqual(describe(BackendName.PYPDFIUM2).color, (100, 149, 237))

    def test_only_embedded_backend_has_no_env_key(self) -> None:
        without_key = [n for n, d in BACKEND_DESCRIPTORS.items() if d.env_key is None]
        self.assertEqual(without_key, [BackendName.PYPDFIUM2])
        self.assertEqual(describe(BackendName.PDFBOX).host_runtime, "java")
        self.assertEqual(describe(BackendName.PDFJS).host_runtime, "node")

    def test_parse_backend_names_keeps_order(self) -> None:
        self.assertEqual(
            parse_backend_names(" ghostscript, PDFIUM ,,pypdfium2"),
            (BackendName.GHOSTSCRIPT, BackendName.PDFIUM, BackendName.PYPDFIUM2),
        )

    def test_parse_backend_names_rejects_unknown(self) -> None:
        with self.assertRaises(ValueError) as ctx:
            parse_backend_names("pdfium,acrobat")
        self.assertIn("acrobat", str(ctx.exception))

    def test_get_backend_dispatch(self) -> None:
        cfg = BackendConfig()
        self.assertIsInstance(get_backend(BackendName.PYPDFIUM2, cfg), Pypdfium2Backend)
        for name in BackendName:
            if name == BackendName.PYPDFIUM2:
                continue
            backend = get_backend(name, cfg)
            self.assertIsInstance(backend, CliRenderBackend)
            self.assertEqual(backend.backend_id(), name.value)


class TestBackendConfig(unittest.TestCase):
    def test_from_environ_reads_bin_keys(self) -> None:
        cfg = BackendConfig.from_environ(
            {
                "PDFIUM_BIN": "/opt/pdfium/render",
                "MUPDF_BIN": "   ",
                "JAVA_BIN": "/usr/lib/jvm/bin/java",
                "UNRELATED": "x",
            }
        )
        self.assertEqual(cfg.binary_for(BackendName.PDFIUM), Path("/opt/pdfium/render"))
        self.assertIsNone(cfg.binary_for(BackendName.MUPDF))
        self.assertEqual(cfg.java_bin, "/usr/lib/jvm/bin/java")
        self.assertEqual(cfg.node_bin, "node")

    def test_render_options_reject_non_positive_scale(self) -> None:
        with self.assertRaises(ValueError):
            RenderOptions(scale=0)
        with self.assertRaises(ValueError):
            RenderOptions(scale=-1.5)


class TestConfigMissing(unittest.TestCase):
    def test_missing_binary_fails_before_workspace_or_process(self) -> None:
        backend = get_backend(BackendName.MUPDF, BackendConfig())

        with patch("render_backends.engines.process_bridge.tempfile.TemporaryDirectory") as tmp, patch(
            "render_backends.engines.process_bridge.subprocess.run"
        ) as run:
            with self.assertRaises(ConfigMissing) as ctx:
                backend.render(b"%PDF-FAKE%", RenderOptions(scale=1.0))

        tmp.assert_not_called()
        run.assert_not_called()
        self.assertEqual(ctx.exception.backend, "mupdf")
        self.assertEqual(ctx.exception.code, "RENDER_CONFIG_MISSING")
        self.assertIn("MUPDF_BIN", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
