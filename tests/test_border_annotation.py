from __future__ import annotations

import io
import unittest

from PIL import Image

from composite.annotate import annotate_page, border_width_for, decode_page
from render_backends import DecodeFailed

RED = (255, 0, 0)
GREY = (120, 120, 120, 255)


def _png(size: tuple[int, int], color=GREY) -> bytes:
    buf = io.BytesIO()
    Image.new("RGBA", size, color).save(buf, format="PNG")
    return buf.getvalue()


class TestBorderMath(unittest.TestCase):
    def test_border_width_floors_shorter_side(self) -> None:
        self.assertEqual(border_width_for(100, 200, 0.02), 2)
        self.assertEqual(border_width_for(149, 300, 0.02), 2)
        self.assertEqual(border_width_for(40, 40, 0.02), 0)

    def test_annotated_size_grows_by_border_width(self) -> None:
        page = Image.new("RGBA", (100, 200), GREY)
        out = annotate_page(page, color=RED, border_fraction=0.02)
        self.assertEqual(out.size, (102, 202))


class TestBorderPixels(unittest.TestCase):
    def setUp(self) -> None:
        self.page = Image.new("RGBA", (500, 1000), GREY)
        self.bw = border_width_for(500, 1000, 0.02)  # 10
        self.out = annotate_page(self.page, color=RED, border_fraction=0.02)

    def test_stroke_centerline_is_exact_identity_color(self) -> None:
        mid = self.bw // 2
        w, h = self.out.size
        for xy in [(mid, h // 2), (w // 2, mid), (w - 1 - mid, h // 2), (w // 2, h - 1 - mid)]:
            self.assertEqual(self.out.getpixel(xy), (*RED, 255), xy)

    def test_interior_is_untouched(self) -> None:
        w, h = self.out.size
        for xy in [(self.bw, self.bw), (w // 2, h // 2), (w - self.bw - 1, h - self.bw - 1)]:
            self.assertEqual(self.out.getpixel(xy), GREY, xy)

    def test_stroke_overlaps_outer_ring_of_the_page(self) -> None:
        # The page spans [bw, w) x [bw, h); the right/bottom band covers its last bw columns/rows.
        w, h = self.out.size
        self.assertEqual(self.out.getpixel((w - self.bw, h // 2)), (*RED, 255))
        self.assertEqual(self.out.getpixel((w - self.bw - 1, h // 2)), GREY)


class TestPassThroughAndDecode(unittest.TestCase):
    def test_no_fraction_returns_page_unchanged(self) -> None:
        page = Image.new("RGBA", (30, 40), GREY)
        self.assertIs(annotate_page(page, color=RED, border_fraction=None), page)

    def test_decode_returns_rgba(self) -> None:
        img = decode_page(_png((7, 9), (1, 2, 3, 255)), backend_id="fake")
        self.assertEqual(img.mode, "RGBA")
        self.assertEqual(img.size, (7, 9))
        self.assertEqual(img.getpixel((0, 0)), (1, 2, 3, 255))

    def test_decode_failure_names_backend(self) -> None:
        with self.assertRaises(DecodeFailed) as ctx:
            decode_page(b"not a png", backend_id="mupdf")
        self.assertEqual(ctx.exception.backend, "mupdf")


if __name__ == "__main__":
    unittest.main()
