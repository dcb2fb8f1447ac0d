from __future__ import annotations

from collections.abc import Sequence

from PIL import Image


def composite_size(sizes: Sequence[tuple[int, int]]) -> tuple[int, int]:
    if not sizes:
        raise ValueError("cannot composite zero pages")
    return sum(w for w, _ in sizes), max(h for _, h in sizes)


def assemble_composite(images: Sequence[Image.Image]) -> Image.Image:
    """
    Lay pages out left-to-right, top aligned, on a transparent canvas.
    """

    width, height = composite_size([img.size for img in images])
    canvas = Image.new("RGBA", (width, height), (0, 0, 0, 0))

    cursor = 0
    for img in images:
        canvas.paste(img.convert("RGBA"), (cursor, 0))
        cursor += img.width

    return canvas
