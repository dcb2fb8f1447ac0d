from __future__ import annotations

import io
import math

from PIL import Image, ImageDraw, UnidentifiedImageError

from render_backends import DecodeFailed
from render_backends.contracts import Rgb


def decode_page(png_bytes: bytes, *, backend_id: str) -> Image.Image:
    """
    Decode one rendered page into an RGBA raster.
    """

    try:
        with Image.open(io.BytesIO(png_bytes)) as img:
            img.load()
            return img.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise DecodeFailed(
            backend_id, f"unable to decode rendered page: {e}", detail={"error": repr(e)}
        ) from e


def border_width_for(width: int, height: int, fraction: float) -> int:
    return math.floor(min(width, height) * fraction)


def annotate_page(image: Image.Image, *, color: Rgb, border_fraction: float | None) -> Image.Image:
    """
    Tag a page with its backend's identity color.

    With a border width `bw` the result is `bw` pixels wider and taller than
    the page. The page sits at (bw, bw) and the stroke, `bw` wide and centered
    on the page outline shifted by bw / 2, covers a `bw` band along every
    canvas edge (so it overlaps the last `bw` columns and rows of the page).
    """

    if border_fraction is None:
        return image

    width, height = image.size
    bw = border_width_for(width, height, border_fraction)

    canvas = Image.new("RGBA", (width + bw, height + bw), (0, 0, 0, 0))
    canvas.paste(image.convert("RGBA"), (bw, bw))

    if bw > 0:
        # Plain (non-blending) draw: stroke pixels are exactly the identity color.
        draw = ImageDraw.Draw(canvas)
        draw.rectangle(
            [0, 0, canvas.width - 1, canvas.height - 1],
            outline=(*color, 255),
            width=bw,
        )

    return canvas
