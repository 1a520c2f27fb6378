"""Rasterize SVG markup to RGBA pixels using resvg."""
from __future__ import annotations

import io
import re

import numpy as np
from PIL import Image
from resvg_py import svg_to_bytes

SVG_TAG_RE = re.compile(r"(<svg[^>]*>)", re.IGNORECASE | re.DOTALL)


class RasterizationError(RuntimeError):
    """Raised when resvg cannot render the final markup."""


def _set_root_attribute(svg_tag: str, name: str, value: int) -> str:
    pattern = re.compile(rf'(?<![\w:-]){name}\s*=\s*(?:"[^"]*"|\'[^\']*\')')
    if pattern.search(svg_tag):
        return pattern.sub(f'{name}="{value}"', svg_tag, count=1)
    return re.sub(r"\s*(/?>)$", rf' {name}="{value}"\1', svg_tag, count=1)


def normalize_svg_dimensions(svg_text: str, width: int, height: int) -> str:
    """Force the root <svg> width/height to pixel values.

    Styles are drawn against a 64x32 viewBox; replacing the root size lets
    resvg scale them to whatever output size is requested. Attributes such as
    ``stroke-width`` on the root tag are left alone.
    """
    match = SVG_TAG_RE.search(svg_text)
    if not match:
        return svg_text

    svg_tag = match.group(1)
    new_tag = _set_root_attribute(svg_tag, "width", width)
    new_tag = _set_root_attribute(new_tag, "height", height)

    return svg_text.replace(svg_tag, new_tag, 1)


def render_svg_to_png(svg_text: str, width: int = 64, height: int = 32) -> bytes:
    """Render markup to PNG bytes at exactly ``width`` x ``height``."""
    normalized = normalize_svg_dimensions(svg_text, width, height)
    try:
        return bytes(svg_to_bytes(svg_string=normalized, width=width, height=height))
    except Exception as exc:
        raise RasterizationError(f"resvg failed to render SVG: {exc}") from exc


def render_svg(svg_text: str, width: int = 64, height: int = 32, supersample: int = 1) -> np.ndarray:
    """Render an SVG string to an RGBA array of shape (height, width, 4).

    Args:
        svg_text: SVG markup, already resolved to a static document
        width: Output width in pixels
        height: Output height in pixels
        supersample: Render at this multiple then downscale with Lanczos

    Returns:
        uint8 RGBA numpy array
    """
    png_bytes = render_svg_to_png(svg_text, width * supersample, height * supersample)

    image = Image.open(io.BytesIO(png_bytes)).convert("RGBA")
    if supersample > 1:
        image = image.resize((width, height), Image.Resampling.LANCZOS)

    return np.array(image, dtype=np.uint8)
