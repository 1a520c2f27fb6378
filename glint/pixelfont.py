"""3x5 bitmap font for crisp labels on LED displays."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

CHAR_WIDTH = 3
CHAR_HEIGHT = 5
CHAR_SPACING = 1

# Five rows per glyph, three bits per row, MSB is the leftmost pixel.
FONT_3X5: Dict[str, List[int]] = {
    "a": [0b010, 0b101, 0b111, 0b101, 0b101],
    "b": [0b110, 0b101, 0b110, 0b101, 0b110],
    "c": [0b011, 0b100, 0b100, 0b100, 0b011],
    "d": [0b110, 0b101, 0b101, 0b101, 0b110],
    "e": [0b111, 0b100, 0b110, 0b100, 0b111],
    "f": [0b111, 0b100, 0b110, 0b100, 0b100],
    "g": [0b011, 0b100, 0b101, 0b101, 0b011],
    "h": [0b101, 0b101, 0b111, 0b101, 0b101],
    "i": [0b111, 0b010, 0b010, 0b010, 0b111],
    "j": [0b001, 0b001, 0b001, 0b101, 0b010],
    "k": [0b101, 0b101, 0b110, 0b101, 0b101],
    "l": [0b100, 0b100, 0b100, 0b100, 0b111],
    "m": [0b101, 0b111, 0b101, 0b101, 0b101],
    "n": [0b101, 0b111, 0b111, 0b101, 0b101],
    "o": [0b010, 0b101, 0b101, 0b101, 0b010],
    "p": [0b110, 0b101, 0b110, 0b100, 0b100],
    "q": [0b010, 0b101, 0b101, 0b110, 0b011],
    "r": [0b110, 0b101, 0b110, 0b101, 0b101],
    "s": [0b011, 0b100, 0b010, 0b001, 0b110],
    "t": [0b111, 0b010, 0b010, 0b010, 0b010],
    "u": [0b101, 0b101, 0b101, 0b101, 0b011],
    "v": [0b101, 0b101, 0b101, 0b101, 0b010],
    "w": [0b101, 0b101, 0b101, 0b111, 0b101],
    "x": [0b101, 0b101, 0b010, 0b101, 0b101],
    "y": [0b101, 0b101, 0b010, 0b010, 0b010],
    "z": [0b111, 0b001, 0b010, 0b100, 0b111],
    " ": [0b000, 0b000, 0b000, 0b000, 0b000],
}


@dataclass
class PixelText:
    buffer: np.ndarray  # (height, width, 4) RGBA, transparent background
    width: int
    height: int


def get_text_width(text: str) -> int:
    if not text:
        return 0
    return len(text) * (CHAR_WIDTH + CHAR_SPACING) - CHAR_SPACING


def render_pixel_text(text: str, color: Tuple[int, int, int] = (255, 255, 255)) -> PixelText:
    lower = text.lower()
    width = get_text_width(lower)
    buffer = np.zeros((CHAR_HEIGHT, width, 4), dtype=np.uint8)

    x_offset = 0
    for char in lower:
        bitmap = FONT_3X5.get(char)
        if bitmap:
            for row, bits in enumerate(bitmap):
                for col in range(CHAR_WIDTH):
                    if (bits >> (CHAR_WIDTH - 1 - col)) & 1:
                        buffer[row, x_offset + col] = (*color, 255)
        x_offset += CHAR_WIDTH + CHAR_SPACING

    return PixelText(buffer=buffer, width=width, height=CHAR_HEIGHT)


def overlay_text(
    frame: np.ndarray,
    text: str,
    color: Tuple[int, int, int] = (255, 255, 255),
    margin: int = 1,
) -> np.ndarray:
    """Return a copy of ``frame`` with ``text`` centred along the bottom edge.

    Text wider than the frame is clipped on the right.
    """
    out = frame.copy()
    label = render_pixel_text(text, color)
    frame_height, frame_width = out.shape[:2]

    x0 = max((frame_width - label.width) // 2, 0)
    y0 = max(frame_height - label.height - margin, 0)
    visible_w = min(label.width, frame_width - x0)
    visible_h = min(label.height, frame_height - y0)

    glyphs = label.buffer[:visible_h, :visible_w]
    mask = glyphs[:, :, 3] > 0
    out[y0:y0 + visible_h, x0:x0 + visible_w][mask] = glyphs[mask]
    return out
