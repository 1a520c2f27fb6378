"""64x32 RGBA canvas for Tidbyt-sized pixel drawing."""
from __future__ import annotations

import math

import numpy as np
from PIL import Image

WIDTH = 64
HEIGHT = 32


def js_round(value: float) -> int:
    """Round half up, as pixel layouts were tuned against it (not banker's rounding)."""
    return math.floor(value + 0.5)


class Canvas:
    def __init__(self, width: int = WIDTH, height: int = HEIGHT) -> None:
        self.width = width
        self.height = height
        self.data = np.zeros((height, width, 4), dtype=np.uint8)
        self.clear()

    def clear(self, r: int = 0, g: int = 0, b: int = 0, a: int = 255) -> None:
        self.data[:, :] = (r, g, b, a)

    def set_pixel(self, x: int, y: int, r: int, g: int, b: int, a: int = 255) -> None:
        if x < 0 or x >= self.width or y < 0 or y >= self.height:
            return
        self.data[y, x] = (r, g, b, a)

    def fill_rect(self, x: int, y: int, w: int, h: int, r: int, g: int, b: int, a: int = 255) -> None:
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, self.width), min(y + h, self.height)
        if x0 >= x1 or y0 >= y1:
            return
        self.data[y0:y1, x0:x1] = (r, g, b, a)

    def draw_eye(self, center_x: float, center_y: float, width: int, height: int, pupil_size: int) -> None:
        """White eye rectangle with a black square pupil in the middle."""
        eye_x = js_round(center_x - width / 2)
        eye_y = js_round(center_y - height / 2)
        self.fill_rect(eye_x, eye_y, width, height, 255, 255, 255)

        pupil_x = js_round(center_x - pupil_size / 2)
        pupil_y = js_round(center_y - pupil_size / 2)
        self.fill_rect(pupil_x, pupil_y, pupil_size, pupil_size, 0, 0, 0)

    def draw_eyebrow(self, center_x: float, y: int, width: int, height: int) -> None:
        x = js_round(center_x - width / 2)
        self.fill_rect(x, y, width, height, 255, 255, 255)

    def to_bytes(self) -> bytes:
        return self.data.tobytes()

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.data)
