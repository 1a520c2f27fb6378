"""Encode frames as GIF and push them to a Tidbyt device."""
from __future__ import annotations

import base64
import io
import logging
from typing import Optional, Sequence
from urllib.parse import quote

import numpy as np
import requests
from PIL import Image

from glint.canvas import HEIGHT, WIDTH
from glint.pixelfont import overlay_text

logger = logging.getLogger(__name__)

TIDBYT_API_URL = "https://api.tidbyt.com/v0"
DEFAULT_DELAY_MS = 75
_ERROR_SNIPPET_LEN = 300


class PushError(RuntimeError):
    pass


def _to_frame_image(frame: np.ndarray, label: Optional[str]) -> Image.Image:
    if label:
        frame = overlay_text(frame, label)
    # GIF has no partial alpha; flatten onto the black LED background
    rgba = Image.fromarray(np.ascontiguousarray(frame, dtype=np.uint8))
    background = Image.new("RGB", rgba.size, (0, 0, 0))
    background.paste(rgba, mask=rgba.split()[3])
    return background


def frames_to_gif_bytes(
    frames: Sequence[np.ndarray],
    delay_ms: int = DEFAULT_DELAY_MS,
    label: Optional[str] = None,
) -> bytes:
    """Encode RGBA frames as a GIF that loops forever."""
    if len(frames) == 0:
        raise ValueError("No frames to encode")

    images = [_to_frame_image(frame, label) for frame in frames]
    buf = io.BytesIO()
    images[0].save(
        buf,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=delay_ms,
        loop=0,
    )
    return buf.getvalue()


def frames_to_gif_base64(
    frames: Sequence[np.ndarray],
    delay_ms: int = DEFAULT_DELAY_MS,
    label: Optional[str] = None,
) -> str:
    return base64.b64encode(frames_to_gif_bytes(frames, delay_ms, label)).decode("ascii")


def buffer_to_gif_base64(raw: bytes, width: int = WIDTH, height: int = HEIGHT) -> str:
    """Encode one raw RGBA buffer (``width * height * 4`` bytes) as a GIF."""
    expected = width * height * 4
    if len(raw) != expected:
        raise ValueError(f"Expected {expected} bytes of RGBA data, got {len(raw)}")
    frame = np.frombuffer(raw, dtype=np.uint8).reshape((height, width, 4))
    return frames_to_gif_base64([frame])


def png_to_gif_base64(png_bytes: bytes, label: Optional[str] = None) -> str:
    with Image.open(io.BytesIO(png_bytes)) as img:
        if img.size != (WIDTH, HEIGHT):
            raise ValueError(f"Image is {img.size[0]}x{img.size[1]}, expected {WIDTH}x{HEIGHT}")
        frame = np.array(img.convert("RGBA"))
    return frames_to_gif_base64([frame], label=label)


def _raise_for_status(response: requests.Response, context: str) -> None:
    if response.status_code >= 400:
        snippet = (response.text or "").strip()
        if len(snippet) > _ERROR_SNIPPET_LEN:
            snippet = snippet[:_ERROR_SNIPPET_LEN] + "..."
        raise PushError(f"{context} failed: {response.status_code} {response.reason} {snippet}".rstrip())


def push_to_tidbyt(
    image_b64: str,
    token: str,
    device_id: str,
    installation_id: str = "glint",
    background: bool = False,
    timeout: float = 30,
) -> None:
    """Push a base64 GIF/WebP to a device; ``background=False`` shows it immediately."""
    url = f"{TIDBYT_API_URL}/devices/{quote(device_id, safe='')}/push"
    headers = {
        "Authorization": f"Bearer {token}",
        "Content-Type": "application/json",
    }
    payload = {
        "image": image_b64,
        "installationID": installation_id,
        "background": background,
    }
    logger.debug("Pushing %d bytes of base64 image to %s", len(image_b64), url)
    response = requests.post(url, json=payload, headers=headers, timeout=timeout)
    _raise_for_status(response, "Tidbyt push")
