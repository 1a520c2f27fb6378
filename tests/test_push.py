import base64
import io
from unittest.mock import Mock

import numpy as np
import pytest
from PIL import Image

from glint import push
from glint.push import (
    PushError,
    buffer_to_gif_base64,
    frames_to_gif_bytes,
    png_to_gif_base64,
    push_to_tidbyt,
)


def _frame(value: int) -> np.ndarray:
    frame = np.zeros((32, 64, 4), dtype=np.uint8)
    frame[:, :, 0] = value
    frame[:, :, 3] = 255
    return frame


def _gif_size(data: bytes):
    return int.from_bytes(data[6:8], "little"), int.from_bytes(data[8:10], "little")


def test_single_frame_gif():
    data = frames_to_gif_bytes([_frame(255)])
    assert data[:6] == b"GIF89a"
    assert _gif_size(data) == (64, 32)


def test_animated_gif_keeps_frames_and_delay():
    frames = [_frame(v) for v in (0, 128, 255)]
    data = frames_to_gif_bytes(frames, delay_ms=100)
    with Image.open(io.BytesIO(data)) as img:
        assert img.n_frames == 3
        assert img.info["duration"] == 100
        assert img.info["loop"] == 0


def test_transparent_pixels_become_black():
    frame = np.zeros((32, 64, 4), dtype=np.uint8)
    frame[:, :, :3] = 255  # white but fully transparent
    data = frames_to_gif_bytes([frame])
    with Image.open(io.BytesIO(data)) as img:
        assert img.convert("RGB").getpixel((0, 0)) == (0, 0, 0)


def test_label_is_drawn():
    plain = frames_to_gif_bytes([_frame(0)])
    labelled = frames_to_gif_bytes([_frame(0)], label="hi")
    with Image.open(io.BytesIO(labelled)) as img:
        assert img.convert("RGB").getpixel((28, 26)) == (255, 255, 255)
    assert plain != labelled


def test_no_frames_rejected():
    with pytest.raises(ValueError, match="No frames"):
        frames_to_gif_bytes([])


def test_buffer_to_gif_checks_length():
    raw = _frame(10).tobytes()
    decoded = base64.b64decode(buffer_to_gif_base64(raw))
    assert _gif_size(decoded) == (64, 32)
    with pytest.raises(ValueError, match="Expected 8192 bytes"):
        buffer_to_gif_base64(raw[:-4])


def test_png_to_gif_requires_display_size():
    buf = io.BytesIO()
    Image.new("RGBA", (32, 32)).save(buf, format="PNG")
    with pytest.raises(ValueError, match="expected 64x32"):
        png_to_gif_base64(buf.getvalue())


def test_push_posts_payload(monkeypatch):
    post = Mock(return_value=Mock(status_code=200, text="{}", reason="OK"))
    monkeypatch.setattr(push.requests, "post", post)

    push_to_tidbyt("R0lG", token="tok", device_id="dev/1", installation_id="eyes")

    args, kwargs = post.call_args
    assert args[0] == "https://api.tidbyt.com/v0/devices/dev%2F1/push"
    assert kwargs["headers"]["Authorization"] == "Bearer tok"
    assert kwargs["json"] == {"image": "R0lG", "installationID": "eyes", "background": False}


def test_push_error_includes_status(monkeypatch):
    response = Mock(status_code=401, text="x" * 400, reason="Unauthorized")
    monkeypatch.setattr(push.requests, "post", Mock(return_value=response))

    with pytest.raises(PushError) as excinfo:
        push_to_tidbyt("R0lG", token="bad", device_id="dev")
    message = str(excinfo.value)
    assert message.startswith("Tidbyt push failed: 401 Unauthorized")
    assert message.endswith("x" * 300 + "...")
