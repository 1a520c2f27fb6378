import numpy as np

from glint.pixelfont import CHAR_HEIGHT, get_text_width, overlay_text, render_pixel_text


def test_text_width():
    assert get_text_width("") == 0
    assert get_text_width("a") == 3
    assert get_text_width("abc") == 11


def test_render_is_case_insensitive():
    upper = render_pixel_text("HI")
    lower = render_pixel_text("hi")
    assert np.array_equal(upper.buffer, lower.buffer)
    assert upper.height == CHAR_HEIGHT


def test_glyph_pixels_use_color():
    text = render_pixel_text("t", color=(255, 0, 0))
    # top bar of "t" is fully lit
    assert text.buffer[0, :, 0].tolist() == [255, 255, 255]
    assert text.buffer[0, 0].tolist() == [255, 0, 0, 255]
    # stem only in the middle column below
    assert text.buffer[3, 0, 3] == 0
    assert text.buffer[3, 1, 3] == 255


def test_unknown_characters_render_blank():
    text = render_pixel_text("?!")
    assert text.width == 7
    assert not text.buffer.any()


def test_overlay_centers_text_at_bottom():
    frame = np.zeros((32, 64, 4), dtype=np.uint8)
    out = overlay_text(frame, "i")
    # "i" is 3px wide: x 30..32, rows 26..30 with a 1px bottom margin
    assert out[26, 30:33, 3].tolist() == [255, 255, 255]
    assert out[31].sum() == 0
    assert not frame.any()


def test_overlay_clips_wide_text():
    frame = np.zeros((32, 64, 4), dtype=np.uint8)
    out = overlay_text(frame, "m" * 30)
    assert out.shape == frame.shape
    assert out[:26].sum() == 0
