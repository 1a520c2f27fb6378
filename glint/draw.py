"""Draw eyes and eyebrows for the programmatic style."""
from __future__ import annotations

from glint.canvas import HEIGHT, Canvas, js_round
from glint.emotions import EmotionConfig

EYE_WIDTH = 18
BROW_WIDTH = 20
BROW_HEIGHT = 2
BROW_GAP = 2
LEFT_EYE_X = 16
RIGHT_EYE_X = 48


def draw_emotion(emotion: EmotionConfig) -> Canvas:
    canvas = Canvas()

    eye_height = js_round(6 + 10 * emotion.eye_openness)  # 6-16px
    pupil_size = js_round(3 + 5 * emotion.pupil_size)  # 3-8px
    brow_raise = js_round(4 * (emotion.eyebrow_height - 0.5))  # -2..+2px

    # slightly below centre to leave room for the brows
    eye_center_y = HEIGHT / 2 + 2
    base_brow_y = js_round(eye_center_y - eye_height / 2 - BROW_GAP - BROW_HEIGHT)

    for center_x, is_left in ((LEFT_EYE_X, True), (RIGHT_EYE_X, False)):
        draw_angled_eyebrow(
            canvas,
            center_x,
            base_brow_y - brow_raise,
            BROW_WIDTH,
            BROW_HEIGHT,
            emotion.eyebrow_angle,
            is_left,
        )
        canvas.draw_eye(center_x, eye_center_y, EYE_WIDTH, eye_height, pupil_size)

    return canvas


def draw_angled_eyebrow(
    canvas: Canvas,
    center_x: int,
    base_y: int,
    width: int,
    height: int,
    angle: float,
    is_left: bool,
) -> None:
    """Draw a sloped brow.

    ``angle`` runs from -1 (outer edge down) to +1 (inner edge down); the
    inner edge is on the right for the left eye and mirrored for the right.
    """
    start_x = js_round(center_x - width / 2)
    slope = js_round(angle * 3)  # at most 3px

    for x in range(width):
        progress = x / (width - 1)
        if is_left:
            y_offset = js_round(slope * (progress - 0.5) * 2)
        else:
            y_offset = js_round(slope * (0.5 - progress) * 2)
        for h in range(height):
            canvas.set_pixel(start_x + x, base_y + y_offset + h, 255, 255, 255)
