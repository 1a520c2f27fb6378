"""Emotion definitions: each emotion maps to an eye/eyebrow configuration."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List


class UnknownEmotionError(ValueError):
    pass


@dataclass(frozen=True)
class EmotionConfig:
    name: str
    eye_openness: float  # 0 = closed, 1 = fully open
    eyebrow_angle: float  # -1 sad/worried, 0 neutral, 1 surprised/angry
    eyebrow_height: float  # 0-1 vertical position
    pupil_size: float  # 0-1


EMOTIONS: Dict[str, EmotionConfig] = {
    "neutral": EmotionConfig("neutral", eye_openness=0.7, eyebrow_angle=0.0, eyebrow_height=0.5, pupil_size=0.5),
    "happy": EmotionConfig("happy", eye_openness=0.6, eyebrow_angle=0.3, eyebrow_height=0.6, pupil_size=0.6),
    "sad": EmotionConfig("sad", eye_openness=0.5, eyebrow_angle=-0.5, eyebrow_height=0.4, pupil_size=0.4),
    "angry": EmotionConfig("angry", eye_openness=0.8, eyebrow_angle=-0.8, eyebrow_height=0.3, pupil_size=0.3),
    "surprised": EmotionConfig("surprised", eye_openness=1.0, eyebrow_angle=0.8, eyebrow_height=0.8, pupil_size=0.7),
    "worried": EmotionConfig("worried", eye_openness=0.6, eyebrow_angle=-0.3, eyebrow_height=0.6, pupil_size=0.5),
    "sleepy": EmotionConfig("sleepy", eye_openness=0.3, eyebrow_angle=0.0, eyebrow_height=0.5, pupil_size=0.4),
    "excited": EmotionConfig("excited", eye_openness=0.9, eyebrow_angle=0.5, eyebrow_height=0.7, pupil_size=0.8),
    "confused": EmotionConfig("confused", eye_openness=0.6, eyebrow_angle=0.2, eyebrow_height=0.6, pupil_size=0.5),
    "focused": EmotionConfig("focused", eye_openness=0.7, eyebrow_angle=-0.2, eyebrow_height=0.4, pupil_size=0.4),
}

REQUIRED_EMOTIONS = tuple(EMOTIONS)


def get_emotion(name: str) -> EmotionConfig:
    emotion = EMOTIONS.get(name.lower())
    if emotion is None:
        raise UnknownEmotionError(f"Unknown emotion: {name}. Available: {', '.join(EMOTIONS)}")
    return emotion


def list_emotions() -> List[str]:
    return list(EMOTIONS)
