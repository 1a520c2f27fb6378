import pytest

from glint.emotions import EMOTIONS, REQUIRED_EMOTIONS, UnknownEmotionError, get_emotion, list_emotions


def test_ten_emotions_defined():
    assert len(EMOTIONS) == 10
    assert list_emotions() == list(REQUIRED_EMOTIONS)


def test_get_emotion_is_case_insensitive():
    assert get_emotion("HAPPY").name == "happy"


def test_unknown_emotion_lists_available():
    with pytest.raises(UnknownEmotionError, match="Available: neutral, happy"):
        get_emotion("bored")


def test_parameters_stay_in_range():
    for emotion in EMOTIONS.values():
        assert 0 <= emotion.eye_openness <= 1
        assert -1 <= emotion.eyebrow_angle <= 1
        assert 0 <= emotion.eyebrow_height <= 1
        assert 0 <= emotion.pupil_size <= 1


def test_distinct_configurations():
    signatures = {
        (e.eye_openness, e.eyebrow_angle, e.eyebrow_height, e.pupil_size) for e in EMOTIONS.values()
    }
    assert len(signatures) == len(EMOTIONS)
