from unittest.mock import Mock

from PIL import Image
from typer.testing import CliRunner

from glint import cli
from glint.registry import RegistryError
from glint.styles import ASSETS_DIR
from glint.utils.config import AppConfig, GlintConfig, Settings

runner = CliRunner()


def _config(tmp_path, **file_values) -> AppConfig:
    settings = Settings(
        tidbyt_token="",
        tidbyt_device_id="",
        glint_style="",
        glint_installation_id="",
        glint_token="",
        glint_config_dir=str(tmp_path),
    )
    return AppConfig(settings=settings, file=GlintConfig(**file_values))


def _invoke(tmp_path, args, **file_values):
    return runner.invoke(cli.app, args, obj=_config(tmp_path, **file_values))


def test_list_shows_emotions(tmp_path):
    result = _invoke(tmp_path, ["list"])
    assert result.exit_code == 0
    assert "  - happy" in result.output
    assert "  - focused" in result.output


def test_styles_lists_builtins(tmp_path):
    result = _invoke(tmp_path, ["styles"])
    assert result.exit_code == 0
    assert "default" in result.output
    assert "minimal" in result.output


def test_show_requires_credentials(tmp_path):
    result = _invoke(tmp_path, ["show", "happy"])
    assert result.exit_code == 1
    assert "TIDBYT_TOKEN and TIDBYT_DEVICE_ID are required" in result.output


def test_show_pushes_gif(tmp_path, monkeypatch):
    push = Mock()
    monkeypatch.setattr(cli, "push_to_tidbyt", push)

    result = _invoke(tmp_path, ["show", "happy", "--token", "tok"], device_id="dev")

    assert result.exit_code == 0, result.output
    assert 'Emotion "happy" displayed successfully' in result.output
    image_b64 = push.call_args.args[0]
    assert image_b64.startswith("R0lGOD")  # base64 of "GIF8"
    assert push.call_args.kwargs == {"token": "tok", "device_id": "dev", "installation_id": "glint"}


def test_show_output_skips_push(tmp_path, monkeypatch):
    push = Mock()
    monkeypatch.setattr(cli, "push_to_tidbyt", push)
    out = tmp_path / "happy.gif"

    result = _invoke(tmp_path, ["show", "happy", "--label", "--output", str(out)])

    assert result.exit_code == 0, result.output
    assert out.read_bytes()[:6] == b"GIF89a"
    push.assert_not_called()


def test_unknown_emotion_is_an_error(tmp_path):
    result = _invoke(tmp_path, ["render", "bored", "--output", str(tmp_path / "x.png")])
    assert result.exit_code == 1
    assert "Unknown emotion: bored" in result.output


def test_render_png_with_scale(tmp_path):
    out = tmp_path / "sad.png"
    result = _invoke(tmp_path, ["render", "sad", "--output", str(out), "--scale", "2"])
    assert result.exit_code == 0, result.output
    with Image.open(out) as img:
        assert img.size == (128, 64)


def test_validate_command(tmp_path):
    ok = _invoke(tmp_path, ["validate", str(ASSETS_DIR / "minimal")])
    assert ok.exit_code == 0
    assert "Style is valid" in ok.output

    bad = _invoke(tmp_path, ["validate", str(tmp_path)])
    assert bad.exit_code == 1
    assert "No SVG or PNG files found" in bad.output


def test_registry_errors_are_reported(tmp_path, monkeypatch):
    monkeypatch.setattr(cli.RegistryClient, "install", Mock(side_effect=RegistryError("Style not found: @a/b")))
    result = _invoke(tmp_path, ["install", "@a/b"])
    assert result.exit_code == 1
    assert "Error: Style not found: @a/b" in result.output


def test_info_rejects_bad_reference(tmp_path):
    result = _invoke(tmp_path, ["info", "nothing"])
    assert result.exit_code == 1
    assert "Invalid style reference" in result.output
