"""Style system: programmatic eyes, bundled SVG sets and user-installed styles.

A style directory holds one file per emotion (``happy.svg``, ``sad.svg`` ...).
SVG takes precedence over PNG when a directory contains both. SVG styles may
carry SMIL animation tags, which are rendered to a frame sequence.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, List, Optional

import numpy as np
from PIL import Image

from glint.animation.driver import DEFAULT_DURATION, DEFAULT_FPS, is_animated, render_animated_frames
from glint.canvas import HEIGHT, WIDTH
from glint.draw import draw_emotion
from glint.emotions import get_emotion
from glint.utils.file_utils import list_stems, read_text_file

logger = logging.getLogger(__name__)

ASSETS_DIR = Path(__file__).parent / "assets"
MANIFEST_NAME = "glint-style.json"
STATIC_DELAY_MS = 1000


class StyleError(ValueError):
    pass


class UnknownStyleError(StyleError):
    pass


class StyleType(str, Enum):
    PROGRAMMATIC = "programmatic"
    IMAGE = "image"
    SVG = "svg"


@dataclass(frozen=True)
class Style:
    name: str
    type: StyleType
    description: str
    path: Optional[Path] = None


@dataclass
class RenderedEmotion:
    frames: List[np.ndarray]
    delay_ms: int = STATIC_DELAY_MS

    @property
    def animated(self) -> bool:
        return len(self.frames) > 1


BUILTIN_STYLES: Dict[str, Style] = {
    "default": Style("default", StyleType.PROGRAMMATIC, "Programmatic cartoon eyes with eyebrows"),
    "minimal": Style(
        "minimal",
        StyleType.SVG,
        "Rounded vector eyes with blinking and bouncing animations",
        ASSETS_DIR / "minimal",
    ),
}


def _detect_style_type(directory: Path) -> Optional[StyleType]:
    if list_stems(directory, ".svg"):
        return StyleType.SVG
    if list_stems(directory, ".png"):
        return StyleType.IMAGE
    return None


def _manifest_description(directory: Path, default: str) -> str:
    manifest_path = directory / MANIFEST_NAME
    if not manifest_path.exists():
        return default
    try:
        manifest = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Ignoring unreadable manifest %s: %s", manifest_path, exc)
        return default
    return manifest.get("description") or default


def discover_user_styles(styles_dir: Optional[Path]) -> Dict[str, Style]:
    styles: Dict[str, Style] = {}
    if styles_dir is None or not styles_dir.is_dir():
        return styles
    for directory in sorted(p for p in styles_dir.iterdir() if p.is_dir()):
        style_type = _detect_style_type(directory)
        if style_type is None:
            logger.debug("Skipping %s: no SVG or PNG emotions", directory)
            continue
        if directory.name in BUILTIN_STYLES:
            logger.warning("User style %s shadows a built-in style and is ignored", directory.name)
            continue
        description = _manifest_description(directory, f"{directory.name} style")
        styles[directory.name] = Style(directory.name, style_type, description, directory)
    return styles


class StyleCatalog:
    """Looks up styles and renders emotions with them."""

    def __init__(
        self,
        styles_dir: Optional[Path] = None,
        rasterize: Optional[Callable[[str, int, int], np.ndarray]] = None,
    ) -> None:
        self.styles_dir = styles_dir
        self._rasterize = rasterize

    @property
    def styles(self) -> Dict[str, Style]:
        styles = dict(BUILTIN_STYLES)
        styles.update(discover_user_styles(self.styles_dir))
        return styles

    def list_styles(self) -> List[Style]:
        return list(self.styles.values())

    def get_style(self, name: str) -> Style:
        styles = self.styles
        style = styles.get(name)
        if style is None:
            raise UnknownStyleError(f"Unknown style: {name}. Available: {', '.join(styles)}")
        return style

    def list_style_emotions(self, name: str) -> List[str]:
        style = self.get_style(name)
        if style.type is StyleType.PROGRAMMATIC:
            return []
        suffix = ".svg" if style.type is StyleType.SVG else ".png"
        return list_stems(style.path, suffix)

    def _asset_path(self, style: Style, emotion_name: str, suffix: str) -> Path:
        path = style.path / f"{emotion_name.lower()}{suffix}"
        if not path.exists():
            raise StyleError(f'No {suffix[1:].upper()} found for emotion "{emotion_name}" in style "{style.name}"')
        return path

    def load_emotion_svg(self, style_name: str, emotion_name: str) -> str:
        style = self.get_style(style_name)
        if style.type is not StyleType.SVG:
            raise StyleError(f'Style "{style_name}" is not SVG-based')
        return read_text_file(self._asset_path(style, emotion_name, ".svg"))

    def load_emotion_image(self, style_name: str, emotion_name: str) -> Image.Image:
        """Load a PNG emotion, stretched to 64x32 RGBA."""
        style = self.get_style(style_name)
        if style.type is not StyleType.IMAGE:
            raise StyleError(f'Style "{style_name}" is not image-based')
        with Image.open(self._asset_path(style, emotion_name, ".png")) as img:
            return img.convert("RGBA").resize((WIDTH, HEIGHT))

    def rasterize(self, svg_text: str, width: int = WIDTH, height: int = HEIGHT) -> np.ndarray:
        if self._rasterize is not None:
            return self._rasterize(svg_text, width, height)
        from glint.renderers.svg_renderer import render_svg

        return render_svg(svg_text, width, height)

    def render_emotion_frames(
        self,
        style_name: str,
        emotion_name: str,
        fps: float = DEFAULT_FPS,
        duration: float = DEFAULT_DURATION,
    ) -> RenderedEmotion:
        style = self.get_style(style_name)

        if style.type is StyleType.PROGRAMMATIC:
            return RenderedEmotion(frames=[draw_emotion(get_emotion(emotion_name)).data.copy()])

        if style.type is StyleType.IMAGE:
            return RenderedEmotion(frames=[np.array(self.load_emotion_image(style_name, emotion_name))])

        svg_text = self.load_emotion_svg(style_name, emotion_name)
        if not is_animated(svg_text):
            return RenderedEmotion(frames=[self.rasterize(svg_text)])

        logger.info("Rendering animated %s/%s at %s fps for %ss", style_name, emotion_name, fps, duration)
        frames = render_animated_frames(
            svg_text,
            fps=fps,
            duration=duration,
            width=WIDTH,
            height=HEIGHT,
            rasterize=self.rasterize,
        )
        return RenderedEmotion(frames=frames, delay_ms=round(1000 / fps))
