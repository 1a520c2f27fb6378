"""Validate a style directory of emotion SVGs (preferred) or PNGs."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple, Union

from PIL import Image, UnidentifiedImageError

from glint.canvas import HEIGHT, WIDTH
from glint.emotions import REQUIRED_EMOTIONS

MAX_SVG_SIZE = 100 * 1024
EXPECTED_EXTENSIONS = (".svg", ".png", ".json", ".md", ".gif")


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def validate_svg_file(path: Path) -> Tuple[bool, Optional[str]]:
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        return False, f"Could not read SVG: {e}"

    if "<svg" not in content:
        return False, "Not a valid SVG file (missing <svg> tag)"

    size = len(content.encode("utf-8"))
    if size > MAX_SVG_SIZE:
        return False, f"SVG too large: {size / 1024:.1f}KB > {MAX_SVG_SIZE // 1024}KB"

    if "viewBox" not in content:
        return False, "SVG missing viewBox attribute (required for scaling)"

    return True, None


def _png_dimension_error(path: Path) -> Tuple[Optional[str], Optional[str]]:
    """Return (read_error, dimension_error) for one PNG."""
    try:
        with Image.open(path) as img:
            width, height = img.size
    except (OSError, UnidentifiedImageError) as e:
        return f"Could not read {path.name}: {e}", None
    if (width, height) != (WIDTH, HEIGHT):
        return None, f"{path.name} is {width}x{height}, expected {WIDTH}x{HEIGHT}"
    return None, None


def validate_style_directory(directory: Union[str, Path]) -> ValidationResult:
    dir_path = Path(directory)
    errors: List[str] = []
    warnings: List[str] = []

    if not dir_path.is_dir():
        return ValidationResult(False, [f"Directory does not exist: {dir_path}"], warnings)

    all_files = sorted(p.name for p in dir_path.iterdir() if p.is_file())
    svg_files = [f for f in all_files if f.endswith(".svg")]
    png_files = [f for f in all_files if f.endswith(".png")]

    if not svg_files and not png_files:
        return ValidationResult(False, ["No SVG or PNG files found"], warnings)

    if svg_files and png_files:
        warnings.append("Both SVG and PNG files found - SVG will take precedence")

    files = svg_files or png_files
    emotion_names = {Path(f).stem for f in files}
    missing = [e for e in REQUIRED_EMOTIONS if e not in emotion_names]
    if missing:
        errors.append(f"Missing emotions: {', '.join(missing)}")

    if svg_files:
        for name in svg_files:
            ok, error = validate_svg_file(dir_path / name)
            if not ok:
                errors.append(f"{name}: {error}")
    else:
        dimension_errors = []
        for name in png_files:
            read_error, dimension_error = _png_dimension_error(dir_path / name)
            if read_error:
                errors.append(read_error)
            if dimension_error:
                dimension_errors.append(dimension_error)
        if dimension_errors:
            errors.append(f"Wrong dimensions: {'; '.join(dimension_errors)}")

    unexpected = [f for f in all_files if not f.startswith(".") and not f.endswith(EXPECTED_EXTENSIONS)]
    if unexpected:
        warnings.append(f"Unexpected files: {', '.join(unexpected)}")

    return ValidationResult(valid=not errors, errors=errors, warnings=warnings)
