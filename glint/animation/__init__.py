"""SMIL Animation Module.

Resolves a small subset of SVG animation tags so animated SVG styles can be
rendered to a sequence of raster frames.

Components:
- timing: parses dur/begin/repeatCount clock values
- interpolate: computes the keyframe value active at a given time
- directives: finds <animate>/<animateTransform> tags and reads their parameters
- compositor: writes resolved values onto parent elements and strips the tags
- driver: samples frames at a fixed rate and rasterizes each one
"""

from glint.animation.timing import (
    INDEFINITE,
    parse_begin,
    parse_duration,
    parse_repeat_count,
)

from glint.animation.interpolate import (
    format_number,
    interpolate_values,
    lerp,
)

from glint.animation.directives import (
    AnimationDirective,
    DirectiveKind,
    extract_directives,
    find_directive_elements,
    read_directive,
)

from glint.animation.compositor import (
    SvgParseError,
    apply_animations_at_time,
)

from glint.animation.driver import (
    DEFAULT_DURATION,
    DEFAULT_FPS,
    FrameSequence,
    frame_times,
    is_animated,
    render_animated_frames,
)

__all__ = [
    # Timing
    "INDEFINITE",
    "parse_begin",
    "parse_duration",
    "parse_repeat_count",
    # Interpolation
    "format_number",
    "interpolate_values",
    "lerp",
    # Directives
    "AnimationDirective",
    "DirectiveKind",
    "extract_directives",
    "find_directive_elements",
    "read_directive",
    # Compositor
    "SvgParseError",
    "apply_animations_at_time",
    # Driver
    "DEFAULT_DURATION",
    "DEFAULT_FPS",
    "FrameSequence",
    "frame_times",
    "is_animated",
    "render_animated_frames",
]
