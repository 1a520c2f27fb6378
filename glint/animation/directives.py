"""Find and read SMIL animation directives in a parsed SVG tree."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional
from xml.etree import ElementTree as ET

from glint.animation.timing import RepeatPolicy, parse_begin, parse_duration, parse_repeat_count

logger = logging.getLogger(__name__)

DEFAULT_TRANSFORM_TYPE = "translate"


class DirectiveKind(str, Enum):
    DIRECT = "animate"
    TRANSFORM = "animateTransform"


DIRECTIVE_TAGS = {kind.value: kind for kind in DirectiveKind}


@dataclass
class AnimationDirective:
    """One resolved <animate>/<animateTransform> element."""

    element: ET.Element
    parent: ET.Element
    kind: DirectiveKind
    attribute_name: str
    values: List[str]
    duration: float
    begin: float
    repeat: RepeatPolicy
    fill: Optional[str] = None
    transform_type: str = DEFAULT_TRANSFORM_TYPE


def _strip_ns(tag: str) -> str:
    return tag.split("}")[-1] if "}" in tag else tag


def directive_kind(el: ET.Element) -> Optional[DirectiveKind]:
    if not isinstance(el.tag, str):
        return None
    return DIRECTIVE_TAGS.get(_strip_ns(el.tag))


def build_parent_map(root: ET.Element) -> Dict[ET.Element, ET.Element]:
    return {child: parent for parent in root.iter() for child in parent}


def find_directive_elements(root: ET.Element) -> List[ET.Element]:
    """All animate/animateTransform elements at any depth, in document order."""
    return [el for el in root.iter() if directive_kind(el) is not None]


def split_values(raw: str) -> List[str]:
    return [v.strip() for v in raw.split(";") if v.strip()]


def read_directive(el: ET.Element, parent: Optional[ET.Element]) -> Optional[AnimationDirective]:
    """Read a directive's parameters; return None when it cannot take effect."""
    kind = directive_kind(el)
    if kind is None:
        return None

    attribute_name = el.get("attributeName")
    raw_values = el.get("values")
    raw_dur = el.get("dur")
    if not attribute_name or not raw_values or not raw_dur:
        logger.debug("Skipping <%s>: attributeName, values and dur are required", kind.value)
        return None

    values = split_values(raw_values)
    if not values:
        logger.debug("Skipping <%s %s>: empty values list", kind.value, attribute_name)
        return None

    duration = parse_duration(raw_dur)
    if not math.isfinite(duration) or duration <= 0:
        logger.debug("Skipping <%s %s>: unusable dur %r", kind.value, attribute_name, raw_dur)
        return None

    begin = parse_begin(el.get("begin"))
    if not math.isfinite(begin):
        logger.debug("Skipping <%s %s>: unusable begin %r", kind.value, attribute_name, el.get("begin"))
        return None

    if parent is None:
        logger.debug("Skipping <%s %s>: no parent element", kind.value, attribute_name)
        return None

    return AnimationDirective(
        element=el,
        parent=parent,
        kind=kind,
        attribute_name=attribute_name,
        values=values,
        duration=duration,
        begin=begin,
        repeat=parse_repeat_count(el.get("repeatCount")),
        fill=el.get("fill"),
        transform_type=el.get("type") or DEFAULT_TRANSFORM_TYPE,
    )


def extract_directives(root: ET.Element) -> List[AnimationDirective]:
    parents = build_parent_map(root)
    directives = []
    for el in find_directive_elements(root):
        directive = read_directive(el, parents.get(el))
        if directive is not None:
            directives.append(directive)
    return directives
