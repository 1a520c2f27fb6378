"""Resolve SMIL directives at a point in time into a static SVG document."""
from __future__ import annotations

import logging
from xml.etree import ElementTree as ET

from glint.animation.directives import (
    AnimationDirective,
    DirectiveKind,
    build_parent_map,
    directive_kind,
    find_directive_elements,
    read_directive,
)
from glint.animation.interpolate import interpolate_values

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"


class SvgParseError(ValueError):
    """Raised when the source markup cannot be parsed at all."""


def _register_svg_namespaces() -> None:
    """Keep default and xlink prefixes stable on serialization."""
    ET.register_namespace("", SVG_NS)
    ET.register_namespace("xlink", XLINK_NS)


# ElementTree's prefix map is process-global; rewriting it while another
# thread serializes can emit ns0: prefixes, so register once at import.
_register_svg_namespaces()


def parse_svg_tree(svg_text: str) -> ET.Element:
    try:
        return ET.fromstring(svg_text.strip())
    except ET.ParseError as exc:
        raise SvgParseError(f"Invalid SVG: {exc}") from exc


def resolve_directive(directive: AnimationDirective, t: float) -> str:
    return interpolate_values(
        directive.values,
        directive.duration,
        directive.begin,
        t,
        directive.repeat,
    )


def apply_directive(directive: AnimationDirective, t: float) -> None:
    value = resolve_directive(directive, t)
    if directive.kind is DirectiveKind.TRANSFORM:
        # Last writer wins; simultaneous transforms are not composed.
        directive.parent.set("transform", f"{directive.transform_type}({value})")
    else:
        directive.parent.set(directive.attribute_name, value)


def apply_animations_at_time(svg_text: str, t: float) -> str:
    """Return ``svg_text`` with every animation frozen at time ``t`` (seconds).

    The source is re-parsed on every call so no state leaks between frames.
    Directive elements are always removed from the output, including ones
    that were skipped for missing or malformed parameters.

    All ``<animate>`` elements are applied before any ``<animateTransform>``,
    so a transform directive wins over an ``<animate attributeName="transform">``
    on the same element.
    """
    root = parse_svg_tree(svg_text)
    parents = build_parent_map(root)

    # stable sort: document order within each kind
    elements = sorted(find_directive_elements(root), key=lambda el: directive_kind(el) is DirectiveKind.TRANSFORM)
    for el in elements:
        parent = parents.get(el)
        directive = read_directive(el, parent)
        if directive is not None:
            apply_directive(directive, t)
        if parent is not None:
            parent.remove(el)

    return ET.tostring(root, encoding="unicode")
