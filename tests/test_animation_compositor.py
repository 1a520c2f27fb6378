from unittest.mock import Mock
from xml.etree import ElementTree as ET

import pytest

from glint.animation.compositor import SvgParseError, apply_animations_at_time
from glint.animation.directives import DirectiveKind, extract_directives, find_directive_elements

SVG_NS = "{http://www.w3.org/2000/svg}"


def _animated_svg() -> str:
    return """
<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 64 32" width="64" height="32">
  <rect id="bg" width="64" height="32" fill="#111"/>
  <g id="eyes" transform="scale(1)">
    <animateTransform attributeName="transform" type="translate" values="0;10" dur="1s"/>
    <circle id="left" cx="20" cy="16" r="4">
      <animate attributeName="r" values="4;8" dur="2s" repeatCount="indefinite"/>
    </circle>
    <circle id="right" cx="44" cy="16" r="4">
      <animate attributeName="cx" values="44;48" dur="1s" begin="1s"/>
    </circle>
  </g>
</svg>
""".strip()


def _by_id(svg_text: str, el_id: str) -> ET.Element:
    root = ET.fromstring(svg_text)
    return next(el for el in root.iter() if el.get("id") == el_id)


def test_extract_directives_reads_both_kinds():
    root = ET.fromstring(_animated_svg())
    directives = extract_directives(root)
    kinds = [d.kind for d in directives]
    assert kinds == [DirectiveKind.TRANSFORM, DirectiveKind.DIRECT, DirectiveKind.DIRECT]
    assert directives[0].transform_type == "translate"
    assert directives[1].values == ["4", "8"]
    assert directives[1].repeat == "indefinite"
    assert directives[2].begin == 1.0


def test_values_are_trimmed():
    root = ET.fromstring('<svg><rect><animate attributeName="x" values=" 1 ; 2 ;3 " dur="1s"/></rect></svg>')
    (directive,) = extract_directives(root)
    assert directive.values == ["1", "2", "3"]


def test_direct_values_written_to_parent():
    out = apply_animations_at_time(_animated_svg(), 0.5)
    assert _by_id(out, "left").get("r") == "5"
    # not started yet: first keyframe
    assert _by_id(out, "right").get("cx") == "44"


def test_transform_directive_overwrites_transform():
    out = apply_animations_at_time(_animated_svg(), 0.5)
    assert _by_id(out, "eyes").get("transform") == "translate(5)"


def test_transform_type_is_used():
    svg = '<svg><g><animateTransform attributeName="transform" type="rotate" values="0;90" dur="1s"/></g></svg>'
    out = apply_animations_at_time(svg, 0.5)
    assert ET.fromstring(out).find("g").get("transform") == "rotate(45)"


def test_last_transform_directive_wins():
    svg = (
        "<svg><g>"
        '<animateTransform attributeName="transform" type="scale" values="1;3" dur="1s"/>'
        '<animateTransform attributeName="transform" type="translate" values="0;4" dur="1s"/>'
        "</g></svg>"
    )
    out = apply_animations_at_time(svg, 0.5)
    assert ET.fromstring(out).find("g").get("transform") == "translate(2)"


def test_output_has_no_directive_tags():
    out = apply_animations_at_time(_animated_svg(), 1.25)
    assert "animate" not in out
    assert find_directive_elements(ET.fromstring(out)) == []


def test_skipped_directives_are_removed_and_leave_parent_untouched():
    svg = (
        "<svg>"
        '<rect id="a" x="1"><animate attributeName="x" values="5;6"/></rect>'
        '<rect id="b" x="2"><animate attributeName="x" values="5;6" dur="0s"/></rect>'
        '<rect id="c" x="3"><animate attributeName="x" values="5;6" dur="1s" begin="click"/></rect>'
        '<rect id="d" x="4"><animate attributeName="x" values=" ; " dur="1s"/></rect>'
        "</svg>"
    )
    out = apply_animations_at_time(svg, 0.5)
    assert "animate" not in out
    assert [_by_id(out, i).get("x") for i in "abcd"] == ["1", "2", "3", "4"]


def test_non_finite_timing_skips_directive():
    svg = (
        "<svg>"
        '<rect id="a" x="1"><animate attributeName="x" values="0;10" dur="1s" begin="-inf" repeatCount="indefinite"/></rect>'
        '<rect id="b" x="2"><animate attributeName="x" values="0;10" dur="1s" begin="-1e999s" repeatCount="indefinite"/></rect>'
        '<rect id="c" x="3"><animate attributeName="x" values="0;10" dur="inf"/></rect>'
        '<rect id="d" x="4"><animate attributeName="x" values="0;10" dur="1s" begin="nan"/></rect>'
        "</svg>"
    )
    out = apply_animations_at_time(svg, 0.5)
    assert "animate" not in out
    assert [_by_id(out, i).get("x") for i in "abcd"] == ["1", "2", "3", "4"]


def test_trailing_separator_adds_no_keyframe():
    root = ET.fromstring('<svg><rect><animate attributeName="x" values="0;10;" dur="1s"/></rect></svg>')
    (directive,) = extract_directives(root)
    assert directive.values == ["0", "10"]
    out = apply_animations_at_time('<svg><rect id="r"><animate attributeName="x" values="0;10;" dur="1s"/></rect></svg>', 0.5)
    assert _by_id(out, "r").get("x") == "5"


def test_transform_directives_applied_after_plain_animates():
    svg = (
        '<svg><g id="g">'
        '<animateTransform attributeName="transform" type="translate" values="0;4" dur="1s"/>'
        '<animate attributeName="transform" values="scale(1);scale(3)" dur="1s"/>'
        "</g></svg>"
    )
    out = apply_animations_at_time(svg, 0.5)
    assert _by_id(out, "g").get("transform") == "translate(2)"


def test_namespaces_not_reregistered_per_frame(monkeypatch):
    register = Mock()
    monkeypatch.setattr(ET, "register_namespace", register)
    out = apply_animations_at_time(_animated_svg(), 0.5)
    register.assert_not_called()
    assert out.startswith('<svg xmlns="http://www.w3.org/2000/svg"')


def test_each_call_starts_from_source():
    svg = _animated_svg()
    first = apply_animations_at_time(svg, 0.5)
    apply_animations_at_time(svg, 0.9)
    assert apply_animations_at_time(svg, 0.5) == first


def test_namespace_is_preserved():
    out = apply_animations_at_time(_animated_svg(), 0.0)
    root = ET.fromstring(out)
    assert root.tag == f"{SVG_NS}svg"
    assert 'xmlns="http://www.w3.org/2000/svg"' in out


def test_invalid_markup_raises():
    with pytest.raises(SvgParseError):
        apply_animations_at_time("<svg><g></svg>", 0.0)
