"""Color parsing.

Walks every color-bearing attribute, inline `style` declaration and `<style>`
rule of an SVG, hands each color to a caller-supplied callback and writes back
whatever the callback returns. Returning None removes the declaration.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from cloud_icons.icons.svg import SVG

COLOR_ATTRS = ("fill", "stroke", "stop-color", "flood-color", "lighting-color")

# Values that are not colors and are never passed to the callback
IGNORED_VALUES = {"none", "inherit", "initial", "unset", ""}

# Elements that draw with an implicit black fill when none is set
FILLED_SHAPES = {"path", "rect", "circle", "ellipse", "polygon", "polyline", "text"}

# Subtrees that are not rendered directly
NON_RENDERED = {"defs", "clipPath", "mask", "symbol", "pattern", "marker", "linearGradient", "radialGradient"}

_STYLE_RULE_RE = re.compile(r"(?P<prop>fill|stroke|stop-color|flood-color|lighting-color)\s*:\s*(?P<value>[^;}]+)")

ColorCallback = Callable[[str, str], Optional[str]]


@dataclass
class ColorParseResult:
    colors: List[str] = field(default_factory=list)
    has_unset_colors: bool = False

    def add(self, color: str) -> None:
        if color not in self.colors:
            self.colors.append(color)


def keep_color(attr: str, color: str) -> str:
    """Identity policy: brand colors carry meaning in architecture diagrams."""
    return color


def _is_paint_reference(value: str) -> bool:
    return value.strip().lower().startswith("url(")


def _should_visit(value: str) -> bool:
    v = value.strip()
    return v.lower() not in IGNORED_VALUES and not _is_paint_reference(v)


def _parse_style(style: str) -> List[List[str]]:
    declarations = []
    for chunk in style.split(";"):
        if ":" not in chunk:
            continue
        prop, value = chunk.split(":", 1)
        declarations.append([prop.strip(), value.strip()])
    return declarations


def _format_style(declarations: List[List[str]]) -> str:
    return ";".join(f"{prop}:{value}" for prop, value in declarations)


def _visit_style_attribute(elem: ET.Element, callback: ColorCallback, result: ColorParseResult) -> None:
    style = elem.get("style")
    if not style:
        return

    declarations = []
    for prop, value in _parse_style(style):
        if prop in COLOR_ATTRS and _should_visit(value):
            result.add(value)
            replacement = callback(prop, value)
            if replacement is None:
                continue
            value = replacement
        declarations.append([prop, value])

    if declarations:
        elem.set("style", _format_style(declarations))
    else:
        del elem.attrib["style"]


def _visit_style_element(elem: ET.Element, callback: ColorCallback, result: ColorParseResult) -> None:
    if not elem.text:
        return

    def replace(match: re.Match) -> str:
        prop = match.group("prop")
        value = match.group("value").strip()
        if not _should_visit(value):
            return match.group(0)
        result.add(value)
        replacement = callback(prop, value)
        if replacement is None:
            return f"{prop}:inherit"
        return f"{prop}:{replacement}"

    elem.text = _STYLE_RULE_RE.sub(replace, elem.text)


def _sets_fill(elem: ET.Element) -> bool:
    if elem.get("fill") is not None:
        return True
    return any(prop == "fill" for prop, _ in _parse_style(elem.get("style") or ""))


def _apply_default_color(
    elem: ET.Element,
    default_color: Optional[str],
    result: ColorParseResult,
    inherited: bool,
) -> None:
    for child in elem:
        if not isinstance(child.tag, str) or child.tag in NON_RENDERED:
            continue
        child_inherited = inherited or _sets_fill(child)
        if child.tag in FILLED_SHAPES and not child_inherited:
            result.has_unset_colors = True
            if default_color is not None:
                child.set("fill", default_color)
        _apply_default_color(child, default_color, result, child_inherited)


def parse_colors(
    svg: SVG,
    *,
    callback: ColorCallback = keep_color,
    default_color: Optional[str] = None,
) -> ColorParseResult:
    """Visit every color in `svg`, replacing each with `callback(attr, color)`.

    Args:
        svg: SVG handle, modified in place.
        callback: Receives the attribute name and the raw color string.
        default_color: Fill for shapes that would otherwise render with the
            implicit black fill. None leaves them untouched.

    Returns:
        Distinct colors found (before replacement) and whether any shape had
        no fill at all.
    """
    result = ColorParseResult()
    has_style_rules = False

    for elem in svg.root.iter():
        if not isinstance(elem.tag, str):
            continue
        if elem.tag == "style":
            has_style_rules = True
            _visit_style_element(elem, callback, result)
            continue

        for attr in COLOR_ATTRS:
            value = elem.get(attr)
            if value is None or not _should_visit(value):
                continue
            result.add(value)
            replacement = callback(attr, value)
            if replacement is None:
                del elem.attrib[attr]
            elif replacement != value:
                elem.set(attr, replacement)

        _visit_style_attribute(elem, callback, result)

    # Class-based fills from <style> rules cannot be resolved per element
    if not has_style_rules:
        _apply_default_color(svg.root, default_color, result, _sets_fill(svg.root))

    return result
