"""SVG cleanup and optimization.

`cleanup_svg` normalizes markup: it drops scripts, metadata and editor
namespaces, strips event handlers and external references, and moves
presentation attributes off the root element so they survive body export.

`optimize_svg` shrinks the normalized tree. It assumes `cleanup_svg` has
already run; foreign-namespace content is not handled here.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from typing import Dict, Iterator, Set, Tuple

from cloud_icons.icons.svg import ROOT_PRESENTATION_ATTRS, SVG, local_name, namespace_of

REMOVED_TAGS = {"script", "foreignObject", "metadata", "title", "desc"}

SHAPE_TAGS = {"path", "rect", "circle", "ellipse", "line", "polyline", "polygon", "text", "image", "use"}

ROOT_ATTRS_KEPT = {"viewBox", "width", "height", "xmlns", "version", "x", "y", "preserveAspectRatio"}

# Defaults that are not inherited, so dropping them cannot change rendering
NON_INHERITED_DEFAULTS: Dict[str, Set[str]] = {
    "opacity": {"1"},
    "x": {"0"},
    "y": {"0"},
}
ZERO_POSITION_TAGS = {"rect", "image", "use", "svg", "pattern", "mask", "filter"}

_REF_RE = re.compile(r"url\(\s*['\"]?#([^'\")\s]+)['\"]?\s*\)")


def _iter_with_parent(root: ET.Element) -> Iterator[Tuple[ET.Element, ET.Element]]:
    for parent in root.iter():
        for child in list(parent):
            yield parent, child


def _is_external_href(value: str) -> bool:
    v = value.strip()
    return not (v.startswith("#") or v.startswith("data:"))


def _clean_attributes(elem: ET.Element) -> None:
    for key in list(elem.attrib):
        name = local_name(key)
        if namespace_of(key) is not None:
            # Editor namespaces (inkscape, sodipodi, sketch, adobe) and xml:*
            del elem.attrib[key]
        elif name.lower().startswith("on"):
            del elem.attrib[key]
        elif name.startswith("data-"):
            del elem.attrib[key]
        elif key in {"href", "xlink:href"} and _is_external_href(elem.attrib[key]):
            del elem.attrib[key]


def _remove_elements(root: ET.Element) -> None:
    for parent, child in list(_iter_with_parent(root)):
        if not isinstance(child.tag, str):
            parent.remove(child)
            continue
        if namespace_of(child.tag) is not None or child.tag in REMOVED_TAGS:
            parent.remove(child)


def _move_root_attributes(svg: SVG) -> None:
    root = svg.root
    moved = {k: v for k, v in root.attrib.items() if k in ROOT_PRESENTATION_ATTRS}
    for key in list(root.attrib):
        if key not in ROOT_ATTRS_KEPT:
            del root.attrib[key]

    if not moved or len(root) == 0:
        return

    wrapper = ET.Element("g", moved)
    wrapper.extend(list(root))
    for child in list(root):
        root.remove(child)
    root.append(wrapper)


def _has_shapes(root: ET.Element) -> bool:
    return any(isinstance(e.tag, str) and e.tag in SHAPE_TAGS for e in root.iter())


def cleanup_svg(svg: SVG) -> None:
    """Normalize markup in place.

    Raises:
        ValueError: When nothing drawable is left.
    """
    _remove_elements(svg.root)
    for elem in svg.root.iter():
        _clean_attributes(elem)
    _move_root_attributes(svg)
    svg.set_viewbox(svg.viewbox)

    if not _has_shapes(svg.root):
        raise ValueError("SVG has no drawable content")


def _referenced_ids(root: ET.Element) -> Set[str]:
    refs: Set[str] = set()
    for elem in root.iter():
        for key, value in elem.attrib.items():
            if key in {"href", "xlink:href"} and value.startswith("#"):
                refs.add(value[1:])
            else:
                refs.update(_REF_RE.findall(value))
        if elem.tag == "style" and elem.text:
            refs.update(_REF_RE.findall(elem.text))
            # Selectors like #id apply to elements by id
            refs.update(re.findall(r"#([A-Za-z_][\w-]*)", elem.text))
    return refs


def _strip_whitespace(root: ET.Element) -> None:
    for elem in root.iter():
        if elem.tag in {"text", "tspan", "textPath", "style"}:
            continue
        if elem.text is not None and not elem.text.strip():
            elem.text = None
        if elem.tail is not None and not elem.tail.strip():
            elem.tail = None


def _drop_defaults(elem: ET.Element) -> None:
    for key, defaults in NON_INHERITED_DEFAULTS.items():
        value = elem.get(key)
        if value is None or value.strip() not in defaults:
            continue
        if key in {"x", "y"} and elem.tag not in ZERO_POSITION_TAGS:
            continue
        del elem.attrib[key]


def _remove_empty_containers(root: ET.Element) -> bool:
    changed = False
    for parent, child in list(_iter_with_parent(root)):
        if child.tag in {"g", "defs"} and len(child) == 0 and not (child.text or "").strip():
            parent.remove(child)
            changed = True
    return changed


def _collapse_groups(root: ET.Element) -> bool:
    # One group per call: moving children invalidates the parent pairs
    for parent, child in _iter_with_parent(root):
        if child.tag != "g" or child.attrib:
            continue
        index = list(parent).index(child)
        parent.remove(child)
        for offset, grandchild in enumerate(list(child)):
            parent.insert(index + offset, grandchild)
        return True
    return False


def optimize_svg(svg: SVG) -> None:
    """Reduce markup size in place. Run after `cleanup_svg`."""
    root = svg.root
    _strip_whitespace(root)

    refs = _referenced_ids(root)
    for elem in root.iter():
        elem_id = elem.get("id")
        if elem_id is not None and elem_id not in refs:
            del elem.attrib["id"]
        _drop_defaults(elem)

    # Removing one container can leave its parent empty
    while _remove_empty_containers(root) or _collapse_groups(root):
        pass

