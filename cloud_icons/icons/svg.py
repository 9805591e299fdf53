"""Mutable SVG handle.

Wraps an ElementTree document with the SVG namespace stripped from tag names,
so cleanup code can match `path`, `g`, `defs` directly. `xlink:href` is kept
as a literal attribute name. Elements and attributes from other namespaces
(editor metadata and the like) keep their `{uri}local` form until cleanup
removes them.
"""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from typing import Optional

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

# Presentation attributes that children inherit from <svg>
ROOT_PRESENTATION_ATTRS = {
    "fill",
    "fill-opacity",
    "fill-rule",
    "stroke",
    "stroke-width",
    "stroke-linecap",
    "stroke-linejoin",
    "stroke-miterlimit",
    "stroke-dasharray",
    "stroke-dashoffset",
    "stroke-opacity",
    "opacity",
    "color",
    "clip-rule",
    "style",
}

_NUMBER_RE = re.compile(r"[-+]?(?:\d*\.\d+|\d+)(?:[eE][-+]?\d+)?")


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.3f}".rstrip("0").rstrip(".")


def parse_length(value: Optional[str]) -> Optional[float]:
    if value is None:
        return None
    value = value.strip()
    if not value or value.endswith("%"):
        return None
    match = _NUMBER_RE.match(value)
    if not match:
        return None
    return float(match.group(0))


def local_name(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def namespace_of(name: str) -> Optional[str]:
    if name.startswith("{"):
        return name[1:].split("}", 1)[0]
    return None


@dataclass(frozen=True)
class ViewBox:
    left: float
    top: float
    width: float
    height: float

    def to_attribute(self) -> str:
        return " ".join(format_number(v) for v in (self.left, self.top, self.width, self.height))


def _normalize_names(root: ET.Element) -> None:
    for elem in root.iter():
        if not isinstance(elem.tag, str):
            continue
        if namespace_of(elem.tag) == SVG_NS:
            elem.tag = local_name(elem.tag)
        for key in list(elem.attrib):
            ns = namespace_of(key)
            if ns == XLINK_NS:
                elem.attrib[f"xlink:{local_name(key)}"] = elem.attrib.pop(key)
            elif ns == SVG_NS:
                elem.attrib[local_name(key)] = elem.attrib.pop(key)


def _parse_viewbox(root: ET.Element) -> ViewBox:
    raw = root.get("viewBox")
    if raw:
        parts = [float(p) for p in raw.replace(",", " ").split()]
        if len(parts) != 4:
            raise ValueError(f"Invalid viewBox: {raw}")
        if parts[2] <= 0 or parts[3] <= 0:
            raise ValueError(f"Invalid viewBox dimensions: {raw}")
        return ViewBox(*parts)

    width = parse_length(root.get("width"))
    height = parse_length(root.get("height"))
    if not width or not height:
        raise ValueError("Missing viewBox and width/height")
    return ViewBox(0.0, 0.0, width, height)


class SVG:
    """Parsed SVG document that cleanup steps mutate in place."""

    def __init__(self, content: str):
        try:
            root = ET.fromstring(content)
        except ET.ParseError as e:
            raise ValueError(f"Invalid SVG markup: {e}") from e

        if local_name(root.tag) != "svg":
            raise ValueError(f"Root element must be <svg>, got <{local_name(root.tag)}>")

        _normalize_names(root)
        self.root = root
        self.viewbox = _parse_viewbox(root)

    @classmethod
    def from_body(
        cls,
        body: str,
        *,
        left: float = 0,
        top: float = 0,
        width: float = 16,
        height: float = 16,
    ) -> "SVG":
        viewbox = ViewBox(left, top, width, height)
        return cls(
            f'<svg xmlns="{SVG_NS}" xmlns:xlink="{XLINK_NS}" '
            f'viewBox="{viewbox.to_attribute()}">{body}</svg>'
        )

    def set_viewbox(self, viewbox: ViewBox) -> None:
        self.viewbox = viewbox
        self.root.set("viewBox", viewbox.to_attribute())

    def get_body(self) -> str:
        """Serialized children of the root element.

        Presentation attributes still set on the root are kept on a wrapping
        `<g>`, so the body renders the same without its `<svg>` element.
        """
        for child in self.root:
            child.tail = None

        inherited = {k: v for k, v in self.root.attrib.items() if k in ROOT_PRESENTATION_ATTRS}
        if inherited:
            wrapper = ET.Element("g", inherited)
            wrapper.extend(list(self.root))
            return ET.tostring(wrapper, encoding="unicode", short_empty_elements=True)

        return "".join(ET.tostring(child, encoding="unicode", short_empty_elements=True) for child in self.root)

    def to_string(self) -> str:
        vb = self.viewbox
        body = self.get_body()
        xlink = f' xmlns:xlink="{XLINK_NS}"' if "xlink:" in body else ""
        return (
            f'<svg xmlns="{SVG_NS}"{xlink} width="{format_number(vb.width)}" '
            f'height="{format_number(vb.height)}" viewBox="{vb.to_attribute()}">{body}</svg>'
        )

    def __str__(self) -> str:
        return self.to_string()
