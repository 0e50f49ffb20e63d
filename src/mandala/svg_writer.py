from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from pathlib import Path as FilePath

from .models import Rect
from .path import Path, format_number

logger = logging.getLogger(__name__)

SVG_NS = "http://www.w3.org/2000/svg"


def build_svg(
    paths: list[Path], bounds: Rect, *, stroke: str = "black", stroke_width: float = 1.0
) -> ET.Element:
    ET.register_namespace("", SVG_NS)
    root = ET.Element(
        f"{{{SVG_NS}}}svg",
        {
            "width": format_number(bounds.width),
            "height": format_number(bounds.height),
            "viewBox": " ".join(format_number(v) for v in (bounds.x, bounds.y, bounds.width, bounds.height)),
        },
    )
    group = ET.SubElement(
        root,
        f"{{{SVG_NS}}}g",
        {"fill": "none", "stroke": stroke, "stroke-width": format_number(stroke_width)},
    )
    for path in paths:
        d = path.to_svg_path_d()
        if d:
            ET.SubElement(group, f"{{{SVG_NS}}}path", {"d": d})
    return root


def write_svg(
    output: str | FilePath,
    paths: list[Path],
    bounds: Rect,
    *,
    stroke: str = "black",
    stroke_width: float = 1.0,
) -> None:
    root = build_svg(paths, bounds, stroke=stroke, stroke_width=stroke_width)
    tree = ET.ElementTree(root)
    tree.write(str(output), encoding="utf-8", xml_declaration=True)
    logger.info("Wrote %d paths to %s", len(paths), output)
