from __future__ import annotations

import logging
from pathlib import Path as FilePath

import ezdxf

from . import segments as seg
from .geometry import almost_equal_points
from .models import Point, PointSegment
from .path import Path

logger = logging.getLogger(__name__)


def polylines(path: Path) -> list[tuple[list[Point], bool]]:
    """Flatten `path` into one point list per sub-path, with its closed flag."""
    out: list[tuple[list[Point], bool]] = []
    points: list[Point] = []
    for s in path.segments:
        if isinstance(s, PointSegment):
            if len(points) > 1:
                out.append((points, False))
            points = [s.at]
            continue
        for ln in seg.flattened(s):
            if not points:
                points.append(ln.start)
            points.append(ln.end)
    if len(points) > 1:
        out.append((points, False))

    if path.is_closed() and len(out) == 1:
        pts = out[0][0]
        if almost_equal_points(pts[0], pts[-1]):
            pts = pts[:-1]
        out[0] = (pts, True)
    return out


def write_dxf(output: str | FilePath, paths: list[Path], *, layer: str = "MANDALA") -> int:
    """Write one LWPOLYLINE per flattened sub-path; returns the entity count."""
    doc = ezdxf.new("R2018")
    msp = doc.modelspace()
    _ensure_layer(doc, layer)

    count = 0
    for path in paths:
        for points, closed in polylines(path):
            msp.add_lwpolyline(points, close=closed, dxfattribs={"layer": layer})
            count += 1

    doc.saveas(str(output))
    logger.info("Wrote %d polylines to %s", count, output)
    return count


def _ensure_layer(doc: ezdxf.document.Drawing, layer_name: str) -> None:
    if layer_name in doc.layers:
        return
    doc.layers.new(name=layer_name)
