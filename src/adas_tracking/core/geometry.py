"""
Geometric primitives - box overlap and frame-relative positions.

Boxes are (x, y, width, height) with (x, y) the top-left corner, either as
BoundingBox instances or plain 4-sequences.
"""

from ..models import BoundingBox, FrameGeometry

BoxLike = BoundingBox | tuple[float, float, float, float] | list[float]


def _unpack(box: BoxLike) -> tuple[float, float, float, float]:
    if isinstance(box, BoundingBox):
        return box.x, box.y, box.width, box.height
    x, y, w, h = box
    return float(x), float(y), float(w), float(h)


def iou(box_a: BoxLike, box_b: BoxLike) -> float:
    """
    Compute Intersection over Union of two boxes in xywh format.

    Returns 0.0 for disjoint or edge-touching boxes and for zero-area boxes.
    """
    ax, ay, aw, ah = _unpack(box_a)
    bx, by, bw, bh = _unpack(box_b)
    aw, ah, bw, bh = max(0.0, aw), max(0.0, ah), max(0.0, bw), max(0.0, bh)

    inter_w = min(ax + aw, bx + bw) - max(ax, bx)
    inter_h = min(ay + ah, by + bh) - max(ay, by)
    if inter_w <= 0.0 or inter_h <= 0.0:
        return 0.0

    inter_area = inter_w * inter_h
    union = aw * ah + bw * bh - inter_area
    if union <= 0.0:
        return 0.0

    return min(1.0, inter_area / union)


def box_center(box: BoxLike) -> tuple[float, float]:
    """Center point of a box."""
    x, y, w, h = _unpack(box)
    return (x + w / 2, y + h / 2)


def relative_center_x(box: BoxLike, geometry: FrameGeometry) -> float:
    """Horizontal center as a fraction of frame width."""
    return box_center(box)[0] / geometry.width


def relative_center_y(box: BoxLike, geometry: FrameGeometry) -> float:
    """Vertical center as a fraction of frame height (0 = top)."""
    return box_center(box)[1] / geometry.height


def relative_area(box: BoxLike, geometry: FrameGeometry) -> float:
    """Box area over frame area, clamped to [0, 1]."""
    _, _, w, h = _unpack(box)
    ratio = max(0.0, w) * max(0.0, h) / geometry.area
    return max(0.0, min(1.0, ratio))


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]; NaN maps to low."""
    if value != value:  # NaN
        return low
    return max(low, min(high, value))


__all__ = [
    "BoxLike",
    "box_center",
    "clamp",
    "iou",
    "relative_area",
    "relative_center_x",
    "relative_center_y",
]
