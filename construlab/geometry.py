"""
Footprint geometry — pure functions over screen-pixel points.

Points are (x, y) pairs in pixels. Real-world lengths come from a
user-supplied scale in pixels per meter.
"""

import math

DEFAULT_SCALE_PX_PER_M = 15.0
GRID_STEP_PX = 10.0
CLOSE_THRESHOLD_PX = 15.0


def distance(p1, p2) -> float:
    """Euclidean distance between two points (pixels)."""
    return math.hypot(p2[0] - p1[0], p2[1] - p1[1])


def polygon_area_px(points) -> float:
    """
    Shoelace (surveyor's) formula. Returns unsigned area in square pixels.

    Fewer than 3 points → 0. Self-intersecting paths are not validated; the
    result is whatever the shoelace sum gives.
    """
    n = len(points)
    if n < 3:
        return 0.0

    total = 0.0
    for i in range(n):
        x1, y1 = points[i][0], points[i][1]
        x2, y2 = points[(i + 1) % n][0], points[(i + 1) % n][1]
        total += x1 * y2 - x2 * y1

    return abs(total) / 2.0


def _check_scale(scale: float) -> float:
    if scale is None or scale <= 0:
        raise ValueError(f"Scale must be a positive number of pixels per meter, got {scale!r}")
    return float(scale)


def area_m2(points, scale: float) -> float:
    """Polygon area in m² at `scale` pixels per meter."""
    scale = _check_scale(scale)
    return polygon_area_px(points) / (scale * scale)


def _segments(points, closed: bool):
    n = len(points)
    if n < 2:
        return []
    count = n if closed else n - 1
    return [(points[i], points[(i + 1) % n]) for i in range(count)]


def perimeter_px(points, closed: bool = True) -> float:
    """Total edge length in pixels. The closing edge counts only when closed."""
    return sum(distance(a, b) for a, b in _segments(points, closed))


def segment_lengths_m(points, scale: float, closed: bool = True) -> list:
    """Length of each drawn edge in meters, in drawing order."""
    scale = _check_scale(scale)
    return [distance(a, b) / scale for a, b in _segments(points, closed)]


def snap_to_grid(x: float, y: float, step: float = GRID_STEP_PX) -> tuple:
    """Round a point to the nearest grid node."""
    return (round(x / step) * step, round(y / step) * step)


def lock_to_axis(x: float, y: float, anchor) -> tuple:
    """
    Orthogonal drawing: keep movement on the dominant axis only.
    The other coordinate is copied from the anchor point.
    """
    dx = abs(x - anchor[0])
    dy = abs(y - anchor[1])
    if dx > dy:
        return (x, anchor[1])
    return (anchor[0], y)


def closes_polygon(points, x: float, y: float, threshold: float = CLOSE_THRESHOLD_PX) -> bool:
    """A click closes the shape when >2 points exist and it lands near the first one."""
    if len(points) <= 2:
        return False
    return distance((x, y), points[0]) < threshold


def add_point(points, x: float, y: float, closed: bool = False,
              snap: bool = False, orthogonal: bool = False) -> tuple:
    """
    Apply one drawing click. Returns (new_points, closed).

    Clicks on an already-closed shape are ignored. Clicking near the first
    point closes the shape instead of adding a vertex.
    """
    points = list(points)
    if closed:
        return points, True

    if snap:
        x, y = snap_to_grid(x, y)
    if orthogonal and points:
        x, y = lock_to_axis(x, y, points[-1])

    if closes_polygon(points, x, y):
        return points, True

    points.append((x, y))
    return points, False
