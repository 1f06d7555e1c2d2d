"""
Geometric primitives: points, convex hull and minimum-area rectangle
"""

import math
from typing import NamedTuple, Tuple

import numpy as np


class Point(NamedTuple):
    """Point in image pixel coordinates"""
    x: float
    y: float


class RotatedRect(NamedTuple):
    """Rectangle given by its center, (width, height) and angle in degrees"""
    center: Point
    size: Tuple[float, float]
    angle: float


def distance(p1, p2) -> float:
    """Euclidean distance between two (x, y) points."""
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


def convex_hull(points: np.ndarray) -> np.ndarray:
    """
    Convex hull using Andrew's monotone chain.

    Collinear points on the hull edges are dropped.

    Args:
        points: Array of (x, y) points

    Returns:
        Hull vertices (float64, shape (M, 2)) in counter-clockwise order
        for a y-up axis, starting from the lowest-x point
    """
    pts = np.unique(np.asarray(points, dtype=np.float64).reshape(-1, 2), axis=0)
    if len(pts) <= 2:
        return pts

    def cross(o, a, b):
        return (a[0] - o[0]) * (b[1] - o[1]) - (a[1] - o[1]) * (b[0] - o[0])

    lower = []
    for p in pts:
        while len(lower) >= 2 and cross(lower[-2], lower[-1], p) <= 0:
            lower.pop()
        lower.append(p)

    upper = []
    for p in pts[::-1]:
        while len(upper) >= 2 and cross(upper[-2], upper[-1], p) <= 0:
            upper.pop()
        upper.append(p)

    return np.array(lower[:-1] + upper[:-1], dtype=np.float64)


def min_area_rect(points: np.ndarray) -> RotatedRect:
    """
    Minimum-area bounding rectangle of a point set.

    Tries the direction of every convex hull edge (rotating calipers) and
    keeps the one giving the smallest area; the first one wins on ties.

    Args:
        points: Array of (x, y) points

    Returns:
        RotatedRect with center, (width, height) and angle in degrees
    """
    hull = convex_hull(points)
    if len(hull) == 0:
        raise ValueError("min_area_rect needs at least one point")

    if len(hull) == 1:
        return RotatedRect(Point(float(hull[0, 0]), float(hull[0, 1])), (0.0, 0.0), 0.0)

    if len(hull) == 2:
        center = (hull[0] + hull[1]) / 2.0
        edge = hull[1] - hull[0]
        angle = math.degrees(math.atan2(edge[1], edge[0]))
        return RotatedRect(Point(float(center[0]), float(center[1])), (float(np.hypot(*edge)), 0.0), angle)

    best = None
    for k in range(len(hull)):
        edge = hull[(k + 1) % len(hull)] - hull[k]
        length = float(np.hypot(edge[0], edge[1]))
        if length == 0:
            continue

        u = edge / length
        v = np.array([-u[1], u[0]])

        a = hull @ u
        b = hull @ v
        width = float(a.max() - a.min())
        height = float(b.max() - b.min())
        area = width * height

        if best is None or area < best[0]:
            center = u * (a.max() + a.min()) / 2.0 + v * (b.max() + b.min()) / 2.0
            angle = math.degrees(math.atan2(u[1], u[0]))
            best = (area, center, (width, height), angle)

    _, center, size, angle = best
    return RotatedRect(Point(float(center[0]), float(center[1])), size, angle)
