"""
Corner estimation for the paper contour
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

import numpy as np

from .errors import InvalidInput, MissingCorners
from .geometry import Point, min_area_rect

CORNER_NAMES = ('top_left', 'top_right', 'bottom_left', 'bottom_right')


@dataclass(frozen=True)
class Quadrilateral:
    """
    Four named paper corners. A corner is None when no contour point
    fell into its quadrant.
    """
    top_left: Optional[Point] = None
    top_right: Optional[Point] = None
    bottom_left: Optional[Point] = None
    bottom_right: Optional[Point] = None

    def corners(self) -> Dict[str, Optional[Point]]:
        return {name: getattr(self, name) for name in CORNER_NAMES}

    def missing(self) -> List[str]:
        """Names of the absent corners"""
        return [name for name in CORNER_NAMES if getattr(self, name) is None]

    @property
    def is_complete(self) -> bool:
        return not self.missing()

    def as_array(self) -> np.ndarray:
        """
        Corners as a float32 array ordered TL, TR, BL, BR.

        Raises:
            MissingCorners: If any corner is absent
        """
        missing = self.missing()
        if missing:
            raise MissingCorners(missing)
        return np.array([getattr(self, name) for name in CORNER_NAMES], dtype=np.float32)

    @classmethod
    def from_points(cls, points) -> 'Quadrilateral':
        """
        Build a quadrilateral from four (x, y) points ordered TL, TR, BL, BR.

        Used for manually chosen corners.
        """
        pts = np.asarray(points, dtype=np.float64)
        if pts.shape != (4, 2):
            raise InvalidInput(f"Expected 4 corner points, got shape {pts.shape}")
        return cls(*(Point(float(x), float(y)) for x, y in pts))


def estimate_corners(contour: np.ndarray) -> Quadrilateral:
    """
    Estimate the four paper corners of a contour.

    The center of the contour's minimum-area rectangle splits the plane into
    four quadrants; in each quadrant the point farthest from the center is
    taken as that corner. Points lying exactly on either axis through the
    center are ignored. This is a cheap O(n) heuristic and can misplace
    corners for strongly rotated or non-convex shapes.

    Args:
        contour: Array of (x, y) points

    Returns:
        Quadrilateral, with None for quadrants that got no point
    """
    pts = np.asarray(contour, dtype=np.float64).reshape(-1, 2)
    if len(pts) == 0:
        raise InvalidInput("Contour has no points")

    center = min_area_rect(pts).center
    dx = pts[:, 0] - center.x
    dy = pts[:, 1] - center.y
    dist = np.hypot(dx, dy)

    quadrants = {
        'top_left': (dx < 0) & (dy < 0),
        'top_right': (dx > 0) & (dy < 0),
        'bottom_left': (dx < 0) & (dy > 0),
        'bottom_right': (dx > 0) & (dy > 0),
    }

    corners = {}
    for name, mask in quadrants.items():
        indices = np.flatnonzero(mask)
        if indices.size == 0:
            corners[name] = None
            continue
        # argmax keeps the first of equally distant points
        best = indices[int(np.argmax(dist[indices]))]
        corners[name] = Point(float(pts[best, 0]), float(pts[best, 1]))

    return Quadrilateral(**corners)
