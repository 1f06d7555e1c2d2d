"""
Tests for the convex hull, minimum-area rectangle and corner estimation
"""

import cv2
import numpy as np
import pytest

from paper_scanner.contours import find_contours
from paper_scanner.corners import Quadrilateral, estimate_corners
from paper_scanner.errors import InvalidInput, MissingCorners
from paper_scanner.geometry import Point, RotatedRect, convex_hull, distance, min_area_rect


class TestGeometry:
    """Tests for hull and rotated rectangle"""

    def test_distance(self):
        assert distance(Point(0, 0), Point(3, 4)) == pytest.approx(5.0)

    def test_convex_hull_drops_interior_and_collinear_points(self):
        points = np.array([[0, 0], [5, 0], [10, 0], [10, 10], [0, 10], [5, 5], [3, 7]])
        hull = convex_hull(points)
        assert {tuple(p) for p in hull.tolist()} == {(0, 0), (10, 0), (10, 10), (0, 10)}

    def test_min_area_rect_axis_aligned(self):
        points = np.array([[100, 100], [540, 100], [540, 380], [100, 380], [300, 200]])
        rect = min_area_rect(points)
        assert rect.center == Point(320.0, 240.0)
        assert rect.size[0] * rect.size[1] == pytest.approx(440 * 280)

    def test_min_area_rect_rotated(self):
        box = cv2.boxPoints(((200.0, 150.0), (120.0, 60.0), 30.0))
        rect = min_area_rect(box)
        assert rect.center.x == pytest.approx(200.0, abs=1e-3)
        assert rect.center.y == pytest.approx(150.0, abs=1e-3)
        assert rect.size[0] * rect.size[1] == pytest.approx(120 * 60, rel=1e-4)

    def test_min_area_rect_matches_opencv_center(self):
        rng = np.random.default_rng(7)
        points = rng.integers(0, 300, (40, 2)).astype(np.float32)
        (cx, cy), _, _ = cv2.minAreaRect(points)
        rect = min_area_rect(points)
        assert rect.center.x == pytest.approx(cx, abs=0.5)
        assert rect.center.y == pytest.approx(cy, abs=0.5)

    def test_min_area_rect_single_point(self):
        rect = min_area_rect(np.array([[4, 9]]))
        assert rect.center == Point(4.0, 9.0)
        assert rect.size == (0.0, 0.0)

    def test_min_area_rect_two_points(self):
        rect = min_area_rect(np.array([[0, 0], [10, 0]]))
        assert rect.center == Point(5.0, 0.0)


class TestQuadrilateral:
    """Tests for the corner container"""

    def test_complete(self):
        quad = Quadrilateral.from_points([[0, 0], [10, 0], [0, 10], [10, 10]])
        assert quad.is_complete
        assert quad.missing() == []
        assert quad.top_right == Point(10.0, 0.0)
        assert quad.as_array().tolist() == [[0, 0], [10, 0], [0, 10], [10, 10]]

    def test_missing_corners(self):
        quad = Quadrilateral(top_left=Point(0, 0), bottom_right=Point(9, 9))
        assert not quad.is_complete
        assert quad.missing() == ['top_right', 'bottom_left']
        with pytest.raises(MissingCorners) as excinfo:
            quad.as_array()
        assert excinfo.value.missing == ['top_right', 'bottom_left']

    def test_from_points_wrong_shape(self):
        with pytest.raises(InvalidInput):
            Quadrilateral.from_points([[0, 0], [1, 1], [2, 2]])


class TestEstimateCorners:
    """Tests for quadrant-based corner estimation"""

    @pytest.mark.parametrize('simplify', [True, False])
    def test_filled_rectangle(self, simplify):
        """All four corners within 1 pixel of the true rectangle corners"""
        mask = np.zeros((480, 640), dtype=np.uint8)
        mask[100:381, 100:541] = 255
        contour = find_contours(mask, simplify=simplify)[0]

        quad = estimate_corners(contour)
        expected = {
            'top_left': (100, 100),
            'top_right': (540, 100),
            'bottom_left': (100, 380),
            'bottom_right': (540, 380),
        }
        for name, (x, y) in expected.items():
            corner = getattr(quad, name)
            assert corner is not None, f"{name} is missing"
            assert abs(corner.x - x) <= 1 and abs(corner.y - y) <= 1, f"{name}: {corner}"

    def test_farthest_point_per_quadrant(self):
        contour = np.array([[0, 0], [2, 1], [10, 0], [10, 10], [8, 9], [0, 10]])
        quad = estimate_corners(contour)
        assert quad.top_left == Point(0.0, 0.0)
        assert quad.bottom_right == Point(10.0, 10.0)

    def test_points_on_axes_are_ignored(self, monkeypatch):
        """Points with x == cx or y == cy belong to no quadrant"""
        monkeypatch.setattr(
            'paper_scanner.corners.min_area_rect',
            lambda pts: RotatedRect(Point(10.0, 10.0), (20.0, 20.0), 0.0)
        )
        diamond = np.array([[10, 0], [20, 10], [10, 20], [0, 10], [9, 9]])
        quad = estimate_corners(diamond)
        assert quad.top_left == Point(9.0, 9.0)
        assert quad.missing() == ['top_right', 'bottom_left', 'bottom_right']

    def test_empty_quadrant_leaves_corner_absent(self):
        contour = np.array([[0, 0], [10, 0], [10, 5], [5, 10], [0, 10]])
        quad = estimate_corners(contour)
        assert quad.top_left == Point(0.0, 0.0)
        assert quad.top_right == Point(10.0, 0.0)
        assert quad.bottom_left == Point(0.0, 10.0)
        assert quad.bottom_right is None
        assert quad.missing() == ['bottom_right']

    def test_empty_contour(self):
        with pytest.raises(InvalidInput):
            estimate_corners(np.zeros((0, 2)))
