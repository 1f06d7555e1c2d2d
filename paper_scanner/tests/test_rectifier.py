"""
Tests for the homography and the perspective rectification
"""

import cv2
import numpy as np
import pytest

from paper_scanner.corners import CORNER_NAMES, Quadrilateral
from paper_scanner.errors import InvalidInput, MissingCorners
from paper_scanner.geometry import Point
from paper_scanner.rectifier import (
    corner_homography,
    expand_corners,
    get_perspective_transform,
    perspective_transform_points,
    rectify,
    warp_perspective,
)

SRC = np.array([[12.0, 20.0], [300.0, 8.0], [25.0, 260.0], [310.0, 240.0]])
DST = np.array([[0.0, 0.0], [200.0, 0.0], [0.0, 300.0], [200.0, 300.0]])


@pytest.fixture
def paper_frame():
    """White paper on a black background, 640x480 RGB"""
    image = np.zeros((480, 640, 3), dtype=np.uint8)
    image[100:381, 100:541] = 255
    return image


@pytest.fixture
def paper_corners():
    return Quadrilateral.from_points([[100, 100], [540, 100], [100, 380], [540, 380]])


class TestHomography:
    """Tests for the perspective transform"""

    def test_maps_source_onto_destination(self):
        matrix = get_perspective_transform(SRC, DST)
        assert np.allclose(perspective_transform_points(matrix, SRC), DST, atol=1e-6)
        assert matrix[2, 2] == 1.0

    def test_matches_opencv(self):
        ours = get_perspective_transform(SRC, DST)
        theirs = cv2.getPerspectiveTransform(SRC.astype(np.float32), DST.astype(np.float32))
        assert np.allclose(ours, theirs, rtol=1e-4, atol=1e-6)

    def test_inverse_maps_back(self):
        matrix = get_perspective_transform(SRC, DST)
        back = perspective_transform_points(np.linalg.inv(matrix), DST)
        assert np.allclose(back, SRC, atol=1e-6)

    def test_degenerate_points(self):
        points = np.array([[0.0, 0.0], [0.0, 10.0], [0.0, 20.0], [0.0, 30.0]])
        with pytest.raises(InvalidInput):
            get_perspective_transform(points, DST)

    def test_expand_corners(self, paper_corners):
        expanded = expand_corners(paper_corners, 5)
        assert expanded.tolist() == [[95, 95], [545, 95], [95, 385], [545, 385]]

    def test_expand_corners_zero_margin(self, paper_corners):
        assert np.array_equal(expand_corners(paper_corners, 0), paper_corners.as_array())

    def test_corner_homography_uses_expanded_corners(self, paper_corners):
        matrix = corner_homography(paper_corners, 200, 300)
        mapped = perspective_transform_points(matrix, expand_corners(paper_corners))
        assert np.allclose(mapped, DST, atol=1e-6)


class TestWarp:
    """Tests for the resampling"""

    def test_identity(self):
        rng = np.random.default_rng(3)
        image = rng.integers(0, 256, (40, 60, 3), dtype=np.uint8)
        assert np.array_equal(warp_perspective(image, np.eye(3), (60, 40)), image)

    def test_translation_fills_border_with_black(self):
        image = np.full((20, 30), 200, dtype=np.uint8)
        matrix = np.array([[1.0, 0.0, 2.0], [0.0, 1.0, 3.0], [0.0, 0.0, 1.0]])
        out = warp_perspective(image, matrix, (30, 20))
        assert out.shape == (20, 30)
        assert (out[:3] == 0).all() and (out[:, :2] == 0).all()
        assert (out[3:, 2:] == 200).all()

    def test_matches_opencv_on_smooth_image(self):
        ys, xs = np.mgrid[0:300, 0:400]
        image = ((xs + ys) // 4).astype(np.uint8)
        src = np.array([[50.0, 40.0], [350.0, 60.0], [40.0, 250.0], [330.0, 270.0]])
        matrix = get_perspective_transform(src, DST)

        ours = warp_perspective(image, matrix, (200, 300))
        theirs = cv2.warpPerspective(image, matrix, (200, 300), flags=cv2.INTER_LINEAR)
        diff = np.abs(ours.astype(int) - theirs.astype(int))[5:-5, 5:-5]
        assert diff.max() <= 2


class TestRectify:
    """Tests for paper rectification"""

    def test_paper_interior_is_white(self, paper_frame, paper_corners):
        out = rectify(paper_frame, paper_corners, 200, 300)
        assert out.shape == (300, 200, 3)
        assert out.dtype == np.uint8
        assert (out[10:-10, 10:-10] == 255).all()
        # Expanded corner lies on the black background
        assert (out[0, 0] == 0).all()

    def test_uniform_image(self):
        image = np.full((100, 100, 3), 255, dtype=np.uint8)
        corners = Quadrilateral.from_points([[20, 20], [79, 20], [20, 79], [79, 79]])
        assert (rectify(image, corners, 50, 50) == 255).all()

    def test_grayscale_stays_grayscale(self, paper_frame, paper_corners):
        gray = paper_frame[:, :, 0].copy()
        out = rectify(gray, paper_corners, 100, 80)
        assert out.shape == (80, 100)

    def test_rgba_keeps_alpha_channel(self, paper_frame, paper_corners):
        rgba = np.dstack([paper_frame, np.full(paper_frame.shape[:2], 255, dtype=np.uint8)])
        out = rectify(rgba, paper_corners, 100, 80)
        assert out.shape == (80, 100, 4)
        assert (out[10:-10, 10:-10, 3] == 255).all()

    def test_deterministic(self, paper_frame, paper_corners):
        first = rectify(paper_frame, paper_corners, 120, 90)
        second = rectify(paper_frame, paper_corners, 120, 90)
        assert np.array_equal(first, second)

    def test_no_corners(self, paper_frame):
        with pytest.raises(MissingCorners) as excinfo:
            rectify(paper_frame, None, 100, 100)
        assert excinfo.value.missing == list(CORNER_NAMES)

    def test_missing_corner(self, paper_frame):
        corners = Quadrilateral(
            top_left=Point(100.0, 100.0),
            top_right=Point(540.0, 100.0),
            bottom_left=Point(100.0, 380.0),
        )
        with pytest.raises(MissingCorners) as excinfo:
            rectify(paper_frame, corners, 100, 100)
        assert excinfo.value.missing == ['bottom_right']

    @pytest.mark.parametrize('width,height', [
        (0, 100), (100, -5), (10.5, 100), (float('nan'), 100), (100, float('inf')),
    ])
    def test_invalid_size(self, paper_frame, paper_corners, width, height):
        with pytest.raises(InvalidInput):
            rectify(paper_frame, paper_corners, width, height)

    def test_invalid_image(self, paper_corners):
        with pytest.raises(InvalidInput):
            rectify(np.zeros((0, 0, 3), dtype=np.uint8), paper_corners, 100, 100)
