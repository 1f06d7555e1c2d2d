"""
Perspective rectification of the detected paper
"""

from typing import Tuple

import numpy as np

from .corners import CORNER_NAMES, Quadrilateral
from .errors import InvalidInput, MissingCorners
from .preprocessing import validate_image

# Outward offset applied to each corner to compensate for the
# boundary-tracing bias
CORNER_MARGIN = 5


def expand_corners(quad: Quadrilateral, margin: float = CORNER_MARGIN) -> np.ndarray:
    """
    Move each corner outward by margin on both axes.

    Args:
        quad: Complete quadrilateral
        margin: Offset in pixels (negative values move corners inward)

    Returns:
        float64 array of shape (4, 2) ordered TL, TR, BL, BR

    Raises:
        MissingCorners: If any corner is absent
    """
    pts = quad.as_array().astype(np.float64)
    offsets = np.array([[-1, -1], [1, -1], [-1, 1], [1, 1]], dtype=np.float64)
    return pts + offsets * margin


def get_perspective_transform(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """
    Homography mapping four source points onto four destination points.

    Solves the standard 8-unknown linear system with h33 fixed to 1.

    Args:
        src: Source points, shape (4, 2)
        dst: Destination points, shape (4, 2)

    Returns:
        3x3 perspective transform matrix

    Raises:
        InvalidInput: If the points are degenerate (e.g. three collinear)
    """
    src = np.asarray(src, dtype=np.float64).reshape(4, 2)
    dst = np.asarray(dst, dtype=np.float64).reshape(4, 2)

    a = np.zeros((8, 8), dtype=np.float64)
    b = np.zeros(8, dtype=np.float64)

    for k, ((x, y), (u, v)) in enumerate(zip(src, dst)):
        a[2 * k] = [x, y, 1, 0, 0, 0, -x * u, -y * u]
        a[2 * k + 1] = [0, 0, 0, x, y, 1, -x * v, -y * v]
        b[2 * k] = u
        b[2 * k + 1] = v

    try:
        h = np.linalg.solve(a, b)
    except np.linalg.LinAlgError as e:
        raise InvalidInput(f"Cannot solve perspective transform: {e}") from e

    return np.append(h, 1.0).reshape(3, 3)


def perspective_transform_points(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    """
    Apply a homography to (x, y) points.

    Args:
        matrix: 3x3 perspective transform
        points: Array of shape (N, 2)

    Returns:
        Transformed points, shape (N, 2)
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    homogeneous = np.hstack([pts, np.ones((len(pts), 1))]) @ np.asarray(matrix, dtype=np.float64).T
    return homogeneous[:, :2] / homogeneous[:, 2:3]


def corner_homography(
    quad: Quadrilateral,
    width: int,
    height: int,
    margin: float = CORNER_MARGIN
) -> np.ndarray:
    """
    Homography mapping TL, TR, BL, BR to (0, 0), (W, 0), (0, H), (W, H).

    Args:
        quad: Paper corners
        width: Output width
        height: Output height
        margin: Outward corner offset applied before solving

    Returns:
        3x3 perspective transform matrix
    """
    src = expand_corners(quad, margin)
    dst = np.array([
        [0, 0],           # Top-left
        [width, 0],       # Top-right
        [0, height],      # Bottom-left
        [width, height],  # Bottom-right
    ], dtype=np.float64)
    return get_perspective_transform(src, dst)


def warp_perspective(
    image: np.ndarray,
    matrix: np.ndarray,
    dsize: Tuple[int, int],
    border_value: int = 0
) -> np.ndarray:
    """
    Resample an image through a perspective transform.

    Every destination pixel is mapped back through the inverse transform and
    sampled bilinearly. Neighbours falling outside the source take the
    constant border value.

    Args:
        image: Source image, shape (H, W) or (H, W, C)
        matrix: 3x3 transform from source to destination coordinates
        dsize: Output size as (width, height)
        border_value: Constant used outside the source image

    Returns:
        Warped uint8 image of shape (height, width[, C])
    """
    image = validate_image(image)
    out_w, out_h = dsize
    src_h, src_w = image.shape[:2]

    try:
        inverse = np.linalg.inv(np.asarray(matrix, dtype=np.float64))
    except np.linalg.LinAlgError as e:
        raise InvalidInput(f"Perspective transform is not invertible: {e}") from e

    xs, ys = np.meshgrid(np.arange(out_w, dtype=np.float64), np.arange(out_h, dtype=np.float64))
    mapped_x = inverse[0, 0] * xs + inverse[0, 1] * ys + inverse[0, 2]
    mapped_y = inverse[1, 0] * xs + inverse[1, 1] * ys + inverse[1, 2]
    mapped_w = inverse[2, 0] * xs + inverse[2, 1] * ys + inverse[2, 2]

    # Points at infinity fall outside the source
    with np.errstate(divide='ignore', invalid='ignore'):
        src_x = np.where(mapped_w != 0, mapped_x / mapped_w, -2.0)
        src_y = np.where(mapped_w != 0, mapped_y / mapped_w, -2.0)
    src_x = np.nan_to_num(src_x, nan=-2.0, posinf=-2.0, neginf=-2.0)
    src_y = np.nan_to_num(src_y, nan=-2.0, posinf=-2.0, neginf=-2.0)

    # Clamp far away coordinates before flooring to keep indices in int range
    src_x = np.clip(src_x, -2.0, src_w + 1.0)
    src_y = np.clip(src_y, -2.0, src_h + 1.0)

    x0 = np.floor(src_x).astype(np.int64)
    y0 = np.floor(src_y).astype(np.int64)
    fx = src_x - x0
    fy = src_y - y0

    source = image.astype(np.float64)
    if source.ndim == 2:
        source = source[:, :, np.newaxis]

    def sample(yy, xx):
        inside = (xx >= 0) & (xx < src_w) & (yy >= 0) & (yy < src_h)
        values = source[np.clip(yy, 0, src_h - 1), np.clip(xx, 0, src_w - 1)]
        return np.where(inside[:, :, np.newaxis], values, float(border_value))

    top = sample(y0, x0) * (1 - fx)[..., None] + sample(y0, x0 + 1) * fx[..., None]
    bottom = sample(y0 + 1, x0) * (1 - fx)[..., None] + sample(y0 + 1, x0 + 1) * fx[..., None]
    result = top * (1 - fy)[..., None] + bottom * fy[..., None]

    result = np.clip(np.rint(result), 0, 255).astype(np.uint8)
    if image.ndim == 2:
        return result[:, :, 0]
    return result


def _is_positive_int(value) -> bool:
    # NaN and infinity are not integers either
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return number.is_integer() and number > 0


def rectify(
    image: np.ndarray,
    corners: Quadrilateral,
    width: int,
    height: int,
    margin: float = CORNER_MARGIN
) -> np.ndarray:
    """
    Extract the paper as a flat, perspective-corrected image.

    Args:
        image: Source frame (RGB, RGBA or grayscale)
        corners: Detected or manually chosen paper corners
        width: Output width
        height: Output height
        margin: Outward corner offset applied before solving

    Returns:
        Rectified image of size width x height with the channels of the source

    Raises:
        MissingCorners: If any corner is absent
        InvalidInput: For a bad image, target size or corner geometry
    """
    if corners is None:
        raise MissingCorners(list(CORNER_NAMES))
    missing = corners.missing()
    if missing:
        raise MissingCorners(missing)

    if not (_is_positive_int(width) and _is_positive_int(height)):
        raise InvalidInput(f"Target size must be positive integers, got {width}x{height}")

    matrix = corner_homography(corners, int(width), int(height), margin)
    return warp_perspective(image, matrix, (int(width), int(height)))
