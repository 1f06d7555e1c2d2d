"""
Global binarization with Otsu's method
"""

from typing import Tuple

import numpy as np

from .errors import DegenerateHistogram, InvalidInput

FOREGROUND = 255
BACKGROUND = 0


def otsu_threshold(gray: np.ndarray) -> int:
    """
    Compute the Otsu threshold of a grayscale image.

    Every split t in [0, 254] is evaluated (class 0 holds levels <= t) and the
    one maximizing the between-class variance w0 * w1 * (mu0 - mu1)^2 wins.
    The first maximum is kept, matching OpenCV.

    Args:
        gray: Single-channel uint8 image

    Returns:
        Threshold value; pixels strictly above it are foreground

    Raises:
        DegenerateHistogram: If the image has fewer than 2 distinct levels
    """
    gray = np.asarray(gray)
    if gray.ndim != 2 or gray.dtype != np.uint8 or gray.size == 0:
        raise InvalidInput(f"Expected a non-empty single-channel uint8 image, got {gray.dtype} {gray.shape}")

    hist = np.bincount(gray.ravel(), minlength=256).astype(np.float64)
    if np.count_nonzero(hist) < 2:
        raise DegenerateHistogram("Image has fewer than 2 distinct intensity levels")

    prob = hist / gray.size
    levels = np.arange(256, dtype=np.float64)

    w0 = np.cumsum(prob)[:255]
    cum_mean = np.cumsum(prob * levels)[:255]
    total_mean = float(np.sum(prob * levels))
    w1 = 1.0 - w0

    valid = (w0 > 0) & (w1 > 0)
    variance = np.zeros(255, dtype=np.float64)

    # mu0 = cum_mean / w0, mu1 = (total_mean - cum_mean) / w1
    mu0 = np.divide(cum_mean, w0, out=np.zeros_like(w0), where=valid)
    mu1 = np.divide(total_mean - cum_mean, w1, out=np.zeros_like(w1), where=valid)
    variance[valid] = w0[valid] * w1[valid] * (mu0[valid] - mu1[valid]) ** 2

    return int(np.argmax(variance))


def binarize(gray: np.ndarray, threshold: int) -> np.ndarray:
    """
    Straight binary threshold: above threshold -> 255, otherwise 0.

    Args:
        gray: Single-channel image
        threshold: Threshold value

    Returns:
        Binary mask (uint8, values 0 and 255)
    """
    gray = np.asarray(gray)
    return np.where(gray > threshold, FOREGROUND, BACKGROUND).astype(np.uint8)


def otsu_binarize(gray: np.ndarray) -> Tuple[int, np.ndarray]:
    """Threshold a grayscale image at its Otsu value."""
    threshold = otsu_threshold(gray)
    return threshold, binarize(gray, threshold)
