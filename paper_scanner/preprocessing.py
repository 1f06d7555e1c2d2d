"""
Grayscale conversion and smoothing
"""

import numpy as np

from .errors import InvalidInput

# Perceptual luminance weights for R, G, B
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)

BLUR_KERNEL_SIZE = 5


def validate_image(image: np.ndarray) -> np.ndarray:
    """
    Check that the input is a usable 8-bit pixel buffer.

    Args:
        image: Pixel buffer of shape (H, W), (H, W, 3) or (H, W, 4)

    Returns:
        The same buffer as a numpy array

    Raises:
        InvalidInput: If the buffer is missing, empty or has an unsupported layout
    """
    if image is None:
        raise InvalidInput("Image is None")

    image = np.asarray(image)

    if image.dtype != np.uint8:
        raise InvalidInput(f"Expected 8-bit pixels, got {image.dtype}")

    if image.ndim not in (2, 3):
        raise InvalidInput(f"Expected 2 or 3 dimensions, got shape {image.shape}")

    if image.shape[0] == 0 or image.shape[1] == 0:
        raise InvalidInput(f"Image has zero width or height: {image.shape}")

    if image.ndim == 3 and image.shape[2] not in (1, 3, 4):
        raise InvalidInput(f"Unsupported channel count: {image.shape[2]}")

    return image


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """
    Convert an RGB or RGBA buffer to single-channel luminance.

    Alpha is ignored. Single-channel input is returned as a copy.

    Args:
        image: RGB(A) image, row-major, top-left origin

    Returns:
        Grayscale image with the same width and height
    """
    image = validate_image(image)

    if image.ndim == 2:
        return image.copy()
    if image.shape[2] == 1:
        return image[:, :, 0].copy()

    rgb = image[:, :, :3].astype(np.float64)
    gray = rgb @ LUMA_WEIGHTS
    return np.clip(np.rint(gray), 0, 255).astype(np.uint8)


def gaussian_kernel(ksize: int = BLUR_KERNEL_SIZE, sigma: float = 0.0) -> np.ndarray:
    """
    Build a normalized 1-D Gaussian kernel.

    A non-positive sigma is derived from the kernel size with OpenCV's formula
    (OpenCV itself switches to fixed binomial kernels for ksize <= 7):
    sigma = 0.3 * ((ksize - 1) * 0.5 - 1) + 0.8

    Args:
        ksize: Odd, positive kernel size
        sigma: Standard deviation (<= 0 for automatic)

    Returns:
        Kernel of length ksize summing to 1
    """
    if ksize <= 0 or ksize % 2 == 0:
        raise InvalidInput(f"Kernel size must be odd and positive, got {ksize}")

    if sigma <= 0:
        sigma = 0.3 * ((ksize - 1) * 0.5 - 1) + 0.8

    ax = np.arange(ksize, dtype=np.float64) - (ksize - 1) / 2.0
    kernel = np.exp(-(ax ** 2) / (2.0 * sigma ** 2))
    return kernel / kernel.sum()


def gaussian_blur(gray: np.ndarray, ksize: int = BLUR_KERNEL_SIZE, sigma: float = 0.0) -> np.ndarray:
    """
    Smooth a grayscale image with a separable Gaussian kernel.

    Borders are handled by replicating the edge pixels.

    Args:
        gray: Single-channel image
        ksize: Odd kernel size
        sigma: Standard deviation (<= 0 for automatic)

    Returns:
        Blurred uint8 image of the same shape
    """
    gray = validate_image(gray)
    if gray.ndim != 2:
        raise InvalidInput(f"Expected a single-channel image, got shape {gray.shape}")

    kernel = gaussian_kernel(ksize, sigma)
    radius = ksize // 2
    h, w = gray.shape

    padded = np.pad(gray.astype(np.float64), radius, mode='edge')

    # Horizontal pass, then vertical pass
    rows = np.zeros((h + 2 * radius, w), dtype=np.float64)
    for i, weight in enumerate(kernel):
        rows += weight * padded[:, i:i + w]

    result = np.zeros((h, w), dtype=np.float64)
    for i, weight in enumerate(kernel):
        result += weight * rows[i:i + h, :]

    return np.clip(np.rint(result), 0, 255).astype(np.uint8)


def preprocess(image: np.ndarray) -> np.ndarray:
    """Grayscale + 5x5 Gaussian blur, the first stage of paper detection."""
    return gaussian_blur(to_grayscale(image), BLUR_KERNEL_SIZE)
