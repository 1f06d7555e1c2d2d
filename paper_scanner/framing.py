"""
Framing evaluation: does the detected paper fill the capture area?
"""

from common.bounds import Bounds

from .corners import Quadrilateral
from .errors import InvalidInput

DEFAULT_PADDING = 30


def reference_frame(frame_width: int, frame_height: int, padding: int = DEFAULT_PADDING) -> Bounds:
    """
    Capture frame shrunk by padding on every side.

    Args:
        frame_width: Frame width in pixels
        frame_height: Frame height in pixels
        padding: Margin in pixels

    Returns:
        Padded reference frame

    Raises:
        InvalidInput: For a non-positive frame, negative padding or
            padding that leaves no interior
    """
    if frame_width <= 0 or frame_height <= 0:
        raise InvalidInput(f"Frame must have positive size, got {frame_width}x{frame_height}")
    if padding < 0:
        raise InvalidInput(f"Padding must not be negative, got {padding}")
    if padding * 2 >= min(frame_width, frame_height):
        raise InvalidInput(f"Padding {padding} leaves no room inside a {frame_width}x{frame_height} frame")

    return Bounds.padded(frame_width, frame_height, padding)


def padding_from_ratio(frame_width: int, ratio: float) -> int:
    """Padding given as a fraction of the frame width, rounded to pixels."""
    if ratio < 0:
        raise InvalidInput(f"Padding ratio must not be negative, got {ratio}")
    return int(round(frame_width * ratio))


def touches_origin_axis(quad: Quadrilateral) -> bool:
    """
    True if any present corner has x == 0 or y == 0.

    Such a corner comes from a contour clipped by the capture boundary
    rather than from a real paper edge.
    """
    for corner in quad.corners().values():
        if corner is not None and (corner.x == 0 or corner.y == 0):
            return True
    return False


def is_outline_visible(quad: Quadrilateral) -> bool:
    """The outline is only worth drawing once the top-left corner is off both image edges."""
    top_left = quad.top_left
    return top_left is not None and top_left.x > 0 and top_left.y > 0


def is_better_framing(quad: Quadrilateral, frame: Bounds) -> bool:
    """
    Framing decision against an already built reference frame.

    Args:
        quad: Estimated paper corners
        frame: Padded reference frame

    Returns:
        True if all corners are present, none is degenerate and none lies
        inside the reference frame
    """
    if not quad.is_complete:
        return False
    if touches_origin_axis(quad):
        return False
    return not any(frame.contains(corner) for corner in quad.corners().values())


def evaluate_framing(
    quad: Quadrilateral,
    frame_width: int,
    frame_height: int,
    padding: int = DEFAULT_PADDING
) -> bool:
    """
    Decide whether the paper is well framed.

    Args:
        quad: Estimated paper corners
        frame_width: Frame width in pixels
        frame_height: Frame height in pixels
        padding: Reference frame margin in pixels

    Returns:
        True if the paper extends to or beyond the padded frame on every side
    """
    return is_better_framing(quad, reference_frame(frame_width, frame_height, padding))
