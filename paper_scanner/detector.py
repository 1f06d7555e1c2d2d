"""
Paper detector: the detection and rectification pipeline for one frame
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from common.bounds import Bounds

from .config import ScannerConfig
from .contours import find_contours, select_largest_contour
from .corners import Quadrilateral, estimate_corners
from .errors import DegenerateHistogram, NoPaperDetected
from .framing import (
    DEFAULT_PADDING,
    evaluate_framing,
    is_better_framing,
    padding_from_ratio,
    reference_frame,
)
from .preprocessing import preprocess, validate_image
from .rectifier import CORNER_MARGIN, rectify
from .threshold import otsu_binarize

logger = logging.getLogger(__name__)


def detect_paper_contour(image: np.ndarray) -> np.ndarray:
    """
    Find the contour of the paper in a frame.

    Grayscale, 5x5 Gaussian blur, Otsu threshold, outer contours, then the
    contour with the greatest area.

    Args:
        image: RGB(A) frame, 8 bits per channel

    Returns:
        Contour as an int32 array of (x, y) points

    Raises:
        NoPaperDetected: If nothing stands out of the background
        InvalidInput: For a degenerate buffer
    """
    blurred = preprocess(image)

    try:
        threshold, binary = otsu_binarize(blurred)
    except DegenerateHistogram as e:
        raise NoPaperDetected("Frame has a single intensity level") from e

    contours = find_contours(binary)
    logger.debug("Otsu threshold %d, %d outer contour(s)", threshold, len(contours))

    return select_largest_contour(contours)


@dataclass
class ScanResult:
    """
    Outcome of scanning one frame.

    Attributes:
        contour: Paper contour, None if no paper was detected
        corners: Estimated corners, None if no paper was detected
        reference_frame: Padded capture frame used for the framing decision
        better_framing: Whether the paper fills the frame well
        crop: Rectified paper, only set when framing is good
    """
    contour: Optional[np.ndarray]
    corners: Optional[Quadrilateral]
    reference_frame: Bounds
    better_framing: bool = False
    crop: Optional[np.ndarray] = None

    @property
    def detected(self) -> bool:
        return self.contour is not None


class PaperDetector:
    """
    Class for paper detection and rectification in camera frames.

    Holds the caller's configuration; every call is independent and keeps
    no state between frames.
    """

    def __init__(
        self,
        padding: int = DEFAULT_PADDING,
        padding_ratio: Optional[float] = None,
        output_size: Optional[Tuple[int, int]] = None,
        corner_margin: float = CORNER_MARGIN
    ):
        """
        Initialize the detector.

        Args:
            padding: Reference frame margin in pixels
            padding_ratio: Margin as a fraction of the frame width (overrides padding)
            output_size: (width, height) of the rectified image, None for the frame size
            corner_margin: Outward corner offset used when rectifying
        """
        self.padding = padding
        self.padding_ratio = padding_ratio
        self.output_size = output_size
        self.corner_margin = corner_margin

    @classmethod
    def from_config(cls, config: ScannerConfig) -> "PaperDetector":
        return cls(
            padding=config.padding,
            padding_ratio=config.padding_ratio,
            output_size=config.output_size,
            corner_margin=config.corner_margin,
        )

    def padding_for(self, frame_width: int) -> int:
        """Padding in pixels for a frame of the given width"""
        if self.padding_ratio is not None:
            return padding_from_ratio(frame_width, self.padding_ratio)
        return self.padding

    def detect_paper_contour(self, image: np.ndarray) -> np.ndarray:
        return detect_paper_contour(image)

    def estimate_corners(self, contour: np.ndarray) -> Quadrilateral:
        return estimate_corners(contour)

    def evaluate_framing(self, quad: Quadrilateral, frame_width: int, frame_height: int) -> bool:
        return evaluate_framing(quad, frame_width, frame_height, self.padding_for(frame_width))

    def rectify(
        self,
        image: np.ndarray,
        corners: Quadrilateral,
        width: Optional[int] = None,
        height: Optional[int] = None
    ) -> np.ndarray:
        """
        Rectify the paper, defaulting to the configured output size.

        Args:
            image: Source frame
            corners: Detected or manually chosen corners
            width: Output width (configured size or frame width if None)
            height: Output height (configured size or frame height if None)

        Returns:
            Rectified image
        """
        image = validate_image(image)
        default_w, default_h = self.output_size or (image.shape[1], image.shape[0])
        width = default_w if width is None else width
        height = default_h if height is None else height
        return rectify(image, corners, width, height, self.corner_margin)

    def scan(self, frame: np.ndarray) -> ScanResult:
        """
        Run the whole pipeline on one frame.

        A frame without a document is a normal outcome and yields a result
        with no contour rather than an exception.

        Args:
            frame: RGB(A) frame

        Returns:
            ScanResult; crop is set only when framing is good
        """
        frame = validate_image(frame)
        frame_h, frame_w = frame.shape[:2]
        ref = reference_frame(frame_w, frame_h, self.padding_for(frame_w))

        try:
            contour = self.detect_paper_contour(frame)
        except NoPaperDetected as e:
            logger.debug("No paper detected: %s", e)
            return ScanResult(contour=None, corners=None, reference_frame=ref)

        corners = self.estimate_corners(contour)
        better_framing = is_better_framing(corners, ref)
        logger.debug("Corners %s, better framing: %s", corners, better_framing)

        result = ScanResult(
            contour=contour,
            corners=corners,
            reference_frame=ref,
            better_framing=better_framing,
        )

        if better_framing:
            result.crop = self.rectify(frame, corners)

        return result
