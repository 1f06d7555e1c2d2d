"""
Visualization of the scan result
"""

from typing import Tuple

import cv2
import numpy as np

from common.bounds import Bounds

from .corners import Quadrilateral
from .detector import ScanResult
from .framing import is_outline_visible
from .preprocessing import validate_image


class PaperVisualizer:
    """
    Draws the reference frame and the detected paper outline on a frame.

    The outline is green when framing is good and red otherwise. Colors are
    RGB, matching the pipeline's pixel order.
    """

    def __init__(
        self,
        reference_color: Tuple[int, int, int] = (0, 0, 255),  # Blue in RGB
        reference_thickness: int = 3,
        good_color: Tuple[int, int, int] = (0, 255, 0),  # Green in RGB
        bad_color: Tuple[int, int, int] = (255, 0, 0),  # Red in RGB
        outline_thickness: int = 10
    ):
        """
        Initialize the visualizer.

        Args:
            reference_color: Reference frame color in RGB format
            reference_thickness: Reference frame thickness in pixels
            good_color: Outline color when framing is good
            bad_color: Outline color when framing is not good
            outline_thickness: Outline thickness in pixels
        """
        self.reference_color = reference_color
        self.reference_thickness = reference_thickness
        self.good_color = good_color
        self.bad_color = bad_color
        self.outline_thickness = outline_thickness

    @staticmethod
    def _color(image: np.ndarray, rgb: Tuple[int, int, int]) -> Tuple[int, ...]:
        # Opaque alpha for RGBA frames
        if image.shape[2] == 4:
            return tuple(rgb) + (255,)
        return tuple(rgb)

    def draw_reference_frame(self, image: np.ndarray, frame: Bounds) -> np.ndarray:
        """Draw the padded reference frame in place."""
        cv2.rectangle(
            image,
            (int(frame.left), int(frame.top)),
            (int(frame.right()), int(frame.bottom())),
            self._color(image, self.reference_color),
            self.reference_thickness
        )
        return image

    def draw_outline(self, image: np.ndarray, quad: Quadrilateral, better_framing: bool) -> np.ndarray:
        """
        Draw the paper outline TL -> TR -> BR -> BL in place.

        Nothing is drawn for incomplete quadrilaterals or while the
        top-left corner still sits on the image edge.
        """
        if not quad.is_complete or not is_outline_visible(quad):
            return image

        polygon = np.array(
            [quad.top_left, quad.top_right, quad.bottom_right, quad.bottom_left],
            dtype=np.float64
        )
        color = self.good_color if better_framing else self.bad_color
        cv2.polylines(
            image,
            [np.rint(polygon).astype(np.int32)],
            True,
            self._color(image, color),
            self.outline_thickness
        )
        return image

    def visualize(self, image: np.ndarray, result: ScanResult, show_reference: bool = True) -> np.ndarray:
        """
        Visualize a scan result on a copy of the frame.

        Args:
            image: Frame the result was computed from (RGB, RGBA or grayscale)
            result: ScanResult of that frame
            show_reference: Whether to draw the reference frame

        Returns:
            RGB(A) image with the overlay
        """
        image = validate_image(image)

        if image.ndim == 2:
            canvas = np.stack([image] * 3, axis=-1)
        elif image.shape[2] == 1:
            canvas = np.repeat(image, 3, axis=2)
        else:
            canvas = np.ascontiguousarray(image).copy()

        if show_reference:
            self.draw_reference_frame(canvas, result.reference_frame)

        if result.corners is not None:
            self.draw_outline(canvas, result.corners, result.better_framing)

        return canvas
