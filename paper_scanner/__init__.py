"""
Paper Scanner Module

Finds a paper document in a camera frame, judges whether it is well framed
and rectifies it into a flat, perspective-corrected image.
"""

from .corners import Quadrilateral, estimate_corners
from .detector import PaperDetector, ScanResult, detect_paper_contour
from .errors import (
    InvalidInput,
    MissingCorners,
    NoPaperDetected,
    ScannerError,
)
from .framing import evaluate_framing
from .geometry import Point
from .rectifier import rectify
from .session import ScanSession, ScanState
from .visualizer import PaperVisualizer

__all__ = [
    'PaperDetector',
    'PaperVisualizer',
    'Point',
    'Quadrilateral',
    'ScanResult',
    'ScanSession',
    'ScanState',
    'ScannerError',
    'InvalidInput',
    'NoPaperDetected',
    'MissingCorners',
    'detect_paper_contour',
    'estimate_corners',
    'evaluate_framing',
    'rectify',
]
