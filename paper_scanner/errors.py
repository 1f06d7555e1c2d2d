"""
Errors raised by the paper scanner pipeline.

Every error here is recoverable: a frame that fails is simply skipped and the
caller tries again with the next one.
"""

from typing import List


class ScannerError(Exception):
    """Base class for all paper scanner errors"""


class InvalidInput(ScannerError, ValueError):
    """Degenerate buffer dimensions, pixel data or parameters"""


class DegenerateHistogram(InvalidInput):
    """Image has fewer than two distinct intensity levels"""


class NoPaperDetected(ScannerError):
    """No contour was found after thresholding"""


class MissingCorners(ScannerError):
    """Quadrilateral is incomplete at rectification time"""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Missing corners: {', '.join(self.missing)}")


class ConfigurationError(ScannerError, ValueError):
    """Malformed scanner configuration"""


class InvalidTransition(ScannerError):
    """Scan session operation not allowed in the current state"""
