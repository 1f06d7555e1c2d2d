"""
Capture loop state machine.

The scan session sits between a frame source and the stateless detector: it
decides when frames are processed, holds the crop while the user reviews it
and keeps the documents accepted so far. Camera access and display are left
to the caller.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np

from .config import DEFAULT_INTERVAL_MS, ScannerConfig
from .detector import PaperDetector, ScanResult
from .errors import InvalidTransition

logger = logging.getLogger(__name__)


class ScanState(Enum):
    """State of the capture loop"""
    IDLE = "idle"
    PREVIEWING = "previewing"
    DETECTED = "detected"
    RECTIFYING = "rectifying"
    REVIEWING = "reviewing"


@dataclass
class ScannedDocument:
    """Document accepted by the user"""
    description: str
    image: np.ndarray


@dataclass
class ScanSession:
    """
    Drives a PaperDetector over a stream of frames.

    IDLE -> PREVIEWING (start) -> DETECTED -> RECTIFYING -> REVIEWING
    (good framing) -> IDLE (confirm / dismiss) or PREVIEWING (retry).

    DETECTED and RECTIFYING are passed through inside a single
    process_frame call; callers only observe them in the debug log.
    interval_ms is the frame cadence for the caller's scheduler.
    """
    detector: PaperDetector = field(default_factory=PaperDetector)
    interval_ms: int = DEFAULT_INTERVAL_MS
    state: ScanState = ScanState.IDLE
    pending: Optional[np.ndarray] = None
    documents: List[ScannedDocument] = field(default_factory=list)

    @classmethod
    def from_config(cls, config: ScannerConfig) -> "ScanSession":
        return cls(detector=PaperDetector.from_config(config), interval_ms=config.interval_ms)

    def _require(self, *states: ScanState):
        if self.state not in states:
            allowed = ", ".join(s.name for s in states)
            raise InvalidTransition(f"Cannot do this in state {self.state.name} (allowed: {allowed})")

    def _move(self, state: ScanState):
        logger.debug("Scan session %s -> %s", self.state.name, state.name)
        self.state = state

    def start(self):
        """Begin previewing frames."""
        self._require(ScanState.IDLE)
        self.pending = None
        self._move(ScanState.PREVIEWING)

    def stop(self):
        """Stop previewing without a result (capture closed)."""
        self._require(ScanState.PREVIEWING)
        self._move(ScanState.IDLE)

    def process_frame(self, frame: np.ndarray) -> ScanResult:
        """
        Scan one frame while previewing.

        When the paper is well framed the session rectifies it and waits for
        the user's review; further frames are refused until then.

        Args:
            frame: RGB(A) frame

        Returns:
            ScanResult of the frame
        """
        self._require(ScanState.PREVIEWING)
        result = self.detector.scan(frame)

        if result.better_framing:
            self._move(ScanState.DETECTED)
            self._move(ScanState.RECTIFYING)
            self.pending = result.crop
            self._move(ScanState.REVIEWING)

        return result

    def confirm(self) -> ScannedDocument:
        """Accept the reviewed crop."""
        self._require(ScanState.REVIEWING)
        document = ScannedDocument(
            description=f"Document {len(self.documents) + 1}",
            image=self.pending,
        )
        self.documents.append(document)
        self.pending = None
        self._move(ScanState.IDLE)
        return document

    def retry(self):
        """Drop the reviewed crop and go back to previewing."""
        self._require(ScanState.REVIEWING)
        self.pending = None
        self._move(ScanState.PREVIEWING)

    def dismiss(self):
        """Drop the reviewed crop and stop."""
        self._require(ScanState.REVIEWING)
        self.pending = None
        self._move(ScanState.IDLE)
