"""
Shared frames for the paper scanner tests
"""

import numpy as np
import pytest


@pytest.fixture
def centered_paper():
    """640x480 RGB frame, white paper well inside the reference frame"""
    frame = np.zeros((480, 640, 3), dtype=np.uint8)
    frame[100:381, 100:541] = 255
    return frame


@pytest.fixture
def framed_paper():
    """640x480 RGB frame, white paper reaching past the reference frame"""
    frame = np.zeros((480, 640, 3), dtype=np.uint8)
    frame[10:470, 10:630] = 255
    return frame


@pytest.fixture
def empty_frame():
    return np.zeros((480, 640, 3), dtype=np.uint8)
