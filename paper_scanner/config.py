"""
Scanner configuration loaded from the environment (.env supported)
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

from .errors import ConfigurationError
from .framing import DEFAULT_PADDING
from .rectifier import CORNER_MARGIN

ENV_PREFIX = "PAPER_SCANNER_"

DEFAULT_INTERVAL_MS = 100


@dataclass
class ScannerConfig:
    """
    Caller-held scanner settings.

    Attributes:
        padding: Reference frame margin in pixels
        padding_ratio: Margin as a fraction of the frame width (overrides padding).
            The resulting padding must stay below half the frame's shorter
            side, so ratios near 0.5 only suit portrait frames; scanning a
            frame that leaves no room raises InvalidInput
        output_size: (width, height) of the rectified image, None for the frame size
        corner_margin: Outward corner offset used when rectifying
        interval_ms: Frame cadence suggested to the capture loop
        log_level: Logging level name
    """
    padding: int = DEFAULT_PADDING
    padding_ratio: Optional[float] = None
    output_size: Optional[Tuple[int, int]] = None
    corner_margin: int = CORNER_MARGIN
    interval_ms: int = DEFAULT_INTERVAL_MS
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "ScannerConfig":
        """
        Build the configuration from PAPER_SCANNER_* environment variables.

        Args:
            dotenv_path: Optional .env file; the default lookup is used otherwise

        Returns:
            ScannerConfig

        Raises:
            ConfigurationError: If a variable cannot be parsed
        """
        load_dotenv(dotenv_path)

        width = _get_int("OUTPUT_WIDTH")
        height = _get_int("OUTPUT_HEIGHT")
        if (width is None) != (height is None):
            raise ConfigurationError(
                f"{ENV_PREFIX}OUTPUT_WIDTH and {ENV_PREFIX}OUTPUT_HEIGHT must be set together"
            )
        output_size = (width, height) if width is not None else None
        if output_size is not None and (width <= 0 or height <= 0):
            raise ConfigurationError(f"Output size must be positive, got {width}x{height}")

        padding = _get_int("PADDING", DEFAULT_PADDING)
        if padding < 0:
            raise ConfigurationError(f"{ENV_PREFIX}PADDING must not be negative, got {padding}")

        padding_ratio = _get_float("PADDING_RATIO")
        if padding_ratio is not None and not 0 <= padding_ratio < 0.5:
            raise ConfigurationError(f"{ENV_PREFIX}PADDING_RATIO must be in [0, 0.5), got {padding_ratio}")

        interval_ms = _get_int("INTERVAL_MS", DEFAULT_INTERVAL_MS)
        if interval_ms <= 0:
            raise ConfigurationError(f"{ENV_PREFIX}INTERVAL_MS must be positive, got {interval_ms}")

        log_level = (os.getenv(ENV_PREFIX + "LOG_LEVEL") or "WARNING").upper()
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"{ENV_PREFIX}LOG_LEVEL is not a logging level: {log_level}")

        return cls(
            padding=padding,
            padding_ratio=padding_ratio,
            output_size=output_size,
            corner_margin=_get_int("CORNER_MARGIN", CORNER_MARGIN),
            interval_ms=interval_ms,
            log_level=log_level,
        )


def _get_int(name: str, default: Optional[int] = None) -> Optional[int]:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {value!r}")


def _get_float(name: str, default: Optional[float] = None) -> Optional[float]:
    value = os.getenv(ENV_PREFIX + name)
    if value is None or value.strip() == "":
        return default
    try:
        return float(value)
    except ValueError:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {value!r}")
