#!/usr/bin/env python3
"""
CLI interface for the paper scanner module.

Usage:
    python -m paper_scanner -i frame.jpg -o paper.png
    python -m paper_scanner -i frame.jpg --overlay overlay.png
"""

import argparse
import logging
import sys
from pathlib import Path

import cv2

from .config import ScannerConfig
from .corners import Quadrilateral
from .detector import PaperDetector
from .errors import ScannerError
from .visualizer import PaperVisualizer


def parse_args(argv=None):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(
        description='Detect and rectify a paper document in a photo',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:

  # Rectify the paper if it is well framed
  python -m paper_scanner -i frame.jpg -o paper.png

  # Save the detection overlay (blue reference frame, green/red outline)
  python -m paper_scanner -i frame.jpg --overlay overlay.png

  # Rectify with manually chosen corners (TL, TR, BL, BR)
  python -m paper_scanner -i frame.jpg -o paper.png --corners 10,12,620,8,15,470,630,465

Settings default to PAPER_SCANNER_* environment variables (.env supported).
        """
    )

    parser.add_argument('-i', '--input', required=True, help='Input image')
    parser.add_argument('-o', '--output', help='Output file for the rectified paper')
    parser.add_argument('--overlay', help='Output file for the detection overlay')
    padding = parser.add_mutually_exclusive_group()
    padding.add_argument('--padding', type=int, help='Reference frame padding in pixels')
    padding.add_argument('--padding-ratio', type=float, help='Reference frame padding as a fraction of the frame width')
    parser.add_argument('--width', type=int, help='Width of the rectified paper')
    parser.add_argument('--height', type=int, help='Height of the rectified paper')
    parser.add_argument('--corners', help='Manual corners x,y for TL, TR, BL, BR (8 numbers)')
    parser.add_argument('--force', action='store_true', help='Rectify even when framing is not good')

    return parser.parse_args(argv)


def build_detector(args, config: ScannerConfig) -> PaperDetector:
    """Detector from the configuration, overridden by command line options"""
    detector = PaperDetector.from_config(config)

    if args.padding is not None:
        detector.padding = args.padding
        detector.padding_ratio = None
    if args.padding_ratio is not None:
        detector.padding_ratio = args.padding_ratio
    if (args.width is None) != (args.height is None):
        raise ScannerError("--width and --height must be given together")
    if args.width is not None:
        detector.output_size = (args.width, args.height)

    return detector


def parse_corners(text: str) -> Quadrilateral:
    try:
        values = [float(v) for v in text.split(',')]
    except ValueError:
        raise ScannerError(f"Corners must be numbers: {text}")
    if len(values) != 8:
        raise ScannerError(f"Expected 8 numbers for --corners, got {len(values)}")
    return Quadrilateral.from_points(list(zip(values[0::2], values[1::2])))


def save_rgb(path: str, image) -> None:
    if image.ndim == 3:
        image = cv2.cvtColor(image, cv2.COLOR_RGB2BGR)
    if not cv2.imwrite(path, image):
        raise ScannerError(f"Failed to write image: {path}")


def main(argv=None):
    """Main CLI function"""
    args = parse_args(argv)

    try:
        config = ScannerConfig.from_env()
    except ScannerError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)

    logging.basicConfig(level=config.log_level, format='%(levelname)s %(name)s: %(message)s')

    if not Path(args.input).exists():
        print(f"❌ Error: Input file not found: {args.input}")
        sys.exit(1)

    image = cv2.imread(args.input, cv2.IMREAD_COLOR)
    if image is None:
        print(f"❌ Error: Failed to load image: {args.input}")
        sys.exit(1)

    frame = cv2.cvtColor(image, cv2.COLOR_BGR2RGB)
    print(f"📄 Processing: {Path(args.input).name} ({frame.shape[1]}x{frame.shape[0]} px)")

    try:
        detector = build_detector(args, config)

        if args.corners:
            corners = parse_corners(args.corners)
            if not args.output:
                print("❌ Error: --corners needs --output")
                sys.exit(1)
            save_rgb(args.output, detector.rectify(frame, corners))
            print(f"✅ Done: {args.output}")
            return

        result = detector.scan(frame)

        if args.overlay:
            save_rgb(args.overlay, PaperVisualizer().visualize(frame, result))
            print(f"  Overlay saved: {args.overlay}")

        if not result.detected:
            print("⚠️  Paper was not detected")
            sys.exit(1)

        for name, corner in result.corners.corners().items():
            label = name.replace('_', '-').capitalize()
            if corner is None:
                print(f"  {label}: missing")
            else:
                print(f"  {label}: ({corner.x:.1f}, {corner.y:.1f})")
        print(f"  Better framing: {'yes' if result.better_framing else 'no'}")

        if not args.output:
            return

        crop = result.crop
        if crop is None and args.force:
            crop = detector.rectify(frame, result.corners)
        if crop is None:
            print("⚠️  Paper is not well framed, nothing saved (use --force to rectify anyway)")
            sys.exit(1)

        save_rgb(args.output, crop)
        print(f"✅ Done: {args.output}")
    except ScannerError as e:
        print(f"❌ Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
