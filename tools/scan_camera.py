#!/usr/bin/env python3
"""
Live QR scan check for the shelf camera.
This utility helps verify that the camera can see and decode item labels.

Usage:
    python tools/scan_camera.py --device 0
"""

import argparse
import os
import sys
import time

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from camera.camera import create_camera  # noqa: E402
from detection.qr_detector import create_detector  # noqa: E402
from models.detected_code import ItemQRData  # noqa: E402


def main():
    """Main function for QR scan testing."""
    parser = argparse.ArgumentParser(description='Test QR decoding from a camera')
    parser.add_argument('--device', type=int, default=0,
                        help='Camera device ID (default: 0)')
    parser.add_argument('--resolution', type=str, default='1280x720',
                        help='Resolution in format WIDTHxHEIGHT (default: 1280x720)')
    parser.add_argument('--backend', type=str, default='opencv',
                        choices=['opencv', 'opencv_aruco'],
                        help='QR detector backend (default: opencv)')
    parser.add_argument('--seconds', type=float, default=0,
                        help='Stop after this many seconds (default: run until Ctrl+C)')
    args = parser.parse_args()

    try:
        width, height = map(int, args.resolution.split('x'))
    except ValueError:
        print(f"Invalid resolution format: {args.resolution}, using default 1280x720")
        width, height = 1280, 720

    print(f"Scanning with device ID {args.device}, resolution {width}x{height}, backend {args.backend}")

    try:
        camera = create_camera({"device_id": args.device, "resolution": [width, height]})
    except RuntimeError as e:
        print(f"ERROR: {e}")
        return 1

    detector = create_detector({"backend": args.backend})
    seen = set()
    started = time.time()
    window_start = started
    frame_count = 0

    try:
        while True:
            ok, frame = camera.read()
            if not ok:
                print("ERROR: Failed to read frame")
                break

            for detection in detector.detect(frame):
                if detection.content in seen:
                    continue
                seen.add(detection.content)
                item = ItemQRData.parse(detection.content)
                if item:
                    print(f"  item: {item.item_id} ({item.item_name})")
                else:
                    print(f"  raw:  {detection.content}")

            frame_count += 1
            now = time.time()
            if now - window_start >= 1.0:
                print(f"FPS: {frame_count / (now - window_start):.2f}, codes seen: {len(seen)}")
                window_start = now
                frame_count = 0

            if args.seconds and now - started >= args.seconds:
                break
    except KeyboardInterrupt:
        pass
    finally:
        camera.release()

    print(f"Done. {len(seen)} distinct code(s) decoded.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
