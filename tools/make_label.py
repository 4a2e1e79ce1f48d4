#!/usr/bin/env python3
"""
Write an item's QR label to a PNG file for printing.

Usage:
    python tools/make_label.py apple-001 "Apple" --out labels/apple-001.png
"""

import argparse
import os
import sys

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "src"))

from commands.qr import QR_IMAGE_SIZE, generate_qr_code  # noqa: E402
from models.detected_code import ItemQRData  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description='Generate a QR label for an inventory item')
    parser.add_argument('item_id', help='Item ID encoded in the label')
    parser.add_argument('item_name', help='Item name encoded in the label')
    parser.add_argument('--out', type=str, default=None,
                        help='Output PNG path (default: <item_id>.png)')
    parser.add_argument('--size', type=int, default=QR_IMAGE_SIZE,
                        help=f'Image size in pixels (default: {QR_IMAGE_SIZE})')
    args = parser.parse_args()

    if not args.item_id or not args.item_name:
        print("ERROR: item_id and item_name must be non-empty")
        return 1

    out_path = args.out or f"{args.item_id}.png"
    out_dir = os.path.dirname(out_path)
    if out_dir:
        os.makedirs(out_dir, exist_ok=True)

    payload = ItemQRData(item_id=args.item_id, item_name=args.item_name).to_json()
    with open(out_path, "wb") as f:
        f.write(generate_qr_code(payload, size=args.size))

    print(f"Wrote {out_path} ({args.size}x{args.size}) with payload {payload}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
