"""
QR image generation for inventory items.
"""

from __future__ import annotations

import base64
import io

import qrcode
from PIL import Image

from models.detected_code import ItemQRData

QR_IMAGE_SIZE = 256


def generate_qr_code(data: str, size: int = QR_IMAGE_SIZE) -> bytes:
    """Encode text as a square PNG (medium error correction)."""
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        border=1,
        box_size=10,
    )
    qr.add_data(data)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white").convert("RGB")
    img = img.resize((size, size), Image.Resampling.NEAREST)

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


def generate_item_qr(item_id: str, item_name: str, size: int = QR_IMAGE_SIZE) -> dict:
    """Build the generate_qr response for an item."""
    qr_data = ItemQRData(item_id=item_id, item_name=item_name).to_json()
    png = generate_qr_code(qr_data, size=size)
    return {
        "item_id": item_id,
        "item_name": item_name,
        "qr_code": base64.b64encode(png).decode("ascii"),
        "qr_data": qr_data,
        "format": "base64-png",
        "size": size,
    }
