"""
Shelf Keeper - Detection Module

This module decodes QR codes from camera frames.
"""

from .base import DetectorError, QRDetector
from .qr_detector import OpenCVQRDetector, create_detector

__all__ = ['DetectorError', 'QRDetector', 'OpenCVQRDetector', 'create_detector']
