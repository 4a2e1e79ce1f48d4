"""
Camera package.

Canonical imports:
- `from camera.camera import create_camera`
- `from camera.backends.opencv import OpenCVCamera` (USB + RTSP)
"""
