"""
Main application for Shelf Keeper.

Watches a shelf camera for item QR codes, keeps a debounced view of which
codes are visible, and serves the inventory ledger over HTTP.

Usage:
    python src/main.py --config config/config.yaml

Arguments:
    --config: Path to configuration file
    --no-web: Run monitoring only, without the HTTP API
"""

import argparse
import logging
import os
import signal
import sys
import threading
from typing import Any, Dict, Optional, Tuple

import uvicorn
import yaml

from camera.camera import create_camera
from detection.qr_detector import create_detector
from models.config import Config
from ops.logging import setup_logging
from runtime.context import build_context
from web.app import create_app


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        # Finally apply explicit config_path if it's not the local override file itself
        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except (OSError, yaml.YAMLError) as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _check_duration(monitor: Dict[str, Any], key: str) -> Optional[str]:
    value = monitor.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        return f"monitor.{key} must be an integer"
    if value < 0:
        return f"monitor.{key} must be non-negative, got: {value}"
    return None


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    # Required top-level sections
    required_sections = ['camera', 'detection', 'monitor', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Validate camera settings
    camera = config.get('camera') or {}
    if 'device_id' not in camera:
        return False, "Missing camera.device_id"
    device_id = camera['device_id']
    if isinstance(device_id, bool) or not isinstance(device_id, (int, str)):
        return False, "camera.device_id must be an integer (index) or string (URL)"
    if isinstance(device_id, int) and device_id < 0:
        return False, "camera.device_id integer must be non-negative"
    if camera.get('backend', 'opencv') != 'opencv':
        return False, "camera.backend must be: opencv"
    if 'resolution' in camera:
        resolution = camera['resolution']
        if not isinstance(resolution, list) or len(resolution) != 2:
            return False, "camera.resolution must be a list of [width, height]"
        if not all(isinstance(x, int) and x > 0 for x in resolution):
            return False, "camera.resolution values must be positive integers"

    # Validate detection settings
    detection = config.get('detection') or {}
    if detection.get('backend', 'opencv') not in ('opencv', 'opencv_aruco'):
        return False, "detection.backend must be one of: opencv, opencv_aruco"
    unknown = sorted(set(detection) - {'backend'})
    if unknown:
        return False, f"Unknown detection setting(s): {', '.join(unknown)}"

    # Validate monitor settings (tri-state: absent/null means default)
    monitor = config.get('monitor') or {}
    for key in ('scan_interval_ms', 'grace_period_ms', 'detect_timeout_ms'):
        error = _check_duration(monitor, key)
        if error:
            return False, error

    # Validate web settings
    web = config.get('web') or {}
    if 'port' in web:
        port = web['port']
        if isinstance(port, bool) or not isinstance(port, int) or not (0 < port < 65536):
            return False, "web.port must be an integer between 1 and 65535"

    # Validate log settings
    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config['log_level'] not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Shelf Keeper - QR inventory monitor')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--no-web', action='store_true',
                        help='Disable the HTTP API')
    args = parser.parse_args()

    raw_config = load_config(args.config)

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = Config.from_dict(raw_config)
    setup_logging(config.log_path, config.log_level)
    logging.info("Starting Shelf Keeper")

    stop_event = threading.Event()

    def _handle_signal(signum, frame):
        logging.info(f"Received signal {signum}, shutting down")
        stop_event.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    camera = None
    ctx = None
    try:
        camera = create_camera(raw_config['camera'])
        detector = create_detector(raw_config['detection'])
        ctx = build_context(config, camera, detector)
        ctx.start()

        if config.web.enabled and not args.no_web:
            def run_web_app():
                uvicorn.run(
                    create_app(ctx),
                    host=config.web.host,
                    port=config.web.port,
                    log_level="info",
                )

            web_thread = threading.Thread(target=run_web_app, daemon=True)
            web_thread.start()
            logging.info(f"Web interface started on port {config.web.port}")

        stop_event.wait()
    finally:
        if ctx is not None:
            ctx.close()
        if camera is not None:
            camera.release()
        logging.info("Shelf Keeper stopped")


if __name__ == "__main__":
    main()
