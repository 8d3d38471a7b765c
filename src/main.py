"""
neck-check: blocks the screen while you sit too close to it.

Calibrates once against the posture the operator considers too close, then
samples the camera on a background thread and shows a full-screen overlay
whenever the detected face is larger than the calibrated one.

Usage:
    python src/main.py --config config/config.yaml

Arguments:
    --config: Path to configuration file
    --headless: Log alerts instead of showing the overlay
    --interval: Seconds between samples (overrides monitor.interval)
    --snapshot: Capture one annotated frame to this path and exit
"""

import argparse
import logging
import os
import signal
import sys
from typing import Any, Dict, List, Optional, Tuple

import cv2
import yaml

from camera.base import CaptureMode
from camera.camera import create_frame_source
from camera.errors import CameraError, StreamOpenError
from detection.annotate import draw_faces
from detection.base import DetectorLoadError, FaceDetector
from detection.cascade import CascadeConfig, CascadeFaceDetector
from models.config import CameraConfig, Config, DetectorConfig
from monitor.console import OperatorConsole
from monitor.posture import SELECTIONS, PostureMonitor
from ops.logging import setup_logging
from presentation.base import AlertPresenter, PresenterUnavailableError
from presentation.headless import HeadlessPresenter
from presentation.overlay import TkAlertOverlay
from runtime.alert_state import SharedAlertState
from runtime.sampler import SamplingConfig, SamplingLoop

SHUTDOWN_TIMEOUT = 5.0


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        cfg_dir = os.path.dirname(config_path)
        base_path = os.path.join(cfg_dir, "default.yaml")
        local_overrides_path = os.path.join(cfg_dir, "config.yaml")

        merged: Dict[str, Any] = {}
        if os.path.exists(base_path):
            merged = _read_yaml(base_path)
        if os.path.exists(local_overrides_path):
            merged = _deep_merge(merged, _read_yaml(local_overrides_path))

        explicit = os.path.abspath(config_path)
        if (
            os.path.exists(config_path)
            and explicit != os.path.abspath(local_overrides_path)
            and explicit != os.path.abspath(base_path)
        ):
            merged = _deep_merge(merged, _read_yaml(config_path))

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Camera
    camera = config.get('camera') or {}
    if 'device_id' not in camera:
        return False, "Missing camera.device_id"
    device_id = camera['device_id']
    if isinstance(device_id, bool) or not isinstance(device_id, (int, str)):
        return False, "camera.device_id must be an integer (index) or string (URL)"
    if isinstance(device_id, int) and device_id < 0:
        return False, "camera.device_id integer must be non-negative"

    resolution = camera.get('resolution', [640, 480])
    if not isinstance(resolution, list) or len(resolution) != 2:
        return False, "camera.resolution must be a list of [width, height]"
    if not all(_is_positive_int(x) for x in resolution):
        return False, "camera.resolution values must be positive integers"

    if not _is_positive_int(camera.get('fps', 30)):
        return False, "camera.fps must be a positive integer"
    if camera.get('backend', 'opencv') != 'opencv':
        return False, "camera.backend must be: opencv"
    if camera.get('mode', 'continuous') not in ('continuous', 'discrete'):
        return False, "camera.mode must be one of: continuous, discrete"

    # Detector
    detector = config.get('detector') or {}
    if 'min_face_size' in detector and not _is_positive_int(detector['min_face_size']):
        return False, "detector.min_face_size must be a positive integer"
    if 'score_threshold' in detector and not _is_number(detector['score_threshold']):
        return False, "detector.score_threshold must be a number"
    if 'pyramid_scale_factor' in detector:
        factor = detector['pyramid_scale_factor']
        if not _is_number(factor) or not (0 < factor < 1):
            return False, "detector.pyramid_scale_factor must be between 0 and 1"
    if 'slide_window_step' in detector:
        step = detector['slide_window_step']
        if not isinstance(step, list) or len(step) != 2 or not all(_is_positive_int(x) for x in step):
            return False, "detector.slide_window_step must be a list of two positive integers"
    if 'model_path' in detector and detector['model_path'] is not None and not isinstance(detector['model_path'], str):
        return False, "detector.model_path must be a string"

    # Monitor
    monitor = config.get('monitor') or {}
    if monitor.get('selection', 'largest') not in SELECTIONS:
        return False, f"monitor.selection must be one of: {', '.join(SELECTIONS)}"
    for key in ('interval', 'failure_backoff'):
        if key in monitor and (not _is_number(monitor[key]) or monitor[key] < 0):
            return False, f"monitor.{key} must be a non-negative number"
    if 'max_consecutive_failures' in monitor:
        mcf = monitor['max_consecutive_failures']
        if isinstance(mcf, bool) or not isinstance(mcf, int) or mcf < 0:
            return False, "monitor.max_consecutive_failures must be a non-negative integer"

    # Overlay
    overlay = config.get('overlay') or {}
    if 'poll_interval_ms' in overlay and not _is_positive_int(overlay['poll_interval_ms']):
        return False, "overlay.poll_interval_ms must be a positive integer"

    # Logging
    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config['log_level'] not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description='neck-check - too-close-to-screen monitor')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--headless', action='store_true',
                        help='Log alerts instead of showing the blocking overlay')
    parser.add_argument('--interval', type=float, default=None,
                        help='Seconds between samples (overrides monitor.interval)')
    parser.add_argument('--snapshot', type=str, default=None, metavar='PATH',
                        help='Capture one frame, draw detected faces, save it to PATH and exit')
    return parser.parse_args(argv)


def create_detector(cfg: DetectorConfig) -> CascadeFaceDetector:
    return CascadeFaceDetector(
        CascadeConfig(
            model_path=cfg.model_path,
            min_face_size=int(cfg.min_face_size),
            score_threshold=float(cfg.score_threshold),
            pyramid_scale_factor=float(cfg.pyramid_scale_factor),
            slide_window_step=tuple(int(s) for s in cfg.slide_window_step),
            min_neighbors=int(cfg.min_neighbors),
        )
    )


def run_snapshot(camera_cfg: CameraConfig, detector: FaceDetector, output_path: str) -> int:
    """Capture one frame in discrete mode, draw the detected faces and save it."""
    source = create_frame_source(camera_cfg, mode=CaptureMode.DISCRETE, source_id="snapshot")
    try:
        frame_data = source.capture()
    except CameraError as e:
        logging.error(f"Snapshot failed: {e}")
        return 1

    faces = detector.detect(frame_data.to_gray())
    for face in faces:
        logging.info(f"Face at ({face.x}, {face.y}) size {face.size}")

    annotated = draw_faces(frame_data.frame, faces)
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)
    if not cv2.imwrite(output_path, cv2.cvtColor(annotated, cv2.COLOR_RGB2BGR)):
        logging.error(f"Failed to save snapshot to {output_path}")
        return 1

    logging.info(f"Saved snapshot with {len(faces)} face(s) to {output_path}")
    return 0


def create_presenter(config: Config, alert_state: SharedAlertState, headless: bool) -> AlertPresenter:
    if headless:
        return HeadlessPresenter(alert_state)
    return TkAlertOverlay(alert_state, config.overlay)


def run_monitor(
    monitor: PostureMonitor,
    presenter: AlertPresenter,
    alert_state: SharedAlertState,
    sampling_config: SamplingConfig,
) -> int:
    """
    Run sampling on a background thread and the presenter on this one.

    Returns the process exit code.
    """
    sampler = SamplingLoop(monitor, alert_state, sampling_config)
    sampler.add_listener(presenter.notify)
    # a dead sampler leaves nothing to present
    sampler.add_exit_callback(presenter.close)

    previous_handler = signal.signal(signal.SIGINT, lambda signum, frame: presenter.close())
    sampler.start()
    presenter_failed = False
    try:
        presenter.run()
    except PresenterUnavailableError as e:
        logging.error(f"Overlay unavailable, use --headless: {e}")
        presenter_failed = True
    finally:
        signal.signal(signal.SIGINT, previous_handler)
        sampler.stop()
        if sampler.join(timeout=SHUTDOWN_TIMEOUT):
            try:
                monitor.source.close()
            except CameraError as e:
                logging.warning(f"Error closing camera: {e}")
        else:
            logging.warning("Sampling loop did not stop in time, leaving the camera to process exit")

    if presenter_failed or sampler.failure is not None or sampler.error is not None:
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main application function."""
    args = parse_args(argv)

    config = load_config(args.config)
    if args.interval is not None:
        config.setdefault('monitor', {})['interval'] = args.interval

    is_valid, error_msg = validate_config(config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        return 1

    setup_logging(config['log_path'], config['log_level'])
    cfg = Config.from_dict(config)
    logging.debug(f"Effective configuration: {cfg.to_dict()}")

    try:
        detector = create_detector(cfg.detector)
    except (DetectorLoadError, ValueError) as e:
        logging.error(f"Failed to create face detector: {e}")
        return 1

    if args.snapshot:
        return run_snapshot(cfg.camera, detector, args.snapshot)

    source = create_frame_source(cfg.camera)
    try:
        source.open()
    except StreamOpenError as e:
        logging.error(f"Camera unavailable: {e}")
        return 1

    logging.info("Starting neck-check")
    monitor = PostureMonitor(source, detector, selection=cfg.monitor.selection)
    try:
        monitor.calibrate(OperatorConsole())
    except (EOFError, KeyboardInterrupt):
        logging.info("Calibration aborted")
        source.close()
        return 1

    alert_state = SharedAlertState()
    presenter = create_presenter(cfg, alert_state, args.headless)
    sampling_config = SamplingConfig(
        interval=float(cfg.monitor.interval),
        failure_backoff=float(cfg.monitor.failure_backoff),
        max_consecutive_failures=int(cfg.monitor.max_consecutive_failures),
    )
    exit_code = run_monitor(monitor, presenter, alert_state, sampling_config)
    logging.info("neck-check stopped")
    return exit_code


if __name__ == "__main__":
    sys.exit(main())
