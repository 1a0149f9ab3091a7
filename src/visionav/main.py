"""
Vision Assist Navigator entry point.

Initializes the camera, runs detection on every frame and speaks what is
in front of the user.

Usage:
    visionav --config config/config.yaml --display

Arguments:
    --config: Path to configuration file
    --display: Show the camera image with detection overlays
    --no-speech: Log announcements instead of speaking them
    --web: Serve the status API (overrides web.enabled)
"""

import argparse
import logging
import os
import sys
from typing import Any, Dict, Optional, Tuple

import yaml

from .announce.scheduler import AnnouncementScheduler, SchedulerConfig
from .detection.decoder import DecoderConfig, DetectionDecoder
from .detection.labels import LabelSizeTable, load_labels
from .detection.suppression import SuppressionEngine
from .errors import ConfigurationError
from .geometry.rotation import VALID_ROTATIONS
from .inference.backend import InferenceBackend
from .models.config import Config
from .observation.base import ObservationSource
from .observation.opencv_source import OpenCVSource, OpenCVSourceConfig
from .ops.logging import setup_logging
from .pipeline.engine import PipelineConfig, PipelineEngine
from .pipeline.stages.detect import DetectStage
from .pipeline.stages.validity import FrameGateConfig, FrameValidityGate
from .speech.base import LoggingSpeech, SpeechSink

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


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

        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['camera', 'model', 'announce', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Camera
    camera = config.get('camera') or {}
    if 'device_id' not in camera:
        return False, "Missing camera.device_id"
    if not isinstance(camera['device_id'], (int, str)) or isinstance(camera['device_id'], bool):
        return False, "camera.device_id must be an integer (index) or string (path/URL)"
    if isinstance(camera['device_id'], int) and camera['device_id'] < 0:
        return False, "camera.device_id integer must be non-negative"

    if 'resolution' in camera:
        resolution = camera['resolution']
        if not isinstance(resolution, list) or len(resolution) != 2:
            return False, "camera.resolution must be a list of [width, height]"
        if not all(isinstance(x, int) and x > 0 for x in resolution):
            return False, "camera.resolution values must be positive integers"

    if 'fps' in camera and (not isinstance(camera['fps'], int) or camera['fps'] <= 0):
        return False, "camera.fps must be a positive integer"

    if camera.get('backend', 'opencv') != 'opencv':
        return False, "camera.backend must be: opencv"

    if camera.get('rotation_degrees', 0) not in VALID_ROTATIONS:
        return False, "camera.rotation_degrees must be one of: 0, 90, 180, 270"

    # Model
    model = config.get('model') or {}
    for key in ('path', 'labels_path'):
        if key in model and (not isinstance(model[key], str) or not model[key]):
            return False, f"model.{key} must be a non-empty string"
    for key in ('conf_threshold', 'iou_threshold'):
        if key in model:
            value = model[key]
            if not _is_number(value) or not (0 < value <= 1):
                return False, f"model.{key} must be between 0 and 1"
    if 'model_size' in model and (not isinstance(model['model_size'], int) or model['model_size'] <= 0):
        return False, "model.model_size must be a positive integer"
    if 'focal_length_px' in model and (not _is_number(model['focal_length_px']) or model['focal_length_px'] <= 0):
        return False, "model.focal_length_px must be a positive number"
    if model.get('channel_order', 'bgr') not in ('bgr', 'rgb'):
        return False, "model.channel_order must be one of: bgr, rgb"
    widths = model.get('object_widths') or {}
    if not isinstance(widths, dict):
        return False, "model.object_widths must be a mapping of label to meters"
    for label, width in widths.items():
        if not _is_number(width) or width <= 0:
            return False, f"model.object_widths.{label} must be a positive number"

    # Announcements
    announce = config.get('announce') or {}
    if 'cooldown_s' in announce and (not _is_number(announce['cooldown_s']) or announce['cooldown_s'] <= 0):
        return False, "announce.cooldown_s must be a positive number"
    if 'detection_lifetime_s' in announce:
        lifetime = announce['detection_lifetime_s']
        if not _is_number(lifetime) or lifetime <= 0:
            return False, "announce.detection_lifetime_s must be a positive number"

    # Frame gate (optional)
    gate = config.get('gate') or {}
    for key in ('blank_luma_threshold', 'min_variance'):
        if key in gate and (not _is_number(gate[key]) or gate[key] < 0):
            return False, f"gate.{key} must be a non-negative number"

    # Web (optional)
    web = config.get('web') or {}
    if 'port' in web and (not isinstance(web['port'], int) or not (0 < web['port'] < 65536)):
        return False, "web.port must be an integer between 1 and 65535"

    if config['log_level'] not in VALID_LOG_LEVELS:
        return False, f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}"

    return True, None


def create_speech(config: Config, enabled: bool = True) -> SpeechSink:
    """
    Create the speech sink. Falls back to logging-only output when speech
    is disabled or the TTS engine cannot be initialized.
    """
    if not (enabled and config.speech.enabled):
        logging.info("Speech disabled, announcements are logged only")
        return LoggingSpeech()

    from .speech.tts import Pyttsx3Speech, TtsConfig

    try:
        return Pyttsx3Speech(
            TtsConfig(
                queue_maxsize=config.speech.queue_maxsize,
                rate=config.speech.rate,
                volume=config.speech.volume,
                voice_name_contains=config.speech.voice_name_contains,
            )
        )
    except Exception as e:
        logging.error(f"Failed to initialize TTS engine, announcements are logged only: {e}")
        return LoggingSpeech()


def create_backend(config: Config) -> InferenceBackend:
    from .inference.tflite_backend import TfliteBackend, TfliteConfig

    return TfliteBackend(TfliteConfig(model_path=config.model.path, num_threads=config.model.num_threads))


def build_pipeline(
    config: Config,
    display: bool = False,
    speech: Optional[SpeechSink] = None,
    backend: Optional[InferenceBackend] = None,
    source: Optional[ObservationSource] = None,
) -> PipelineEngine:
    """
    Wire every stage from a typed Config.

    Components not passed in are created from the config.

    Raises:
        ConfigurationError: If labels, model output and config disagree.
    """
    labels = load_labels(config.model.labels_path)

    if backend is None:
        backend = create_backend(config)
    num_classes = getattr(backend, "num_classes", None)

    decoder = DetectionDecoder(
        labels,
        DecoderConfig(
            model_size=config.model.model_size,
            conf_threshold=config.model.conf_threshold,
            focal_length_px=config.model.focal_length_px,
            num_classes=num_classes,
        ),
        size_table=LabelSizeTable().with_overrides(config.model.object_widths),
    )
    detect_stage = DetectStage(
        backend,
        decoder,
        SuppressionEngine(config.model.iou_threshold),
        channel_order=config.model.channel_order,
    )
    gate = FrameValidityGate(
        FrameGateConfig(
            blank_luma_threshold=config.gate.blank_luma_threshold,
            min_variance=config.gate.min_variance,
            channel_order=config.model.channel_order,
        )
    )

    if speech is None:
        speech = create_speech(config)
    scheduler = AnnouncementScheduler(
        speech,
        SchedulerConfig(
            cooldown_s=config.announce.cooldown_s,
            detection_lifetime_s=config.announce.detection_lifetime_s,
            model_size=config.model.model_size,
        ),
        labels=labels,
    )

    if source is None:
        source = OpenCVSource(OpenCVSourceConfig.from_camera_config(config.camera.to_dict()))

    return PipelineEngine(
        source=source,
        gate=gate,
        detect_stage=detect_stage,
        scheduler=scheduler,
        config=PipelineConfig(portrait_only=config.camera.portrait_only, display=display),
        speech=speech,
    )


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Vision Assist Navigator')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--display', action='store_true',
                        help='Show camera image with detection overlays')
    parser.add_argument('--no-speech', action='store_true',
                        help='Log announcements instead of speaking them')
    parser.add_argument('--web', action='store_true',
                        help='Serve the status API')
    args = parser.parse_args()

    raw_config = load_config(args.config)

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = Config.from_dict(raw_config)
    setup_logging(config.log_path, config.log_level)
    logging.info("Starting Vision Assist Navigator")

    try:
        speech = create_speech(config, enabled=not args.no_speech)
        engine = build_pipeline(config, display=args.display, speech=speech)
    except (ConfigurationError, FileNotFoundError, ImportError) as e:
        logging.error(f"Failed to start: {e}")
        sys.exit(1)

    if config.announce.greeting:
        speech.enqueue(config.announce.greeting)

    if args.web or config.web.enabled:
        from .web.app import start_web_thread

        start_web_thread(engine, config.web.host, config.web.port)

    try:
        engine.run()
    except ConfigurationError:
        sys.exit(1)


if __name__ == "__main__":
    main()
