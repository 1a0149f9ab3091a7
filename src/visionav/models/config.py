"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union


@dataclass
class CameraConfig:
    """Camera configuration."""
    backend: str = "opencv"
    device_id: Union[int, str] = 0
    resolution: List[int] = field(default_factory=lambda: [1280, 720])
    fps: int = 30
    rotation_degrees: int = 0
    swap_rb: bool = False
    portrait_only: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CameraConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            backend=d.get("backend", "opencv"),
            device_id=d.get("device_id", 0),
            resolution=d.get("resolution", [1280, 720]),
            fps=d.get("fps", 30),
            rotation_degrees=d.get("rotation_degrees", 0) or 0,
            swap_rb=d.get("swap_rb", False),
            portrait_only=d.get("portrait_only", False),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backend": self.backend,
            "device_id": self.device_id,
            "resolution": self.resolution,
            "fps": self.fps,
            "rotation_degrees": self.rotation_degrees,
            "swap_rb": self.swap_rb,
            "portrait_only": self.portrait_only,
        }


@dataclass
class ModelConfig:
    """Detector model and decoding configuration."""
    path: str = "assets/yolov8n_float32.tflite"
    labels_path: str = "assets/labels.txt"
    model_size: int = 320
    conf_threshold: float = 0.5
    iou_threshold: float = 0.45
    focal_length_px: float = 400.0
    num_threads: int = 4
    channel_order: str = "bgr"
    object_widths: Optional[Dict[str, float]] = None

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ModelConfig":
        return cls(
            path=d.get("path", "assets/yolov8n_float32.tflite"),
            labels_path=d.get("labels_path", "assets/labels.txt"),
            model_size=d.get("model_size", 320),
            conf_threshold=d.get("conf_threshold", 0.5),
            iou_threshold=d.get("iou_threshold", 0.45),
            focal_length_px=d.get("focal_length_px", 400.0),
            num_threads=d.get("num_threads", 4),
            channel_order=d.get("channel_order", "bgr"),
            object_widths=d.get("object_widths"),
        )

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "path": self.path,
            "labels_path": self.labels_path,
            "model_size": self.model_size,
            "conf_threshold": self.conf_threshold,
            "iou_threshold": self.iou_threshold,
            "focal_length_px": self.focal_length_px,
            "num_threads": self.num_threads,
            "channel_order": self.channel_order,
        }
        if self.object_widths is not None:
            d["object_widths"] = self.object_widths
        return d


@dataclass
class GateConfig:
    """Frame validity gate thresholds (luma units, 0-255)."""
    blank_luma_threshold: float = 20.0
    min_variance: float = 50.0

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GateConfig":
        return cls(
            blank_luma_threshold=d.get("blank_luma_threshold", 20.0),
            min_variance=d.get("min_variance", 50.0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "blank_luma_threshold": self.blank_luma_threshold,
            "min_variance": self.min_variance,
        }


@dataclass
class AnnounceConfig:
    """Announcement scheduling."""
    cooldown_s: float = 5.0
    detection_lifetime_s: float = 1.0
    greeting: Optional[str] = "Vision Assist Navigator opening"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AnnounceConfig":
        return cls(
            cooldown_s=d.get("cooldown_s", 5.0),
            detection_lifetime_s=d.get("detection_lifetime_s", 1.0),
            greeting=d.get("greeting", "Vision Assist Navigator opening"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cooldown_s": self.cooldown_s,
            "detection_lifetime_s": self.detection_lifetime_s,
            "greeting": self.greeting,
        }


@dataclass
class SpeechConfig:
    """Text-to-speech output."""
    enabled: bool = True
    rate: Optional[int] = None
    volume: Optional[float] = None
    voice_name_contains: Optional[str] = None
    queue_maxsize: int = 30

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SpeechConfig":
        return cls(
            enabled=d.get("enabled", True),
            rate=d.get("rate"),
            volume=d.get("volume"),
            voice_name_contains=d.get("voice_name_contains"),
            queue_maxsize=d.get("queue_maxsize", 30),
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "enabled": self.enabled,
            "queue_maxsize": self.queue_maxsize,
        }
        if self.rate is not None:
            d["rate"] = self.rate
        if self.volume is not None:
            d["volume"] = self.volume
        if self.voice_name_contains is not None:
            d["voice_name_contains"] = self.voice_name_contains
        return d


@dataclass
class WebConfig:
    """Status API server."""
    enabled: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            enabled=d.get("enabled", False),
            host=d.get("host", "127.0.0.1"),
            port=d.get("port", 8000),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "host": self.host, "port": self.port}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    camera: CameraConfig = field(default_factory=CameraConfig)
    model: ModelConfig = field(default_factory=ModelConfig)
    gate: GateConfig = field(default_factory=GateConfig)
    announce: AnnounceConfig = field(default_factory=AnnounceConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/visionav.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            camera=CameraConfig.from_dict(d.get("camera", {}) or {}),
            model=ModelConfig.from_dict(d.get("model", {}) or {}),
            gate=GateConfig.from_dict(d.get("gate", {}) or {}),
            announce=AnnounceConfig.from_dict(d.get("announce", {}) or {}),
            speech=SpeechConfig.from_dict(d.get("speech", {}) or {}),
            web=WebConfig.from_dict(d.get("web", {}) or {}),
            log_path=d.get("log_path", "logs/visionav.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or logging)."""
        return {
            "camera": self.camera.to_dict(),
            "model": self.model.to_dict(),
            "gate": self.gate.to_dict(),
            "announce": self.announce.to_dict(),
            "speech": self.speech.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
