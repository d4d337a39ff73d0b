"""Configuration controller for YAML-based settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml


@dataclass(frozen=True)
class ConfigPaths:
    """Filesystem paths for configuration files."""

    config_dir: Path
    config_file: Path
    override_file: Path


class ConfigController:
    """Singleton controller for loading and updating configuration."""

    _instance: "ConfigController | None" = None

    def __init__(self, config_file: str = "default.yaml") -> None:
        if ConfigController._instance is not None:
            raise RuntimeError("You cannot create another ConfigController class")

        config_dir = Path("config")
        self.paths = ConfigPaths(
            config_dir=config_dir,
            config_file=config_dir / config_file,
            override_file=config_dir / "override.yaml",
        )
        self.config: dict[str, Any] = {}
        self.load_config()

    @classmethod
    def get_instance(cls) -> "ConfigController":
        """Return the singleton instance of the controller."""

        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_config(self) -> None:
        """Load configuration from default and override YAML files."""

        config: dict[str, Any] = {}
        if self.paths.config_file.exists():
            with self.paths.config_file.open("r", encoding="utf-8") as file:
                config = yaml.safe_load(file) or {}

        if self.paths.override_file.exists():
            with self.paths.override_file.open("r", encoding="utf-8") as file:
                override_config = yaml.safe_load(file) or {}
            if override_config:
                config = self._deep_merge(config, override_config)

        self.config = normalize_config(config)

    def save_config(self, config: dict[str, Any]) -> None:
        """Persist configuration to override.yaml, archiving previous overrides."""

        self.paths.config_dir.mkdir(parents=True, exist_ok=True)
        if self.paths.override_file.exists():
            archive_index = 1
            archive_file = self._archive_path(archive_index)
            while archive_file.exists():
                archive_index += 1
                archive_file = self._archive_path(archive_index)
            self.paths.override_file.rename(archive_file)

        with self.paths.override_file.open("w", encoding="utf-8") as file:
            yaml.safe_dump(config, file)

    def get_config(self) -> dict[str, Any]:
        """Return the currently loaded configuration."""

        return dict(self.config)

    def set_config(self, config: dict[str, Any]) -> None:
        """Set and persist configuration values."""

        self.config = normalize_config(config)
        self.save_config(self.config)

    def _archive_path(self, index: int) -> Path:
        """Return the archive path for a given override index."""

        filename = f"override_{index:04d}.yaml"
        return self.paths.config_dir / filename

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge dictionaries, overriding base values with override values."""

        merged = dict(base)
        for key, value in override.items():
            if (
                key in merged
                and isinstance(merged[key], dict)
                and isinstance(value, dict)
            ):
                merged[key] = self._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged


def normalize_config(config: dict[str, Any]) -> dict[str, Any]:
    """Return config with every engine section present and typed."""

    normalized = dict(config)
    sections = {
        name: dict(normalized.get(name) or {})
        for name in ("vision", "navigation", "depth", "signs", "feedback")
    }

    vision_cfg = sections["vision"]
    vision_cfg["focal_length"] = float(vision_cfg.get("focal_length", 1.4))
    vision_cfg["labeler_min_confidence"] = float(vision_cfg.get("labeler_min_confidence", 0.5))
    vision_cfg["detector_min_confidence"] = float(vision_cfg.get("detector_min_confidence", 0.3))
    vision_cfg["fallback_enabled"] = bool(vision_cfg.get("fallback_enabled", True))
    vision_cfg["fallback_min_confidence"] = float(vision_cfg.get("fallback_min_confidence", 0.5))
    extra_generic = vision_cfg.get("extra_generic_labels") or []
    vision_cfg["extra_generic_labels"] = [str(item).strip().lower() for item in extra_generic]

    navigation_cfg = sections["navigation"]
    thresholds_cfg = dict(navigation_cfg.get("thresholds") or {})
    thresholds_cfg["critical_m"] = float(thresholds_cfg.get("critical_m", 1.0))
    thresholds_cfg["high_m"] = float(thresholds_cfg.get("high_m", 1.5))
    thresholds_cfg["moderate_m"] = float(thresholds_cfg.get("moderate_m", 2.5))
    thresholds_cfg["low_m"] = float(thresholds_cfg.get("low_m", 4.0))
    navigation_cfg["thresholds"] = thresholds_cfg

    depth_cfg = sections["depth"]
    depth_cfg["enabled"] = bool(depth_cfg.get("enabled", True))
    depth_cfg["min_point_confidence"] = float(depth_cfg.get("min_point_confidence", 0.5))

    signs_cfg = sections["signs"]
    signs_cfg["stability_threshold"] = int(signs_cfg.get("stability_threshold", 3))
    signs_cfg["language"] = str(signs_cfg.get("language", "asl")).lower()
    signs_cfg["history_size"] = int(signs_cfg.get("history_size", 50))

    feedback_cfg = sections["feedback"]
    feedback_cfg["haptic_interval_ms"] = int(feedback_cfg.get("haptic_interval_ms", 300))
    feedback_cfg["speech_interval_ms"] = int(feedback_cfg.get("speech_interval_ms", 2000))
    feedback_cfg["direction_delay_ms"] = int(feedback_cfg.get("direction_delay_ms", 150))
    feedback_cfg["tts_enabled"] = bool(feedback_cfg.get("tts_enabled", True))
    feedback_cfg["bus_maxlen"] = int(feedback_cfg.get("bus_maxlen", 200))

    normalized.update(sections)
    normalized["logging_level"] = str(normalized.get("logging_level", "INFO"))
    normalized["file_logging_enabled"] = bool(normalized.get("file_logging_enabled", False))
    normalized["log_file"] = str(normalized.get("log_file", "log/fusion.log"))
    return normalized
