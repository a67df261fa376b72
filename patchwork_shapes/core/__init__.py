"""
Core runtime configuration for the shape library.
Holds the global settings consumed by the geometric models, the text codec
and the rendering adapters, plus a lightweight profiling helper.
"""

import os
import json
import time
import logging
from pathlib import Path
from typing import Dict, Any, Union


# Configure logging with reasonable defaults
logging.basicConfig(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Global configuration settings
DEFAULT_CONFIG: Dict[str, Any] = {
    # Serialization
    "float_precision": 2,  # Decimal places for serialized floats

    # Geometry
    "float_tolerance": 1e-6,  # Epsilon for float comparisons
    "bbox_sentinel": 10000,  # Magnitude of the empty bounding box bounds
    "degenerate_metric": 1.0,  # Area/perimeter reported by zero-width shapes

    # Rendering
    "max_fit_ratio": 1.0,  # Auto-fit never enlarges beyond this ratio
    "background_color": (255, 255, 255),

    # Diagnostics
    "enable_profiling": False,
}

CONFIG: Dict[str, Any] = dict(DEFAULT_CONFIG)


def configure(settings: Dict[str, Any]) -> None:
    """
    Update the core configuration with custom settings.

    Args:
        settings: Dictionary of configuration settings to update

    Raises:
        ValueError: If a setting name is not a known configuration key
    """
    unknown = [key for key in settings if key not in DEFAULT_CONFIG]
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

    CONFIG.update(settings)
    logger.info(f"Core configuration updated: {', '.join(settings.keys())}")


def reset_config() -> None:
    """Restore every setting to its default value."""
    CONFIG.clear()
    CONFIG.update(DEFAULT_CONFIG)


def load_config(config_path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load configuration from a JSON file and apply it.

    Args:
        config_path: Path to the configuration file

    Returns:
        Dictionary containing the loaded settings
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            settings = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Error loading configuration from {config_path}: {e}")
        raise

    # JSON has no tuples
    if isinstance(settings.get("background_color"), list):
        settings["background_color"] = tuple(settings["background_color"])

    configure(settings)
    return settings


def save_config(
    config: Dict[str, Any],
    output_path: Union[str, Path],
    create_dirs: bool = True
) -> None:
    """
    Save configuration to a JSON file.

    Args:
        config: Dictionary containing configuration
        output_path: Path to save the configuration
        create_dirs: Whether to create parent directories if they don't exist
    """
    output_path = Path(output_path)

    if create_dirs:
        output_path.parent.mkdir(exist_ok=True, parents=True)

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(config, f, indent=2)
    logger.info(f"Configuration saved to: {output_path}")


class Profiler:
    """Simple context manager timing a block when profiling is enabled."""

    def __init__(self, name: str, enabled: bool = None):
        self.name = name
        self.enabled = CONFIG["enable_profiling"] if enabled is None else enabled
        self.start_time = None
        self.duration = None

    def __enter__(self):
        if self.enabled:
            self.start_time = time.perf_counter()
            logger.debug(f"Profiling started: {self.name}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self.enabled or self.start_time is None:
            return

        self.duration = time.perf_counter() - self.start_time
        logger.debug(f"Profiling completed: {self.name} - {self.duration:.6f}s")


__all__ = [
    "CONFIG",
    "DEFAULT_CONFIG",
    "configure",
    "reset_config",
    "load_config",
    "save_config",
    "Profiler",
]
