"""
Configuration management for the emojify pipeline.

This module provides configuration file loading and saving for the
classifier thresholds, compositor scaling and overlay asset location,
supporting YAML and JSON formats.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from .classifier import ClassifierConfig
from .compositor import CompositorConfig

logger = logging.getLogger(__name__)

# Default config file locations
DEFAULT_CONFIG_PATHS = [
    Path("emojify_config.yaml"),
    Path("emojify_config.json"),
    Path.home() / ".config" / "emojify" / "config.yaml",
    Path.home() / ".config" / "emojify" / "config.json",
]


@dataclass
class EmojifyConfig:
    """Configuration for the emojify pipeline.

    Attributes:
        left_eye_threshold: Left-eye-open probability counted as open
        right_eye_threshold: Right-eye-open probability counted as open
        smile_threshold: Smiling probability counted as smiling
        scale_factor: Overlay width as a fraction of face width
        compound_height_scale: Apply scale_factor twice to overlay height
        asset_dir: Directory holding the eight overlay images
        asset_extension: File extension of the overlay images
    """
    left_eye_threshold: float = 0.54
    right_eye_threshold: float = 0.57
    smile_threshold: float = 0.2
    scale_factor: float = 0.9
    compound_height_scale: bool = True
    asset_dir: Optional[str] = None
    asset_extension: str = ".png"

    def classifier_config(self) -> ClassifierConfig:
        return ClassifierConfig(
            left_eye_threshold=self.left_eye_threshold,
            right_eye_threshold=self.right_eye_threshold,
            smile_threshold=self.smile_threshold,
        )

    def compositor_config(self) -> CompositorConfig:
        return CompositorConfig(
            scale_factor=self.scale_factor,
            compound_height_scale=self.compound_height_scale,
        )


def load_config(
    config_path: Optional[Union[str, Path]] = None
) -> EmojifyConfig:
    """
    Load emojify configuration from file.

    Supports YAML and JSON formats. If no path is specified, searches
    default locations.

    Args:
        config_path: Path to config file, or None to search defaults

    Returns:
        EmojifyConfig instance

    Raises:
        FileNotFoundError: If the given config file does not exist
        ValueError: If config file is invalid
    """
    # Find config file
    if config_path is not None:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
    else:
        path = None
        for default_path in DEFAULT_CONFIG_PATHS:
            if default_path.exists():
                path = default_path
                break

        if path is None:
            logger.info("No config file found, using defaults")
            return EmojifyConfig()

    logger.info(f"Loading config from {path}")

    try:
        with open(path, 'r') as f:
            if path.suffix in ('.yaml', '.yml'):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
    except Exception as e:
        raise ValueError(f"Failed to parse config file: {e}")

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping, got {type(data).__name__}")

    return _dict_to_config(data)


def save_config(
    config: EmojifyConfig,
    config_path: Union[str, Path],
    format: str = "auto"
) -> None:
    """
    Save emojify configuration to file.

    Args:
        config: Configuration to save
        config_path: Output file path
        format: "yaml", "json", or "auto" (detect from extension)
    """
    path = Path(config_path)

    # Determine format
    if format == "auto":
        if path.suffix in ('.yaml', '.yml'):
            format = "yaml"
        else:
            format = "json"

    data = _config_to_dict(config)

    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, 'w') as f:
        if format == "yaml":
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
        else:
            json.dump(data, f, indent=2)

    logger.info(f"Saved config to {path}")


def _dict_to_config(data: Dict[str, Any]) -> EmojifyConfig:
    """Convert dictionary to EmojifyConfig."""
    unknown = set(data) - set(_config_to_dict(EmojifyConfig()))
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

    compound_height_scale = data.get('compound_height_scale', True)
    if not isinstance(compound_height_scale, bool):
        raise ValueError(
            f"compound_height_scale must be true or false, got {compound_height_scale!r}"
        )

    asset_extension = data.get('asset_extension', '.png')
    if not isinstance(asset_extension, str):
        raise ValueError(f"asset_extension must be a string, got {asset_extension!r}")

    asset_dir = data.get('asset_dir')
    try:
        config = EmojifyConfig(
            left_eye_threshold=float(data.get('left_eye_threshold', 0.54)),
            right_eye_threshold=float(data.get('right_eye_threshold', 0.57)),
            smile_threshold=float(data.get('smile_threshold', 0.2)),
            scale_factor=float(data.get('scale_factor', 0.9)),
            compound_height_scale=compound_height_scale,
            asset_dir=str(asset_dir) if asset_dir is not None else None,
            asset_extension=asset_extension,
        )
    except (TypeError, ValueError) as e:
        raise ValueError(f"Invalid config value: {e}") from e

    # Validate ranges
    config.classifier_config()
    config.compositor_config()
    return config


def _config_to_dict(config: EmojifyConfig) -> Dict[str, Any]:
    """Convert EmojifyConfig to dictionary."""
    return {
        'left_eye_threshold': config.left_eye_threshold,
        'right_eye_threshold': config.right_eye_threshold,
        'smile_threshold': config.smile_threshold,
        'scale_factor': config.scale_factor,
        'compound_height_scale': config.compound_height_scale,
        'asset_dir': config.asset_dir,
        'asset_extension': config.asset_extension,
    }


def create_default_config(output_path: Union[str, Path]) -> None:
    """
    Create a default configuration file with comments.

    Args:
        output_path: Path to write the config file
    """
    path = Path(output_path)

    if path.suffix in ('.yaml', '.yml'):
        content = """# Emojify Configuration
# =====================

# Probability at or above which an eye counts as open
left_eye_threshold: 0.54
right_eye_threshold: 0.57

# Probability at or above which the face counts as smiling
smile_threshold: 0.2

# Overlay width as a fraction of the face width
scale_factor: 0.9

# Apply scale_factor a second time to the overlay height
# (true reproduces existing emojified output; false keeps the aspect ratio)
compound_height_scale: true

# Directory holding smile.png, frown.png, closed_smile.png, closed_frown.png,
# leftwink.png, leftwinkfrown.png, rightwink.png, rightwinkfrown.png
asset_dir: null

# File extension of the overlay images
asset_extension: .png
"""
    else:
        content = json.dumps(_config_to_dict(EmojifyConfig()), indent=2)

    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w') as f:
        f.write(content)

    logger.info(f"Created default config at {path}")
