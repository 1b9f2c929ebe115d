"""Configuration loader with Pydantic validation for the Rectification module.

Loads stage parameters from a YAML file. Every field has a default, so a
partial file (or no file at all) yields a usable configuration.
"""

import logging
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

# Default configuration path (relative to this file)
DEFAULT_CONFIG_PATH = Path(__file__).parent / "config.yaml"

INTERPOLATION_METHODS = ("nearest", "linear", "cubic", "area", "lanczos")


class EdgeConfig(BaseModel):
    """Edge map builder parameters.

    Attributes:
        blur_kernel_size: Gaussian kernel side length (odd)
        canny_low: Lower hysteresis threshold (0-255)
        canny_high: Upper hysteresis threshold (0-255)
    """

    blur_kernel_size: int = Field(default=5, ge=1)
    canny_low: float = Field(default=75.0, ge=0.0, le=255.0)
    canny_high: float = Field(default=200.0, ge=0.0, le=255.0)

    @field_validator("blur_kernel_size")
    @classmethod
    def _kernel_must_be_odd(cls, v: int) -> int:
        if v % 2 == 0:
            raise ValueError(f"blur_kernel_size must be odd, got {v}")
        return v


class ContourConfig(BaseModel):
    """Contour extraction parameters.

    Attributes:
        min_points: Contours with fewer points are discarded (at least 3)
    """

    min_points: int = Field(default=3, ge=3)


class ApproximationConfig(BaseModel):
    """Polygon approximation parameters.

    Attributes:
        epsilon_ratio: Douglas-Peucker tolerance as a fraction of the perimeter
        min_area_ratio: Minimum quadrilateral area as a fraction of image area
    """

    epsilon_ratio: float = Field(default=0.02, gt=0.0, lt=1.0)
    min_area_ratio: float = Field(default=0.0, ge=0.0, lt=1.0)


class WarpConfig(BaseModel):
    """Projective rectifier parameters.

    Attributes:
        interpolation: Resampling method name
        border_value: Fill value for pixels mapped outside the source
        min_corner_area: Quadrilaterals enclosing less area are degenerate
    """

    interpolation: str = "linear"
    border_value: int = Field(default=255, ge=0, le=255)
    min_corner_area: float = Field(default=1.0, ge=0.0)

    @field_validator("interpolation")
    @classmethod
    def _known_interpolation(cls, v: str) -> str:
        if v not in INTERPOLATION_METHODS:
            raise ValueError(
                f"Invalid interpolation: {v}. Must be one of {list(INTERPOLATION_METHODS)}"
            )
        return v


class RectificationConfig(BaseModel):
    """Complete rectification module configuration."""

    edges: EdgeConfig = Field(default_factory=EdgeConfig)
    contours: ContourConfig = Field(default_factory=ContourConfig)
    approximation: ApproximationConfig = Field(default_factory=ApproximationConfig)
    warp: WarpConfig = Field(default_factory=WarpConfig)


def load_config(config_path: Optional[Path] = None) -> RectificationConfig:
    """
    Load rectification configuration from YAML file.

    Args:
        config_path: Path to the configuration YAML file. Uses the bundled
            ``config.yaml`` when omitted.

    Returns:
        Validated RectificationConfig object.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config is invalid.

    Example:
        >>> config = load_config()
        >>> print(config.edges.canny_low, config.edges.canny_high)
        75.0 200.0
    """
    config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    logger.debug(f"Loading rectification config from {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw_config = yaml.safe_load(f) or {}

    if not isinstance(raw_config, dict):
        raise ValueError(
            f"Invalid configuration file: expected a mapping, got {type(raw_config).__name__}"
        )

    section = raw_config.get("rectification", raw_config)

    try:
        config = RectificationConfig(**section)
    except (TypeError, ValidationError) as e:
        raise ValueError(f"Invalid configuration file: {e}") from e

    if config.edges.canny_low > config.edges.canny_high:
        raise ValueError(
            f"canny_low ({config.edges.canny_low}) must not exceed "
            f"canny_high ({config.edges.canny_high})"
        )

    logger.info("Successfully loaded rectification configuration")
    return config
