from datetime import datetime
from typing import Optional

from moonmap.astro import calculate_phase
from moonmap.types import ProjectionConfig

DEFAULT_RADIUS_FRACTION = 0.8
STROKE_WIDTH_FRACTION = 0.001
MIN_STROKE_WIDTH = 1.0

class ConfigError(ValueError):
    """A configuration value could not be parsed."""

def _to_int(value: str, name: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"Invalid {name}: '{value}' is not an integer") from None

def _to_float(value: str, name: str) -> float:
    try:
        return float(value)
    except ValueError:
        raise ConfigError(f"Invalid {name}: '{value}' is not a number") from None

def _percent(value: str, name: str) -> float:
    return _to_float(value[:-1], name) / 100.0

def parse_center(value: str, size: int, name: str = "center") -> int:
    """
    Parse a center coordinate.

    Empty means the image center, '+N' or '-N' an offset from the image center
    and anything else an absolute pixel position.
    """
    value = value.strip()
    center = size // 2
    if not value:
        return center
    if value.startswith("+") or value.startswith("-"):
        return center + _to_int(value, name)
    return _to_int(value, name)

def parse_radius(value: str, width: int, height: int) -> int:
    """
    Parse the disk radius.

    Empty means 80% of half the shorter image dimension, 'NN%' a percentage of
    half the shorter image dimension and anything else pixels.
    """
    value = value.strip()
    half_size = min(width, height) / 2
    if not value:
        radius = int(half_size * DEFAULT_RADIUS_FRACTION)
    elif value.endswith("%"):
        radius = int(half_size * _percent(value, "radius"))
    else:
        radius = _to_int(value, "radius")
    if radius <= 0:
        raise ConfigError(f"Invalid radius: '{value}' gives {radius} pixels, must be positive")
    return radius

def parse_angle(value: str, name: str) -> float:
    value = value.strip()
    if not value:
        return 0.0
    return _to_float(value, name)

def parse_date_time(value: str) -> datetime:
    """
    Parse an ISO time with timezone information ('Z' is accepted for UTC).

    Empty means now, in the local timezone.
    """
    value = value.strip()
    if not value or value == "now":
        return datetime.now().astimezone()
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(value)
    except ValueError as e:
        raise ConfigError(f"Invalid date: {e}") from None
    if dt.tzinfo is None:
        raise ConfigError(f"Invalid date: '{value}' has no timezone information")
    return dt

def parse_phase(value: str, dt: Optional[datetime] = None) -> float:
    """
    Parse the Moon phase.

    Empty means the phase calculated for `dt` (or now), 'NN%' a percentage
    and anything else a fraction. The result must lie in [-1, 1].
    """
    value = value.strip()
    if not value:
        return calculate_phase(dt if dt is not None else datetime.now().astimezone())
    if value.endswith("%"):
        phase = _percent(value, "phase")
    else:
        phase = _to_float(value, "phase")
    if not -1.0 <= phase <= 1.0:
        raise ConfigError(f"Invalid phase: '{value}' must be between -1 and 1 (or -100% and 100%)")
    return phase

def default_stroke_width(width: int, height: int) -> float:
    return max(min(width, height) * STROKE_WIDTH_FRACTION, MIN_STROKE_WIDTH)

def build_projection_config(width: int,
                            height: int,
                            center_x: str = "",
                            center_y: str = "",
                            radius: str = "",
                            rotation: str = "0",
                            libration_latitude: str = "0",
                            libration_longitude: str = "0",
                            phase: str = "",
                            date_time: str = "") -> ProjectionConfig:
    """
    Build a validated ProjectionConfig for an image from public parameter strings.

    Parameters
    ----------
    width, height : int
        Image size in pixels
    center_x, center_y : str
        Disk center, see `parse_center`
    radius : str
        Disk radius, see `parse_radius`
    rotation, libration_latitude, libration_longitude : str
        Angles in degrees
    phase : str
        Phase, see `parse_phase`
    date_time : str
        Time used to calculate the phase when `phase` is empty

    Returns
    -------
    ProjectionConfig

    Raises
    ------
    ConfigError
        If any value cannot be parsed or is out of range
    """
    dt = parse_date_time(date_time) if not phase.strip() else None
    config = ProjectionConfig(
        center_x=parse_center(center_x, width, "center x"),
        center_y=parse_center(center_y, height, "center y"),
        radius=parse_radius(radius, width, height),
        rotation=parse_angle(rotation, "rotation"),
        libration_latitude=parse_angle(libration_latitude, "libration latitude"),
        libration_longitude=parse_angle(libration_longitude, "libration longitude"),
        phase=parse_phase(phase, dt),
        stroke_width=default_stroke_width(width, height)
    )
    try:
        return config.validate()
    except ValueError as e:
        raise ConfigError(str(e)) from None
