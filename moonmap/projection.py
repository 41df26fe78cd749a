import math
from typing import Optional

import numpy as np

from moonmap.types import CartesianPoint, PolarPoint, ProjectionConfig

# Longitude 0 faces the viewer: the reference meridian is shifted by a quarter turn
MERIDIAN_OFFSET = 90.0

def _effective_angles(latitude, longitude, config: ProjectionConfig):
    eff_lat = -latitude - config.libration_latitude
    eff_lon = longitude + MERIDIAN_OFFSET + config.libration_longitude
    return eff_lat, eff_lon

def rotate_point(point: CartesianPoint, degrees: float, center_x: float = 0.0, center_y: float = 0.0) -> CartesianPoint:
    """Rotate an absolute pixel point around (center_x, center_y)."""
    polar = CartesianPoint(point.x - center_x, point.y - center_y).to_polar()
    rotated = PolarPoint(polar.radius, polar.angle + math.radians(degrees)).to_cartesian()
    return CartesianPoint(rotated.x + center_x, rotated.y + center_y)

def project(latitude: float, longitude: float, config: ProjectionConfig) -> CartesianPoint:
    """
    Project selenographic coordinates onto the image.

    Orthographic projection of the Moon sphere as seen from Earth, shifted by
    the libration, rotated by the in-plane rotation and translated to the disk
    center. Points on the far hemisphere are not hidden, they land on their
    mirror position inside the disk.

    Parameters
    ----------
    latitude, longitude : float
        Selenographic coordinates in degrees
    config : ProjectionConfig
        Disk placement and libration

    Returns
    -------
    CartesianPoint
        Absolute pixel position, not rounded
    """
    eff_lat, eff_lon = _effective_angles(latitude, longitude, config)
    lat_rad = math.radians(eff_lat)
    lon_rad = math.radians(eff_lon)

    x = config.radius * math.cos(lat_rad) * math.cos(lon_rad)
    z = config.radius * math.sin(lat_rad)
    point = CartesianPoint(x, z)

    if config.rotation != 0.0:
        polar = point.to_polar()
        point = PolarPoint(polar.radius, polar.angle + math.radians(config.rotation)).to_cartesian()

    return CartesianPoint(point.x + config.center_x, point.y + config.center_y)

def project_array(latitudes, longitudes, config: ProjectionConfig) -> np.ndarray:
    """
    Vectorised ``project``.

    Latitudes and longitudes are broadcast against each other.

    Returns
    -------
    np.ndarray
        Array of shape (N, 2) with x, y pixel positions
    """
    latitudes = np.asarray(latitudes, dtype=np.float64)
    longitudes = np.asarray(longitudes, dtype=np.float64)
    eff_lat, eff_lon = _effective_angles(latitudes, longitudes, config)
    lat_rad = np.radians(eff_lat)
    lon_rad = np.radians(eff_lon)

    x = config.radius * np.cos(lat_rad) * np.cos(lon_rad)
    z = config.radius * np.sin(lat_rad)

    if config.rotation != 0.0:
        r = np.hypot(x, z)
        angle = np.arctan2(z, x) + math.radians(config.rotation)
        x = r * np.cos(angle)
        z = r * np.sin(angle)

    x, z = np.broadcast_arrays(x, z)
    return np.column_stack((x.ravel() + config.center_x, z.ravel() + config.center_y))

def is_near_side(latitude: float, longitude: float, config: ProjectionConfig) -> bool:
    """True if the point lies on the hemisphere facing the viewer (depth component >= 0)."""
    eff_lat, eff_lon = _effective_angles(latitude, longitude, config)
    depth = math.cos(math.radians(eff_lat)) * math.sin(math.radians(eff_lon))
    return depth >= 0.0

def unproject(x: float, y: float, config: ProjectionConfig) -> Optional[tuple]:
    """
    Convert a pixel position back to selenographic coordinates.

    The near-side solution is returned, so ``unproject(project(lat, lon))``
    gives back (lat, lon) for every visible point.

    Returns
    -------
    tuple
        (latitude, longitude) in degrees, or None if the pixel is outside the disk
    """
    point = CartesianPoint(x - config.center_x, y - config.center_y)
    polar = point.to_polar()
    if polar.radius > config.radius:
        return None
    if config.rotation != 0.0:
        point = PolarPoint(polar.radius, polar.angle - math.radians(config.rotation)).to_cartesian()

    sin_lat = np.clip(point.y / config.radius, -1.0, 1.0)
    eff_lat = math.asin(sin_lat)
    cos_lat = math.cos(eff_lat)
    if cos_lat < 1e-12:
        eff_lon = math.pi / 2
    else:
        eff_lon = math.acos(np.clip(point.x / (config.radius * cos_lat), -1.0, 1.0))

    latitude = -math.degrees(eff_lat) - config.libration_latitude
    longitude = math.degrees(eff_lon) - MERIDIAN_OFFSET - config.libration_longitude
    return latitude, longitude
