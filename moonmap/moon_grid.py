import numpy as np

from moonmap.projection import project
from moonmap.projection import project_array
from moonmap.types import GridLabel, MoonGrid, ProjectionConfig

GRID_LINE_STEP = 10     # degrees between grid lines
GRID_SAMPLE_STEP = 2    # degrees between polyline vertices
GRID_LIMIT = 90

def _samples(step: int) -> np.ndarray:
    return np.arange(-GRID_LIMIT, GRID_LIMIT + 1, step, dtype=np.float64)

def create_latitude_line(latitude: float, config: ProjectionConfig, sample_step: int = GRID_SAMPLE_STEP) -> np.ndarray:
    """Parallel at `latitude`, sampled from longitude -90 to 90."""
    return project_array(latitude, _samples(sample_step), config)

def create_longitude_line(longitude: float, config: ProjectionConfig, sample_step: int = GRID_SAMPLE_STEP) -> np.ndarray:
    """Meridian at `longitude`, sampled from latitude -90 to 90."""
    return project_array(_samples(sample_step), longitude, config)

def terminator_longitude(phase: float) -> float:
    return phase * 180.0 + 90.0

def create_terminator_line(config: ProjectionConfig, sample_step: int = GRID_SAMPLE_STEP) -> np.ndarray:
    """
    Day/night boundary for the phase of the config.

    Drawn like a meridian at longitude phase * 180 + 90, so phase -1 and 1
    both put it at the limb and phase 0 at longitude 90.
    """
    return create_longitude_line(terminator_longitude(config.phase), config, sample_step)

def line_segments(line: np.ndarray):
    """Yield (begin, end) vertex pairs of a polyline."""
    for i in range(1, len(line)):
        yield line[i - 1], line[i]

def create_moon_grid(config: ProjectionConfig,
                     line_step: int = GRID_LINE_STEP,
                     sample_step: int = GRID_SAMPLE_STEP) -> MoonGrid:
    """
    Create the selenographic coordinate grid projected for one config.

    Only the central -90..90 degree band of longitudes is sampled, which keeps
    the grid on the near hemisphere without any visibility test.

    Parameters
    ----------
    config : ProjectionConfig
        Disk placement, libration and phase
    line_step : int
        Spacing between grid lines in degrees
    sample_step : int
        Spacing between vertices along a line in degrees (smaller = smoother)

    Returns
    -------
    MoonGrid
        Projected parallels, meridians, their labels and the terminator
    """
    lat_lines = []
    lat_labels = []
    for latitude in range(-GRID_LIMIT, GRID_LIMIT + 1, line_step):
        lat_lines.append(create_latitude_line(latitude, config, sample_step))
        # Labeled at the westmost sample
        lat_labels.append(GridLabel(text=str(latitude),
                                    latitude=float(latitude),
                                    longitude=float(-GRID_LIMIT),
                                    position=project(latitude, -GRID_LIMIT, config)))

    lon_lines = []
    lon_labels = []
    for longitude in range(-GRID_LIMIT, GRID_LIMIT + 1, line_step):
        lon_lines.append(create_longitude_line(longitude, config, sample_step))
        lon_labels.append(GridLabel(text=str(longitude),
                                    latitude=0.0,
                                    longitude=float(longitude),
                                    position=project(0, longitude, config)))

    return MoonGrid(
        lat_lines=lat_lines,
        lon_lines=lon_lines,
        lat_labels=lat_labels,
        lon_labels=lon_labels,
        terminator=create_terminator_line(config, sample_step)
    )
