import math
from enum import Enum
from typing import NamedTuple

from numpy.typing import NDArray

Color = tuple[int, int, int, int]

GRID_COLOR: Color = (0, 124, 0, 255)
GRID_LABEL_COLOR: Color = (0, 124, 0, 255)
PHASE_COLOR: Color = (0, 255, 0, 255)
MARE_LABEL_COLOR: Color = (0, 255, 0, 255)
CRATER_LABEL_COLOR: Color = (255, 255, 0, 255)
SHADOW_COLOR: Color = (0, 0, 0, 255)

BASE_FONT_SIZE = 12

class PointType(Enum):
    Mare = "mare"
    Crater = "crater"

class PointOfInterest(NamedTuple):
    point_type: PointType
    name: str
    diameter: float
    latitude: float
    longitude: float

class CartesianPoint(NamedTuple):
    x: float
    y: float

    def to_polar(self) -> "PolarPoint":
        return PolarPoint(radius=math.hypot(self.x, self.y), angle=math.atan2(self.y, self.x))

class PolarPoint(NamedTuple):
    radius: float
    angle: float    # radians

    def to_cartesian(self) -> CartesianPoint:
        return CartesianPoint(x=self.radius * math.cos(self.angle), y=self.radius * math.sin(self.angle))

class ProjectionConfig(NamedTuple):
    """
    Everything needed to place selenographic coordinates on one image.

    Angles are in degrees. Colors are RGBA tuples with channel values 0..255.
    A config is a value: build a new one (or use ``_replace``) for every render.
    """
    center_x: int
    center_y: int
    radius: int
    rotation: float = 0.0
    libration_latitude: float = 0.0
    libration_longitude: float = 0.0
    phase: float = 0.0
    stroke_width: float = 1.0
    grid_color: Color = GRID_COLOR
    grid_label_color: Color = GRID_LABEL_COLOR
    phase_color: Color = PHASE_COLOR
    mare_label_color: Color = MARE_LABEL_COLOR
    crater_label_color: Color = CRATER_LABEL_COLOR
    shadow_color: Color = SHADOW_COLOR

    @property
    def font_size(self) -> int:
        return int(BASE_FONT_SIZE * self.stroke_width + 0.5)

    @property
    def colors(self) -> dict:
        return {
            'grid_color': self.grid_color,
            'grid_label_color': self.grid_label_color,
            'phase_color': self.phase_color,
            'mare_label_color': self.mare_label_color,
            'crater_label_color': self.crater_label_color,
            'shadow_color': self.shadow_color
        }

    def validate(self) -> "ProjectionConfig":
        """
        Check the invariants of the config.

        Returns
        -------
        ProjectionConfig
            The config itself, so the call can be chained.

        Raises
        ------
        ValueError
            If radius or stroke width is not positive, phase is outside [-1, 1]
            or a color is not four channel values in 0..255.
        """
        if self.radius <= 0:
            raise ValueError(f"Radius must be positive, got {self.radius}")
        if not -1.0 <= self.phase <= 1.0:
            raise ValueError(f"Phase must be between -1 and 1, got {self.phase}")
        if self.stroke_width <= 0:
            raise ValueError(f"Stroke width must be positive, got {self.stroke_width}")
        for name, color in self.colors.items():
            if len(color) != 4 or any(not 0 <= int(c) <= 255 for c in color):
                raise ValueError(f"{name} must be an RGBA tuple with values 0..255, got {color}")
        return self

class GridLabel(NamedTuple):
    text: str
    latitude: float
    longitude: float
    position: CartesianPoint

class MoonGrid(NamedTuple):
    lat_lines: list[NDArray]
    lon_lines: list[NDArray]
    lat_labels: list[GridLabel]
    lon_labels: list[GridLabel]
    terminator: NDArray
