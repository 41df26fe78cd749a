from typing import Callable, Iterable

import cv2
import numpy as np

from moonmap.moon_grid import create_moon_grid, line_segments
from moonmap.projection import project
from moonmap.types import CartesianPoint, Color, MoonGrid, PointOfInterest, PointType, ProjectionConfig

FONT_FACE = cv2.FONT_HERSHEY_SIMPLEX
SHADOW_DIRECTIONS = ((-1, -1), (-1, 1), (1, -1), (1, 1))

def pixel(point) -> tuple:
    """Truncate a projected point to integer pixel coordinates."""
    return int(point[0]), int(point[1])

def line_thickness(config: ProjectionConfig) -> int:
    return max(1, int(round(config.stroke_width)))

def font_scale(config: ProjectionConfig) -> float:
    return cv2.getFontScaleFromHeight(FONT_FACE, max(1, config.font_size), line_thickness(config))

def label_origin(point: CartesianPoint) -> tuple:
    """Bottom-left corner of a label anchored at `point`."""
    return pixel(point)

def _draw_color(color: Color, channels: int) -> tuple:
    r, g, b, _ = (int(c) for c in color)
    if channels == 4:
        return b, g, r, 255
    return b, g, r

def draw_with_color(canvas: np.ndarray, color: Color, draw: Callable[[np.ndarray, object], None]):
    """
    Run `draw(target, draw_color)` so that its result lands on `canvas` in `color`.

    Opaque colors are drawn directly. Translucent colors are drawn into a
    coverage mask first and blended over the canvas with the color's alpha.
    """
    alpha = int(color[3])
    if alpha <= 0:
        return
    draw_color = _draw_color(color, canvas.shape[2])
    if alpha >= 255:
        draw(canvas, draw_color)
        return

    mask = np.zeros(canvas.shape[:2], dtype=np.uint8)
    draw(mask, 255)
    covered = mask > 0
    weight = mask[covered].astype(np.float32)[:, None] * (alpha / (255.0 * 255.0))
    blended = canvas[covered] * (1.0 - weight) + np.array(draw_color, dtype=np.float32) * weight
    canvas[covered] = np.clip(np.round(blended), 0, 255).astype(np.uint8)

def draw_disk_boundary(canvas: np.ndarray, config: ProjectionConfig):
    def draw(target, color):
        cv2.circle(target, (int(config.center_x), int(config.center_y)), int(config.radius), color,
                   line_thickness(config), cv2.LINE_AA)
    draw_with_color(canvas, config.grid_color, draw)

def draw_lines(canvas: np.ndarray, lines: list, color: Color, config: ProjectionConfig):
    thickness = line_thickness(config)

    def draw(target, draw_color):
        for line in lines:
            for begin, end in line_segments(line):
                cv2.line(target, pixel(begin), pixel(end), draw_color, thickness, cv2.LINE_AA)
    draw_with_color(canvas, color, draw)

def draw_label(canvas: np.ndarray, text: str, point: CartesianPoint, color: Color, config: ProjectionConfig):
    """
    Draw a label with a shadow.

    The text is first drawn four times in the shadow color, shifted diagonally
    by font_size // 20 pixels in every direction, then once in its own color.
    Every pass is blended on its own, so a translucent shadow darkens where
    passes overlap.
    """
    x, y = label_origin(point)
    step = config.font_size // 20
    scale = font_scale(config)
    thickness = line_thickness(config)

    def text_pass(origin):
        def draw(target, draw_color):
            cv2.putText(target, text, origin, FONT_FACE, scale, draw_color, thickness, cv2.LINE_AA)
        return draw

    for dx, dy in SHADOW_DIRECTIONS:
        draw_with_color(canvas, config.shadow_color, text_pass((x + dx * step, y + dy * step)))
    draw_with_color(canvas, color, text_pass((x, y)))

def draw_grid(canvas: np.ndarray, grid: MoonGrid, config: ProjectionConfig):
    draw_lines(canvas, grid.lat_lines + grid.lon_lines, config.grid_color, config)
    for label in grid.lat_labels + grid.lon_labels:
        draw_label(canvas, label.text, label.position, config.grid_label_color, config)

def draw_point_of_interest(canvas: np.ndarray, point: PointOfInterest, config: ProjectionConfig):
    """Craters get a marker dot and a label, maria only a label."""
    position = project(point.latitude, point.longitude, config)
    if point.point_type == PointType.Crater:
        color = config.crater_label_color
        marker_radius = config.font_size // 10

        def draw_marker(target, draw_color):
            cv2.circle(target, pixel(position), marker_radius, draw_color, cv2.FILLED, cv2.LINE_AA)
        draw_with_color(canvas, color, draw_marker)
    else:
        color = config.mare_label_color
    draw_label(canvas, point.name, position, color, config)

def draw_overlay(canvas: np.ndarray, config: ProjectionConfig, points: Iterable[PointOfInterest] = ()):
    """
    Draw the overlay directly onto `canvas` (in place).

    Order: disk boundary, grid lines and labels, terminator, points of
    interest. Larger features are drawn first so labels of small features
    stay on top.
    """
    grid = create_moon_grid(config)
    draw_disk_boundary(canvas, config)
    draw_grid(canvas, grid, config)
    draw_lines(canvas, [grid.terminator], config.phase_color, config)
    for point in sorted(points, key=lambda p: (-p.diameter, p.name)):
        draw_point_of_interest(canvas, point, config)

def render(image: np.ndarray, config: ProjectionConfig, points: Iterable[PointOfInterest] = ()) -> np.ndarray:
    """
    Render the overlay onto a copy of the image.

    Parameters
    ----------
    image : np.ndarray
        8-bit image in OpenCV channel order, shape (H, W), (H, W, 3) or (H, W, 4).
        Grayscale images are converted to BGR.
    config : ProjectionConfig
        Projection and colors, validated before anything is drawn
    points : iterable of PointOfInterest
        Maria and craters to label

    Returns
    -------
    np.ndarray
        New image with the same width and height; `image` is not modified
    """
    config.validate()
    if image.dtype != np.uint8:
        raise ValueError(f"Unsupported image type {image.dtype}, 8-bit image expected")
    if image.ndim == 2:
        output = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    elif image.ndim == 3 and image.shape[2] in (3, 4):
        output = np.array(image, copy=True, order='C')
    else:
        raise ValueError(f"Unsupported image shape {image.shape}")

    draw_overlay(output, config, points)
    return output
