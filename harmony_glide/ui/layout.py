"""Layout constants for the Harmony Glide UI."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple

from ..catalog import Color

RGB = Tuple[int, int, int]

DEFAULT_WINDOW_SIZE: Tuple[int, int] = (540, 960)

# Stroke and ring metrics
LINE_WIDTH: int = 3
RING_SPACING: float = 5.0
MOVER_CORNER_RATIO: float = 0.3
TRACKER_RADIUS_RATIO: float = 1.0 / 6.0

# Font sizes
LABEL_FONT_SIZE: int = 32
BANNER_FONT_SIZE: int = 30

# Colors expressed as RGB tuples
BACKGROUND_COLOR: RGB = (0, 0, 0)
TEXT_COLOR: RGB = (255, 255, 255)
OUTLINE_COLOR: RGB = (255, 255, 255)
TRACKER_PASSED_COLOR: RGB = (255, 255, 255)

PALETTE: Dict[Color, RGB] = {
    Color.RED: (255, 59, 48),
    Color.BLUE: (0, 122, 255),
    Color.ORANGE: (255, 149, 0),
    Color.GREEN: (52, 199, 89),
}

DONE_MARK = "✔"

# Rendering order, back to front
DRAW_ORDER = ("description", "tracker", "menu_entry", "goal", "mover")


@dataclass(frozen=True)
class SceneTransform:
    """Maps centered, y-up scene coordinates onto window pixels."""

    window: Tuple[int, int]

    @property
    def origin(self) -> Tuple[float, float]:
        return (self.window[0] / 2.0, self.window[1] / 2.0)

    def scene_to_screen(self, point: Tuple[float, float]) -> Tuple[int, int]:
        ox, oy = self.origin
        return (int(round(ox + point[0])), int(round(oy - point[1])))

    def screen_to_scene(self, pixel: Tuple[float, float]) -> Tuple[float, float]:
        ox, oy = self.origin
        return (float(pixel[0]) - ox, oy - float(pixel[1]))

    def normalized_to_scene(self, x: float, y: float) -> Tuple[float, float]:
        """Convert pygame finger coordinates (0..1 on both axes)."""

        return self.screen_to_scene((x * self.window[0], y * self.window[1]))
