"""Scene geometry helpers.

Scene coordinates are centered on the middle of the view with the y axis
pointing up. All distances scale with the *reference width*, a single scalar
derived from the view size.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, TypeVar

from .config import DEFAULT_CONFIG, GameConfig

Point = Tuple[float, float]

T = TypeVar("T")


@dataclass(frozen=True)
class Viewport:
    """Scene size reported once by the platform at startup."""

    width: float
    height: float
    config: GameConfig = DEFAULT_CONFIG

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Viewport size must be positive, got {self.width}x{self.height}")

    @property
    def reference_width(self) -> float:
        return (self.width + self.height) * self.config.reference_scale

    @property
    def half_extents(self) -> Point:
        sx, sy = self.config.play_area_scale
        width = self.reference_width
        return (sx * width, sy * width)


def distance(a: Point, b: Point) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def nearest(items: Iterable[T], point: Point) -> Optional[T]:
    """Return the item whose ``position`` is closest to *point*.

    Ties keep the first item encountered in iteration order.
    """

    best: Optional[T] = None
    best_distance = math.inf
    for item in items:
        item_distance = distance(item.position, point)  # type: ignore[attr-defined]
        if item_distance < best_distance:
            best = item
            best_distance = item_distance
    return best


def menu_entry_positions(count: int, reference_width: float) -> List[Point]:
    """Stage entries alternate between a left and right column."""

    spacing = reference_width
    half_spacing = spacing / 2.0 + 10.0
    positions: List[Point] = []
    for index in range(count):
        x = (-1) ** index * (-1.5 * spacing - 10.0)
        y = -(half_spacing * index - half_spacing * (count - 1) / 2.0 + 70.0)
        positions.append((x, y))
    return positions


def tracker_positions(count: int, reference_width: float, row_height: float) -> List[Point]:
    """One tracker per level, centered in a row above the play area."""

    y = row_height * reference_width
    return [
        (reference_width * index - reference_width * (count - 1) / 2.0, y)
        for index in range(count)
    ]


def menu_entry_contains(center: Point, reference_width: float, point: Point) -> bool:
    """Hit test for a menu entry, a 3w x w box around *center*."""

    half_width = reference_width * 1.5
    half_height = reference_width / 2.0
    return (
        abs(point[0] - center[0]) <= half_width
        and abs(point[1] - center[1]) <= half_height
    )
