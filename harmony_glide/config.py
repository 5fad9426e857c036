"""Tunable constants shared by the game core and the UI."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple


@dataclass(frozen=True)
class GameConfig:
    # Reference width as a fraction of (view width + view height).
    reference_scale: float = 0.05
    # Half extents of the play area in reference widths.
    play_area_scale: Tuple[float, float] = (2.5, 3.5)
    # Minimum center distance between freshly placed pieces, in reference widths.
    placement_separation: float = 1.5
    max_placement_attempts: int = 500
    # Height of the tracker row above the play area, in reference widths.
    tracker_row_height: float = 4.5
    discard_pause: float = 1.0
    discard_fade: float = 1.0
    chord_note_delay: float = 0.1

    def __post_init__(self) -> None:
        if self.reference_scale <= 0:
            raise ValueError("reference_scale must be positive")
        if min(self.play_area_scale) <= 0:
            raise ValueError("play_area_scale components must be positive")
        if self.placement_separation < 0:
            raise ValueError("placement_separation must not be negative")
        if self.max_placement_attempts < 1:
            raise ValueError("max_placement_attempts must be at least 1")

    def with_overrides(self, **changes) -> "GameConfig":
        return replace(self, **changes)


DEFAULT_CONFIG = GameConfig()
