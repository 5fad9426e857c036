"""Translate pointer events into selection, dragging and scoring."""

from __future__ import annotations

import logging
import math
from typing import Optional

from .catalog import EntityKind
from .game import Entity, ScoreOutcome
from .geometry import Point, distance, menu_entry_contains, nearest
from .session import GameSession

logger = logging.getLogger(__name__)


class PointerRouter:
    """Routes raw pointer events to a :class:`GameSession`.

    Every event is handled on its own; simultaneous pointers simply produce
    interleaved calls.
    """

    def __init__(self, session: GameSession):
        self.session = session

    @property
    def _selection_radius(self) -> float:
        return self.session.reference_width / math.sqrt(2)

    def pointer_down(self, point: Point) -> Optional[Entity]:
        grabbed = None
        candidate = nearest(self.session.state.movers(selected=False), point)
        if candidate is not None and distance(candidate.position, point) < self._selection_radius:
            candidate.selected = True
            candidate.position = point
            grabbed = candidate

        width = self.session.reference_width
        for entry in self.session.state.of_kind(EntityKind.MENU_ENTRY):
            if menu_entry_contains(entry.position, width, point):
                logger.debug("Menu entry %r selected", entry.label)
                self.session.select_stage(entry.index)
                break
        return grabbed

    def pointer_move(self, point: Point) -> Optional[Entity]:
        # Dragging tolerates a full reference width so fast fingers keep the piece.
        candidate = nearest(self.session.state.movers(selected=True), point)
        if candidate is None:
            return None
        if distance(candidate.position, point) < self.session.reference_width:
            candidate.position = point
            return candidate
        return None

    def pointer_up(self, point: Point) -> Optional[ScoreOutcome]:
        candidate = nearest(self.session.state.movers(selected=True), point)
        if candidate is None:
            return None
        if distance(candidate.position, point) >= self._selection_radius:
            return None
        return self.session.release_mover(candidate, point)

    pointer_cancel = pointer_up
