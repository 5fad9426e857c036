"""Pygame drawing helpers for a Harmony Glide session.

Rendering only reads session state, so it can be exercised in automated
tests using the SDL ``dummy`` video driver.
"""

from __future__ import annotations

from typing import Callable, Dict, List, Optional, Tuple

from ..catalog import EntityKind
from ..game import Entity
from ..session import GameSession
from . import layout


# Every UI module reaches pygame through ``ensure_pygame`` so test
# environments can select the SDL drivers before the first import.
_PYGAME = None


def ensure_pygame():
    global _PYGAME
    if _PYGAME is None:
        _PYGAME = __import__("pygame")
        _PYGAME.font.init()
    return _PYGAME


AlphaLookup = Callable[[Entity], int]


def _opaque(entity: Entity) -> int:
    return 255


def wrap_text(text: str, font, max_width: int) -> List[str]:
    """Greedy word wrap using the font's rendered widths."""

    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}".strip()
        if current and font.size(candidate)[0] > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


class SceneRenderer:
    """Draws every entity of a session onto a pygame surface."""

    def __init__(
        self,
        surface,
        *,
        alpha_for: Optional[AlphaLookup] = None,
    ) -> None:
        pygame = ensure_pygame()
        self.surface = surface
        self.transform = layout.SceneTransform(surface.get_size())
        self.alpha_for = alpha_for or _opaque
        self.label_font = pygame.font.Font(None, layout.LABEL_FONT_SIZE)
        self.banner_font = pygame.font.Font(None, layout.BANNER_FONT_SIZE)
        self._text_cache: Dict[Tuple[str, int], object] = {}

    def render(self, session: GameSession):
        self.surface.fill(layout.BACKGROUND_COLOR)
        width = session.reference_width
        for kind_name in layout.DRAW_ORDER:
            kind = EntityKind(kind_name)
            for entity in session.state.of_kind(kind):
                self.draw_entity(entity, width)
        return self.surface

    def draw_entity(self, entity: Entity, width: float) -> None:
        pygame = ensure_pygame()
        alpha = self.alpha_for(entity)
        if alpha <= 0:
            return
        if alpha >= 255:
            target = self.surface
        else:
            target = pygame.Surface(self.surface.get_size(), pygame.SRCALPHA)

        drawer = {
            EntityKind.MOVER: self._draw_mover,
            EntityKind.GOAL: self._draw_goal,
            EntityKind.TRACKER: self._draw_tracker,
            EntityKind.MENU_ENTRY: self._draw_menu_entry,
            EntityKind.DESCRIPTION: self._draw_description,
        }[entity.kind]
        drawer(target, entity, width)

        if target is not self.surface:
            target.set_alpha(alpha)
            self.surface.blit(target, (0, 0))

    # ------------------------------------------------------------------
    # Shapes

    def _box(self, entity: Entity, box_width: float, box_height: float):
        pygame = ensure_pygame()
        rect = pygame.Rect(0, 0, int(box_width), int(box_height))
        rect.center = self.transform.scene_to_screen(entity.position)
        return rect

    def _draw_mover(self, target, entity: Entity, width: float) -> None:
        pygame = ensure_pygame()
        rect = self._box(entity, width, width)
        radius = int(width * layout.MOVER_CORNER_RATIO)
        pygame.draw.rect(target, layout.PALETTE[entity.color], rect, border_radius=radius)
        outline = layout.OUTLINE_COLOR
        if entity.selected:
            outline = layout.PALETTE[entity.color]
        pygame.draw.rect(target, outline, rect, layout.LINE_WIDTH, border_radius=radius)

    def _draw_goal(self, target, entity: Entity, width: float) -> None:
        pygame = ensure_pygame()
        center = self.transform.scene_to_screen(entity.position)
        color = layout.PALETTE[entity.color]
        pygame.draw.circle(target, color, center, int(width), layout.LINE_WIDTH)
        for ring in range(1, (entity.remaining_depth or 0) + 1):
            radius = int(width - layout.RING_SPACING * ring)
            if radius <= layout.LINE_WIDTH:
                break
            pygame.draw.circle(target, color, center, radius, layout.LINE_WIDTH)

    def _draw_tracker(self, target, entity: Entity, width: float) -> None:
        pygame = ensure_pygame()
        center = self.transform.scene_to_screen(entity.position)
        radius = max(2, int(width * layout.TRACKER_RADIUS_RATIO))
        if entity.passed:
            pygame.draw.circle(target, layout.TRACKER_PASSED_COLOR, center, radius)
        pygame.draw.circle(target, layout.OUTLINE_COLOR, center, radius, layout.LINE_WIDTH)

    def _draw_menu_entry(self, target, entity: Entity, width: float) -> None:
        pygame = ensure_pygame()
        rect = self._box(entity, width * 3.0, width)
        radius = int(width * layout.MOVER_CORNER_RATIO)
        pygame.draw.rect(target, layout.OUTLINE_COLOR, rect, layout.LINE_WIDTH, border_radius=radius)
        if entity.label:
            text = self._text(entity.label, self.label_font)
            target.blit(text, text.get_rect(center=rect.center))
        if entity.done:
            mark = self._text(layout.DONE_MARK, self.label_font)
            mark_rect = mark.get_rect()
            mark_rect.midright = (int(rect.centerx + width * 1.25), rect.centery)
            target.blit(mark, mark_rect)

    def _draw_description(self, target, entity: Entity, width: float) -> None:
        if not entity.label:
            return
        top = self.transform.scene_to_screen(
            (entity.position[0], entity.position[1] + width * 4.0)
        )
        y = top[1]
        for line in wrap_text(entity.label, self.banner_font, int(width * 7.0)):
            text = self._text(line, self.banner_font)
            line_rect = text.get_rect()
            line_rect.midtop = (top[0], y)
            target.blit(text, line_rect)
            y = line_rect.bottom + 4

    def _text(self, text: str, font):
        key = (text, id(font))
        cached = self._text_cache.get(key)
        if cached is None:
            cached = font.render(text, True, layout.TEXT_COLOR)
            self._text_cache[key] = cached
        return cached


__all__ = ["SceneRenderer", "ensure_pygame", "wrap_text"]
