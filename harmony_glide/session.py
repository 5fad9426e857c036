"""Stage and level progression for a single play session."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Iterable, List, Optional, Set

from .catalog import DEFAULT_CATALOG, MENU_TITLE, EntityKind, GameCatalog
from .config import DEFAULT_CONFIG, GameConfig
from .game import Entity, GoalMatcher, MotionIntegrator, ScoreOutcome, SpatialPlacer
from .geometry import Point, Viewport, menu_entry_positions, tracker_positions

logger = logging.getLogger(__name__)


class Mode(Enum):
    MENU = "menu"
    PLAYING = "playing"


@dataclass
class SessionState:
    """Everything that changes while the game runs.

    ``stage_index`` and ``level_index`` are ``None`` exactly while the menu is
    shown. ``entities`` is replaced on every level, stage and menu change.
    """

    mode: Mode = Mode.MENU
    stage_index: Optional[int] = None
    level_index: Optional[int] = None
    completed_stages: Set[int] = field(default_factory=set)
    entities: List[Entity] = field(default_factory=list)
    half_extents: Optional[Point] = None

    def of_kind(self, kind: EntityKind) -> List[Entity]:
        return [entity for entity in self.entities if entity.kind is kind]

    def movers(self, selected: Optional[bool] = None) -> List[Entity]:
        movers = self.of_kind(EntityKind.MOVER)
        if selected is None:
            return movers
        return [entity for entity in movers if entity.selected is selected]

    def goals(self) -> List[Entity]:
        return self.of_kind(EntityKind.GOAL)

    def open_goal_count(self) -> int:
        """Goals still in play; a goal authored at depth 0 needs its one hit."""

        return sum(1 for goal in self.goals() if not goal.cleared)


class SessionListener:
    """Receives presentation notifications from a :class:`GameSession`.

    Subclasses override the hooks they care about.
    """

    def entity_added(self, entity: Entity) -> None:
        ...

    def entity_removed(self, entity: Entity) -> None:
        ...

    def depth_changed(self, goal: Entity) -> None:
        ...

    def goal_scored(self, goal: Entity, cue: int) -> None:
        ...

    def tracker_passed(self, tracker: Entity) -> None:
        ...

    def stage_completed(self, stage_index: int) -> None:
        ...


class DiscardJoin:
    """Runs a callback once after every entered task has left.

    Tasks may leave synchronously while they are still being entered, so the
    callback only becomes eligible after :meth:`seal`. Each token returned by
    :meth:`enter` counts once no matter how often it is called.
    """

    def __init__(self, on_complete: Callable[[], None]):
        self._on_complete = on_complete
        self._pending = 0
        self._sealed = False
        self.fired = False

    @property
    def pending(self) -> int:
        return self._pending

    def enter(self) -> Callable[[], None]:
        if self._sealed:
            raise RuntimeError("Cannot enter a sealed join")
        self._pending += 1
        left = False

        def leave() -> None:
            nonlocal left
            if left:
                return
            left = True
            self._pending -= 1
            self._maybe_fire()

        return leave

    def seal(self) -> None:
        self._sealed = True
        self._maybe_fire()

    def _maybe_fire(self) -> None:
        if self._sealed and self._pending == 0 and not self.fired:
            self.fired = True
            self._on_complete()


DiscardScheduler = Callable[[Entity, Callable[[], None]], None]


def immediate_discard(entity: Entity, done: Callable[[], None]) -> None:
    done()


class GameSession:
    """State machine driving menu, stage and level transitions."""

    def __init__(
        self,
        catalog: GameCatalog = DEFAULT_CATALOG,
        viewport: Optional[Viewport] = None,
        *,
        config: Optional[GameConfig] = None,
        rng: Optional[random.Random] = None,
        discard_scheduler: Optional[DiscardScheduler] = None,
    ) -> None:
        self.catalog = catalog
        self.config = config or (viewport.config if viewport else DEFAULT_CONFIG)
        self.rng = rng or random.Random()
        self.discard_scheduler: DiscardScheduler = discard_scheduler or immediate_discard
        self.state = SessionState()
        self.listeners: List[SessionListener] = []
        self.viewport: Optional[Viewport] = None
        self.placer: Optional[SpatialPlacer] = None
        self.integrator: Optional[MotionIntegrator] = None
        self.matcher: Optional[GoalMatcher] = None
        self._transition: Optional[DiscardJoin] = None
        if viewport is not None:
            self.configure_viewport(viewport)

    # ------------------------------------------------------------------
    # Setup

    def configure_viewport(self, viewport: Viewport) -> None:
        if self.viewport is not None:
            raise RuntimeError("The viewport is configured once per session")
        self.viewport = viewport
        half_extents = viewport.half_extents
        self.state.half_extents = half_extents
        self.placer = SpatialPlacer(
            half_extents,
            max_attempts=self.config.max_placement_attempts,
            rng=self.rng,
        )
        self.integrator = MotionIntegrator(half_extents)
        self.matcher = GoalMatcher(
            viewport.reference_width,
            self.placer,
            separation=self.config.placement_separation,
        )
        logger.debug(
            "Viewport %sx%s: reference width %.1f, play area +/-%.1f x +/-%.1f",
            viewport.width,
            viewport.height,
            viewport.reference_width,
            *half_extents,
        )

    @property
    def reference_width(self) -> float:
        return self._require_viewport().reference_width

    @property
    def transition_pending(self) -> bool:
        return self._transition is not None

    def add_listener(self, listener: SessionListener) -> None:
        self.listeners.append(listener)

    def start(self) -> None:
        self.start_menu()

    # ------------------------------------------------------------------
    # Menu

    def start_menu(self) -> None:
        viewport = self._require_viewport()
        self._clear_entities()
        self.state.mode = Mode.MENU
        self.state.stage_index = None
        self.state.level_index = None

        self._add(Entity(kind=EntityKind.DESCRIPTION, label=MENU_TITLE))
        positions = menu_entry_positions(self.catalog.stage_count, viewport.reference_width)
        for stage_index, position in enumerate(positions):
            self._add(
                Entity(
                    kind=EntityKind.MENU_ENTRY,
                    position=position,
                    label=self.catalog.stage_name(stage_index),
                    done=stage_index in self.state.completed_stages,
                    index=stage_index,
                )
            )
        logger.info("Showing menu with %d stages", self.catalog.stage_count)

    def select_stage(self, stage_index: int) -> None:
        self._require_viewport()
        if self.state.mode is not Mode.MENU:
            raise RuntimeError("A stage can only be selected from the menu")
        self.catalog.stage(stage_index)
        self._remove_kinds(EntityKind.MENU_ENTRY, EntityKind.DESCRIPTION)
        self.state.mode = Mode.PLAYING
        self.state.stage_index = stage_index
        self.state.level_index = 0
        self._start_stage()

    # ------------------------------------------------------------------
    # Stage and level lifecycle

    def _start_stage(self) -> None:
        stage_index = self.state.stage_index
        assert stage_index is not None
        stage = self.catalog.stage(stage_index)
        width = self.reference_width
        logger.info("Starting stage %d (%s)", stage_index, stage.name)

        for level_index, position in enumerate(
            tracker_positions(stage.level_count, width, self.config.tracker_row_height)
        ):
            self._add(Entity(kind=EntityKind.TRACKER, position=position, index=level_index))
        if stage.description:
            self._add(Entity(kind=EntityKind.DESCRIPTION, label=stage.description))
        self.start_level()

    def start_level(self) -> None:
        self._require_viewport()
        if self.state.stage_index is None:
            raise RuntimeError("No stage selected")
        if self.state.level_index is None:
            self.state.level_index = 0
        blueprints = self.catalog.level(self.state.stage_index, self.state.level_index)
        assert self.placer is not None
        min_distance = self.config.placement_separation * self.reference_width
        for blueprint in blueprints:
            entity = Entity.from_blueprint(blueprint, self.rng)
            if blueprint.position is None:
                entity.position = self.placer.place(min_distance, self.state.entities)
            self._add(entity)
        logger.info(
            "Level %d/%d of stage %d: %d goals",
            self.state.level_index + 1,
            self.catalog.level_count(self.state.stage_index),
            self.state.stage_index,
            len(self.state.goals()),
        )

    def check_level_complete(self) -> bool:
        """Start the level transition once every goal has been cleared."""

        if self.state.mode is not Mode.PLAYING or self._transition is not None:
            return False
        if self.state.open_goal_count() > 0:
            return False

        level_index = self.state.level_index or 0
        for tracker in self.state.of_kind(EntityKind.TRACKER):
            if tracker.index == level_index:
                tracker.passed = True
                self._notify("tracker_passed", tracker)

        join = DiscardJoin(self._finish_level)
        self._transition = join
        for mover in self.state.movers():
            self.discard_scheduler(mover, self._discard_callback(mover, join.enter()))
        join.seal()
        return True

    def _discard_callback(self, mover: Entity, leave: Callable[[], None]) -> Callable[[], None]:
        def done() -> None:
            if mover in self.state.entities:
                self._remove(mover)
            leave()

        return done

    def _finish_level(self) -> None:
        self._transition = None
        stage_index = self.state.stage_index
        assert stage_index is not None
        self._remove_kinds(EntityKind.GOAL, EntityKind.MOVER)
        self.state.level_index = (self.state.level_index or 0) + 1
        if self.state.level_index < self.catalog.level_count(stage_index):
            self.start_level()
        else:
            self._complete_stage(stage_index)

    def _complete_stage(self, stage_index: int) -> None:
        self._remove_kinds(EntityKind.DESCRIPTION, EntityKind.TRACKER)
        self.state.completed_stages.add(stage_index)
        logger.info("Stage %d (%s) complete", stage_index, self.catalog.stage_name(stage_index))
        self._notify("stage_completed", stage_index)
        self.start_menu()

    # ------------------------------------------------------------------
    # Gameplay entry points

    def release_mover(self, mover: Entity, position: Point) -> ScoreOutcome:
        """Drop *mover* at *position* and score on the nearest goal."""

        mover.selected = False
        mover.position = position
        assert self.matcher is not None
        outcome = self.matcher.try_score(position, mover.color, self.state.entities)
        if not outcome.accepted or outcome.goal is None:
            return outcome
        goal = outcome.goal
        self._notify("depth_changed", goal)
        self._notify("goal_scored", goal, outcome.cue)
        if outcome.cleared:
            self._remove(goal)
        self.check_level_complete()
        return outcome

    def tick(self, timestamp: float) -> float:
        if self.integrator is None:
            return 0.0
        return self.integrator.step(self.state.entities, timestamp)

    # ------------------------------------------------------------------
    # Helpers

    def _require_viewport(self) -> Viewport:
        if self.viewport is None:
            raise RuntimeError("The viewport size must be configured first")
        return self.viewport

    def _notify(self, hook: str, *args) -> None:
        for listener in self.listeners:
            getattr(listener, hook)(*args)

    def _add(self, entity: Entity) -> None:
        self.state.entities.append(entity)
        self._notify("entity_added", entity)

    def _remove(self, entity: Entity) -> None:
        self.state.entities.remove(entity)
        self._notify("entity_removed", entity)

    def _remove_all(self, entities: Iterable[Entity]) -> None:
        for entity in list(entities):
            self._remove(entity)

    def _remove_kinds(self, *kinds: EntityKind) -> None:
        self._remove_all(entity for entity in self.state.entities if entity.kind in kinds)

    def _clear_entities(self) -> None:
        self._remove_all(self.state.entities)


__all__ = [
    "DiscardJoin",
    "DiscardScheduler",
    "GameSession",
    "Mode",
    "SessionListener",
    "SessionState",
    "immediate_discard",
]
