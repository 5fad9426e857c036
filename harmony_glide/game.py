"""Core game logic: runtime entities, placement, motion and scoring."""

from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from itertools import count
from typing import Iterable, List, Optional

from .catalog import DEFAULT_SPEED, Color, EntityBlueprint, EntityKind, MovementKind
from .geometry import Point, distance, nearest

logger = logging.getLogger(__name__)

GOAL_CUE_COUNT = 10

_entity_ids = count(1)


def random_bounce_velocity(speed: float, rng: random.Random) -> Point:
    """Velocity of magnitude *speed* in a uniformly random direction."""

    angle = 2.0 * math.pi * rng.random()
    return (math.cos(angle) * speed, math.sin(angle) * speed)


@dataclass(eq=False)
class Entity:
    """A placed object on the scene.

    Entities compare by identity: two movers built from equal blueprints are
    still different pieces.
    """

    kind: EntityKind
    color: Color = Color.RED
    position: Point = (0.0, 0.0)
    velocity: Point = (0.0, 0.0)
    movement: MovementKind = MovementKind.NONE
    speed: float = DEFAULT_SPEED
    remaining_depth: Optional[int] = None
    selected: bool = False
    label: Optional[str] = None
    done: bool = False
    passed: bool = False
    # Set on goals by the hit that takes them to depth 0.
    cleared: bool = False
    # Stage index of a menu entry, level index of a tracker.
    index: Optional[int] = None
    blueprint: Optional[EntityBlueprint] = None
    uid: int = field(default_factory=lambda: next(_entity_ids))

    @classmethod
    def from_blueprint(
        cls, blueprint: EntityBlueprint, rng: Optional[random.Random] = None
    ) -> "Entity":
        entity = cls(
            kind=blueprint.kind,
            color=blueprint.color,
            position=blueprint.position or (0.0, 0.0),
            movement=blueprint.movement,
            speed=blueprint.speed,
            label=blueprint.label,
            done=blueprint.done,
            blueprint=blueprint,
        )
        if blueprint.kind is EntityKind.GOAL:
            entity.remaining_depth = blueprint.goal_depth or 0
        entity.reset_movement(rng or random.Random())
        return entity

    def reset_movement(self, rng: random.Random) -> None:
        if self.movement is MovementKind.BOUNCE:
            self.velocity = random_bounce_velocity(self.speed, rng)

    @property
    def is_goal(self) -> bool:
        return self.kind is EntityKind.GOAL

    @property
    def is_mover(self) -> bool:
        return self.kind is EntityKind.MOVER


class SpatialPlacer:
    """Rejection sampler for non-overlapping positions.

    Candidates are drawn uniformly from the rectangle ``[-hx, hx] x [-hy, hy]``
    until one lies at least ``min_distance`` from every existing entity. After
    ``max_attempts`` the candidate furthest from its nearest neighbour wins.
    """

    def __init__(
        self,
        half_extents: Point,
        *,
        max_attempts: int = 500,
        rng: Optional[random.Random] = None,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.half_extents = half_extents
        self.max_attempts = max_attempts
        self.rng = rng or random.Random()

    def sample(self, bounds: Optional[Point] = None) -> Point:
        hx, hy = bounds or self.half_extents
        return (self.rng.uniform(-hx, hx), self.rng.uniform(-hy, hy))

    def place(
        self,
        min_distance: float,
        existing: Iterable[Entity],
        bounds: Optional[Point] = None,
    ) -> Point:
        occupied = [entity.position for entity in existing]
        if not occupied:
            return self.sample(bounds)

        best: Optional[Point] = None
        best_clearance = -1.0
        for _ in range(self.max_attempts):
            candidate = self.sample(bounds)
            clearance = min(distance(candidate, other) for other in occupied)
            if clearance >= min_distance:
                return candidate
            if clearance > best_clearance:
                best = candidate
                best_clearance = clearance

        logger.warning(
            "No position %.1f apart from %d entities after %d attempts; "
            "using best candidate with clearance %.1f",
            min_distance,
            len(occupied),
            self.max_attempts,
            best_clearance,
        )
        assert best is not None
        return best


class MotionIntegrator:
    """Per-frame integration for bouncing entities."""

    def __init__(self, half_extents: Point):
        self.half_extents = half_extents
        self.previous_time: Optional[float] = None

    def reset_clock(self) -> None:
        self.previous_time = None

    def step(self, entities: Iterable[Entity], timestamp: float) -> float:
        """Advance all bouncing entities to *timestamp*.

        The first timestamp only establishes the baseline. Returns the elapsed
        time that was integrated.
        """

        if self.previous_time is None:
            self.previous_time = timestamp
            return 0.0
        elapsed = max(0.0, timestamp - self.previous_time)
        self.previous_time = timestamp
        for entity in entities:
            if entity.movement is MovementKind.BOUNCE:
                self.reflect(entity)
                vx, vy = entity.velocity
                x, y = entity.position
                entity.position = (x + vx * elapsed, y + vy * elapsed)
        return elapsed

    def reflect(self, entity: Entity) -> None:
        """Point the velocity back inside once the entity has overshot."""

        hx, hy = self.half_extents
        x, y = entity.position
        vx, vy = entity.velocity
        if x > hx:
            vx = -abs(vx)
        elif x < -hx:
            vx = abs(vx)
        if y > hy:
            vy = -abs(vy)
        elif y < -hy:
            vy = abs(vy)
        entity.velocity = (vx, vy)


@dataclass
class ScoreOutcome:
    """Result of releasing a mover near the goals."""

    goal: Optional[Entity] = None
    accepted: bool = False
    cleared: bool = False
    depth_before: Optional[int] = None
    cue: Optional[int] = None


def goal_cue(depth_before: int, cue_count: int = GOAL_CUE_COUNT) -> int:
    """1-indexed sound cue for a hit: rings left, counting the one struck."""

    return max(1, min(depth_before + 1, cue_count))


class GoalMatcher:
    """Decides whether a released mover scores on the nearest goal."""

    def __init__(
        self,
        reference_width: float,
        placer: SpatialPlacer,
        *,
        separation: float = 1.5,
    ) -> None:
        self.reference_width = reference_width
        self.placer = placer
        self.separation = separation

    @property
    def acceptance_radius(self) -> float:
        return self.reference_width / math.sqrt(2)

    def try_score(
        self,
        release_position: Point,
        mover_color: Color,
        entities: Iterable[Entity],
    ) -> ScoreOutcome:
        """Score a release on the nearest goal, if its color and distance allow.

        An accepted hit always respawns the goal elsewhere with a fresh bounce,
        including the hit that clears it: the matcher works on any entity list,
        and only the session decides that a cleared goal leaves play.
        """

        scene = list(entities)
        goals: List[Entity] = [entity for entity in scene if entity.is_goal]
        target = nearest(goals, release_position)
        if target is None:
            return ScoreOutcome()
        if target.color is not mover_color:
            return ScoreOutcome(goal=target)
        if distance(target.position, release_position) >= self.acceptance_radius:
            return ScoreOutcome(goal=target)

        depth_before = target.remaining_depth or 0
        target.remaining_depth = max(depth_before - 1, 0)
        cleared = target.remaining_depth == 0
        target.cleared = cleared
        target.position = self.placer.place(
            self.separation * self.reference_width, scene
        )
        target.reset_movement(self.placer.rng)
        logger.debug(
            "Scored %s goal #%d: depth %d -> %d%s",
            target.color.value,
            target.uid,
            depth_before,
            target.remaining_depth,
            " (cleared)" if cleared else "",
        )
        return ScoreOutcome(
            goal=target,
            accepted=True,
            cleared=cleared,
            depth_before=depth_before,
            cue=goal_cue(depth_before),
        )


__all__ = [
    "Entity",
    "GOAL_CUE_COUNT",
    "GoalMatcher",
    "MotionIntegrator",
    "ScoreOutcome",
    "SpatialPlacer",
    "goal_cue",
    "random_bounce_velocity",
]
