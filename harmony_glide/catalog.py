"""Static stage and level data for Harmony Glide."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from itertools import count
from typing import Optional, Sequence, Tuple


DEFAULT_SPEED = 100.0
MENU_TITLE = "Harmony Glide v1.0"


class Color(Enum):
    """Palette used to match movers with goals."""

    RED = "red"
    BLUE = "blue"
    ORANGE = "orange"
    GREEN = "green"


class MovementKind(Enum):
    """How an entity moves on its own between frames.

    ``ORBIT`` is part of the data model but has no behaviour yet.
    """

    NONE = "none"
    BOUNCE = "bounce"
    ORBIT = "orbit"


class EntityKind(Enum):
    MOVER = "mover"
    GOAL = "goal"
    TRACKER = "tracker"
    MENU_ENTRY = "menu_entry"
    DESCRIPTION = "description"


_blueprint_ids = count()


@dataclass(frozen=True)
class EntityBlueprint:
    """Immutable recipe for an entity placed when a level starts.

    Two blueprints with identical content are still distinct pieces, so each
    carries a synthetic ``uid`` that takes part in equality.
    """

    kind: EntityKind
    color: Color = Color.RED
    goal_depth: Optional[int] = None
    movement: MovementKind = MovementKind.NONE
    speed: float = DEFAULT_SPEED
    position: Optional[Tuple[float, float]] = None
    label: Optional[str] = None
    done: bool = False
    uid: int = field(default_factory=lambda: next(_blueprint_ids))

    def __post_init__(self) -> None:
        if self.goal_depth is not None and self.goal_depth < 0:
            raise ValueError(f"goal depth must be non-negative, got {self.goal_depth}")
        if self.speed <= 0:
            raise ValueError(f"speed must be positive, got {self.speed}")


Level = Tuple[EntityBlueprint, ...]


@dataclass(frozen=True)
class Stage:
    name: str
    levels: Tuple[Level, ...]
    description: Optional[str] = None

    @property
    def level_count(self) -> int:
        return len(self.levels)


class GameCatalog:
    """Read-only, ordered collection of stages."""

    def __init__(self, stages: Sequence[Stage]):
        self._stages: Tuple[Stage, ...] = tuple(stages)

    @property
    def stage_count(self) -> int:
        return len(self._stages)

    def __len__(self) -> int:
        return len(self._stages)

    def __iter__(self):
        return iter(self._stages)

    def stage(self, stage_index: int) -> Stage:
        if not 0 <= stage_index < len(self._stages):
            raise IndexError(
                f"Stage index {stage_index} out of range (0..{len(self._stages) - 1})"
            )
        return self._stages[stage_index]

    def stage_name(self, stage_index: int) -> str:
        return self.stage(stage_index).name

    def stage_description(self, stage_index: int) -> Optional[str]:
        return self.stage(stage_index).description

    def level_count(self, stage_index: int) -> int:
        return self.stage(stage_index).level_count

    def level(self, stage_index: int, level_index: int) -> Level:
        stage = self.stage(stage_index)
        if not 0 <= level_index < stage.level_count:
            raise IndexError(
                f"Level index {level_index} out of range for stage {stage.name!r} "
                f"(0..{stage.level_count - 1})"
            )
        return stage.levels[level_index]


# ---------------------------------------------------------------------------
# Built-in content


def mover(color: Color = Color.RED) -> EntityBlueprint:
    return EntityBlueprint(kind=EntityKind.MOVER, color=color)


def goal(
    depth: int,
    color: Color = Color.RED,
    movement: MovementKind = MovementKind.NONE,
) -> EntityBlueprint:
    return EntityBlueprint(
        kind=EntityKind.GOAL, color=color, goal_depth=depth, movement=movement
    )


def _level(*blueprints: EntityBlueprint) -> Level:
    return tuple(blueprints)


R, B, O, G = Color.RED, Color.BLUE, Color.ORANGE, Color.GREEN
BOUNCE = MovementKind.BOUNCE


def build_default_catalog() -> GameCatalog:
    """Return the stages shipped with the game."""

    return GameCatalog(
        [
            Stage(
                name="Tutorial 1",
                description="Welcome!  Drag the square to the goal with your finger.",
                levels=(_level(mover(), goal(0)),),
            ),
            Stage(
                name="Tutorial 2",
                description="Some stages have multiple levels to complete.",
                levels=tuple(_level(mover(), goal(0)) for _ in range(4)),
            ),
            Stage(
                name="Tutorial 3",
                description="Some goals require multiple steps to complete.",
                levels=(
                    _level(mover(), goal(2)),
                    _level(mover(), goal(4)),
                    _level(mover(), goal(7)),
                ),
            ),
            Stage(
                name="Tutorial 4",
                description="Some levels have many squares.",
                levels=(
                    _level(mover(), mover(), goal(1)),
                    _level(mover(), mover(), mover(), goal(2)),
                    _level(mover(), mover(), mover(), mover(), goal(3)),
                ),
            ),
            Stage(
                name="Tutorial 5",
                description="And some levels have many goals!",
                levels=(
                    _level(mover(), goal(1), goal(3)),
                    _level(mover(), goal(1), goal(3), goal(5)),
                    _level(mover(), goal(1), goal(3), goal(5), goal(7)),
                ),
            ),
            Stage(
                name="Easy 1",
                description="Some squares and goals are other colors.",
                levels=(
                    _level(mover(B), goal(4, B)),
                    _level(mover(B), mover(B), goal(6, B)),
                    _level(mover(B), goal(3, B), goal(3, B)),
                    _level(mover(B), mover(B), mover(B), goal(9, B)),
                    _level(mover(B), mover(B), goal(1, B), goal(3, B), goal(5, B)),
                ),
            ),
            Stage(
                name="Easy 2",
                description="Use the right color square on the goal.",
                levels=(
                    _level(mover(), mover(B), goal(4)),
                    _level(mover(), mover(B), goal(4, B)),
                    _level(mover(), mover(B), goal(4), goal(4, B)),
                    _level(mover(), mover(B), goal(0), goal(1, B), goal(2), goal(3, B)),
                ),
            ),
            Stage(
                name="Easy 3",
                description="You are doing great!",
                levels=(
                    _level(mover(), mover(), mover(), mover(B), goal(4, B)),
                    _level(mover(), mover(B), mover(B), mover(B), goal(4)),
                    _level(
                        mover(), mover(), mover(B), mover(B), mover(B),
                        goal(0), goal(0), goal(0, B), goal(0, B), goal(0, B),
                    ),
                    _level(mover(), *(goal(0) for _ in range(9))),
                    _level(mover(B), *(goal(0, B) for _ in range(9))),
                ),
            ),
            Stage(
                name="Medium 1",
                description="Let's add even more colors!",
                levels=(
                    _level(mover(O), goal(2, O), goal(4, O)),
                    _level(mover(G), goal(1, G), goal(3, G), goal(5, G)),
                    _level(mover(O), mover(G), goal(6, G)),
                    _level(mover(O), mover(G), goal(7, O)),
                    _level(
                        mover(O), mover(G),
                        goal(1, G), goal(2, O), goal(3, G), goal(4, O), goal(5, G),
                    ),
                ),
            ),
            Stage(
                name="Medium 2",
                description="Remember to use the right color on the goal.",
                levels=(
                    _level(mover(R), mover(B), mover(O), mover(G), goal(0, O)),
                    _level(mover(R), mover(B), mover(O), mover(G), goal(2)),
                    _level(mover(R), mover(B), mover(O), mover(G), goal(4, G)),
                    _level(mover(R), mover(B), mover(O), mover(G), goal(7, B)),
                ),
            ),
            Stage(
                name="Medium 3",
                description="So many colors; so many goals!",
                levels=(
                    _level(mover(R), mover(B), mover(G), goal(4), goal(5, B), goal(6, G)),
                    _level(mover(O), mover(B), mover(O), goal(4, B), goal(5, B), goal(6, O)),
                    _level(mover(R), mover(O), mover(G), goal(6), goal(5, O), goal(4, G)),
                    _level(
                        mover(R), mover(B), mover(O), mover(G),
                        goal(7), goal(7, B), goal(7, O), goal(7, G),
                    ),
                ),
            ),
            Stage(
                name="Hard",
                description="Try that again, but with movement!",
                levels=(
                    _level(
                        mover(R), mover(B), mover(G),
                        goal(4, R, BOUNCE), goal(5, B, BOUNCE), goal(6, G, BOUNCE),
                    ),
                    _level(
                        mover(O), mover(B), mover(O),
                        goal(4, B, BOUNCE), goal(5, B, BOUNCE), goal(6, O, BOUNCE),
                    ),
                    _level(
                        mover(R), mover(O), mover(G),
                        goal(6, R, BOUNCE), goal(5, O, BOUNCE), goal(4, G, BOUNCE),
                    ),
                    _level(
                        mover(R), mover(B), mover(O), mover(G),
                        goal(7, R, BOUNCE), goal(7, B, BOUNCE),
                        goal(7, O, BOUNCE), goal(7, G, BOUNCE),
                    ),
                ),
            ),
        ]
    )


DEFAULT_CATALOG = build_default_catalog()


__all__ = [
    "Color",
    "DEFAULT_CATALOG",
    "DEFAULT_SPEED",
    "EntityBlueprint",
    "EntityKind",
    "GameCatalog",
    "Level",
    "MENU_TITLE",
    "MovementKind",
    "Stage",
    "build_default_catalog",
    "goal",
    "mover",
]
