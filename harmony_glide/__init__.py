"""Harmony Glide package."""

from .catalog import DEFAULT_CATALOG, Color, EntityKind, GameCatalog, MovementKind, Stage
from .config import GameConfig
from .game import Entity, GoalMatcher, MotionIntegrator, SpatialPlacer
from .geometry import Viewport
from .pointer import PointerRouter
from .session import GameSession, Mode, SessionListener

__all__ = [
    "Color",
    "DEFAULT_CATALOG",
    "Entity",
    "EntityKind",
    "GameCatalog",
    "GameConfig",
    "GameSession",
    "GoalMatcher",
    "Mode",
    "MotionIntegrator",
    "MovementKind",
    "PointerRouter",
    "SessionListener",
    "SpatialPlacer",
    "Stage",
    "Viewport",
]
