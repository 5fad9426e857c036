"""User interface package for Harmony Glide."""

from .main import (
    ASSET_ENV_VAR,
    FadeOutScheduler,
    HarmonyGlideApp,
    UIDirectories,
    cli,
    resolve_directories,
    run,
)
from .toolkit import SceneRenderer

__all__ = [
    "ASSET_ENV_VAR",
    "FadeOutScheduler",
    "HarmonyGlideApp",
    "SceneRenderer",
    "UIDirectories",
    "cli",
    "resolve_directories",
    "run",
]
