"""Interactive pygame front end for Harmony Glide."""

from __future__ import annotations

import argparse
import logging
import os
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..catalog import DEFAULT_CATALOG, GameCatalog
from ..config import DEFAULT_CONFIG, GameConfig
from ..game import Entity
from ..geometry import Viewport
from ..pointer import PointerRouter
from ..session import GameSession
from . import layout
from .assets import CuePlayer, SoundBank
from .toolkit import SceneRenderer, ensure_pygame

logger = logging.getLogger(__name__)

ASSET_ENV_VAR = "HARMONY_GLIDE_ASSET_ROOT"


@dataclass(frozen=True)
class UIDirectories:
    """Bundle with resolved directories required by the UI."""

    asset_root: Path


def _default_asset_root() -> Path:
    return Path(__file__).resolve().parents[1] / "sounds"


def _read_directory(env_var: str, fallback: Path) -> Path:
    value = os.environ.get(env_var)
    if value:
        return Path(value).expanduser()
    return fallback


def resolve_directories(check_exists: bool = True) -> UIDirectories:
    """Resolve UI directories using environment variables.

    Parameters
    ----------
    check_exists:
        When *True*, raise :class:`FileNotFoundError` if a resolved directory does
        not exist on disk.
    """

    asset_root = _read_directory(ASSET_ENV_VAR, _default_asset_root())
    if check_exists and not asset_root.exists():
        raise FileNotFoundError(f"Sound directory does not exist: {asset_root}")
    return UIDirectories(asset_root=asset_root)


@dataclass
class _Fade:
    entity: Entity
    started: float
    done: Callable[[], None]
    chord_played: bool = False


class FadeOutScheduler:
    """Discard effect for movers: pause, chord, fade out, then report done.

    Driven by the frame clock through :meth:`update`.
    """

    def __init__(
        self,
        *,
        pause: float = 1.0,
        fade: float = 1.0,
        on_chord: Optional[Callable[[float], None]] = None,
    ) -> None:
        self.pause = pause
        self.fade = fade
        self.on_chord = on_chord
        self.now = 0.0
        self.fades: Dict[int, _Fade] = {}

    def __call__(self, entity: Entity, done: Callable[[], None]) -> None:
        self.fades[entity.uid] = _Fade(entity=entity, started=self.now, done=done)

    def __len__(self) -> int:
        return len(self.fades)

    def update(self, now: float) -> None:
        self.now = now
        for uid, fade in list(self.fades.items()):
            elapsed = now - fade.started
            if elapsed >= self.pause and not fade.chord_played:
                fade.chord_played = True
                if self.on_chord is not None:
                    self.on_chord(now)
            if elapsed >= self.pause + self.fade:
                del self.fades[uid]
                fade.done()

    def alpha_for(self, entity: Entity) -> int:
        fade = self.fades.get(entity.uid)
        if fade is None:
            return 255
        progress = (self.now - fade.started - self.pause) / self.fade if self.fade else 1.0
        progress = max(0.0, min(1.0, progress))
        return int(round(255 * (1.0 - progress)))


class HarmonyGlideApp:
    """Pygame driven application: window, frame loop and pointer events."""

    def __init__(
        self,
        screen_size: Tuple[int, int] = layout.DEFAULT_WINDOW_SIZE,
        *,
        directories: Optional[UIDirectories] = None,
        catalog: GameCatalog = DEFAULT_CATALOG,
        config: GameConfig = DEFAULT_CONFIG,
        seed: Optional[int] = None,
    ) -> None:
        pygame = ensure_pygame()
        pygame.init()
        pygame.display.set_caption("Harmony Glide")
        self.screen = pygame.display.set_mode(screen_size)
        self.clock = pygame.time.Clock()
        self.transform = layout.SceneTransform(screen_size)

        self.directories = directories or resolve_directories(check_exists=False)
        if self.directories.asset_root.exists():
            bank = SoundBank.load(self.directories.asset_root)
        else:
            logger.warning("Sound directory %s not found, playing silently", self.directories.asset_root)
            bank = SoundBank()
        self.cues = CuePlayer(bank, note_delay=config.chord_note_delay)
        self.fader = FadeOutScheduler(
            pause=config.discard_pause,
            fade=config.discard_fade,
            on_chord=self.cues.play_chord,
        )

        self.session = GameSession(
            catalog,
            Viewport(screen_size[0], screen_size[1], config=config),
            config=config,
            rng=random.Random(seed),
            discard_scheduler=self.fader,
        )
        self.session.add_listener(self.cues)
        self.router = PointerRouter(self.session)
        self.renderer = SceneRenderer(self.screen, alpha_for=self.fader.alpha_for)
        self.running = True
        self.session.start()

    # ------------------------------------------------------------------
    # Events

    def handle_event(self, event) -> None:
        pygame = ensure_pygame()
        if event.type == pygame.QUIT:
            self.running = False
        elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
            self.running = False
        elif event.type in (pygame.FINGERDOWN, pygame.FINGERMOTION, pygame.FINGERUP):
            point = self.transform.normalized_to_scene(event.x, event.y)
            self._route(event.type, point)
        elif getattr(event, "touch", False):
            # pygame mirrors touches as mouse events; the finger events win.
            return
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            self.router.pointer_down(self.transform.screen_to_scene(event.pos))
        elif event.type == pygame.MOUSEMOTION and event.buttons[0]:
            self.router.pointer_move(self.transform.screen_to_scene(event.pos))
        elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
            self.router.pointer_up(self.transform.screen_to_scene(event.pos))
        elif event.type == pygame.WINDOWFOCUSLOST:
            self._cancel_drags()

    def _route(self, event_type: int, point: Tuple[float, float]) -> None:
        pygame = ensure_pygame()
        if event_type == pygame.FINGERDOWN:
            self.router.pointer_down(point)
        elif event_type == pygame.FINGERMOTION:
            self.router.pointer_move(point)
        else:
            self.router.pointer_up(point)

    def _cancel_drags(self) -> None:
        for mover in self.session.state.movers(selected=True):
            self.router.pointer_cancel(mover.position)

    # ------------------------------------------------------------------
    # Frame loop

    def update(self, now: float) -> None:
        self.session.tick(now)
        self.fader.update(now)
        self.cues.update(now)

    def draw(self) -> None:
        self.renderer.render(self.session)
        ensure_pygame().display.flip()

    def run(self) -> None:
        pygame = ensure_pygame()
        while self.running:
            for event in pygame.event.get():
                self.handle_event(event)
            self.update(pygame.time.get_ticks() / 1000.0)
            self.draw()
            self.clock.tick(60)
        pygame.quit()


def run(**kwargs) -> None:
    """Entry point helper that instantiates and runs the UI."""

    app = HarmonyGlideApp(**kwargs)
    app.run()


def bootstrap_directories() -> UIDirectories:
    """Return resolved directories and print a short bootstrap message."""

    directories = resolve_directories()
    message = (
        "Harmony Glide UI bootstrap\n"
        f"  sounds: {directories.asset_root}\n"
        f"Set {ASSET_ENV_VAR} to point to a custom sound directory if needed."
    )
    print(message)
    return directories


def list_stages(catalog: GameCatalog = DEFAULT_CATALOG) -> List[str]:
    lines = ["Available stages:"]
    for index, stage in enumerate(catalog):
        lines.append(f"  {index:2d}. {stage.name} ({stage.level_count} levels)")
    return lines


def _parse_size(value: str) -> Tuple[int, int]:
    try:
        width, height = (int(part) for part in value.lower().split("x"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"Expected WIDTHxHEIGHT, got {value!r}") from exc
    if width <= 0 or height <= 0:
        raise argparse.ArgumentTypeError("Window size must be positive")
    return width, height


def cli(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Harmony Glide launcher")
    parser.add_argument(
        "--info",
        action="store_true",
        help="Print resolved resource directories and exit without launching the UI.",
    )
    parser.add_argument("--list-stages", action="store_true", help="List the stages and exit.")
    parser.add_argument(
        "--size",
        type=_parse_size,
        default=layout.DEFAULT_WINDOW_SIZE,
        help="Window size as WIDTHxHEIGHT (default %(default)s).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for piece placement.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_stages:
        print("\n".join(list_stages()))
        return 0
    if args.info:
        bootstrap_directories()
        return 0

    run(screen_size=args.size, seed=args.seed)
    return 0


def main() -> None:
    raise SystemExit(cli())


if __name__ == "__main__":  # pragma: no cover - manual invocation entry point
    main()
