"""Sound cues played on goal hits and level transitions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from ..game import Entity
from ..session import SessionListener
from .toolkit import ensure_pygame

logger = logging.getLogger(__name__)

# Ordered from the outermost ring inwards; cue N plays GOAL_CUE_FILES[N - 1].
GOAL_CUE_FILES: Tuple[str, ...] = (
    "c1.wav",
    "d1.wav",
    "e1.wav",
    "f1.wav",
    "g1.wav",
    "a2.wav",
    "b2.wav",
    "c2.wav",
    "d2.wav",
    "e2.wav",
)

# Fifth, root, third.
DISCARD_CHORD: Tuple[str, ...] = ("g1.wav", "c2.wav", "e2.wav")


def _ensure_mixer() -> bool:
    pygame = ensure_pygame()
    if pygame.mixer.get_init():
        return True
    try:
        pygame.mixer.init()
    except pygame.error as exc:
        logger.warning("Audio disabled, mixer could not start: %s", exc)
        return False
    return True


class SoundBank:
    """Named, preloaded sounds."""

    def __init__(self, sounds: Optional[Dict[str, object]] = None):
        self.sounds: Dict[str, object] = dict(sounds or {})

    @classmethod
    def load(cls, root: Path, names: Iterable[str] = GOAL_CUE_FILES) -> "SoundBank":
        if not _ensure_mixer():
            return cls()
        pygame = ensure_pygame()
        sounds: Dict[str, object] = {}
        for name in dict.fromkeys(names):
            path = Path(root) / name
            if not path.exists():
                logger.warning("Missing sound file %s", path)
                continue
            sounds[name] = pygame.mixer.Sound(str(path))
        logger.debug("Loaded %d sounds from %s", len(sounds), root)
        return cls(sounds)

    def __contains__(self, name: str) -> bool:
        return name in self.sounds

    def play(self, name: str) -> bool:
        sound = self.sounds.get(name)
        if sound is None:
            return False
        sound.play()
        return True


class CuePlayer(SessionListener):
    """Audio collaborator: goal cues right away, chord notes on a schedule."""

    def __init__(self, bank: SoundBank, *, note_delay: float = 0.1):
        self.bank = bank
        self.note_delay = note_delay
        self.queue: List[Tuple[float, str]] = []
        self.history: List[str] = []

    def goal_scored(self, goal: Entity, cue: int) -> None:
        index = max(1, min(cue, len(GOAL_CUE_FILES))) - 1
        self._play(GOAL_CUE_FILES[index])

    def play_chord(self, now: float) -> None:
        for step, name in enumerate(DISCARD_CHORD):
            self.queue.append((now + step * self.note_delay, name))
        self.queue.sort()
        self.update(now)

    def update(self, now: float) -> None:
        while self.queue and self.queue[0][0] <= now:
            _, name = self.queue.pop(0)
            self._play(name)

    def _play(self, name: str) -> None:
        self.history.append(name)
        self.bank.play(name)


__all__ = ["CuePlayer", "DISCARD_CHORD", "GOAL_CUE_FILES", "SoundBank"]
