"""Simple command line demo for the Harmony Glide logic."""

from __future__ import annotations

import argparse
import math
import random
from typing import List, Optional

from .catalog import DEFAULT_CATALOG
from .game import Entity
from .geometry import Point, Viewport, distance
from .pointer import PointerRouter
from .session import GameSession, Mode, SessionListener


class TranscriptListener(SessionListener):
    """Collects a readable log of what happened during the demo."""

    def __init__(self) -> None:
        self.lines: List[str] = []

    def goal_scored(self, goal: Entity, cue: int) -> None:
        self.lines.append(
            f"  hit {goal.color.value} goal, {goal.remaining_depth} left (cue {cue})"
        )

    def tracker_passed(self, tracker: Entity) -> None:
        self.lines.append(f"  level {tracker.index + 1} passed")

    def stage_completed(self, stage_index: int) -> None:
        self.lines.append(f"Stage {DEFAULT_CATALOG.stage_name(stage_index)} complete")


def play_stage(session: GameSession, stage_index: int, max_moves: int = 500) -> int:
    """Drag matching movers onto goals until the stage is finished.

    Returns the number of drags performed.
    """

    router = PointerRouter(session)
    session.select_stage(stage_index)
    moves = 0
    while session.state.mode is Mode.PLAYING and moves < max_moves:
        target = _next_goal(session)
        if target is None:
            break
        movers = [m for m in session.state.movers() if m.color is target.color]
        piece = movers[0]
        drag(router, piece.position, target.position, session.reference_width / 2.0)
        moves += 1
    return moves


def drag(router: PointerRouter, start: Point, end: Point, step: float) -> None:
    """Press at *start*, move towards *end* in short hops and release there."""

    router.pointer_down(start)
    hops = max(1, math.ceil(distance(start, end) / step))
    for hop in range(1, hops + 1):
        t = hop / hops
        router.pointer_move((start[0] + (end[0] - start[0]) * t, start[1] + (end[1] - start[1]) * t))
    router.pointer_up(end)


def _next_goal(session: GameSession) -> Optional[Entity]:
    mover_colors = {m.color for m in session.state.movers()}
    for goal in session.state.goals():
        if goal.color in mover_colors:
            return goal
    return None


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Play a Harmony Glide stage without a window")
    parser.add_argument("--stage", type=int, default=0, help="Stage index to play")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for placement")
    args = parser.parse_args(argv)

    session = GameSession(
        DEFAULT_CATALOG, Viewport(750, 1334), rng=random.Random(args.seed)
    )
    transcript = TranscriptListener()
    session.add_listener(transcript)
    session.start()

    stage = DEFAULT_CATALOG.stage(args.stage)
    print("=== Harmony Glide Demo ===")
    print(f"Stage: {stage.name} ({stage.level_count} levels)")
    if stage.description:
        print(f"  {stage.description}")
    moves = play_stage(session, args.stage)
    for line in transcript.lines:
        print(line)
    print(f"Drags performed: {moves}")
    print(f"Completed stages: {sorted(session.state.completed_stages)}")


if __name__ == "__main__":
    main()
