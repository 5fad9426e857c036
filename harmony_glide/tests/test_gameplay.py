import math
import random
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from harmony_glide.catalog import DEFAULT_CATALOG, Color, EntityKind, GameCatalog, Stage, goal, mover
from harmony_glide.game import Entity, GoalMatcher, SpatialPlacer, goal_cue
from harmony_glide.geometry import Viewport, distance
from harmony_glide.session import GameSession, Mode


VIEWPORT = Viewport(1000, 1000)
WIDTH = VIEWPORT.reference_width


def make_session(*levels, seed: int = 7) -> GameSession:
    catalog = GameCatalog([Stage(name="Test", levels=tuple(tuple(level) for level in levels))])
    session = GameSession(catalog, VIEWPORT, rng=random.Random(seed))
    session.start()
    session.select_stage(0)
    return session


def only(session: GameSession, kind: EntityKind) -> Entity:
    entities = session.state.of_kind(kind)
    assert len(entities) == 1
    return entities[0]


def test_tutorial_one_single_hit_completes_stage():
    session = GameSession(viewport=VIEWPORT, rng=random.Random(1))
    session.start()
    session.select_stage(0)
    assert session.catalog.stage_name(0) == "Tutorial 1"

    piece = only(session, EntityKind.MOVER)
    target = only(session, EntityKind.GOAL)
    assert target.remaining_depth == 0

    outcome = session.release_mover(piece, target.position)

    assert outcome.accepted
    assert outcome.cleared
    assert session.state.mode is Mode.MENU
    assert session.state.stage_index is None
    assert session.state.level_index is None
    assert session.state.completed_stages == {0}
    entries = session.state.of_kind(EntityKind.MENU_ENTRY)
    assert [entry.done for entry in entries][:2] == [True, False]


def test_goal_with_depth_two_needs_exactly_two_hits():
    session = make_session([mover(), goal(2)])
    piece = only(session, EntityKind.MOVER)
    target = only(session, EntityKind.GOAL)

    first = session.release_mover(piece, target.position)
    assert first.accepted and not first.cleared
    assert target.remaining_depth == 1
    assert session.state.mode is Mode.PLAYING
    assert session.state.open_goal_count() == 1

    second = session.release_mover(piece, target.position)
    assert second.accepted and second.cleared
    assert session.state.mode is Mode.MENU
    assert session.state.completed_stages == {0}


def test_mismatched_color_never_changes_depth():
    session = make_session([mover(Color.BLUE), goal(3, Color.RED)])
    piece = only(session, EntityKind.MOVER)
    target = only(session, EntityKind.GOAL)
    before = target.position

    outcome = session.release_mover(piece, target.position)

    assert not outcome.accepted
    assert outcome.goal is target
    assert target.remaining_depth == 3
    assert target.position == before


@pytest.mark.parametrize(
    "offset, accepted",
    [
        (0.0, True),
        (WIDTH / math.sqrt(2) - 1.0, True),
        (WIDTH / math.sqrt(2) + 1.0, False),
    ],
)
def test_acceptance_radius_is_strict(offset, accepted):
    session = make_session([mover(), goal(4)])
    piece = only(session, EntityKind.MOVER)
    target = only(session, EntityKind.GOAL)
    release = (target.position[0] + offset, target.position[1])

    outcome = session.release_mover(piece, release)

    assert outcome.accepted is accepted
    assert target.remaining_depth == (3 if accepted else 4)


def test_depth_decreases_once_per_accepted_hit():
    session = make_session([mover(), goal(5), goal(5, Color.BLUE)])
    piece = only(session, EntityKind.MOVER)
    red = [g for g in session.state.goals() if g.color is Color.RED][0]

    for hits in range(1, 5):
        session.release_mover(piece, red.position)
        assert red.remaining_depth == 5 - hits
        # A miss in between leaves the depth alone.
        session.release_mover(piece, (red.position[0] + 10 * WIDTH, red.position[1]))
        assert red.remaining_depth == 5 - hits


def test_goal_relocates_away_from_release_point():
    session = make_session([mover(), goal(3)])
    piece = only(session, EntityKind.MOVER)
    target = only(session, EntityKind.GOAL)
    release = target.position

    session.release_mover(piece, release)

    assert distance(target.position, release) >= 1.5 * WIDTH


def test_every_depth_zero_goal_needs_its_own_hit():
    session = make_session([mover(), goal(0), goal(0), goal(0)], [mover(), goal(1)])
    piece = only(session, EntityKind.MOVER)

    for remaining in (2, 1):
        target = session.state.goals()[0]
        outcome = session.release_mover(piece, target.position)
        assert outcome.accepted and outcome.cleared
        assert target not in session.state.entities
        assert session.state.level_index == 0
        assert session.state.open_goal_count() == remaining

    session.release_mover(piece, session.state.goals()[0].position)

    assert session.state.level_index == 1
    assert [g.remaining_depth for g in session.state.goals()] == [1]


def test_crowded_level_of_depth_zero_goals_takes_one_hit_each():
    catalog = GameCatalog([Stage(name="Easy 3", levels=(DEFAULT_CATALOG.level(7, 3),))])
    session = GameSession(catalog, VIEWPORT, rng=random.Random(4))
    session.start()
    session.select_stage(0)
    piece = only(session, EntityKind.MOVER)
    assert len(session.state.goals()) == 9

    for _ in range(8):
        session.release_mover(piece, session.state.goals()[0].position)
        assert session.state.mode is Mode.PLAYING

    assert len(session.state.goals()) == 1
    session.release_mover(piece, session.state.goals()[0].position)
    assert session.state.mode is Mode.MENU


def test_matcher_without_goals_is_a_no_op():
    placer = SpatialPlacer((250.0, 350.0), rng=random.Random(3))
    matcher = GoalMatcher(WIDTH, placer)
    piece = Entity(kind=EntityKind.MOVER)

    outcome = matcher.try_score((0.0, 0.0), Color.RED, [piece])

    assert outcome.goal is None
    assert not outcome.accepted


def test_matcher_breaks_ties_by_iteration_order():
    placer = SpatialPlacer((250.0, 350.0), rng=random.Random(3))
    matcher = GoalMatcher(WIDTH, placer)
    left = Entity(kind=EntityKind.GOAL, position=(-20.0, 0.0), remaining_depth=2)
    right = Entity(kind=EntityKind.GOAL, position=(20.0, 0.0), remaining_depth=2)

    outcome = matcher.try_score((0.0, 0.0), Color.RED, [left, right])

    assert outcome.goal is left
    assert left.remaining_depth == 1
    assert right.remaining_depth == 2


def test_matcher_respawns_the_goal_on_its_clearing_hit():
    placer = SpatialPlacer((250.0, 350.0), rng=random.Random(3))
    matcher = GoalMatcher(WIDTH, placer)
    target = Entity(kind=EntityKind.GOAL, position=(0.0, 0.0), remaining_depth=1)

    outcome = matcher.try_score((0.0, 0.0), Color.RED, [target])

    assert outcome.cleared and target.cleared
    assert target.remaining_depth == 0
    assert distance(target.position, (0.0, 0.0)) >= 1.5 * WIDTH


@pytest.mark.parametrize("depth, cue", [(0, 1), (2, 3), (7, 8), (9, 10), (15, 10)])
def test_goal_cue_counts_the_struck_ring(depth, cue):
    assert goal_cue(depth) == cue
