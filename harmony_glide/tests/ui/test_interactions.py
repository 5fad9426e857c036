"""Headless interaction tests for the pygame application wrapper.

The fixtures in ``conftest.py`` force the SDL dummy drivers, so the window
and the mixer never touch real hardware. Sound files are absent; the cue
player still records what it would have played.
"""

from __future__ import annotations

import math

from harmony_glide.catalog import EntityKind
from harmony_glide.game import Entity
from harmony_glide.session import Mode
from harmony_glide.ui.main import FadeOutScheduler, HarmonyGlideApp, UIDirectories


def make_app(tmp_path) -> HarmonyGlideApp:
    return HarmonyGlideApp((500, 500), directories=UIDirectories(tmp_path), seed=3)


def click(pygame, app: HarmonyGlideApp, pixel) -> None:
    app.handle_event(pygame.event.Event(pygame.MOUSEBUTTONDOWN, button=1, pos=pixel))


def mouse_drag(pygame, app: HarmonyGlideApp, start, end, step: float = 20.0) -> None:
    click(pygame, app, start)
    hops = max(1, math.ceil(math.hypot(end[0] - start[0], end[1] - start[1]) / step))
    for hop in range(1, hops + 1):
        t = hop / hops
        pixel = (
            int(round(start[0] + (end[0] - start[0]) * t)),
            int(round(start[1] + (end[1] - start[1]) * t)),
        )
        app.handle_event(
            pygame.event.Event(pygame.MOUSEMOTION, pos=pixel, rel=(0, 0), buttons=(1, 0, 0))
        )
    app.handle_event(pygame.event.Event(pygame.MOUSEBUTTONUP, button=1, pos=end))


def start_first_stage(pygame, app: HarmonyGlideApp) -> None:
    entry = app.session.state.of_kind(EntityKind.MENU_ENTRY)[0]
    click(pygame, app, app.transform.scene_to_screen(entry.position))


def test_clicking_a_menu_entry_starts_the_stage(pygame_module, tmp_path):
    app = make_app(tmp_path)

    start_first_stage(pygame_module, app)

    assert app.session.state.mode is Mode.PLAYING
    assert app.session.state.stage_index == 0
    assert len(app.session.state.movers()) == 1


def test_dragging_onto_the_goal_finishes_the_tutorial(pygame_module, tmp_path):
    pygame = pygame_module
    app = make_app(tmp_path)
    start_first_stage(pygame, app)
    piece = app.session.state.movers()[0]
    target = app.session.state.goals()[0]

    mouse_drag(
        pygame,
        app,
        app.transform.scene_to_screen(piece.position),
        app.transform.scene_to_screen(target.position),
    )

    assert app.cues.history == ["c1.wav"]
    assert target not in app.session.state.entities
    assert app.session.transition_pending
    assert len(app.fader) == 1

    app.update(0.0)
    assert app.fader.alpha_for(piece) == 255
    app.update(1.0)
    assert app.cues.history == ["c1.wav", "g1.wav"]
    app.update(1.5)
    assert 0 < app.fader.alpha_for(piece) < 255
    assert piece in app.session.state.entities

    app.update(2.0)

    assert app.cues.history == ["c1.wav", "g1.wav", "c2.wav", "e2.wav"]
    assert app.session.state.mode is Mode.MENU
    assert app.session.state.completed_stages == {0}
    assert piece not in app.session.state.entities


def test_motion_without_button_does_not_drag(pygame_module, tmp_path):
    pygame = pygame_module
    app = make_app(tmp_path)
    start_first_stage(pygame, app)
    piece = app.session.state.movers()[0]
    start = piece.position
    pixel = app.transform.scene_to_screen(start)

    app.handle_event(
        pygame.event.Event(
            pygame.MOUSEMOTION, pos=(pixel[0] + 5, pixel[1]), rel=(5, 0), buttons=(0, 0, 0)
        )
    )

    assert piece.position == start


def test_losing_focus_releases_held_movers(pygame_module, tmp_path):
    pygame = pygame_module
    app = make_app(tmp_path)
    start_first_stage(pygame, app)
    piece = app.session.state.movers()[0]
    click(pygame, app, app.transform.scene_to_screen(piece.position))
    assert piece.selected

    app.handle_event(pygame.event.Event(pygame.WINDOWFOCUSLOST))

    assert not piece.selected


def test_escape_stops_the_loop(pygame_module, tmp_path):
    pygame = pygame_module
    app = make_app(tmp_path)

    app.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_ESCAPE))

    assert not app.running


def test_fade_scheduler_reports_done_after_pause_and_fade():
    chords = []
    done = []
    fader = FadeOutScheduler(pause=1.0, fade=1.0, on_chord=chords.append)
    piece = Entity(kind=EntityKind.MOVER)
    fader.update(10.0)

    fader(piece, lambda: done.append(True))
    fader.update(10.5)
    assert fader.alpha_for(piece) == 255 and not chords

    fader.update(11.0)
    assert chords == [11.0]
    assert fader.alpha_for(piece) == 255

    fader.update(11.75)
    assert fader.alpha_for(piece) == 64
    assert not done

    fader.update(12.0)
    assert done == [True]
    assert len(fader) == 0
    assert fader.alpha_for(piece) == 255
