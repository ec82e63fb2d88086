"""Tests for the window-independent game loop driver."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from rally.chase.entities import Phase
from rally.chase.loop import RESTART_KEY, SMOKE_KEY, GameSession
from rally.chase.simulation import InputState

pytestmark = pytest.mark.unit

TICK = 1 / 60


@pytest.fixture
def advisor():
    return MagicMock()


@pytest.fixture
def session(advisor):
    return GameSession(advisor=advisor, seed=10)


class TestLifecycle:

    def test_not_started(self, session):
        assert session.phase is Phase.NOT_STARTED
        assert session.advance(1.0) == []
        assert session.frame() == []
        assert session.hud() is None

    def test_restart_key_starts_game(self, session):
        session.press(RESTART_KEY)
        assert session.phase is Phase.PLAYING
        assert session.state.level.number == 1
        assert session.session_id == 1

    def test_restart_ignored_while_playing(self, session):
        session.press(RESTART_KEY)
        state = session.state
        session.release(RESTART_KEY)
        session.press(RESTART_KEY)
        assert session.state is state
        assert session.session_id == 1

    def test_restart_ignored_during_transition(self, session):
        session.restart()
        session.state.phase = Phase.LEVEL_TRANSITION
        state = session.state
        session.press(RESTART_KEY)
        assert session.state is state

    def test_restart_after_game_over(self, session):
        session.restart()
        session.state.phase = Phase.GAME_OVER
        old = session.state
        session.press(RESTART_KEY)
        assert session.state is not old
        assert session.phase is Phase.PLAYING
        assert session.state.player.score == 0
        assert session.session_id == 2

    def test_restart_cancels_pending_advice(self, session, advisor):
        session.restart()
        advisor.cancel.assert_called_once()

    def test_stop_releases_keys_and_cancels(self, session, advisor):
        session.restart()
        session.press("up")
        session.stop()
        assert session.keys == set()
        assert advisor.cancel.call_count == 2


class TestInput:

    def test_held_keys_become_inputs(self, session):
        session.press("up")
        session.press("left")
        session.press(SMOKE_KEY)
        assert session.inputs() == InputState(up=True, left=True, smoke=True)
        session.release("up")
        assert session.inputs() == InputState(left=True, smoke=True)

    def test_held_key_moves_player(self, session):
        session.restart()
        session.press("down")
        session.advance(3.5 * TICK)
        assert session.state.player.body.pos.y > 160.0


class TestFixedTicks:

    def test_whole_ticks_only(self, session):
        session.restart()
        assert len(session.advance(3.5 * TICK)) == 3
        assert session.state.tick == 3
        # Leftover half tick carries over
        assert len(session.advance(0.6 * TICK)) == 1

    def test_catchup_is_capped(self, session):
        session.restart()
        assert len(session.advance(1.0)) == session.max_catchup_ticks
        assert len(session.advance(0.5 * TICK)) == 0

    def test_level_start_requests_advice(self, session, advisor):
        session.restart()
        session.state.phase = Phase.LEVEL_TRANSITION
        session.state.transition_timer = 1
        events = session.tick()
        assert events["level_start"] == 1.0
        advisor.request.assert_called_once_with(2)

    def test_frame_and_hud(self):
        session = GameSession(seed=3)
        session.restart()
        assert session.frame()
        snap = session.hud()
        assert snap.level == 1
        assert snap.advice == ""
