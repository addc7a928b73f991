"""Tests for the Session state machine and frame loop."""

import json
from collections import deque

import pytest

from reversnake.config import VARIANT_A, VARIANT_B
from reversnake.intent import EMPTY_FRAME, FrameInput, Key
from reversnake.outcome import Outcome
from reversnake.session import START_PROMPT, Session, SessionState, SessionStateError
from reversnake.snake import Direction

START = FrameInput(pressed=frozenset({Key.START}))
FRAME_MS = 16


def _started(config=VARIANT_A, seed=0) -> Session:
    session = Session(config, seed=seed)
    session.step(START, 0)
    return session


def _run(session: Session, count: int, now: int, frame=EMPTY_FRAME) -> int:
    """Step *count* frames after *now* and return the last timestamp."""
    for _ in range(count):
        now += FRAME_MS
        session.step(frame, now)
    return now


class TestSessionInit:
    def test_not_started(self):
        session = Session(seed=0)
        assert session.state == SessionState.NOT_STARTED
        assert session.title == START_PROMPT
        assert session.outcome is None

    def test_frames_ignored_until_start(self):
        session = Session(seed=0)
        state = session.step(EMPTY_FRAME, 100)
        assert state["state"] == "not_started"
        assert state["frame"] == 0
        assert session.snake.head == (11, 2)

    def test_start_key_starts(self):
        session = _started()
        assert session.running
        assert session.title == ""
        assert session.snake.head == (11, 2)
        assert len(session.snake.body) == 10
        assert session.food.position == (24, 13)
        assert session.golden_food.visible
        assert not session.item.used

    def test_start_sets_starvation_deadline(self):
        session = Session(seed=0)
        session.start(1000)
        assert session.snake.starve_deadline == 6000


class TestSessionTransitions:
    def test_start_while_running_raises(self):
        session = _started()
        with pytest.raises(SessionStateError):
            session.start(10)

    def test_start_key_while_running_is_ignored(self):
        session = _started()
        session.step(START, FRAME_MS)
        assert session.running
        assert session.start_timestamp == 0

    def test_finish_requires_running(self):
        session = Session(seed=0)
        assert not session.finish(Outcome.STARVED, 10)
        assert session.state == SessionState.NOT_STARTED

    def test_finish_is_idempotent(self):
        session = _started()
        assert session.finish(Outcome.EATEN_BY_SNAKE, 100)
        assert not session.finish(Outcome.STARVED, 200)
        assert session.state == SessionState.ENDED
        assert session.end_timestamp == 100
        assert session.title == "eaten by snake"
        assert session.outcome == Outcome.EATEN_BY_SNAKE

    def test_restart_reinitialises(self):
        session = _started()
        session.snake.body = deque([(5, 5)])
        session.golden_food.visible = False
        session.item.used = True
        session.finish(Outcome.STARVED, 500)

        session.step(START, 1000)
        assert session.running
        assert session.start_timestamp == 1000
        assert len(session.snake.body) == 10
        assert session.golden_food.visible
        assert not session.item.used
        assert session.outcome is None

    def test_ended_session_does_not_advance(self):
        session = _started()
        session.finish(Outcome.STARVED, 10)
        before = list(session.snake.body)
        _run(session, 8, 10)
        assert list(session.snake.body) == before


class TestSessionMovement:
    def test_snake_moves_on_fourth_frame(self):
        session = _started()
        _run(session, 2, 0)
        assert session.snake.head == (11, 2)
        _run(session, 1, 2 * FRAME_MS)
        assert session.snake.head == (12, 2)

    def test_length_conserved_before_deadline(self):
        session = _started()
        _run(session, 40, 0)
        assert len(session.snake.body) == 10
        assert session.snake.head == (21, 2)

    def test_turn_via_key(self):
        session = _started()
        session.step(FrameInput(pressed=frozenset({Key.SNAKE_DOWN})), FRAME_MS)
        _run(session, 2, FRAME_MS)
        assert session.snake.head == (11, 3)

    def test_reversal_key_rejected(self):
        session = _started()
        session.step(FrameInput(pressed=frozenset({Key.SNAKE_LEFT})), FRAME_MS)
        assert session.snake.direction == Direction.RIGHT

    def test_food_moves_on_press(self):
        session = _started()
        press = FrameInput(
            pressed=frozenset({Key.FOOD_UP}), held=frozenset({Key.FOOD_UP}),
        )
        session.step(press, FRAME_MS)
        assert session.food.position == (24, 12)

    def test_food_stops_on_release(self):
        session = _started()
        press = FrameInput(
            pressed=frozenset({Key.FOOD_UP}), held=frozenset({Key.FOOD_UP}),
        )
        session.step(press, FRAME_MS)
        session.step(FrameInput(released=frozenset({Key.FOOD_UP})), 2 * FRAME_MS)
        _run(session, 8, 2 * FRAME_MS)
        assert session.food.position == (24, 12)
        assert session.food.direction == Direction.NONE


class TestSessionOutcomes:
    def test_eaten_by_snake(self):
        session = _started()
        session.food.position = (12, 2)
        now = _run(session, 3, 0)
        assert session.state == SessionState.ENDED
        assert session.title == "eaten by snake"
        assert session.end_timestamp == now

    def test_food_walking_into_snake(self):
        session = _started()
        session.food.position = (5, 3)
        press = FrameInput(
            pressed=frozenset({Key.FOOD_UP}), held=frozenset({Key.FOOD_UP}),
        )
        session.step(press, FRAME_MS)
        assert session.outcome == Outcome.EATEN_BY_SNAKE

    def test_immune_food_survives_contact(self):
        session = _started()
        session.food.position = (12, 2)
        session.step(FrameInput(pressed=frozenset({Key.ITEM})), FRAME_MS)
        _run(session, 2, FRAME_MS)
        assert session.running
        assert session.item.used

    def test_starvation_shrinks(self):
        session = _started()
        session.snake.starve_deadline = 40
        _run(session, 3, 0)
        assert session.running
        assert len(session.snake.body) == 9
        assert session.snake.starve_deadline == 48 + 6000

    def test_starved(self):
        session = _started()
        session.snake.body = deque([(5, 5)])
        session.snake.starve_deadline = 40
        now = _run(session, 3, 0)
        assert session.state == SessionState.ENDED
        assert session.outcome == Outcome.STARVED
        assert session.end_timestamp == now
        assert list(session.snake.body) == [(5, 5)]

    def test_golden_pickup_via_frames(self):
        session = _started()
        session.golden_food.position = (23, 13)
        press = FrameInput(
            pressed=frozenset({Key.FOOD_LEFT}), held=frozenset({Key.FOOD_LEFT}),
        )
        session.step(press, FRAME_MS)
        assert session.food.position == (23, 13)
        assert session.food.is_golden
        assert session.food.immune_until == FRAME_MS + 5000
        assert not session.golden_food.visible

    def test_golden_food_bites_snake(self):
        session = _started()
        session.food.position = (7, 3)
        session.food.is_golden = True
        session.food.immune_until = 10_000
        press = FrameInput(
            pressed=frozenset({Key.FOOD_UP}), held=frozenset({Key.FOOD_UP}),
        )
        # Body runs (11,2)..(2,2); (7,2) is index 4 of 10.
        session.step(press, FRAME_MS)
        assert session.running
        assert list(session.snake.body) == [
            (11, 2), (10, 2), (9, 2), (8, 2), (7, 2),
        ]


    def test_golden_food_devours_head(self):
        session = _started()
        session.food.position = (11, 3)
        session.food.is_golden = True
        session.food.immune_until = 10_000
        press = FrameInput(
            pressed=frozenset({Key.FOOD_UP}), held=frozenset({Key.FOOD_UP}),
        )
        session.step(press, FRAME_MS)
        assert session.state == SessionState.ENDED
        assert session.outcome == Outcome.CONSUMED_BY_FOOD
        assert session.title == "consumed by food"
        assert session.end_timestamp == FRAME_MS


class TestVariantB:
    def test_golden_food_and_item_disabled(self):
        session = _started(VARIANT_B)
        assert not session.golden_food.visible
        session.step(FrameInput(pressed=frozenset({Key.ITEM})), FRAME_MS)
        assert not session.item.used

    def test_snake_moves_every_six_frames(self):
        session = _started(VARIANT_B)
        _run(session, 4, 0)
        assert session.snake.head == (11, 2)
        _run(session, 1, 4 * FRAME_MS)
        assert session.snake.head == (12, 2)

    def test_food_wraps(self):
        session = _started(VARIANT_B)
        press = FrameInput(
            pressed=frozenset({Key.FOOD_RIGHT}), held=frozenset({Key.FOOD_RIGHT}),
        )
        session.step(press, FRAME_MS)
        assert session.food.position == (25, 13)
        hold = FrameInput(held=frozenset({Key.FOOD_RIGHT}))
        _run(session, 6, FRAME_MS, frame=hold)
        assert session.food.position == (1, 13)


class TestSessionSnapshot:
    def test_state_is_json_serializable(self):
        session = _started()
        state = session.step(EMPTY_FRAME, FRAME_MS)
        assert isinstance(json.dumps(state), str)

    def test_state_structure(self):
        state = _started().get_state()
        for key in (
            "state", "title", "variant", "frame", "elapsed_ms", "starvation",
            "snake", "food", "golden_food", "item", "grid",
        ):
            assert key in state
        assert state["snake"]["body"][0] == [11, 2]
        assert state["food"]["position"] == [24, 13]

    def test_timers(self):
        session = _started()
        state = session.step(EMPTY_FRAME, 2500)
        assert state["elapsed_ms"] == 2500
        assert state["starvation"] == {"hungry_ms": 2500, "interval_ms": 5000}

    def test_timers_freeze_after_end(self):
        session = _started()
        session.finish(Outcome.STARVED, 300)
        state = session.get_state(9000)
        assert state["elapsed_ms"] == 300
        assert state["starvation"]["hungry_ms"] == 300
        assert state["title"] == "starved"

    def test_grid_painted(self):
        state = _started().get_state()
        cells = state["grid"]["cells"]
        assert cells[1][10] == 1  # snake head (11, 2)
        assert cells[12][23] == 2  # food (24, 13)


class TestSessionDeterminism:
    def test_same_seed_same_golden_food(self):
        assert _started(seed=7).golden_food.position == _started(seed=7).golden_food.position
