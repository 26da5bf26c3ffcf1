import pytest

from retrokit.input import (
    Button,
    InputButton,
    InputData,
    InputState,
    stick_delta,
)


def test_set_held_presses_only_on_first_frame():
    button = InputButton()
    button.set_held()
    assert button.press and button.hold
    button.set_held()
    assert not button.press and button.hold
    assert button.down()


def test_set_released_clears_both():
    button = InputButton()
    button.set_held()
    button.set_released()
    assert (button.press, button.hold) == (False, False)
    assert not button.down()


@pytest.mark.parametrize("axis, expected", [(0, 0.0), (32767, 1.0), (-32768, -1.0), (-1, 0.0)])
def test_stick_delta_limits(axis, expected):
    assert stick_delta(axis) == pytest.approx(expected)


def test_stick_delta_is_monotonic():
    values = [stick_delta(a) for a in range(-32768, 32768, 1024)]
    assert values == sorted(values)


def test_update_presses_and_releases():
    state = InputState(dim_limit=5)
    state.update({Button.UP})
    assert state[Button.UP].press and state[Button.UP].hold
    assert state[Button.ANY].hold
    assert not state[Button.DOWN].down()
    state.update(set())
    assert not state[Button.UP].down()
    assert not state[Button.ANY].down()


def test_dim_timer_counts_up_to_limit_and_resets():
    state = InputState(dim_limit=3)
    for _ in range(10):
        state.update(())
    assert state.dim_timer == state.dim_limit
    state.update({Button.A})
    assert state.dim_timer == 0


def test_dim_timer_frozen_while_paused():
    state = InputState(dim_limit=3)
    state.update((), paused=True)
    assert state.dim_timer == 0


def test_multiple_touches_reset_dim_timer():
    state = InputState(dim_limit=3)
    state.update(())
    state.update((), touches=2)
    assert state.dim_timer == 0


def test_check_key_press_respects_flags():
    state = InputState()
    state.update({Button.UP, Button.DOWN})
    data = state.check_key_press(InputData(), 1 << Button.UP)
    assert data.up is True
    assert data.down is False


def test_check_key_down_copies_hold():
    state = InputState()
    state.update({Button.C, Button.START})
    state.update({Button.C, Button.START})
    data = state.check_key_down(InputData())
    assert data.c and data.start
    assert not data.a
    press = state.check_key_press(InputData())
    assert not press.c


def test_any_press_from_touch():
    state = InputState()
    state.update(())
    state.check_key_press(InputData(), touch_down=[False, True])
    assert state.any_press is True
    state.check_key_press(InputData(), touch_down=[False])
    assert state.any_press is False