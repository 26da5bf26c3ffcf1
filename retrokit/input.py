"""Button state tracking for keyboard, controller and touch input.

Each frame the host reports which logical buttons are held. The state turns
that into "pressed this frame" and "held" flags, keeps a combined "any
button" entry, and runs the screen dimming timer.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable

__all__ = [
    "Button",
    "InputButton",
    "InputData",
    "InputState",
    "stick_delta",
    "LSTICK_DEADZONE",
    "RSTICK_DEADZONE",
    "LTRIGGER_DEADZONE",
    "RTRIGGER_DEADZONE",
    "ALL_FLAGS",
]

LSTICK_DEADZONE = 0.3
RSTICK_DEADZONE = 0.3
LTRIGGER_DEADZONE = 0.3
RTRIGGER_DEADZONE = 0.3

ALL_FLAGS = 0xFF


class Button(enum.IntEnum):
    """Logical buttons; the value is also the bit index used by key flags."""

    UP = 0
    DOWN = 1
    LEFT = 2
    RIGHT = 3
    A = 4
    B = 5
    C = 6
    START = 7
    ANY = 8


_FIELDS = {
    Button.UP: "up",
    Button.DOWN: "down",
    Button.LEFT: "left",
    Button.RIGHT: "right",
    Button.A: "a",
    Button.B: "b",
    Button.C: "c",
    Button.START: "start",
}


@dataclass
class InputButton:
    """Press and hold state of one logical button."""

    press: bool = False
    hold: bool = False
    key_mapping: int = 0
    controller_mapping: int = 0

    def set_held(self) -> None:
        """Mark the button held; it counts as pressed only on the first frame."""
        self.press = not self.hold
        self.hold = True

    def set_released(self) -> None:
        """Mark the button released."""
        self.press = False
        self.hold = False

    def down(self) -> bool:
        """Whether the button is pressed or held."""
        return self.press or self.hold


@dataclass
class InputData:
    """A snapshot of the eight game buttons."""

    up: bool = False
    down: bool = False
    left: bool = False
    right: bool = False
    a: bool = False
    b: bool = False
    c: bool = False
    start: bool = False


def stick_delta(axis: int) -> float:
    """Map a signed 16-bit stick axis reading onto the range -1.0 to 1.0."""
    if axis < 0:
        return -((-axis - 1) / (32768 - 1))
    return axis / 32767


class InputState:
    """Per-frame button states plus the screen dimming timer."""

    def __init__(self, dim_limit: int = 0) -> None:
        self.buttons: dict[Button, InputButton] = {button: InputButton() for button in Button}
        self.dim_limit = dim_limit
        self.dim_timer = 0
        self.any_press = False

    def __getitem__(self, button: Button) -> InputButton:
        return self.buttons[button]

    def update(self, held: Iterable[Button], touches: int = 0, paused: bool = False) -> None:
        """Advance one frame given the set of buttons currently held."""
        held_set = set(held)
        any_button = self.buttons[Button.ANY]
        for button in Button:
            if button is Button.ANY:
                continue
            state = self.buttons[button]
            if button in held_set:
                state.set_held()
                if not any_button.hold:
                    any_button.set_held()
            elif state.hold:
                state.set_released()

        if not held_set:
            any_button.set_released()

        if any_button.press or any_button.hold or touches > 1:
            self.dim_timer = 0
        elif self.dim_timer < self.dim_limit and not paused:
            self.dim_timer += 1

    def _copy(self, target: InputData, flags: int, attribute: str) -> None:
        for button, name in _FIELDS.items():
            if flags & (1 << button):
                setattr(target, name, getattr(self.buttons[button], attribute))

    def check_key_press(
        self, target: InputData, flags: int = ALL_FLAGS, touch_down: Iterable[bool] = ()
    ) -> InputData:
        """Copy this frame's presses of the flagged buttons into ``target``.

        With the start flag set, ``any_press`` is also refreshed from the
        combined button and from any active touch.
        """
        self._copy(target, flags, "press")
        if flags & (1 << Button.START):
            self.any_press = self.buttons[Button.ANY].press or any(touch_down)
        return target

    def check_key_down(self, target: InputData, flags: int = ALL_FLAGS) -> InputData:
        """Copy the held state of the flagged buttons into ``target``."""
        self._copy(target, flags, "hold")
        return target