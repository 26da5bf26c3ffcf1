"""Player control state, including the delayed input replay used by sidekicks."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from retrokit.input import InputData

__all__ = ["ControlMode", "Player", "ControlBuffers", "PLAYER_COUNT"]

PLAYER_COUNT = 2
_MASK = 0xFFFF


class ControlMode(enum.IntEnum):
    """Where a player's controls come from."""

    NONE = -1
    NORMAL = 0
    SIDEKICK = 1


@dataclass
class Player:
    """A player character's physics and control state."""

    entity_no: int = 0
    x_pos: int = 0
    y_pos: int = 0
    x_velocity: int = 0
    y_velocity: int = 0
    speed: int = 0
    screen_x_pos: int = 0
    screen_y_pos: int = 0
    angle: int = 0
    timer: int = 0
    look_pos: int = 0
    values: list[int] = field(default_factory=lambda: [0] * 8)
    collision_mode: int = 0
    skidding: int = 0
    pushing: int = 0
    collision_plane: int = 0
    control_mode: ControlMode = ControlMode.NORMAL
    control_lock: int = 0
    top_speed: int = 0
    acceleration: int = 0
    deceleration: int = 0
    air_acceleration: int = 0
    air_deceleration: int = 0
    gravity_strength: int = 0
    jump_strength: int = 0
    jump_cap: int = 0
    rolling_acceleration: int = 0
    rolling_deceleration: int = 0
    visible: bool = False
    tile_collisions: bool = False
    object_interactions: bool = False
    left: bool = False
    right: bool = False
    up: bool = False
    down: bool = False
    jump_press: bool = False
    jump_hold: bool = False
    follow_player1: bool = False
    track_scroll: bool = False
    gravity: int = 0
    water: bool = False
    flailing: list[int] = field(default_factory=lambda: [0] * 3)
    animation_file: Any = None
    bound_entity: Any = None


_CONTROLS = ("up", "down", "left", "right", "jump_press", "jump_hold")


@dataclass
class ControlBuffers:
    """Sixteen frames of control history, replayed to sidekick players."""

    up: int = 0
    down: int = 0
    left: int = 0
    right: int = 0
    jump_press: int = 0
    jump_hold: int = 0

    def _push(self, player: Player) -> None:
        for name in _CONTROLS:
            history = (getattr(self, name) << 1) & _MASK
            setattr(self, name, history | int(bool(getattr(player, name))))

    def process(self, player: Player, key_down: InputData, key_press: InputData) -> None:
        """Update ``player``'s controls for this frame according to its mode."""
        mode = player.control_mode
        if mode == ControlMode.SIDEKICK:
            for name in _CONTROLS:
                setattr(player, name, bool(getattr(self, name) >> 15))
            return

        if mode != ControlMode.NONE:
            player.up = key_down.up
            player.down = key_down.down
            if not key_down.left or not key_down.right:
                player.left = key_down.left
                player.right = key_down.right
            else:
                player.left = False
                player.right = False
            player.jump_hold = key_down.c or key_down.b or key_down.a
            player.jump_press = key_press.c or key_press.b or key_press.a
        self._push(player)