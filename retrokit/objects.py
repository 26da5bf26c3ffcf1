"""Entity activity checks and per-frame update and draw-list collection."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

__all__ = [
    "Priority",
    "Entity",
    "ObjectBorders",
    "type_name",
    "is_active",
    "collect_active",
    "collect_paused",
    "ENTITY_COUNT",
    "TEMPENTITY_START",
    "OBJECT_COUNT",
    "BLANK_OBJECT",
    "DRAWLAYER_COUNT",
]

ENTITY_COUNT = 0x4A0
TEMPENTITY_START = ENTITY_COUNT - 0x80
OBJECT_COUNT = 0x100
BLANK_OBJECT = 0
DRAWLAYER_COUNT = 7
_SCREEN_YSIZE = 240


class Priority(enum.IntEnum):
    """When an entity gets updated."""

    BOUNDS = 0
    ACTIVE = 1
    ALWAYS = 2
    XBOUNDS = 3
    BOUNDS_DESTROY = 4
    INACTIVE = 5


@dataclass
class Entity:
    """An object instance in the scene; positions are 16.16 fixed point."""

    x_pos: int = 0
    y_pos: int = 0
    values: list[int] = field(default_factory=lambda: [0] * 8)
    scale: int = 0
    rotation: int = 0
    animation_timer: int = 0
    animation_speed: int = 0
    type: int = BLANK_OBJECT
    property_value: int = 0
    state: int = 0
    priority: int = Priority.BOUNDS
    draw_order: int = 0
    direction: int = 0
    ink_effect: int = 0
    alpha: int = 0
    animation: int = 0
    prev_animation: int = 0
    frame: int = 0


@dataclass
class ObjectBorders:
    """How far outside the camera entities stay active, in pixels."""

    x1: int = 0x80
    x2: int = 0
    y1: int = 0x100
    y2: int = _SCREEN_YSIZE + 0x100


UpdateHook = Callable[[int, Entity], None]


def type_name(object_name: str) -> str:
    """Object type name as stored by the engine: spaces removed."""
    return object_name.replace(" ", "")


def _in_x(x: int, x_scroll: int, borders: ObjectBorders) -> bool:
    return x_scroll - borders.x1 < x < borders.x2 + x_scroll


def _in_y(y: int, y_scroll: int, borders: ObjectBorders) -> bool:
    return y_scroll - borders.y1 < y < y_scroll + borders.y2


def is_active(
    entity: Entity,
    x_scroll_offset: int,
    y_scroll_offset: int,
    borders: ObjectBorders | None = None,
) -> bool:
    """Whether ``entity`` runs this frame given the camera position.

    An entity with ``BOUNDS_DESTROY`` priority that is out of bounds is
    turned into a blank object.
    """
    borders = borders or ObjectBorders()
    x = entity.x_pos >> 16
    y = entity.y_pos >> 16
    priority = entity.priority
    if priority == Priority.BOUNDS:
        return _in_x(x, x_scroll_offset, borders) and _in_y(y, y_scroll_offset, borders)
    if priority in (Priority.ACTIVE, Priority.ALWAYS):
        return True
    if priority == Priority.XBOUNDS:
        return _in_x(x, x_scroll_offset, borders)
    if priority == Priority.BOUNDS_DESTROY:
        if _in_x(x, x_scroll_offset, borders) and _in_y(y, y_scroll_offset, borders):
            return True
        entity.type = BLANK_OBJECT
        return False
    return False


def _run(
    entities: Iterable[Entity],
    selector: Callable[[Entity], bool],
    on_update: Optional[UpdateHook],
    draw_layer_count: int,
) -> list[list[int]]:
    draw_lists: list[list[int]] = [[] for _ in range(draw_layer_count)]
    for index, entity in enumerate(entities):
        if not selector(entity) or entity.type <= BLANK_OBJECT:
            continue
        if on_update is not None:
            on_update(index, entity)
        if 0 <= entity.draw_order < draw_layer_count:
            draw_lists[entity.draw_order].append(index)
    return draw_lists


def collect_active(
    entities: Iterable[Entity],
    x_scroll_offset: int,
    y_scroll_offset: int,
    borders: ObjectBorders | None = None,
    on_update: Optional[UpdateHook] = None,
    draw_layer_count: int = DRAWLAYER_COUNT,
) -> list[list[int]]:
    """Update every active, non-blank entity and return per-layer draw lists.

    ``on_update(index, entity)`` is called for each such entity in order;
    the entity's draw order is read after the call.
    """
    borders = borders or ObjectBorders()
    return _run(
        entities,
        lambda entity: is_active(entity, x_scroll_offset, y_scroll_offset, borders),
        on_update,
        draw_layer_count,
    )


def collect_paused(
    entities: Iterable[Entity],
    on_update: Optional[UpdateHook] = None,
    draw_layer_count: int = DRAWLAYER_COUNT,
) -> list[list[int]]:
    """Like :func:`collect_active`, but only ``ALWAYS`` entities run."""
    return _run(
        entities,
        lambda entity: entity.priority == Priority.ALWAYS,
        on_update,
        draw_layer_count,
    )