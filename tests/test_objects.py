import pytest

from retrokit.objects import (
    BLANK_OBJECT,
    Entity,
    ObjectBorders,
    Priority,
    collect_active,
    collect_paused,
    is_active,
    type_name,
)


def at(x, y, **kwargs):
    return Entity(x_pos=x << 16, y_pos=y << 16, **kwargs)


BORDERS = ObjectBorders(x1=0x80, x2=400, y1=0x100, y2=240 + 0x100)


def test_type_name_strips_spaces():
    assert type_name("Blank Object") == "BlankObject"
    assert type_name(" Ring  Box ") == "RingBox"


def test_default_borders_follow_source():
    borders = ObjectBorders()
    assert (borders.x1, borders.y1, borders.y2) == (0x80, 0x100, 240 + 0x100)


def test_bounds_inside_is_active():
    assert is_active(at(10, 10, type=1), 0, 0, BORDERS) is True


def test_bounds_edges_are_exclusive():
    assert is_active(at(-0x80, 10, type=1), 0, 0, BORDERS) is False
    assert is_active(at(-0x7F, 10, type=1), 0, 0, BORDERS) is True
    assert is_active(at(10, -0x100, type=1), 0, 0, BORDERS) is False


def test_bounds_follow_scroll():
    entity = at(1000, 10, type=1)
    assert is_active(entity, 0, 0, BORDERS) is False
    assert is_active(entity, 800, 0, BORDERS) is True


@pytest.mark.parametrize("priority", [Priority.ACTIVE, Priority.ALWAYS])
def test_always_active_priorities(priority):
    assert is_active(at(99999, 99999, type=1, priority=priority), 0, 0, BORDERS) is True


def test_xbounds_ignores_y():
    entity = at(10, 99999, type=1, priority=Priority.XBOUNDS)
    assert is_active(entity, 0, 0, BORDERS) is True
    entity.x_pos = 5000 << 16
    assert is_active(entity, 0, 0, BORDERS) is False


def test_bounds_destroy_blanks_entity_out_of_bounds():
    entity = at(5000, 10, type=7, priority=Priority.BOUNDS_DESTROY)
    assert is_active(entity, 0, 0, BORDERS) is False
    assert entity.type == BLANK_OBJECT


def test_bounds_destroy_keeps_entity_in_bounds():
    entity = at(10, 10, type=7, priority=Priority.BOUNDS_DESTROY)
    assert is_active(entity, 0, 0, BORDERS) is True
    assert entity.type == 7


def test_inactive_never_runs():
    assert is_active(at(10, 10, type=1, priority=Priority.INACTIVE), 0, 0, BORDERS) is False


def test_collect_active_updates_and_sorts_by_layer():
    entities = [
        at(10, 10, type=1, draw_order=2),
        at(10, 10, type=BLANK_OBJECT, draw_order=2),
        at(5000, 10, type=1, draw_order=2),
        at(20, 20, type=3, draw_order=0),
        at(20, 20, type=3, draw_order=50),
    ]
    seen = []
    lists = collect_active(entities, 0, 0, BORDERS, lambda i, e: seen.append(i), 4)
    assert seen == [0, 3, 4]
    assert lists == [[3], [], [0], []]


def test_collect_active_reads_draw_order_after_update():
    entities = [at(10, 10, type=1, draw_order=0)]

    def move(index, entity):
        entity.draw_order = 1

    lists = collect_active(entities, 0, 0, BORDERS, move, 3)
    assert lists == [[], [0], []]


def test_collect_paused_runs_only_always():
    entities = [
        at(10, 10, type=1, priority=Priority.ACTIVE),
        at(99999, 10, type=1, priority=Priority.ALWAYS, draw_order=1),
        at(10, 10, type=BLANK_OBJECT, priority=Priority.ALWAYS),
    ]
    seen = []
    lists = collect_paused(entities, lambda i, e: seen.append(i), 2)
    assert seen == [1]
    assert lists == [[], [1]]


def test_draw_lists_cover_each_entity_once():
    entities = [at(i, i, type=1, draw_order=i % 3) for i in range(9)]
    lists = collect_active(entities, 0, 0, BORDERS, None, 3)
    flat = sorted(i for layer in lists for i in layer)
    assert flat == list(range(9))