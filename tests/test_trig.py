import pytest

from retrokit.trig import (
    TrigTables,
    arctan_lookup,
    calculate_trig_angles,
    cos256,
    cos512,
    sin256,
    sin512,
)


@pytest.fixture(scope="module")
def tables():
    return TrigTables()


def test_table_sizes(tables):
    assert len(tables.sin_m) == 0x200
    assert len(tables.cos_m) == 0x200
    assert len(tables.sin512) == 0x200
    assert len(tables.cos512) == 0x200
    assert len(tables.sin256) == 0x100
    assert len(tables.cos256) == 0x100
    assert len(tables.arctan256) == 0x100 * 0x100


def test_pinned_quadrants_m(tables):
    assert tables.cos_m[0x00] == 0x1000
    assert tables.cos_m[0x100] == -0x1000
    assert tables.sin_m[0x80] == 0x1000
    assert tables.sin_m[0x180] == -0x1000
    assert tables.sin_m[0x100] == 0


def test_pinned_quadrants_512():
    assert cos512(0) == 0x200
    assert cos512(0x80) == 0
    assert cos512(0x100) == -0x200
    assert sin512(0x80) == 0x200
    assert sin512(0x180) == -0x200


def test_sin256_halves_sin512():
    for i in range(0x100):
        assert sin256(i) == sin512(i * 2) >> 1
        assert cos256(i) == cos512(i * 2) >> 1


def test_sin512_range_and_period():
    for angle in range(0x200):
        assert -0x200 <= sin512(angle) <= 0x200
        assert sin512(angle) == sin512(angle + 0x200)
        assert cos512(angle) == cos512(angle + 0x400)


def test_pythagorean_identity_approximate():
    for angle in range(0, 0x200, 7):
        s, c = sin512(angle), cos512(angle)
        assert abs(s * s + c * c - 0x200 * 0x200) < 4 * 0x200


def test_negative_angle_wrapping():
    assert sin512(-5) == sin512(5)
    assert cos256(-3) == cos256(3)
    assert sin256(-0x40) == sin256(0x40)


def test_arctan_axes():
    assert arctan_lookup(1, 0) == 0
    assert arctan_lookup(-1, 0) == 0x80
    assert arctan_lookup(0, 1) == (arctan_lookup(0, -1) + 0x80) & 0xFF


def test_arctan_scale_invariant():
    assert arctan_lookup(0x1000, 0x1000) == arctan_lookup(0x100, 0x100)
    assert arctan_lookup(0x3000, 0x1000) == arctan_lookup(0x300, 0x100)


def test_arctan_in_byte_range():
    for x in range(-20, 21, 5):
        for y in range(-20, 21, 5):
            assert 0 <= arctan_lookup(x, y) <= 0xFF


def test_arctan_table_monotonic_in_y(tables):
    row = [tables.arctan256[(10 << 8) + y] for y in range(0x100)]
    assert row == sorted(row)


def test_calculate_trig_angles_installs_tables():
    built = calculate_trig_angles()
    assert built.sin512[0x40] == sin512(0x40)
    assert built.cos256[0x10] == cos256(0x10)
    assert built.arctan256[(5 << 8) + 3] == arctan_lookup(5, 3)