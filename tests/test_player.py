from retrokit.input import InputData
from retrokit.player import ControlBuffers, ControlMode, Player


def test_normal_mode_copies_keys():
    player = Player()
    buffers = ControlBuffers()
    buffers.process(player, InputData(up=True, left=True, b=True), InputData(a=True))
    assert player.up and player.left and not player.right
    assert player.jump_hold and player.jump_press
    assert buffers.up == 1 and buffers.left == 1 and buffers.right == 0


def test_opposite_directions_cancel():
    player = Player()
    ControlBuffers().process(player, InputData(left=True, right=True), InputData())
    assert (player.left, player.right) == (False, False)


def test_none_mode_records_own_state():
    player = Player(control_mode=ControlMode.NONE, down=True)
    buffers = ControlBuffers()
    buffers.process(player, InputData(up=True), InputData())
    assert player.up is False
    assert buffers.down == 1 and buffers.up == 0


def test_sidekick_replays_after_fifteen_shifts():
    leader = Player()
    sidekick = Player(control_mode=ControlMode.SIDEKICK)
    buffers = ControlBuffers()
    buffers.process(leader, InputData(up=True, c=True), InputData())
    for _ in range(15):
        buffers.process(leader, InputData(), InputData())
        buffers.process(sidekick, InputData(), InputData())
        if buffers.up != 1 << 15:
            assert sidekick.up is False
    buffers.process(sidekick, InputData(), InputData())
    assert sidekick.up is True
    assert sidekick.jump_hold is True
    assert sidekick.down is False


def test_buffers_stay_sixteen_bits():
    player = Player()
    buffers = ControlBuffers()
    for _ in range(40):
        buffers.process(player, InputData(right=True), InputData())
    assert buffers.right == 0xFFFF
    for _ in range(16):
        buffers.process(player, InputData(), InputData())
    assert buffers.right == 0