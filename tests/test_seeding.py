from block_crush.game import ClockSeedSource, ReplaySeedSource


def test_clock_seed_mixes_stage_time_and_slot():
    source = ClockSeedSource(stage=3, clock=lambda: 12.5)
    assert source.next_seed(0) == 3000 + 12500
    assert source.next_seed(2) == 3000 + 12500 + 2


def test_replay_seed_is_reproducible():
    a = ReplaySeedSource(5)
    b = ReplaySeedSource(5)
    assert [a.next_seed(i) for i in range(10)] == [b.next_seed(i) for i in range(10)]
    assert ReplaySeedSource(6).next_seed(0) != ReplaySeedSource(5).next_seed(0)
