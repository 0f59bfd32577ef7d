import time

from flashrep.infrastructure.clock import FixedClock, SystemClock


def test_system_clock_returns_epoch_ms():
    before = int(time.time() * 1000)
    now = SystemClock().now()
    after = int(time.time() * 1000)
    assert before - 1 <= now <= after + 1


def test_fixed_clock_moves_only_when_told():
    clock = FixedClock(1000)
    assert clock.now() == 1000

    clock.advance(500)
    assert clock.now() == 1500

    clock.set(42)
    assert clock.now() == 42
