from femmesh.stopwatch import Stopwatch


class FakeClock:
    def __init__(self) -> None:
        self.now = 0

    def __call__(self) -> int:
        return self.now


def test_elapsed_milliseconds():
    clock = FakeClock()
    sw = Stopwatch(clock)
    clock.now = 1_500_000
    assert sw.millis() == 1.5


def test_truncates_to_microseconds():
    clock = FakeClock()
    sw = Stopwatch(clock)
    clock.now = 1_234_567
    assert sw.millis() == 1.234


def test_millis_without_reset_keeps_origin():
    clock = FakeClock()
    sw = Stopwatch(clock)
    clock.now = 2_000_000
    first = sw.millis()
    clock.now = 5_000_000
    assert sw.millis() > first


def test_millis_with_reset_restarts():
    clock = FakeClock()
    sw = Stopwatch(clock)
    clock.now = 3_000_000
    sw.millis(reset=True)
    assert sw.millis() == 0.0


def test_reset_restarts():
    clock = FakeClock()
    sw = Stopwatch(clock)
    clock.now = 9_000_000
    sw.reset()
    assert sw.millis() == 0.0


def test_real_clock_is_monotonic():
    sw = Stopwatch()
    first = sw.millis()
    second = sw.millis()
    assert 0.0 <= first <= second