from aicds.rate_limiter import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_limits_within_window():
    clock = FakeClock()
    limiter = RateLimiter(2, 10, clock=clock)
    assert limiter.allow_request() is True
    assert limiter.allow_request() is True
    assert limiter.allow_request() is False
    assert limiter.current_requests() == 2


def test_requests_expire_after_window():
    clock = FakeClock()
    limiter = RateLimiter(2, 10, clock=clock)
    limiter.allow_request()
    limiter.allow_request()
    clock.now = 10.0
    assert limiter.allow_request() is False
    clock.now = 10.5
    assert limiter.allow_request() is True
    assert limiter.current_requests() == 1


def test_reset():
    clock = FakeClock()
    limiter = RateLimiter(1, 10, clock=clock)
    limiter.allow_request()
    limiter.reset()
    assert limiter.current_requests() == 0
    assert limiter.allow_request() is True