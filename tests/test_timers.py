from repchallenge.core import TimerQueue


class TestTimerQueue:
    def test_fires_once_when_due(self):
        q = TimerQueue()
        calls = []
        q.call_later(100, lambda: calls.append("a"))

        assert q.advance(99) == 0
        assert calls == []
        assert q.advance(1) == 1
        assert calls == ["a"]
        assert q.advance(1000) == 0
        assert calls == ["a"]

    def test_runs_in_due_order(self):
        q = TimerQueue()
        calls = []
        q.call_later(300, lambda: calls.append(3))
        q.call_later(100, lambda: calls.append(1))
        q.call_later(200, lambda: calls.append(2))
        q.advance(500)
        assert calls == [1, 2, 3]

    def test_cancelled_handle_never_fires(self):
        q = TimerQueue()
        calls = []
        handle = q.call_later(10, lambda: calls.append("x"))
        handle.cancel()
        q.advance(100)
        assert calls == []
        assert not handle.active

    def test_callback_can_cancel_a_later_timer_in_same_batch(self):
        q = TimerQueue()
        calls = []
        second = q.call_later(20, lambda: calls.append("second"))
        q.call_later(10, second.cancel)
        q.advance(50)
        assert calls == []

    def test_callback_can_schedule_more(self):
        q = TimerQueue()
        calls = []
        q.call_later(10, lambda: q.call_later(10, lambda: calls.append("chained")))
        q.advance(10)
        assert calls == []
        assert q.pending == 1
        q.advance(10)
        assert calls == ["chained"]

    def test_cancel_all(self):
        q = TimerQueue()
        q.call_later(10, lambda: None)
        q.call_later(20, lambda: None)
        q.cancel_all()
        assert q.pending == 0
        assert q.advance(100) == 0

    def test_negative_dt_does_not_rewind(self):
        q = TimerQueue()
        q.advance(50)
        q.advance(-20)
        assert q.now_ms == 50
