from judgesim import CompletionEvent, CompletionQueue


class TestOrdering:
    def test_failures_before_successes_at_equal_time(self):
        q = CompletionQueue()
        q.schedule(50, True, 0, 0)
        q.schedule(50, False, 3, 1)
        q.schedule(50, True, 1, 0)
        q.schedule(50, False, 2, 0)
        drained = list(q.drain_due(50))
        assert [e.passed for e in drained] == [False, False, True, True]
        assert [(e.submission_id, e.test_id) for e in drained] == [(2, 0), (3, 1), (0, 0), (1, 0)]

    def test_ready_time_dominates(self):
        q = CompletionQueue()
        q.schedule(20, False, 0, 0)
        q.schedule(10, True, 5, 5)
        assert q.pop() == CompletionEvent(10, True, 5, 5)

    def test_test_id_breaks_remaining_ties(self):
        q = CompletionQueue()
        q.schedule(10, True, 1, 2)
        q.schedule(10, True, 1, 0)
        assert q.pop().test_id == 0


class TestDrain:
    def test_stops_at_first_event_not_due(self):
        q = CompletionQueue()
        for t in (10, 20, 30):
            q.schedule(t, True, 0, t // 10)
        assert [e.ready_time for e in q.drain_due(20)] == [10, 20]
        assert len(q) == 1
        assert not q.is_due(29)
        assert q.is_due(30)

    def test_is_due_does_not_remove(self):
        q = CompletionQueue()
        q.schedule(0, True, 0, 0)
        assert q.is_due(0)
        assert q.peek() == CompletionEvent(0, True, 0, 0)
        assert len(q) == 1

    def test_drain_pops_one_event_per_step(self):
        q = CompletionQueue()
        q.schedule(5, True, 0, 0)
        q.schedule(6, True, 0, 1)
        it = q.drain_due(10)
        first = next(it)
        assert first.test_id == 0
        assert len(q) == 1
        # an event scheduled between steps is seen by the same drain
        q.schedule(5, False, 9, 9)
        assert [(e.submission_id, e.test_id) for e in it] == [(9, 9), (0, 1)]

    def test_empty_queue(self):
        q = CompletionQueue()
        assert q.peek() is None
        assert not q.is_due(10 ** 9)
        assert list(q.drain_due(10 ** 9)) == []
