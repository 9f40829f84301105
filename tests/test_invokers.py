import numpy as np

from judgesim import DispatchStatus, InvokerPool
from conftest import ok


class TestDispatch:
    def test_picks_lowest_index_when_all_free(self):
        pool = InvokerPool(2)
        result = pool.dispatch(5, ok(30))
        assert result.status is DispatchStatus.SCHEDULED
        assert result.invoker == 0
        assert result.completion_time == 35
        assert pool.free_time.tolist() == [35, 0]

    def test_skips_busy_invoker(self):
        pool = InvokerPool(2)
        pool.free_time[:] = [6, 0]
        result = pool.dispatch(5, ok(10))
        assert result.invoker == 1
        assert pool.free_time.tolist() == [6, 15]

    def test_invoker_free_at_exactly_now_is_chosen_first(self):
        pool = InvokerPool(2)
        pool.free_time[:] = [5, 0]
        assert pool.dispatch(5, ok(10)).invoker == 0

    def test_no_capacity_drops_without_state_change(self):
        pool = InvokerPool(3)
        pool.free_time[:] = [20, 30, 40]
        before = pool.free_time.copy()
        result = pool.dispatch(10, ok(5))
        assert result.status is DispatchStatus.DROPPED
        assert not result.scheduled
        assert result.invoker is None and result.completion_time is None
        np.testing.assert_array_equal(pool.free_time, before)

    def test_zero_time_verdict_leaves_invoker_free(self):
        pool = InvokerPool(1)
        assert pool.dispatch(10, ok(0)).completion_time == 10
        assert pool.busy_count(10) == 0
        assert pool.dispatch(10, ok(0)).scheduled

    def test_empty_pool_always_drops(self):
        assert not InvokerPool(0).dispatch(0, ok(1)).scheduled
