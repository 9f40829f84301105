import pytest

from judgesim import Catalog, SubmissionRegistry, Verdict
from judgesim.errors import InputFormatError, SubmissionOrderError
from judgesim.submission import normalize_verdicts

from conftest import ok, rj


@pytest.fixture
def registry():
    return SubmissionRegistry(Catalog.from_pairs([(1000, 3), (500, 1)]))


class TestNormalization:
    def test_short_list_repeats_last_verdict(self):
        verdicts = normalize_verdicts([ok(10), rj(20)], 5)
        assert len(verdicts) == 5
        assert verdicts[2:] == [rj(20)] * 3

    def test_long_list_is_truncated(self):
        assert normalize_verdicts([ok(1), ok(2), ok(3), rj(4)], 2) == [ok(1), ok(2)]

    def test_empty_list_becomes_zero_time_failures(self):
        assert normalize_verdicts([], 3) == [Verdict(0, False)] * 3

    def test_registry_submission_lengths_match_problem(self, registry):
        s = registry.add(0, 0, [ok(5)])
        assert len(s.verdicts) == len(s.judged) == 3
        assert not s.judged.any()
        assert not s.finished


class TestRegistryConstruction:
    def test_unknown_problem_is_fatal(self, registry):
        with pytest.raises(InputFormatError):
            registry.add(0, 7, [ok(1)])

    def test_out_of_order_submit_time_is_fatal(self, registry):
        registry.add(100, 0, [ok(1)])
        registry.add(100, 1, [ok(1)])
        with pytest.raises(SubmissionOrderError):
            registry.add(50, 0, [ok(1)])

    def test_catalog_floors_test_count(self):
        catalog = Catalog()
        catalog.add_problem(1000, 0)
        assert catalog[0].test_count == 1


class TestCheckFinished:
    def _released(self, registry, verdicts, start=0):
        s = registry.add(start, 0, verdicts)
        s.start_time = start
        return len(registry) - 1, s

    def test_unjudged_test_keeps_submission_open(self, registry):
        sid, s = self._released(registry, [ok(1), ok(1), ok(1)])
        s.judged[[0, 2]] = True
        assert registry.check_finished(sid, 50) is False
        assert not s.finished
        assert registry.finished_count == 0

    def test_all_passed_and_judged_finishes(self, registry):
        sid, s = self._released(registry, [ok(1), ok(1), ok(1)], start=20)
        s.judged[:] = True
        assert registry.check_finished(sid, 120) is True
        assert s.finished
        assert s.time_consumed == 100
        assert registry.all_finished

    def test_failure_short_circuits_later_tests(self, registry):
        sid, s = self._released(registry, [ok(1), rj(1), ok(1)])
        s.judged[[0, 1]] = True
        assert registry.check_finished(sid, 30) is True
        assert s.time_consumed == 30

    def test_failure_behind_unjudged_test_does_not_finish(self, registry):
        sid, s = self._released(registry, [ok(1), rj(1), ok(1)])
        s.judged[1] = True
        assert registry.check_finished(sid, 30) is False
        s.judged[0] = True
        assert registry.check_finished(sid, 40) is True
        assert s.time_consumed == 40

    def test_idempotent(self, registry):
        sid, s = self._released(registry, [rj(1)])
        s.judged[0] = True
        assert registry.check_finished(sid, 10) is True
        assert registry.check_finished(sid, 10) is False
        assert registry.check_finished(sid, 500) is False
        assert s.time_consumed == 10
        assert registry.finished_count == 1
