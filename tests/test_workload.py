import numpy as np

from judgesim import generate_judge_input, profile_submissions


class TestGenerateJudgeInput:
    def test_same_seed_same_workload(self):
        a = generate_judge_input(30, rng=np.random.default_rng(3))
        b = generate_judge_input(30, rng=np.random.default_rng(3))
        assert a.submissions == b.submissions
        assert list(a.catalog) == list(b.catalog)

    def test_shape_invariants(self):
        ji = generate_judge_input(50, n_problems=3, n_invokers=2, test_range=(1, 4), rng=np.random.default_rng(0))
        assert ji.invoker_count == 2
        assert len(ji.submissions) == 50
        times = [s.submit_time for s in ji.submissions]
        assert times == sorted(times)
        for s in ji.submissions:
            problem = ji.catalog[s.problem_id]
            assert len(s.verdicts) == problem.test_count
            assert all(0 <= v.time_consumed <= problem.time_limit for v in s.verdicts)

    def test_all_accepted(self):
        ji = generate_judge_input(20, accept_prob=1.0, rng=np.random.default_rng(5))
        assert all(v.passed for s in ji.submissions for v in s.verdicts)
        df = profile_submissions(ji)
        assert (df["Invocations"] == df["TestCount"]).all()
