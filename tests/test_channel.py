import io

import pytest

from judgesim import Catalog, PolicyChannel, TextChannel, serve_policy
from judgesim.catalog import Problem
from judgesim.channel import SENTINEL
from judgesim.errors import InputFormatError, MalformedRequest
from judgesim.strategies import FCFSPolicy

from conftest import ScriptedPolicy


class TestTextChannel:
    def test_outbound_format(self):
        out = io.StringIO()
        ch = TextChannel(io.StringIO(""), out)
        ch.write_preamble(4, list(Catalog.from_pairs([(1000, 3), (200, 1)])))
        ch.write_problem(1)
        ch.end_problems()
        ch.write_result(0, 2, True)
        ch.write_result(3, 0, False)
        ch.end_results()
        assert out.getvalue() == "4 2\n1000 3\n200 1\n1\n-1\n0 2 OK\n3 0 RJ\n-1 -1\n"

    def test_open_without_announce_is_silent(self):
        out = io.StringIO()
        TextChannel(io.StringIO(""), out).open(4, [Problem(1000, 3)], announce=False)
        assert out.getvalue() == ""

    def test_reads_pairs_across_lines(self):
        ch = TextChannel(io.StringIO("0 1 2\n3\n-1 -1\n"), io.StringIO())
        assert ch.read_request() == (0, 1)
        assert ch.read_request() == (2, 3)
        assert ch.read_request() == SENTINEL
        assert ch.read_request() is None

    def test_half_pair_is_end_of_stream(self):
        ch = TextChannel(io.StringIO("7\n"), io.StringIO())
        assert ch.read_request() is None

    def test_non_integer_is_violation(self):
        ch = TextChannel(io.StringIO("0 x\n"), io.StringIO())
        with pytest.raises(MalformedRequest):
            ch.read_request()


class TestPolicyChannel:
    def test_tick_is_delivered_on_flush(self):
        policy = ScriptedPolicy({0: [(0, 0), (0, 1)]})
        ch = PolicyChannel(policy)
        ch.write_problem(2)
        ch.end_problems()
        ch.write_result(5, 1, False)
        ch.end_results()
        assert ch.read_request() is None
        ch.flush()
        assert policy.ticks[0].problems == [2]
        assert policy.ticks[0].results == [(5, 1, False)]
        assert [ch.read_request() for _ in range(3)] == [(0, 0), (0, 1), SENTINEL]
        assert ch.read_request() is None

    def test_closed_policy_is_not_called_again(self):
        policy = ScriptedPolicy({}, close_after=0)
        ch = PolicyChannel(policy)
        ch.flush()
        ch.flush()
        assert ch.closed
        assert len(policy.ticks) == 1
        assert ch.read_request() is None

    def test_open_starts_policy_even_without_announce(self):
        policy = FCFSPolicy()
        PolicyChannel(policy).open(2, [Problem(1000, 2)], announce=False)
        assert policy.invoker_count == 2
        assert policy.free == 2
        assert policy.problems == [Problem(1000, 2)]


class TestServePolicy:
    def test_fcfs_over_text(self):
        transcript = "2 1\n1000 2\n" "0\n-1\n-1 -1\n" "-1\n0 0 OK\n-1 -1\n"
        out = io.StringIO()
        ticks = serve_policy(FCFSPolicy(), io.StringIO(transcript), out)
        assert ticks == 2
        assert out.getvalue() == "0 0\n0 1\n-1 -1\n-1 -1\n"

    def test_policy_sees_problem_table(self):
        policy = ScriptedPolicy({})
        serve_policy(policy, io.StringIO("3 2\n100 1\n200 4\n"), io.StringIO())
        assert policy.invoker_count == 3
        assert policy.problems == [Problem(100, 1), Problem(200, 4)]
        assert policy.ticks == []

    def test_truncated_tick_is_an_error(self):
        with pytest.raises(InputFormatError):
            serve_policy(ScriptedPolicy({}), io.StringIO("1 0\n-1\n0 0\n"), io.StringIO())
