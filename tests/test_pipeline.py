import threading
import time
import uuid

import pytest

from uuidharvest.config import MAX_BATCH_SIZE
from uuidharvest.ignore import IgnoreIndex
from uuidharvest.pipeline import run_harvest
from uuidharvest.wordlist import normalize_names

from conftest import ALEX_ID, STEVE_ID, FakeResolver


def _lines(path):
    return path.read_text(encoding="utf-8").splitlines()


def _run(tmp_path, resolver, names, suffixes=("",), **kw):
    out = tmp_path / "found.txt"
    res = run_harvest(
        names,
        list(suffixes),
        output_path=out,
        resolver=resolver,
        counters=resolver.counters,
        status_interval=0.01,
        **kw,
    )
    return res, out


class TestScenarios:
    def test_two_of_three_resolve(self, tmp_path, fake_resolver):
        names = normalize_names(["Steve", "Alex", "Notch"])
        res, out = _run(tmp_path, fake_resolver, names, threads=1)

        assert sorted(_lines(out)) == sorted([str(STEVE_ID), str(ALEX_ID)])
        assert res.counters.found == 2
        assert res.counters.resolved == 2
        assert res.counters.requests == 1
        assert res.workers == 1

    def test_exact_ignore(self, tmp_path, fake_resolver):
        names = normalize_names(["Steve", "Alex", "Notch"])
        res, out = _run(
            tmp_path,
            fake_resolver,
            names,
            threads=1,
            ignore=IgnoreIndex([STEVE_ID]),
        )
        assert _lines(out) == [str(ALEX_ID)]
        assert res.counters.found == 1
        assert res.counters.resolved == 2

    def test_suffix_expansion_in_one_batch(self, tmp_path):
        resolver = FakeResolver({})
        _run(tmp_path, resolver, ["bob"], suffixes=["", "_01"], threads=1)
        assert resolver.batches == [["bob", "bob_01"]]

    def test_transport_failure_does_not_abort(self, tmp_path, mojang_table):
        resolver = FakeResolver(mojang_table, fail_on={"steve"})
        res, out = _run(tmp_path, resolver, ["alex", "notch", "steve"], threads=1)
        assert res.counters.requests == 1
        assert res.counters.resolved == 0
        assert res.counters.found == 0
        assert _lines(out) == []


class TestProperties:
    @pytest.fixture
    def big(self):
        names = [f"player{i:04d}" for i in range(537)]
        # every third name exists
        table = {
            n: uuid.uuid5(uuid.NAMESPACE_DNS, n) for n in names[::3]
        }
        return names, table

    def test_many_workers_counts_line_up(self, tmp_path, big):
        names, table = big
        suffixes = ["", "_x"]
        resolver = FakeResolver(table)
        ignore = IgnoreIndex(list(table.values())[:20])
        res, out = _run(
            tmp_path, resolver, names, suffixes=suffixes, threads=16, ignore=ignore
        )

        written = _lines(out)
        assert res.workers == 16
        # one request per dispatched batch, none over the limit
        assert res.counters.requests == len(resolver.batches)
        assert all(len(b) <= MAX_BATCH_SIZE for b in resolver.batches)
        # every expansion went out exactly once
        assert sorted(resolver.submitted) == sorted(
            f"{n}{s}" for n in names for s in suffixes
        )
        assert res.counters.resolved == len(table)
        assert res.counters.found == len(written) == len(table) - 20
        assert not set(written) & {str(u) for u in list(table.values())[:20]}

    def test_threads_clamped_to_candidates(self, tmp_path, fake_resolver):
        res, _ = _run(tmp_path, fake_resolver, ["alex", "steve"], threads=80)
        assert res.workers == 2

    def test_no_candidates(self, tmp_path, fake_resolver):
        res, out = _run(tmp_path, fake_resolver, [], threads=4)
        assert res.workers == 0
        assert res.counters.requests == 0
        assert out.exists()

    def test_appends_after_previous_run(self, tmp_path, fake_resolver):
        out = tmp_path / "found.txt"
        out.write_text("old-line\n", encoding="utf-8")
        _run(tmp_path, fake_resolver, ["alex"], threads=1)
        assert _lines(out) == ["old-line", str(ALEX_ID)]


def test_unwritable_output_is_fatal(tmp_path, fake_resolver):
    with pytest.raises(OSError):
        run_harvest(
            ["alex"],
            [""],
            output_path=tmp_path / "missing-dir" / "found.txt",
            resolver=fake_resolver,
            counters=fake_resolver.counters,
        )
    # nothing was looked up
    assert fake_resolver.batches == []


def test_write_failure_mid_run_is_fatal(tmp_path, fake_resolver, monkeypatch, capsys):
    from uuidharvest.aggregator import Aggregator

    def boom(self, pair, fh):
        raise OSError("No space left on device")

    monkeypatch.setattr(Aggregator, "handle", boom)
    with pytest.raises(OSError, match="No space left"):
        _run(tmp_path, fake_resolver, ["alex", "steve"], threads=1)
    assert "[pipeline] output write failed" in capsys.readouterr().err


def test_resolver_counters_used_when_none_given(tmp_path, fake_resolver):
    res = run_harvest(
        ["alex", "notch", "steve"],
        [""],
        output_path=tmp_path / "found.txt",
        resolver=fake_resolver,
        threads=1,
        status_interval=0.01,
    )
    assert res.counters.requests == 1
    assert res.counters.resolved == 2
    assert res.counters.found == 2


class _SlowResolver(FakeResolver):
    def resolve(self, names):
        time.sleep(0.01)
        return super().resolve(names)


def test_interrupt_stops_workers_and_keeps_results(tmp_path, monkeypatch):
    names = [f"player{i:04d}" for i in range(500)]
    resolver = _SlowResolver({n: uuid.uuid5(uuid.NAMESPACE_DNS, n) for n in names})
    real_join = threading.Thread.join
    interrupted = []

    def join(self, timeout=None):
        if self.name.startswith("uuidharvest-worker") and not interrupted:
            interrupted.append(self.name)
            raise KeyboardInterrupt
        return real_join(self, timeout)

    monkeypatch.setattr(threading.Thread, "join", join)
    with pytest.raises(KeyboardInterrupt):
        _run(tmp_path, resolver, names, threads=1)
    monkeypatch.undo()

    # stopped well before the 50 batches of the partition
    assert len(resolver.batches) < 50
    assert not any(
        t.name.startswith("uuidharvest-worker") and t.is_alive()
        for t in threading.enumerate()
    )
    # whatever was resolved before the stop still reached the file
    written = _lines(tmp_path / "found.txt")
    assert len(written) == resolver.counters.snapshot().resolved
    assert resolver.counters.snapshot().found == len(written)
