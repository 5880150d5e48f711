"""汇总器单元测试 — 计数、派生视图、落盘与事件顺序"""

import json
import threading

import pytest

from labreport.collector.aggregator import SummaryAggregator
from labreport.core.exceptions import SummaryFinalizedError


def _identity(title="test", file="a.spec.js", project="chromium", full_title=None):
    from labreport.schema.events import TestIdentity

    return TestIdentity(title=title, full_title=full_title, file=file, project=project)


def _attempt(status="passed", duration_ms=10, retry=0, error=None):
    from labreport.schema.events import TestAttempt

    return TestAttempt(status=status, duration_ms=duration_ms, retry=retry, error_message=error)


def _read(path) -> dict:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


# ─── 计数 ───────────────────────────────────────────────────

class TestCounting:
    """测试完成事件的计数规则"""

    def test_mixed_statuses(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        agg.on_run_start(5)
        for i, status in enumerate(["passed", "passed", "failed", "skipped", "timedOut"]):
            agg.on_test_complete(_identity(title=f"t{i}"), _attempt(status=status))

        totals = agg.summary.totals
        assert (totals.total, totals.passed, totals.failed, totals.skipped) == (5, 2, 2, 1)
        assert len(agg.summary.failures) == 2
        assert len(agg.summary.tests) == 5

    def test_timed_out_counts_as_failed_everywhere(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        agg.on_test_complete(_identity(title="slow"), _attempt(status="timedOut", error="Test timeout"))

        s = agg.summary
        assert s.totals.failed == 1
        assert s.by_project["chromium"].failed == 1
        assert s.by_file["a.spec.js"].failed == 1
        assert s.tests[0].status.value == "failed"
        assert s.failures[0].title == "slow"
        assert s.failures[0].error == "Test timeout"

    def test_missing_error_gets_placeholder(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        agg.on_test_complete(_identity(), _attempt(status="failed"))
        assert agg.summary.failures[0].error == "Unknown error"

    def test_tallies_sum_to_total(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        events = [
            ("a.spec.js", "chromium", "passed"),
            ("a.spec.js", "firefox", "failed"),
            ("b.spec.js", "chromium", "skipped"),
            ("c.spec.js", "webkit", "passed"),
            ("b.spec.js", "webkit", "interrupted"),
        ]
        for file, project, status in events:
            agg.on_test_complete(_identity(file=file, project=project), _attempt(status=status))

        s = agg.summary
        assert s.totals.total == s.totals.passed + s.totals.failed + s.totals.skipped == len(s.tests)
        assert sum(t.total for t in s.by_project.values()) == s.totals.total
        assert sum(t.total for t in s.by_file.values()) == s.totals.total
        assert list(s.by_project) == ["chromium", "firefox", "webkit"]
        assert list(s.by_file) == ["a.spec.js", "b.spec.js", "c.spec.js"]

    def test_failures_match_failed_tests(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        for i, status in enumerate(["failed", "passed", "timedOut", "failed"]):
            agg.on_test_complete(_identity(title=f"t{i}"), _attempt(status=status))

        failed_titles = [t.title for t in agg.summary.tests if t.status.value == "failed"]
        assert [f.title for f in agg.summary.failures] == failed_titles == ["t0", "t2", "t3"]

    def test_file_duration_accumulates(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        agg.on_test_complete(_identity(title="one"), _attempt(duration_ms=100))
        agg.on_test_complete(_identity(title="two"), _attempt(duration_ms=250))
        assert agg.summary.by_file["a.spec.js"].duration_ms == 350

    def test_retries_append_records(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        agg.on_test_complete(_identity(title="flaky"), _attempt(status="failed", retry=0))
        agg.on_test_complete(_identity(title="flaky"), _attempt(status="passed", retry=1))

        tests = agg.summary.tests
        assert [(t.title, t.retry, t.status.value) for t in tests] == [
            ("flaky", 0, "failed"),
            ("flaky", 1, "passed"),
        ]
        assert agg.summary.totals.total == 2

    def test_unknown_status_leaves_summary_untouched(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        with pytest.raises(ValueError, match="未知测试状态"):
            agg.on_test_complete(_identity(), _attempt(status="exploded"))
        assert agg.summary.totals.total == 0
        assert agg.summary.by_project == {}
        assert agg.summary.tests == []

    def test_concurrent_reporting(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        statuses = ["passed", "failed", "skipped", "timedOut"]

        def _worker(worker_id: int):
            for i in range(100):
                agg.on_test_complete(
                    _identity(title=f"w{worker_id}-{i}", project=f"p{worker_id % 2}"),
                    _attempt(status=statuses[i % 4], duration_ms=1),
                )

        threads = [threading.Thread(target=_worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        s = agg.summary
        assert s.totals.total == 800
        assert (s.totals.passed, s.totals.failed, s.totals.skipped) == (200, 400, 200)
        assert len(s.tests) == 800
        assert len(s.failures) == 400
        assert s.by_file["a.spec.js"].duration_ms == 800


# ─── 落盘 ───────────────────────────────────────────────────

class TestRunEnd:
    """on_run_end 的耗时、时间戳与文件输出"""

    def test_empty_run(self, tmp_path, clock):
        out = tmp_path / "summary.json"
        agg = SummaryAggregator(out, clock=clock)
        agg.on_run_start(0)
        agg.on_run_end()

        data = _read(out)
        assert data["totals"] == {"total": 0, "passed": 0, "failed": 0, "skipped": 0}
        assert data["byProject"] == {}
        assert data["byFile"] == {}
        assert data["failures"] == []
        assert data["tests"] == []
        assert data["durationMs"] == 0

    def test_document_layout(self, tmp_path, clock):
        out = tmp_path / "summary.json"
        agg = SummaryAggregator(out, clock=clock)
        agg.on_run_start(1)
        agg.on_test_complete(
            _identity(title="breaks", full_title="suite › breaks"),
            _attempt(status="failed", duration_ms=42.4, error="boom"),
        )
        agg.on_run_end()

        data = _read(out)
        assert list(data) == ["generatedAt", "totals", "durationMs", "byProject", "byFile", "failures", "tests"]
        assert data["byFile"]["a.spec.js"] == {"passed": 0, "failed": 1, "skipped": 0, "durationMs": 42}
        assert data["failures"] == [
            {"title": "breaks", "file": "a.spec.js", "project": "chromium", "durationMs": 42, "error": "boom"}
        ]
        assert data["tests"] == [
            {
                "title": "breaks",
                "fullTitle": "suite › breaks",
                "file": "a.spec.js",
                "project": "chromium",
                "status": "failed",
                "durationMs": 42,
                "retry": 0,
            }
        ]

    def test_wall_clock_duration_and_timestamp(self, tmp_path, clock):
        out = tmp_path / "summary.json"
        agg = SummaryAggregator(out, clock=clock)
        agg.on_run_start(1)
        agg.on_test_complete(_identity(), _attempt(duration_ms=10))
        clock.advance(1500)
        agg.on_run_end()

        data = _read(out)
        assert data["durationMs"] == 1500
        assert data["generatedAt"] == clock.now.isoformat(timespec="milliseconds")

    def test_missing_run_start_means_zero_duration(self, tmp_path, clock):
        out = tmp_path / "summary.json"
        agg = SummaryAggregator(out, clock=clock)
        agg.on_test_complete(_identity(), _attempt())
        clock.advance(800)
        agg.on_run_end()
        assert _read(out)["durationMs"] == 0
        assert _read(out)["totals"]["total"] == 1

    def test_elapsed_override(self, tmp_path, clock):
        out = tmp_path / "summary.json"
        agg = SummaryAggregator(out, clock=clock)
        agg.on_run_start(0)
        agg.on_run_end(elapsed_ms=6123.4)
        assert _read(out)["durationMs"] == 6123

    def test_creates_directories_and_overwrites(self, tmp_path):
        out = tmp_path / "deep" / "nested" / "summary.json"
        out.parent.mkdir(parents=True)
        out.write_text("stale content that is much longer than the new document" * 50)

        agg = SummaryAggregator(out)
        agg.on_run_start(0)
        agg.on_run_end()

        assert _read(out)["totals"]["total"] == 0
        assert [p.name for p in out.parent.iterdir()] == ["summary.json"]

    def test_unwritable_destination_propagates(self, tmp_path):
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory")
        agg = SummaryAggregator(blocker / "summary.json")
        agg.on_run_start(0)

        with pytest.raises(OSError):
            agg.on_run_end()
        assert agg.finalized is False

    def test_no_mutation_after_finalization(self, tmp_path):
        agg = SummaryAggregator(tmp_path / "summary.json")
        agg.on_run_start(1)
        agg.on_run_end()
        assert agg.finalized is True

        with pytest.raises(SummaryFinalizedError):
            agg.on_test_complete(_identity(), _attempt())
        with pytest.raises(SummaryFinalizedError):
            agg.on_run_end()
        assert agg.summary.totals.total == 0
