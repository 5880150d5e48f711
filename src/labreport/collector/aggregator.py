"""运行汇总器：把测试生命周期事件累计成 RunSummary 并在结束时落盘"""

import threading
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path

from labreport.core.exceptions import SummaryFinalizedError
from labreport.core.logging import get_logger
from labreport.report.json_report import write_summary_json
from labreport.schema.events import TestAttempt, TestIdentity
from labreport.schema.summary import (
    UNKNOWN_ERROR,
    FailureRecord,
    FileTally,
    RunSummary,
    Tally,
    TestOutcome,
    TestRecord,
    normalize_status,
)

logger = get_logger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SummaryAggregator:
    """
    一次运行对应一个实例，由执行引擎依次调用：

    - on_run_start(expected_tests)：每次运行调用一次，重复调用会重置开始时间
    - on_test_complete(identity, attempt)：每次测试尝试调用一次
    - on_run_end()：计算耗时、写出 JSON，之后汇总不再变化

    on_test_complete 的计数与映射更新在锁内完成，多个线程并发上报也是安全的。
    未调用 on_run_start 时，整次运行耗时记为 0。
    """

    def __init__(self, output_path: str | Path, clock: Callable[[], datetime] | None = None):
        self.output_path = Path(output_path)
        self.summary = RunSummary()
        self._clock = clock or _utc_now
        self._lock = threading.Lock()
        self._started_at: datetime | None = None
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def on_run_start(self, expected_tests: int) -> None:
        self._started_at = self._clock()
        logger.info(f"学习汇总: 开始运行，共 {expected_tests} 个测试")

    def on_test_complete(self, identity: TestIdentity, attempt: TestAttempt) -> None:
        outcome = normalize_status(attempt.status)
        record = TestRecord(
            title=identity.title,
            full_title=identity.full_title,
            file=identity.file,
            project=identity.project,
            status=outcome,
            duration_ms=attempt.duration_ms,
            retry=attempt.retry,
        )

        with self._lock:
            if self._finalized:
                raise SummaryFinalizedError(f"汇总已写出，不再接受测试事件: {record.full_title}")

            summary = self.summary
            totals = summary.totals
            setattr(totals, outcome.value, getattr(totals, outcome.value) + 1)
            totals.total += 1

            summary.by_project.setdefault(record.project, Tally()).add(outcome)

            file_tally = summary.by_file.setdefault(record.file, FileTally())
            file_tally.add(outcome)
            file_tally.duration_ms += record.duration_ms

            if outcome is TestOutcome.FAILED:
                summary.failures.append(
                    FailureRecord(
                        title=record.title,
                        file=record.file,
                        project=record.project,
                        duration_ms=record.duration_ms,
                        error=attempt.error_message or UNKNOWN_ERROR,
                    )
                )

            summary.tests.append(record)

    def on_run_end(self, elapsed_ms: int | None = None) -> Path:
        """写出汇总

        elapsed_ms 用于回放场景，直接采用引擎记录的整次运行耗时。
        写入失败时 OSError 原样抛出，汇总保持未落盘状态。
        """
        with self._lock:
            if self._finalized:
                raise SummaryFinalizedError(f"汇总已写出: {self.output_path}")

            now = self._clock()
            if elapsed_ms is not None:
                duration_ms = max(int(round(elapsed_ms)), 0)
            elif self._started_at is None:
                logger.warning("未收到 on_run_start，运行耗时记为 0")
                duration_ms = 0
            else:
                duration_ms = max(int((now - self._started_at).total_seconds() * 1000), 0)

            self.summary.duration_ms = duration_ms
            self.summary.generated_at = now.isoformat(timespec="milliseconds")
            file_path = write_summary_json(self.summary, self.output_path)
            self._finalized = True

        totals = self.summary.totals
        logger.info(
            f"学习汇总: 共 {totals.total}  通过 {totals.passed}  "
            f"失败 {totals.failed}  跳过 {totals.skipped}"
        )
        logger.info(f"学习汇总已写入: {file_path}")
        return file_path
