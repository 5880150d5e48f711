"""仪表盘数据模型：由 RunSummary 与 results.json 纯计算得出，不做 I/O"""

from dataclasses import dataclass, field

from labreport.schema.results import RawResults, flatten_specs
from labreport.schema.summary import FailureRecord, RunSummary, TestOutcome, TestRecord, Totals

UNKNOWN_SPEC = "unknown-spec"


@dataclass
class StatusSplit:
    """通过/失败/跳过占比（百分数，保留一位小数）

    三项各自四舍五入，和不一定恰好是 100。
    """

    passed: float = 0.0
    failed: float = 0.0
    skipped: float = 0.0


def status_split(passed: int, failed: int, skipped: int, total: int) -> StatusSplit:
    denominator = max(total, 1)
    return StatusSplit(
        passed=round(passed / denominator * 100, 1),
        failed=round(failed / denominator * 100, 1),
        skipped=round(skipped / denominator * 100, 1),
    )


@dataclass
class ProjectCard:
    name: str
    passed: int
    failed: int
    skipped: int
    split: StatusSplit


@dataclass
class FileRow:
    file: str
    passed: int
    failed: int
    skipped: int
    duration_ms: int


@dataclass
class SpecGroup:
    """同一 spec 文件下的测试及其局部计数"""

    file: str
    tests: list[TestRecord] = field(default_factory=list)
    passed: int = 0
    failed: int = 0
    skipped: int = 0

    @property
    def total(self) -> int:
        return len(self.tests)


@dataclass
class DashboardModel:
    generated_at: str | None
    totals: Totals
    duration_ms: int
    split: StatusSplit
    projects: list[ProjectCard]
    files: list[FileRow]
    failures: list[FailureRecord]
    tests: list[TestRecord]
    spec_groups: list[SpecGroup]
    spec_count: int

    @property
    def is_empty(self) -> bool:
        return self.totals.total == 0


def _project_cards(summary: RunSummary) -> list[ProjectCard]:
    cards = []
    for name, tally in summary.by_project.items():
        cards.append(
            ProjectCard(
                name=name,
                passed=tally.passed,
                failed=tally.failed,
                skipped=tally.skipped,
                split=status_split(tally.passed, tally.failed, tally.skipped, tally.total),
            )
        )
    return cards


def _file_rows(summary: RunSummary) -> list[FileRow]:
    rows = [
        FileRow(
            file=file,
            passed=tally.passed,
            failed=tally.failed,
            skipped=tally.skipped,
            duration_ms=tally.duration_ms,
        )
        for file, tally in summary.by_file.items()
    ]
    # sorted 是稳定排序，reverse 时相同耗时仍保持原顺序
    return sorted(rows, key=lambda row: row.duration_ms, reverse=True)


def _spec_groups(tests: list[TestRecord]) -> list[SpecGroup]:
    groups: dict[str, SpecGroup] = {}
    for test in tests:
        key = test.file or UNKNOWN_SPEC
        group = groups.setdefault(key, SpecGroup(file=key))
        group.tests.append(test)
        if test.status is TestOutcome.PASSED:
            group.passed += 1
        elif test.status is TestOutcome.FAILED:
            group.failed += 1
        elif test.status is TestOutcome.SKIPPED:
            group.skipped += 1
    # 忽略大小写的字母序
    return [groups[key] for key in sorted(groups, key=lambda key: (key.casefold(), key))]


def build_dashboard_model(summary: RunSummary, raw: RawResults) -> DashboardModel:
    """派生阶段：汇总 + 原始结果 → DashboardModel"""
    totals = summary.totals
    duration = summary.duration_ms or raw.duration_ms or 0

    return DashboardModel(
        generated_at=summary.generated_at,
        totals=totals,
        duration_ms=int(round(duration)),
        split=status_split(totals.passed, totals.failed, totals.skipped, totals.total),
        projects=_project_cards(summary),
        files=_file_rows(summary),
        failures=list(summary.failures),
        tests=list(summary.tests),
        spec_groups=_spec_groups(summary.tests),
        spec_count=len(flatten_specs(raw.suites)),
    )
