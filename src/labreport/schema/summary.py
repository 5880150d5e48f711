"""运行汇总模型

对应 learning-summary.json。Python 字段为 snake_case，JSON 键通过别名保持 camelCase。

读取时采用宽松校验：任何字段缺失或类型不对都退化为默认值（计数为 0、列表为空、
占位字符串），因此 ``RunSummary.model_validate`` 对任意 dict 都不会抛出异常。
"""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, model_validator

UNKNOWN_FILE = "unknown-file"
UNKNOWN_PROJECT = "unknown"
UNKNOWN_ERROR = "Unknown error"


class TestOutcome(str, Enum):
    """归一化后的测试结果"""

    __test__ = False

    PASSED = "passed"
    FAILED = "failed"
    SKIPPED = "skipped"


_STATUS_MAP: dict[str, TestOutcome] = {
    "passed": TestOutcome.PASSED,
    "failed": TestOutcome.FAILED,
    "timedOut": TestOutcome.FAILED,
    "interrupted": TestOutcome.FAILED,
    "skipped": TestOutcome.SKIPPED,
}


def normalize_status(raw: str | TestOutcome) -> TestOutcome:
    """执行引擎的原始状态 → TestOutcome（timedOut / interrupted 计为 failed）"""
    if isinstance(raw, TestOutcome):
        return raw
    try:
        return _STATUS_MAP[raw]
    except (KeyError, TypeError):
        raise ValueError(f"未知测试状态: {raw!r}") from None


# ─── 宽松类型 ───────────────────────────────────────────────

def _count(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    try:
        return max(int(round(float(value))), 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def _text_or(default: str):
    def _coerce(value: Any) -> str:
        if isinstance(value, str) and value:
            return value
        return default

    return _coerce


def _optional_text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def _outcome(value: Any) -> TestOutcome:
    try:
        return normalize_status(value)
    except ValueError:
        return TestOutcome.FAILED


def _object(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _objects(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _object_map(value: Any) -> dict[str, dict]:
    if not isinstance(value, dict):
        return {}
    return {str(key): item for key, item in value.items() if isinstance(item, dict)}


Count = Annotated[int, BeforeValidator(_count)]
Title = Annotated[str, BeforeValidator(_text_or(""))]
FilePath = Annotated[str, BeforeValidator(_text_or(UNKNOWN_FILE))]
ProjectName = Annotated[str, BeforeValidator(_text_or(UNKNOWN_PROJECT))]
ErrorText = Annotated[str, BeforeValidator(_text_or(UNKNOWN_ERROR))]
Outcome = Annotated[TestOutcome, BeforeValidator(_outcome)]


class _ArtifactModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# ─── 计数 ───────────────────────────────────────────────────

class Totals(_ArtifactModel):
    """整次运行的总计数"""

    total: Count = 0
    passed: Count = 0
    failed: Count = 0
    skipped: Count = 0


class Tally(_ArtifactModel):
    """按某个维度（项目）分组的计数"""

    passed: Count = 0
    failed: Count = 0
    skipped: Count = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.skipped

    def add(self, outcome: TestOutcome) -> None:
        setattr(self, outcome.value, getattr(self, outcome.value) + 1)


class FileTally(Tally):
    """按 spec 文件分组的计数，额外累计耗时"""

    duration_ms: Count = Field(default=0, alias="durationMs")


# ─── 记录 ───────────────────────────────────────────────────

class TestRecord(_ArtifactModel):
    """一次测试尝试（重试会产生新的记录）"""

    __test__ = False

    title: Title = ""
    full_title: Title = Field(default="", alias="fullTitle")
    file: FilePath = UNKNOWN_FILE
    project: ProjectName = UNKNOWN_PROJECT
    status: Outcome = TestOutcome.FAILED
    duration_ms: Count = Field(default=0, alias="durationMs")
    retry: Count = 0

    @model_validator(mode="after")
    def fallback_full_title(self) -> "TestRecord":
        if not self.full_title:
            self.full_title = self.title
        return self


class FailureRecord(_ArtifactModel):
    """失败测试的派生视图"""

    title: Title = ""
    file: FilePath = UNKNOWN_FILE
    project: ProjectName = UNKNOWN_PROJECT
    duration_ms: Count = Field(default=0, alias="durationMs")
    error: ErrorText = UNKNOWN_ERROR


class RunSummary(_ArtifactModel):
    """learning-summary.json 根模型"""

    generated_at: Annotated[str | None, BeforeValidator(_optional_text)] = Field(
        default=None, alias="generatedAt"
    )
    totals: Annotated[Totals, BeforeValidator(_object)] = Field(default_factory=Totals)
    duration_ms: Count = Field(default=0, alias="durationMs")
    by_project: Annotated[dict[str, Tally], BeforeValidator(_object_map)] = Field(
        default_factory=dict, alias="byProject"
    )
    by_file: Annotated[dict[str, FileTally], BeforeValidator(_object_map)] = Field(
        default_factory=dict, alias="byFile"
    )
    failures: Annotated[list[FailureRecord], BeforeValidator(_objects)] = Field(default_factory=list)
    tests: Annotated[list[TestRecord], BeforeValidator(_objects)] = Field(default_factory=list)

    def to_json_dict(self) -> dict:
        """按 learning-summary.json 的键名导出"""
        return self.model_dump(mode="json", by_alias=True)
