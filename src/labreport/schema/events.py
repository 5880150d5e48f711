"""执行引擎 → 汇总器的事件载荷

可选字段在构造时一次性解析为默认值，汇总器和渲染器不再逐处判空。
"""

from dataclasses import dataclass

from labreport.schema.summary import UNKNOWN_FILE, UNKNOWN_PROJECT


def first_line(text: str | None) -> str | None:
    """错误信息只保留第一个非空行"""
    for line in (text or "").splitlines():
        if line.strip():
            return line.strip()
    return None


@dataclass
class TestIdentity:
    """测试身份：与第几次尝试无关"""

    __test__ = False

    title: str
    full_title: str | None = None
    file: str | None = None
    project: str | None = None

    def __post_init__(self) -> None:
        self.full_title = self.full_title or self.title
        self.file = self.file or UNKNOWN_FILE
        self.project = self.project or UNKNOWN_PROJECT


@dataclass
class TestAttempt:
    """单次尝试的结果，status 为引擎原始状态（如 timedOut）

    error_message 在构造时截为第一行，两种采集方式得到的失败信息形态一致。
    """

    __test__ = False

    status: str
    duration_ms: float = 0
    retry: int = 0
    error_message: str | None = None

    def __post_init__(self) -> None:
        self.duration_ms = max(int(round(self.duration_ms or 0)), 0)
        self.retry = max(int(self.retry or 0), 0)
        self.error_message = first_line(self.error_message)
