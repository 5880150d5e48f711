"""Playwright JSON reporter 产物（results.json）模型

只建模用到的部分：suites 树、spec 叶子、每个项目下的尝试结果以及 stats.duration。
解析是宽松的，缺失或类型不对的节点直接忽略。
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any


def _list_of_dicts(value: Any) -> list[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


@dataclass
class SpecAttempt:
    """一次执行尝试（Playwright 的 result）"""

    status: str
    duration_ms: float = 0
    retry: int = 0
    error_message: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> SpecAttempt:
        error_message = None
        error = data.get("error")
        if isinstance(error, dict) and isinstance(error.get("message"), str):
            error_message = error["message"]
        else:
            for item in _list_of_dicts(data.get("errors")):
                if isinstance(item.get("message"), str):
                    error_message = item["message"]
                    break
        retry = data.get("retry")
        return cls(
            status=_str(data.get("status"), "skipped"),
            duration_ms=_number(data.get("duration")) or 0,
            retry=retry if isinstance(retry, int) and not isinstance(retry, bool) else 0,
            error_message=error_message,
        )


@dataclass
class SpecRun:
    """spec 在某个项目（浏览器）下的执行记录"""

    project: str
    results: list[SpecAttempt] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> SpecRun:
        return cls(
            project=_str(data.get("projectName")),
            results=[SpecAttempt.from_dict(r) for r in _list_of_dicts(data.get("results"))],
        )


@dataclass
class SpecLeaf:
    """叶子节点：一个测试定义"""

    title: str
    file: str = ""
    tests: list[SpecRun] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> SpecLeaf:
        return cls(
            title=_str(data.get("title")),
            file=_str(data.get("file")),
            tests=[SpecRun.from_dict(t) for t in _list_of_dicts(data.get("tests"))],
        )


@dataclass
class SuiteNode:
    """分支节点：文件或 describe 块"""

    title: str
    file: str = ""
    specs: list[SpecLeaf] = field(default_factory=list)
    suites: list[SuiteNode] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> SuiteNode:
        return cls(
            title=_str(data.get("title")),
            file=_str(data.get("file")),
            specs=[SpecLeaf.from_dict(s) for s in _list_of_dicts(data.get("specs"))],
            suites=[SuiteNode.from_dict(s) for s in _list_of_dicts(data.get("suites"))],
        )


@dataclass
class RawResults:
    """results.json 根节点"""

    suites: list[SuiteNode] = field(default_factory=list)
    duration_ms: float | None = None

    @classmethod
    def from_dict(cls, data: Any) -> RawResults:
        if not isinstance(data, dict):
            return cls()
        stats = data.get("stats")
        duration = _number(stats.get("duration")) if isinstance(stats, dict) else None
        return cls(
            suites=[SuiteNode.from_dict(s) for s in _list_of_dicts(data.get("suites"))],
            duration_ms=duration,
        )


def walk_specs(
    suites: Iterable[SuiteNode], _path: tuple[str, ...] = (), _top: bool = True
) -> Iterator[tuple[tuple[str, ...], SpecLeaf]]:
    """深度优先遍历，产出 (describe 路径, spec)

    每个 suite 先产出自身的 specs，再进入子 suites。顶层 suite 即文件本身，不计入路径。
    """
    for suite in suites:
        path = _path if _top else _path + (suite.title,)
        for spec in suite.specs:
            yield path, spec
        yield from walk_specs(suite.suites, path, _top=False)


def flatten_specs(suites: Iterable[SuiteNode]) -> list[SpecLeaf]:
    """把 suites 树展开为 spec 列表，保持遍历顺序"""
    return [spec for _, spec in walk_specs(suites)]
