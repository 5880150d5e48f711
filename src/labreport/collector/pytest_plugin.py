"""pytest 插件：在 pytest（含 pytest-playwright）运行中生成 learning-summary.json

通过 ``--learning-summary PATH`` 或 ini 项 ``learning_summary`` 启用，未指定路径时不做任何事。

测试身份（原始函数名、browser_name、第几次执行）在执行测试的进程里写入
``report.user_properties``。pytest-xdist 会把报告连同 user_properties 发回主进程，
主进程只依据报告本身汇总，不需要访问 Item。
"""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

import pytest

from labreport.collector.aggregator import SummaryAggregator
from labreport.schema.events import TestAttempt, TestIdentity

PLUGIN_NAME = "labreport-summary"
TITLE_SEPARATOR = " › "
PROPERTY_PREFIX = "labreport."


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("labreport", "learning summary report")
    group.addoption(
        "--learning-summary",
        dest="learning_summary",
        metavar="PATH",
        default=None,
        help="运行结束时将学习汇总 JSON 写入 PATH",
    )
    parser.addini("learning_summary", "学习汇总 JSON 输出路径", default="")


def summary_path(config: pytest.Config) -> str | None:
    return config.getoption("learning_summary") or config.getini("learning_summary") or None


def pytest_configure(config: pytest.Config) -> None:
    # xdist worker 只负责附加 user_properties，汇总与写文件在主进程
    if hasattr(config, "workerinput"):
        return
    output_path = summary_path(config)
    if not output_path:
        return
    plugin = LearningSummaryPlugin(SummaryAggregator(output_path))
    config.pluginmanager.register(plugin, PLUGIN_NAME)


def pytest_unconfigure(config: pytest.Config) -> None:
    plugin = config.pluginmanager.get_plugin(PLUGIN_NAME)
    if plugin is not None:
        config.pluginmanager.unregister(plugin, PLUGIN_NAME)


def item_properties(item: pytest.Item) -> list[tuple[str, Any]]:
    """取出只有执行进程才能拿到的测试身份"""
    execution_count = getattr(item, "execution_count", 1) or 1
    properties: list[tuple[str, Any]] = [
        (PROPERTY_PREFIX + "title", getattr(item, "originalname", None) or item.name),
        (PROPERTY_PREFIX + "retry", max(execution_count - 1, 0)),
    ]
    callspec = getattr(item, "callspec", None)
    project = callspec.params.get("browser_name") if callspec is not None else None
    if project:
        properties.append((PROPERTY_PREFIX + "project", str(project)))
    return properties


@pytest.hookimpl(wrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo) -> Generator[None, pytest.TestReport, pytest.TestReport]:
    report = yield
    if summary_path(item.config):
        # report.user_properties 与 item.user_properties 是同一个列表，换成新列表再追加
        report.user_properties = [*report.user_properties, *item_properties(item)]
    return report


def report_properties(report: pytest.TestReport) -> dict[str, Any]:
    properties = {}
    for name, value in getattr(report, "user_properties", None) or []:
        if isinstance(name, str) and name.startswith(PROPERTY_PREFIX):
            properties[name[len(PROPERTY_PREFIX):]] = value
    return properties


def is_reported_phase(report: pytest.TestReport) -> bool:
    """每次尝试只上报一个阶段：call，或未通过的 setup"""
    if report.when == "call":
        return True
    return report.when == "setup" and not report.passed


def identity_from_report(report: pytest.TestReport) -> TestIdentity:
    parts = report.nodeid.split("::")
    properties = report_properties(report)
    title = properties.get("title") or parts[-1]
    return TestIdentity(
        title=title,
        full_title=TITLE_SEPARATOR.join(parts[1:]) or title,
        file=parts[0],
        project=properties.get("project"),
    )


def _crash_message(report: pytest.TestReport) -> str | None:
    longrepr: Any = report.longrepr
    crash = getattr(longrepr, "reprcrash", None)
    return getattr(crash, "message", None) or report.longreprtext or None


def attempt_from_report(report: pytest.TestReport) -> TestAttempt:
    # pytest-rerunfailures 把被重跑的失败尝试标记为 "rerun"
    status = "failed" if report.outcome == "rerun" else report.outcome
    return TestAttempt(
        status=status,
        duration_ms=report.duration * 1000,
        retry=report_properties(report).get("retry", 0),
        error_message=_crash_message(report) if status == "failed" else None,
    )


class LearningSummaryPlugin:
    """把 pytest 钩子转成汇总器的三类事件"""

    def __init__(self, aggregator: SummaryAggregator):
        self.aggregator = aggregator
        self._started = False

    def _start(self, expected_tests: int) -> None:
        if not self._started:
            self._started = True
            self.aggregator.on_run_start(expected_tests)

    def pytest_collection_finish(self, session: pytest.Session) -> None:
        self._start(len(session.items))

    # 启用 xdist 时主进程不收集，pytest_collection_finish 不会触发；
    # 每个 worker 收集到的是同一组测试，取第一个 worker 的数量
    @pytest.hookimpl(optionalhook=True)
    def pytest_xdist_node_collection_finished(self, node: Any, ids: list[str]) -> None:
        self._start(len(ids))

    def pytest_runtest_logreport(self, report: pytest.TestReport) -> None:
        if not is_reported_phase(report):
            return
        self.aggregator.on_test_complete(identity_from_report(report), attempt_from_report(report))

    def pytest_sessionfinish(self, session: pytest.Session) -> None:
        self.aggregator.on_run_end()
