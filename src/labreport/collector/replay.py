"""回放 Playwright results.json：把每次尝试作为事件送入汇总器"""

import re

from labreport.collector.aggregator import SummaryAggregator
from labreport.core.logging import get_logger
from labreport.schema.events import TestAttempt, TestIdentity
from labreport.schema.results import RawResults, walk_specs

logger = get_logger(__name__)

TITLE_SEPARATOR = " › "

_ANSI_PATTERN = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")


def strip_ansi(text: str) -> str:
    return _ANSI_PATTERN.sub("", text)


def replay_results(raw: RawResults, aggregator: SummaryAggregator) -> int:
    """按树的遍历顺序回放所有尝试，返回上报的尝试数

    调用方负责之后调用 aggregator.on_run_end()。
    """
    entries = list(walk_specs(raw.suites))
    aggregator.on_run_start(sum(len(spec.tests) for _, spec in entries))

    reported = 0
    for describe_path, spec in entries:
        full_title = TITLE_SEPARATOR.join((*describe_path, spec.title))
        for run in spec.tests:
            identity = TestIdentity(
                title=spec.title,
                full_title=full_title,
                file=spec.file,
                project=run.project,
            )
            for result in run.results:
                error = strip_ansi(result.error_message) if result.error_message else None
                attempt = TestAttempt(
                    status=result.status,
                    duration_ms=result.duration_ms,
                    retry=result.retry,
                    error_message=error,
                )
                try:
                    aggregator.on_test_complete(identity, attempt)
                except ValueError as e:
                    logger.warning(f"跳过 {full_title} [{run.project}]: {e}")
                    continue
                reported += 1

    logger.debug(f"回放完成: {len(entries)} 个 spec，{reported} 次尝试")
    return reported
