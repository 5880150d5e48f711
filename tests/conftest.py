"""共享测试数据"""

import json
from datetime import datetime, timedelta, timezone

import pytest

pytest_plugins = ["pytester"]

NAV_SPEC = "day-1-basics/1-basic-navigation.spec.js"
MOCK_SPEC = "day-3/1-network-mocking.spec.js"


class FakeClock:
    """可手动推进的时钟"""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2026, 10, 18, 9, 30, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += timedelta(milliseconds=ms)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def raw_results() -> dict:
    """Playwright JSON reporter 输出的精简样本"""
    return {
        "suites": [
            {
                "title": NAV_SPEC,
                "file": NAV_SPEC,
                "specs": [
                    {
                        "title": "opens home page",
                        "file": NAV_SPEC,
                        "tests": [
                            {
                                "projectName": "chromium",
                                "results": [{"status": "passed", "duration": 120, "retry": 0}],
                            },
                            {
                                "projectName": "firefox",
                                "results": [
                                    {
                                        "status": "failed",
                                        "duration": 300,
                                        "retry": 0,
                                        "error": {"message": "\u001b[31mExpected\u001b[39m title to match"},
                                    },
                                    {"status": "passed", "duration": 200, "retry": 1},
                                ],
                            },
                        ],
                    }
                ],
                "suites": [
                    {
                        "title": "navigation menu",
                        "file": NAV_SPEC,
                        "specs": [
                            {
                                "title": "shows links",
                                "file": NAV_SPEC,
                                "tests": [
                                    {
                                        "projectName": "chromium",
                                        "results": [
                                            {
                                                "status": "timedOut",
                                                "duration": 5000,
                                                "retry": 0,
                                                "errors": [{"message": "Test timeout of 5000ms exceeded."}],
                                            }
                                        ],
                                    }
                                ],
                            }
                        ],
                    }
                ],
            },
            {
                "title": MOCK_SPEC,
                "file": MOCK_SPEC,
                "specs": [
                    {
                        "title": "mocks api",
                        "file": MOCK_SPEC,
                        "tests": [
                            {
                                "projectName": "chromium",
                                "results": [{"status": "skipped", "duration": 0, "retry": 0}],
                            }
                        ],
                    }
                ],
            },
        ],
        "stats": {"duration": 6123.4},
    }


@pytest.fixture
def summary_data() -> dict:
    """learning-summary.json 样本"""
    return {
        "generatedAt": "2026-10-18T09:30:06.123+00:00",
        "totals": {"total": 4, "passed": 2, "failed": 1, "skipped": 1},
        "durationMs": 4200,
        "byProject": {
            "chromium": {"passed": 1, "failed": 1, "skipped": 1},
            "firefox": {"passed": 1, "failed": 0, "skipped": 0},
        },
        "byFile": {
            "b.spec.js": {"passed": 1, "failed": 0, "skipped": 0, "durationMs": 50},
            "a.spec.js": {"passed": 1, "failed": 1, "skipped": 0, "durationMs": 500},
            "c.spec.js": {"passed": 0, "failed": 0, "skipped": 1, "durationMs": 10},
        },
        "failures": [
            {
                "title": "submits <form>",
                "file": "a.spec.js",
                "project": "chromium",
                "durationMs": 300,
                "error": "expected <b>200</b> & got 500",
            }
        ],
        "tests": [
            {"title": "loads", "fullTitle": "home › loads", "file": "b.spec.js", "project": "firefox",
             "status": "passed", "durationMs": 50, "retry": 0},
            {"title": "submits <form>", "fullTitle": "forms › submits <form>", "file": "a.spec.js",
             "project": "chromium", "status": "failed", "durationMs": 300, "retry": 0},
            {"title": "renders", "fullTitle": "renders", "file": "a.spec.js", "project": "chromium",
             "status": "passed", "durationMs": 200, "retry": 0},
            {"title": "later", "fullTitle": "later", "file": "c.spec.js", "project": "chromium",
             "status": "skipped", "durationMs": 10, "retry": 0},
        ],
    }


@pytest.fixture
def write_json(tmp_path):
    """把 dict 写成 JSON 文件并返回路径"""

    def _write(name: str, data) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return _write
