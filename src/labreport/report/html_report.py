"""HTML 仪表盘生成

加载 → 派生 → 渲染 → 写出。两份输入 JSON 任一缺失即失败，且不会创建或覆盖输出文件。
所有来自测试数据的字符串（标题、文件名、错误信息）都经过 html.escape。
"""

from datetime import datetime, timezone
from html import escape
from pathlib import Path

from labreport.core.exceptions import MalformedArtifactError
from labreport.core.logging import get_logger
from labreport.report.dashboard import DashboardModel, StatusSplit, build_dashboard_model
from labreport.report.html_styles import get_dashboard_styles
from labreport.schema.results import RawResults
from labreport.schema.summary import RunSummary, TestRecord
from labreport.utils.artifacts import read_json_artifact, write_text_atomic

logger = get_logger(__name__)

DEFAULT_TITLE = "Playwright Learning Dashboard"


# ─── 加载 ───────────────────────────────────────────────────

def _read_or_empty(path: str | Path) -> dict:
    try:
        return read_json_artifact(path)
    except MalformedArtifactError as e:
        logger.warning(f"{e}，按空数据处理")
        return {}


def load_artifacts(results_path: str | Path, summary_path: str | Path) -> tuple[RawResults, RunSummary]:
    """读取 results.json 与 learning-summary.json

    缺失文件抛出 MissingArtifactError；内容损坏时记录警告并退化为默认值。
    """
    raw_data = _read_or_empty(results_path)
    summary_data = _read_or_empty(summary_path)
    return RawResults.from_dict(raw_data), RunSummary.model_validate(summary_data)


# ─── 渲染 ───────────────────────────────────────────────────

def _tile(label: str, value: int) -> str:
    return f'<div class="card"><div>{label}</div><div class="big">{value}</div></div>'


def _bar(css_class: str, pct: float) -> str:
    return f'<div class="bar"><span style="width:{pct:.1f}%" class="{css_class}"></span></div>'


def _legend(split: StatusSplit) -> str:
    return (
        f'<span><i class="dot pass"></i>Pass {split.passed:.1f}%</span>\n'
        f'        <span><i class="dot fail"></i>Fail {split.failed:.1f}%</span>\n'
        f'        <span><i class="dot skip"></i>Skip {split.skipped:.1f}%</span>'
    )


def _project_blocks(model: DashboardModel) -> str:
    if not model.projects:
        return "<div>No data</div>"
    blocks = []
    for card in model.projects:
        blocks.append(f"""
        <div class="project-card">
          <h3>{escape(card.name)}</h3>
          {_bar('pass', card.split.passed)}
          {_bar('fail', card.split.failed)}
          {_bar('skip', card.split.skipped)}
          <p>P:{card.passed} F:{card.failed} S:{card.skipped}</p>
        </div>""")
    return "".join(blocks)


def _failure_items(model: DashboardModel) -> str:
    if not model.failures:
        return "<li>No failures 🎉</li>"
    return "".join(
        f"<li><strong>{escape(f.title)}</strong> <em>({escape(f.project)})</em><br/>"
        f"<small>{escape(f.file)}</small>"
        f'<pre class="error">{escape(f.error)}</pre></li>'
        for f in model.failures
    )


def _file_rows(model: DashboardModel) -> str:
    if not model.files:
        return '<tr><td colspan="5">No file data</td></tr>'
    return "".join(
        f"<tr><td>{escape(row.file)}</td><td>{row.passed}</td><td>{row.failed}</td>"
        f"<td>{row.skipped}</td><td>{row.duration_ms}</td></tr>"
        for row in model.files
    )


def _test_row(test: TestRecord, name: str) -> str:
    status = test.status.value
    return (
        f"<tr><td>{escape(name)}</td><td>{escape(test.project)}</td>"
        f'<td class="status-{status}">{status}</td><td>{test.duration_ms}</td></tr>'
    )


def _test_rows(model: DashboardModel) -> str:
    if not model.tests:
        return '<tr><td colspan="4">No test list data</td></tr>'
    return "".join(_test_row(t, t.full_title or t.title) for t in model.tests)


def _spec_sections(model: DashboardModel) -> str:
    if not model.spec_groups:
        return "<p>No spec grouping data</p>"
    sections = []
    for group in model.spec_groups:
        rows = "".join(_test_row(t, t.title) for t in group.tests)
        sections.append(f"""
    <details class="spec-details">
      <summary>
        <span class="spec-title">{escape(group.file)}</span>
        <span class="spec-meta">Total: {group.total} | ✅ {group.passed} | ❌ {group.failed} | ⏭ {group.skipped}</span>
      </summary>
      <table>
        <thead><tr><th>Test</th><th>Project</th><th>Status</th><th>Duration ms</th></tr></thead>
        <tbody>{rows}</tbody>
      </table>
    </details>""")
    return "".join(sections)


def render_dashboard_html(model: DashboardModel, title: str = DEFAULT_TITLE) -> str:
    """渲染阶段：DashboardModel → 自包含 HTML 文档"""
    generated_at = model.generated_at or datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    totals = model.totals

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1" />
  <title>{escape(title)}</title>
  <style>{get_dashboard_styles(model.split, empty=model.is_empty)}</style>
</head>
<body>
  <h1>📈 {escape(title)}</h1>
  <p class="muted">Generated: {escape(generated_at)}</p>

  <div class="grid">
    {_tile('Total', totals.total)}
    {_tile('Passed', totals.passed)}
    {_tile('Failed', totals.failed)}
    {_tile('Duration (ms)', model.duration_ms)}
  </div>

  <div class="layout">
    <div class="panel">
      <h2>Status split</h2>
      <div class="pie"></div>
      <div class="legend">
        {_legend(model.split)}
      </div>
    </div>
    <div class="panel">
      <h2>By project</h2>
      <div class="project-wrap">{_project_blocks(model)}</div>
    </div>
  </div>

  <div class="layout">
    <div class="panel">
      <h2>Failures</h2>
      <ul>{_failure_items(model)}</ul>
    </div>
    <div class="panel">
      <h2>Slow files (duration)</h2>
      <table>
        <thead><tr><th>File</th><th>Pass</th><th>Fail</th><th>Skip</th><th>Duration ms</th></tr></thead>
        <tbody>{_file_rows(model)}</tbody>
      </table>
      <p class="muted">Total specs in JSON: {model.spec_count}</p>
    </div>
  </div>

  <div class="panel">
    <h2>Test names run ({len(model.tests)})</h2>
    <table>
      <thead><tr><th>Test</th><th>Project</th><th>Status</th><th>Duration ms</th></tr></thead>
      <tbody>{_test_rows(model)}</tbody>
    </table>
  </div>

  <div class="panel">
    <h2>Specs (expand to view tests)</h2>
    {_spec_sections(model)}
  </div>
</body>
</html>
"""


# ─── 入口 ───────────────────────────────────────────────────

def render_dashboard(
    results_path: str | Path,
    summary_path: str | Path,
    title: str = DEFAULT_TITLE,
) -> str:
    """加载两份产物并渲染为 HTML 字符串（不写文件）"""
    raw, summary = load_artifacts(results_path, summary_path)
    model = build_dashboard_model(summary, raw)
    return render_dashboard_html(model, title=title)


def generate_dashboard(
    results_path: str | Path,
    summary_path: str | Path,
    output_path: str | Path,
    title: str = DEFAULT_TITLE,
) -> Path:
    """生成仪表盘 HTML 文件，覆盖已有文件"""
    html = render_dashboard(results_path, summary_path, title=title)
    file_path = write_text_atomic(output_path, html)
    logger.info(f"仪表盘已生成: {file_path}")
    return file_path
