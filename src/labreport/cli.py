"""CLI 入口 — labreport 命令行工具"""

import sys

import click
from rich.console import Console
from rich.table import Table

from labreport import __version__
from labreport.collector.aggregator import SummaryAggregator
from labreport.collector.replay import replay_results
from labreport.core.config import load_config
from labreport.core.exceptions import ConfigError, MalformedArtifactError, MissingArtifactError
from labreport.core.logging import get_logger, setup_logging
from labreport.report.html_report import generate_dashboard
from labreport.schema.results import RawResults
from labreport.schema.summary import RunSummary
from labreport.utils.artifacts import read_json_artifact

logger = get_logger(__name__)
console = Console()
err_console = Console(stderr=True)


@click.group()
@click.option("--config", "config_path", default=None, help="配置文件路径（默认 ./labreport.yaml，可缺省）")
@click.option("--verbose", is_flag=True, help="开启详细日志")
@click.version_option(version=__version__)
@click.pass_context
def cli(ctx, config_path: str | None, verbose: bool):
    """Playwright 学习实验室 — 测试结果汇总与仪表盘"""
    setup_logging(verbose=verbose, console=err_console)
    ctx.ensure_object(dict)

    try:
        ctx.obj["config"] = load_config(config_path)
    except ConfigError as e:
        err_console.print(f"[red]配置加载失败: {e}[/red]")
        sys.exit(2)


@cli.command()
@click.option("--results", "results_path", default=None, help="Playwright results.json 路径")
@click.option("--summary", "summary_path", default=None, help="learning-summary.json 路径")
@click.option("--output", "output_path", default=None, help="仪表盘 HTML 输出路径")
@click.pass_context
def dashboard(ctx, results_path: str | None, summary_path: str | None, output_path: str | None):
    """生成 learning-dashboard.html"""
    config = ctx.obj["config"]
    artifacts = config.artifacts

    try:
        file_path = generate_dashboard(
            results_path or artifacts.results_path,
            summary_path or artifacts.summary_path,
            output_path or artifacts.dashboard_path,
            title=config.dashboard.title,
        )
    except MissingArtifactError as e:
        err_console.print(f"[red]仪表盘生成失败: {e}[/red]")
        sys.exit(2)

    console.print(f"仪表盘: {file_path}")


@cli.command()
@click.option("--results", "results_path", default=None, help="Playwright results.json 路径")
@click.option("--summary", "summary_path", default=None, help="learning-summary.json 输出路径")
@click.pass_context
def summarize(ctx, results_path: str | None, summary_path: str | None):
    """由 Playwright results.json 回放生成 learning-summary.json"""
    artifacts = ctx.obj["config"].artifacts
    results_path = results_path or artifacts.results_path
    summary_path = summary_path or artifacts.summary_path

    try:
        raw = RawResults.from_dict(read_json_artifact(results_path))
    except (MissingArtifactError, MalformedArtifactError) as e:
        err_console.print(f"[red]汇总失败: {e}[/red]")
        sys.exit(2)

    aggregator = SummaryAggregator(summary_path)
    replay_results(raw, aggregator)
    file_path = aggregator.on_run_end(elapsed_ms=raw.duration_ms)

    _print_summary(aggregator.summary)
    console.print(f"汇总: {file_path}")


def _print_summary(summary: RunSummary):
    """打印汇总表格"""
    totals = summary.totals
    table = Table(title="学习汇总")
    table.add_column("指标", style="cyan")
    table.add_column("值", style="green")

    table.add_row("总计", str(totals.total))
    table.add_row("通过", str(totals.passed))
    table.add_row("失败", str(totals.failed))
    table.add_row("跳过", str(totals.skipped))
    table.add_row("耗时 (ms)", str(summary.duration_ms))

    for project, tally in summary.by_project.items():
        table.add_row(f"  {project}", f"{tally.passed}/{tally.total}")

    console.print(table)


def main():
    cli()


if __name__ == "__main__":
    main()
