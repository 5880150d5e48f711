"""仪表盘内联 CSS（暗色主题，无外部资源）"""

from labreport.report.dashboard import StatusSplit

PASS_COLOR = "#22c55e"
FAIL_COLOR = "#ef4444"
SKIP_COLOR = "#f59e0b"
EMPTY_COLOR = "#334155"


def _pie_background(split: StatusSplit, empty: bool) -> str:
    if empty:
        return EMPTY_COLOR
    pass_end = split.passed
    fail_end = round(split.passed + split.failed, 1)
    return (
        f"conic-gradient({PASS_COLOR} 0 {pass_end:.1f}%, "
        f"{FAIL_COLOR} {pass_end:.1f}% {fail_end:.1f}%, "
        f"{SKIP_COLOR} {fail_end:.1f}% 100%)"
    )


def get_dashboard_styles(split: StatusSplit, empty: bool = False) -> str:
    """返回 <style> 内容，饼图按三项占比用 conic-gradient 绘制"""
    return f"""
    body {{ font-family: Arial, sans-serif; margin: 24px; background: #0f172a; color: #e2e8f0; }}
    h1, h2 {{ margin: 0 0 12px; }}
    .grid {{ display: grid; grid-template-columns: repeat(4, minmax(120px, 1fr)); gap: 12px; margin: 16px 0; }}
    .card {{ background: #1e293b; padding: 12px; border-radius: 10px; }}
    .big {{ font-size: 24px; font-weight: bold; }}
    .layout {{ display: grid; grid-template-columns: 320px 1fr; gap: 16px; margin: 20px 0; }}
    .panel {{ background: #1e293b; padding: 14px; border-radius: 10px; margin-bottom: 16px; }}
    .pie {{ width: 220px; height: 220px; border-radius: 50%; margin: 10px auto;
      background: {_pie_background(split, empty)}; }}
    .legend span {{ display: inline-block; margin-right: 10px; }}
    .dot {{ width: 10px; height: 10px; border-radius: 50%; display: inline-block; margin-right: 5px; }}
    .dot.pass {{ background: {PASS_COLOR}; }}
    .dot.fail {{ background: {FAIL_COLOR}; }}
    .dot.skip {{ background: {SKIP_COLOR}; }}
    .project-wrap {{ display: grid; grid-template-columns: repeat(3, minmax(180px, 1fr)); gap: 10px; }}
    .project-card {{ background: #334155; padding: 10px; border-radius: 8px; }}
    .bar {{ height: 8px; background: #0f172a; border-radius: 8px; margin: 6px 0; overflow: hidden; }}
    .bar span {{ display: block; height: 100%; }}
    .bar .pass {{ background: {PASS_COLOR}; }}
    .bar .fail {{ background: {FAIL_COLOR}; }}
    .bar .skip {{ background: {SKIP_COLOR}; }}
    .status-passed {{ color: {PASS_COLOR}; }}
    .status-failed {{ color: {FAIL_COLOR}; }}
    .status-skipped {{ color: {SKIP_COLOR}; }}
    table {{ width: 100%; border-collapse: collapse; }}
    th, td {{ border-bottom: 1px solid #334155; padding: 8px; text-align: left; }}
    ul {{ margin: 0; padding-left: 18px; }}
    li {{ margin-bottom: 8px; }}
    pre.error {{ white-space: pre-wrap; margin: 4px 0 0; color: #fca5a5; font-size: 12px; }}
    .spec-details {{ background: #0f172a; border-radius: 8px; padding: 8px 10px; margin-bottom: 10px; }}
    .spec-details summary {{ cursor: pointer; display: flex; justify-content: space-between; gap: 10px; list-style: none; }}
    .spec-details summary::-webkit-details-marker {{ display: none; }}
    .spec-title {{ font-weight: 600; }}
    .spec-meta {{ color: #94a3b8; font-size: 12px; }}
    .muted {{ color: #94a3b8; }}
    """
