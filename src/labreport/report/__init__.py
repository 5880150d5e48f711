"""报告输出：汇总 JSON 与 HTML 仪表盘"""
