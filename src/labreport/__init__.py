"""labreport — Playwright 学习实验室的测试结果汇总与仪表盘生成"""

__version__ = "0.1.0"
