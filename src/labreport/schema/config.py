"""全局配置 Pydantic 模型

对应可选的 labreport.yaml，所有字段都有约定默认值。
"""

from pydantic import BaseModel, Field


class ArtifactsConfig(BaseModel):
    """产物路径（相对于当前工作目录）"""

    results_path: str = "test-results/results.json"
    summary_path: str = "test-results/learning-summary.json"
    dashboard_path: str = "playwright-report/learning-dashboard.html"


class DashboardConfig(BaseModel):
    """仪表盘展示设置"""

    title: str = "Playwright Learning Dashboard"


class LabReportConfig(BaseModel):
    """labreport.yaml 根模型"""

    artifacts: ArtifactsConfig = Field(default_factory=ArtifactsConfig)
    dashboard: DashboardConfig = Field(default_factory=DashboardConfig)
