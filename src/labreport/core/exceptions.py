"""自定义异常定义"""

from pathlib import Path


class LabReportError(Exception):
    """labreport 基础异常"""


class ConfigError(LabReportError):
    """配置加载或校验错误"""


class MissingArtifactError(LabReportError):
    """渲染所需的 JSON 产物不存在"""

    def __init__(self, file_path: str | Path):
        super().__init__(f"缺少必需的产物文件: {file_path}")
        self.file_path = str(file_path)


class MalformedArtifactError(LabReportError):
    """JSON 产物存在但无法解析"""

    def __init__(self, message: str, file_path: str | None = None):
        super().__init__(message)
        self.file_path = file_path


class SummaryFinalizedError(LabReportError):
    """汇总已落盘后仍收到测试事件"""
