"""learning-summary.json 输出"""

import json
from pathlib import Path

from labreport.core.logging import get_logger
from labreport.schema.summary import RunSummary
from labreport.utils.artifacts import write_text_atomic

logger = get_logger(__name__)


def write_summary_json(summary: RunSummary, output_path: str | Path) -> Path:
    """将运行汇总写为 JSON，覆盖已有文件"""
    content = json.dumps(summary.to_json_dict(), ensure_ascii=False, indent=2)
    file_path = write_text_atomic(output_path, content + "\n")
    logger.debug(f"汇总 JSON 已写入: {file_path}")
    return file_path
