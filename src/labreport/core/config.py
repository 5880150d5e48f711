"""全局配置加载

labreport.yaml → Pydantic 校验 → LabReportConfig。
默认配置文件可以不存在，此时全部使用默认值。
"""

from pathlib import Path

import yaml
from pydantic import ValidationError

from labreport.core.exceptions import ConfigError
from labreport.core.logging import get_logger
from labreport.schema.config import LabReportConfig

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path("labreport.yaml")


def load_config(config_path: str | Path | None = None) -> LabReportConfig:
    """加载并校验配置

    config_path 为 None 时读取 ./labreport.yaml（缺失则用默认值）；
    显式指定的文件不存在时抛出 ConfigError。
    """
    explicit = config_path is not None
    path = Path(config_path) if explicit else DEFAULT_CONFIG_PATH

    if not path.exists():
        if explicit:
            raise ConfigError(f"配置文件不存在: {path}")
        logger.debug(f"未找到 {path}，使用默认配置")
        return LabReportConfig()

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"配置文件解析失败 ({path}): {e}") from e

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ConfigError(f"配置文件顶层必须是字典: {path}")

    try:
        return LabReportConfig.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"配置校验失败 ({path}):\n{e}") from e
