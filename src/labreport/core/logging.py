"""日志配置"""

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "labreport"


def setup_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """为 labreport 包级 logger 挂载 Rich 输出

    不修改 root logger：作为 pytest 插件运行时，宿主的日志配置保持原样。
    重复调用会替换之前挂载的 RichHandler。
    """
    level = logging.DEBUG if verbose else logging.INFO
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        if isinstance(handler, RichHandler):
            package_logger.removeHandler(handler)

    handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        show_path=verbose,
        log_time_format="[%X]",
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger.addHandler(handler)
    return package_logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
