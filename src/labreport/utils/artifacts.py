"""JSON 产物读取与原子写入"""

import json
import os
import tempfile
from pathlib import Path

from labreport.core.exceptions import MalformedArtifactError, MissingArtifactError


def read_json_artifact(path: str | Path) -> dict:
    """读取 JSON 产物，返回顶层字典

    文件不存在 → MissingArtifactError；无法解析或顶层不是对象 → MalformedArtifactError。
    """
    path = Path(path)
    if not path.is_file():
        raise MissingArtifactError(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except ValueError as e:
        raise MalformedArtifactError(f"JSON 解析失败 ({path}): {e}", file_path=str(path)) from e
    if not isinstance(data, dict):
        raise MalformedArtifactError(f"JSON 顶层必须是对象: {path}", file_path=str(path))
    return data


def write_text_atomic(path: str | Path, content: str) -> Path:
    """写入文本文件：先写同目录临时文件再替换，目标文件要么完整要么不变"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        # mkstemp 创建的文件为 0600
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
    return path
