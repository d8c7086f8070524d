"""YAML任务文件.

任务文件示例::

    csv: data/people.csv
    template: templates/badge.ods
    sheet: Badge
    output: output/badges.ods
    mappings:
      - column: 姓名
        cell: B2
      - column: 3
        cell: C5
"""

from pathlib import Path
from typing import List, Optional, Union

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError


class MappingEntry(BaseModel):
    """列映射配置."""

    column: Union[int, str] = Field(..., description="CSV列名或从1开始的列号")
    cell: str = Field(..., description="模板单元格引用，如 B2")


class SheetJob(BaseModel):
    """批量工作表任务."""

    csv: Path = Field(..., description="CSV文件路径")
    has_headers: bool = Field(default=True, description="第一行是否为表头")
    template: Path = Field(..., description="模板工作簿路径")
    sheet: Optional[str] = Field(default=None, description="模板工作表，默认第一个")
    mappings: List[MappingEntry] = Field(default_factory=list, description="列映射")
    output: Path = Field(..., description="输出工作簿路径")
    sheet_prefix: Optional[str] = Field(default=None, description="生成工作表名前缀")
    name_column: Optional[Union[int, str]] = Field(default=None, description="用于命名工作表的列")
    infer_types: Optional[bool] = Field(default=None, description="数值是否写成数字单元格")


def load_job(file_path: Union[str, Path]) -> SheetJob:
    """加载任务文件，相对路径按任务文件所在目录解析.

    Args:
        file_path: 任务文件路径

    Returns:
        任务配置

    Raises:
        FileNotFoundError: 文件不存在
        ValueError: YAML格式或字段不正确
    """
    file_path = Path(file_path)
    if not file_path.exists():
        raise FileNotFoundError(f"文件不存在: {file_path}")

    try:
        with open(file_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"解析任务文件失败: {e}")
        raise ValueError(f"解析任务文件失败: {e}")

    if not isinstance(data, dict):
        raise ValueError(f"任务文件内容应为映射: {file_path}")

    try:
        job = SheetJob(**data)
    except ValidationError as e:
        logger.error(f"任务文件字段不正确: {e}")
        raise ValueError(f"任务文件字段不正确: {e}")

    if not job.mappings:
        raise ValueError("任务文件中至少需要一个映射")

    base_dir = file_path.parent
    for name in ("csv", "template", "output"):
        path = getattr(job, name)
        if not path.is_absolute():
            setattr(job, name, base_dir / path)
    return job
