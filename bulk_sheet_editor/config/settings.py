"""配置：环境变量与 .env 文件，分节保存."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

PROJECT_DIR = Path(__file__).resolve().parents[2]

# .env 覆盖 .env.example，已设置的环境变量不被覆盖
for _env_file, _override in ((".env.example", False), (".env", True)):
    load_dotenv(dotenv_path=PROJECT_DIR / _env_file, override=_override)


def _env_bool(name: str, default: str) -> bool:
    return os.environ.get(name, default).strip().lower() in ("1", "true", "yes", "on")


class CsvConfig(BaseModel):
    """CSV导入配置."""

    delimiter: str = Field(default_factory=lambda: os.environ.get("CSV_DELIMITER", ","))  # 字段分隔符
    encoding: str = Field(default_factory=lambda: os.environ.get("CSV_ENCODING", "utf-8-sig"))  # 文件编码，默认去掉BOM
    preview_rows: int = Field(default_factory=lambda: int(os.environ.get("CSV_PREVIEW_ROWS", "6")))  # 预览读取的行数（含表头行）
    sample_values: int = Field(default_factory=lambda: int(os.environ.get("CSV_SAMPLE_VALUES", "3")))  # 每列展示的示例值个数
    has_headers: bool = Field(default_factory=lambda: _env_bool("CSV_HAS_HEADERS", "true"))  # 第一行是否为表头


class TemplateConfig(BaseModel):
    """模板处理配置."""

    placeholder_pattern: str = Field(default_factory=lambda: os.environ.get("PLACEHOLDER_PATTERN", r"{{(.*?)}}"))  # 文本模板占位符正则
    sheet_prefix: str = Field(default_factory=lambda: os.environ.get("SHEET_PREFIX", ""))  # 生成工作表名前缀，空则使用模板工作表名
    fallback_sheet_prefix: str = Field(default="Sheet")  # 模板工作表名也为空时使用
    infer_types: bool = Field(default_factory=lambda: _env_bool("INFER_TYPES", "false"))  # CSV数值是否写成数字单元格


class OutputConfig(BaseModel):
    """输出配置."""

    default_workbook_name: str = Field(default_factory=lambda: os.environ.get("DEFAULT_WORKBOOK_NAME", "bulk_sheets.ods"))  # 默认输出工作簿文件名
    write_report: bool = Field(default_factory=lambda: _env_bool("WRITE_REPORT", "true"))  # 是否生成Markdown报告


class LogConfig(BaseModel):
    """日志配置，控制台与可选的日志文件."""

    level: str = Field(default_factory=lambda: os.environ.get("LOG_LEVEL", "INFO"))  # 日志级别
    format: str = Field(default_factory=lambda: os.environ.get("LOG_FORMAT", "<level>{level: <8}</level>| <level>{message}</level>"))  # 控制台日志格式
    log_file: Optional[str] = Field(default_factory=lambda: os.environ.get("LOG_FILE") or None)  # 日志文件名，未设置则不写文件
    rotation: str = Field(default_factory=lambda: os.environ.get("LOG_ROTATION", "10 MB"))  # 日志轮转大小
    retention: str = Field(default_factory=lambda: os.environ.get("LOG_RETENTION", "1 week"))  # 日志保留时间


class Settings(BaseModel):
    """全局设置."""

    csv: CsvConfig = Field(default_factory=CsvConfig)  # CSV相关配置
    template: TemplateConfig = Field(default_factory=TemplateConfig)  # 模板相关配置
    output: OutputConfig = Field(default_factory=OutputConfig)  # 输出相关配置
    log: LogConfig = Field(default_factory=LogConfig)  # 日志相关配置

    project_dir: Path = Field(default=PROJECT_DIR)  # 项目根目录
    output_dir: Path = Field(default_factory=lambda: Path(os.environ.get("OUTPUT_DIR") or PROJECT_DIR / "output"))  # 默认输出目录


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """返回全局配置，首次调用时创建."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


settings = get_settings()
