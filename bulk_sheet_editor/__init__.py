"""批量工作表编辑器：用CSV数据按模板批量生成工作表和文档."""

# 日志在导入任何子模块前配置好
from bulk_sheet_editor.utils.logger import setup_logger

setup_logger()

__version__ = "0.1.0"
