"""工作簿格式包."""

from pathlib import Path
from typing import Union

from bulk_sheet_editor.data.workbook.base_format import WorkbookFormat
from bulk_sheet_editor.data.workbook.ods_format import OdsFormat
from bulk_sheet_editor.data.workbook.xlsx_format import XlsxFormat

WORKBOOK_FORMATS = [OdsFormat(), XlsxFormat()]


def get_workbook_format(file_path: Union[str, Path]) -> WorkbookFormat:
    """按文件后缀选择工作簿格式.

    Raises:
        ValueError: 不支持的文件类型
    """
    suffix = Path(file_path).suffix.lower()
    for workbook_format in WORKBOOK_FORMATS:
        if suffix in workbook_format.suffixes:
            return workbook_format
    raise ValueError(f"不支持的文件类型: {suffix or file_path}")


def get_output_format(file_path: Union[str, Path]) -> WorkbookFormat:
    """按输出文件后缀选择可写出的工作簿格式.

    Raises:
        ValueError: 该类型不能写出
    """
    suffix = Path(file_path).suffix.lower()
    for workbook_format in WORKBOOK_FORMATS:
        if workbook_format.can_write(suffix):
            return workbook_format
    writable = ", ".join(s for f in WORKBOOK_FORMATS for s in (f.writable_suffixes or f.suffixes))
    raise ValueError(f"不支持输出为 {suffix or file_path}，可用: {writable}")


def is_workbook(file_path: Union[str, Path]) -> bool:
    suffix = Path(file_path).suffix.lower()
    return any(suffix in workbook_format.suffixes for workbook_format in WORKBOOK_FORMATS)


__all__ = [
    'WorkbookFormat',
    'OdsFormat',
    'XlsxFormat',
    'get_workbook_format',
    'get_output_format',
    'is_workbook',
]
