"""XLSX（Office Open XML电子表格）读写."""

from datetime import date, datetime, time, timedelta
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from loguru import logger
from openpyxl import Workbook, load_workbook
from openpyxl.utils.exceptions import IllegalCharacterError

from bulk_sheet_editor.data.cell_reference import format_cell_reference
from bulk_sheet_editor.data.models import CellPosition, CellValue, SheetContent
from bulk_sheet_editor.data.workbook.base_format import WorkbookFormat


class XlsxFormat(WorkbookFormat):
    """XLSX工作簿格式."""

    suffixes = (".xlsx", ".xlsm")
    # openpyxl 写不出宏，.xlsm 只读
    writable_suffixes = (".xlsx",)

    def read_sheet_names(self, file_path: Union[str, Path]) -> List[str]:
        workbook = self._load(file_path)
        try:
            return list(workbook.sheetnames)
        finally:
            workbook.close()

    def read_sheet_cells(
        self, file_path: Union[str, Path], sheet_name: str
    ) -> Dict[CellPosition, CellValue]:
        workbook = self._load(file_path)
        try:
            if sheet_name not in workbook.sheetnames:
                raise ValueError(f"工作表不存在: {sheet_name}")
            worksheet = workbook[sheet_name]

            cells: Dict[CellPosition, CellValue] = {}
            for row in worksheet.iter_rows():
                for cell in row:
                    value = _convert(cell.value)
                    if value is not None:
                        cells[(cell.row - 1, cell.column - 1)] = value
            logger.debug(f"工作表 '{sheet_name}' 读取到 {len(cells)} 个非空单元格")
            return cells
        finally:
            workbook.close()

    def write_sheets(self, file_path: Union[str, Path], sheets: List[SheetContent]) -> None:
        workbook = Workbook()
        # 新建的工作簿自带一个空工作表
        workbook.remove(workbook.active)
        for sheet in sheets:
            worksheet = workbook.create_sheet(title=sheet.name)
            for (row, col), value in sorted(sheet.cells.items()):
                try:
                    cell = worksheet.cell(row=row + 1, column=col + 1, value=value.value)
                except IllegalCharacterError:
                    # XML不允许的控制字符
                    position = format_cell_reference(row, col)
                    logger.error(f"工作表 '{sheet.name}' 单元格 {position} 含有不能写入的控制字符")
                    raise ValueError(f"工作表 '{sheet.name}' 单元格 {position} 含有不能写入的控制字符: {value.value!r}")
                if value.kind == "string" and str(value.value).startswith("="):
                    # 以=开头的文本不当作公式
                    cell.data_type = "s"

        try:
            workbook.save(str(file_path))
        except OSError as e:
            logger.error(f"保存工作簿失败: {e}")
            raise ValueError(f"保存工作簿失败: {e}")

    @staticmethod
    def _load(file_path: Union[str, Path]) -> Workbook:
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"文件不存在: {file_path}")

        try:
            # 公式单元格取缓存的计算结果
            return load_workbook(str(file_path), data_only=True)
        except Exception as e:
            logger.error(f"加载工作簿失败: {e}")
            raise ValueError(f"加载工作簿失败: {e}")


def _convert(value: Any) -> Optional[CellValue]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        return CellValue.boolean(value)
    if isinstance(value, (int, float)):
        return CellValue.number(value)
    if isinstance(value, (datetime, date, time)):
        return CellValue.string(value.isoformat())
    if isinstance(value, timedelta):
        return CellValue.string(str(value))
    return CellValue.string(str(value))
