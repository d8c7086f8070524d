"""模板服务."""

from pathlib import Path
from typing import List, Union

from loguru import logger

from bulk_sheet_editor.data.cell_reference import normalize_cell_reference
from bulk_sheet_editor.data.models import (
    CellMapping,
    CsvTable,
    TemplatePreviewRow,
    TemplateSheet,
    WorkbookTemplate,
)
from bulk_sheet_editor.data.workbook import get_workbook_format

INVALID_CELL = "(invalid cell)"


class TemplateService:
    """模板服务，负责读取模板工作簿和构造映射预览."""

    def open_template(self, file_path: Union[str, Path]) -> WorkbookTemplate:
        """打开模板工作簿.

        Args:
            file_path: 工作簿路径（.ods/.xlsx/.xlsm）

        Returns:
            模板工作簿

        Raises:
            FileNotFoundError: 文件不存在
            ValueError: 格式不支持或工作簿中没有工作表
        """
        file_path = Path(file_path)
        workbook_format = get_workbook_format(file_path)
        sheet_names = workbook_format.read_sheet_names(file_path)
        if not sheet_names:
            raise ValueError(f"工作簿中没有工作表: {file_path}")

        logger.info(f"已打开模板: {file_path}，工作表: {', '.join(sheet_names)}")
        return WorkbookTemplate(path=file_path, sheet_names=sheet_names)

    def load_sheet(self, template: WorkbookTemplate, sheet_name: str) -> TemplateSheet:
        """读取模板工作表.

        Raises:
            ValueError: 工作表不存在
        """
        if sheet_name not in template.sheet_names:
            raise ValueError(f"工作表不存在: {sheet_name}")
        cells = get_workbook_format(template.path).read_sheet_cells(template.path, sheet_name)
        return TemplateSheet(name=sheet_name, cells=cells)

    def build_preview(
        self, sheet: TemplateSheet, csv_table: CsvTable, mappings: List[CellMapping]
    ) -> List[TemplatePreviewRow]:
        """用CSV第一行数据构造映射预览.

        Args:
            sheet: 模板工作表
            csv_table: CSV数据
            mappings: 列映射

        Returns:
            预览行列表
        """
        first_row = csv_table.rows[0] if csv_table.rows else []
        preview = []
        for mapping in mappings:
            cell_address = normalize_cell_reference(mapping.cell_ref)
            if mapping.position is None:
                existing = INVALID_CELL if mapping.is_assigned else None
            else:
                existing = sheet.value_at(cell_address)
            new_value = first_row[mapping.column_index] if mapping.column_index < len(first_row) else None
            preview.append(
                TemplatePreviewRow(
                    column_label=csv_table.column_label(mapping.column_index),
                    cell_address=cell_address,
                    existing_value=existing,
                    preview_value=new_value,
                )
            )
        return preview


def resolve_column(csv_table: CsvTable, token: Union[str, int]) -> int:
    """把列名或从1开始的列号解析为列索引.

    先按表头精确匹配，再忽略大小写匹配，最后按列号解析。

    Raises:
        ValueError: 找不到列
    """
    column_count = len(csv_table.headers)
    if isinstance(token, int):
        index = token - 1
    else:
        name = token.strip()
        if name in csv_table.headers:
            return csv_table.headers.index(name)
        lowered = [header.strip().lower() for header in csv_table.headers]
        if name.lower() in lowered:
            return lowered.index(name.lower())
        if not name.isdigit():
            raise ValueError(f"CSV中没有列: {token}")
        index = int(name) - 1

    if not 0 <= index < column_count:
        raise ValueError(f"列号超出范围: {token}（共 {column_count} 列）")
    return index


def parse_mapping(csv_table: CsvTable, text: str) -> CellMapping:
    """解析 列=单元格 形式的映射，如 姓名=B2、3=C5.

    Raises:
        ValueError: 格式不正确或列不存在
    """
    column, sep, cell = text.rpartition("=")
    if not sep or not column.strip() or not cell.strip():
        raise ValueError(f"映射格式应为 列=单元格: {text}")
    return CellMapping(
        column_index=resolve_column(csv_table, column),
        cell_ref=normalize_cell_reference(cell),
    )
