"""批量工作表生成服务."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Set

from loguru import logger

from bulk_sheet_editor.config.settings import settings
from bulk_sheet_editor.data.models import CellMapping, CellValue, CsvTable, SheetContent, TemplateSheet
from bulk_sheet_editor.data.workbook import get_output_format
from bulk_sheet_editor.service.template_service import TemplateService
from bulk_sheet_editor.utils.naming import MAX_SHEET_NAME_LENGTH, sanitize_sheet_name, unique_name


@dataclass
class SheetGenerationRequest:
    """工作表生成请求."""

    csv_table: CsvTable
    template_path: Optional[Path]
    sheet_name: Optional[str]
    mappings: List[CellMapping]
    output_path: Path
    sheet_prefix: Optional[str] = None
    name_column: Optional[int] = None  # 用该列的值命名工作表
    infer_types: Optional[bool] = None  # 为None时取配置


@dataclass
class GenerationResult:
    """工作表生成结果."""

    output_path: Path
    template_sheet: str
    sheet_names: List[str] = field(default_factory=list)

    @property
    def sheet_count(self) -> int:
        return len(self.sheet_names)


class WorksheetGenerator:
    """按CSV每一行复制模板工作表并填入映射的值."""

    def __init__(self, template_service: Optional[TemplateService] = None) -> None:
        self.template_service = template_service or TemplateService()

    def validate(self, request: SheetGenerationRequest) -> None:
        """检查生成所需的输入是否齐全.

        Raises:
            ValueError: 第一个发现的问题
        """
        if not request.csv_table.rows:
            raise ValueError("CSV文件中没有数据行，请先导入CSV文件")
        if request.template_path is None or not request.sheet_name:
            raise ValueError("请选择模板工作簿和工作表")

        assigned = [mapping for mapping in request.mappings if mapping.is_assigned]
        if not assigned:
            raise ValueError("请至少将一个CSV列映射到模板单元格")

        column_count = len(request.csv_table.headers)
        for mapping in assigned:
            if mapping.position is None:
                raise ValueError(f"无效的单元格引用: {mapping.cell_ref}")
            if not 0 <= mapping.column_index < column_count:
                raise ValueError(f"列号超出范围: {mapping.column_index + 1}（共 {column_count} 列）")

        if request.name_column is not None and not 0 <= request.name_column < column_count:
            raise ValueError(f"命名列超出范围: {request.name_column + 1}（共 {column_count} 列）")

    def build_sheets(self, request: SheetGenerationRequest, template: TemplateSheet) -> List[SheetContent]:
        """为每个数据行生成一个工作表.

        映射值非空时覆盖模板单元格，为空时清空该单元格；
        行中缺少映射列时保留模板原值。

        Args:
            request: 生成请求
            template: 模板工作表

        Returns:
            工作表列表
        """
        infer_types = settings.template.infer_types if request.infer_types is None else request.infer_types
        mappings = [mapping for mapping in request.mappings if mapping.is_assigned]
        prefix = self._sheet_prefix(request, template)

        sheets = []
        used: Set[str] = set()
        for row_index, row in enumerate(request.csv_table.rows):
            cells = dict(template.cells)
            for mapping in mappings:
                if mapping.column_index >= len(row):
                    continue
                value = row[mapping.column_index]
                if value == "":
                    cells.pop(mapping.position, None)
                else:
                    cells[mapping.position] = CellValue.from_text(value, infer_types)

            name = self._sheet_name(request, row, row_index, prefix)
            sheets.append(SheetContent(name=unique_name(name, used), cells=cells))
        return sheets

    def generate(self, request: SheetGenerationRequest) -> GenerationResult:
        """生成工作簿并写出.

        Args:
            request: 生成请求

        Returns:
            生成结果

        Raises:
            FileNotFoundError: 模板不存在
            ValueError: 输入不完整或读写失败
        """
        self.validate(request)
        # 先确认输出格式受支持，避免读取模板后才失败
        output_format = get_output_format(request.output_path)

        template = self.template_service.open_template(request.template_path)
        template_sheet = self.template_service.load_sheet(template, request.sheet_name)
        sheets = self.build_sheets(request, template_sheet)

        try:
            request.output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"创建输出目录失败: {e}")
            raise ValueError(f"创建输出目录失败: {e}")
        output_format.write_sheets(request.output_path, sheets)
        logger.info(f"已使用模板工作表 '{template_sheet.name}' 生成 {len(sheets)} 个工作表: {request.output_path}")

        return GenerationResult(
            output_path=request.output_path,
            template_sheet=template_sheet.name,
            sheet_names=[sheet.name for sheet in sheets],
        )

    @staticmethod
    def _sheet_prefix(request: SheetGenerationRequest, template: TemplateSheet) -> str:
        for candidate in (request.sheet_prefix, settings.template.sheet_prefix, template.name):
            if candidate and candidate.strip():
                return candidate.strip()
        return settings.template.fallback_sheet_prefix

    @staticmethod
    def _sheet_name(request: SheetGenerationRequest, row: List[str], row_index: int, prefix: str) -> str:
        # 前缀过长时截短前缀，保留序号
        number = f" {row_index + 1}"
        head = sanitize_sheet_name(prefix, fallback=settings.template.fallback_sheet_prefix)
        numbered = head[: MAX_SHEET_NAME_LENGTH - len(number)].rstrip() + number
        if request.name_column is not None and request.name_column < len(row):
            value = row[request.name_column].strip()
            if value:
                return sanitize_sheet_name(value, fallback=numbered)
        return numbered
