"""分步骤的批量生成流程.

流程依次为：导入CSV、配置模板与映射、生成工作簿。各步骤共享同一个
WorkflowState，只有当前步骤完成后才能进入下一步。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Union

from loguru import logger

from bulk_sheet_editor.data.cell_reference import normalize_cell_reference
from bulk_sheet_editor.data.csv_reader import CsvReader
from bulk_sheet_editor.data.models import (
    CellMapping,
    CsvPreview,
    CsvTable,
    TemplatePreviewRow,
    TemplateSheet,
    WorkbookTemplate,
)
from bulk_sheet_editor.service.template_service import TemplateService
from bulk_sheet_editor.service.worksheet_generator import SheetGenerationRequest, WorksheetGenerator


@dataclass
class WorkflowState:
    """各步骤共享的状态."""

    csv_path: Optional[Path] = None
    has_headers: bool = True
    csv_preview: Optional[CsvPreview] = None
    csv_table: Optional[CsvTable] = None
    template: Optional[WorkbookTemplate] = None
    template_sheet: Optional[TemplateSheet] = None
    mappings: List[CellMapping] = field(default_factory=list)
    last_output_path: Optional[Path] = None
    generated_sheet_count: int = 0
    status_message: Optional[str] = None

    @property
    def selected_sheet(self) -> Optional[str]:
        return self.template_sheet.name if self.template_sheet else None

    def reset_csv(self) -> None:
        self.csv_path = None
        self.csv_preview = None
        self.csv_table = None
        self.mappings = []

    def reset_template(self) -> None:
        self.template = None
        self.template_sheet = None
        for mapping in self.mappings:
            mapping.cell_ref = ""

    def reset_output(self) -> None:
        self.last_output_path = None
        self.generated_sheet_count = 0
        self.status_message = None


class WorkflowStep(ABC):
    """流程步骤基类."""

    title = ""

    def __init__(self, state: WorkflowState) -> None:
        self.state = state
        self.error: Optional[str] = None

    @abstractmethod
    def is_complete(self) -> bool:
        """步骤是否已完成."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """清空步骤的输入."""
        pass


class CsvImportStep(WorkflowStep):
    """导入CSV文件."""

    title = "导入CSV文件"

    def __init__(self, state: WorkflowState, reader: Optional[CsvReader] = None) -> None:
        super().__init__(state)
        self.reader = reader or CsvReader()

    def select_file(self, file_path: Union[str, Path]) -> bool:
        """选择CSV文件并加载预览，失败时记录错误并返回False."""
        file_path = Path(file_path)
        try:
            preview = self.reader.load_preview(file_path, self.state.has_headers)
            table = self.reader.load_table(file_path, self.state.has_headers)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"导入CSV失败: {e}")
            self.state.reset_csv()
            self.error = str(e)
            return False

        if not table.rows:
            logger.warning(f"CSV文件中没有数据行: {file_path}")
            self.state.reset_csv()
            self.error = f"CSV文件中没有数据行: {file_path}"
            return False

        self.state.csv_path = file_path
        self.state.csv_preview = preview
        self.state.csv_table = table
        # 每列一个映射，单元格待填写
        self.state.mappings = [CellMapping(column_index=index) for index in range(len(table.headers))]
        self.error = None
        return True

    def set_has_headers(self, has_headers: bool) -> None:
        """切换第一行是否为表头，已选择文件时重新加载."""
        self.state.has_headers = has_headers
        if self.state.csv_path is not None:
            self.select_file(self.state.csv_path)

    def clear(self) -> None:
        self.state.reset_csv()
        self.error = None

    def is_complete(self) -> bool:
        return self.state.csv_table is not None

    def reset(self) -> None:
        self.clear()
        self.state.has_headers = True


class TemplateStep(WorkflowStep):
    """选择模板工作表并配置列映射."""

    title = "配置模板"

    def __init__(self, state: WorkflowState, template_service: Optional[TemplateService] = None) -> None:
        super().__init__(state)
        self.template_service = template_service or TemplateService()

    def open_template(self, file_path: Union[str, Path]) -> bool:
        """打开模板工作簿并选中第一个工作表."""
        try:
            template = self.template_service.open_template(file_path)
            sheet = self.template_service.load_sheet(template, template.sheet_names[0])
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"打开模板失败: {e}")
            self.error = str(e)
            return False

        self.state.template = template
        self.state.template_sheet = sheet
        self.error = None
        return True

    def select_sheet(self, sheet_name: str) -> bool:
        """切换模板工作表."""
        if self.state.template is None:
            self.error = "请先选择模板工作簿"
            return False
        try:
            self.state.template_sheet = self.template_service.load_sheet(self.state.template, sheet_name)
        except (FileNotFoundError, ValueError) as e:
            logger.error(f"读取工作表失败: {e}")
            self.error = str(e)
            return False
        self.error = None
        return True

    def set_mapping(self, column_index: int, cell_ref: str) -> None:
        """设置某一列对应的单元格，空字符串表示不映射.

        Raises:
            ValueError: 列不存在
        """
        if not 0 <= column_index < len(self.state.mappings):
            raise ValueError(f"列号超出范围: {column_index + 1}")
        self.state.mappings[column_index].cell_ref = normalize_cell_reference(cell_ref)

    def previews(self) -> List[TemplatePreviewRow]:
        """已填写单元格的映射预览."""
        if self.state.template_sheet is None or self.state.csv_table is None:
            return []
        assigned = [mapping for mapping in self.state.mappings if mapping.is_assigned]
        return self.template_service.build_preview(self.state.template_sheet, self.state.csv_table, assigned)

    def is_complete(self) -> bool:
        return (
            self.state.template is not None
            and self.state.template_sheet is not None
            and any(mapping.is_assigned for mapping in self.state.mappings)
        )

    def reset(self) -> None:
        self.error = None
        self.state.reset_template()


class GenerateStep(WorkflowStep):
    """生成工作簿."""

    title = "生成工作簿"

    def __init__(self, state: WorkflowState, generator: Optional[WorksheetGenerator] = None) -> None:
        super().__init__(state)
        self.generator = generator or WorksheetGenerator()

    def generate(self, output_path: Union[str, Path], sheet_prefix: Optional[str] = None) -> bool:
        """按当前状态生成工作簿，失败时记录错误并返回False."""
        state = self.state
        if state.csv_table is None:
            self.error = "请先导入CSV文件"
            return False
        if state.template is None or state.template_sheet is None:
            self.error = "请选择模板工作簿和工作表"
            return False

        request = SheetGenerationRequest(
            csv_table=state.csv_table,
            template_path=state.template.path,
            sheet_name=state.template_sheet.name,
            mappings=state.mappings,
            output_path=Path(output_path),
            sheet_prefix=sheet_prefix,
        )
        try:
            result = self.generator.generate(request)
        except (FileNotFoundError, ValueError) as e:
            self.error = str(e)
            state.reset_output()
            state.status_message = str(e)
            return False

        self.error = None
        state.last_output_path = result.output_path
        state.generated_sheet_count = result.sheet_count
        state.status_message = f"已使用模板生成 {result.sheet_count} 个工作表"
        return True

    def is_complete(self) -> bool:
        return self.state.last_output_path is not None

    def reset(self) -> None:
        self.error = None
        self.state.reset_output()


class BulkWorkflow:
    """按顺序执行各步骤的流程."""

    def __init__(self, state: Optional[WorkflowState] = None) -> None:
        self.state = state or WorkflowState()
        self.steps: List[WorkflowStep] = [
            CsvImportStep(self.state),
            TemplateStep(self.state),
            GenerateStep(self.state),
        ]
        self.current_index = 0

    @property
    def current(self) -> WorkflowStep:
        return self.steps[self.current_index]

    @property
    def is_finished(self) -> bool:
        return self.current_index == len(self.steps) - 1 and self.current.is_complete()

    def advance(self) -> bool:
        """当前步骤完成时进入下一步."""
        if not self.current.is_complete() or self.current_index >= len(self.steps) - 1:
            return False
        self.current_index += 1
        return True

    def back(self) -> bool:
        if self.current_index == 0:
            return False
        self.current_index -= 1
        return True

    def reset(self) -> None:
        """重置所有步骤并回到第一步."""
        for step in reversed(self.steps):
            step.reset()
        self.current_index = 0
