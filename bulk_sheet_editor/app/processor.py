"""批量生成应用."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from bulk_sheet_editor.config.settings import settings
from bulk_sheet_editor.data.report_generator import ReportGenerator
from bulk_sheet_editor.service.document_generator import DocumentGenerationRequest, DocumentGenerator
from bulk_sheet_editor.service.worksheet_generator import SheetGenerationRequest, WorksheetGenerator


@dataclass
class ProcessResult:
    """处理结果."""

    output_path: str
    report_path: str
    item_count: int
    success: bool
    error_message: Optional[str] = None
    item_name: str = "工作表"

    @property
    def report(self) -> str:
        """生成结果报告.

        Returns:
            结果报告字符串
        """
        if not self.success:
            return f"处理失败: {self.error_message}"

        lines = [
            "处理成功!",
            f"- 共生成 {self.item_count} 个{self.item_name}",
            f"- 输出位置: {self.output_path}",
        ]
        if self.report_path:
            lines.append(f"- 报告文件: {self.report_path}")
        return "\n".join(lines)


class BulkProcessor:
    """批量生成处理器."""

    def __init__(self) -> None:
        """初始化批量生成处理器."""
        self.worksheet_generator = WorksheetGenerator()
        self.document_generator = DocumentGenerator()
        self.report_generator = ReportGenerator()
        logger.debug("批量生成处理器已初始化")

    def generate_sheets(self, request: SheetGenerationRequest) -> ProcessResult:
        """按CSV每一行生成一个工作表.

        Args:
            request: 生成请求

        Returns:
            处理结果
        """
        try:
            logger.info(f"开始生成工作簿: {request.output_path}")
            result = self.worksheet_generator.generate(request)

            report_path = ""
            if settings.output.write_report:
                report_file = Path(request.output_path).with_suffix(".md")
                self.report_generator.generate_sheet_report(
                    report_file,
                    template_path=request.template_path,
                    template_sheet=result.template_sheet,
                    csv_table=request.csv_table,
                    mappings=request.mappings,
                    sheet_names=result.sheet_names,
                )
                report_path = str(report_file)

            logger.info("工作簿生成完成")
            return ProcessResult(
                output_path=str(result.output_path),
                report_path=report_path,
                item_count=result.sheet_count,
                success=True,
            )

        except Exception as e:
            logger.error(f"生成工作簿时发生错误: {e}")
            return ProcessResult(
                output_path=str(request.output_path),
                report_path="",
                item_count=0,
                success=False,
                error_message=str(e),
            )

    def fill_documents(self, request: DocumentGenerationRequest) -> ProcessResult:
        """按CSV每一行填充文本模板生成文档.

        Args:
            request: 生成请求

        Returns:
            处理结果
        """
        try:
            logger.info(f"开始生成文档: {request.output_dir}")
            result = self.document_generator.generate(request)

            report_path = ""
            if settings.output.write_report:
                report_file = Path(request.output_dir) / f"{Path(request.template_path).stem}_report.md"
                self.report_generator.generate_document_report(
                    report_file,
                    template_path=request.template_path,
                    output_paths=result.output_paths,
                    replaced_count=result.replaced_count,
                    unmatched_placeholders=result.unmatched_placeholders,
                )
                report_path = str(report_file)

            logger.info("文档生成完成")
            return ProcessResult(
                output_path=str(request.output_dir),
                report_path=report_path,
                item_count=len(result.output_paths),
                success=True,
                item_name="文档",
            )

        except Exception as e:
            logger.error(f"生成文档时发生错误: {e}")
            return ProcessResult(
                output_path=str(request.output_dir),
                report_path="",
                item_count=0,
                success=False,
                error_message=str(e),
                item_name="文档",
            )
