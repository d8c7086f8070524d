"""报告生成器."""

from pathlib import Path
from typing import List, Union

from loguru import logger

from bulk_sheet_editor.data.models import CellMapping, CsvTable


class ReportGenerator:
    """报告生成器."""

    def generate_sheet_report(
        self,
        output_path: Union[str, Path],
        template_path: Union[str, Path],
        template_sheet: str,
        csv_table: CsvTable,
        mappings: List[CellMapping],
        sheet_names: List[str],
    ) -> None:
        """生成批量工作表的处理报告.

        Args:
            output_path: 报告文件路径
            template_path: 模板工作簿路径
            template_sheet: 模板工作表名称
            csv_table: CSV数据
            mappings: 列映射
            sheet_names: 生成的工作表名称
        """
        lines = [
            "# 批量工作表生成报告",
            "",
            f"- 模板: {template_path}",
            f"- 模板工作表: {template_sheet}",
            f"- 数据行数: {len(csv_table.rows)}",
            f"- 生成工作表数: {len(sheet_names)}",
            "",
            "## 列映射",
            "",
            "| CSV列 | 单元格 |",
            "| --- | --- |",
        ]
        for mapping in mappings:
            if mapping.is_assigned:
                lines.append(f"| {csv_table.column_label(mapping.column_index)} | {mapping.cell_ref} |")

        lines.extend(["", "## 工作表", ""])
        lines.extend(f"{i}. {name}" for i, name in enumerate(sheet_names, 1))
        self._write(output_path, lines)

    def generate_document_report(
        self,
        output_path: Union[str, Path],
        template_path: Union[str, Path],
        output_paths: List[Path],
        replaced_count: int,
        unmatched_placeholders: List[str],
    ) -> None:
        """生成批量文档的处理报告.

        Args:
            output_path: 报告文件路径
            template_path: 模板文档路径
            output_paths: 生成的文档路径
            replaced_count: 替换的占位符总数
            unmatched_placeholders: CSV中没有对应列的占位符
        """
        lines = [
            "# 批量文档生成报告",
            "",
            f"- 模板: {template_path}",
            f"- 生成文档数: {len(output_paths)}",
            f"- 替换占位符总数: {replaced_count}",
            "",
        ]
        if unmatched_placeholders:
            lines.extend(["## 未匹配的占位符", ""])
            lines.extend(f"- {{{{{name}}}}}" for name in unmatched_placeholders)
            lines.append("")

        lines.extend(["## 文档", ""])
        lines.extend(f"{i}. {path.name}" for i, path in enumerate(output_paths, 1))
        self._write(output_path, lines)

    @staticmethod
    def _write(output_path: Union[str, Path], lines: List[str]) -> None:
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            with open(output_path, "w", encoding="utf-8") as f:
                f.write("\n".join(lines) + "\n")
            logger.info(f"已生成处理报告: {output_path}")
        except Exception as e:
            logger.error(f"生成处理报告失败: {e}")
            raise ValueError(f"生成处理报告失败: {e}")
