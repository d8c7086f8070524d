"""批量文档生成服务."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Set

from loguru import logger

from bulk_sheet_editor.data.document_filler import DocumentFiller
from bulk_sheet_editor.data.document_io import DocumentIO, TextDocument
from bulk_sheet_editor.data.models import CsvTable, PlaceholderInfo
from bulk_sheet_editor.data.placeholder_detector import DocxPlaceholderDetector, OdtPlaceholderDetector
from bulk_sheet_editor.utils.naming import MAX_FILE_STEM_LENGTH, sanitize_file_stem, unique_name


@dataclass
class DocumentGenerationRequest:
    """文档生成请求."""

    csv_table: CsvTable
    template_path: Path
    output_dir: Path
    name_column: Optional[int] = None  # 用该列的值命名输出文件


@dataclass
class DocumentGenerationResult:
    """文档生成结果."""

    template_path: Path
    output_paths: List[Path] = field(default_factory=list)
    replaced_count: int = 0
    unmatched_placeholders: List[str] = field(default_factory=list)


class DocumentGenerator:
    """按CSV每一行填充文本模板中的占位符并保存为单独的文档."""

    def __init__(self, pattern: Optional[str] = None) -> None:
        self.document_io = DocumentIO()
        self.filler = DocumentFiller(pattern)
        self.detectors = {
            ".docx": DocxPlaceholderDetector(pattern),
            ".odt": OdtPlaceholderDetector(pattern),
        }

    def find_placeholders(self, template_path: Path) -> List[PlaceholderInfo]:
        """列出模板中的占位符."""
        doc = self.document_io.load_document(template_path)
        return self._detect(template_path, doc)

    def generate(self, request: DocumentGenerationRequest) -> DocumentGenerationResult:
        """生成文档.

        Args:
            request: 生成请求

        Returns:
            生成结果

        Raises:
            FileNotFoundError: 模板不存在
            ValueError: CSV没有数据行或读写失败
        """
        table = request.csv_table
        if not table.rows:
            raise ValueError("CSV文件中没有数据行，请先导入CSV文件")
        if request.name_column is not None and not 0 <= request.name_column < len(table.headers):
            raise ValueError(f"命名列超出范围: {request.name_column + 1}（共 {len(table.headers)} 列）")

        template_path = Path(request.template_path)
        placeholders = self.find_placeholders(template_path)
        headers = {header.strip() for header in table.headers if header.strip()}
        unmatched = sorted({ph.text for ph in placeholders} - headers)
        if unmatched:
            logger.warning(f"以下占位符在CSV中没有对应的列，将保持原样: {', '.join(unmatched)}")

        result = DocumentGenerationResult(template_path=template_path, unmatched_placeholders=unmatched)
        used: Set[str] = set()
        for row_index, row in enumerate(table.rows):
            doc = self.document_io.load_document(template_path)
            result.replaced_count += self.filler.fill_document(doc, self._row_values(table, row))

            stem = self._file_stem(request, template_path, row, row_index)
            output_path = request.output_dir / (
                unique_name(stem, used, MAX_FILE_STEM_LENGTH) + template_path.suffix.lower()
            )
            self.document_io.save_document(doc, output_path)
            result.output_paths.append(output_path)

        logger.info(f"已使用模板 {template_path.name} 生成 {len(result.output_paths)} 个文档: {request.output_dir}")
        return result

    def _detect(self, template_path: Path, doc: TextDocument) -> List[PlaceholderInfo]:
        detector = self.detectors[template_path.suffix.lower()]
        return detector.detect(doc)

    @staticmethod
    def _row_values(table: CsvTable, row: List[str]) -> Dict[str, str]:
        values = {}
        for index, header in enumerate(table.headers):
            name = header.strip()
            # 重名列以第一列为准
            if name and name not in values and index < len(row):
                values[name] = row[index]
        return values

    @staticmethod
    def _file_stem(
        request: DocumentGenerationRequest, template_path: Path, row: List[str], row_index: int
    ) -> str:
        numbered = f"{template_path.stem}_{row_index + 1}"
        if request.name_column is not None and request.name_column < len(row):
            value = row[request.name_column].strip()
            if value:
                return sanitize_file_stem(value, fallback=numbered)
        return sanitize_file_stem(numbered)
