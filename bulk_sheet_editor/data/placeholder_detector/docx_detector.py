"""Word文档占位符检测器."""

from typing import Any, Iterable, Iterator, List, Set, Tuple

from docx.document import Document as DocxDocument
from docx.table import Table
from docx.text.paragraph import Paragraph
from loguru import logger

from bulk_sheet_editor.data.models import PlaceholderInfo
from bulk_sheet_editor.data.placeholder_detector.base_detector import PlaceholderDetector


def iter_docx_paragraphs(doc: DocxDocument) -> Iterator[Tuple[str, Paragraph]]:
    """按文档顺序遍历所有段落.

    包括正文段落、表格单元格（含嵌套表格）中的段落，以及各节的页眉页脚。

    Yields:
        (位置, 段落) 元组，位置取值 body、table、header、footer
    """
    for para in doc.paragraphs:
        yield "body", para
    yield from _iter_table_paragraphs(doc.tables, "table", set())

    for section in doc.sections:
        for location, part in (("header", section.header), ("footer", section.footer)):
            # 链接到上一节的页眉页脚与上一节相同，跳过
            if part.is_linked_to_previous:
                continue
            for para in part.paragraphs:
                yield location, para
            yield from _iter_table_paragraphs(part.tables, location, set())


def _iter_table_paragraphs(
    tables: Iterable[Table], location: str, seen: Set[Any]
) -> Iterator[Tuple[str, Paragraph]]:
    for table in tables:
        for row in table.rows:
            for cell in row.cells:
                # 合并单元格会在 row.cells 中重复出现
                if cell._tc in seen:
                    continue
                seen.add(cell._tc)
                for para in cell.paragraphs:
                    yield location, para
                yield from _iter_table_paragraphs(cell.tables, location, seen)


def paragraph_text(para: Paragraph) -> str:
    """按 run 拼接段落文本，与填充时的偏移量保持一致."""
    return "".join(run.text for run in para.runs)


class DocxPlaceholderDetector(PlaceholderDetector):
    """Word文档占位符检测器."""

    def detect(self, doc: DocxDocument) -> List[PlaceholderInfo]:
        """检测Word文档中的占位符.

        Args:
            doc: Document对象

        Returns:
            占位符信息列表
        """
        placeholders = []
        for para_idx, (location, para) in enumerate(iter_docx_paragraphs(doc)):
            text = paragraph_text(para)
            if not text.strip():
                continue
            placeholders.extend(self.find_in_text(text, para_idx, location))

        logger.debug(f"Word文档中找到 {len(placeholders)} 个占位符")
        return placeholders
