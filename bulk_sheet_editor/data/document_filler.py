"""文档填充器."""

import re
from typing import Dict, List, Optional, Pattern

from docx.document import Document as DocxDocument
from docx.text.paragraph import Paragraph
from docx.text.run import Run
from loguru import logger
from odf import teletype
from odf.element import Element
from odf.opendocument import OpenDocument

from bulk_sheet_editor.config.settings import settings
from bulk_sheet_editor.data.document_io import TextDocument
from bulk_sheet_editor.data.placeholder_detector import iter_docx_paragraphs, iter_odt_paragraphs, placeholder_name
from bulk_sheet_editor.data.placeholder_detector.docx_detector import paragraph_text


class DocumentFiller:
    """文档填充器，将占位符替换为CSV行中的值."""

    def __init__(self, pattern: Optional[str] = None):
        """初始化文档填充器.

        Args:
            pattern: 占位符正则表达式，默认取配置
        """
        self.pattern: Pattern = re.compile(pattern or settings.template.placeholder_pattern)

    def fill_document(self, doc: TextDocument, values: Dict[str, str]) -> int:
        """用值填充文档中的占位符.

        名称不在 values 中的占位符保持原样。

        Args:
            doc: 文档对象（.docx 或 .odt）
            values: 占位符名称到值的映射

        Returns:
            替换的占位符个数
        """
        try:
            if isinstance(doc, OpenDocument):
                return self._fill_odt(doc, values)
            return self._fill_docx(doc, values)
        except Exception as e:
            logger.error(f"填充占位符失败: {e}")
            raise ValueError(f"填充占位符失败: {e}")

    def _fill_docx(self, doc: DocxDocument, values: Dict[str, str]) -> int:
        replaced = 0
        for _, para in iter_docx_paragraphs(doc):
            replaced += self._fill_paragraph(para, values)
        return replaced

    def _fill_paragraph(self, para: Paragraph, values: Dict[str, str]) -> int:
        """填充一个段落，支持跨 run 的占位符."""
        runs = para.runs
        full_text = paragraph_text(para)
        matches = [m for m in self.pattern.finditer(full_text) if placeholder_name(m) in values]

        # 从后往前替换，前面匹配的偏移量不受影响
        for match in reversed(matches):
            self._replace_span(runs, match.start(), match.end(), values[placeholder_name(match)])
            logger.debug(f"已将 '{match.group(0)}' 替换为 '{values[placeholder_name(match)]}'")
        return len(matches)

    @staticmethod
    def _replace_span(runs: List[Run], start: int, end: int, replacement: str) -> None:
        """替换段落文本中 [start, end) 区间.

        替换内容写入区间所在的第一个 run，保留该 run 的格式；
        区间覆盖的后续 run 去掉被覆盖的部分。
        """
        pos = 0
        head_done = False
        for run in runs:
            text = run.text
            run_start, run_end = pos, pos + len(text)
            pos = run_end
            if run_end <= start or run_start >= end:
                continue

            local_start = max(start, run_start) - run_start
            local_end = min(end, run_end) - run_start
            if not head_done:
                run.text = text[:local_start] + replacement + text[local_end:]
                head_done = True
            else:
                run.text = text[local_end:]

    def _fill_odt(self, doc: OpenDocument, values: Dict[str, str]) -> int:
        replaced = 0
        for _, para in iter_odt_paragraphs(doc):
            replaced += self._fill_odt_block(para, values)
        return replaced

    def _fill_odt_block(self, para: Element, values: Dict[str, str]) -> int:
        text = teletype.extractText(para)
        count = 0

        def substitute(match) -> str:
            nonlocal count
            name = placeholder_name(match)
            if name not in values:
                return match.group(0)
            count += 1
            return values[name]

        new_text = self.pattern.sub(substitute, text)
        if count:
            # 段落内的 span 格式不保留，段落样式保留
            for child in list(para.childNodes):
                para.removeChild(child)
            teletype.addTextToElement(para, new_text)
        return count
