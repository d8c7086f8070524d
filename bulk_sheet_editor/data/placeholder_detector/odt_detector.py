"""OpenDocument文本占位符检测器."""

from typing import Iterator, List, Tuple

from loguru import logger
from odf import teletype
from odf.element import Element
from odf.namespaces import TEXTNS
from odf.opendocument import OpenDocument

from bulk_sheet_editor.data.models import PlaceholderInfo
from bulk_sheet_editor.data.placeholder_detector.base_detector import PlaceholderDetector

_TEXT_BLOCKS = {(TEXTNS, "p"), (TEXTNS, "h")}


def iter_odt_paragraphs(doc: OpenDocument) -> Iterator[Tuple[str, Element]]:
    """按文档顺序遍历正文和母版页（页眉页脚）中的段落与标题.

    含有嵌套段落的段落（如内嵌文本框）不整体返回，只返回其内部段落。

    Yields:
        (位置, 段落元素) 元组，位置取值 body、master
    """
    yield from _iter_blocks(doc.text, "body")
    masterstyles = getattr(doc, "masterstyles", None)
    if masterstyles is not None:
        yield from _iter_blocks(masterstyles, "master")


def _iter_blocks(element: Element, location: str) -> Iterator[Tuple[str, Element]]:
    for child in element.childNodes:
        qname = getattr(child, "qname", None)
        if qname is None:
            continue
        if qname in _TEXT_BLOCKS and not _has_nested_block(child):
            yield location, child
        else:
            yield from _iter_blocks(child, location)


def _has_nested_block(element: Element) -> bool:
    for child in element.childNodes:
        qname = getattr(child, "qname", None)
        if qname is None:
            continue
        if qname in _TEXT_BLOCKS or _has_nested_block(child):
            return True
    return False


class OdtPlaceholderDetector(PlaceholderDetector):
    """OpenDocument文本占位符检测器."""

    def detect(self, doc: OpenDocument) -> List[PlaceholderInfo]:
        """检测ODT文档中的占位符.

        Args:
            doc: OpenDocument对象

        Returns:
            占位符信息列表
        """
        placeholders = []
        for para_idx, (location, para) in enumerate(iter_odt_paragraphs(doc)):
            text = teletype.extractText(para)
            if not text.strip():
                continue
            placeholders.extend(self.find_in_text(text, para_idx, location))

        logger.debug(f"ODT文档中找到 {len(placeholders)} 个占位符")
        return placeholders
