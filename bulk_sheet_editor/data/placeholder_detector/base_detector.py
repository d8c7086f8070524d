"""占位符检测器基类."""

import re
from abc import ABC, abstractmethod
from typing import Any, List, Optional, Pattern

from bulk_sheet_editor.config.settings import settings
from bulk_sheet_editor.data.models import PlaceholderInfo


def placeholder_name(match) -> str:
    """返回匹配到的占位符名称，正则无分组时取整个匹配."""
    name = match.group(1) if match.re.groups else match.group(0)
    return (name or "").strip()


class PlaceholderDetector(ABC):
    """占位符检测器基类."""

    def __init__(self, pattern: Optional[str] = None) -> None:
        """初始化占位符检测器.

        Args:
            pattern: 占位符正则表达式，默认取配置，第一个分组为占位符名称
        """
        self.pattern: Pattern = re.compile(pattern or settings.template.placeholder_pattern)

    def find_in_text(self, text: str, paragraph_index: int, location: str) -> List[PlaceholderInfo]:
        """查找一段文本中的占位符."""
        return [
            PlaceholderInfo(
                text=placeholder_name(match),
                paragraph_index=paragraph_index,
                raw_text=match.group(0),
                location=location,
                line_text=text,
            )
            for match in self.pattern.finditer(text)
            if placeholder_name(match)
        ]

    @abstractmethod
    def detect(self, doc: Any) -> List[PlaceholderInfo]:
        """检测文档中的占位符.

        Args:
            doc: 文档对象

        Returns:
            占位符信息列表
        """
        pass
