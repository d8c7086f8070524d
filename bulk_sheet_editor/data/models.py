"""数据模型定义."""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from bulk_sheet_editor.data.cell_reference import parse_cell_reference

CellPosition = Tuple[int, int]

_NUMBER_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")


@dataclass(frozen=True)
class CellValue:
    """单元格的值.

    kind 取值为 string、number、bool 三种之一。
    """

    kind: str
    value: Union[str, float, bool]

    @classmethod
    def string(cls, value: str) -> "CellValue":
        return cls("string", value)

    @classmethod
    def number(cls, value: float) -> "CellValue":
        return cls("number", float(value))

    @classmethod
    def boolean(cls, value: bool) -> "CellValue":
        return cls("bool", bool(value))

    @classmethod
    def from_text(cls, text: str, infer_types: bool = False) -> "CellValue":
        """由CSV文本构造单元格值.

        Args:
            text: CSV中的原始文本
            infer_types: 为True时，纯数字文本写成数字单元格

        Returns:
            单元格值
        """
        stripped = text.strip()
        if infer_types and _NUMBER_RE.match(stripped) and not _has_leading_zero(stripped):
            return cls.number(float(stripped))
        return cls.string(text)

    def display(self) -> str:
        """返回用于预览的文本."""
        if self.kind == "bool":
            return "TRUE" if self.value else "FALSE"
        if self.kind == "number":
            number = float(self.value)
            if number.is_integer() and abs(number) < 1e15:
                return str(int(number))
            return repr(number)
        return str(self.value)


def _has_leading_zero(text: str) -> bool:
    # 邮编、编号这类以0开头的文本保持字符串
    digits = text.lstrip("+-")
    return len(digits) > 1 and digits[0] == "0" and digits[1] != "."


@dataclass
class CellMapping:
    """CSV列到模板单元格的映射."""

    column_index: int
    cell_ref: str = ""

    @property
    def position(self) -> Optional[CellPosition]:
        """解析后的(行, 列)，无效引用返回None."""
        return parse_cell_reference(self.cell_ref)

    @property
    def is_assigned(self) -> bool:
        return bool(self.cell_ref.strip())


@dataclass
class CsvColumnPreview:
    """CSV单列预览."""

    index: int
    header: str
    sample_values: List[str] = field(default_factory=list)


@dataclass
class CsvPreview:
    """CSV文件预览."""

    path: Path
    has_headers: bool
    headers: List[str]
    columns: List[CsvColumnPreview]
    rows: List[List[str]]

    @property
    def column_count(self) -> int:
        return len(self.headers)

    def column_label(self, index: int) -> str:
        return column_label(self.headers, index)


@dataclass
class CsvTable:
    """完整读取的CSV数据."""

    headers: List[str]
    rows: List[List[str]]
    has_headers: bool = True

    def column_label(self, index: int) -> str:
        return column_label(self.headers, index)

    def value(self, row_index: int, column_index: int) -> Optional[str]:
        """返回指定数据行的列值，列不存在时返回None."""
        row = self.rows[row_index]
        if 0 <= column_index < len(row):
            return row[column_index]
        return None


def column_label(headers: List[str], index: int) -> str:
    """返回列的显示名称，表头为空时使用 Column N."""
    if 0 <= index < len(headers) and headers[index].strip():
        return headers[index]
    return f"Column {index + 1}"


@dataclass
class WorkbookTemplate:
    """模板工作簿."""

    path: Path
    sheet_names: List[str]


@dataclass
class TemplateSheet:
    """模板工作表及其非空单元格."""

    name: str
    cells: Dict[CellPosition, CellValue] = field(default_factory=dict)

    def value_at(self, cell_ref: str) -> Optional[str]:
        """返回单元格的显示文本，空单元格或无效引用返回None."""
        position = parse_cell_reference(cell_ref)
        if position is None or position not in self.cells:
            return None
        return self.cells[position].display()


@dataclass
class TemplatePreviewRow:
    """映射预览行."""

    column_label: str
    cell_address: str
    existing_value: Optional[str]
    preview_value: Optional[str]

    def __str__(self) -> str:
        return (
            f"{self.column_label} → {self.cell_address} "
            f"({self.existing_value or 'empty'} → {self.preview_value or 'empty'})"
        )


@dataclass
class SheetContent:
    """待写出的工作表."""

    name: str
    cells: Dict[CellPosition, CellValue] = field(default_factory=dict)


class PlaceholderInfo:
    """占位符信息类."""

    def __init__(
        self,
        text: str,
        paragraph_index: int,
        raw_text: str = "",
        location: str = "body",
        line_text: str = "",
    ) -> None:
        """初始化占位符信息.

        Args:
            text: 占位符名称（已去掉首尾空白）
            paragraph_index: 段落索引（按检测器遍历顺序）
            raw_text: 文档中的原始占位符文本，如 {{ 姓名 }}
            location: 所在位置（body, table, header, footer）
            line_text: 占位符所在段落的完整文本
        """
        self.text = text
        self.paragraph_index = paragraph_index
        self.raw_text = raw_text
        self.location = location
        self.line_text = line_text

    def __repr__(self) -> str:
        """返回占位符信息的字符串表示.

        Returns:
            占位符信息的字符串表示
        """
        return (
            f"PlaceholderInfo(text='{self.text}', "
            f"paragraph_index={self.paragraph_index}, "
            f"location='{self.location}', "
            f"line_text='{self.line_text}')"
        )
