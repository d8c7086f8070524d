"""A1样式单元格引用的解析与格式化.

行列索引在内部均从0开始，A1 对应 (0, 0)。
"""

import re
from typing import Optional, Tuple

_CELL_RE = re.compile(r"^([A-Z]+)([0-9]+)$")


def column_label_from_index(index: int) -> str:
    """列索引转列标签，0 -> A，26 -> AA."""
    if index < 0:
        raise ValueError(f"列索引不能为负数: {index}")
    label = ""
    index += 1
    while index > 0:
        index, remainder = divmod(index - 1, 26)
        label = chr(ord("A") + remainder) + label
    return label


def column_index_from_label(label: str) -> int:
    """列标签转列索引，A -> 0，AA -> 26."""
    label = label.strip().upper()
    if not label or not label.isalpha() or not label.isascii():
        raise ValueError(f"无效的列标签: {label!r}")
    index = 0
    for ch in label:
        index = index * 26 + (ord(ch) - ord("A") + 1)
    return index - 1


def normalize_cell_reference(text: str) -> str:
    """去掉首尾空白并转为大写."""
    return text.strip().upper()


def parse_cell_reference(text: str) -> Optional[Tuple[int, int]]:
    """解析单元格引用.

    Args:
        text: 单元格引用，如 B3、$AA$10

    Returns:
        (行, 列) 元组，无效引用返回None
    """
    if not text:
        return None
    match = _CELL_RE.match(normalize_cell_reference(text).replace("$", ""))
    if not match:
        return None
    row_number = int(match.group(2))
    if row_number < 1:
        return None
    return row_number - 1, column_index_from_label(match.group(1))


def format_cell_reference(row: int, col: int) -> str:
    """(行, 列) 转单元格引用."""
    if row < 0:
        raise ValueError(f"行索引不能为负数: {row}")
    return f"{column_label_from_index(col)}{row + 1}"
