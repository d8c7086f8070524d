"""工作表名与文件名处理."""

import re
from typing import Set

# 电子表格工作表名不允许的字符
_SHEET_FORBIDDEN = re.compile(r"[\[\]*?:/\\]")
# 文件名不允许的字符
_FILE_FORBIDDEN = re.compile(r'[<>:"/\\|?*\x00-\x1f]')

MAX_SHEET_NAME_LENGTH = 31
MAX_FILE_STEM_LENGTH = 120


def sanitize_sheet_name(name: str, fallback: str = "Sheet") -> str:
    """去掉工作表名中的非法字符并截断到31个字符."""
    cleaned = _SHEET_FORBIDDEN.sub("", name).strip().strip("'")
    return cleaned[:MAX_SHEET_NAME_LENGTH].strip() or fallback


def sanitize_file_stem(name: str, fallback: str = "document") -> str:
    """去掉文件名中的非法字符."""
    cleaned = _FILE_FORBIDDEN.sub("_", name).strip().strip(".")
    return cleaned[:MAX_FILE_STEM_LENGTH].strip() or fallback


def unique_name(name: str, used: Set[str], max_length: int = MAX_SHEET_NAME_LENGTH) -> str:
    """生成不重复的名称，重复时追加 (2)、(3)….

    比较时不区分大小写，生成的名称会加入 used。
    """
    candidate = name
    counter = 2
    while candidate.lower() in used:
        suffix = f" ({counter})"
        candidate = name[: max_length - len(suffix)].rstrip() + suffix
        counter += 1
    used.add(candidate.lower())
    return candidate
