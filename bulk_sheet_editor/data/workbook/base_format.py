"""工作簿格式基类."""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Sequence, Union

from bulk_sheet_editor.data.models import CellPosition, CellValue, SheetContent


class WorkbookFormat(ABC):
    """工作簿格式基类."""

    # 可读取的文件后缀（小写，含点）
    suffixes: Sequence[str] = ()
    # 可写出的文件后缀，为空时与 suffixes 相同
    writable_suffixes: Sequence[str] = ()

    def can_write(self, suffix: str) -> bool:
        return suffix in (self.writable_suffixes or self.suffixes)

    @abstractmethod
    def read_sheet_names(self, file_path: Union[str, Path]) -> List[str]:
        """读取工作簿中的工作表名称.

        Args:
            file_path: 工作簿路径

        Returns:
            按顺序排列的工作表名称列表
        """
        pass

    @abstractmethod
    def read_sheet_cells(
        self, file_path: Union[str, Path], sheet_name: str
    ) -> Dict[CellPosition, CellValue]:
        """读取工作表中的非空单元格.

        Args:
            file_path: 工作簿路径
            sheet_name: 工作表名称

        Returns:
            以(行, 列)为键的单元格字典
        """
        pass

    @abstractmethod
    def write_sheets(self, file_path: Union[str, Path], sheets: List[SheetContent]) -> None:
        """将工作表写出为工作簿文件.

        Args:
            file_path: 输出路径
            sheets: 工作表列表
        """
        pass
