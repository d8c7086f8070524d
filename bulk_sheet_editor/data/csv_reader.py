"""CSV读取操作."""

import csv
from itertools import islice
from pathlib import Path
from typing import Iterator, List, Optional, Union

from loguru import logger

from bulk_sheet_editor.config.settings import settings
from bulk_sheet_editor.data.models import CsvColumnPreview, CsvPreview, CsvTable


class CsvReader:
    """CSV读取类."""

    def __init__(self, delimiter: Optional[str] = None, encoding: Optional[str] = None) -> None:
        """初始化CSV读取器.

        Args:
            delimiter: 字段分隔符，默认取配置
            encoding: 文件编码，默认取配置
        """
        self.delimiter = delimiter or settings.csv.delimiter
        self.encoding = encoding or settings.csv.encoding

    def load_preview(
        self,
        file_path: Union[str, Path],
        has_headers: bool = True,
        max_rows: Optional[int] = None,
    ) -> CsvPreview:
        """读取CSV前几行生成列预览.

        Args:
            file_path: CSV文件路径
            has_headers: 第一行是否为表头
            max_rows: 读取的最大行数（含表头行），默认取配置

        Returns:
            CSV预览

        Raises:
            FileNotFoundError: 文件不存在
            ValueError: 文件无法解析
        """
        file_path = Path(file_path)
        max_rows = max_rows or settings.csv.preview_rows
        rows = self._read(file_path, limit=max_rows)

        column_count = max((len(row) for row in rows), default=0)
        headers = self._headers(rows, column_count, has_headers)
        data_rows = rows[1:] if has_headers and rows else rows

        columns = []
        for index, header in enumerate(headers):
            samples = [row[index] for row in data_rows if index < len(row)][: settings.csv.sample_values]
            if samples and len(data_rows) > len(samples):
                samples.append("…")
            columns.append(CsvColumnPreview(index=index, header=header, sample_values=samples))

        logger.info(f"已加载CSV预览: {file_path}，{column_count} 列，{len(data_rows)} 行示例数据")
        return CsvPreview(
            path=file_path,
            has_headers=has_headers,
            headers=headers,
            columns=columns,
            rows=data_rows,
        )

    def load_table(self, file_path: Union[str, Path], has_headers: bool = True) -> CsvTable:
        """读取整个CSV文件.

        Args:
            file_path: CSV文件路径
            has_headers: 第一行是否为表头

        Returns:
            CSV数据

        Raises:
            FileNotFoundError: 文件不存在
            ValueError: 文件无法解析
        """
        file_path = Path(file_path)
        rows = self._read(file_path)
        column_count = max((len(row) for row in rows), default=0)
        headers = self._headers(rows, column_count, has_headers)
        if has_headers and rows:
            rows = rows[1:]
        logger.info(f"已加载CSV: {file_path}，{len(rows)} 行数据")
        return CsvTable(headers=headers, rows=rows, has_headers=has_headers)

    def _read(self, file_path: Path, limit: Optional[int] = None) -> List[List[str]]:
        if not file_path.exists():
            raise FileNotFoundError(f"文件不存在: {file_path}")

        try:
            with open(file_path, "r", encoding=self.encoding, newline="") as f:
                # 空行不算作记录
                records: Iterator[List[str]] = (
                    row for row in csv.reader(f, delimiter=self.delimiter) if row
                )
                if limit is not None:
                    records = islice(records, limit)
                return [row for row in records]
        except (csv.Error, UnicodeDecodeError) as e:
            logger.error(f"解析CSV失败: {file_path}: {e}")
            raise ValueError(f"解析CSV失败: {file_path}: {e}")

    @staticmethod
    def _headers(rows: List[List[str]], column_count: int, has_headers: bool) -> List[str]:
        if has_headers and rows:
            first_row = rows[0]
            return [first_row[idx] if idx < len(first_row) else "" for idx in range(column_count)]
        return [f"Column {idx + 1}" for idx in range(column_count)]
