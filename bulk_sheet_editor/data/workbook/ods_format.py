"""ODS（OpenDocument电子表格）读写."""

from collections import defaultdict
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Union

from loguru import logger
from odf import teletype
from odf.element import Element
from odf.namespaces import OFFICENS, TABLENS, TEXTNS
from odf.opendocument import OpenDocumentSpreadsheet, load
from odf.table import Table, TableCell, TableColumn, TableRow
from odf.text import P

from bulk_sheet_editor.data.models import CellPosition, CellValue, SheetContent
from bulk_sheet_editor.data.workbook.base_format import WorkbookFormat

# ODS 行列上限，与 LibreOffice 一致
MAX_ROWS = 1048576
MAX_COLUMNS = 16384

_TABLE = (TABLENS, "table")
_ROW = (TABLENS, "table-row")
_ROW_GROUPS = {
    (TABLENS, "table-header-rows"),
    (TABLENS, "table-rows"),
    (TABLENS, "table-row-group"),
}
_CELLS = {(TABLENS, "table-cell"), (TABLENS, "covered-table-cell")}
_PARAGRAPH = (TEXTNS, "p")
_NUMBER_TYPES = {"float", "percentage", "currency"}


def _qname(node) -> Optional[tuple]:
    # 文本节点没有 qname
    return getattr(node, "qname", None)


class OdsFormat(WorkbookFormat):
    """ODS工作簿格式."""

    suffixes = (".ods",)

    def read_sheet_names(self, file_path: Union[str, Path]) -> List[str]:
        return [table.getAttrNS(TABLENS, "name") or "" for table in self._tables(file_path)]

    def read_sheet_cells(
        self, file_path: Union[str, Path], sheet_name: str
    ) -> Dict[CellPosition, CellValue]:
        for table in self._tables(file_path):
            if table.getAttrNS(TABLENS, "name") == sheet_name:
                cells = self._table_cells(table)
                logger.debug(f"工作表 '{sheet_name}' 读取到 {len(cells)} 个非空单元格")
                return cells
        raise ValueError(f"工作表不存在: {sheet_name}")

    def write_sheets(self, file_path: Union[str, Path], sheets: List[SheetContent]) -> None:
        file_path = Path(file_path)
        doc = OpenDocumentSpreadsheet()
        for sheet in sheets:
            doc.spreadsheet.addElement(self._build_table(sheet))

        try:
            doc.save(str(file_path))
        except OSError as e:
            logger.error(f"保存工作簿失败: {e}")
            raise ValueError(f"保存工作簿失败: {e}")

    def _tables(self, file_path: Union[str, Path]) -> List[Element]:
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"文件不存在: {file_path}")

        try:
            doc = load(str(file_path))
        except Exception as e:
            logger.error(f"加载工作簿失败: {e}")
            raise ValueError(f"加载工作簿失败: {e}")

        spreadsheet = getattr(doc, "spreadsheet", None)
        if spreadsheet is None:
            raise ValueError(f"不是ODS电子表格: {file_path}")
        return [child for child in spreadsheet.childNodes if _qname(child) == _TABLE]

    def _table_cells(self, table: Element) -> Dict[CellPosition, CellValue]:
        cells: Dict[CellPosition, CellValue] = {}
        row_index = 0
        for row in _iter_rows(table):
            row_repeat = _repeat(row, "number-rows-repeated")
            row_values = []
            col_index = 0
            for cell in row.childNodes:
                if _qname(cell) not in _CELLS:
                    continue
                col_repeat = _repeat(cell, "number-columns-repeated")
                value = _cell_value(cell)
                if value is not None:
                    for offset in range(min(col_repeat, MAX_COLUMNS - col_index)):
                        row_values.append((col_index + offset, value))
                col_index += col_repeat

            if row_values:
                for offset in range(min(row_repeat, MAX_ROWS - row_index)):
                    for col, value in row_values:
                        cells[(row_index + offset, col)] = value
            row_index += row_repeat
        return cells

    def _build_table(self, sheet: SheetContent) -> Element:
        table = Table(name=sheet.name)
        rows: Dict[int, Dict[int, CellValue]] = defaultdict(dict)
        for (row, col), value in sheet.cells.items():
            rows[row][col] = value

        max_col = max((col for _, col in sheet.cells), default=0)
        table.addElement(TableColumn(numbercolumnsrepeated=str(max_col + 1)))

        if not rows:
            empty_row = TableRow()
            empty_row.addElement(TableCell())
            table.addElement(empty_row)
            return table

        next_row = 0
        for row_index in sorted(rows):
            if row_index > next_row:
                gap = TableRow(numberrowsrepeated=str(row_index - next_row))
                gap.addElement(TableCell())
                table.addElement(gap)

            table_row = TableRow()
            next_col = 0
            for col_index in sorted(rows[row_index]):
                if col_index > next_col:
                    table_row.addElement(TableCell(numbercolumnsrepeated=str(col_index - next_col)))
                table_row.addElement(_build_cell(rows[row_index][col_index]))
                next_col = col_index + 1
            table.addElement(table_row)
            next_row = row_index + 1
        return table


def _iter_rows(element: Element) -> Iterator[Element]:
    """遍历表格行，展开表头行和行分组."""
    for child in element.childNodes:
        qname = _qname(child)
        if qname == _ROW:
            yield child
        elif qname in _ROW_GROUPS:
            yield from _iter_rows(child)


def _repeat(element: Element, attribute: str) -> int:
    raw = element.getAttrNS(TABLENS, attribute)
    try:
        return max(int(raw), 1) if raw else 1
    except ValueError:
        return 1


def _cell_value(cell: Element) -> Optional[CellValue]:
    value_type = cell.getAttrNS(OFFICENS, "value-type")
    if value_type in _NUMBER_TYPES:
        raw = cell.getAttrNS(OFFICENS, "value")
        if raw is not None:
            try:
                return CellValue.number(float(raw))
            except ValueError:
                pass
    elif value_type == "boolean":
        raw = cell.getAttrNS(OFFICENS, "boolean-value") or ""
        return CellValue.boolean(raw.lower() == "true")
    elif value_type == "date":
        raw = cell.getAttrNS(OFFICENS, "date-value")
        if raw:
            return CellValue.string(raw)
    elif value_type == "time":
        raw = cell.getAttrNS(OFFICENS, "time-value")
        if raw:
            return CellValue.string(raw)

    # 只取单元格的直接段落，批注中的段落不算
    paragraphs = [child for child in cell.childNodes if _qname(child) == _PARAGRAPH]
    text = "\n".join(teletype.extractText(p) for p in paragraphs)
    if not text:
        text = cell.getAttrNS(OFFICENS, "string-value") or ""
    return CellValue.string(text) if text else None


def _build_cell(value: CellValue) -> Element:
    if value.kind == "number":
        cell = TableCell(valuetype="float", value=value.display())
        cell.addElement(P(text=value.display()))
        return cell
    if value.kind == "bool":
        cell = TableCell(valuetype="boolean", booleanvalue="true" if value.value else "false")
        cell.addElement(P(text=value.display()))
        return cell

    cell = TableCell(valuetype="string")
    for line in str(value.value).split("\n"):
        paragraph = P()
        teletype.addTextToElement(paragraph, line)
        cell.addElement(paragraph)
    return cell
