"""测试公共夹具."""

from pathlib import Path

import pytest
from docx import Document
from odf.opendocument import OpenDocumentSpreadsheet, OpenDocumentText
from odf.table import Table, TableCell, TableHeaderRows, TableRow
from odf.text import P
from openpyxl import Workbook

CSV_CONTENT = (
    "Name,Department,Score\n"
    "Alice,R&D,90\n"
    "Bob,Sales,85\n"
    "Carol,R&D,77\n"
    "Dave,Ops,60\n"
    "Eve,Ops,95\n"
    "Frank,Sales,70\n"
)


def _string_cell(text: str) -> TableCell:
    cell = TableCell(valuetype="string")
    cell.addElement(P(text=text))
    return cell


@pytest.fixture
def people_csv(tmp_path) -> Path:
    """6行数据的CSV文件."""
    path = tmp_path / "people.csv"
    path.write_text(CSV_CONTENT, encoding="utf-8")
    return path


@pytest.fixture
def ods_template(tmp_path) -> Path:
    """两个工作表的ODS模板.

    Badge: A1=Name，C2=42，A6=TRUE，其余为空（含重复行列）。
    Notes: A1=note。
    """
    doc = OpenDocumentSpreadsheet()

    badge = Table(name="Badge")
    header_rows = TableHeaderRows()
    first = TableRow()
    first.addElement(_string_cell("Name"))
    first.addElement(TableCell())
    header_rows.addElement(first)
    badge.addElement(header_rows)

    second = TableRow()
    second.addElement(TableCell(numbercolumnsrepeated="2"))
    number = TableCell(valuetype="float", value="42")
    number.addElement(P(text="42"))
    second.addElement(number)
    badge.addElement(second)

    blank = TableRow(numberrowsrepeated="3")
    blank.addElement(TableCell())
    badge.addElement(blank)

    flag_row = TableRow()
    flag = TableCell(valuetype="boolean", booleanvalue="true")
    flag.addElement(P(text="TRUE"))
    flag_row.addElement(flag)
    badge.addElement(flag_row)

    tail = TableRow(numberrowsrepeated="1048570")
    tail.addElement(TableCell(numbercolumnsrepeated="1024"))
    badge.addElement(tail)
    doc.spreadsheet.addElement(badge)

    notes = Table(name="Notes")
    row = TableRow()
    row.addElement(_string_cell("note"))
    notes.addElement(row)
    doc.spreadsheet.addElement(notes)

    path = tmp_path / "badge.ods"
    doc.save(str(path))
    return path


@pytest.fixture
def xlsx_template(tmp_path) -> Path:
    """单个工作表的XLSX模板."""
    wb = Workbook()
    ws = wb.active
    ws.title = "Card"
    ws["A1"] = "Name"
    ws["B3"] = 7
    ws["C1"] = False
    path = tmp_path / "card.xlsx"
    wb.save(path)
    return path


@pytest.fixture
def docx_template(tmp_path) -> Path:
    """带占位符的DOCX模板，其中一个占位符跨越两个run."""
    doc = Document()
    doc.add_paragraph("Hello {{Name}}")
    para = doc.add_paragraph()
    para.add_run("Dept: {{Dep")
    para.add_run("artment}}")
    table = doc.add_table(rows=1, cols=2)
    table.cell(0, 0).text = "{{ Score }}"
    table.cell(0, 1).text = "static"
    doc.add_paragraph("Ref {{Unknown}}")
    path = tmp_path / "letter.docx"
    doc.save(str(path))
    return path


@pytest.fixture
def odt_template(tmp_path) -> Path:
    """带占位符的ODT模板."""
    doc = OpenDocumentText()
    doc.text.addElement(P(text="Hello {{Name}}"))
    doc.text.addElement(P(text="Score: {{Score}} / {{Unknown}}"))
    path = tmp_path / "letter.odt"
    doc.save(str(path))
    return path
