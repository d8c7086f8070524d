"""工作簿读写测试."""

import pytest

from bulk_sheet_editor.data.models import CellValue, SheetContent
from bulk_sheet_editor.data.workbook import OdsFormat, XlsxFormat, get_output_format, get_workbook_format, is_workbook


@pytest.fixture
def sheets():
    """待写出的工作表."""
    return [
        SheetContent(
            name="First",
            cells={
                (0, 0): CellValue.string("Name"),
                (0, 3): CellValue.string("line1\nline2"),
                (4, 1): CellValue.number(3),
                (4, 2): CellValue.number(2.5),
                (7, 0): CellValue.boolean(True),
            },
        ),
        SheetContent(name="Empty"),
    ]


def test_get_workbook_format():
    """测试按后缀选择格式."""
    assert isinstance(get_workbook_format("a.ods"), OdsFormat)
    assert isinstance(get_workbook_format("A.ODS"), OdsFormat)
    assert isinstance(get_workbook_format("a.xlsx"), XlsxFormat)
    assert isinstance(get_workbook_format("a.xlsm"), XlsxFormat)
    assert is_workbook("a.ods")
    assert not is_workbook("a.docx")


@pytest.mark.parametrize("name", ["a.xls", "a.fods", "a.csv", "noext"])
def test_unsupported_format(name):
    """测试不支持的格式."""
    with pytest.raises(ValueError):
        get_workbook_format(name)


def test_read_ods_template(ods_template):
    """测试读取ODS模板，包括重复行列和表头行."""
    fmt = OdsFormat()

    assert fmt.read_sheet_names(ods_template) == ["Badge", "Notes"]
    cells = fmt.read_sheet_cells(ods_template, "Badge")
    assert cells == {
        (0, 0): CellValue.string("Name"),
        (1, 2): CellValue.number(42),
        (5, 0): CellValue.boolean(True),
    }
    assert fmt.read_sheet_cells(ods_template, "Notes") == {(0, 0): CellValue.string("note")}


def test_read_ods_missing_sheet(ods_template):
    """测试读取不存在的工作表."""
    with pytest.raises(ValueError):
        OdsFormat().read_sheet_cells(ods_template, "Nope")


def test_read_xlsx_template(xlsx_template):
    """测试读取XLSX模板."""
    fmt = XlsxFormat()

    assert fmt.read_sheet_names(xlsx_template) == ["Card"]
    assert fmt.read_sheet_cells(xlsx_template, "Card") == {
        (0, 0): CellValue.string("Name"),
        (0, 2): CellValue.boolean(False),
        (2, 1): CellValue.number(7),
    }


@pytest.mark.parametrize("fmt, suffix", [(OdsFormat(), ".ods"), (XlsxFormat(), ".xlsx")])
def test_write_and_read_back(fmt, suffix, sheets, tmp_path):
    """测试写出的工作簿可以原样读回."""
    path = tmp_path / f"out{suffix}"
    fmt.write_sheets(path, sheets)

    assert fmt.read_sheet_names(path) == ["First", "Empty"]
    assert fmt.read_sheet_cells(path, "First") == sheets[0].cells
    assert fmt.read_sheet_cells(path, "Empty") == {}


def test_xlsx_text_not_formula(tmp_path):
    """测试以=开头的文本不会写成公式."""
    path = tmp_path / "formula.xlsx"
    sheet = SheetContent(name="S", cells={(0, 0): CellValue.string("=1+1")})

    XlsxFormat().write_sheets(path, [sheet])

    assert XlsxFormat().read_sheet_cells(path, "S") == {(0, 0): CellValue.string("=1+1")}


@pytest.mark.parametrize("fmt, suffix", [(OdsFormat(), ".ods"), (XlsxFormat(), ".xlsx")])
def test_missing_file(fmt, suffix, tmp_path):
    """测试文件不存在."""
    with pytest.raises(FileNotFoundError):
        fmt.read_sheet_names(tmp_path / f"missing{suffix}")


@pytest.mark.parametrize("fmt, suffix", [(OdsFormat(), ".ods"), (XlsxFormat(), ".xlsx")])
def test_corrupt_file(fmt, suffix, tmp_path):
    """测试无法解析的文件."""
    path = tmp_path / f"broken{suffix}"
    path.write_text("not a workbook", encoding="utf-8")

    with pytest.raises(ValueError):
        fmt.read_sheet_names(path)



def test_get_output_format():
    """测试输出格式只允许可写出的后缀."""
    assert isinstance(get_output_format("out.ODS"), OdsFormat)
    assert isinstance(get_output_format("out.xlsx"), XlsxFormat)
    # .xlsm 可以作为模板读取，但不能写出
    assert isinstance(get_workbook_format("out.xlsm"), XlsxFormat)
    with pytest.raises(ValueError):
        get_output_format("out.xlsm")


def test_xlsx_control_character(tmp_path):
    """测试含有控制字符的文本写出时报错."""
    path = tmp_path / "control.xlsx"
    sheet = SheetContent(name="S", cells={(1, 1): CellValue.string("A\x01B")})

    with pytest.raises(ValueError, match="B2"):
        XlsxFormat().write_sheets(path, [sheet])
