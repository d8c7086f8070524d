"""工作表生成测试."""

from pathlib import Path

import pytest

from bulk_sheet_editor.data.models import CellMapping, CellValue, CsvTable, TemplateSheet
from bulk_sheet_editor.data.workbook import OdsFormat, XlsxFormat
from bulk_sheet_editor.service.worksheet_generator import SheetGenerationRequest, WorksheetGenerator


@pytest.fixture
def generator():
    """工作表生成器实例."""
    return WorksheetGenerator()


@pytest.fixture
def template():
    """模板工作表."""
    return TemplateSheet(
        name="Badge",
        cells={
            (0, 0): CellValue.string("Name"),
            (1, 1): CellValue.string("old"),
            (2, 2): CellValue.number(1),
        },
    )


@pytest.fixture
def table():
    """CSV数据，第二行分数为空，第三行缺少后面的列."""
    return CsvTable(
        headers=["Name", "Department", "Score"],
        rows=[["Alice", "R&D", "90"], ["Bob", "Sales", ""], ["Carol"]],
    )


def make_request(table, **kwargs):
    params = dict(
        csv_table=table,
        template_path=Path("badge.ods"),
        sheet_name="Badge",
        mappings=[CellMapping(0, "B2"), CellMapping(1, ""), CellMapping(2, "C3")],
        output_path=Path("out.ods"),
        sheet_prefix="Person",
        infer_types=False,
    )
    params.update(kwargs)
    return SheetGenerationRequest(**params)


def test_build_sheets(generator, template, table):
    """测试每行生成一个工作表."""
    sheets = generator.build_sheets(make_request(table), template)

    assert [sheet.name for sheet in sheets] == ["Person 1", "Person 2", "Person 3"]
    assert sheets[0].cells == {
        (0, 0): CellValue.string("Name"),
        (1, 1): CellValue.string("Alice"),
        (2, 2): CellValue.string("90"),
    }
    # 空值清空单元格
    assert (2, 2) not in sheets[1].cells
    assert sheets[1].cells[(1, 1)] == CellValue.string("Bob")
    # 缺少的列保留模板值
    assert sheets[2].cells[(2, 2)] == CellValue.number(1)
    # 模板本身不被修改
    assert template.cells[(1, 1)] == CellValue.string("old")


def test_build_sheets_infer_types(generator, template):
    """测试数值写成数字单元格，以0开头的编号保持文本."""
    table = CsvTable(headers=["Code", "Score"], rows=[["007", "90"], ["0.5", "-1e3"]])
    request = make_request(table, mappings=[CellMapping(0, "A1"), CellMapping(1, "B1")], infer_types=True)

    sheets = generator.build_sheets(request, template)

    assert sheets[0].cells[(0, 0)] == CellValue.string("007")
    assert sheets[0].cells[(0, 1)] == CellValue.number(90)
    assert sheets[1].cells[(0, 0)] == CellValue.number(0.5)
    assert sheets[1].cells[(0, 1)] == CellValue.number(-1000)


def test_sheet_prefix_defaults_to_template_name(generator, template, table, monkeypatch):
    """测试未指定前缀时使用模板工作表名."""
    from bulk_sheet_editor.config.settings import settings

    monkeypatch.setattr(settings.template, "sheet_prefix", "")
    sheets = generator.build_sheets(make_request(table, sheet_prefix=None), template)

    assert sheets[0].name == "Badge 1"


def test_sheet_names_from_column(generator, template):
    """测试按列值命名工作表，非法字符去掉，重名追加序号."""
    table = CsvTable(
        headers=["Name"],
        rows=[["Alice"], ["alice"], ["A/B?"], [""], ["x" * 40]],
    )
    request = make_request(table, mappings=[CellMapping(0, "A1")], name_column=0)

    names = [sheet.name for sheet in generator.build_sheets(request, template)]

    assert names == ["Alice", "alice (2)", "AB", "Person 4", "x" * 31]


def test_validate_passes(generator, table):
    """测试输入齐全时校验通过."""
    generator.validate(make_request(table))


@pytest.mark.parametrize(
    "overrides",
    [
        {"csv_table": CsvTable(headers=["Name"], rows=[])},
        {"template_path": None},
        {"sheet_name": ""},
        {"mappings": [CellMapping(0, ""), CellMapping(1, "  ")]},
        {"mappings": [CellMapping(0, "B0")]},
        {"mappings": [CellMapping(5, "B2")]},
        {"name_column": 3},
    ],
)
def test_validate_errors(generator, table, overrides):
    """测试输入不完整时校验失败."""
    with pytest.raises(ValueError):
        generator.validate(make_request(table, **overrides))


@pytest.mark.parametrize("suffix, fmt", [(".xlsx", XlsxFormat()), (".ods", OdsFormat())])
def test_generate(generator, people_csv, ods_template, tmp_path, suffix, fmt):
    """测试从ODS模板生成工作簿."""
    from bulk_sheet_editor.data.csv_reader import CsvReader

    table = CsvReader().load_table(people_csv)
    output = tmp_path / "nested" / f"badges{suffix}"
    request = make_request(
        table,
        template_path=ods_template,
        mappings=[CellMapping(0, "B1"), CellMapping(2, "C2")],
        output_path=output,
        sheet_prefix=None,
        name_column=0,
    )

    result = generator.generate(request)

    assert result.output_path == output
    assert result.template_sheet == "Badge"
    assert result.sheet_count == 6
    assert fmt.read_sheet_names(output) == ["Alice", "Bob", "Carol", "Dave", "Eve", "Frank"]
    cells = fmt.read_sheet_cells(output, "Eve")
    assert cells[(0, 0)] == CellValue.string("Name")
    assert cells[(0, 1)] == CellValue.string("Eve")
    assert cells[(1, 2)] == CellValue.string("95")
    assert cells[(5, 0)] == CellValue.boolean(True)


def test_generate_unsupported_output(generator, table, ods_template, tmp_path):
    """测试不支持的输出格式."""
    request = make_request(table, template_path=ods_template, output_path=tmp_path / "out.csv")

    with pytest.raises(ValueError):
        generator.generate(request)
    assert not (tmp_path / "out.csv").exists()


def test_generate_missing_template(generator, table, tmp_path):
    """测试模板不存在."""
    request = make_request(table, template_path=tmp_path / "missing.ods", output_path=tmp_path / "out.ods")

    with pytest.raises(FileNotFoundError):
        generator.generate(request)


def test_long_prefix_keeps_number(generator, template):
    """测试前缀过长时截短前缀，保留序号."""
    table = CsvTable(headers=["Name"], rows=[[str(i)] for i in range(12)])
    request = make_request(table, mappings=[CellMapping(0, "A1")], sheet_prefix="Quarterly Department Report 2024")

    names = [sheet.name for sheet in generator.build_sheets(request, template)]

    assert names[0] == "Quarterly Department Report 2 1"
    assert names[9] == "Quarterly Department Report 10"
    assert all(len(name) <= 31 for name in names)
    assert all(name.endswith(f" {i}") for i, name in enumerate(names, 1))
    assert len(set(names)) == 12


def test_generate_xlsm_output_rejected(generator, table, ods_template, tmp_path):
    """测试不能写出 .xlsm 工作簿."""
    request = make_request(table, template_path=ods_template, output_path=tmp_path / "out.xlsm")

    with pytest.raises(ValueError):
        generator.generate(request)
    assert not (tmp_path / "out.xlsm").exists()


def test_generate_output_dir_not_creatable(generator, table, ods_template, tmp_path):
    """测试输出目录无法创建时报 ValueError."""
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    request = make_request(table, template_path=ods_template, output_path=blocker / "out.ods")

    with pytest.raises(ValueError):
        generator.generate(request)
