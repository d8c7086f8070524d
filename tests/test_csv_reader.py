"""CSV读取测试."""

import pytest

from bulk_sheet_editor.data.csv_reader import CsvReader


@pytest.fixture
def reader():
    """CSV读取器实例."""
    return CsvReader(delimiter=",", encoding="utf-8-sig")


def test_load_preview_with_headers(reader, people_csv):
    """测试带表头的预览."""
    preview = reader.load_preview(people_csv, has_headers=True, max_rows=6)

    assert preview.headers == ["Name", "Department", "Score"]
    assert preview.column_count == 3
    assert len(preview.rows) == 5
    # 预览行多于示例值个数时追加省略号
    assert preview.columns[0].sample_values == ["Alice", "Bob", "Carol", "…"]
    assert preview.columns[2].header == "Score"


def test_load_preview_without_headers(reader, people_csv):
    """测试第一行不是表头时使用 Column N."""
    preview = reader.load_preview(people_csv, has_headers=False, max_rows=6)

    assert preview.headers == ["Column 1", "Column 2", "Column 3"]
    assert len(preview.rows) == 6
    assert preview.columns[0].sample_values[:3] == ["Name", "Alice", "Bob"]


def test_load_preview_few_rows(reader, tmp_path):
    """测试数据行不多于示例值个数时不追加省略号."""
    path = tmp_path / "short.csv"
    path.write_text("a,b\n1,2\n", encoding="utf-8")

    preview = reader.load_preview(path)

    assert preview.columns[0].sample_values == ["1"]
    assert preview.columns[1].sample_values == ["2"]


def test_load_table(reader, people_csv):
    """测试读取完整CSV."""
    table = reader.load_table(people_csv)

    assert table.headers == ["Name", "Department", "Score"]
    assert len(table.rows) == 6
    assert table.rows[-1] == ["Frank", "Sales", "70"]
    assert table.value(0, 1) == "R&D"


def test_load_table_ragged_rows(reader, tmp_path):
    """测试行长度不一致时的表头和取值."""
    path = tmp_path / "ragged.csv"
    path.write_text("Name,,\nAlice,R&D,90,extra\nBob\n\n", encoding="utf-8")

    table = reader.load_table(path)

    assert table.headers == ["Name", "", "", ""]
    assert table.column_label(1) == "Column 2"
    assert table.column_label(3) == "Column 4"
    # 空行被跳过
    assert len(table.rows) == 2
    assert table.value(1, 1) is None


def test_load_table_with_bom(reader, tmp_path):
    """测试带BOM的UTF-8文件."""
    path = tmp_path / "bom.csv"
    path.write_bytes("姓名,部门\n张三,研发\n".encode("utf-8-sig"))

    table = reader.load_table(path)

    assert table.headers == ["姓名", "部门"]
    assert table.rows == [["张三", "研发"]]


def test_load_table_quoted_values(reader, tmp_path):
    """测试带引号、逗号和换行的值."""
    path = tmp_path / "quoted.csv"
    path.write_text('Name,Note\n"Doe, Jane","line1\nline2"\n', encoding="utf-8")

    table = reader.load_table(path)

    assert table.rows == [["Doe, Jane", "line1\nline2"]]


def test_empty_file(reader, tmp_path):
    """测试空文件."""
    path = tmp_path / "empty.csv"
    path.write_text("", encoding="utf-8")

    preview = reader.load_preview(path)
    table = reader.load_table(path)

    assert preview.columns == []
    assert table.headers == []
    assert table.rows == []


def test_missing_file(reader, tmp_path):
    """测试文件不存在."""
    with pytest.raises(FileNotFoundError):
        reader.load_table(tmp_path / "missing.csv")


def test_invalid_encoding(reader, tmp_path):
    """测试无法解码的文件."""
    path = tmp_path / "latin1.csv"
    path.write_bytes(b"name\n\xff\xfe caf\xe9\n")

    with pytest.raises(ValueError):
        reader.load_table(path)


def test_custom_delimiter(tmp_path):
    """测试自定义分隔符."""
    path = tmp_path / "semicolon.csv"
    path.write_text("a;b\n1;2\n", encoding="utf-8")

    table = CsvReader(delimiter=";").load_table(path)

    assert table.headers == ["a", "b"]
    assert table.rows == [["1", "2"]]
