"""任务文件测试."""

import pytest

from bulk_sheet_editor.config.job import load_job

JOB_YAML = """\
csv: data/people.csv
template: /abs/badge.ods
sheet: Badge
output: out/badges.xlsx
sheet_prefix: Person
name_column: Name
mappings:
  - column: Name
    cell: b2
  - column: 3
    cell: C5
"""


def write(tmp_path, text, name="job.yaml"):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_load_job(tmp_path):
    """测试加载任务文件，相对路径按任务文件目录解析."""
    job = load_job(write(tmp_path, JOB_YAML))

    assert job.csv == tmp_path / "data" / "people.csv"
    assert str(job.template) == "/abs/badge.ods"
    assert job.output == tmp_path / "out" / "badges.xlsx"
    assert job.sheet == "Badge"
    assert job.has_headers is True
    assert job.sheet_prefix == "Person"
    assert job.name_column == "Name"
    assert job.infer_types is None
    assert [(m.column, m.cell) for m in job.mappings] == [("Name", "b2"), (3, "C5")]


def test_load_job_missing_file(tmp_path):
    """测试任务文件不存在."""
    with pytest.raises(FileNotFoundError):
        load_job(tmp_path / "missing.yaml")


@pytest.mark.parametrize(
    "text",
    [
        "csv: [unclosed",
        "- just\n- a list\n",
        "csv: a.csv\ntemplate: t.ods\nmappings:\n  - column: A\n    cell: B2\n",
        "csv: a.csv\ntemplate: t.ods\noutput: o.ods\nmappings: []\n",
        "csv: a.csv\ntemplate: t.ods\noutput: o.ods\nmappings:\n  - column: A\n",
    ],
)
def test_load_job_invalid(tmp_path, text):
    """测试格式或字段不正确的任务文件."""
    with pytest.raises(ValueError):
        load_job(write(tmp_path, text))
