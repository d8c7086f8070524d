"""命令行接口."""

from pathlib import Path
from typing import List, Optional

import typer
from loguru import logger

from bulk_sheet_editor.app.processor import BulkProcessor
from bulk_sheet_editor.app.workflow import BulkWorkflow
from bulk_sheet_editor.config.job import load_job
from bulk_sheet_editor.config.settings import settings
from bulk_sheet_editor.data.cell_reference import format_cell_reference, normalize_cell_reference, parse_cell_reference
from bulk_sheet_editor.data.csv_reader import CsvReader
from bulk_sheet_editor.data.document_io import DocumentIO
from bulk_sheet_editor.data.models import CellMapping, CsvPreview
from bulk_sheet_editor.service.document_generator import DocumentGenerationRequest, DocumentGenerator
from bulk_sheet_editor.service.template_service import TemplateService, parse_mapping, resolve_column
from bulk_sheet_editor.service.worksheet_generator import SheetGenerationRequest
from bulk_sheet_editor.utils.logger import setup_logger

app = typer.Typer(help="用CSV数据按模板批量生成工作表和文档.")


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出调试日志"),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="日志文件路径，相对路径写到输出目录"),
) -> None:
    """批量工作表编辑器."""
    if verbose or log_file:
        setup_logger(level="DEBUG" if verbose else None, log_file=log_file)


def _fail(message: str) -> None:
    typer.echo(typer.style(message, fg=typer.colors.RED), err=True)
    raise typer.Exit(code=1)


def _warn(message: Optional[str]) -> None:
    typer.echo(typer.style(message or "", fg=typer.colors.YELLOW))


def _print_csv_preview(preview: CsvPreview) -> None:
    if not preview.columns:
        typer.echo("没有可预览的数据，文件可能为空。")
        return
    typer.echo(f"{'列号':<6}{'表头':<24}示例值")
    for column in preview.columns:
        samples = ", ".join(column.sample_values) or "(预览中没有值)"
        typer.echo(f"{column.index + 1:<6}{preview.column_label(column.index):<24}{samples}")


@app.command()
def preview(
    csv_path: str = typer.Argument(..., help="CSV文件路径"),
    no_headers: bool = typer.Option(False, "--no-headers", help="第一行不是表头"),
) -> None:
    """预览CSV文件的列和示例值."""
    try:
        csv_preview = CsvReader().load_preview(csv_path, has_headers=not no_headers)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))
    _print_csv_preview(csv_preview)


@app.command()
def inspect(
    template_path: str = typer.Argument(..., help="模板路径（.ods/.xlsx/.xlsm/.docx/.odt）"),
    sheet: Optional[str] = typer.Option(None, help="要查看的工作表，默认第一个"),
) -> None:
    """查看模板的工作表和非空单元格，或文本模板中的占位符."""
    try:
        if DocumentIO.is_text_document(template_path):
            placeholders = DocumentGenerator().find_placeholders(Path(template_path))
            if not placeholders:
                typer.echo("模板中没有占位符。")
            for name in sorted({ph.text for ph in placeholders}):
                count = sum(1 for ph in placeholders if ph.text == name)
                typer.echo(f"{{{{{name}}}}} × {count}")
            return

        service = TemplateService()
        template = service.open_template(template_path)
        typer.echo(f"工作表: {', '.join(template.sheet_names)}")
        template_sheet = service.load_sheet(template, sheet or template.sheet_names[0])
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    typer.echo(f"工作表 '{template_sheet.name}' 的非空单元格:")
    for (row, col) in sorted(template_sheet.cells):
        value = template_sheet.cells[(row, col)]
        typer.echo(f"  {format_cell_reference(row, col)}: {value.display()}")


def _print_result(result) -> None:
    if result.success:
        typer.echo(typer.style(result.report, fg=typer.colors.GREEN))
    else:
        _fail(result.report)


def _build_sheet_request(
    csv_path: Optional[str],
    template_path: Optional[str],
    mapping: Optional[List[str]],
    output: Optional[str],
    config: Optional[str],
    sheet: Optional[str],
    sheet_prefix: Optional[str],
    name_column: Optional[str],
    infer_types: bool,
    has_headers: bool,
) -> SheetGenerationRequest:
    reader = CsvReader()
    if config:
        job = load_job(config)
        # 命令行参数覆盖任务文件中的设置
        table = reader.load_table(job.csv, has_headers=job.has_headers and has_headers)
        mappings = [
            CellMapping(column_index=resolve_column(table, entry.column), cell_ref=normalize_cell_reference(entry.cell))
            for entry in job.mappings
        ]
        template = job.template
        sheet = sheet or job.sheet
        output_path = Path(output) if output else job.output
        sheet_prefix = sheet_prefix if sheet_prefix is not None else job.sheet_prefix
        name_token = name_column if name_column is not None else job.name_column
        infer = True if infer_types else job.infer_types
    else:
        if not csv_path or not template_path:
            raise ValueError("请指定CSV文件和模板工作簿，或使用 --config 指定任务文件")
        if not mapping:
            raise ValueError("请用 --map 列=单元格 指定至少一个映射")
        table = reader.load_table(csv_path, has_headers=has_headers)
        mappings = [parse_mapping(table, text) for text in mapping]
        template = Path(template_path)
        output_path = Path(output) if output else settings.output_dir / settings.output.default_workbook_name
        name_token = name_column
        infer = infer_types or None

    if sheet is None:
        sheet = TemplateService().open_template(template).sheet_names[0]

    return SheetGenerationRequest(
        csv_table=table,
        template_path=Path(template),
        sheet_name=sheet,
        mappings=mappings,
        output_path=output_path,
        sheet_prefix=sheet_prefix,
        name_column=resolve_column(table, name_token) if name_token is not None else None,
        infer_types=infer,
    )


@app.command()
def generate(
    csv_path: Optional[str] = typer.Argument(None, help="CSV文件路径"),
    template_path: Optional[str] = typer.Argument(None, help="模板工作簿路径（.ods/.xlsx/.xlsm）"),
    mapping: Optional[List[str]] = typer.Option(None, "--map", "-m", help="列映射，格式 列=单元格，可多次指定"),
    output: Optional[str] = typer.Option(None, "--output", "-o", help="输出工作簿路径，后缀决定格式（.ods/.xlsx）"),
    config: Optional[str] = typer.Option(None, "--config", "-c", help="YAML任务文件"),
    sheet: Optional[str] = typer.Option(None, help="模板工作表，默认第一个"),
    sheet_prefix: Optional[str] = typer.Option(None, help="生成工作表名前缀，默认使用模板工作表名"),
    name_column: Optional[str] = typer.Option(None, help="用该列的值命名工作表"),
    infer_types: bool = typer.Option(False, "--infer-types", help="数值写成数字单元格"),
    no_headers: bool = typer.Option(False, "--no-headers", help="第一行不是表头"),
) -> None:
    """按CSV每一行复制模板工作表，生成一个工作簿."""
    try:
        request = _build_sheet_request(
            csv_path,
            template_path,
            mapping,
            output,
            config,
            sheet,
            sheet_prefix,
            name_column,
            infer_types,
            not no_headers,
        )
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    _print_result(BulkProcessor().generate_sheets(request))


@app.command()
def fill(
    csv_path: str = typer.Argument(..., help="CSV文件路径"),
    template_path: str = typer.Argument(..., help="文本模板路径（.docx/.odt），占位符写作 {{列名}}"),
    output_dir: Optional[str] = typer.Option(None, "--output-dir", "-o", help="输出目录，默认为配置的输出目录"),
    name_column: Optional[str] = typer.Option(None, help="用该列的值命名输出文件"),
    no_headers: bool = typer.Option(False, "--no-headers", help="第一行不是表头"),
) -> None:
    """按CSV每一行填充文本模板中的占位符，每行生成一个文档."""
    try:
        table = CsvReader().load_table(csv_path, has_headers=not no_headers)
        request = DocumentGenerationRequest(
            csv_table=table,
            template_path=Path(template_path),
            output_dir=Path(output_dir) if output_dir else settings.output_dir,
            name_column=resolve_column(table, name_column) if name_column is not None else None,
        )
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    _print_result(BulkProcessor().fill_documents(request))


def _prompt_cell(label: str) -> str:
    while True:
        cell = typer.prompt(f"列 '{label}' 对应的单元格（留空跳过）", default="", show_default=False)
        if not cell.strip() or parse_cell_reference(cell) is not None:
            return cell
        _warn(f"无效的单元格引用: {cell}")


@app.command()
def wizard() -> None:
    """交互式向导：导入CSV、配置模板、生成工作簿."""
    workflow = BulkWorkflow()
    state = workflow.state
    csv_step, template_step, generate_step = workflow.steps

    typer.echo(f"[1/3] {csv_step.title}")
    while not csv_step.is_complete():
        path = typer.prompt("CSV文件路径")
        state.has_headers = typer.confirm("第一行是否为表头?", default=True)
        if not csv_step.select_file(path):
            _warn(csv_step.error)
    _print_csv_preview(state.csv_preview)
    workflow.advance()

    typer.echo(f"[2/3] {template_step.title}")
    while state.template is None:
        path = typer.prompt("模板工作簿路径")
        if not template_step.open_template(path):
            _warn(template_step.error)

    sheet_names = state.template.sheet_names
    if len(sheet_names) > 1:
        typer.echo(f"工作表: {', '.join(sheet_names)}")
        while True:
            sheet = typer.prompt("模板工作表", default=sheet_names[0])
            if template_step.select_sheet(sheet):
                break
            _warn(template_step.error)

    while not template_step.is_complete():
        for mapping in state.mappings:
            cell = _prompt_cell(state.csv_table.column_label(mapping.column_index))
            template_step.set_mapping(mapping.column_index, cell)
        if not template_step.is_complete():
            _warn("请至少将一个CSV列映射到模板单元格")
    for row in template_step.previews():
        typer.echo(f"  {row}")
    workflow.advance()

    typer.echo(f"[3/3] {generate_step.title}")
    default_output = str(settings.output_dir / settings.output.default_workbook_name)
    output = typer.prompt("输出文件路径", default=default_output)
    if not generate_step.generate(output):
        _fail(generate_step.error or "生成失败")
    logger.info(f"向导完成，输出文件: {state.last_output_path}")
    typer.echo(typer.style(f"{state.status_message}: {state.last_output_path}", fg=typer.colors.GREEN))


if __name__ == "__main__":
    app()
