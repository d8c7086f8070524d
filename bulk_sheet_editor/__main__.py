from bulk_sheet_editor.app.cli import app

app(prog_name="bulk-sheet-editor")
