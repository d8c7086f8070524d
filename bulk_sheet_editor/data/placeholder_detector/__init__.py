"""占位符检测器包."""

from bulk_sheet_editor.data.placeholder_detector.base_detector import PlaceholderDetector, placeholder_name
from bulk_sheet_editor.data.placeholder_detector.docx_detector import DocxPlaceholderDetector, iter_docx_paragraphs
from bulk_sheet_editor.data.placeholder_detector.odt_detector import OdtPlaceholderDetector, iter_odt_paragraphs

__all__ = [
    'PlaceholderDetector',
    'DocxPlaceholderDetector',
    'OdtPlaceholderDetector',
    'iter_docx_paragraphs',
    'iter_odt_paragraphs',
    'placeholder_name',
]
