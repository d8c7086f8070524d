"""文档读写操作."""

from pathlib import Path
from typing import Union

from docx import Document
from docx.document import Document as DocxDocument
from loguru import logger
from odf.opendocument import OpenDocument, load

TextDocument = Union[DocxDocument, OpenDocument]

SUPPORTED_SUFFIXES = ('.docx', '.odt')


class DocumentIO:
    """文档读写操作类，支持 Word(.docx) 与 OpenDocument 文本(.odt)."""

    @staticmethod
    def is_text_document(file_path: Union[str, Path]) -> bool:
        return Path(file_path).suffix.lower() in SUPPORTED_SUFFIXES

    @staticmethod
    def load_document(file_path: Union[str, Path]) -> TextDocument:
        """加载文本文档.

        Args:
            file_path: 文档路径

        Returns:
            .docx 返回 python-docx 的 Document，.odt 返回 odfpy 的 OpenDocument

        Raises:
            FileNotFoundError: 文件不存在
            ValueError: 文件格式不正确
        """
        file_path = Path(file_path)
        if not file_path.exists():
            raise FileNotFoundError(f"文件不存在: {file_path}")

        suffix = file_path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise ValueError(f"不支持的文件类型: {file_path.suffix}")

        try:
            if suffix == '.docx':
                doc = Document(str(file_path))
            else:
                doc = load(str(file_path))
            logger.debug(f"已加载文档: {file_path}")
        except Exception as e:
            logger.error(f"加载文档失败: {e}")
            raise ValueError(f"加载文档失败: {e}")

        if suffix == '.odt' and getattr(doc, "text", None) is None:
            raise ValueError(f"不是ODF文本文档: {file_path}")
        return doc

    @staticmethod
    def save_document(doc: TextDocument, output_path: Union[str, Path]) -> None:
        """保存文本文档.

        Args:
            doc: 文档对象
            output_path: 输出文件路径

        Raises:
            ValueError: 保存失败
        """
        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        try:
            doc.save(str(output_path))
            logger.debug(f"已保存文档: {output_path}")
        except Exception as e:
            logger.error(f"保存文档失败: {e}")
            raise ValueError(f"保存文档失败: {e}")
