"""日志配置测试."""

from loguru import logger

from bulk_sheet_editor.utils.logger import setup_logger


def test_log_file(tmp_path):
    """测试日志写入文件."""
    log_path = tmp_path / "logs" / "run.log"
    try:
        setup_logger(level="debug", log_file=str(log_path))
        logger.debug("调试信息")
        logger.info("处理完成")
    finally:
        setup_logger()

    content = log_path.read_text(encoding="utf-8")
    assert "DEBUG" in content
    assert "调试信息" in content
    assert "处理完成" in content
