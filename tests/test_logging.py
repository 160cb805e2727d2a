import logging

from multi_image.foundation.logging_utils import setup_operational_logger


def test_operational_log_file_captures_kernel_debug_messages(tmp_path):
    kernel_logger = logging.getLogger("sharekit")
    saved = (list(kernel_logger.handlers), kernel_logger.level, kernel_logger.propagate)
    try:
        logger, log_file = setup_operational_logger("run1", level="WARNING", log_dir=str(tmp_path / "logs"))
        logging.getLogger("sharekit.registry").debug("Shared property \u2192 %s", "child.X")
        for handler in logger.handlers:
            handler.flush()

        with open(log_file, "r", encoding="utf-8") as file:
            content = file.read()

        assert "Operational logging initialized for run run1" in content
        assert "Shared property \u2192 child.X" in content
        assert " | DEBUG | " in content
    finally:
        for handler in logging.getLogger("multi_image.run1").handlers:
            handler.close()
        kernel_logger.handlers, kernel_logger.level, kernel_logger.propagate = saved


def test_operational_logger_without_log_dir_has_no_file(tmp_path):
    kernel_logger = logging.getLogger("sharekit")
    saved = (list(kernel_logger.handlers), kernel_logger.level, kernel_logger.propagate)
    try:
        logger, log_file = setup_operational_logger("run2")
        assert log_file is None
        assert [type(handler) for handler in logger.handlers] == [logging.StreamHandler]
        assert logger.propagate is False
    finally:
        kernel_logger.handlers, kernel_logger.level, kernel_logger.propagate = saved
