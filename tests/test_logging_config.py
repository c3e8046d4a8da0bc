import logging

from smartkollect.logging_config import ColoredFormatter, setup_logging


def test_setup_logging_installs_one_handler():
    setup_logging("debug", use_colors=False)
    root = logging.getLogger()
    stream_handlers = [h for h in root.handlers if type(h) is logging.StreamHandler]
    assert len(stream_handlers) == 1
    assert root.level == logging.DEBUG
    setup_logging("INFO", use_colors=False)


def test_colored_formatter_leaves_record_untouched():
    record = logging.LogRecord("smartkollect", logging.WARNING, __file__, 1, "hello", None, None)
    output = ColoredFormatter("%(levelname)s %(message)s").format(record)
    assert "\033[33mWARNING\033[0m hello" == output
    assert record.levelname == "WARNING"
