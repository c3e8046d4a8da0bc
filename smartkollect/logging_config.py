import logging
import sys


class ColoredFormatter(logging.Formatter):
    """Adds ANSI colours to the level name on interactive consoles"""

    COLORS = {
        'DEBUG': '\033[36m',
        'INFO': '\033[32m',
        'WARNING': '\033[33m',
        'ERROR': '\033[31m',
        'CRITICAL': '\033[35m',
        'RESET': '\033[0m'
    }

    def format(self, record):
        color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.COLORS['RESET']}"
        return super().format(record)


def setup_logging(log_level: str = "INFO", use_colors: bool = None) -> None:
    """Configure the root logger with a single console handler"""
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.handlers.clear()

    if use_colors is None:
        use_colors = sys.stdout.isatty()

    fmt = '%(asctime)s | %(levelname)s | %(name)s | %(message)s'
    formatter_cls = ColoredFormatter if use_colors else logging.Formatter
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter_cls(fmt, datefmt='%Y-%m-%d %H:%M:%S'))
    root_logger.addHandler(handler)

    # SQL statements are only interesting when SQL_ECHO is on
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)
