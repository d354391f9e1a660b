"""Logging setup: every record goes to stdout and to an append-only file."""
import logging
import sys


DEFAULT_LOG_FILE = "batch.log"
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'


def configure_logging(log_file: str, level: int = logging.INFO) -> None:
    """Send log records to stdout and append them to `log_file`.

    Args:
        log_file: Path of the log file (created if missing)
        level: Root logging level
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, mode="a", encoding="utf-8"),
        ],
        force=True
    )
