import os
from appdirs import user_log_dir
import logging
from logging.handlers import RotatingFileHandler
from logging import StreamHandler

APP_NAME = "annoview"

LOG_DIR = user_log_dir(APP_NAME)
LOG_FILE = os.path.join(LOG_DIR, "annoview.log")
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logger(level: int = logging.INFO, log_file: str = LOG_FILE) -> None:
    """Set up logging to a rotating file in the user log dir and to the console."""

    os.makedirs(os.path.dirname(log_file), exist_ok=True)

    logger = logging.getLogger()
    logger.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT)

    # File handler
    file_handler = RotatingFileHandler(log_file, maxBytes=5 * 1024 * 1024, backupCount=3)
    file_handler.setLevel(level)
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)

    # Console handler
    stream_handler = StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
