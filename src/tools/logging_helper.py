# src/tools/logging_helper.py
import os
import logging

LOGS_DIR = os.getenv("TUTOR_LOGS_DIR", "logs")
LOG_FORMAT = "%(asctime)s %(levelname)s %(message)s"


def get_file_logger(name: str, filename: str, level: int = logging.INFO) -> logging.Logger:
    """
    Return a named logger writing to LOGS_DIR/filename.

    The handler is attached only once, so Streamlit reruns (which re-import
    modules) do not stack duplicate handlers. Propagation is disabled to keep
    each log file separate from the root handlers.
    """
    logger = logging.getLogger(name)
    logger.propagate = False
    if not logger.handlers:
        logger.setLevel(level)
        try:
            os.makedirs(LOGS_DIR, exist_ok=True)
            fh = logging.FileHandler(os.path.join(LOGS_DIR, filename), encoding="utf-8")
            fh.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(fh)
        except OSError:
            # read-only filesystem: fall back to stderr
            sh = logging.StreamHandler()
            sh.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(sh)
    return logger
